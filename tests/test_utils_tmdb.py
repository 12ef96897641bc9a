import pytest

import cineproxy.utils.utils_tmdb as utmdb
from cineproxy.config import settings
from cineproxy.errors import InvalidProxyRequest
from cineproxy.schemas.media_schemas import ProxyParams


# --- typed request builders ---

def test_popular_paths_per_type():
    assert utmdb.popular("movie").path == "/movie/popular"
    assert utmdb.popular("tv").path == "/tv/popular"


def test_search_carries_query():
    req = utmdb.search("tv", "the")
    assert req.path == "/search/tv"
    assert req.params == {"query": "the"}


def test_id_builders_paths():
    assert utmdb.details("movie", 550).path == "/movie/550"
    assert utmdb.credits("tv", 1399).path == "/tv/1399/credits"
    assert utmdb.recommendations("movie", 550).path == "/movie/550/recommendations"
    assert utmdb.providers("movie", 550).path == "/movie/550/watch/providers"


def test_details_with_appended_subresources():
    req = utmdb.details("movie", 550, utmdb.DETAIL_APPENDS)
    assert req.params == {
        "append_to_response": "credits,recommendations,watch/providers"}


# --- resolution policy ---

def test_resolve_query_wins_over_endpoint():
    params = ProxyParams(type="movie", query="batman", endpoint="credits", id=1)
    req = utmdb.resolve_request(params)
    assert req.path == "/search/movie"
    assert req.params["query"] == "batman"


def test_resolve_blank_query_falls_through_to_popular():
    req = utmdb.resolve_request(ProxyParams(type="tv", query="   "))
    assert req.path == "/tv/popular"


def test_resolve_endpoint_substitutes_id():
    req = utmdb.resolve_request(
        ProxyParams(type="tv", endpoint="recommendations", id=42))
    assert req.path == "/tv/42/recommendations"


def test_resolve_accepts_legacy_movie_id():
    req = utmdb.resolve_request(ProxyParams(endpoint="details", movie_id=7))
    assert req.path == "/movie/7"


def test_resolve_defaults_to_popular():
    assert utmdb.resolve_request(ProxyParams()).path == "/movie/popular"


def test_resolve_id_endpoint_without_id_is_invalid():
    with pytest.raises(InvalidProxyRequest):
        utmdb.resolve_request(ProxyParams(endpoint="credits"))


def test_resolve_search_without_query_is_invalid():
    with pytest.raises(InvalidProxyRequest):
        utmdb.resolve_request(ProxyParams(endpoint="search"))


# --- credential and locale injection ---

@pytest.mark.asyncio
async def test_fetch_upstream_injects_key_and_language(dummy_client):
    await utmdb.fetch_upstream(dummy_client, utmdb.search("movie", "heat"))
    url, params = dummy_client.calls[0]
    assert url == f"{settings.TMDB_BASE_URL}/search/movie"
    assert params == {
        "query": "heat",
        "api_key": settings.TMDB_API_KEY,
        "language": settings.TMDB_LANGUAGE,
    }


@pytest.mark.asyncio
async def test_fetch_upstream_does_not_mutate_request(dummy_client):
    req = utmdb.popular("movie")
    await utmdb.fetch_upstream(dummy_client, req)
    assert req.params == {}
