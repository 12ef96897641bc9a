from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple
import httpx
from ..config import settings
from ..errors import InvalidProxyRequest
from ..schemas.media_schemas import MediaType, ProxyParams

DETAIL_APPENDS = ('credits', 'recommendations', 'watch/providers')


@dataclass(frozen=True)
class UpstreamRequest:
    """
    A single read-only TMDB call: a path relative to the API root plus the
    caller's query parameters. Credentials and locale are added by
    ``fetch_upstream`` and never live on the request itself.
    """
    path: str
    params: Dict[str, str] = field(default_factory=dict)


def popular(media_type: MediaType) -> UpstreamRequest:
    return UpstreamRequest(f"/{media_type}/popular")


def search(media_type: MediaType, query: str) -> UpstreamRequest:
    return UpstreamRequest(f"/search/{media_type}", {'query': query})


def details(
    media_type: MediaType,
    item_id: int,
    append: Tuple[str, ...] = ()
) -> UpstreamRequest:
    """
    Build a detail lookup, optionally asking TMDB to append subresources to
    the same response.

    :param media_type: 'movie' or 'tv'.
    :param item_id: TMDB identifier.
    :param append: Subresource names for ``append_to_response``.
    :return: The detail request.
    """
    params = {'append_to_response': ','.join(append)} if append else {}
    return UpstreamRequest(f"/{media_type}/{item_id}", params)


def credits(media_type: MediaType, item_id: int) -> UpstreamRequest:
    return UpstreamRequest(f"/{media_type}/{item_id}/credits")


def recommendations(media_type: MediaType, item_id: int) -> UpstreamRequest:
    return UpstreamRequest(f"/{media_type}/{item_id}/recommendations")


def providers(media_type: MediaType, item_id: int) -> UpstreamRequest:
    return UpstreamRequest(f"/{media_type}/{item_id}/watch/providers")


ID_BUILDERS: Dict[str, Callable[[MediaType, int], UpstreamRequest]] = {
    'details': details,
    'credits': credits,
    'recommendations': recommendations,
    'providers': providers,
}


def resolve_request(params: ProxyParams) -> UpstreamRequest:
    """
    Map proxy query parameters to an upstream request.

    A non-blank query always wins and routes to search. Otherwise a named
    endpoint is built with the supplied id, and with neither the type's
    popular listing is used.

    :param params: ProxyParams parsed from the incoming request.
    :return: The UpstreamRequest to forward.
    :raises InvalidProxyRequest: if an id-bearing endpoint has no id, or
        search is requested with a blank query.
    """
    query = (params.query or '').strip()
    if query:
        return search(params.type, query)
    if params.endpoint == 'search':
        raise InvalidProxyRequest("Endpoint 'search' requires a query.")
    if params.endpoint and params.endpoint != 'popular':
        item_id: Optional[int] = params.item_id
        if item_id is None:
            raise InvalidProxyRequest(
                f"Endpoint '{params.endpoint}' requires an id.")
        return ID_BUILDERS[params.endpoint](params.type, item_id)
    return popular(params.type)


async def fetch_upstream(
    client: httpx.AsyncClient,
    request: UpstreamRequest
) -> httpx.Response:
    """
    Send a request to TMDB with the API key and response locale injected.
    The response is returned as-is; status handling belongs to the caller.

    :param client: HTTP client for making API requests.
    :param request: The UpstreamRequest to send.
    :return: The raw httpx response.
    """
    query = dict(request.params)
    query.update({
        'api_key': settings.TMDB_API_KEY,
        'language': settings.TMDB_LANGUAGE,
    })
    return await client.get(f"{settings.TMDB_BASE_URL}{request.path}", params=query)
