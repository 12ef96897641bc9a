import asyncio
import logging
from typing import Any, Dict, Optional
import httpx
from pydantic import ValidationError
from ..client_config import client_settings
from ..errors import EmptyResultError, NetworkError, RequestTimeoutError, UpstreamError
from ..schemas.media_schemas import (
    CastMember,
    DetailsView,
    Listing,
    MediaItem,
    MediaType,
    ProviderOffering,
)

logger = logging.getLogger(__name__)

PROXY_PATH = '/api/movies'
DETAIL_ENDPOINTS = ('details', 'credits', 'recommendations', 'providers')
INVALID_RESPONSE_MESSAGE = 'Invalid response from the server.'


def make_client(base_url: Optional[str] = None) -> httpx.AsyncClient:
    """
    Create the HTTP client used to talk to the proxy. Deadlines are enforced
    per call by ``fetch_proxy``, so the client itself has no timeout.
    """
    return httpx.AsyncClient(
        base_url=base_url or client_settings.PROXY_URL, timeout=None
    )


async def fetch_proxy(
    client: httpx.AsyncClient,
    endpoint: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None
) -> dict:
    """
    Issue one call to the proxy and return its JSON body.

    The call is cancelled once ``timeout`` seconds (default 10) have passed.
    The credential never appears here: the proxy injects it.

    :param client: HTTP client bound to the proxy base URL.
    :param endpoint: Proxy endpoint name ('popular', 'details', ...).
    :param params: Extra query parameters (type, id, query).
    :param timeout: Deadline in seconds.
    :return: Decoded JSON payload.
    :raises RequestTimeoutError: if the deadline expires.
    :raises UpstreamError: if the proxy answers with a non-success status.
    :raises NetworkError: on transport failure or an unreadable body.
    """
    query = {'endpoint': endpoint}
    query.update({k: v for k, v in (params or {}).items() if v is not None})
    deadline = client_settings.REQUEST_TIMEOUT if timeout is None else timeout

    try:
        resp = await asyncio.wait_for(
            client.get(PROXY_PATH, params=query), timeout=deadline
        )
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        raise RequestTimeoutError('The request exceeded the time limit.') from e
    except httpx.HTTPError as e:
        logger.error("fetch_proxy failed for %s: %s", endpoint, e)
        raise NetworkError(f'Could not reach the server. {e}') from e

    if not resp.is_success:
        try:
            message = resp.json().get('error') or 'Request failed.'
        except ValueError:
            message = 'Request failed.'
        raise UpstreamError(resp.status_code, message)

    try:
        return resp.json()
    except ValueError as e:
        raise NetworkError(INVALID_RESPONSE_MESSAGE) from e


async def load_listing(
    client: httpx.AsyncClient,
    media_type: MediaType,
    query: str = ''
) -> Listing:
    """
    Load the popular listing, or search results when ``query`` is non-blank.

    :param client: HTTP client bound to the proxy base URL.
    :param media_type: 'movie' or 'tv'.
    :param query: Free text typed by the user.
    :return: Listing with the parsed items and a heading.
    :raises EmptyResultError: if the listing has no items.
    """
    query = query.strip()
    if query:
        data = await fetch_proxy(
            client, 'search', {'type': media_type, 'query': query})
        title = f'Search results for: "{query}"'
    else:
        data = await fetch_proxy(client, 'popular', {'type': media_type})
        title = ('Popular Movies Right Now' if media_type == 'movie'
                 else 'Popular Series Right Now')

    results = data.get('results') or []
    if not results:
        raise EmptyResultError(media_type, query)
    try:
        items = [MediaItem.model_validate(r) for r in results]
    except ValidationError as e:
        raise NetworkError(INVALID_RESPONSE_MESSAGE) from e
    return Listing(media_type=media_type, query=query, title=title, items=items)


async def load_details(
    client: httpx.AsyncClient,
    media_type: MediaType,
    item_id: int
) -> DetailsView:
    """
    Fetch details, credits, recommendations and watch providers in parallel
    and merge them. The join fails fast: the first failure is raised without
    waiting for the other calls to settle, and nothing from the calls that
    did succeed is used. A body that does not parse counts as a failure.

    :param client: HTTP client bound to the proxy base URL.
    :param media_type: 'movie' or 'tv'.
    :param item_id: TMDB identifier.
    :return: The merged DetailsView.
    """
    item_data, credits_data, recs_data, providers_data = await asyncio.gather(*[
        fetch_proxy(client, ep, {'type': media_type, 'id': item_id})
        for ep in DETAIL_ENDPOINTS
    ])

    try:
        return DetailsView(
            media_type=media_type,
            item=MediaItem.model_validate(item_data),
            cast=[CastMember.model_validate(c)
                  for c in credits_data.get('cast') or []],
            recommendations=[MediaItem.model_validate(r)
                             for r in recs_data.get('results') or []],
            providers={
                region: ProviderOffering.model_validate(offer)
                for region, offer in (providers_data.get('results') or {}).items()
            }
        )
    except ValidationError as e:
        raise NetworkError(INVALID_RESPONSE_MESSAGE) from e
