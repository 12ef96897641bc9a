import logging
from typing import Any, Optional
import httpx
import uvicorn
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .config import settings
from .errors import InvalidProxyRequest
from .schemas.media_schemas import ErrorResponse, MediaType, ProxyParams, Subresource
from .utils.utils_tmdb import (
    DETAIL_APPENDS,
    ID_BUILDERS,
    UpstreamRequest,
    details,
    fetch_upstream,
    popular,
    resolve_request,
    search,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s  %(message)s"
)
logger = logging.getLogger(__name__)

UPSTREAM_ERROR_MESSAGE = 'Failed to fetch data from TMDB.'
INTERNAL_ERROR_MESSAGE = 'Internal server error.'

ERROR_RESPONSES = {
    400: {'model': ErrorResponse},
    404: {'model': ErrorResponse},
    500: {'model': ErrorResponse},
}

app = FastAPI(title='cineproxy')
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=['GET'],
    allow_headers=['*'],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'error': message})


async def forward(upstream_request: UpstreamRequest) -> Any:
    """
    Forward one request to TMDB and translate the outcome for the client.

    Upstream failures keep their status but lose their body; transport and
    decoding failures become a 500. Neither path ever logs the query string,
    since it carries the API key.

    :param upstream_request: The typed request to send.
    :return: The upstream JSON on success, else a JSONResponse error body.
    """
    try:
        async with httpx.AsyncClient(timeout=settings.UPSTREAM_TIMEOUT) as client:
            resp = await fetch_upstream(client, upstream_request)
            if not resp.is_success:
                logger.error(
                    "TMDB API error %s for %s",
                    resp.status_code, upstream_request.path
                )
                return _error(resp.status_code, UPSTREAM_ERROR_MESSAGE)
            return resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(
            "Proxy failure for %s: %s",
            upstream_request.path, e.__class__.__name__
        )
        return _error(500, INTERNAL_ERROR_MESSAGE)


@app.get('/api/movies', responses=ERROR_RESPONSES)
async def proxy_movies(params: ProxyParams = Depends()):
    try:
        upstream_request = resolve_request(params)
    except InvalidProxyRequest as e:
        return _error(400, str(e))
    return await forward(upstream_request)


@app.get('/api/{media_type}', responses=ERROR_RESPONSES)
async def media_listing(media_type: MediaType, query: Optional[str] = None):
    query = (query or '').strip()
    if query:
        return await forward(search(media_type, query))
    return await forward(popular(media_type))


@app.get('/api/{media_type}/{item_id}', responses=ERROR_RESPONSES)
async def media_details(media_type: MediaType, item_id: int):
    return await forward(details(media_type, item_id, DETAIL_APPENDS))


@app.get('/api/{media_type}/{item_id}/{subresource}', responses=ERROR_RESPONSES)
async def media_subresource(
    media_type: MediaType,
    item_id: int,
    subresource: Subresource
):
    return await forward(ID_BUILDERS[subresource](media_type, item_id))


def run() -> None:
    logger.info("Backend running on http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == '__main__':
    run()
