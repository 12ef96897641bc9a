import asyncio
import logging
from dataclasses import dataclass, field
from typing import MutableMapping, Optional, Protocol, Union
import httpx
from ..client_config import client_settings
from ..clients import proxy_client
from ..errors import EmptyResultError, ProxyClientError
from ..schemas.media_schemas import MediaType
from ..views import render

logger = logging.getLogger(__name__)

THEME_KEY = 'theme'
DEFAULT_THEME = 'light'
THEME_ICONS = {'light': 'fa-sun', 'dark': 'fa-moon'}
CANCEL_KEY = 'Escape'
NO_RESULTS_MESSAGE = 'No titles found for this search.'


class View(Protocol):
    """The surface the controller draws on (a DOM bridge in the browser)."""

    def set_grid(self, html: str) -> None: ...

    def show_status(self, message: str) -> None: ...

    def hide_status(self) -> None: ...

    def set_list_title(self, title: str) -> None: ...

    def open_modal(self, html: str) -> None: ...

    def close_modal(self) -> None: ...

    def apply_theme(self, theme: str, icon: str) -> None: ...


@dataclass
class SearchInput:
    text: str


@dataclass
class LoadListing:
    query: str = ''


@dataclass
class ToggleType:
    media_type: MediaType


@dataclass
class OpenDetails:
    item_id: int
    media_type: Optional[MediaType] = None


@dataclass
class CloseDetails:
    pass


@dataclass
class KeyPressed:
    key: str


@dataclass
class ToggleTheme:
    pass


Intent = Union[
    SearchInput, LoadListing, ToggleType, OpenDetails,
    CloseDetails, KeyPressed, ToggleTheme,
]


@dataclass
class UISession:
    media_type: MediaType = 'movie'
    query: str = ''
    search_text: str = ''
    theme: str = DEFAULT_THEME
    modal_open: bool = False
    debounce_task: Optional[asyncio.Task] = None
    listing_generation: int = 0
    details_generation: int = 0
    storage: MutableMapping[str, str] = field(default_factory=dict)


class UIController:
    """
    Consumes UI intents through a single ``update`` entry point, calling the
    aggregator and pushing rendered markup to the view.

    Listing and detail loads are tagged with a generation number; a result
    that arrives after a newer load has started is dropped.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        view: View,
        session: Optional[UISession] = None,
        debounce_seconds: Optional[float] = None
    ):
        self.client = client
        self.view = view
        self.session = session or UISession()
        self.debounce_seconds = (client_settings.SEARCH_DEBOUNCE
                                 if debounce_seconds is None else debounce_seconds)

    async def start(self) -> None:
        theme = self.session.storage.get(THEME_KEY) or DEFAULT_THEME
        self._apply_theme(theme)
        await self.update(LoadListing(self.session.query))

    async def update(self, intent: Intent) -> None:
        if isinstance(intent, SearchInput):
            self._debounce(intent.text)
        elif isinstance(intent, LoadListing):
            await self._load_listing(intent.query)
        elif isinstance(intent, ToggleType):
            self._cancel_pending_search()
            self.session.media_type = intent.media_type
            await self._load_listing(self.session.search_text)
        elif isinstance(intent, OpenDetails):
            await self._open_details(
                intent.item_id, intent.media_type or self.session.media_type)
        elif isinstance(intent, CloseDetails):
            self._close_details()
        elif isinstance(intent, KeyPressed):
            if intent.key == CANCEL_KEY and self.session.modal_open:
                self._close_details()
        elif isinstance(intent, ToggleTheme):
            theme = 'light' if self.session.theme == 'dark' else 'dark'
            self._apply_theme(theme)
            self.session.storage[THEME_KEY] = theme
        else:
            raise TypeError(f"Unknown intent: {intent!r}")

    def _debounce(self, text: str) -> None:
        self._cancel_pending_search()
        self.session.search_text = text.strip()
        self.session.debounce_task = asyncio.ensure_future(
            self._fire_search(text))

    def _cancel_pending_search(self) -> None:
        # only a task still in its sleep is ever held here
        pending = self.session.debounce_task
        if pending is not None and not pending.done():
            pending.cancel()
        self.session.debounce_task = None

    async def _fire_search(self, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if self.session.debounce_task is asyncio.current_task():
            self.session.debounce_task = None
        # later keystrokes reset the timer but never cancel a load in flight
        await asyncio.shield(self.update(LoadListing(text.strip())))

    async def _load_listing(self, query: str) -> None:
        session = self.session
        session.query = query
        session.search_text = query
        session.listing_generation += 1
        generation = session.listing_generation
        media_type = session.media_type

        self.view.set_grid(render.render_skeletons())
        self.view.hide_status()
        try:
            listing = await proxy_client.load_listing(self.client, media_type, query)
        except EmptyResultError:
            if generation == session.listing_generation:
                self.view.set_grid('')
                self.view.show_status(NO_RESULTS_MESSAGE)
            return
        except ProxyClientError as e:
            logger.warning("Listing load failed: %s", e.message)
            if generation == session.listing_generation:
                self.view.set_grid('')
                self.view.show_status(f'Failed to load titles. {e.message}')
            return

        if generation != session.listing_generation:
            return
        self.view.set_list_title(listing.title)
        self.view.set_grid(render.render_cards(listing.items, media_type))
        self.view.hide_status()

    async def _open_details(self, item_id: int, media_type: MediaType) -> None:
        session = self.session
        session.details_generation += 1
        generation = session.details_generation
        session.modal_open = True

        try:
            details = await proxy_client.load_details(self.client, media_type, item_id)
            html = render.render_details(details)
        except ProxyClientError as e:
            logger.warning("Details load failed for %s %s: %s",
                           media_type, item_id, e.message)
            html = render.render_detail_error(e.message)

        if generation == session.details_generation and session.modal_open:
            self.view.open_modal(html)

    def _close_details(self) -> None:
        self.session.modal_open = False
        # invalidate any detail load still in flight
        self.session.details_generation += 1
        self.view.close_modal()

    def _apply_theme(self, theme: str) -> None:
        self.session.theme = theme
        self.view.apply_theme(theme, THEME_ICONS.get(theme, THEME_ICONS[DEFAULT_THEME]))
