"""
Markup for the browsing client.

Every function here is pure: it takes parsed TMDB data and returns an HTML
fragment rendered from the package templates. Nothing touches the network or
any UI state.
"""
from datetime import date
from typing import Dict, Iterable, List, Optional
from jinja2 import Environment, PackageLoader, select_autoescape
from ..client_config import client_settings
from ..schemas.media_schemas import (
    CastMember,
    DetailsView,
    MediaItem,
    MediaType,
    ProviderOffering,
)

IMAGE_BASE_URL = 'https://image.tmdb.org/t/p/'
POSTER_SIZE = 'w500'
BACKDROP_SIZE = 'w1280'
PROFILE_SIZE = 'w185'
LOGO_SIZE = 'w92'

POSTER_PLACEHOLDER = 'placeholder.png'
BANNER_PLACEHOLDER = 'placeholder_banner.png'
PERSON_PLACEHOLDER = 'placeholder_person.png'

NOT_AVAILABLE = 'N/A'
MAX_CAST = 10
MAX_RECOMMENDATIONS = 10

CAST_NOT_FOUND = 'Main cast not found.'
NO_RECOMMENDATIONS = 'No recommendations available.'
NO_PROVIDERS = 'Not available for streaming in this region.'

_env = Environment(
    loader=PackageLoader('cineproxy.views', 'templates'),
    autoescape=select_autoescape(['html']),
    trim_blocks=True,
    lstrip_blocks=True,
)


def image_url(path: Optional[str], size: str, placeholder: str) -> str:
    """Full TMDB image URL for ``path``, or ``placeholder`` when it is missing."""
    return f"{IMAGE_BASE_URL}{size}{path}" if path else placeholder


def format_rating(vote_average: Optional[float]) -> str:
    # TMDB reports 0 for unrated titles
    if not vote_average:
        return NOT_AVAILABLE
    return f"{vote_average:.1f}"


def display_title(item: MediaItem) -> str:
    return item.title or item.name or ''


def display_date(item: MediaItem) -> str:
    """
    Release date for movies, first air date for series, in the pt-BR
    DD/MM/YYYY form. Unparseable values are shown as received.
    """
    raw = item.release_date or item.first_air_date
    if not raw:
        return NOT_AVAILABLE
    try:
        return date.fromisoformat(raw).strftime('%d/%m/%Y')
    except ValueError:
        return raw


def display_runtime(item: MediaItem) -> str:
    if item.runtime:
        return f"{item.runtime} min"
    if item.episode_run_time:
        return f"~{item.episode_run_time[0]} min"
    return NOT_AVAILABLE


def format_budget(budget: Optional[int]) -> str:
    return f"${budget:,}" if budget else NOT_AVAILABLE


def format_genres(item: MediaItem) -> str:
    return ', '.join(g.name for g in item.genres) or NOT_AVAILABLE


def _card_context(item: MediaItem, media_type: MediaType) -> dict:
    return {
        'id': item.id,
        'media_type': media_type,
        'title': display_title(item),
        'overview': item.overview,
        'poster': image_url(item.poster_path, POSTER_SIZE, POSTER_PLACEHOLDER),
        'rating': format_rating(item.vote_average),
        'placeholder': POSTER_PLACEHOLDER,
    }


def render_card(item: Optional[MediaItem] = None, media_type: MediaType = 'movie') -> str:
    """
    Render a listing card, or a loading skeleton when ``item`` is None.

    :param item: MediaItem to show, or None while data is loading.
    :param media_type: Type the card opens in the detail view.
    :return: HTML fragment.
    """
    if item is None:
        return _env.get_template('skeleton_card.html').render()
    return _env.get_template('card.html').render(**_card_context(item, media_type))


def render_skeletons(count: Optional[int] = None) -> str:
    count = client_settings.SKELETON_COUNT if count is None else count
    return ''.join(render_card(None) for _ in range(count))


def render_cards(items: Iterable[MediaItem], media_type: MediaType = 'movie') -> str:
    return ''.join(render_card(item, media_type) for item in items)


def render_cast(cast: Optional[List[CastMember]]) -> str:
    """
    Render the first ten cast members in billing order.

    :param cast: Cast list from the credits call, possibly empty or None.
    :return: HTML fragment, or the "not found" placeholder.
    """
    if not cast:
        return _env.get_template('placeholder.html').render(message=CAST_NOT_FOUND)
    members = [{
        'name': m.name,
        'character': m.character,
        'photo': image_url(m.profile_path, PROFILE_SIZE, PERSON_PLACEHOLDER),
        'placeholder': PERSON_PLACEHOLDER,
    } for m in cast[:MAX_CAST]]
    return _env.get_template('cast.html').render(members=members)


def render_recommendations(
    items: Optional[List[MediaItem]],
    media_type: MediaType = 'movie'
) -> str:
    if not items:
        return _env.get_template('placeholder.html').render(message=NO_RECOMMENDATIONS)
    cards = [_card_context(i, media_type) for i in items[:MAX_RECOMMENDATIONS]]
    return _env.get_template('recommendations.html').render(cards=cards)


def render_providers(
    providers: Optional[Dict[str, ProviderOffering]],
    region: Optional[str] = None
) -> str:
    """
    Render the subscription ("flatrate") services for one region. Rent and
    buy offers are never shown.

    :param providers: Offerings keyed by region code.
    :param region: Region code, defaults to the configured watch region.
    :return: HTML fragment, or the "not available" placeholder.
    """
    region = region or client_settings.WATCH_REGION
    offering = (providers or {}).get(region)
    if offering is None or not offering.flatrate:
        return _env.get_template('placeholder.html').render(message=NO_PROVIDERS)
    logos = [{
        'name': p.provider_name,
        'logo': image_url(p.logo_path, LOGO_SIZE, POSTER_PLACEHOLDER),
    } for p in offering.flatrate]
    return _env.get_template('providers.html').render(logos=logos)


def render_details(view: DetailsView, region: Optional[str] = None) -> str:
    item = view.item
    return _env.get_template('details.html').render(
        title=display_title(item),
        banner=image_url(item.backdrop_path, BACKDROP_SIZE, BANNER_PLACEHOLDER),
        banner_placeholder=BANNER_PLACEHOLDER,
        overview=item.overview,
        rating=format_rating(item.vote_average),
        genres=format_genres(item),
        release_date=display_date(item),
        runtime=display_runtime(item),
        budget=format_budget(item.budget),
        show_budget=view.media_type == 'movie',
        cast_html=render_cast(view.cast),
        providers_html=render_providers(view.providers, region),
        recommendations_html=render_recommendations(
            view.recommendations, view.media_type),
    )


def render_detail_error(message: str) -> str:
    return _env.get_template('detail_error.html').render(message=message)
