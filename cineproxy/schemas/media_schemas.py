from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

MediaType = Literal['movie', 'tv']
ProxyEndpoint = Literal[
    'popular', 'search', 'details', 'credits', 'recommendations', 'providers'
]
Subresource = Literal['credits', 'recommendations', 'providers']


class ProxyParams(BaseModel):
    type: MediaType = 'movie'
    query: Optional[str] = None
    endpoint: Optional[ProxyEndpoint] = None
    id: Optional[int] = None
    movie_id: Optional[int] = None

    @property
    def item_id(self) -> Optional[int]:
        return self.id if self.id is not None else self.movie_id


class ErrorResponse(BaseModel):
    error: str


class Genre(BaseModel):
    id: Optional[int] = None
    name: str


class MediaItem(BaseModel):
    """
    A movie or series as returned by TMDB. Movies carry ``title``,
    ``release_date`` and a scalar ``runtime``; series carry ``name``,
    ``first_air_date`` and ``episode_run_time``.
    """
    model_config = ConfigDict(extra='ignore')

    id: int
    title: Optional[str] = None
    name: Optional[str] = None
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    vote_average: Optional[float] = None
    release_date: Optional[str] = None
    first_air_date: Optional[str] = None
    runtime: Optional[int] = None
    episode_run_time: List[int] = Field(default_factory=list)
    genres: List[Genre] = Field(default_factory=list)
    budget: Optional[int] = None


class CastMember(BaseModel):
    model_config = ConfigDict(extra='ignore')

    name: str
    character: Optional[str] = None
    profile_path: Optional[str] = None


class Provider(BaseModel):
    model_config = ConfigDict(extra='ignore')

    provider_name: str
    logo_path: Optional[str] = None


class ProviderOffering(BaseModel):
    # rent and buy tiers are dropped by extra='ignore'
    model_config = ConfigDict(extra='ignore')

    flatrate: List[Provider] = Field(default_factory=list)


class Listing(BaseModel):
    media_type: MediaType
    query: str = ''
    title: str
    items: List[MediaItem]


class DetailsView(BaseModel):
    media_type: MediaType
    item: MediaItem
    cast: List[CastMember] = Field(default_factory=list)
    recommendations: List[MediaItem] = Field(default_factory=list)
    providers: Dict[str, ProviderOffering] = Field(default_factory=dict)
