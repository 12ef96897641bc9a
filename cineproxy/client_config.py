from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class ClientSettings(BaseSettings):
    """
    Settings for the browsing client. Kept apart from the server settings so
    the client never needs (or can read) the TMDB credential.
    """
    PROXY_URL: str = 'http://localhost:3000'
    REQUEST_TIMEOUT: float = 10.0
    WATCH_REGION: str = 'BR'
    SEARCH_DEBOUNCE: float = 0.5
    SKELETON_COUNT: int = 10

    model_config = ConfigDict(
        env_file=".env",
        env_prefix="CINEPROXY_",
        extra="ignore"
    )


client_settings = ClientSettings()
