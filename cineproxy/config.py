from typing import List
from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    TMDB_API_KEY: str
    TMDB_BASE_URL: str = 'https://api.themoviedb.org/3'
    TMDB_LANGUAGE: str = 'pt-BR'
    HOST: str = '0.0.0.0'
    PORT: int = 3000
    CORS_ORIGINS: List[str] = ['*']
    UPSTREAM_TIMEOUT: float = 10.0
    LOG_LEVEL: str = 'INFO'

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore"
    )


settings = Settings()
