from functools import lru_cache
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import ClassVar

class Settings(BaseSettings):
    PROJECT_NAME: str = "Book Catalogue API"
    API_PREFIX: str = "/api"

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    BOOKS_FILE: Path = Path("data") / "books.json"
    STATIC_DIR: Path = Path("public")
    # Raise instead of falling back to an empty collection on a corrupt file
    STRICT_STORE: bool = False

    CORS_ORIGINS: list[str] = ["*"]

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow",
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
