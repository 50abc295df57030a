from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"
    APP_NAME: str = "bookstore-catalog"

    DATABASE_URL: str = "sqlite+pysqlite:///./bookstore.db"
    SQL_ECHO: bool = False

    CORS_ORIGINS: str = "http://localhost:4200,http://localhost:3000"

    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # The generated client asks for one row per page unless told otherwise.
    DEFAULT_PAGE_SIZE: int = 1

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
