from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    # --- DB ---
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_NAME: str = "blogcms"
    # full URL wins over the DB_* parts, e.g. sqlite:///blog.db
    DATABASE_URL: Optional[str] = None
    DB_TIMEOUT_SECONDS: float = 3.0
    DB_AUTO_CREATE: bool = True

    # --- tokens ---
    LOGIN_TOKEN_TTL_HOURS: int = 24
    TOKEN_HASH_KEY: str = ""

    # --- http ---
    CORS_ORIGIN_REGEX: str = r"https?://.*"
    STATIC_DIR: str = "static"

    # --- logging ---
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    @property
    def database_url(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "postgresql+psycopg2",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )

    @property
    def token_hash_key(self) -> Optional[bytes]:
        return self.TOKEN_HASH_KEY.encode("utf-8") if self.TOKEN_HASH_KEY else None


settings = Settings()
