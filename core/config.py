from functools import lru_cache

from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: str = "3306"
    DB_NAME: str = "musicdb"
    DB_POOL_SIZE: int = 10
    # Full SQLAlchemy URL; takes precedence over the DB_* parts when set
    DATABASE_URL: str | None = None

    SESSION_SECRET: str = "dev-secret-change-me"
    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_TTL_HOURS: int = 8
    SESSION_COOKIE_SECURE: bool = False

    BCRYPT_ROUNDS: int = 12

    MEDIA_DIR: str = "uploads"
    MEDIA_URL_PATH: str = "/uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGIN_REGEX: str = ".*"

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings
