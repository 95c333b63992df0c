from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./videotube.db"

    # JWT
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24  # 1 day
    refresh_token_expire_minutes: int = 60 * 24 * 10  # 10 days

    # Frontend origin for CORS
    cors_origin: str = "http://localhost:3000"

    # Media store: absolute path for uploaded files (empty = backend/uploads/media)
    media_root: str = ""
    # URL prefix the media store is served under
    media_url_prefix: str = "/media"
    # Incoming multipart files land here before the media store takes them (empty = backend/uploads/tmp)
    temp_upload_dir: str = ""
    ffprobe_timeout_seconds: int = 60

    # List endpoints
    default_page_limit: int = 10
    max_page_limit: int = 100

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
