from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from dotenv import load_dotenv

# Load .env file into os.environ BEFORE pydantic reads it so scripts, alembic
# and the API all see the same values.
load_dotenv()


class Settings(BaseSettings):
    # Database
    DATABASE_URL: Optional[str] = None

    # API server
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"

    # File storage (documents)
    STORAGE_ROOT: str = "./storage/documents"
    STORAGE_BASE_URL: str = "http://127.0.0.1:8000/files"
    STORAGE_SIGNING_KEY: str = "change-me"
    SIGNED_URL_TTL_SECONDS: int = 3600  # 1 hour, same as the old bucket links
    MAX_UPLOAD_BYTES: int = 25 * 1024 * 1024  # 25MB

    # Invitations
    INVITATION_TTL_DAYS: int = 7

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",  # ignore unknown env vars instead of raising errors
    )


settings = Settings()
