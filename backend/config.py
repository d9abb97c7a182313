# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

# Default fixture file shipped next to the backend sources
default_seed_file = Path(__file__).parent / "data_source" / "seed.json"

class Settings(BaseSettings):
    # Full connection string; takes precedence over the DB_* parts below
    DATABASE_URL: Optional[str] = None

    # Container startup defaults
    DB_HOST: str = "localhost"
    DB_PORT: int = 5000
    DB_NAME: str = "myapp"
    DB_USER: str = "appuser"
    DB_PASSWORD: str = ""

    SQL_ECHO: bool = False
    SEED_FILE: str = str(default_seed_file)

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

    @property
    def database_url(self) -> str:
        url = self.DATABASE_URL
        if not url:
            # No password means peer/trust auth or a .pgpass entry
            credentials = f"{self.DB_USER}:{self.DB_PASSWORD}" if self.DB_PASSWORD else self.DB_USER
            url = f"postgresql://{credentials}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        # SQLAlchemy only accepts the postgresql:// scheme
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

settings = Settings()
