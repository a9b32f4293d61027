# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    # Supabase Postgres connection string (local SQLite when unset)
    DATABASE_URL: str = "sqlite:///./database_baazar.db"

    # Supabase project used for image storage
    SUPABASE_URL: str
    SUPABASE_KEY: str
    STORAGE_BUCKET: str = "images"

    # Deadline in seconds applied to every blob and row call
    UPSTREAM_TIMEOUT: float = 10.0

    # GET /product/category/{id} answers 404 instead of an empty list
    EMPTY_CATEGORY_IS_NOT_FOUND: bool = True

    LOG_LEVEL: str = "INFO"
    FRONTEND_URL: Optional[str] = None

    class Config:
        env_file: ClassVar[str] = str(env_path)

    @property
    def storage_public_base(self) -> str:
        return f"{self.SUPABASE_URL.rstrip('/')}/storage/v1/object/public"

settings = Settings()

def get_settings() -> Settings:
    return settings
