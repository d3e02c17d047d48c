from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    app_name: str = "Citizen Complaint Portal"
    env: str = "dev"
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    mongo_uri: str = Field("mongodb://localhost:27017", alias="MONGO_URI")
    mongo_db: str = Field("complaints", alias="MONGO_DB")

    jwt_secret: str = Field("change-me-in-production", alias="JWT_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    # unset -> tokens never expire
    jwt_expire_minutes: Optional[int] = Field(None, alias="JWT_EXPIRE_MINUTES")

    public_base_url: str = Field("http://localhost:5000", alias="PUBLIC_BASE_URL")
    upload_dir: str = Field("uploads", alias="UPLOAD_DIR")
    max_upload_bytes: int = Field(10 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")

    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        alias="CORS_ORIGINS",
    )

    @property
    def base_url(self) -> str:
        return self.public_base_url.strip().rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
