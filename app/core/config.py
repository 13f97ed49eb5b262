from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60 * 24, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    debug: bool = Field(False, alias="DEBUG")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # optimistic: count-then-write (legacy behaviour); strict: conditional seat counter update
    capacity_mode: str = Field("optimistic", alias="CAPACITY_MODE")

    superadmin_email: Optional[str] = Field(None, alias="SUPERADMIN_EMAIL")
    superadmin_password: Optional[str] = Field(None, alias="SUPERADMIN_PASSWORD")
    superadmin_name: str = Field("Super Admin", alias="SUPERADMIN_NAME")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
