from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    # Coordinators stay logged in for a working day
    access_token_expire_minutes: int = Field(1440, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Outbound mail; notifications are skipped when smtp_host is not set
    smtp_host: Optional[str] = Field(None, alias="SMTP_HOST")
    smtp_port: int = Field(587, alias="SMTP_PORT")
    smtp_username: Optional[str] = Field(None, alias="SMTP_USERNAME")
    smtp_password: Optional[str] = Field(None, alias="SMTP_PASSWORD")
    smtp_use_tls: bool = Field(True, alias="SMTP_USE_TLS")
    smtp_from: str = Field("noreply@curtin.edu.au", alias="SMTP_FROM")

    # Seconds before a pooled connection is discarded; SQL echo for local debugging
    db_pool_recycle: int = Field(300, alias="DB_POOL_RECYCLE")
    db_echo: bool = Field(False, alias="DB_ECHO")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    cors_origins: str = Field("*", alias="CORS_ORIGINS")

    admin_staff_id: Optional[str] = Field(None, alias="ADMIN_STAFF_ID")
    admin_email: Optional[str] = Field(None, alias="ADMIN_EMAIL")
    admin_password: Optional[str] = Field(None, alias="ADMIN_PASSWORD")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origin_list(self) -> list:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
