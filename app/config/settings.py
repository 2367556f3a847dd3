# app/config/settings.py
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # App Info
    app_name: str = "Inventory Sales API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./inventory.db"
    auto_create_tables: bool = True

    # Security
    secret_key: str = "change-in-production"
    refresh_secret_key: str = "change-refresh-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7
    cookie_secure: bool = False

    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]

    # Sales
    restore_stock_on_sale_delete: bool = False

    # Mail (SMTP)
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    smtp_timeout: int = 30
    mail_from: Optional[str] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def mail_enabled(self) -> bool:
        """SMTP is usable only when a host is configured"""
        return bool(self.smtp_host)

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = 'ignore'


settings = Settings()
