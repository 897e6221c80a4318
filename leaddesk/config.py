"""
Application configuration using pydantic-settings.
Values come from the environment (or a local .env file) and are read once at startup.
"""
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

DEFAULT_ADMIN_HTML_PATH = str(Path(__file__).parent / "static" / "admin.html")


class Settings(BaseSettings):
    # Application
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    port: int = 10000
    log_level: str = "INFO"
    git_commit: str = Field(
        "", validation_alias=AliasChoices("git_commit", "RENDER_GIT_COMMIT", "GIT_COMMIT")
    )

    # Request limits
    max_body_bytes: int = 1024 * 1024

    # Storage
    db_path: str = "leads.sqlite"
    database_url: str = ""  # Overrides db_path when set

    # Admin
    admin_token: str = Field(
        "", validation_alias=AliasChoices("admin_token", "ADMIN_TOKEN", "ADMIN_API_KEY")
    )
    admin_html_path: str = DEFAULT_ADMIN_HTML_PATH

    # CORS - comma-separated; "*" allows everything, entries with "*" are patterns
    cors_origins: str = "*"

    # SMTP
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_pass: str = ""
    smtp_timeout_seconds: float = 30.0

    # Mail routing
    mail_to: str = ""  # Owner inbox for new-lead notifications
    mail_from: str = ""  # Falls back to smtp_user
    reply_to: str = ""  # Reply-To on customer confirmations, falls back to sender

    # Branding (customer confirmation)
    brand_name: str = "KC Detailing Studio"
    logo_url: str = ""
    shop_address: str = ""
    shop_phone: str = ""
    shop_email: str = ""
    shop_website: str = ""
    wa_number: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.db_path}"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_port and self.smtp_user and self.smtp_pass)

    @property
    def sender_address(self) -> str:
        return self.mail_from or self.smtp_user


@lru_cache()
def get_settings() -> Settings:
    return Settings()
