"""
Process-wide settings using Pydantic Settings.
Reads from environment variables (and .env).

These values act as the single fixed tenant used whenever a request does
not carry its own Odoo headers.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEOUT_MS = 60000


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    # Odoo fallback tenant
    odoo_url: str = Field(default="", alias="ODOO_URL")
    odoo_db: str = Field(default="", alias="ODOO_DB")
    odoo_user: str = Field(default="", alias="ODOO_USER")
    odoo_pass: str = Field(default="", alias="ODOO_PASS")
    odoo_timeout: str = Field(default=str(DEFAULT_TIMEOUT_MS), alias="ODOO_TIMEOUT")

    # Search index credentials
    algolia_api_key: str = Field(default="", alias="ALGOLIA_API_KEY")
    algolia_app_id: str = Field(default="", alias="ALGOLIA_APP_ID")
    algolia_index_name: str = Field(default="", alias="ALGOLIA_INDEX_NAME")

    laburen_api_key: str = Field(default="", alias="LABUREN_API_KEY")

    # JSON array of tool names, e.g. '["create_sale_order"]'. Empty enables all.
    to_use: str = Field(default="", alias="TO_USE")

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    port: int = Field(default=8080, alias="PORT")


# Global settings instance
settings = Settings()
