"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    service_name: str = "storefront"
    api_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]

    # Hosted backend (REST + auth)
    backend_url: str = "http://localhost:54321"
    backend_anon_key: str = "dev-anon-key-change-in-production"
    backend_timeout: float = 10.0
    oauth_redirect_url: str = "http://localhost:8080/"

    # Contact
    messaging_host: str = "wa.me"
    store_credentials_path: str = "store_credentials.json"
    product_message_template: str = (
        "Olá! Gostaria de saber mais sobre o produto: {name} (SKU: {sku})"
    )
    generic_message_template: str = (
        "Olá! Gostaria de mais informações sobre os produtos."
    )

    # Catalog views
    grid_page_size: int = 8
    featured_page_size: int = 2
    featured_fallback_limit: int = 8

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
