from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Application
    app_name: str = "Short Link Service"
    app_version: str = "1.0.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 3333
    cors_allowed_origin: str = "http://localhost:3000"

    # Database
    database_url: str = "sqlite:///./shortlinks.db"

    # Short links
    base_url: str = "http://127.0.0.1:3333"
    short_id_length: int = 8
    link_ttl_seconds: int = 60  # Links expire one minute after creation
    max_retries: int = 5
    qr_code_enabled: bool = False

    # Cache settings
    cache_backend: str = "memory"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # Upper bound; entries never outlive their link

    # Geolocation
    geo_api_url: str = "http://ip-api.com/json"
    geo_timeout: float = 3.0
    geo_fallback_ip: str = "177.37.0.1"  # Public address used for loopback clients

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Default settings instance, used when the app factory gets none
settings = Settings()
