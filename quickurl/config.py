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
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "QuickURL"
    app_version: str = "0.1.0"

    # Database
    database_url: str = "sqlite:///./quickurl.db"
    db_busy_timeout: float = 5.0  # Seconds a SQLite writer waits for a lock

    # URL record store
    store_backend: str = "sql"  # Options: "sql", "memory"
    default_ttl_seconds: int = 30 * 24 * 3600  # 30 days

    # Short URLs
    base_url: str = "http://127.0.0.1:8000"
    token_length: int = 6
    token_strategy: str = "random"  # Options: "random", "secure"
    max_retries: int = 5  # Token collisions tolerated per create

    # Cache settings
    cache_backend: str = "memory"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # Upper bound in seconds, never past expires_at

    # Expiry sweeper (0 disables the in-process sweeper)
    sweep_interval_seconds: int = 0

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
