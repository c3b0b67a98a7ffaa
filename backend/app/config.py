from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    DATABASE_URL: str = "sqlite:///./cosmoport.db"
    LOG_LEVEL: str = "INFO"
    VERSION: str = "0.1.0"
    # Connection pool (ignored for SQLite)
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    # Create tables when the ASGI app starts (the CLI `serve` command always does)
    INIT_DB_ON_STARTUP: bool = False
    # CORS origins (comma-separated string for env var support)
    CORS_ORIGINS: str = "http://localhost:8080"
    # Listing defaults
    DEFAULT_PAGE_SIZE: int = 3
    # Rate limit applied to every route
    RATE_LIMIT: str = "120/minute"
    # Demo data loaded by `cosmoport seed`
    SAMPLE_SHIPS_FILE: str = "config/sample_ships.yaml"


settings = Settings()
