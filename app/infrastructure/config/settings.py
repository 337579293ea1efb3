"""Application settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    debug_mode: bool = False
    catalog_repository: str = "csv"  # csv, postgres or in_memory
    catalog_csv_path: str = ""  # Defaults to data/catalog.csv
    database_url: str = ""  # Required when catalog_repository=postgres
    search_backend: str = "in_memory"  # in_memory or elasticsearch
    elasticsearch_url: str = "http://localhost:9200"
    elasticsearch_username: str = ""
    elasticsearch_password: str = ""
    elasticsearch_index: str = "car_listings"
    elasticsearch_timeout_seconds: float = 5.0
    llm_enabled: bool = False
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = 10.0
    llm_call_timeout_seconds: float = 8.0
    redis_url: str = "redis://localhost:6379/0"
    search_cache_enabled: bool = False
    search_cache_ttl_seconds: int = 300
    rate_limit_enabled: bool = False
    rate_limit_per_minute: int = 60
    default_page_size: int = 20
    max_page_size: int = 100
    ai_search_result_limit: int = 20
    autocomplete_default_size: int = 10
    autocomplete_max_size: int = 50

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
    )


settings = Settings()
