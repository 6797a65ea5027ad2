"""Runtime settings read from VENUE_MAP_* environment variables or a .env file."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Hosted PostgREST store (e.g. a Supabase project URL + anon key)
    store_url: str = "http://localhost:54321"
    store_key: str = ""
    venue_table: str = "Venue"
    request_timeout: float = 30.0

    # Bulk loading
    page_size: int = 1000
    max_pages: int = 100

    # Map
    marker_limit: int = 1000
    default_center_lat: float = 51.5074
    default_center_lon: float = -0.1278
    default_span: float = 0.2

    model_config = SettingsConfigDict(env_prefix="VENUE_MAP_", env_file=".env")


settings = Settings()
