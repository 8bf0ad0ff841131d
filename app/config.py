"""
Clicktrail configuration.
All secrets/tunables come from environment variables.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache

from app.core.numeric import AttributionDefaults


class Settings(BaseSettings):
    # --- App ---
    app_name: str = "Clicktrail"
    site_name: str = "Secret Boston"
    debug: bool = False
    base_url: str = "http://localhost:8000"

    # --- Admin (HTTP Basic) ---
    admin_username: str = "admin"
    admin_password: str = "changeme"

    # --- Database ---
    database_url: str = "sqlite+aiosqlite:///./tracker.db"
    auto_create_tables: bool = True

    # --- Attribution assumptions (used when a link has none of its own) ---
    default_conversion_rate: float = 0.008  # 0.8%
    default_average_order_value: float = 45.0

    # --- Click tracking ---
    click_param: str = "sb_click"  # appended to the outgoing redirect URL
    session_cookie_name: str = "sb_session"
    fingerprint_salt: str = ""  # mixed into the daily-rotating ip hash

    # --- Slugs ---
    slug_max_attempts: int = 10  # numeric suffixes tried before a random slug
    slug_create_attempts: int = 3  # inserts tried when racing another writer
    recent_links_limit: int = 20

    model_config = {"env_prefix": "CT_", "env_file": ".env"}

    def attribution_defaults(self) -> AttributionDefaults:
        return AttributionDefaults(
            conversion_rate=self.default_conversion_rate,
            average_order_value=self.default_average_order_value,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
