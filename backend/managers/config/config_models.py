"""Pydantic models for configuration."""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class PageOverride(BaseModel):
    """Per-page overrides read from the pages config file."""

    page_size: Optional[int] = Field(default=None, ge=1)
    sort_by: Optional[str] = None
    sort_order: Optional[Literal["asc", "desc"]] = None


class PagesConfig(BaseModel):
    """Overrides for every configured page, keyed by page name."""

    pages: Dict[str, PageOverride] = Field(default_factory=dict)

    def overrides_for(self, page_name: str) -> Dict[str, object]:
        override = self.pages.get(page_name)
        return override.model_dump(exclude_none=True) if override else {}


class AppSettings(BaseSettings):
    """Main application settings loaded from environment variables."""

    app_name: str = "Guinness Rewards Admin"
    port: int = 8000
    debug_mode: bool = False
    log_level: str = "INFO"
    environment: str = "production"
    app_log_dir: str = ""

    # Rewards backend
    api_base_url: str = Field(
        default="http://localhost:5000/api", validation_alias="API_BASE_URL"
    )
    request_timeout: float = Field(default=30.0, gt=0, validation_alias="REQUEST_TIMEOUT")

    # List pages
    search_debounce_ms: int = Field(default=400, ge=0, validation_alias="SEARCH_DEBOUNCE_MS")
    default_page_size: int = Field(default=15, ge=1, validation_alias="DEFAULT_PAGE_SIZE")
    pages_config_file: str = Field(default="pages.yml", validation_alias="PAGES_CONFIG_FILE")

    model_config = {
        "env_file": "../.env",
        "env_file_encoding": "utf-8",
        "extra": "allow",
        "env_prefix": "",
    }

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000.0


__all__ = [
    "AppSettings",
    "PageOverride",
    "PagesConfig",
]
