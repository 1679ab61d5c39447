"""
Configuration management for the admin console.
"""

import logging
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from managers.config.config_models import AppSettings, PagesConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads and caches application settings and page overrides."""

    def __init__(self, backend_root: Optional[Path] = None):
        self._backend_root = backend_root or Path(__file__).parent.parent.parent
        self._app_settings: Optional[AppSettings] = None
        self._pages_config: Optional[PagesConfig] = None

        # Load environment variables from .env file
        dotenv_path = self._backend_root.parent / ".env"
        load_dotenv(dotenv_path=dotenv_path)
        logger.info(f"Loading .env from {dotenv_path.resolve()}")

    def _search_paths(self, file_name: str) -> List[Path]:
        """Generate common search paths for a configuration file."""
        candidates: List[Path] = [
            Path("../config/overrides") / file_name,
            Path("../config/defaults") / file_name,
            Path(file_name),
            Path(f"../{file_name}"),
        ]
        return candidates

    def _load_yaml(self, file_paths: List[Path]) -> Optional[dict]:
        """Return the first YAML mapping found in ``file_paths``."""
        for path in file_paths:
            if not path.exists():
                continue
            logger.info(f"Found YAML config at: {path.absolute()}")
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"YAML parsing error in {path}: {e}")
                continue
            if isinstance(data, dict):
                return data
            logger.error(f"Unexpected data format in config file {path}: {type(data)}")

        logger.info(
            f"YAML config not found in any of these locations: {[str(p) for p in file_paths]}"
        )
        return None

    @property
    def app_settings(self) -> AppSettings:
        """Get application settings (cached)."""
        if self._app_settings is None:
            self._app_settings = AppSettings()
            logger.info("Application settings loaded successfully")
        return self._app_settings

    @property
    def pages_config(self) -> PagesConfig:
        """Get per-page overrides (cached). Missing or invalid files mean no overrides."""
        if self._pages_config is None:
            file_paths = self._search_paths(self.app_settings.pages_config_file)
            data = self._load_yaml(file_paths) or {}
            pages = data.get("pages", data)
            try:
                self._pages_config = PagesConfig(pages=pages or {})
                logger.info(f"Loaded overrides for {len(self._pages_config.pages)} pages")
            except ValidationError as e:
                logger.error(f"Invalid pages configuration: {e}")
                self._pages_config = PagesConfig()
        return self._pages_config


# Global configuration manager instance
config_manager = ConfigManager()
