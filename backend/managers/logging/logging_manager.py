"""Logging manager for centralized structured logging.

Provides:
- Structured JSON logging to logs/app.jsonl
- Development and production logging configurations
- Central log file management
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    _excluded = {
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename", "module", "lineno",
        "funcName", "created", "msecs", "relativeCreated", "thread", "threadName", "processName",
        "process", "exc_info", "exc_text", "stack_info", "getMessage", "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process_id": os.getpid(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Add extra fields from log record
        for k, v in record.__dict__.items():
            if k not in self._excluded:
                entry[f"extra_{k}"] = v
        return json.dumps(entry, default=str)


class LoggingManager:
    """Manages centralized structured logging for the application."""

    def __init__(self, service_name: str = "rewards-admin-backend", settings=None) -> None:
        self.service_name = service_name
        self._settings = settings
        self.is_development = self._is_development()
        self.log_level = self._get_log_level()
        self.logs_dir = self._get_logs_dir()
        self.log_file = self.logs_dir / "app.jsonl"
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        self._setup_logging()

    def _setting(self, name: str, env_name: str, default: str) -> str:
        if self._settings is not None and getattr(self._settings, name, None) not in (None, ""):
            return str(getattr(self._settings, name))
        return os.getenv(env_name, default)

    def _is_development(self) -> bool:
        """Check if running in development mode."""
        return (
            self._setting("debug_mode", "DEBUG_MODE", "false").lower() == "true"
            or self._setting("environment", "ENVIRONMENT", "production").lower() in {"dev", "development"}
        )

    def _get_log_level(self) -> int:
        """Get log level from settings or environment."""
        level_name = self._setting("log_level", "LOG_LEVEL", "INFO").upper()
        level = getattr(logging, level_name, None)
        return level if isinstance(level, int) else logging.INFO

    def _get_logs_dir(self) -> Path:
        """Get the logs directory path."""
        configured = self._setting("app_log_dir", "APP_LOG_DIR", "")
        if configured:
            return Path(configured)
        # This file: backend/managers/logging/logging_manager.py -> project root is 3 levels up
        project_root = Path(__file__).resolve().parents[3]
        return project_root / "logs"

    def _setup_logging(self) -> None:
        """Configure structured logging to JSON file."""
        root = logging.getLogger()
        # Remove all existing handlers to start fresh
        for h in root.handlers[:]:
            root.removeHandler(h)

        file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        file_handler.setLevel(self.log_level)
        root.addHandler(file_handler)
        root.setLevel(self.log_level)

        self._suppress_noisy_loggers()

        # In development, also add console logging for warnings and above
        if self.is_development:
            console = logging.StreamHandler()
            console.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
            console.setLevel(logging.WARNING)
            root.addHandler(console)

    def _suppress_noisy_loggers(self) -> None:
        """Suppress logs from noisy third-party libraries."""
        for name in ("httpx", "httpcore", "urllib3.connectionpool", "multipart"):
            lg = logging.getLogger(name)
            lg.setLevel(logging.WARNING)

    def get_log_file_path(self) -> Path:
        """Get the path to the main log file."""
        return self.log_file

    def read_logs(self, lines: int = 100, level: Optional[str] = None) -> list[Dict[str, Any]]:
        """Read the most recent log entries, optionally only one level."""
        if not self.log_file.exists():
            return []

        entries: list[Dict[str, Any]] = []
        try:
            with self.log_file.open("r", encoding="utf-8") as f:
                data = f.readlines()[-lines:]
        except OSError as e:
            logging.getLogger(__name__).error(f"Error reading logs: {e}")
            return entries

        for ln in data:
            ln = ln.strip()
            if not ln:
                continue
            try:
                entry = json.loads(ln)
            except json.JSONDecodeError:
                continue
            if level is None or entry.get("level") == level.upper():
                entries.append(entry)
        return entries
