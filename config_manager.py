"""
Configuration management for the quarterly events calendar.
Handles loading, validating, and providing access to calendar settings.
"""

import os
import json
from datetime import date
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class DataConfig:
    """Where the quarterly CSV files are read from."""
    base_url: str
    data_dir: str
    path_template: str
    request_timeout: float


@dataclass
class CalendarConfig:
    """Calendar view settings."""
    min_date: str
    default_view: str
    max_events_per_day: int
    search_page_size: int


@dataclass
class AppConfig:
    """Application configuration settings."""
    debug: bool


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "calendar_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        self._config = self._get_default_config()

        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        self._override_with_env()
        self._validate()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "data": {
                "base_url": "",
                "data_dir": ".",
                "path_template": "data/events-{key}.csv",
                "request_timeout": 10.0
            },
            "calendar": {
                "min_date": "2021-01-01",
                "default_view": "month",
                "max_events_per_day": 3,
                "search_page_size": 10
            },
            "app": {
                "debug": False
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        if not isinstance(file_config, dict):
            return
        for section, values in file_config.items():
            if section in self._config and isinstance(values, dict):
                self._config[section].update(values)
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # Data source settings
        if os.getenv("CALENDAR_DATA_URL"):
            self._config["data"]["base_url"] = os.getenv("CALENDAR_DATA_URL")

        if os.getenv("CALENDAR_DATA_DIR"):
            self._config["data"]["data_dir"] = os.getenv("CALENDAR_DATA_DIR")

        if os.getenv("CALENDAR_PATH_TEMPLATE"):
            self._config["data"]["path_template"] = os.getenv("CALENDAR_PATH_TEMPLATE")

        if os.getenv("CALENDAR_REQUEST_TIMEOUT"):
            self._config["data"]["request_timeout"] = float(os.getenv("CALENDAR_REQUEST_TIMEOUT"))

        # Calendar settings
        if os.getenv("CALENDAR_MIN_DATE"):
            self._config["calendar"]["min_date"] = os.getenv("CALENDAR_MIN_DATE")

        if os.getenv("CALENDAR_DEFAULT_VIEW"):
            self._config["calendar"]["default_view"] = os.getenv("CALENDAR_DEFAULT_VIEW").lower()

        if os.getenv("CALENDAR_MAX_EVENTS_PER_DAY"):
            self._config["calendar"]["max_events_per_day"] = int(os.getenv("CALENDAR_MAX_EVENTS_PER_DAY"))

        if os.getenv("CALENDAR_PAGE_SIZE"):
            self._config["calendar"]["search_page_size"] = int(os.getenv("CALENDAR_PAGE_SIZE"))

        # App settings
        if os.getenv("CALENDAR_DEBUG"):
            self._config["app"]["debug"] = os.getenv("CALENDAR_DEBUG").lower() == "true"

    def _validate(self) -> None:
        """Reject settings the calendar cannot work with."""
        calendar_config = self._config["calendar"]
        try:
            date.fromisoformat(str(calendar_config["min_date"]))
        except ValueError as exc:
            raise ValueError(f"Invalid calendar.min_date: {calendar_config['min_date']!r}") from exc

        if calendar_config["default_view"] not in ("month", "week"):
            raise ValueError(f"Invalid calendar.default_view: {calendar_config['default_view']!r}")

        if int(calendar_config["search_page_size"]) < 1:
            raise ValueError("calendar.search_page_size must be at least 1")

        if "{key}" not in self._config["data"]["path_template"]:
            raise ValueError("data.path_template must contain '{key}'")

    def get_data_config(self) -> DataConfig:
        """Get data source configuration."""
        data_config = self._config["data"]
        return DataConfig(
            base_url=data_config["base_url"],
            data_dir=data_config["data_dir"],
            path_template=data_config["path_template"],
            request_timeout=float(data_config["request_timeout"])
        )

    def get_calendar_config(self) -> CalendarConfig:
        """Get calendar view configuration."""
        calendar_config = self._config["calendar"]
        return CalendarConfig(
            min_date=calendar_config["min_date"],
            default_view=calendar_config["default_view"],
            max_events_per_day=int(calendar_config["max_events_per_day"]),
            search_page_size=int(calendar_config["search_page_size"])
        )

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        return AppConfig(debug=bool(self._config["app"]["debug"]))

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()


# Global configuration instance
config_manager = ConfigManager()


def get_data_config() -> DataConfig:
    """Get data source configuration."""
    return config_manager.get_data_config()


def get_calendar_config() -> CalendarConfig:
    """Get calendar view configuration."""
    return config_manager.get_calendar_config()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()


def reload_config() -> None:
    """Reload configuration."""
    config_manager.reload()
