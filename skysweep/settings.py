"""
Skysweep Settings Management

File Purpose: Load and validate config.json
Primary Functions/Classes: SettingsManager, load_settings
Inputs and Outputs (I/O): Reads the JSON config file, returns Settings

The config file is a JSON object with the keys handle, password, baseURL and
an optional dayCount (retention window in days, default 30).
"""

import json
import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict

from .exceptions import ConfigError
from .models import DEFAULT_DAY_COUNT, Settings

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"
# Largest window a timedelta can represent
MAX_DAY_COUNT = timedelta.max.days


class SettingsManager:
    """Loads settings from the config file once; they are immutable afterwards."""

    def __init__(self, settings_file: Path = Path(CONFIG_FILENAME)):
        self.settings_file = Path(settings_file)
        self.settings = self._load_settings()

    def _load_settings(self) -> Settings:
        data = self._read_config()

        base_url = data.get("baseURL") or ""
        if not isinstance(base_url, str) or not base_url.strip():
            raise ConfigError(f"baseURL is not set in {self.settings_file.name}")

        day_count = self._parse_day_count(data.get("dayCount"))

        settings = Settings(
            handle=str(data.get("handle") or ""),
            password=str(data.get("password") or ""),
            base_url=base_url.strip().rstrip("/"),
            day_count=day_count,
        )
        logger.debug("Loaded %r from %s", settings, self.settings_file)
        return settings

    def _read_config(self) -> Dict[str, Any]:
        try:
            with open(self.settings_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigError(
                f"Config file not found: {self.settings_file}",
                details="Create a config.json with handle, password and baseURL.",
                original_error=e,
            )
        except UnicodeDecodeError as e:
            raise ConfigError(
                f"Could not read {self.settings_file}",
                details=f"Not valid UTF-8: {e}",
                original_error=e,
            )
        except OSError as e:
            raise ConfigError(
                f"Could not read {self.settings_file}", details=str(e), original_error=e
            )
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Malformed JSON in {self.settings_file}",
                details=str(e),
                original_error=e,
            )

        if not isinstance(data, dict):
            raise ConfigError(f"{self.settings_file} must contain a JSON object")
        return data

    def _parse_day_count(self, raw: Any) -> int:
        # 0 and null mean "unset", same as a missing key
        if raw is None or raw == 0:
            return DEFAULT_DAY_COUNT
        valid = isinstance(raw, int) and not isinstance(raw, bool)
        if not valid or not 0 <= raw <= MAX_DAY_COUNT:
            raise ConfigError(
                f"dayCount must be a whole number of days between 0 and {MAX_DAY_COUNT}",
                details=f"Got {raw!r}",
            )
        return raw


def load_settings(path: Path = Path(CONFIG_FILENAME)) -> Settings:
    """Load settings from the given config file, raising ConfigError on failure."""
    return SettingsManager(path).settings
