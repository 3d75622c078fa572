from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


IMAGE_SELECTION_MODES = ("first", "random", "seeded")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = str(raw).strip()
    return v or default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = str(raw).strip().lower()
    if v in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _env_int(name: str, default: int, *, minimum: int = 1, maximum: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    if value < minimum:
        return default
    if maximum is not None and value > maximum:
        return maximum
    return value


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    v = _env_str(name, default)
    if v.lower() in choices:
        return v.lower()
    if v.upper() in choices:
        return v.upper()
    return default


@dataclass(frozen=True)
class Settings:
    """Process-wide settings read from `MIACASA_*` environment variables.

    Malformed values fall back to the defaults instead of failing startup.
    """

    db_path: str
    log_level: str
    log_json: bool
    image_selection: str
    page_size: int
    site_name: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            db_path=_env_str("MIACASA_DB_PATH", "./miacasa.sqlite"),
            log_level=_env_choice("MIACASA_LOG_LEVEL", "INFO", LOG_LEVELS),
            log_json=_env_bool("MIACASA_LOG_JSON", False),
            image_selection=_env_choice(
                "MIACASA_IMAGE_SELECTION", "first", IMAGE_SELECTION_MODES
            ),
            page_size=_env_int("MIACASA_PAGE_SIZE", 12, maximum=100),
            site_name=_env_str("MIACASA_SITE_NAME", "MiaCasa Investments"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def reset_settings_cache() -> None:
    """Test helper to force env re-read."""

    get_settings.cache_clear()
