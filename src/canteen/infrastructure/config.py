"""Runtime configuration read from the environment.

A ``.env`` file in the working directory is honoured.  Values are read
once by ``load_settings()`` and validated so a bad setting fails at
startup instead of on the first request.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    menu_file: Path
    log_level: str = "WARNING"
    enforce_staff_roles: bool = False

    @property
    def orders_file(self) -> Path:
        return self.data_dir / "orders.json"

    @property
    def staff_file(self) -> Path:
        return self.data_dir / "staff.json"


def _flag(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(f"{key} must be a boolean, got {raw!r}")


def load_settings(env_file: Path | None = None) -> Settings:
    env_path = env_file or Path(".env")
    if env_path.exists():
        load_dotenv(env_path)
        logger.debug("Loaded environment from %s", env_path)

    data_dir = Path(os.getenv("CANTEEN_DATA_DIR") or _PROJECT_ROOT / "data")
    menu_file = Path(os.getenv("CANTEEN_MENU_FILE") or data_dir / "menu.json")

    log_level = (os.getenv("CANTEEN_LOG_LEVEL") or "WARNING").strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigurationError(
            f"CANTEEN_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {log_level!r}"
        )

    return Settings(
        data_dir=data_dir,
        menu_file=menu_file,
        log_level=log_level,
        enforce_staff_roles=_flag("CANTEEN_ENFORCE_STAFF_ROLES", False),
    )
