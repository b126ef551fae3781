from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from memomarket.domain.errors import ConfigRootError

logger = logging.getLogger(__name__)


CONFIG_ROOT_ENV_VAR = "MEMOMARKET_CONFIG_DIR"

APP_IDENTIFIER = "com.memomarket.app"
COMPANION_APP_IDENTIFIER = "com.memochat.app"
COMPANION_PACK_FILENAME = "memo-pack.json"


def _platform_config_dir() -> Optional[Path]:
    """
    The user-level config directory the desktop shell would use, or None when
    the environment does not provide one.
    """
    if sys.platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else None

    try:
        home = Path.home()
    except (KeyError, RuntimeError):
        home = None

    if sys.platform == "darwin":
        return home / "Library" / "Application Support" if home else None

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return home / ".config" if home else None


def resolve_config_root() -> Path:
    """
    Determine the application's configuration root.

    Priority:
    1. Environment variable MEMOMARKET_CONFIG_DIR
    2. '<platform config dir>/com.memomarket.app'

    Raises ConfigRootError when neither is available.
    """
    env_path = os.environ.get(CONFIG_ROOT_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    base = _platform_config_dir()
    if base is None:
        raise ConfigRootError(
            "Unable to determine the configuration directory; "
            f"set {CONFIG_ROOT_ENV_VAR} to choose one."
        )
    return base / APP_IDENTIFIER


class StorageLocator:
    """Resolves every on-disk location used by the stores."""

    def __init__(self, config_root: Path):
        self.config_root = Path(config_root)

    @property
    def config_path(self) -> Path:
        return self.config_root / "config.json"

    @property
    def packs_dir(self) -> Path:
        return self.config_root / "packs"

    @property
    def installed_path(self) -> Path:
        return self.config_root / "installed.json"

    @property
    def companion_pack_path(self) -> Path:
        """MemoChat's export file, in the sibling config directory."""
        return self.config_root.parent / COMPANION_APP_IDENTIFIER / COMPANION_PACK_FILENAME

    def ensure_dirs(self) -> None:
        """
        Create the root and packs directories if needed. Failures are only
        logged; the read or write that follows reports them.
        """
        try:
            self.packs_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create {self.packs_dir}: {e}")

    def __repr__(self) -> str:
        return f"StorageLocator({str(self.config_root)!r})"
