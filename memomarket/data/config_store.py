"""
Storage for the single application config record.

The record lives in ``<config_root>/config.json``. Loading never fails: a
missing, unreadable or invalid file yields ``Config.empty()``. Saving always
replaces the whole file.
"""
from __future__ import annotations

import logging

from pydantic import ValidationError

from memomarket.data.locations import StorageLocator
from memomarket.domain.models import Config

logger = logging.getLogger(__name__)


class ConfigStore:
    def __init__(self, locator: StorageLocator):
        self.locator = locator

    def load(self) -> Config:
        self.locator.ensure_dirs()
        path = self.locator.config_path
        if not path.exists():
            return Config.empty()

        try:
            return Config.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable config {path}: {e}")
            return Config.empty()

    def save(self, config: Config) -> bool:
        self.locator.ensure_dirs()
        path = self.locator.config_path
        try:
            path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
        except OSError:
            logger.exception(f"Failed to write config to {path}")
            return False
        return True
