from __future__ import annotations

import logging
from typing import List, Sequence

from pydantic import TypeAdapter, ValidationError

from memomarket.data.locations import StorageLocator

logger = logging.getLogger(__name__)


_ID_LIST = TypeAdapter(List[str])


class InstalledStore:
    """
    Persists the ordered list of installed pack ids in ``installed.json``.

    The list is stored and returned verbatim; membership and order are decided
    by the caller.
    """

    def __init__(self, locator: StorageLocator):
        self.locator = locator

    def load(self) -> List[str]:
        self.locator.ensure_dirs()
        path = self.locator.installed_path
        if not path.exists():
            return []

        try:
            return _ID_LIST.validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable installed list {path}: {e}")
            return []

    def save(self, ids: Sequence[str]) -> bool:
        self.locator.ensure_dirs()
        path = self.locator.installed_path
        try:
            path.write_bytes(_ID_LIST.dump_json(list(ids), indent=2))
        except OSError:
            logger.exception(f"Failed to write installed list to {path}")
            return False
        return True
