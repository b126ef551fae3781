from pathlib import Path
from typing import Optional
import os

from memomarket.data.config_store import ConfigStore
from memomarket.data.installed import InstalledStore
from memomarket.data.locations import StorageLocator, resolve_config_root
from memomarket.domain.entities import PackLibrary
from memomarket.services.memochat import IMPORT_MODE_TEXT, IMPORT_MODES
from memomarket.storage.db_manager import PackRepository
from memomarket.storage.json_db_manager import JsonPackRepository

MEMOCHAT_IMPORT_ENV_VAR = "MEMOMARKET_MEMOCHAT_IMPORT"

_locator: Optional[StorageLocator] = None
_config_store: Optional[ConfigStore] = None
_pack_repository: Optional[PackRepository] = None
_installed_store: Optional[InstalledStore] = None
_library: Optional[PackLibrary] = None


def get_config_root() -> Path:
    return get_locator().config_root


def get_locator() -> StorageLocator:
    global _locator
    if _locator is None:
        _locator = StorageLocator(resolve_config_root())
        _locator.ensure_dirs()
    return _locator


def get_memochat_import_mode() -> str:
    mode = os.environ.get(MEMOCHAT_IMPORT_ENV_VAR, IMPORT_MODE_TEXT).strip().lower()
    if mode not in IMPORT_MODES:
        raise ValueError(
            f"{MEMOCHAT_IMPORT_ENV_VAR} must be one of {', '.join(IMPORT_MODES)}, got {mode!r}"
        )
    return mode


def get_config_store() -> ConfigStore:
    global _config_store
    if _config_store is None:
        _config_store = ConfigStore(get_locator())
    return _config_store


def get_pack_repository() -> PackRepository:
    global _pack_repository
    if _pack_repository is None:
        _pack_repository = JsonPackRepository(get_locator())
    return _pack_repository


def get_installed_store() -> InstalledStore:
    global _installed_store
    if _installed_store is None:
        _installed_store = InstalledStore(get_locator())
    return _installed_store


def get_library() -> PackLibrary:
    global _library
    if _library is None:
        _library = PackLibrary(get_pack_repository(), get_installed_store())
    return _library


def reset() -> None:
    """Forget every wired instance so the next getter re-reads the environment."""
    global _locator, _config_store, _pack_repository, _installed_store, _library
    _locator = None
    _config_store = None
    _pack_repository = None
    _installed_store = None
    _library = None
