"""
Command surface used by the desktop front end.

Each command takes keyword arguments decoded from the front end's JSON
payload and returns a JSON-compatible value. Import failures are raised as
PackImportError so the caller can show the message.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Union

from memomarket.core import dependencies
from memomarket.domain.models import Config, RulePack
from memomarket.services import memochat


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


logger = logging.getLogger(__name__)

PackPayload = Union[RulePack, Dict[str, Any]]


def _as_pack(pack: PackPayload) -> RulePack:
    if isinstance(pack, RulePack):
        return pack
    return RulePack.model_validate(pack)


def load_config() -> Dict[str, Any]:
    return dependencies.get_config_store().load().model_dump(mode="json")


def save_config(
    api_key: str,
    model_id: str,
    base_url: str,
    reasoning_enabled: bool = False,
    channels_json: str = "",
) -> bool:
    config = Config(
        api_key=api_key,
        model_id=model_id,
        base_url=base_url,
        reasoning_enabled=reasoning_enabled,
        channels_json=channels_json,
    )
    return dependencies.get_config_store().save(config)


def load_packs() -> List[Dict[str, Any]]:
    return [p.model_dump(mode="json") for p in dependencies.get_pack_repository().list_all()]


def save_pack(pack: PackPayload) -> bool:
    return dependencies.get_pack_repository().put(_as_pack(pack))


def delete_pack(id: str) -> bool:
    return dependencies.get_pack_repository().delete(id)


def export_pack(pack: PackPayload) -> str:
    return dependencies.get_pack_repository().export(_as_pack(pack))


def import_pack_json(json: str) -> Dict[str, Any]:
    return dependencies.get_pack_repository().import_(json).model_dump(mode="json")


def load_installed() -> List[str]:
    return dependencies.get_installed_store().load()


def save_installed(ids: List[str]) -> bool:
    return dependencies.get_installed_store().save(ids)


def export_for_memochat(pack: PackPayload) -> str:
    return memochat.export_for_memochat(_as_pack(pack))


def import_from_memochat(json: Optional[str] = None) -> Dict[str, Any]:
    pack = memochat.import_from_memochat(
        dependencies.get_locator(),
        text=json,
        mode=dependencies.get_memochat_import_mode(),
    )
    return pack.model_dump(mode="json")


COMMANDS: Dict[str, Callable[..., Any]] = {
    "load_config": load_config,
    "save_config": save_config,
    "load_packs": load_packs,
    "save_pack": save_pack,
    "delete_pack": delete_pack,
    "export_pack": export_pack,
    "import_pack_json": import_pack_json,
    "load_installed": load_installed,
    "save_installed": save_installed,
    "export_for_memochat": export_for_memochat,
    "import_from_memochat": import_from_memochat,
}


def invoke(name: str, **kwargs: Any) -> Any:
    """Run the named command. Unknown names raise KeyError."""
    try:
        command = COMMANDS[name]
    except KeyError:
        raise KeyError(f"Unknown command: {name}") from None
    logger.debug(f"Invoking command {name}")
    return command(**kwargs)
