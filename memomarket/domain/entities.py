from pathlib import Path
from typing import Iterable, List, Optional
import json
import logging

from memomarket.core.diagnostics import DropReport
from memomarket.data.installed import InstalledStore
from memomarket.domain.errors import PackImportError
from memomarket.domain.models import Memo, MemoRule, PackListing, RulePack
from memomarket.domain.pack_utils import (
    contains_text,
    export_slug,
    generate_pack_id,
    now_timestamp,
)
from memomarket.services.memochat import export_for_memochat, import_from_memochat_text
from memomarket.storage.db_manager import PackRepository
from memomarket.storage.json_db_manager import JsonPackRepository

logger = logging.getLogger(__name__)

NATIVE_EXPORT_SUFFIX = ".memomarket.json"
MEMOCHAT_EXPORT_SUFFIX = ".json"
DEFAULT_PACK_VERSION = "1.0.0"


def normalize_tags(tags: Iterable[str]) -> List[str]:
    """Trimmed, lower-cased, de-duplicated tags in first-seen order."""
    result: List[str] = []
    for tag in tags:
        t = tag.strip().lower()
        if t and t not in result:
            result.append(t)
    return result


class PackLibrary:
    """
    Stored packs combined with the installed set.

    Holds no state of its own; every method reads the stores again.
    """

    def __init__(self, packs: PackRepository, installed: InstalledStore):
        self.packs = packs
        self.installed = installed

    def list_packs(self, report: Optional[DropReport] = None) -> List[PackListing]:
        installed_ids = set(self.installed.load())
        return [
            PackListing(pack=pack, installed=pack.id in installed_ids)
            for pack in self.packs.list_all(report)
        ]

    def installed_packs(self) -> List[RulePack]:
        """Installed packs in installed-set order; dangling ids are skipped."""
        by_id = {p.id: p for p in self.packs.list_all()}
        result: List[RulePack] = []
        for pack_id in self.installed.load():
            pack = by_id.get(pack_id)
            if pack is None:
                logger.debug(f"Installed id {pack_id} has no stored pack")
                continue
            result.append(pack)
        return result

    def search(self, query: str = "", tag: str = "") -> List[RulePack]:
        query = query.strip()
        results: List[RulePack] = []
        for pack in self.packs.list_all():
            if tag and tag not in pack.tags:
                continue
            if query and not self._pack_matches_query(pack, query):
                continue
            results.append(pack)
        return results

    def all_tags(self) -> List[str]:
        tags = set()
        for pack in self.packs.list_all():
            tags.update(pack.tags)
        return sorted(tags)

    def create_pack(
        self,
        name: str,
        description: str = "",
        author: str = "",
        system_prompt: str = "",
        rules: Optional[List[MemoRule]] = None,
        memos: Optional[List[Memo]] = None,
        tags: Iterable[str] = (),
    ) -> RulePack:
        """Build a new, not yet saved, pack with a fresh id and timestamps."""
        now = now_timestamp()
        return RulePack(
            id=generate_pack_id(),
            name=name,
            description=description,
            author=author,
            version=DEFAULT_PACK_VERSION,
            system_prompt=system_prompt,
            rules=list(rules or []),
            memos=list(memos or []),
            tags=normalize_tags(tags),
            created_at=now,
            updated_at=now,
        )

    def save_pack(self, pack: RulePack, touch: bool = True) -> bool:
        if touch:
            pack = pack.model_copy(update={"updated_at": now_timestamp()})
        return self.packs.put(pack)

    def delete_pack(self, pack_id: str) -> bool:
        """Delete the pack and drop it from the installed set."""
        deleted = self.packs.delete(pack_id)
        ids = self.installed.load()
        if pack_id in ids:
            self.installed.save([i for i in ids if i != pack_id])
        return deleted

    def toggle_installed(self, pack_id: str) -> bool:
        """Flip the pack's installed state and return the new state."""
        ids = self.installed.load()
        if pack_id in ids:
            ids = [i for i in ids if i != pack_id]
            now_installed = False
        else:
            ids.append(pack_id)
            now_installed = True
        self.installed.save(ids)
        return now_installed

    def import_file(self, path: Path, report: Optional[DropReport] = None) -> RulePack:
        """
        Import a pack file in either format and save it.

        MemoChat files (``rules`` and ``systemPrompt``, no ``id``) are named
        after the file. Native packs keep their content but get a new id so
        they never overwrite an existing pack.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PackImportError(f"Failed to read {path.name}: {e}") from e

        try:
            data = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as e:
            raise PackImportError(str(e)) from e
        if not isinstance(data, dict):
            raise PackImportError(f"{path.name} does not contain a JSON object")

        if "rules" in data and "systemPrompt" in data and "id" not in data:
            pack = import_from_memochat_text(text, report)
            stem = path.name[: -len(".json")] if path.name.endswith(".json") else path.name
            pack = pack.model_copy(update={"name": stem.replace("-", " ")})
        elif "id" in data:
            pack = JsonPackRepository.import_(text)
            pack = pack.model_copy(update={"id": generate_pack_id()})
        else:
            raise PackImportError(f"{path.name} is neither a MemoMarket pack nor MemoChat rules")

        if not self.packs.put(pack):
            raise PackImportError(f"Failed to store imported pack {pack.id}")
        return pack

    def export_to_file(self, pack: RulePack, directory: Path, memochat: bool = False) -> Path:
        """Write the pack into ``directory`` and return the file written."""
        if memochat:
            target = Path(directory) / (export_slug(pack.name, "rules") + MEMOCHAT_EXPORT_SUFFIX)
            content = export_for_memochat(pack)
        else:
            target = Path(directory) / (export_slug(pack.name, "pack") + NATIVE_EXPORT_SUFFIX)
            content = JsonPackRepository.export(pack)
        target.write_text(content, encoding="utf-8")
        return target

    def _pack_matches_query(self, pack: RulePack, keyword: str) -> bool:
        candidates = [
            pack.name,
            pack.description,
            pack.author,
            *pack.tags,
        ]
        for value in candidates:
            if contains_text(value, keyword):
                return True
        return False
