import logging
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from memomarket.core.diagnostics import DropReport
from memomarket.data.locations import StorageLocator
from memomarket.domain.errors import PackImportError
from memomarket.domain.models import RulePack
from memomarket.domain.pack_utils import validate_pack_id
from memomarket.storage.db_manager import PackRepository

logger = logging.getLogger(__name__)


class JsonPackRepository(PackRepository):
    """
    Rule packs stored as ``<packs_dir>/<id>.json``, one pack per file.

    Nothing is cached: every call reads the directory again, so the directory
    is the only source of truth. Concurrent writers race; last write wins.
    """

    def __init__(self, locator: StorageLocator):
        self.locator = locator

    @property
    def packs_dir(self) -> Path:
        return self.locator.packs_dir

    def _pack_path(self, pack_id: str) -> Path:
        return self.packs_dir / f"{validate_pack_id(pack_id)}.json"

    def get(self, pack_id: str) -> Optional[RulePack]:
        self.locator.ensure_dirs()
        path = self._pack_path(pack_id)
        if not path.exists():
            return None
        try:
            return RulePack.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"Failed to load pack from {path}: {e}")
            return None

    def put(self, pack: RulePack) -> bool:
        self.locator.ensure_dirs()
        path = self._pack_path(pack.id)
        try:
            path.write_text(self.export(pack), encoding="utf-8")
        except OSError:
            logger.exception(f"Failed to write pack {pack.id} to {path}")
            return False
        return True

    def delete(self, pack_id: str) -> bool:
        self.locator.ensure_dirs()
        path = self._pack_path(pack_id)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError:
            logger.exception(f"Failed to delete pack file {path}")
            return False
        return True

    def list_all(self, report: Optional[DropReport] = None) -> List[RulePack]:
        self.locator.ensure_dirs()
        packs: List[RulePack] = []
        try:
            entries = list(self.packs_dir.iterdir())
        except OSError as e:
            logger.warning(f"Cannot read packs directory {self.packs_dir}: {e}")
            return packs

        for entry in entries:
            if entry.suffix != ".json" or not entry.is_file():
                continue
            try:
                packs.append(RulePack.model_validate_json(entry.read_text(encoding="utf-8")))
            except (OSError, UnicodeDecodeError, ValidationError) as e:
                # Skip malformed packs
                logger.warning(f"Skipping unreadable pack file {entry}: {e}")
                if report is not None:
                    report.record(str(entry), str(e))

        # Plain string order on purpose; ISO 8601 timestamps sort chronologically.
        # sort() is stable, so equal timestamps keep directory order.
        packs.sort(key=lambda p: p.updated_at, reverse=True)
        return packs

    # Pack Store operation names used by the command surface.

    def list(self, report: Optional[DropReport] = None) -> List[RulePack]:
        return self.list_all(report)

    def save(self, pack: RulePack) -> bool:
        return self.put(pack)

    @staticmethod
    def export(pack: RulePack) -> str:
        """Pretty-printed JSON for the pack. No side effects."""
        return pack.model_dump_json(indent=2)

    @staticmethod
    def import_(text: str) -> RulePack:
        """
        Parse pack JSON without storing it. The parser's message is passed on
        unchanged in the raised PackImportError.
        """
        try:
            return RulePack.model_validate_json(text)
        except ValidationError as e:
            raise PackImportError(str(e)) from e
