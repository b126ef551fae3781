from abc import ABC, abstractmethod
from typing import List, Optional

from memomarket.core.diagnostics import DropReport
from memomarket.domain.models import RulePack


class PackRepository(ABC):
    """
    Abstract base class for rule pack storage.

    Call sites only see get/put/delete/list, so the one-file-per-pack
    directory can be replaced by an embedded database without touching them.
    """

    @abstractmethod
    def get(self, pack_id: str) -> Optional[RulePack]:
        """Return the stored pack with this id, or None."""
        pass

    @abstractmethod
    def put(self, pack: RulePack) -> bool:
        """Store the pack, replacing any pack with the same id. Returns success."""
        pass

    @abstractmethod
    def delete(self, pack_id: str) -> bool:
        """Remove the pack. Returns False if there was nothing to remove."""
        pass

    @abstractmethod
    def list_all(self, report: Optional[DropReport] = None) -> List[RulePack]:
        """
        Every readable pack, newest ``updated_at`` first.
        Unreadable entries are skipped and recorded on ``report``.
        """
        pass
