from __future__ import annotations


class MemoMarketError(Exception):
    """Base class for errors raised by the MemoMarket store."""


class ConfigRootError(MemoMarketError):
    """
    The per-application configuration directory could not be determined.

    Every store depends on it, so this is raised at wiring time and is not
    meant to be handled per call.
    """


class InvalidPackIdError(MemoMarketError, ValueError):
    """A pack id is not safe to use as a file name stem."""

    def __init__(self, pack_id: str):
        self.pack_id = pack_id
        super().__init__(f"Invalid pack id: {pack_id!r}")


class PackImportError(MemoMarketError, ValueError):
    """Imported text could not be turned into a RulePack."""


class CompanionNotFoundError(PackImportError):
    """The companion application's export file does not exist."""
