"""
Translation between rule packs and the MemoChat exchange format.

MemoChat only knows about a system prompt and a list of rules, so exporting
drops every other pack field. Importing synthesizes the missing metadata.

Two import paths exist:

* ``import_from_memochat_text`` parses ``{"systemPrompt", "rules": [{"title",
  "updateRule"}]}`` supplied by the caller. This is the supported contract.
* ``import_from_memochat_file`` reads ``memo-pack.json`` from MemoChat's own
  config directory, which uses a different shape (``rules[].description`` /
  ``rules[].update_rule`` plus ``memos``). It is deprecated and only used when
  a deployment selects the ``file`` import mode.

Both drop array elements that miss a required field instead of failing.
"""
from __future__ import annotations

import json
import logging
import warnings
from typing import Any, List, Optional

from memomarket.core.diagnostics import DropReport
from memomarket.data.locations import StorageLocator
from memomarket.domain.errors import CompanionNotFoundError, PackImportError
from memomarket.domain.models import Memo, MemoChatPack, MemoChatRule, MemoRule, RulePack
from memomarket.domain.pack_utils import generate_imported_id, now_timestamp

logger = logging.getLogger(__name__)


IMPORTED_PACK_NAME = "Imported from MemoChat"
IMPORTED_PACK_VERSION = "1.0.0"
IMPORTED_TAGS = ("imported", "memochat")
FILE_IMPORT_DESCRIPTION = "Current memo pack from MemoChat"

IMPORT_MODE_TEXT = "text"
IMPORT_MODE_FILE = "file"
IMPORT_MODES = (IMPORT_MODE_TEXT, IMPORT_MODE_FILE)


def export_for_memochat(pack: RulePack) -> str:
    """Pretty-printed MemoChat JSON for the pack's system prompt and rules."""
    payload = MemoChatPack(
        system_prompt=pack.system_prompt,
        rules=[MemoChatRule(title=r.title, update_rule=r.update_rule) for r in pack.rules],
    )
    return payload.model_dump_json(by_alias=True, indent=2)


def _synthesize_pack(
    system_prompt: str,
    rules: List[MemoRule],
    memos: Optional[List[Memo]] = None,
    description: str = "",
) -> RulePack:
    now = now_timestamp()
    return RulePack(
        id=generate_imported_id(),
        name=IMPORTED_PACK_NAME,
        description=description,
        author="",
        version=IMPORTED_PACK_VERSION,
        system_prompt=system_prompt,
        rules=rules,
        memos=memos or [],
        tags=list(IMPORTED_TAGS),
        created_at=now,
        updated_at=now,
    )


def _string_fields(item: Any, *keys: str) -> Optional[List[str]]:
    """The values of ``keys`` if ``item`` is an object holding a string under each."""
    if not isinstance(item, dict):
        return None
    values = [item.get(k) for k in keys]
    if not all(isinstance(v, str) for v in values):
        return None
    return values


def _array(data: dict, key: str) -> list:
    value = data.get(key)
    return value if isinstance(value, list) else []


def _drop(report: Optional[DropReport], source: str, index: int, reason: str) -> None:
    logger.warning(f"Dropping {source}[{index}]: {reason}")
    if report is not None:
        report.record(f"{source}[{index}]", reason)


def import_from_memochat_text(text: str, report: Optional[DropReport] = None) -> RulePack:
    """
    Build a pack from MemoChat JSON given directly by the caller.

    Fields map name for name; rules lacking a string ``title`` or
    ``updateRule`` are dropped. Raises PackImportError if the text is not a
    JSON object.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise PackImportError(str(e)) from e
    if not isinstance(data, dict):
        raise PackImportError("MemoChat data must be a JSON object")

    system_prompt = data.get("systemPrompt")
    if not isinstance(system_prompt, str):
        system_prompt = ""

    rules: List[MemoRule] = []
    for i, item in enumerate(_array(data, "rules")):
        fields = _string_fields(item, "title", "updateRule")
        if fields is None:
            _drop(report, "rules", i, "missing title or updateRule")
            continue
        rules.append(MemoRule(title=fields[0], update_rule=fields[1]))

    return _synthesize_pack(system_prompt, rules)


def import_from_memochat_file(
    locator: StorageLocator, report: Optional[DropReport] = None
) -> RulePack:
    """
    Build a pack from MemoChat's own ``memo-pack.json``.

    Deprecated in favour of ``import_from_memochat_text``.
    """
    warnings.warn(
        "Reading memo-pack.json from the MemoChat config directory is deprecated; "
        "import MemoChat JSON text instead.",
        DeprecationWarning,
        stacklevel=2,
    )

    path = locator.companion_pack_path
    if not path.exists():
        raise CompanionNotFoundError(
            "MemoChat memo-pack.json not found. Please make sure MemoChat is "
            "installed and has been run at least once."
        )

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PackImportError(f"Failed to read memo-pack.json: {e}") from e

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as e:
        raise PackImportError(f"Failed to parse memo-pack.json: {e}") from e
    if not isinstance(data, dict):
        data = {}

    rules: List[MemoRule] = []
    for i, item in enumerate(_array(data, "rules")):
        fields = _string_fields(item, "description", "update_rule")
        if fields is None:
            _drop(report, "rules", i, "missing description or update_rule")
            continue
        rules.append(MemoRule(title=fields[0], update_rule=fields[1]))

    memos: List[Memo] = []
    for i, item in enumerate(_array(data, "memos")):
        fields = _string_fields(item, "title", "content")
        if fields is None:
            _drop(report, "memos", i, "missing title or content")
            continue
        memos.append(Memo(title=fields[0], content=fields[1]))

    return _synthesize_pack("", rules, memos, description=FILE_IMPORT_DESCRIPTION)


def import_from_memochat(
    locator: StorageLocator,
    text: Optional[str] = None,
    mode: str = IMPORT_MODE_TEXT,
    report: Optional[DropReport] = None,
) -> RulePack:
    """
    Import using the deployment's chosen variant. ``text`` is required in
    ``text`` mode and ignored in ``file`` mode.
    """
    if mode == IMPORT_MODE_FILE:
        return import_from_memochat_file(locator, report)
    if mode != IMPORT_MODE_TEXT:
        raise ValueError(f"Unknown MemoChat import mode: {mode!r}")
    if text is None:
        raise PackImportError("No MemoChat JSON was provided")
    return import_from_memochat_text(text, report)
