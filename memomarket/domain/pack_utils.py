import random
import re
import string
import time
from datetime import datetime

from memomarket.domain.errors import InvalidPackIdError

# Ids are interpolated into "<packs_dir>/<id>.json"; no separators, no leading dot.
# Case is kept, so on case-insensitive filesystems (default macOS and Windows)
# "Pack" and "pack" share one file and the later save replaces the earlier one.
_PACK_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
# Windows device names cannot be used as a file name stem.
_RESERVED_STEMS = frozenset(
    ["con", "prn", "aux", "nul"]
    + [f"com{i}" for i in range(1, 10)]
    + [f"lpt{i}" for i in range(1, 10)]
)
MAX_PACK_ID_LENGTH = 128

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

_BASE36 = string.digits + string.ascii_lowercase


def validate_pack_id(pack_id: str) -> str:
    """
    Return ``pack_id`` unchanged if it is safe to use as a file name stem,
    otherwise raise ``InvalidPackIdError``.
    """
    if (
        not isinstance(pack_id, str)
        or len(pack_id) > MAX_PACK_ID_LENGTH
        or not _PACK_ID_RE.fullmatch(pack_id)
        or pack_id.split(".", 1)[0].lower() in _RESERVED_STEMS
    ):
        raise InvalidPackIdError(pack_id)
    return pack_id


def now_timestamp() -> str:
    """Current local time as ``YYYY-MM-DDTHH:MM:SS``."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def epoch_millis() -> int:
    return int(time.time() * 1000)


def generate_pack_id() -> str:
    """Id for a pack authored locally: ``pack_<epoch ms>_<6 base36 chars>``."""
    suffix = "".join(random.choice(_BASE36) for _ in range(6))
    return f"pack_{epoch_millis()}_{suffix}"


def generate_imported_id() -> str:
    # Two imports within the same millisecond collide; accepted.
    return f"imported_{epoch_millis()}"


def export_slug(name: str, fallback: str) -> str:
    """
    File name stem for an exported pack: lower-cased name with whitespace runs
    replaced by dashes, or ``fallback`` when the name is empty.
    """
    slug = re.sub(r"\s+", "-", name).lower()
    return slug or fallback


def contains_text(value: str, keyword: str) -> bool:
    """Case-insensitive substring test."""
    return keyword.lower() in value.lower()
