import json

import pytest

from memomarket.core import dependencies
from memomarket.data.locations import APP_IDENTIFIER, StorageLocator
from memomarket.domain.models import MemoRule, RulePack


@pytest.fixture(name="config_root")
def config_root_fixture(tmp_path):
    # Sibling layout: <tmp>/config/com.memomarket.app next to com.memochat.app
    return tmp_path / "config" / APP_IDENTIFIER


@pytest.fixture(name="locator")
def locator_fixture(config_root):
    return StorageLocator(config_root)


@pytest.fixture(name="wired")
def wired_fixture(config_root, monkeypatch):
    """Point the module-level wiring at a temporary config root."""
    monkeypatch.setenv("MEMOMARKET_CONFIG_DIR", str(config_root))
    monkeypatch.delenv("MEMOMARKET_MEMOCHAT_IMPORT", raising=False)
    dependencies.reset()
    yield config_root
    dependencies.reset()


@pytest.fixture(name="make_pack")
def make_pack_fixture():
    def _make(pack_id="pack_1", updated_at="2024-01-01T00:00:00", **overrides):
        fields = dict(
            id=pack_id,
            name="Writing Helper",
            description="Keeps notes tidy",
            author="alice",
            version="1.0.0",
            system_prompt="You are concise.",
            rules=[MemoRule(title="Summary", update_rule="Append one line per session")],
            tags=["writing"],
            created_at="2024-01-01T00:00:00",
            updated_at=updated_at,
        )
        fields.update(overrides)
        return RulePack(**fields)

    return _make


@pytest.fixture(name="write_companion")
def write_companion_fixture(config_root):
    def _write(payload):
        path = config_root.parent / "com.memochat.app" / "memo-pack.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
