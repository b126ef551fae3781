import json
import re

import pytest

from memomarket.core.diagnostics import DropReport
from memomarket.domain.errors import CompanionNotFoundError, PackImportError
from memomarket.domain.models import Memo, MemoRule
from memomarket.services.memochat import (
    export_for_memochat,
    import_from_memochat,
    import_from_memochat_file,
    import_from_memochat_text,
)

TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$")


def test_export_projects_prompt_and_rules_only(make_pack):
    pack = make_pack(
        "p",
        rules=[MemoRule(title="A", update_rule="do a"), MemoRule(title="B", update_rule="do b")],
        memos=[Memo(title="m", content="c")],
    )

    data = json.loads(export_for_memochat(pack))

    assert data == {
        "systemPrompt": "You are concise.",
        "rules": [
            {"title": "A", "updateRule": "do a"},
            {"title": "B", "updateRule": "do b"},
        ],
    }


def test_text_import_maps_fields():
    pack = import_from_memochat_text(
        '{"systemPrompt":"S","rules":[{"title":"T","updateRule":"U"}]}'
    )

    assert pack.system_prompt == "S"
    assert pack.rules == [MemoRule(title="T", update_rule="U")]
    assert "imported" in pack.tags
    assert pack.id.startswith("imported_")
    assert pack.id[len("imported_"):].isdigit()
    assert pack.name == "Imported from MemoChat"
    assert pack.author == ""
    assert pack.version == "1.0.0"
    assert pack.description == ""
    assert pack.memos == []
    assert TIMESTAMP_RE.match(pack.created_at)
    assert pack.created_at == pack.updated_at


def test_text_import_drops_incomplete_rules():
    report = DropReport()
    text = json.dumps({
        "systemPrompt": "S",
        "rules": [
            {"title": "keep", "updateRule": "u"},
            {"title": "no rule"},
            {"title": 3, "updateRule": "u"},
            "not an object",
        ],
    })

    pack = import_from_memochat_text(text, report)

    assert [r.title for r in pack.rules] == ["keep"]
    assert report.count == 3


def test_text_import_tolerates_missing_keys():
    pack = import_from_memochat_text("{}")
    assert pack.system_prompt == ""
    assert pack.rules == []


def test_text_import_round_trips_export(make_pack):
    original = make_pack("src")
    pack = import_from_memochat_text(export_for_memochat(original))
    assert pack.system_prompt == original.system_prompt
    assert pack.rules == original.rules


@pytest.mark.parametrize("text", ["{ broken", "[1, 2]", '"just a string"'])
def test_text_import_rejects_non_objects(text):
    with pytest.raises(PackImportError):
        import_from_memochat_text(text)


def test_file_import_missing_companion(locator):
    with pytest.warns(DeprecationWarning):
        with pytest.raises(CompanionNotFoundError) as exc_info:
            import_from_memochat_file(locator)
    assert "not found" in str(exc_info.value)
    assert "MemoChat" in str(exc_info.value)


def test_file_import_maps_rules_and_memos(locator, write_companion):
    write_companion({
        "rules": [
            {"description": "Diary", "update_rule": "Log the day"},
            {"description": "Missing rule text"},
        ],
        "memos": [
            {"title": "Groceries", "content": "milk"},
            {"content": "untitled"},
        ],
        "version": 3,
    })
    report = DropReport()

    with pytest.warns(DeprecationWarning):
        pack = import_from_memochat_file(locator, report)

    assert pack.rules == [MemoRule(title="Diary", update_rule="Log the day")]
    assert pack.memos == [Memo(title="Groceries", content="milk")]
    assert pack.description == "Current memo pack from MemoChat"
    assert pack.system_prompt == ""
    assert pack.tags == ["imported", "memochat"]
    assert pack.id.startswith("imported_")
    assert report.count == 2


def test_file_import_without_arrays(locator, write_companion):
    write_companion({"something": "else"})
    with pytest.warns(DeprecationWarning):
        pack = import_from_memochat_file(locator)
    assert pack.rules == []
    assert pack.memos == []


def test_file_import_unparsable(locator, write_companion):
    write_companion("{ nope")
    with pytest.warns(DeprecationWarning):
        with pytest.raises(PackImportError) as exc_info:
            import_from_memochat_file(locator)
    assert str(exc_info.value).startswith("Failed to parse memo-pack.json")


def test_dispatch_text_mode(locator):
    pack = import_from_memochat(locator, text='{"systemPrompt": "S", "rules": []}', mode="text")
    assert pack.system_prompt == "S"


def test_dispatch_text_mode_needs_text(locator):
    with pytest.raises(PackImportError):
        import_from_memochat(locator, mode="text")


def test_dispatch_file_mode_ignores_text(locator, write_companion):
    write_companion({"rules": [{"description": "d", "update_rule": "u"}]})
    with pytest.warns(DeprecationWarning):
        pack = import_from_memochat(locator, text='{"systemPrompt": "S"}', mode="file")
    assert pack.system_prompt == ""
    assert pack.rules == [MemoRule(title="d", update_rule="u")]


def test_dispatch_unknown_mode(locator):
    with pytest.raises(ValueError):
        import_from_memochat(locator, text="{}", mode="clipboard")


DEEPLY_NESTED = '{"systemPrompt": "S", "rules": ' + "[" * 100000 + "]" * 100000 + "}"


def test_text_import_rejects_excessive_nesting():
    with pytest.raises(PackImportError):
        import_from_memochat_text(DEEPLY_NESTED)


def test_file_import_rejects_excessive_nesting(locator, write_companion):
    write_companion(DEEPLY_NESTED)
    with pytest.warns(DeprecationWarning):
        with pytest.raises(PackImportError) as exc_info:
            import_from_memochat_file(locator)
    assert str(exc_info.value).startswith("Failed to parse memo-pack.json")
