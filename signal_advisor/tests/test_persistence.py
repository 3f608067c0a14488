import json
from pathlib import Path

import pytest

from signal_advisor.adapters.persistence import JsonHistoryStore
from signal_advisor.core.models import InputType


def test_history_is_newest_first(tmp_path: Path, build_record) -> None:
    store = JsonHistoryStore(tmp_path / "history.json")
    records = [build_record(offset) for offset in range(3)]
    for record in records:
        store.append(record)

    listed = store.list()

    assert [item.id for item in listed] == [record.id for record in reversed(records)]
    assert [item.id for item in store.list(limit=2)] == [records[2].id, records[1].id]
    assert listed[0].result == records[2].result


def test_get_and_delete(tmp_path: Path, build_record) -> None:
    store = JsonHistoryStore(tmp_path / "nested" / "history.json")
    keep, drop = build_record(0), build_record(1, InputType.WEBCAM)
    store.append(keep)
    store.append(drop)

    assert store.get(drop.id).input_type == InputType.WEBCAM
    assert store.delete(drop.id) is True
    assert store.delete(drop.id) is False
    assert store.get(drop.id) is None
    assert [item.id for item in store.list()] == [keep.id]


def test_history_is_truncated(tmp_path: Path, build_record) -> None:
    store = JsonHistoryStore(tmp_path / "history.json", max_entries=2)
    records = [build_record(offset) for offset in range(4)]
    for record in records:
        store.append(record)

    stored = json.loads((tmp_path / "history.json").read_text())

    assert [item["id"] for item in stored] == [records[3].id, records[2].id]


def test_corrupt_or_missing_history_reads_as_empty(tmp_path: Path, build_record) -> None:
    history_path = tmp_path / "history.json"
    store = JsonHistoryStore(history_path)
    assert store.list() == []

    history_path.write_text("{not json")
    assert store.list() == []

    store.append(build_record())
    assert len(store.list()) == 1


def test_malformed_entries_are_skipped(tmp_path: Path, build_record) -> None:
    history_path = tmp_path / "history.json"
    store = JsonHistoryStore(history_path)
    store.append(build_record())
    entries = json.loads(history_path.read_text())
    entries.append({"id": "broken"})
    history_path.write_text(json.dumps(entries))

    assert len(store.list()) == 1


def test_clear(tmp_path: Path, build_record) -> None:
    store = JsonHistoryStore(tmp_path / "history.json")
    store.append(build_record())

    store.clear()

    assert store.list() == []


def test_get_returns_none_for_malformed_entry(tmp_path: Path, build_record) -> None:
    history_path = tmp_path / "history.json"
    store = JsonHistoryStore(history_path)
    store.append(build_record())
    entries = json.loads(history_path.read_text())
    entries.append({"id": "broken"})
    history_path.write_text(json.dumps(entries))

    assert store.get("broken") is None
    assert store.delete("broken") is True


@pytest.mark.parametrize("limit", [0, -1])
def test_list_rejects_non_positive_limit(tmp_path: Path, build_record, limit: int) -> None:
    store = JsonHistoryStore(tmp_path / "history.json")
    store.append(build_record())

    with pytest.raises(ValueError):
        store.list(limit=limit)


def test_writes_leave_no_staging_file(tmp_path: Path, build_record) -> None:
    store = JsonHistoryStore(tmp_path / "history.json")
    record = build_record()
    store.append(record)
    store.delete(record.id)
    store.clear()

    assert [path.name for path in tmp_path.iterdir()] == ["history.json"]
    assert json.loads((tmp_path / "history.json").read_text()) == []
