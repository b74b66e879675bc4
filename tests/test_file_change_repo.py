import sqlite3
from datetime import datetime, timezone

import pytest

from storage.models import NewFileChange
from storage.providers.sqlite.file_change_repo import SQLiteFileChangeRepo


def _change(path, **kwargs):
    kwargs.setdefault("project_id", "p-1")
    kwargs.setdefault("operation_type", "update")
    kwargs.setdefault("old_content", "a")
    kwargs.setdefault("new_content", "b")
    return NewFileChange(file_path=path, **kwargs)


def test_insert_and_query_by_chat(file_change_repo, seeded):
    first = file_change_repo.insert(_change("/w/a.ts", chat_id="c-1", sub_chat_id="s-1"))
    second = file_change_repo.insert(_change("/w/b.ts", chat_id="c-1"))

    assert first.id != second.id

    rows = file_change_repo.list_for_chat("c-1")
    assert [r.id for r in rows] == [first.id, second.id]
    assert rows[0].sub_chat_id == "s-1"
    assert rows[0].old_content == "a"
    assert rows[0].new_content == "b"


def test_timestamp_defaults_to_insertion_time(file_change_repo, seeded):
    before = datetime.now(timezone.utc)
    row = file_change_repo.insert(_change("/w/a.ts", chat_id="c-1"))

    assert row.timestamp >= before.replace(microsecond=0)
    stored = file_change_repo.list_for_chat("c-1")[0]
    assert stored.timestamp == row.timestamp


def test_explicit_timestamp_is_kept(file_change_repo, seeded):
    ts = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
    file_change_repo.insert(_change("/w/a.ts", chat_id="c-1", timestamp=ts))

    assert file_change_repo.list_for_chat("c-1")[0].timestamp == ts


def test_project_and_sub_chat_queries(file_change_repo, seeded):
    file_change_repo.insert_many(
        [
            _change("/w/a.ts", chat_id="c-1", sub_chat_id="s-1"),
            _change("/w/b.ts", chat_id="c-2", sub_chat_id="s-2"),
            _change("/w/c.ts"),
        ]
    )

    assert len(file_change_repo.list_for_project("p-1")) == 3
    assert [r.file_path for r in file_change_repo.list_for_sub_chat("s-2")] == ["/w/b.ts"]
    assert len(file_change_repo.list_for_project("p-1", limit=2)) == 2


def test_insert_many_is_atomic(file_change_repo, seeded):
    with pytest.raises(sqlite3.IntegrityError):
        file_change_repo.insert_many(
            [
                _change("/w/a.ts", chat_id="c-1"),
                _change("/w/b.ts", chat_id="missing-chat"),
            ]
        )

    assert file_change_repo.list_for_project("p-1") == []


def test_insert_many_with_nothing_is_a_noop(file_change_repo):
    assert file_change_repo.insert_many([]) == []


def test_project_id_is_required(file_change_repo, seeded):
    with pytest.raises(sqlite3.IntegrityError):
        file_change_repo.insert(_change("/w/a.ts", project_id=None))


def test_records_cascade_with_their_parents(workspace_repo, file_change_repo, seeded):
    file_change_repo.insert_many(
        [
            _change("/w/a.ts", chat_id="c-1", sub_chat_id="s-1"),
            _change("/w/b.ts", chat_id="c-2"),
        ]
    )

    assert workspace_repo.delete_sub_chat("s-1")
    assert file_change_repo.list_for_chat("c-1") == []
    assert len(file_change_repo.list_for_chat("c-2")) == 1

    assert workspace_repo.delete_project("p-1")
    assert file_change_repo.list_for_project("p-1") == []


def test_shared_connection_is_not_closed(tmp_path):
    conn = sqlite3.connect(str(tmp_path / "shared.db"))
    repo = SQLiteFileChangeRepo(conn=conn)
    repo.close()

    tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"projects", "chats", "sub_chats", "file_changes"} <= tables
    conn.close()
