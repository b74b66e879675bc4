from datetime import datetime, timezone

from core.file_changes import DeleteEvent, EditEvent, RenameEvent, WriteEvent, finalize_changes, reconcile


def _finalize(events, **kwargs):
    kwargs.setdefault("project_id", "p-1")
    return finalize_changes(reconcile(events), **kwargs)


def test_edit_reverted_within_batch_is_elided():
    changes = _finalize([EditEvent("b.ts", "foo", "bar"), EditEvent("b.ts", "bar", "foo")])
    assert changes == []


def test_edit_with_identical_strings_is_elided():
    assert _finalize([EditEvent("a.ts", "same", "same")]) == []


def test_identical_writes_of_empty_content_are_elided():
    assert _finalize([WriteEvent("a.ts", ""), WriteEvent("a.ts", "")]) == []


def test_create_record_shape():
    changes = _finalize([WriteEvent("a.ts", "hello")], chat_id="c-1", sub_chat_id="s-1", session_id="sess")

    assert len(changes) == 1
    change = changes[0]
    assert change.operation_type == "create"
    assert change.file_path == "a.ts"
    assert change.old_content is None
    assert change.new_content == "hello"
    assert change.source == "tool-write"
    assert change.project_id == "p-1"
    assert change.chat_id == "c-1"
    assert change.sub_chat_id == "s-1"
    assert change.session_id == "sess"
    assert change.old_file_path is None


def test_create_never_carries_old_content_after_backfill():
    changes = _finalize([WriteEvent("a.ts", "x"), EditEvent("a.ts", "x", "y")])

    assert changes[0].operation_type == "create"
    assert changes[0].old_content is None
    assert changes[0].new_content == "y"


def test_delete_is_kept_without_new_content():
    changes = _finalize([EditEvent("a.ts", "old", "new"), DeleteEvent("a.ts")])

    assert len(changes) == 1
    assert changes[0].operation_type == "delete"
    assert changes[0].old_content == "old"
    assert changes[0].new_content is None


def test_pure_rename_is_kept():
    changes = _finalize([RenameEvent("old.ts", "new.ts")])

    assert len(changes) == 1
    assert changes[0].operation_type == "rename"
    assert changes[0].file_path == "new.ts"
    assert changes[0].old_file_path == "old.ts"


def test_rename_round_trip_is_elided():
    assert _finalize([RenameEvent("a.ts", "b.ts"), RenameEvent("b.ts", "a.ts")]) == []


def test_batch_order_and_timestamp_are_preserved():
    ts = datetime(2026, 1, 2, tzinfo=timezone.utc)
    changes = _finalize(
        [WriteEvent("z.ts", "1"), EditEvent("a.ts", "2", "3"), WriteEvent("m.ts", "4")],
        worktree_path="/wt",
        timestamp=ts,
    )

    assert [c.file_path for c in changes] == ["z.ts", "a.ts", "m.ts"]
    assert all(c.timestamp == ts for c in changes)
    assert all(c.worktree_path == "/wt" for c in changes)
