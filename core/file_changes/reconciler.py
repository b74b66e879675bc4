"""Per-path state reconstruction over one batch of tool events.

Transition table (later events override earlier ones for the same path):

    event    unseen path                          seen path
    -------  -----------------------------------  ----------------------------------------------
    Write    create, original=None                current=content; create stays create, else update
    Edit     update, original=old                 current=new; backfill original once; op kept
    Patch    logged and skipped                   logged and skipped
    Rename   rename, re-keyed under new path      re-keyed; create stays create, back to the
                                                  starting path becomes update, else rename
    Delete   delete, current=None                 current=None; delete overrides any op

The state map is built fresh for every call and never shared.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import assert_never

from core.file_changes.events import DeleteEvent, EditEvent, PatchEvent, RenameEvent, ToolEvent, WriteEvent
from core.file_changes.types import ChangeSource, FileState, OperationType

logger = logging.getLogger(__name__)


def reconcile(events: Iterable[ToolEvent]) -> dict[str, FileState]:
    """Fold ordered tool events into one FileState per final path."""
    states: dict[str, FileState] = {}
    for event in events:
        match event:
            case WriteEvent():
                _apply_write(states, event)
            case EditEvent():
                _apply_edit(states, event)
            case PatchEvent():
                # @@@patch-unsupported - multi-file patches are not decomposed per file.
                logger.info(f"[reconcile] Patch tool on {event.path} is not decomposed, skipping")
            case RenameEvent():
                _apply_rename(states, event)
            case DeleteEvent():
                _apply_delete(states, event)
            case _:
                assert_never(event)
    return states


def _apply_write(states: dict[str, FileState], event: WriteEvent) -> None:
    existing = states.get(event.path)
    if existing is None:
        states[event.path] = FileState(
            original_content=None,
            current_content=event.content,
            operation_type=OperationType.CREATE,
            source=ChangeSource.TOOL_WRITE,
        )
        return
    existing.current_content = event.content
    if existing.operation_type != OperationType.CREATE:
        existing.operation_type = OperationType.UPDATE
        existing.old_file_path = None
    existing.source = ChangeSource.TOOL_WRITE


def _apply_edit(states: dict[str, FileState], event: EditEvent) -> None:
    existing = states.get(event.path)
    if existing is None:
        states[event.path] = FileState(
            original_content=event.old_string,
            current_content=event.new_string,
            operation_type=OperationType.UPDATE,
            source=ChangeSource.TOOL_EDIT,
        )
        return
    existing.current_content = event.new_string
    # only the first edit of a path knows its pre-batch content
    if existing.original_content is None and event.old_string:
        existing.original_content = event.old_string
    existing.source = ChangeSource.TOOL_EDIT


def _apply_rename(states: dict[str, FileState], event: RenameEvent) -> None:
    if event.old_path == event.new_path:
        return
    existing = states.pop(event.old_path, None)
    if event.new_path in states:
        logger.warning(f"[reconcile] Rename of {event.old_path} overwrites tracked path {event.new_path}")
    if existing is None:
        states[event.new_path] = FileState(
            original_content=None,
            current_content=None,
            operation_type=OperationType.RENAME,
            source=ChangeSource.TOOL_RENAME,
            old_file_path=event.old_path,
        )
        return
    if existing.operation_type == OperationType.RENAME and existing.old_file_path == event.new_path:
        # moved back to where it started: only content changes remain
        existing.operation_type = OperationType.UPDATE
        existing.old_file_path = None
    elif existing.operation_type != OperationType.CREATE:
        existing.operation_type = OperationType.RENAME
        # chained renames keep the path the file had at batch start
        existing.old_file_path = existing.old_file_path or event.old_path
    existing.source = ChangeSource.TOOL_RENAME
    states[event.new_path] = existing


def _apply_delete(states: dict[str, FileState], event: DeleteEvent) -> None:
    existing = states.get(event.path)
    if existing is None:
        states[event.path] = FileState(
            original_content=None,
            current_content=None,
            operation_type=OperationType.DELETE,
            source=ChangeSource.TOOL_DELETE,
        )
        return
    existing.current_content = None
    existing.operation_type = OperationType.DELETE
    existing.source = ChangeSource.TOOL_DELETE
