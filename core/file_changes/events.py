"""Tool event extraction from the agent runtime's message log.

Only assistant messages carry file tool calls. Each recognized part becomes a
typed ToolEvent; parts without a resolvable path and parts touching session
artifacts are dropped here so that nothing downstream ever sees them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from config.tracking_schema import DEFAULT_EXCLUDED_MARKERS, ToolKindConfig
from core.file_changes.types import Message, MessagePart

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteEvent:
    path: str
    content: str


@dataclass(frozen=True)
class EditEvent:
    path: str
    old_string: str
    new_string: str


@dataclass(frozen=True)
class PatchEvent:
    path: str


@dataclass(frozen=True)
class RenameEvent:
    old_path: str
    new_path: str


@dataclass(frozen=True)
class DeleteEvent:
    path: str


ToolEvent = WriteEvent | EditEvent | PatchEvent | RenameEvent | DeleteEvent


class PathExclusion:
    """Matches paths that contain any of the configured markers."""

    def __init__(self, markers: Iterable[str] | None = None):
        self.markers = tuple(DEFAULT_EXCLUDED_MARKERS if markers is None else markers)

    def __call__(self, file_path: str) -> bool:
        return any(marker in file_path for marker in self.markers)

    def __repr__(self) -> str:
        return f"PathExclusion(markers={list(self.markers)!r})"


def ingest_tool_events(
    messages: Iterable[Message | Mapping[str, Any]],
    *,
    is_excluded: PathExclusion | None = None,
    tool_kinds: ToolKindConfig | None = None,
) -> list[ToolEvent]:
    """Extract ordered tool events from a message list."""
    is_excluded = is_excluded or PathExclusion()
    tool_kinds = tool_kinds or ToolKindConfig()

    events: list[ToolEvent] = []
    for raw in messages:
        message = _coerce_message(raw)
        if message is None or message.role != "assistant":
            continue
        for part in message.parts:
            event = _part_to_event(part, tool_kinds)
            if event is None:
                continue
            if any(is_excluded(path) for path in _event_paths(event)):
                logger.debug(f"[ingest_tool_events] Excluded session artifact: {_event_paths(event)}")
                continue
            events.append(event)
    return events


def _coerce_message(raw: Message | Mapping[str, Any]) -> Message | None:
    if isinstance(raw, Message):
        return raw
    try:
        return Message.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"[ingest_tool_events] Skipping malformed message: {e.error_count()} validation errors")
        return None


def _part_to_event(part: MessagePart, kinds: ToolKindConfig) -> ToolEvent | None:
    if part.type not in (kinds.write, kinds.edit, kinds.patch, kinds.rename, kinds.move, kinds.delete):
        return None
    if part.input is None:
        return None
    path = part.input.resolved_path()
    if not path:
        return None

    args = part.input
    if part.type == kinds.write:
        return WriteEvent(path=path, content=args.content or "")
    if part.type == kinds.edit:
        return EditEvent(path=path, old_string=args.old_string or "", new_string=args.new_string or "")
    if part.type == kinds.patch:
        return PatchEvent(path=path)
    if part.type in (kinds.rename, kinds.move):
        if not args.move_path:
            logger.debug(f"[ingest_tool_events] Rename of {path} has no destination, skipping")
            return None
        return RenameEvent(old_path=path, new_path=args.move_path)
    return DeleteEvent(path=path)


def _event_paths(event: ToolEvent) -> tuple[str, ...]:
    if isinstance(event, RenameEvent):
        return (event.old_path, event.new_path)
    return (event.path,)
