"""File change tracking and reconciliation."""

from .errors import (
    FileChangeTrackingError,
    InvalidChangeError,
    MissingParentError,
    PersistenceError,
)
from .events import (
    DeleteEvent,
    EditEvent,
    PatchEvent,
    PathExclusion,
    RenameEvent,
    ToolEvent,
    WriteEvent,
    ingest_tool_events,
)
from .net_change import finalize_changes
from .reconciler import reconcile
from .tracker import FileChangeTracker, build_file_change_tracker
from .types import ChangeSource, FileState, Message, MessagePart, OperationType, ToolInput

__all__ = [
    "ChangeSource",
    "DeleteEvent",
    "EditEvent",
    "FileChangeTracker",
    "FileChangeTrackingError",
    "FileState",
    "InvalidChangeError",
    "Message",
    "MessagePart",
    "MissingParentError",
    "OperationType",
    "PatchEvent",
    "PathExclusion",
    "PersistenceError",
    "RenameEvent",
    "ToolEvent",
    "ToolInput",
    "WriteEvent",
    "build_file_change_tracker",
    "finalize_changes",
    "ingest_tool_events",
    "reconcile",
]
