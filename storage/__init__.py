from .container import StorageContainer
from .contracts import FileChangeRepo, WorkspaceRepo

__all__ = [
    "StorageContainer",
    "FileChangeRepo",
    "WorkspaceRepo",
]
