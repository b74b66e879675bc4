"""Storage container: composition root for the SQLite repos."""

from __future__ import annotations

from pathlib import Path

from .contracts import FileChangeRepo, WorkspaceRepo


class StorageContainer:
    """Composition root for storage repos.

    Every repo is opened against the same database file so that the
    file_changes foreign keys resolve against the workspace tables.
    """

    _REPO_NAMES = (
        "workspace_repo",
        "file_change_repo",
    )

    def __init__(self, db_path: str | Path | None = None) -> None:
        root = Path.home() / ".changetrail"
        self._db_path = Path(db_path) if db_path else root / "changetrail.db"

    @property
    def db_path(self) -> Path:
        return self._db_path

    def workspace_repo(self) -> WorkspaceRepo:
        from storage.providers.sqlite.workspace_repo import SQLiteWorkspaceRepo
        return SQLiteWorkspaceRepo(db_path=self._db_path)

    def file_change_repo(self) -> FileChangeRepo:
        from storage.providers.sqlite.file_change_repo import SQLiteFileChangeRepo
        return SQLiteFileChangeRepo(db_path=self._db_path)

    def build(self, repo_name: str):
        if repo_name not in self._REPO_NAMES:
            supported = ", ".join(self._REPO_NAMES)
            raise ValueError(f"Unknown repo name: {repo_name}. Supported repo names: {supported}")
        return getattr(self, repo_name)()

    def purge_project(self, project_id: str) -> bool:
        """Delete a project; chats, sub-chats and change records cascade."""
        workspace = self.workspace_repo()
        try:
            return workspace.delete_project(project_id)
        finally:
            workspace.close()
