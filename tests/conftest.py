"""Pytest configuration for changetrail tests.

Ensures the project root is in sys.path so imports work correctly.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.file_changes import FileChangeTracker  # noqa: E402
from storage.container import StorageContainer  # noqa: E402


@pytest.fixture
def container(tmp_path):
    return StorageContainer(db_path=tmp_path / "changetrail.db")


@pytest.fixture
def workspace_repo(container):
    repo = container.workspace_repo()
    yield repo
    repo.close()


@pytest.fixture
def file_change_repo(container):
    repo = container.file_change_repo()
    yield repo
    repo.close()


@pytest.fixture
def tracker(container):
    t = FileChangeTracker(container.workspace_repo(), container.file_change_repo())
    yield t
    t.close()


@pytest.fixture
def seeded(workspace_repo):
    """One project with two chats; chat-1 has one sub-chat."""
    workspace_repo.create_project("demo", "/work/demo", project_id="p-1")
    workspace_repo.create_chat("p-1", name="first", worktree_path="/work/demo-wt", chat_id="c-1")
    workspace_repo.create_chat("p-1", name="second", chat_id="c-2")
    workspace_repo.create_sub_chat("c-1", session_id="sess-1", sub_chat_id="s-1")
    workspace_repo.create_sub_chat("c-2", sub_chat_id="s-2")
    return {"project_id": "p-1", "chat_ids": ("c-1", "c-2"), "sub_chat_ids": ("s-1", "s-2")}
