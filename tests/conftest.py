"""Shared fixtures building throwaway git repositories."""

import tempfile
from pathlib import Path

import pytest
from git import Repo


def commit_file(repo: Repo, name: str, content: str, message: str) -> str:
    """Write a file in the working tree, commit it and return the commit SHA."""
    path = Path(repo.working_tree_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.index.add([name])
    return repo.index.commit(message).hexsha


@pytest.fixture
def temp_git_project():
    """Create a repository with a main branch and a feature branch two commits ahead.

    History:
        main:    base -> docs
        feature: base -> docs -> login -> Merged PR 17
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        project_path = Path(temp_dir) / "project"
        project_path.mkdir()
        repo = Repo.init(project_path)

        with repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")

        commit_file(repo, "README.md", "# Test Project\n", "Initial commit")
        repo.git.branch("-M", "main")
        commit_file(repo, "docs.md", "docs\n", "Add docs")

        feature = repo.create_head("feature")
        feature.checkout()
        commit_file(repo, "login.py", "def login():\n    pass\n", "Add login")
        commit_file(repo, "auth.py", "TOKEN = None\n", "Merged PR 17: add auth token")
        repo.heads.main.checkout()

        yield project_path


@pytest.fixture
def project_repo(temp_git_project):
    return Repo(temp_git_project)


@pytest.fixture
def bare_remote(project_repo):
    """Bare repository acting as 'origin', seeded with main and feature."""
    remote_path = Path(project_repo.working_tree_dir).parent / "origin.git"
    bare = Repo.init(remote_path, bare=True)
    bare.git.symbolic_ref("HEAD", "refs/heads/main")

    origin = project_repo.create_remote("origin", str(remote_path))
    origin.push(["main:main", "feature:feature"])
    return remote_path


@pytest.fixture
def cloned_project(bare_remote):
    """A clone of the bare remote, tracking origin/main and origin/feature."""
    clone_path = bare_remote.parent / "clone"
    Repo.clone_from(str(bare_remote), clone_path)
    return clone_path
