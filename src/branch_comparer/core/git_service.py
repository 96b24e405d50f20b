"""Branch comparison queries over a local git repository."""

from pathlib import Path
from typing import List, Optional

import git
from git import Repo

from branch_comparer.core.exceptions import (
    NetworkError,
    RefNotFoundError,
    RepositoryAccessError,
)
from branch_comparer.logger import get_logger
from branch_comparer.models.commit import Commit
from branch_comparer.models.settings import (
    DEFAULT_PULL_REQUEST_URI_TEMPLATE,
    validate_pull_request_uri_template,
)

logger = get_logger("git_service")


class GitService:
    """Thin query layer over GitPython for comparing branches.

    Every call reads the repository as it is at call time; nothing is cached
    besides the open ``Repo`` handle.
    """

    def __init__(
        self,
        repository_path: Path,
        pull_request_uri_template: str = DEFAULT_PULL_REQUEST_URI_TEMPLATE,
        include_remote_branches: bool = False,
    ):
        validate_pull_request_uri_template(pull_request_uri_template)
        self.repository_path = Path(repository_path).expanduser()
        self.pull_request_uri_template = pull_request_uri_template
        self.include_remote_branches = include_remote_branches
        self._repo: Optional[Repo] = None

    @property
    def repo(self) -> Repo:
        """Get the git repository, opening it on first use."""
        if self._repo is None:
            path = self.repository_path
            try:
                self._repo = Repo(path)
            except git.exc.NoSuchPathError as e:
                raise RepositoryAccessError(path, f"Path does not exist: {path}") from e
            except git.exc.InvalidGitRepositoryError as e:
                raise RepositoryAccessError(path, f"Not a git repository: {path}") from e
            except OSError as e:
                raise RepositoryAccessError(path) from e
            logger.debug("Opened repository %s", path)
        return self._repo

    def list_branches(self) -> List[str]:
        """List local branch names, followed by remote-tracking ones if enabled."""
        repo = self.repo
        try:
            names = sorted(head.name for head in repo.heads)
            if self.include_remote_branches:
                remote_names = set()
                for ref in repo.references:
                    if not isinstance(ref, git.RemoteReference):
                        continue
                    # origin/HEAD is a symbolic alias, not a branch
                    if ref.remote_head == "HEAD":
                        continue
                    remote_names.add(ref.name)
                names.extend(sorted(remote_names - set(names)))
        except (OSError, git.exc.GitCommandError) as e:
            raise RepositoryAccessError(self.repository_path) from e

        logger.debug("Found %d branches in %s", len(names), self.repository_path)
        return names

    def current_branch(self) -> Optional[str]:
        """Name of the checked out branch, or None when HEAD is detached."""
        try:
            return self.repo.active_branch.name
        except TypeError:
            return None

    def resolve(self, ref: str) -> str:
        """Resolve a branch, tag or revision expression to a full commit SHA."""
        if not ref or not ref.strip():
            raise RefNotFoundError(ref)
        repo = self.repo
        try:
            return repo.commit(ref).hexsha
        except (
            git.exc.BadName,
            git.exc.BadObject,
            ValueError,
            IndexError,
            NotImplementedError,  # reflog selectors such as main@{yesterday}
        ) as e:
            raise RefNotFoundError(ref) from e

    def commits_between(self, include_ref: str, exclude_ref: str) -> List[Commit]:
        """Get commits reachable from include_ref but not from exclude_ref.

        Commits come back in the order of the revision walk (newest first).

        Raises:
            RefNotFoundError: if either ref does not resolve
        """
        include_sha = self.resolve(include_ref)
        exclude_sha = self.resolve(exclude_ref)
        if include_sha == exclude_sha:
            return []

        logger.debug("Walking %s --not %s", include_ref, exclude_ref)
        try:
            walk = self.repo.iter_commits(f"{exclude_sha}..{include_sha}")
            commits = [
                self._to_commit(position, commit) for position, commit in enumerate(walk)
            ]
        except git.exc.GitCommandError as e:
            raise RepositoryAccessError(self.repository_path) from e

        logger.debug(
            "%d commits in %s not in %s", len(commits), include_ref, exclude_ref
        )
        return commits

    def pull_request_uri(self, pr_id: int) -> str:
        """Format the hosting provider URL of a pull request."""
        if isinstance(pr_id, bool) or not isinstance(pr_id, int):
            raise ValueError(f"Pull request id must be an integer, got {pr_id!r}")
        if pr_id < 0:
            raise ValueError(f"Pull request id must not be negative, got {pr_id}")
        return self.pull_request_uri_template.format(id=pr_id)

    def update_remotes(self) -> List[str]:
        """Fetch every configured remote, pruning deleted branches.

        Returns:
            Names of the remotes that were fetched

        Raises:
            NetworkError: if any remote cannot be fetched
        """
        fetched = []
        for remote in self.repo.remotes:
            logger.info("Fetching %s", remote.name)
            try:
                remote.fetch(prune=True)
            except git.exc.GitCommandError as e:
                raise NetworkError(remote.name) from e
            fetched.append(remote.name)

        if not fetched:
            logger.debug("No remotes configured for %s", self.repository_path)
        return fetched

    @staticmethod
    def _to_commit(position: int, commit: git.Commit) -> Commit:
        message = commit.message
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        return Commit(
            sha=commit.hexsha,
            author_name=commit.author.name or "",
            author_email=commit.author.email or "",
            authored_at=commit.authored_datetime,
            committer_name=commit.committer.name or "",
            committed_at=commit.committed_datetime,
            message=message,
            position=position,
        )
