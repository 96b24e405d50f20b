"""Run blocking repository queries off the calling thread."""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import List

from branch_comparer.core.comparison import compare_branches
from branch_comparer.core.git_service import GitService
from branch_comparer.models.commit import Commit
from branch_comparer.models.comparison import BranchComparison


class QueryWorker:
    """Serializes GitService calls on a single background thread.

    Errors raised by the service surface when the caller asks the returned
    future for its result.
    """

    def __init__(self, service: GitService):
        self.service = service
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="branch-comparer"
        )

    def submit_list_branches(self) -> "Future[List[str]]":
        return self._executor.submit(self.service.list_branches)

    def submit_commits_between(
        self, include_ref: str, exclude_ref: str
    ) -> "Future[List[Commit]]":
        return self._executor.submit(
            self.service.commits_between, include_ref, exclude_ref
        )

    def submit_compare(self, source: str, target: str) -> "Future[BranchComparison]":
        return self._executor.submit(compare_branches, self.service, source, target)

    def submit_update_remotes(self) -> "Future[List[str]]":
        return self._executor.submit(self.service.update_remotes)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "QueryWorker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
