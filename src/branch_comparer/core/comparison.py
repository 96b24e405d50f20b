"""Ahead/behind comparison of a source and target branch."""

from typing import Dict, Iterable

from branch_comparer.core.git_service import GitService
from branch_comparer.logger import get_logger
from branch_comparer.models.commit import Commit, extract_pull_request_id
from branch_comparer.models.comparison import BranchComparison

logger = get_logger("comparison")

__all__ = ["compare_branches", "extract_pull_request_id", "pull_request_links"]


def compare_branches(service: GitService, source: str, target: str) -> BranchComparison:
    """Compute the commits each branch has that the other lacks."""
    ahead = service.commits_between(source, target)
    behind = service.commits_between(target, source)
    logger.debug(
        "%s is %d ahead and %d behind %s", source, len(ahead), len(behind), target
    )
    return BranchComparison(source=source, target=target, ahead=ahead, behind=behind)


def pull_request_links(service: GitService, commits: Iterable[Commit]) -> Dict[str, str]:
    """Map commit SHAs to the URL of the pull request that merged them."""
    links = {}
    for commit in commits:
        pr_id = commit.pull_request_id
        if pr_id is not None:
            links[commit.sha] = service.pull_request_uri(pr_id)
    return links
