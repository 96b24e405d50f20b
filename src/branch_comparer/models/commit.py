"""Commit model for results of a revision walk."""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

# Azure DevOps squash merges and GitHub merge commits
PULL_REQUEST_PATTERNS = (
    re.compile(r"^Merged PR (\d+)", re.MULTILINE),
    re.compile(r"^Merge pull request #(\d+)", re.MULTILINE),
)


def extract_pull_request_id(message: str) -> Optional[int]:
    """Return the pull request number mentioned in a commit message, if any."""
    for pattern in PULL_REQUEST_PATTERNS:
        match = pattern.search(message)
        if match:
            return int(match.group(1))
    return None


class Commit(BaseModel):
    """A commit yielded by a revision walk between two refs."""

    sha: str
    author_name: str
    author_email: str
    authored_at: datetime
    committer_name: str
    committed_at: datetime
    message: str
    position: int

    model_config = {"frozen": True}

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        lines = self.message.strip().splitlines()
        return lines[0] if lines else ""

    @property
    def pull_request_id(self) -> Optional[int]:
        return extract_pull_request_id(self.message)
