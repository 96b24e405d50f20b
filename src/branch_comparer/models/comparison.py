"""Ahead/behind result of comparing two branches."""

from typing import List

from pydantic import BaseModel

from .commit import Commit


class BranchComparison(BaseModel):
    """Commits unique to each side of a source/target branch pair."""

    source: str
    target: str
    ahead: List[Commit] = []  # in source, not in target
    behind: List[Commit] = []  # in target, not in source

    model_config = {"frozen": True}

    @property
    def is_identical(self) -> bool:
        """Check if neither branch has commits the other lacks."""
        return not self.ahead and not self.behind
