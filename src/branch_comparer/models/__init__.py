"""Data models for Branch Comparer."""

from .comparison import BranchComparison
from .commit import Commit
from .settings import ComparerSettings

__all__ = ["BranchComparison", "Commit", "ComparerSettings"]
