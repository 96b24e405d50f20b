"""Branch Comparer - compare the commits of two git branches."""

__version__ = "0.1.0"
