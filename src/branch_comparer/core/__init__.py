"""Core repository access for Branch Comparer."""
