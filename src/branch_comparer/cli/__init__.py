"""Command line interface for Branch Comparer."""
