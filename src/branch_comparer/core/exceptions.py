"""Exceptions raised by Branch Comparer."""

from typing import Optional


class BranchComparerError(Exception):
    """Base exception for all Branch Comparer errors."""


class NotificationError(BranchComparerError):
    """A failure that should be shown to the user as a notification."""

    default_title = "Error"
    exit_code = 1

    def __init__(self, message: str, title: Optional[str] = None):
        super().__init__(message)
        self.title = title or self.default_title


class RepositoryAccessError(NotificationError):
    """Raised when the repository path is invalid or unreadable."""

    default_title = "Repository error"
    exit_code = 2

    def __init__(self, path, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Cannot open git repository at {path}")


class RefNotFoundError(NotificationError):
    """Raised when a branch, tag or commit reference does not resolve."""

    default_title = "Unknown branch"
    exit_code = 3

    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Reference '{ref}' not found")


class NetworkError(NotificationError):
    """Raised when fetching from a remote fails."""

    default_title = "Network error"
    exit_code = 4

    def __init__(self, remote: str, message: Optional[str] = None):
        self.remote = remote
        super().__init__(message or f"Failed to fetch from remote '{remote}'")


class SettingsError(NotificationError):
    """Raised when the settings file cannot be read or is invalid."""

    default_title = "Settings error"
    exit_code = 5
