"""Render failures as notification panels."""

import functools
import sys
from typing import Callable, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from branch_comparer.core.exceptions import NotificationError
from branch_comparer.logger import get_logger

logger = get_logger("cli")


def root_cause(error: BaseException) -> BaseException:
    """Follow the exception chain down to the original error."""
    while error.__cause__ is not None:
        error = error.__cause__
    return error


def notification_message(error: BaseException) -> str:
    """Build the text shown to the user for a failure."""
    message = str(error).rstrip(".") + "."
    cause = root_cause(error)
    if cause is not error:
        details = str(cause).strip() or type(cause).__name__
        message += f" Details: {details}"
    return message


class NotificationHandler:
    """Turns exceptions raised by commands into notifications and exit codes."""

    def __init__(self, console: Optional[Console] = None, debug: bool = False):
        self.console = console or Console(stderr=True)
        self.debug = debug

    def show(self, title: str, message: str, style: str = "red") -> None:
        panel = Panel(
            Text(message),
            title=f"[bold {style}]{escape(title)}[/bold {style}]",
            border_style=style,
            expand=False,
        )
        self.console.print(panel)

    def handle(self, error: Exception) -> None:
        """Display the error and exit with its code."""
        if isinstance(error, NotificationError):
            logger.debug("Notification: %s", error, exc_info=self.debug)
            self.show(error.title, notification_message(error))
            sys.exit(error.exit_code)

        # Anything else is a bug, keep the traceback
        logger.error("Unexpected error", exc_info=error)
        self.show("Unexpected error", notification_message(error))
        sys.exit(1)


def notify_errors(func: Callable) -> Callable:
    """Decorator routing command failures through the context's NotificationHandler."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (click.ClickException, click.exceptions.Exit, click.Abort):
            raise
        except Exception as e:
            ctx = click.get_current_context(silent=True)
            handler = None
            if ctx is not None and isinstance(ctx.obj, dict):
                handler = ctx.obj.get("notifier")
            (handler or NotificationHandler()).handle(e)

    return wrapper
