"""Main CLI interface for Branch Comparer."""

import json
import platform
from pathlib import Path
from typing import List, Optional

import click
import git as gitpython
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from branch_comparer import __version__
from branch_comparer.cli.notifications import NotificationHandler, notify_errors
from branch_comparer.core.comparison import pull_request_links
from branch_comparer.core.exceptions import SettingsError
from branch_comparer.core.git_service import GitService
from branch_comparer.core.settings import SettingsStore
from branch_comparer.core.worker import QueryWorker
from branch_comparer.logger import get_logger, setup_logging
from branch_comparer.models.commit import Commit
from branch_comparer.models.settings import ComparerSettings

console = Console()
logger = get_logger("cli")

TEXT_SETTINGS = {
    "repository_path",
    "pull_request_uri_template",
    "source_branch",
    "target_branch",
    "log_level",
}


def _dump_debug_information() -> None:
    logger.debug("Application debug information")
    logger.debug("* Version: %s", __version__)
    logger.debug("* Python: %s", platform.python_version())
    logger.debug("* Platform: %s", platform.platform())
    logger.debug("* GitPython: %s", gitpython.__version__)


def _get_service(ctx: click.Context, include_remote: Optional[bool] = None) -> GitService:
    """Build the GitService for this invocation from settings and options."""
    settings: ComparerSettings = ctx.obj["settings"]
    repo_path = ctx.obj["repo_path"] or settings.repository_path
    if include_remote is None:
        include_remote = settings.include_remote_branches
    return GitService(
        Path(repo_path),
        pull_request_uri_template=settings.pull_request_uri_template,
        include_remote_branches=include_remote,
    )


def _commit_table(title: str, commits: List[Commit], links: dict) -> Table:
    table = Table(title=title, title_justify="left")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Commit", style="yellow", no_wrap=True)
    table.add_column("Date", no_wrap=True)
    table.add_column("Author")
    table.add_column("Message")
    table.add_column("Pull request", style="cyan")
    for commit in commits:
        table.add_row(
            str(commit.position),
            commit.short_sha,
            commit.authored_at.strftime("%Y-%m-%d %H:%M"),
            escape(commit.author_name),
            escape(commit.summary),
            links.get(commit.sha, ""),
        )
    return table


@click.group()
@click.version_option(version=__version__, prog_name="branch-comparer")
@click.option(
    "--repo",
    "repo_path",
    type=click.Path(file_okay=False),
    default=None,
    help="Path to the git repository (defaults to the stored setting)",
)
@click.option(
    "--settings-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Settings file to use",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also write logs to this file")
@click.pass_context
@notify_errors
def main(
    ctx: click.Context,
    repo_path: Optional[str],
    settings_file: Optional[str],
    debug: bool,
    log_file: Optional[str],
):
    """Branch Comparer - see which commits separate two git branches."""
    ctx.ensure_object(dict)
    ctx.obj["notifier"] = NotificationHandler(debug=debug)
    ctx.obj["repo_path"] = repo_path

    store = SettingsStore(Path(settings_file) if settings_file else None)
    ctx.obj["store"] = store
    # Logging first, so a broken settings file can still be reported
    setup_logging("DEBUG" if debug else "WARNING", log_file)
    settings = store.load()
    ctx.obj["settings"] = settings
    if not debug:
        setup_logging(settings.log_level, log_file)

    if debug:
        _dump_debug_information()
        logger.debug("Settings file: %s", store.path)


@main.command()
@click.option(
    "--remote/--local",
    "include_remote",
    default=None,
    help="Include remote-tracking branches (defaults to the stored setting)",
)
@click.pass_context
@notify_errors
def branches(ctx: click.Context, include_remote: Optional[bool]):
    """List the repository's branches."""
    service = _get_service(ctx, include_remote)
    names = service.list_branches()
    current = service.current_branch()

    if not names:
        console.print("[yellow]No branches found[/yellow]")
        return

    for name in names:
        marker = "*" if name == current else " "
        style = "green" if name == current else ""
        line = f"{marker} {escape(name)}"
        console.print(f"[{style}]{line}[/{style}]" if style else line, highlight=False)


@main.command()
@click.argument("source", required=False)
@click.argument("target", required=False)
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Maximum commits to show per side")
@click.pass_context
@notify_errors
def compare(ctx: click.Context, source: Optional[str], target: Optional[str], limit: Optional[int]):
    """Show commits in SOURCE missing from TARGET and the reverse.

    Omitted branches fall back to the last compared pair; SOURCE also falls
    back to the checked out branch.
    """
    settings: ComparerSettings = ctx.obj["settings"]
    store: SettingsStore = ctx.obj["store"]
    service = _get_service(ctx)

    source = source or settings.source_branch or service.current_branch()
    target = target or settings.target_branch
    if not source or not target:
        raise click.UsageError("Both SOURCE and TARGET branches are required")
    limit = limit or settings.compare_limit

    with QueryWorker(service) as worker:
        future = worker.submit_compare(source, target)
        with console.status(f"Comparing {source} with {target}..."):
            comparison = future.result()

    if settings.source_branch != source or settings.target_branch != target:
        ctx.obj["settings"] = store.update(source_branch=source, target_branch=target)

    if comparison.is_identical:
        console.print(
            f"[green]{escape(source)} and {escape(target)} contain the same commits[/green]"
        )
        return

    links = pull_request_links(service, comparison.ahead + comparison.behind)
    for title, commits in (
        (f"In {source}, not in {target} ({len(comparison.ahead)})", comparison.ahead),
        (f"In {target}, not in {source} ({len(comparison.behind)})", comparison.behind),
    ):
        if not commits:
            console.print(f"[dim]{escape(title)}: none[/dim]")
            continue
        console.print(_commit_table(escape(title), commits[:limit], links))
        if len(commits) > limit:
            console.print(f"[dim]... {len(commits) - limit} more[/dim]")


@main.command()
@click.argument("include_ref")
@click.argument("exclude_ref")
@click.option("--oneline", is_flag=True, help="Show compact one-line format")
@click.pass_context
@notify_errors
def log(ctx: click.Context, include_ref: str, exclude_ref: str, oneline: bool):
    """List commits reachable from INCLUDE_REF but not from EXCLUDE_REF."""
    service = _get_service(ctx)
    commits = service.commits_between(include_ref, exclude_ref)

    if not commits:
        console.print(f"[dim]No commits in {escape(include_ref)} missing from {escape(exclude_ref)}[/dim]")
        return

    for commit in commits:
        if oneline:
            console.print(f"[yellow]{commit.short_sha}[/yellow] {escape(commit.summary)}", highlight=False)
            continue
        console.print(f"[yellow]commit {commit.sha}[/yellow]", highlight=False)
        console.print(f"Author: {escape(commit.author_name)} <{escape(commit.author_email)}>", highlight=False)
        console.print(f"Date:   {commit.authored_at.isoformat()}", highlight=False)
        console.print()
        for line in commit.message.rstrip().splitlines():
            console.print(f"    {escape(line)}", highlight=False)
        console.print()


@main.command()
@click.argument("pr_id", type=int)
@click.pass_context
@notify_errors
def pr(ctx: click.Context, pr_id: int):
    """Print the URL of pull request PR_ID."""
    service = _get_service(ctx)
    try:
        uri = service.pull_request_uri(pr_id)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="PR_ID") from e
    click.echo(uri)


@main.command()
@click.pass_context
@notify_errors
def fetch(ctx: click.Context):
    """Fetch all remotes and prune deleted branches."""
    service = _get_service(ctx)
    with QueryWorker(service) as worker:
        future = worker.submit_update_remotes()
        with console.status("Fetching remotes..."):
            fetched = future.result()

    if not fetched:
        console.print("[yellow]No remotes configured[/yellow]")
        return
    console.print(f"[green]✅ Fetched {', '.join(fetched)}[/green]")


@main.group("config")
def config_group():
    """Show or change stored settings."""


@config_group.command("show")
@click.pass_context
@notify_errors
def config_show(ctx: click.Context):
    """Print the stored settings."""
    store: SettingsStore = ctx.obj["store"]
    settings: ComparerSettings = ctx.obj["settings"]

    table = Table(title=str(store.path), title_justify="left")
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    for key, value in settings.model_dump().items():
        table.add_row(key, escape(json.dumps(value)))
    console.print(table)


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
@notify_errors
def config_set(ctx: click.Context, key: str, value: str):
    """Store VALUE for setting KEY (JSON literals such as true, 10 or null are parsed)."""
    store: SettingsStore = ctx.obj["store"]
    if key not in ComparerSettings.model_fields:
        raise SettingsError(f"Unknown setting: {key}")

    if value == "null":
        parsed = None
    elif key in TEXT_SETTINGS:
        # Branch names like "1234" stay strings
        parsed = value
    else:
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            parsed = value

    ctx.obj["settings"] = store.update(**{key: parsed})
    console.print(f"[green]{escape(key)} = {escape(json.dumps(parsed))}[/green]")


if __name__ == "__main__":
    main()
