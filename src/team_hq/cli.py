"""CLI entry point for team-hq."""

import logging
import sys
from datetime import datetime, timezone
from typing import NoReturn

import click
import humanize
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape as escape_markup
from rich.table import Table

from .client import ChatlogClient
from .config import (
    AGENTS_DIR,
    DEFAULT_WINDOW_HOURS,
    HQ_URL,
    MAX_SESSIONS_LISTED,
    OPENCLAW_CONFIG,
    STATE_FILE,
    TAKEAWAYS_FILE,
)
from .errors import DeliveryError, HQError
from .roster import load_roster
from .sessions import agent_status, list_sessions, load_session
from .state import SyncStateStore
from .sync import run_sync
from .takeaways import TAKEAWAY_STATUSES, TAKEAWAY_TYPES, TakeawayStore

logger = logging.getLogger(__name__)

console = Console()

STATUS_STYLES = {
    "pending": "yellow",
    "in-progress": "cyan",
    "done": "green",
    "blocked": "red",
}


def format_time_ago(dt: datetime | None, now: datetime | None = None) -> str:
    """Format a datetime as a human-readable time ago string."""
    if dt is None:
        return "never"
    now = now or datetime.now(timezone.utc)
    return humanize.naturaltime(now - dt)


def preview(text: str, length: int = 60) -> str:
    """Single-line, escaped preview of message text."""
    flat = " ".join(text.split())
    if len(flat) > length:
        flat = flat[:length] + "..."
    return escape_markup(flat)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{escape_markup(message)}[/red]")
    sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="team-hq")
def main(verbose: bool) -> None:
    """Team HQ: agent conversation dashboard and chat-log sync.

    Examples:

        hq sync                  # Sync the last 24 hours of agent chat

        hq sync --dry-run        # Show what would be synced

        hq sessions -a main      # Recent sessions of one agent

        hq takeaways list        # Open action items and decisions
    """
    _configure_logging(verbose)


@main.command()
@click.option(
    "--hours",
    type=float,
    default=DEFAULT_WINDOW_HOURS,
    show_default=True,
    help="Only consider messages from the last N hours",
)
@click.option("--dry-run", is_flag=True, help="List messages without sending them")
@click.option("--url", help="Chat-log base URL (defaults to $HQ_URL)")
def sync(hours: float, dry_run: bool, url: str | None) -> None:
    """Send new inter-agent messages to the HQ chat log."""
    console.print(f"[dim]Scanning sessions from last {hours:g} hours...[/dim]")

    def on_result(candidate, error):
        arrow = f"{candidate.sender} → {candidate.recipient}"
        if error is None:
            console.print(f"[green]✓[/green] {arrow}")
        else:
            console.print(
                f"[red]✗[/red] {arrow} failed: {escape_markup(str(error))}"
            )

    try:
        with ChatlogClient(url or HQ_URL) as client:
            result = run_sync(
                client,
                store=SyncStateStore(STATE_FILE),
                roster=load_roster(OPENCLAW_CONFIG),
                agents_dir=AGENTS_DIR,
                hours=hours,
                dry_run=dry_run,
                on_result=on_result,
            )
    except Exception as e:
        logger.debug("Sync failed", exc_info=True)
        _fail(f"Sync failed: {e}")

    console.print(f"Found {len(result.candidates)} new messages to sync")
    if not result.candidates:
        console.print("[green]Already up to date[/green]")
        return

    if dry_run:
        console.print("\n[bold]Dry run[/bold], messages that would be synced:")
        for candidate in result.candidates:
            console.print(
                f"  {candidate.sender} → {candidate.recipient}: "
                f'"{preview(candidate.text)}"'
            )
        return

    report = result.report
    console.print(
        f"\n[bold]Synced {report.succeeded} of {report.attempted} messages[/bold]"
        + (f" [red]({report.failed} failed)[/red]" if report.failed else "")
    )


@main.command("log")
@click.option("--from", "sender", required=True, help="Sender handle")
@click.option("--to", "recipient", required=True, help="Recipient handle")
@click.option("--text", required=True, help="Message text")
@click.option("--url", help="Chat-log base URL (defaults to $HQ_URL)")
def log_message(sender: str, recipient: str, text: str, url: str | None) -> None:
    """Post a single message to the HQ chat log."""
    try:
        with ChatlogClient(url or HQ_URL) as client:
            client.post(sender, recipient, text)
    except DeliveryError as e:
        _fail(f"Failed to log chat: {e}")
    console.print(f'[green]Logged:[/green] {sender} → {recipient}: "{preview(text, 50)}"')


@main.command()
def agents() -> None:
    """Show the agent roster and who is active."""
    try:
        roster = load_roster(OPENCLAW_CONFIG)
    except HQError as e:
        _fail(str(e))

    now = datetime.now(timezone.utc)
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Handle", style="dim")
    table.add_column("Status")
    table.add_column("Last activity", style="dim")

    for agent in roster.agents:
        status = agent_status(AGENTS_DIR, agent.id, now=now)
        style = "green" if status.status == "online" else "yellow"
        table.add_row(
            agent.id,
            agent.name,
            agent.handle,
            f"[{style}]{status.status}[/{style}]",
            format_time_ago(status.last_activity, now),
        )

    console.print(table)


@main.command()
@click.option("-a", "--agent", help="Only show sessions of this agent")
@click.option(
    "-n", "--limit", type=int, default=MAX_SESSIONS_LISTED, show_default=True
)
def sessions(agent: str | None, limit: int) -> None:
    """List recent agent sessions."""
    found = list_sessions(AGENTS_DIR, agent_filter=agent, limit=limit)
    if not found:
        console.print("[dim]No sessions found.[/dim]")
        return

    now = datetime.now(timezone.utc)
    table = Table(show_header=True, header_style="bold")
    table.add_column("Agent", style="bold")
    table.add_column("Session")
    table.add_column("Messages", justify="right")
    table.add_column("Last activity", style="dim")
    table.add_column("Size", justify="right", style="dim")

    for session in found:
        table.add_row(
            session.agent_id,
            session.id,
            str(session.message_count),
            format_time_ago(session.last_activity, now),
            humanize.naturalsize(session.size),
        )

    console.print(table)


@main.command()
@click.argument("agent_id")
@click.argument("session_id")
def show(agent_id: str, session_id: str) -> None:
    """Print the messages of one session."""
    try:
        turns = load_session(AGENTS_DIR, agent_id, session_id)
    except HQError as e:
        _fail(str(e))

    for turn in turns:
        role_style = "cyan" if turn.role == "user" else "magenta"
        meta = " ".join(p for p in (turn.timestamp, turn.model) if p)
        console.print(f"[bold {role_style}]{turn.role}[/bold {role_style}] [dim]{meta}[/dim]")
        console.print(escape_markup(turn.text) if turn.text else "[dim](no text)[/dim]")
        console.print()


@main.group()
def takeaways() -> None:
    """Track action items, insights and decisions."""


@takeaways.command("list")
@click.option("-s", "--status", type=click.Choice(TAKEAWAY_STATUSES))
@click.option("-a", "--agent", help="Only show takeaways from this agent")
def takeaways_list(status: str | None, agent: str | None) -> None:
    """List takeaways, newest first."""
    try:
        items = TakeawayStore(TAKEAWAYS_FILE).select(status=status, agent=agent)
    except HQError as e:
        _fail(str(e))
    if not items:
        console.print("[dim]No takeaways found.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="dim")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Agent")
    table.add_column("Assignee", style="dim")
    table.add_column("Text")

    for item in items:
        style = STATUS_STYLES.get(item.status, "white")
        table.add_row(
            item.id,
            item.type,
            f"[{style}]{item.status}[/{style}]",
            item.agent,
            item.assignee or "",
            escape_markup(item.text),
        )

    console.print(table)


@takeaways.command("add")
@click.argument("text")
@click.option("-a", "--agent", help="Agent that produced the takeaway")
@click.option("-t", "--type", "type_", type=click.Choice(TAKEAWAY_TYPES))
@click.option("--assignee")
@click.option("-s", "--status", type=click.Choice(TAKEAWAY_STATUSES))
@click.option("--confidence", type=float, help="Confidence for insights")
def takeaways_add(
    text: str,
    agent: str | None,
    type_: str | None,
    assignee: str | None,
    status: str | None,
    confidence: float | None,
) -> None:
    """Record a new takeaway."""
    try:
        item = TakeawayStore(TAKEAWAYS_FILE).add(
            text=text,
            agent=agent,
            type=type_,
            assignee=assignee,
            status=status,
            confidence=confidence,
        )
    except HQError as e:
        _fail(str(e))
    console.print(f"Added takeaway [bold]{item.id}[/bold]")


@takeaways.command("update")
@click.argument("takeaway_id")
@click.option("--text")
@click.option("-a", "--agent")
@click.option("-t", "--type", "type_", type=click.Choice(TAKEAWAY_TYPES))
@click.option("--assignee")
@click.option("-s", "--status", type=click.Choice(TAKEAWAY_STATUSES))
@click.option("--confidence", type=float)
def takeaways_update(takeaway_id: str, type_: str | None, **options) -> None:
    """Change fields of an existing takeaway."""
    changes = {k: v for k, v in options.items() if v is not None}
    if type_ is not None:
        changes["type"] = type_
    try:
        item = TakeawayStore(TAKEAWAYS_FILE).update(takeaway_id, **changes)
    except HQError as e:
        _fail(str(e))
    console.print(f"Updated takeaway [bold]{item.id}[/bold]")


@takeaways.command("rm")
@click.argument("takeaway_id")
def takeaways_rm(takeaway_id: str) -> None:
    """Delete a takeaway."""
    try:
        removed = TakeawayStore(TAKEAWAYS_FILE).remove(takeaway_id)
    except HQError as e:
        _fail(str(e))
    if removed:
        console.print(f"Removed takeaway [bold]{takeaway_id}[/bold]")
    else:
        console.print(f"[dim]No takeaway {escape_markup(takeaway_id)}[/dim]")


if __name__ == "__main__":
    main()
