"""Interactive operator console for the admin commands.

Pattern: Prompt Renderer
-------------------------
The console is the human-facing boundary.  It collects credentials, logs into
the admin database through ``AdminSession``, runs exactly one command and
renders the outcome with Rich.  It knows nothing about digests or the wire
protocol; every decision is delegated to the session layer.
"""

from __future__ import annotations

import getpass
from collections.abc import Callable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mongo_auth.admin.levels import LoggingLevel, TracingLevel
from mongo_auth.admin.session import AdminSession
from mongo_auth.auth.digest import compute_credential_digest
from mongo_auth.channel.base import CommandChannel
from mongo_auth.settings import ClientSettings

console = Console()


def _prompt_credentials(username: str | None, digest: bool) -> tuple[str, str]:
    if not username:
        username = input("  Username: ").strip()
    label = "Credential digest" if digest else "Password"
    secret = getpass.getpass(f"  {label}: ")
    return username, secret


def _format_size(size: float | int | None) -> str:
    if size is None:
        return "-"
    size = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TiB"


def run_hash(username: str | None) -> int:
    """Print the credential digest for a user, for use with ``--digest``."""
    username, secret = _prompt_credentials(username, digest=False)
    if not username or not secret:
        console.print("[red]Username and password are required.[/red]")
        return 1
    console.print(compute_credential_digest(username, secret))
    return 0


def render_databases(databases: list[dict]) -> Table:
    table = Table(title="Databases")
    table.add_column("Name", style="bold")
    table.add_column("Size on disk", justify="right", style="cyan")
    table.add_column("Empty", justify="center")
    for db in databases:
        table.add_row(
            str(db.get("name", "?")),
            _format_size(db.get("sizeOnDisk")),
            "yes" if db.get("empty") else "",
        )
    return table


def _list_databases(admin: AdminSession) -> bool:
    databases = admin.list_databases()
    if databases is None:
        return False
    console.print(render_databases(databases))
    return True


def _level_action(setter: str, level: LoggingLevel | TracingLevel) -> Callable[[AdminSession], bool]:
    def action(admin: AdminSession) -> bool:
        ok = getattr(admin, setter)(level)
        if ok:
            console.print(f"  [green]{setter.removeprefix('set_').replace('_', ' ')}[/green] -> {level.name}")
        return ok

    return action


def build_action(command: str, level: str | None = None) -> Callable[[AdminSession], bool]:
    """Map a CLI subcommand onto an ``AdminSession`` operation."""
    if command == "databases":
        return _list_databases
    if command == "shutdown":
        return AdminSession.shutdown
    if command == "log-level":
        return _level_action("set_logging_level", LoggingLevel[level])
    if command == "trace-level":
        return _level_action("set_tracing_level", TracingLevel[level])
    if command == "query-trace-level":
        return _level_action("set_query_tracing_level", TracingLevel[level])
    raise ValueError(f"Unknown command: {command}")


def run_admin(
    command: str,
    settings: ClientSettings,
    *,
    host: str | None = None,
    port: int | None = None,
    username: str | None = None,
    digest: bool = False,
    level: str | None = None,
    channel: CommandChannel | None = None,
) -> int:
    """Log into the admin database, run *command*, log out.  Returns an exit code.

    The connection is closed on the way out whatever the outcome.
    """
    action = build_action(command, level)
    address = settings.resolve_address(host, port)
    console.print(Panel(f"[bold]mongo-auth[/bold] {command} @ {address}", border_style="blue"))

    username, secret = _prompt_credentials(username, digest)
    admin = AdminSession.login(
        host,
        port,
        username,
        secret,
        plaintext=not digest,
        channel=channel,
        settings=settings,
    )
    try:
        return _run_logged_in(admin, command, username, action)
    finally:
        admin.session.channel.close(admin.session.connection)


def _run_logged_in(
    admin: AdminSession,
    command: str,
    username: str,
    action: Callable[[AdminSession], bool],
) -> int:
    if not admin.authenticated:
        console.print(f"[red]Authentication failed:[/red] {admin.error} ({admin.error_code})")
        return 1
    console.print(f"  [green]Authenticated[/green] as [bold]{username}[/bold] on {admin.describe()}")

    ok = action(admin)
    if not ok:
        console.print(f"[red]{command} failed.[/red]")

    if command == "shutdown":
        # The server is gone; there is nothing left to log out of.
        if ok:
            console.print("  [yellow]Shutdown acknowledged.[/yellow]")
    elif not admin.logout():
        console.print("[yellow]Logout was refused by the server.[/yellow]")
    return 0 if ok else 1
