"""Shared helpers for stockledger CLI commands."""

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from stockledger.errors import ErrorKind, LedgerError

console = Console()

EXIT_SERVICE_ERROR = 1
EXIT_CLIENT_ERROR = 2

ERROR_TITLES = {
    ErrorKind.VALIDATION: "Validation Error",
    ErrorKind.RESOURCE_NOT_FOUND: "Not Found",
    ErrorKind.INSUFFICIENT_SHARES: "Insufficient Shares",
    ErrorKind.STORAGE_FAILURE: "Storage Error",
}


def error_panel(message: str, title: str = "Error") -> Panel:
    return Panel(
        message,
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    )


def _get_settings(ctx: click.Context):
    """Load settings, honouring the global --config and --db options."""
    from stockledger.config import ConfigError, load_settings

    obj = ctx.find_root().obj or {}
    try:
        settings = load_settings(obj.get("config_path"))
    except ConfigError as e:
        console.print(error_panel(f"[red]{escape(str(e))}[/red]", "Configuration Error"))
        raise SystemExit(EXIT_SERVICE_ERROR)

    if obj.get("db_path") is not None:
        settings.database.path = obj["db_path"]
    return settings


def get_engine(ctx: click.Context):
    """Build a ledger engine from the current configuration."""
    from stockledger.db.store import SQLitePositionStore
    from stockledger.ledger import LedgerEngine
    from stockledger.oracles import build_oracle

    settings = _get_settings(ctx)

    try:
        store = SQLitePositionStore(settings.database.path, timeout=settings.database.timeout)
    except LedgerError as e:
        fail(e)

    oracle = build_oracle(settings)
    ctx.call_on_close(oracle.close)

    return LedgerEngine(
        store,
        oracle,
        price_timeout=settings.prices.timeout,
        max_workers=settings.prices.max_workers,
    )


def fail(error: LedgerError) -> None:
    """Render a ledger error and exit with its code."""
    title = ERROR_TITLES.get(error.kind, "Error")
    text = f"[red]{escape(error.message)}[/red]"
    if error.kind == ErrorKind.STORAGE_FAILURE:
        text += (
            "\n\n[dim]The operation may or may not have been recorded. "
            "Check with 'stockledger positions' before retrying.[/dim]"
        )
    console.print(error_panel(text, title))
    raise SystemExit(EXIT_CLIENT_ERROR if error.is_client_error else EXIT_SERVICE_ERROR)
