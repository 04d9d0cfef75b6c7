"""Configuration commands for stockledger CLI."""

import click
from rich.panel import Panel

from stockledger.cli.context import console


@click.command()
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config file.")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Create a template configuration file.

    \b
    Examples:
      stockledger init
      stockledger --config ./ledger.toml init
    """
    from stockledger.config import DEFAULT_CONFIG_PATH, write_template

    config_path = (ctx.find_root().obj or {}).get("config_path") or DEFAULT_CONFIG_PATH

    if config_path.exists() and not force:
        console.print(Panel(
            f"[yellow]Config already exists at {config_path}[/yellow]\n\n"
            "Use [cyan]--force[/cyan] to overwrite it.",
            title="[bold yellow]Exists[/bold yellow]",
            border_style="yellow",
        ))
        return

    path = write_template(config_path)
    console.print(Panel(
        f"Created [cyan]{path}[/cyan]\n\n"
        "Set [cyan]prices.finnhub_token[/cyan] (or FINNHUB_API_TOKEN) for live prices.",
        title="[bold green]Config Created[/bold green]",
        border_style="green",
    ))
