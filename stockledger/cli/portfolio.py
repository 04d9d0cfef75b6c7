"""Portfolio commands for stockledger CLI.

Handles the live P&L snapshot and single-symbol price quotes.
"""

import click
from rich.panel import Panel
from rich.table import Table

from stockledger.cli.context import console, fail, get_engine
from stockledger.errors import LedgerError
from stockledger.ledger import normalize_symbol
from stockledger.models import PortfolioAggregate


def _signed(value: float, fmt: str = ",.2f", prefix: str = "$", suffix: str = "") -> str:
    color = "green" if value >= 0 else "red"
    sign = "+" if value >= 0 else "-"
    return f"[{color}]{sign}{prefix}{abs(value):{fmt}}{suffix}[/{color}]"


def render_portfolio(aggregate: PortfolioAggregate) -> None:
    """Print a portfolio snapshot as a table with totals."""
    if not aggregate.positions:
        console.print(Panel(
            "[dim]No open positions[/dim]",
            title="[bold]Portfolio[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Portfolio",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Symbol", style="bold")
    table.add_column("Qty", justify="right")
    table.add_column("Avg Cost", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Invested", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("P&L %", justify="right")

    for s in aggregate.positions:
        price = f"${s.current_price:,.2f}"
        if not s.price_available:
            price += " [dim]*[/dim]"
        table.add_row(
            s.symbol,
            str(s.quantity),
            f"${s.average_cost:,.2f}",
            price,
            f"${s.total_invested:,.2f}",
            f"${s.current_total_value:,.2f}",
            _signed(s.absolute_profit_loss),
            _signed(s.profit_loss_percent, fmt=".2f", prefix="", suffix="%"),
        )

    console.print(table)

    if aggregate.unpriced_symbols:
        console.print("[dim]* live price unavailable, priced at average cost[/dim]")

    summary = (
        f"Positions:      {aggregate.total_items}\n"
        f"Total Invested: ${aggregate.total_invested:,.2f}\n"
        f"Current Value:  ${aggregate.current_total_value:,.2f}\n"
        f"{'─' * 30}\n"
        f"[bold]Total P&L:      {_signed(aggregate.total_gain_loss)} "
        f"({_signed(aggregate.profit_loss_percent, fmt='.2f', prefix='', suffix='%')})[/bold]\n"
        f"[dim]Value-weighted P&L: {aggregate.value_weighted_percent:+.2f}%[/dim]"
    )

    console.print(Panel(
        summary,
        title="[bold cyan]Summary[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@click.pass_context
def portfolio(ctx: click.Context) -> None:
    """Display all holdings with live prices and P&L.

    Prices come from the configured price source. A holding whose price
    cannot be fetched is shown at its average cost.

    \b
    Examples:
      stockledger portfolio
    """
    engine = get_engine(ctx)

    try:
        aggregate = engine.snapshot()
    except LedgerError as e:
        fail(e)

    render_portfolio(aggregate)


@click.command()
@click.argument("symbol")
@click.pass_context
def quote(ctx: click.Context, symbol: str) -> None:
    """Show the current price of a symbol.

    \b
    Examples:
      stockledger quote AAPL
    """
    engine = get_engine(ctx)

    try:
        symbol = normalize_symbol(symbol)
    except LedgerError as e:
        fail(e)

    price = engine.view.fetch_prices([symbol]).get(symbol)

    if price is None:
        console.print(Panel(
            f"[yellow]No price available for {symbol}[/yellow]",
            title="[bold yellow]Unavailable[/bold yellow]",
            border_style="yellow",
        ))
        raise SystemExit(1)

    console.print(Panel(
        f"[bold]{symbol}[/bold]  ${price:,.2f}",
        title="[bold cyan]Quote[/bold cyan]",
        border_style="cyan",
    ))
