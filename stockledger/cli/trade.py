"""Trading commands for stockledger CLI.

Handles buy and sell commands, position exit, and position display.
"""

from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from stockledger.cli.context import console, fail, get_engine
from stockledger.errors import LedgerError


def _position_text(symbol: str, quantity: int, average_cost: float) -> str:
    return (
        f"Symbol:       {symbol}\n"
        f"Quantity:     {quantity}\n"
        f"Average Cost: ${average_cost:,.2f}\n"
        f"Invested:     ${quantity * average_cost:,.2f}"
    )


@click.command()
@click.argument("symbol")
@click.argument("qty", type=int)
@click.option(
    "-p", "--price",
    type=float,
    required=True,
    help="Price paid per share.",
)
@click.pass_context
def buy(ctx: click.Context, symbol: str, qty: int, price: float) -> None:
    """Record a purchase of shares.

    SYMBOL is the stock symbol (e.g., AAPL, MSFT).
    QTY is the number of shares bought.

    If the symbol is already held, its average cost is recomputed as
    the quantity-weighted mean of the old and new cost.

    \b
    Examples:
      stockledger buy AAPL 10 --price 150     # Buy 10 shares at $150
      stockledger buy msft 5 -p 410.25        # Symbols are upper-cased
    """
    engine = get_engine(ctx)

    try:
        position = engine.buy(symbol, qty, price)
    except LedgerError as e:
        fail(e)

    console.print(Panel(
        f"[bold green]Bought {qty} {position.symbol} @ ${price:,.2f}[/bold green]\n\n"
        + _position_text(position.symbol, position.quantity, position.average_cost),
        title="[bold green]Success[/bold green]",
        border_style="green",
    ))


@click.command()
@click.argument("symbol")
@click.argument("qty", type=int)
@click.pass_context
def sell(ctx: click.Context, symbol: str, qty: int) -> None:
    """Record a sale of held shares.

    SYMBOL is the stock symbol.
    QTY is the number of shares sold; it may not exceed the held quantity.

    The average cost of the remaining shares is unchanged. Selling the
    whole holding removes the position.

    \b
    Examples:
      stockledger sell AAPL 4
    """
    engine = get_engine(ctx)

    try:
        position = engine.sell(symbol, qty)
    except LedgerError as e:
        fail(e)

    if position is None:
        message = (
            f"[bold green]Sold {qty} {symbol.strip().upper()}[/bold green]\n\n"
            "All shares sold. Position removed."
        )
    else:
        message = (
            f"[bold green]Sold {qty} {position.symbol}[/bold green]\n\n"
            + _position_text(position.symbol, position.quantity, position.average_cost)
        )

    console.print(Panel(
        message,
        title="[bold green]Success[/bold green]",
        border_style="green",
    ))


@click.command("exit")
@click.argument("symbol", required=False)
@click.option(
    "--all",
    "exit_all",
    is_flag=True,
    default=False,
    help="Exit all open positions.",
)
@click.pass_context
def exit_position(ctx: click.Context, symbol: Optional[str], exit_all: bool) -> None:
    """Sell entire holdings.

    SYMBOL is the stock symbol to exit. Use --all to exit all positions.

    \b
    Examples:
      stockledger exit AAPL     # Sell every AAPL share
      stockledger exit --all    # Close every position
    """
    if not symbol and not exit_all:
        console.print(Panel(
            "[red]Please specify a symbol or use --all to exit all positions.[/red]",
            title="[bold red]Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(2)

    engine = get_engine(ctx)

    try:
        symbols = [p.symbol for p in engine.list_positions()] if exit_all else [symbol]
    except LedgerError as e:
        fail(e)

    if not symbols:
        console.print(Panel(
            "[dim]No open positions to exit[/dim]",
            title="[bold]Exit[/bold]",
            border_style="dim",
        ))
        return

    exited = 0
    for sym in symbols:
        try:
            sold = engine.liquidate(sym)
        except LedgerError as e:
            if exit_all and e.is_client_error:
                # Closed concurrently since it was listed
                console.print(f"[yellow]⚠ {sym}: {e.message}[/yellow]")
                continue
            fail(e)
        console.print(f"[green]✓[/green] {sym.strip().upper()}: sold {sold} shares")
        exited += 1

    console.print(Panel(
        f"[bold]Exited {exited} position(s)[/bold]",
        title="[bold green]Exit Complete[/bold green]",
        border_style="green",
    ))


@click.command()
@click.argument("symbol")
@click.pass_context
def position(ctx: click.Context, symbol: str) -> None:
    """Show one position with its live P&L.

    \b
    Examples:
      stockledger position AAPL
    """
    engine = get_engine(ctx)

    try:
        summary = engine.view.summary_for(symbol)
    except LedgerError as e:
        fail(e)

    if summary is None:
        console.print(Panel(
            f"[yellow]No open position found for {symbol.strip().upper()}[/yellow]",
            title="[bold yellow]Not Found[/bold yellow]",
            border_style="yellow",
        ))
        raise SystemExit(2)

    color = "green" if summary.is_profit else "red"
    sign = "+" if summary.absolute_profit_loss >= 0 else ""
    price_note = "" if summary.price_available else " [dim](live price unavailable)[/dim]"

    console.print(Panel(
        _position_text(summary.symbol, summary.quantity, summary.average_cost)
        + f"\nPrice:        ${summary.current_price:,.2f}{price_note}\n"
        f"Value:        ${summary.current_total_value:,.2f}\n"
        f"P&L:          [{color}]{sign}${summary.absolute_profit_loss:,.2f} "
        f"({sign}{summary.profit_loss_percent:.2f}%)[/{color}]",
        title=f"[bold cyan]{summary.symbol}[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@click.pass_context
def positions(ctx: click.Context) -> None:
    """List held positions at cost.

    Shows symbol, quantity, average cost and invested amount. Use
    'stockledger portfolio' for live prices.

    \b
    Examples:
      stockledger positions
    """
    engine = get_engine(ctx)

    try:
        pos_list = engine.list_positions()
    except LedgerError as e:
        fail(e)

    if not pos_list:
        console.print(Panel(
            "[dim]No open positions[/dim]",
            title="[bold]Positions[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Open Positions",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Symbol", style="bold")
    table.add_column("Qty", justify="right")
    table.add_column("Avg Cost", justify="right")
    table.add_column("Invested", justify="right")

    total_invested = 0.0
    for pos in pos_list:
        table.add_row(
            pos.symbol,
            str(pos.quantity),
            f"${pos.average_cost:,.2f}",
            f"${pos.total_cost:,.2f}",
        )
        total_invested += pos.total_cost

    console.print(table)
    console.print(f"\n[bold]Total Invested:[/bold] ${total_invested:,.2f}")
