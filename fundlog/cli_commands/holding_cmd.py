from __future__ import annotations

import typer
from rich.panel import Panel
from rich.table import Table

from fundlog.cli_commands.common import (
    STATE_PATH_HELP,
    check_date,
    commit,
    console,
    load,
    missing_holding,
    resolve_holding_id,
)
from fundlog.utils.formatting import fmt_eur, fmt_signed_eur, fmt_signed_pct, result_style, truncate


def register(holding_app: typer.Typer) -> None:
    @holding_app.command("add")
    def holding_add(
        name: str = typer.Argument(..., help="Fund name (ticker is derived from the first word unless --ticker)."),
        quantity: float = typer.Argument(..., help="Number of units."),
        price: float = typer.Argument(..., help="Average purchase price per unit."),
        fees: float = typer.Option(0.0, "--fees", help="Total transaction fees (sign is ignored)."),
        purchase_date: str = typer.Option("", "--date", help="Purchase date YYYY-MM-DD (defaults to today)."),
        ticker: str = typer.Option("", "--ticker", help="Explicit ticker."),
        sector: str = typer.Option("", "--sector"),
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Add a holding and record today's (and a backdated purchase) snapshot."""
        from fundlog.portfolio import save_holding

        when = check_date(purchase_date, param="--date")
        before = load(state_path)
        state = save_holding(
            before,
            name=name,
            quantity=quantity,
            average_price=price,
            transaction_fees=fees,
            purchase_date=when,
            ticker=ticker or None,
            sector=sector or None,
        )
        commit(state, state_path)
        h = state.holdings[-1]
        console.print(
            Panel(
                f"{h.ticker}  {h.name}\n{h.quantity:g} @ {fmt_eur(h.average_price)}  fees {fmt_eur(h.transaction_fees)}\n"
                f"purchased {h.purchase_date}  id {h.id}",
                title="Holding added",
                expand=False,
            )
        )

    @holding_app.command("edit")
    def holding_edit(
        holding_id: str = typer.Argument(..., help="Holding id (or unique prefix)."),
        quantity: float | None = typer.Option(None, "--quantity", help="New number of units."),
        price: float | None = typer.Option(None, "--price", help="New average purchase price."),
        fees: float | None = typer.Option(None, "--fees", help="New total fees."),
        purchase_date: str = typer.Option("", "--date", help="New purchase date YYYY-MM-DD."),
        name: str = typer.Option("", "--name"),
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Edit a holding. The ticker and current price are kept."""
        from fundlog.portfolio import save_holding

        before = load(state_path)
        hid = resolve_holding_id(before, holding_id)
        h = before.find_holding(hid)
        if h is None:
            missing_holding(holding_id)
        state = save_holding(
            before,
            holding_id=hid,
            name=name or h.name,
            quantity=h.quantity if quantity is None else quantity,
            average_price=h.average_price if price is None else price,
            transaction_fees=h.transaction_fees if fees is None else fees,
            purchase_date=check_date(purchase_date, param="--date") if purchase_date else h.purchase_date,
        )
        commit(state, state_path)
        console.print(Panel(f"Updated {h.ticker} ({hid})", title="Holding edited", expand=False))

    @holding_app.command("delete")
    def holding_delete(
        holding_id: str = typer.Argument(..., help="Holding id (or unique prefix)."),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Delete a holding. Historical snapshots are kept."""
        from fundlog.portfolio import delete_holding

        before = load(state_path)
        hid = resolve_holding_id(before, holding_id)
        h = before.find_holding(hid)
        if h is None:
            missing_holding(holding_id)
        if not yes and not typer.confirm(f"Delete {h.ticker} ({h.name})?"):
            raise typer.Exit(code=0)
        state = delete_holding(before, hid)
        commit(state, state_path)
        console.print(Panel(f"Deleted {h.ticker} ({hid})", title="Holding deleted", expand=False))

    @holding_app.command("list")
    def holding_list(
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Show holdings with their result against cost basis."""
        from fundlog.valuation import holding_result

        state = load(state_path)
        if not state.holdings:
            console.print(Panel("No holdings yet. Add one with: fundlog holding add NAME QTY PRICE", title="Holdings", expand=False))
            raise typer.Exit(code=0)

        tbl = Table(title="Holdings")
        tbl.add_column("id", style="dim")
        tbl.add_column("ticker", style="bold")
        tbl.add_column("name")
        tbl.add_column("qty", justify="right")
        tbl.add_column("avg", justify="right")
        tbl.add_column("price", justify="right")
        tbl.add_column("value", justify="right")
        tbl.add_column("result", justify="right")
        tbl.add_column("return", justify="right")
        for h in state.holdings:
            r = holding_result(h)
            style = result_style(r.result)
            tbl.add_row(
                h.id[:8],
                h.ticker,
                truncate(h.name, 28),
                f"{h.quantity:g}",
                fmt_eur(h.average_price),
                fmt_eur(h.current_price),
                fmt_eur(r.value),
                f"[{style}]{fmt_signed_eur(r.result)}[/{style}]",
                f"[{style}]{fmt_signed_pct(r.percentage)}[/{style}]",
            )
        console.print(tbl)
