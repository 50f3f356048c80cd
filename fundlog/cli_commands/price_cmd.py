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
from fundlog.utils.formatting import fmt_eur


def register(price_app: typer.Typer) -> None:
    @price_app.command("correct")
    def price_correct(
        holding_id: str = typer.Argument(..., help="Holding id (or unique prefix)."),
        price: float = typer.Argument(..., help="Corrected unit price."),
        on: str = typer.Option("", "--date", help="Date the price applies to, YYYY-MM-DD (defaults to today)."),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Print the rewritten snapshots."),
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Correct a price on a past date and carry it forward over unedited later snapshots."""
        from fundlog.portfolio import correct_price

        when = check_date(on, param="--date")
        before = load(state_path)
        hid = resolve_holding_id(before, holding_id)
        if before.find_holding(hid) is None:
            missing_holding(holding_id)
        state = correct_price(before, hid, price, when)
        commit(state, state_path)

        h = state.find_holding(hid)
        changed = [e.date for e in state.history if e not in before.history]
        console.print(
            Panel(
                f"{h.ticker} = {fmt_eur(price)} on {when}\n"
                f"snapshots rewritten: {len(changed)}\n"
                f"current price now {fmt_eur(h.current_price)}",
                title="Price corrected",
                expand=False,
            )
        )
        if verbose:
            from fundlog.utils.logging import log_event

            for e in state.history:
                if e.date in changed:
                    log_event("snapshot_rewritten", {"date": e.date, "prices": e.prices, "total_value": e.total_value})

    @price_app.command("update")
    def price_update(
        entries: str = typer.Argument(..., help='Comma-separated entries like "ID:101.5,ID2:48.2" (id prefixes allowed).'),
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Set current prices for several holdings and refresh today's snapshot."""
        from fundlog.portfolio import update_prices

        before = load(state_path)
        pairs = [p.strip() for p in entries.split(",") if p.strip()]
        if not pairs:
            raise typer.BadParameter("No entries parsed.")
        prices: dict[str, str] = {}
        for p in pairs:
            if ":" not in p:
                raise typer.BadParameter(f"Bad entry '{p}'. Expected ID:PRICE.")
            ref, px = p.split(":", 1)
            prices[resolve_holding_id(before, ref.strip())] = px.strip()
        state = update_prices(before, prices)
        commit(state, state_path)
        known = sum(1 for hid in prices if state.find_holding(hid) is not None)
        console.print(Panel(f"Updated {known} price(s).", title="Prices", expand=False))

    @price_app.command("history")
    def price_history_cmd(
        ticker: str = typer.Argument(..., help="Ticker to show."),
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Unit price and position value per snapshot, newest first."""
        from fundlog.history.presenter import price_history

        state = load(state_path)
        t = ticker.strip().upper()
        rows = price_history(state.history, state.holdings, t)
        if not rows:
            console.print(Panel(f"No price data found for {t}.", title="Price history", expand=False))
            raise typer.Exit(code=0)
        tbl = Table(title=f"Price history {t}")
        tbl.add_column("date")
        tbl.add_column("price", justify="right", style="bold")
        tbl.add_column("value", justify="right")
        for r in rows:
            tbl.add_row(r.date, fmt_eur(r.price), fmt_eur(r.value))
        console.print(tbl)
