from __future__ import annotations

import typer
from rich.panel import Panel
from rich.table import Table

from fundlog.cli_commands.common import STATE_PATH_HELP, console, load
from fundlog.utils.formatting import fmt_eur, fmt_signed_eur, fmt_signed_pct, result_style


def register(app: typer.Typer) -> None:
    @app.command("summary")
    def summary_cmd(
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Total value, invested capital and result."""
        from fundlog.valuation import summarize

        state = load(state_path)
        s = summarize(state.holdings, state.funds)
        style = result_style(s.total_result)
        console.print(
            Panel(
                f"Total value: {fmt_eur(s.current_value)}  (ETFs {fmt_eur(s.etf_value)}  cash {fmt_eur(s.cash)}  assets {fmt_eur(s.assets)})\n"
                f"Invested: {fmt_eur(s.total_invested)}  (fees {fmt_eur(s.total_fees)})\n"
                f"Result: [{style}]{fmt_signed_eur(s.total_result)} ({fmt_signed_pct(s.percentage_result)})[/{style}]",
                title="Portfolio summary",
                expand=False,
            )
        )

    @app.command("transactions")
    def transactions_cmd(
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Purchases, newest first, with total fees and invested capital."""
        from fundlog.portfolio import transactions
        from fundlog.valuation import total_invested

        state = load(state_path)
        rows = transactions(state)
        if not rows:
            console.print(Panel("No transactions yet.", title="Transactions", expand=False))
            raise typer.Exit(code=0)
        tbl = Table(title="Transactions")
        tbl.add_column("date")
        tbl.add_column("ticker", style="bold")
        tbl.add_column("qty", justify="right")
        tbl.add_column("price", justify="right")
        tbl.add_column("fees", justify="right")
        tbl.add_column("total", justify="right")
        for h in rows:
            tbl.add_row(
                h.purchase_date or "-",
                h.ticker,
                f"{h.quantity:g}",
                fmt_eur(h.average_price),
                fmt_eur(h.transaction_fees),
                fmt_eur(h.invested),
            )
        console.print(tbl)
        fees = sum(h.transaction_fees for h in rows)
        console.print(f"Total fees: {fmt_eur(fees)}   Total invested: {fmt_eur(total_invested(rows))}")
