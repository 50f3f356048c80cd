from __future__ import annotations

import typer
from rich.panel import Panel

from fundlog.cli_commands.common import STATE_PATH_HELP, commit, console, load
from fundlog.utils.formatting import fmt_eur


def register(funds_app: typer.Typer) -> None:
    @funds_app.command("set")
    def funds_set(
        cash: float = typer.Option(0.0, "--cash", help="Free cash."),
        assets: float = typer.Option(0.0, "--assets", help="Receivable claims / other assets."),
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Replace the funds record and refresh today's snapshot."""
        from fundlog.portfolio import set_funds

        state = set_funds(load(state_path), cash=cash, assets=assets)
        commit(state, state_path)
        console.print(
            Panel(f"cash {fmt_eur(state.funds.cash)}  assets {fmt_eur(state.funds.assets)}", title="Funds", expand=False)
        )
