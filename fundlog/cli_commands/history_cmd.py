from __future__ import annotations

import typer
from rich.panel import Panel
from rich.table import Table

from fundlog.cli_commands.common import STATE_PATH_HELP, check_date, commit, console, load
from fundlog.utils.formatting import fmt_eur


def register(history_app: typer.Typer) -> None:
    @history_app.command("add")
    def history_add(
        value: float = typer.Argument(..., help="Total portfolio value on that date."),
        on: str = typer.Option("", "--date", help="YYYY-MM-DD (defaults to today)."),
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Add (or replace) a manual total, e.g. values from before tracking started."""
        from fundlog.portfolio import add_manual_point

        when = check_date(on, param="--date")
        state = add_manual_point(load(state_path), when, value)
        commit(state, state_path)
        console.print(Panel(f"{when}: {fmt_eur(value)}", title="History point", expand=False))

    @history_app.command("remove")
    def history_remove(
        on: str = typer.Argument(..., help="Date of the point to remove, YYYY-MM-DD."),
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Remove the snapshot on a date."""
        from fundlog.portfolio import remove_manual_point

        when = check_date(on)
        before = load(state_path)
        state = remove_manual_point(before, when)
        commit(state, state_path)
        removed = len(before.history) - len(state.history)
        console.print(Panel(f"Removed {removed} point(s) on {when}.", title="History", expand=False))

    @history_app.command("list")
    def history_list(
        tail: int = typer.Option(0, "--tail", help="Only the last N snapshots (0 = all)."),
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Snapshot series, newest first."""
        state = load(state_path)
        entries = list(reversed(state.history))
        if tail > 0:
            entries = entries[:tail]
        if not entries:
            console.print(Panel("No history yet.", title="History", expand=False))
            raise typer.Exit(code=0)
        tbl = Table(title="Portfolio history")
        tbl.add_column("date")
        tbl.add_column("value", justify="right", style="bold")
        tbl.add_column("invested", justify="right")
        tbl.add_column("kind", style="dim")
        tbl.add_column("breakdown")
        for e in entries:
            parts = ", ".join(f"{t} {fmt_eur(v, show_cents=False)}" for t, v in sorted((e.breakdown or {}).items()))
            tbl.add_row(e.date, fmt_eur(e.total_value), fmt_eur(e.total_invested), "manual" if e.is_manual else "auto", parts)
        console.print(tbl)

    @history_app.command("chart")
    def history_chart(
        csv_out: str = typer.Option("", "--csv", help="Also write the chart data to this CSV path."),
        state_path: str = typer.Option("", "--state-path", help=STATE_PATH_HELP),
    ):
        """Per-asset series with gaps filled, as fed to a chart."""
        from fundlog.history.presenter import chart_frame
        from fundlog.utils.settings import safe_load_settings

        state = load(state_path)
        df = chart_frame(state.history, state.holdings, unknown_series=safe_load_settings().unknown_series)
        if df.empty:
            console.print(Panel("Not enough data for a chart yet.", title="Chart", expand=False))
            raise typer.Exit(code=0)
        if csv_out:
            df.to_csv(csv_out)
        tbl = Table(title="Chart data")
        tbl.add_column("date")
        for col in df.columns:
            tbl.add_column(str(col), justify="right")
        for idx, row in df.iterrows():
            tbl.add_row(str(idx), *["" if v != v else f"{float(v):,.0f}" for v in row.tolist()])
        console.print(tbl)
