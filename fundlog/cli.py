"""
Fundlog CLI

Primary commands:
- fundlog summary / transactions
- fundlog holding add|edit|delete|list
- fundlog price correct|update|history
- fundlog funds set
- fundlog history add|remove|list|chart
"""
from __future__ import annotations

import typer

app = typer.Typer(
    add_completion=False,
    help="""Fundlog — personal fund portfolio tracker

\b
  fundlog holding add "Vanguard FTSE All-World" 10 100 --fees 5
  fundlog price correct <id> 104.2 --date 2026-03-01
  fundlog history chart

\b
Run 'fundlog <command> --help' for details.
""",
)
holding_app = typer.Typer(add_completion=False, help="Add, edit, delete and list holdings")
app.add_typer(holding_app, name="holding")
price_app = typer.Typer(add_completion=False, help="Current prices and historical price corrections")
app.add_typer(price_app, name="price")
funds_app = typer.Typer(add_completion=False, help="Cash and other assets outside the holdings")
app.add_typer(funds_app, name="funds")
history_app = typer.Typer(add_completion=False, help="Valuation snapshots and chart data")
app.add_typer(history_app, name="history")


@app.callback()
def _configure(
    log_level: str = typer.Option("", "--log-level", help="Override FUNDLOG_LOG_LEVEL (DEBUG, INFO, ...)."),
):
    from fundlog.utils.logging import configure_logging
    from fundlog.utils.settings import safe_load_settings

    configure_logging(log_level or safe_load_settings().log_level)


_COMMANDS_REGISTERED = False


def _register_commands() -> None:
    global _COMMANDS_REGISTERED
    if _COMMANDS_REGISTERED:
        return
    from fundlog.cli_commands.funds_cmd import register as register_funds
    from fundlog.cli_commands.history_cmd import register as register_history
    from fundlog.cli_commands.holding_cmd import register as register_holding
    from fundlog.cli_commands.price_cmd import register as register_price
    from fundlog.cli_commands.report_cmd import register as register_report

    register_report(app)
    register_holding(holding_app)
    register_price(price_app)
    register_funds(funds_app)
    register_history(history_app)
    _COMMANDS_REGISTERED = True


def main():
    _register_commands()
    app()


# Register on import
_register_commands()


if __name__ == "__main__":
    main()
