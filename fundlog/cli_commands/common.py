from __future__ import annotations

import typer
from rich.console import Console

from fundlog.models import PortfolioState
from fundlog.utils.dates import parse_iso_date, today_iso
from fundlog.utils.settings import safe_load_settings

console = Console()

STATE_PATH_HELP = "Override FUNDLOG_STATE_PATH (JSON)."


def resolve_state_path(state_path: str) -> str:
    return state_path or safe_load_settings().state_path


def load(state_path: str) -> PortfolioState:
    from fundlog.store import load_state

    return load_state(resolve_state_path(state_path))


def commit(state: PortfolioState, state_path: str) -> None:
    """Persist after a transition. A failed write is reported, not fatal."""
    from fundlog.store import save_state

    path = resolve_state_path(state_path)
    if not save_state(state, path):
        console.print(f"[yellow]Warning:[/yellow] could not write {path}; changes kept for this run only.")


def check_date(value: str, *, param: str = "date") -> str:
    """Validate a YYYY-MM-DD option; empty means today."""
    if not value:
        return today_iso()
    d = parse_iso_date(value)
    if d is None or len(value.strip()) != 10:
        raise typer.BadParameter(f"Bad {param} '{value}'. Expected YYYY-MM-DD.")
    return d.isoformat()


def missing_holding(holding_id: str) -> None:
    console.print(f"[dim]No holding with id {holding_id}; nothing changed.[/dim]")
    raise typer.Exit(code=0)


def resolve_holding_id(state: PortfolioState, ref: str) -> str:
    """Accept a full holding id or an unambiguous prefix of one."""
    if state.find_holding(ref) is not None:
        return ref
    matches = [h.id for h in state.holdings if h.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else ref
