from __future__ import annotations

import json
import logging
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

console = Console()

_CONFIGURED = False


def _to_jsonable(x: Any) -> Any:
    if is_dataclass(x) and not isinstance(x, type):
        return asdict(x)
    if hasattr(x, "model_dump"):
        return x.model_dump()
    if isinstance(x, (datetime, date)):
        return x.isoformat()
    return x


def log_event(event: str, payload: dict[str, Any]) -> None:
    console.print(f"[bold]{event}[/bold]")
    console.print_json(json.dumps({k: _to_jsonable(v) for k, v in payload.items()}, default=str))


def configure_logging(level: str = "WARNING") -> None:
    """Route stdlib logging through rich. Safe to call more than once."""
    global _CONFIGURED
    root = logging.getLogger("fundlog")
    lvl = logging.getLevelName(str(level or "WARNING").upper())
    root.setLevel(lvl if isinstance(lvl, int) else logging.WARNING)
    if _CONFIGURED:
        return
    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    _CONFIGURED = True
