from __future__ import annotations

import math
from typing import Any


def to_float(x: Any, default: float = 0.0) -> float:
    """
    Coerce user-ish input to a finite float.

    None, unparseable strings, NaN and infinities become `default`.
    """
    if x is None or isinstance(x, bool):
        return default
    try:
        if isinstance(x, str):
            x = x.strip().replace(",", ".")
        f = float(x)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(f):
        return default
    return f
