"""Shared CLI helpers: JSON conversion of result dataclasses and output files."""
from __future__ import annotations

import dataclasses
import datetime as dt
import json
import math
from enum import Enum
from pathlib import Path
from typing import Any

import pandas as pd


def to_jsonable(obj: Any) -> Any:
    """Recursively convert results into plain JSON types.

    Dataclasses become dicts, enums their values, datetimes ISO strings and
    non-finite floats (``math.inf`` payback) ``None``.
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (dt.datetime, dt.date)):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    if hasattr(obj, "item") and not isinstance(obj, (str, bytes)):
        # numpy scalars
        return to_jsonable(obj.item())
    return obj


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(to_jsonable(payload), indent=2, allow_nan=False))


def frame_to_records(df: pd.DataFrame) -> list:
    """DataFrame -> list of JSON-safe row dicts (NaN -> None)."""
    cleaned = df.astype(object).where(pd.notna(df), None)
    return [to_jsonable(row) for row in cleaned.to_dict(orient="records")]


__all__ = ["to_jsonable", "write_json", "frame_to_records"]
