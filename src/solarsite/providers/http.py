"""Shared GET-and-decode loop for the HTTP providers."""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

import requests

from solarsite.core.debug import DebugCollector


def get_json(
    session: requests.Session,
    url: str,
    params: Dict[str, str],
    *,
    timeout: float,
    attempts: int,
    debug: DebugCollector,
    stage: str,
    backoff_s: float = 0.5,
    site: Optional[str] = None,
) -> Any:
    """GET ``url`` and decode JSON, trying up to ``attempts`` times.

    The last exception is re-raised unchanged; callers decide whether a failure
    turns into a fallback.
    """
    attempts = max(1, int(attempts))
    for attempt in range(1, attempts + 1):
        try:
            resp = session.get(url, params=params, timeout=timeout)
            resp.raise_for_status()
            return resp.json()
        except Exception as exc:
            if attempt == attempts:
                raise
            debug.emit(f"{stage}.retry", {"attempt": attempt, "error": str(exc)}, site=site)
            time.sleep(backoff_s * attempt)
    raise RuntimeError("unreachable")  # pragma: no cover


__all__ = ["get_json"]
