"""Deterministic debug collectors for structured JSON events.

Every analysis stage reports what it computed (and which fallbacks it took)
through a :class:`DebugCollector`. Payload keys are sorted recursively so the
same event always serialises to the same bytes. Stages that run concurrently
buffer into a :class:`ListDebugCollector` and are replayed in a fixed order,
so the analysis event sequence does not depend on thread scheduling.
Request events that providers emit from worker threads may still interleave.
"""
from __future__ import annotations

import datetime as _dt
import json
import math
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol


class DebugCollector(Protocol):
    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any = None, site: Optional[str] = None, component: Optional[str] = None) -> None:
        ...


def _json_safe_scalar(val: Any) -> Any:
    """Convert datetimes and non-finite floats to JSON-friendly values."""
    if isinstance(val, (_dt.datetime, _dt.date, _dt.time)) or hasattr(val, "isoformat"):
        try:
            return val.isoformat()
        except Exception:
            return str(val)
    if isinstance(val, float) and not math.isfinite(val):
        return None
    return val


def _ordered(obj: Any) -> Any:
    """Recursively order mappings for deterministic JSON dumps."""
    if isinstance(obj, dict):
        return {str(k): _ordered(obj[k]) for k in sorted(obj, key=str)}
    if isinstance(obj, (list, tuple)):
        return [_ordered(v) for v in obj]
    return _json_safe_scalar(obj)


def _event(stage: str, payload: Dict[str, Any], ts: Any, site: Optional[str], component: Optional[str]) -> Dict[str, Any]:
    return {
        "stage": stage,
        "ts": _json_safe_scalar(ts),
        "site": site,
        "component": component,
        "payload": _ordered(payload),
    }


class NullDebugCollector:
    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any = None, site: Optional[str] = None, component: Optional[str] = None) -> None:  # noqa: D401
        """Discard events (no-op)."""
        return


@dataclass
class ListDebugCollector:
    events: List[Dict[str, Any]] = field(default_factory=list)

    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any = None, site: Optional[str] = None, component: Optional[str] = None) -> None:
        self.events.append(_event(stage, payload, ts, site, component))

    def stages(self) -> List[str]:
        return [event["stage"] for event in self.events]

    def replay(self, target: DebugCollector) -> None:
        """Re-emit buffered events into ``target`` in the order they were collected."""
        for event in self.events:
            target.emit(event["stage"], event["payload"], ts=event["ts"], site=event["site"], component=event["component"])


class JsonlDebugWriter:
    """Append one JSON object per event to a ``.jsonl`` file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("a", encoding="utf-8")
        self._lock = threading.Lock()

    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any = None, site: Optional[str] = None, component: Optional[str] = None) -> None:
        line = json.dumps(_event(stage, payload, ts, site, component), sort_keys=True)
        with self._lock:
            self._fh.write(line + "\n")
            self._fh.flush()

    def close(self) -> None:
        if not self._fh.closed:
            self._fh.close()

    def __del__(self):  # pragma: no cover - best effort cleanup
        try:
            self.close()
        except Exception:
            pass


class JsonDebugWriter:
    """Collect all events in memory then write a single JSON array."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._events: List[Dict[str, Any]] = []

    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any = None, site: Optional[str] = None, component: Optional[str] = None) -> None:
        self._events.append(_event(stage, payload, ts, site, component))

    def close(self) -> None:
        self.path.write_text(json.dumps(self._events, indent=2, sort_keys=True))


def build_debug_collector(path: str | Path) -> DebugCollector:
    """Factory: .json -> JsonDebugWriter, otherwise JsonlDebugWriter."""
    if str(path).lower().endswith(".json"):
        return JsonDebugWriter(path)
    return JsonlDebugWriter(path)


class ScopedDebugCollector:
    """Wrapper that injects fixed site/component context into every emit."""

    def __init__(self, inner: DebugCollector, *, site: Optional[str] = None, component: Optional[str] = None):
        self.inner = inner
        self.site = site
        self.component = component

    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any = None, site: Optional[str] = None, component: Optional[str] = None) -> None:
        self.inner.emit(
            stage,
            payload,
            ts=ts,
            site=site if site is not None else self.site,
            component=component if component is not None else self.component,
        )


__all__ = [
    "DebugCollector",
    "NullDebugCollector",
    "ListDebugCollector",
    "JsonlDebugWriter",
    "JsonDebugWriter",
    "ScopedDebugCollector",
    "build_debug_collector",
]
