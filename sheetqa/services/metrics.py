from __future__ import annotations

import time
import contextvars
from typing import Any, Dict, Optional, List

# Context-local aggregator for a single answer request
metrics_ctx: contextvars.ContextVar[Optional[Dict[str, Any]]] = contextvars.ContextVar("answer_metrics", default=None)


def now() -> float:
    return time.perf_counter()


def elapsed_ms(t0: float) -> int:
    return int((time.perf_counter() - t0) * 1000)


def make_aggregator() -> Dict[str, Any]:
    return {
        "llm": {},  # provider/model -> { calls, errors, latency_ms: [ms] }
        "started": now(),
    }


def begin_run() -> contextvars.Token:
    return metrics_ctx.set(make_aggregator())


def end_run(token: Optional[contextvars.Token] = None) -> Dict[str, Any]:
    agg = metrics_ctx.get() or {}
    out: Dict[str, Any] = {"llm": {}}
    for key, v in (agg.get("llm") or {}).items():
        lat: List[int] = v.get("latency_ms", []) or []
        out["llm"][key] = {
            "calls": int(v.get("calls", 0)),
            "errors": int(v.get("errors", 0)),
            "latency_ms": sum(lat),
            "max_ms": max(lat) if lat else None,
        }
    if "started" in agg:
        out["total_ms"] = elapsed_ms(agg["started"])
    if token is not None:
        metrics_ctx.reset(token)
    else:
        metrics_ctx.set(None)
    return out


def record_llm(provider: str, model: str, *, latency_ms: int = 0, ok: bool = True) -> None:
    agg = metrics_ctx.get()
    if agg is None:
        return
    key = f"{provider}:{model}"
    llm = agg["llm"].setdefault(key, {"calls": 0, "latency_ms": [], "errors": 0})
    llm["calls"] += 1
    if latency_ms:
        llm["latency_ms"].append(int(latency_ms))
    if not ok:
        llm["errors"] += 1
