from __future__ import annotations

from threading import RLock

_LOCK = RLock()
_INITIAL: dict[str, int] = {
    "http_requests_total": 0,
    "http_errors_5xx_total": 0,
    "lookup_cache_hit_total": 0,
    "lookup_cache_miss_total": 0,
    "lookup_singleflight_shared_total": 0,
    "lookup_invalid_total": 0,
    "omdb_requests_total": 0,
    "omdb_failures_total": 0,
}
_METRICS: dict[str, int] = dict(_INITIAL)


def inc(name: str, value: int = 1) -> None:
    with _LOCK:
        _METRICS[name] = _METRICS.get(name, 0) + value


def snapshot() -> dict[str, int]:
    with _LOCK:
        return dict(_METRICS)


def reset() -> None:
    with _LOCK:
        _METRICS.clear()
        _METRICS.update(_INITIAL)


def render_prometheus() -> str:
    with _LOCK:
        lines: list[str] = []
        for k, v in sorted(_METRICS.items()):
            lines.append(f"# TYPE {k} counter")
            lines.append(f"{k} {v}")
        return "\n".join(lines) + "\n"
