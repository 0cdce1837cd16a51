from __future__ import annotations

from threading import RLock

_LOCK = RLock()
_METRICS: dict[str, int] = {
    "http_requests_total": 0,
    "http_errors_5xx_total": 0,
    "process_accepted_total": 0,
    "process_rejected_total": 0,
    "tasks_completed_total": 0,
    "tasks_skipped_total": 0,
    "tasks_failed_total": 0,
    "tasks_with_writes_total": 0,
    "callback_errors_total": 0,
}


def inc(name: str, value: int = 1) -> None:
    with _LOCK:
        _METRICS[name] = _METRICS.get(name, 0) + value


def get(name: str) -> int:
    with _LOCK:
        return _METRICS.get(name, 0)


def reset() -> None:
    with _LOCK:
        for k in _METRICS:
            _METRICS[k] = 0


def render_prometheus() -> str:
    with _LOCK:
        lines: list[str] = []
        for k, v in sorted(_METRICS.items()):
            lines.append(f"# TYPE anime_detector_{k} counter")
            lines.append(f"anime_detector_{k} {v}")
        return "\n".join(lines) + "\n"
