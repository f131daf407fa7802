"""Settings for graphedit, optionally loaded from a ``graphedit.toml`` file.

Example::

    [canvas]
    width = 1280
    height = 720

    [history]
    limit = 200

    [store]
    dir = "graphs"

    [analytics]
    damping = 0.85
    max_iter = 50
    tol = 1e-6
    directed_paths = false
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "graphedit.toml"


@dataclass
class Settings:
    canvas_width: float = 960.0
    canvas_height: float = 640.0
    history_limit: int = 0  # 0 keeps every snapshot
    store_dir: Path = field(default_factory=lambda: Path("graphs"))
    pagerank_damping: float = 0.85
    pagerank_max_iter: int = 50
    pagerank_tol: float = 1e-6
    directed_paths: bool = False


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _number(table: dict[str, Any], key: str, default: float, *, name: str, minimum: float = 0.0) -> float:
    value = table.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return float(value)


def _integer(table: dict[str, Any], key: str, default: int, *, name: str, minimum: int = 0) -> int:
    value = table.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def load_settings(path: Path | None) -> Settings:
    """Load settings from TOML; missing tables and keys keep their defaults."""
    if path is None:
        return Settings()

    import tomllib

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    defaults = Settings()

    canvas = _coerce_dict(data.get("canvas"))
    history = _coerce_dict(data.get("history"))
    store = _coerce_dict(data.get("store"))
    analytics = _coerce_dict(data.get("analytics"))

    store_dir = store.get("dir")
    if store_dir is None:
        resolved_store = defaults.store_dir
    elif isinstance(store_dir, str) and store_dir.strip():
        resolved_store = Path(store_dir)
        if not resolved_store.is_absolute():
            resolved_store = path.parent / resolved_store
    else:
        raise ValueError("store.dir must be a non-empty string")

    damping = _number(analytics, "damping", defaults.pagerank_damping, name="analytics.damping")
    if damping > 1:
        raise ValueError("analytics.damping must be <= 1")

    directed = analytics.get("directed_paths", defaults.directed_paths)
    if not isinstance(directed, bool):
        raise ValueError("analytics.directed_paths must be a boolean")

    return Settings(
        canvas_width=_number(canvas, "width", defaults.canvas_width, name="canvas.width", minimum=1),
        canvas_height=_number(canvas, "height", defaults.canvas_height, name="canvas.height", minimum=1),
        history_limit=_integer(history, "limit", defaults.history_limit, name="history.limit"),
        store_dir=resolved_store,
        pagerank_damping=damping,
        pagerank_max_iter=_integer(
            analytics, "max_iter", defaults.pagerank_max_iter, name="analytics.max_iter", minimum=1
        ),
        pagerank_tol=_number(analytics, "tol", defaults.pagerank_tol, name="analytics.tol"),
        directed_paths=directed,
    )


def find_settings(start: Path) -> Path | None:
    """Find ``graphedit.toml`` by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        candidate = p / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
