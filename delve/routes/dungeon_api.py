"""
project: Delve
module: dungeon_api.py
License: MIT

Dungeon generation and path query API routes.

Generated dungeons are cached per (kind, seed, parameters) so repeated map
and path requests against the same level reuse one instance. Path queries
only read the cached grid.
"""

import os
import threading

from flask import Blueprint, current_app, jsonify, request

from ..dungeon.dungeon import CAVE, DUNGEON_KINDS, ROOMS
from ..dungeon.generator import generate, generate_cave
from ..errors import InvalidConfigError
from ..logging_utils import get_logger
from ..pathfinding.astar import search
from ..pathfinding.helpers import world_to_grid
from ..pathfinding.simplify import simplify_path
from .seed_api import coerce_seed

log = get_logger("delve.api")

# Simple in-process cache (kind, seed, params) -> Dungeon. Lock guards concurrent request threads.
_dungeon_cache = {}
_dungeon_cache_lock = threading.Lock()


def _build_dungeon(kind: str, seed: int, params: tuple):
    kwargs = dict(params)
    if kind == CAVE:
        return generate_cave(seed=seed, **kwargs)
    return generate(seed=seed, **kwargs)


def get_cached_dungeon(kind: str, seed: int, params: tuple):
    max_size = int(current_app.config.get("DELVE_CACHE_SIZE", 8))
    if os.environ.get("DELVE_DISABLE_CACHE") == "1" or max_size <= 0:
        return _build_dungeon(kind, seed, params)
    key = (kind, seed, params)
    with _dungeon_cache_lock:
        dungeon = _dungeon_cache.get(key)
        if dungeon is not None:
            return dungeon
    dungeon = _build_dungeon(kind, seed, params)
    with _dungeon_cache_lock:
        # Another request may have built the same level meanwhile; keep the first
        dungeon = _dungeon_cache.setdefault(key, dungeon)
        while len(_dungeon_cache) > max_size:
            first_key = next(iter(_dungeon_cache.keys()))
            if first_key == key:
                break
            _dungeon_cache.pop(first_key, None)
    return dungeon


def clear_dungeon_cache() -> None:
    with _dungeon_cache_lock:
        _dungeon_cache.clear()


def _int_param(source, name: str, default: int, minimum: int = 0, maximum: int = None) -> int:
    raw = source.get(name)
    if raw is None or raw == "":
        return default
    if isinstance(raw, bool):
        raise InvalidConfigError(name, "expected an integer")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidConfigError(name, f"expected an integer, got {raw!r}") from None
    if value < minimum or (maximum is not None and value > maximum):
        raise InvalidConfigError(name, f"must be between {minimum} and {maximum}, got {value}")
    return value


def _float_param(source, name: str, default: float) -> float:
    raw = source.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise InvalidConfigError(name, f"expected a number, got {raw!r}") from None


def _point_param(source, name: str):
    raw = source.get(name)
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise InvalidConfigError(name, "expected [x, y]")
    try:
        return (float(raw[0]), float(raw[1]))
    except (TypeError, ValueError):
        raise InvalidConfigError(name, f"expected numeric coordinates, got {raw!r}") from None


def _room_params(source) -> tuple:
    cfg = current_app.config
    limit = cfg["DELVE_MAX_DIMENSION"]
    room_limit = cfg["DELVE_MAX_ROOMS"]
    return (
        ("width", _int_param(source, "width", cfg["DELVE_DEFAULT_WIDTH"], 1, limit)),
        ("height", _int_param(source, "height", cfg["DELVE_DEFAULT_HEIGHT"], 1, limit)),
        ("min_rooms", _int_param(source, "min_rooms", cfg["DELVE_DEFAULT_MIN_ROOMS"], 0, room_limit)),
        ("max_rooms", _int_param(source, "max_rooms", cfg["DELVE_DEFAULT_MAX_ROOMS"], 0, room_limit)),
    )


def _cave_params(source) -> tuple:
    cfg = current_app.config
    limit = cfg["DELVE_MAX_DIMENSION"]
    return (
        ("width", _int_param(source, "width", cfg["DELVE_DEFAULT_WIDTH"], 1, limit)),
        ("height", _int_param(source, "height", cfg["DELVE_DEFAULT_HEIGHT"], 1, limit)),
        ("wall_probability", _float_param(source, "wall_probability", 0.45)),
        ("iterations", _int_param(source, "iterations", 5, 0, 50)),
    )


def _dungeon_payload(dungeon):
    data = dungeon.to_json()
    data["stats"] = dungeon.stats()
    return data


bp_dungeon = Blueprint("dungeon", __name__)


@bp_dungeon.route("/api/health")
def health():
    return jsonify({"status": "ok", "version": current_app.config.get("DELVE_VERSION")})


@bp_dungeon.route("/api/dungeon")
def dungeon_rooms():
    """Room-and-corridor dungeon for ``seed`` (random when omitted).

    Query: seed, width, height, min_rooms, max_rooms
    Response: seed, size, ASCII rows, rooms, start/end, metrics and stats.
    """
    seed = coerce_seed(request.args.get("seed"))
    dungeon = get_cached_dungeon(ROOMS, seed, _room_params(request.args))
    return jsonify(_dungeon_payload(dungeon))


@bp_dungeon.route("/api/dungeon/cave")
def dungeon_cave():
    seed = coerce_seed(request.args.get("seed"))
    dungeon = get_cached_dungeon(CAVE, seed, _cave_params(request.args))
    return jsonify(_dungeon_payload(dungeon))


@bp_dungeon.route("/api/dungeon/path", methods=["POST"])
def dungeon_path():
    """Path between two world points on a seeded dungeon.

    Body JSON: { seed, kind?, width?, height?, ..., start: [wx, wy], goal: [wx, wy],
    diagonal?: bool, simplify?: bool }
    Response: { path: [[wx, wy], ...], status, expanded, cost, seed }
    An empty path with a non-"found" status means there is no route.
    """
    data = request.get_json(silent=True) or {}
    if data.get("seed") is None:
        raise InvalidConfigError("seed", "required for path queries")
    seed = coerce_seed(data.get("seed"))
    kind = data.get("kind", ROOMS)
    if kind not in DUNGEON_KINDS:
        raise InvalidConfigError("kind", f"expected one of {', '.join(DUNGEON_KINDS)}")
    params = _cave_params(data) if kind == CAVE else _room_params(data)
    start = _point_param(data, "start")
    goal = _point_param(data, "goal")
    diagonal = bool(data.get("diagonal", False))

    dungeon = get_cached_dungeon(kind, seed, params)
    result = search(world_to_grid(start), world_to_grid(goal), dungeon.grid, diagonal_allowed=diagonal)
    path = result.world_path()
    if data.get("simplify") and path:
        path = simplify_path(path, dungeon.grid)
    log.debug(event="path_query", seed=seed, kind=kind, status=result.status, waypoints=len(path))
    return jsonify(
        {
            "seed": seed,
            "path": [list(p) for p in path],
            "status": result.status,
            "expanded": result.expanded,
            "cost": result.cost,
        }
    )
