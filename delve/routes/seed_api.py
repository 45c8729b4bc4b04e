"""Seed API routes.

Turns whatever the client sends (int, digit string, free text, nothing) into
the integer seed the generators take. Free text hashes deterministically so a
shared phrase always yields the same dungeon.
"""
import hashlib
import random

from flask import Blueprint, jsonify, request

from ..dungeon.generator import MAX_RANDOM_SEED

bp_seed = Blueprint("seed_api", __name__)

SEED_MODULUS = 9223372036854775807


def coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a bounded non-negative int."""
    if payload_seed is None or isinstance(payload_seed, bool):
        return random.randint(1, MAX_RANDOM_SEED)
    if isinstance(payload_seed, int):
        return payload_seed % SEED_MODULUS
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, MAX_RANDOM_SEED)
        if s.isdigit():
            return int(s) % SEED_MODULUS
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % SEED_MODULUS
    return random.randint(1, MAX_RANDOM_SEED)


@bp_seed.route("/api/dungeon/seed", methods=["POST"])
def set_seed():
    """Resolve a seed.

    Body JSON (optional): { "seed": <int|str|null> }
    Response: { "seed": <int> }
    """
    data = request.get_json(silent=True) or {}
    return jsonify({"seed": coerce_seed(data.get("seed"))})
