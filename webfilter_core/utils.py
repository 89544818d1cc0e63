"""
webfilter_core.utils
--------------------
Lightweight helpers for transaction ids and ordered JSON serialization.
These functions keep record encoding byte-exact across invocations.
"""

from __future__ import annotations
import json, uuid
from typing import Any, Dict


def new_id() -> str:
    return uuid.uuid4().hex


def ordered_json(obj: Dict[str, Any]) -> bytes:
    # Deterministic, minimal JSON; key order is the dict's insertion order
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")


def load_json(data: bytes) -> Any:
    return json.loads(data.decode("utf-8"))
