from datetime import date, datetime
from enum import Enum
from typing import Any


def deep_serialize(obj: Any) -> Any:
    """
    Recursively convert replies and store objects to JSON-safe primitives.
    Sets (family members) come out sorted so responses are stable.
    """
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if hasattr(obj, "model_dump"):
        return deep_serialize(obj.model_dump())
    if isinstance(obj, dict):
        return {k: deep_serialize(v) for k, v in obj.items()}
    if isinstance(obj, (set, frozenset)):
        return sorted(deep_serialize(v) for v in obj)
    if isinstance(obj, (list, tuple)):
        return [deep_serialize(v) for v in obj]
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)


def short_address(address: str, length: int = 10) -> str:
    return address[:length]
