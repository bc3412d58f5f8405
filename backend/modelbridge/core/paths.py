"""Dotted-path access into nested dictionaries."""

from collections.abc import Mapping, MutableMapping
from typing import Any


class _Missing:
    """Marker for a path that does not resolve."""

    _instance = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def split_path(path: str) -> list[str]:
    return [part for part in path.split(".") if part]


def get_path(data: Any, path: str) -> Any:
    """
    Read the value at a dotted path.

    Missing intermediate keys or non-mapping intermediates yield MISSING.
    A stored None is returned as None.
    """
    current = data
    for key in split_path(path):
        if not isinstance(current, Mapping) or key not in current:
            return MISSING
        current = current[key]
    return current


def set_path(data: MutableMapping, path: str, value: Any) -> None:
    """Write a value at a dotted path, creating intermediate dicts as needed."""
    keys = split_path(path)
    if not keys:
        raise ValueError("Empty target path")

    current = data
    for key in keys[:-1]:
        child = current.get(key)
        if not isinstance(child, MutableMapping):
            child = {}
            current[key] = child
        current = child
    current[keys[-1]] = value


def has_path(data: Any, path: str) -> bool:
    return get_path(data, path) is not MISSING
