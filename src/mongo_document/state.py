"""Persisted-state flag carried by each document instance."""

from typing import Any

PERSISTED_ATTR = "_is_persisted"


def is_persisted(instance: Any) -> bool:
    return bool(getattr(instance, PERSISTED_ATTR, False))


def mark_persisted(instance: Any, value: bool = True) -> None:
    setattr(instance, PERSISTED_ATTR, value)
