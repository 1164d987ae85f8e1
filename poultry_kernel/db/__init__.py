"""Database layer - engine, base classes, and column types."""

from poultry_kernel.db.base import UUID, Base, TrackedBase, UUIDString
from poultry_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    session_scope,
)
from poultry_kernel.db.types import Count, Money, Weight

__all__ = [
    "get_engine",
    "get_session",
    "session_scope",
    "create_tables",
    "Base",
    "TrackedBase",
    "UUIDString",
    "UUID",
    "Money",
    "Weight",
    "Count",
]
