"""Database utilities - engine, sessions and scoped access handles."""

from src.siteline.core.db.engine import dispose_engine, get_engine
from src.siteline.core.db.session import DataScope, get_session

__all__ = [
    "DataScope",
    "dispose_engine",
    "get_engine",
    "get_session",
]
