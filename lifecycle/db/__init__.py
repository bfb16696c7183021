"""Database configuration and session management."""
from lifecycle.db.database import (
    Base,
    engine,
    AsyncSessionLocal,
    get_db,
    init_db,
    transaction,
)

__all__ = [
    "Base",
    "engine",
    "AsyncSessionLocal",
    "get_db",
    "init_db",
    "transaction",
]
