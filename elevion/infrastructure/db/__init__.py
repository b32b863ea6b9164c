"""
Database Infrastructure Package for Elevion

Exports database utilities and the storage gateway.
"""

from elevion.infrastructure.db.database import (
    DatabaseManager,
    get_db_manager,
    session_scope,
    init_db,
    close_db,
)
from elevion.infrastructure.db.storage import DatabaseStorage, get_storage


__all__ = [
    # Database management
    "DatabaseManager",
    "get_db_manager",
    "session_scope",
    "init_db",
    "close_db",
    # Gateway
    "DatabaseStorage",
    "get_storage",
]
