"""Persistence for teams, users, pull requests and reviewer assignments.

Repositories live in ``storage.repositories`` and the bulk deactivation
protocol in ``storage.deactivation``.
"""
from .database import Base, Database, get_db, init_db

__all__ = [
    "Base",
    "Database",
    "get_db",
    "init_db",
]
