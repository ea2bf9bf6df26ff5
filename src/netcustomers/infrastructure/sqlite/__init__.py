"""
SQLite infrastructure package.

Provides the local JSON document store.
"""

from netcustomers.infrastructure.sqlite.store import LocalStore

__all__ = ["LocalStore"]
