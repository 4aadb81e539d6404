"""Persistence layer for SQLite storage."""

from tradejournal.persistence.database import Database
from tradejournal.persistence.repository import Repository

__all__ = ["Database", "Repository"]
