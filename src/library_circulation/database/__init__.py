"""
Database package for the library circulation system.

This package provides:
- SQLAlchemy schema definitions (schema.py)
- Session management and connection handling (session.py)
- Keyed repositories returning Pydantic snapshots, one per entity kind
"""

from .book_repository import BookRepository
from .borrowing_repository import BorrowingRecordRepository
from .branch_repository import BranchRepository
from .patron_repository import PatronRepository
from .repository import BaseRepository
from .schema import Base
from .session import DatabaseManager, safe_commit, safe_query

__all__ = [
    "Base",
    "BaseRepository",
    "BookRepository",
    "BorrowingRecordRepository",
    "BranchRepository",
    "DatabaseManager",
    "PatronRepository",
    "safe_commit",
    "safe_query",
]
