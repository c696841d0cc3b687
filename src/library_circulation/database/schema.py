"""
SQLAlchemy database schema for the library circulation entity store.

Four independent tables, one per entity kind, keyed by identifier:

- books (by ISBN)
- patrons (by id)
- branches (by id)
- borrowing_records (by id)

Set-like and list-like entity fields (a patron's borrowed/reserved ISBNs and
history, a branch's inventory) are stored as JSON arrays. Rows reference each
other by id only; there are no foreign keys between the stores.

Every table carries a ``created_at`` stamp so that find-all scans return
entities in insertion order.
"""

from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, Enum, Index, Integer, String
from sqlalchemy.orm import declarative_base

from ..models.book import BookStatus
from ..models.patron import PatronType

# Base class for all SQLAlchemy models
Base = declarative_base()


class Book(Base):
    """Books table - the catalog, keyed by ISBN."""

    __tablename__ = "books"

    isbn = Column(String(32), primary_key=True)
    title = Column(String(500), nullable=False)
    author = Column(String(200), nullable=False)
    publication_year = Column(Integer, nullable=False)
    status = Column(Enum(BookStatus), nullable=False, default=BookStatus.AVAILABLE)
    current_branch_id = Column(String(50), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (
        Index("idx_book_status", "status"),
        Index("idx_book_branch", "current_branch_id"),
    )


class Patron(Base):
    """Patrons table - library members and their circulation state."""

    __tablename__ = "patrons"

    id = Column(String(50), primary_key=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=True)
    patron_type = Column(Enum(PatronType), nullable=False, default=PatronType.GENERAL)

    # JSON arrays of record ids / ISBNs
    borrowing_history = Column(JSON, nullable=False, default=list)
    current_borrowed_books = Column(JSON, nullable=False, default=list)
    reserved_books = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, nullable=False, default=datetime.now)


class LibraryBranch(Base):
    """Branches table - physical locations and the ISBNs they hold."""

    __tablename__ = "branches"

    id = Column(String(50), primary_key=True)
    name = Column(String(200), nullable=False)
    address = Column(String(500), nullable=False, default="")
    inventory = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, nullable=False, default=datetime.now)


class BorrowingRecord(Base):
    """Borrowing records table - one row per loan, never deleted by circulation."""

    __tablename__ = "borrowing_records"

    id = Column(String(50), primary_key=True)
    patron_id = Column(String(50), nullable=False)
    isbn = Column(String(32), nullable=False)
    branch_id = Column(String(50), nullable=True)
    checkout_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    return_date = Column(Date, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (
        Index("idx_record_patron", "patron_id"),
        Index("idx_record_isbn", "isbn"),
        Index("idx_record_due_date", "due_date"),
    )
