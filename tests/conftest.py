"""Test configuration and fixtures for the library circulation package.

- Every test gets a fresh in-memory library (its own SQLite connection)
- Global configuration and the shared MCP library are reset after each test
- Recording sinks capture the notifications each publisher broadcasts
"""

import os
from collections.abc import Generator

import pytest
from sqlalchemy.orm import Session

from library_circulation.config import reset_config
from library_circulation.database import DatabaseManager
from library_circulation.library import Library, get_library, reset_library
from library_circulation.models import Book, LibraryBranch, Patron, PatronType
from library_circulation.notifications import RecordingSink

# === Database Fixtures ===


@pytest.fixture
def db_manager() -> Generator[DatabaseManager, None, None]:
    """An initialized in-memory entity store."""
    manager = DatabaseManager("sqlite://")
    manager.init_database()
    yield manager
    manager.close()


@pytest.fixture
def db_session(db_manager: DatabaseManager) -> Generator[Session, None, None]:
    session = db_manager.create_session()
    try:
        yield session
    finally:
        session.close()


# === Environment Fixtures ===


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Run with no LIBRARY_* variables set."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("LIBRARY_"):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)


# === Library Fixtures ===


def make_book(isbn: str, title: str, author: str, year: int = 2000, **kwargs) -> Book:
    return Book(isbn=isbn, title=title, author=author, publication_year=year, **kwargs)


def seed_library(library: Library) -> None:
    """Three patrons (one per type) and a small catalog at one branch."""
    branch = library.branch_repository.save(
        LibraryBranch(id="branch_main", name="Main Library", address="1 Main St")
    )

    library.patrons.add_patron(
        Patron(
            id="patron_student",
            name="Sam Student",
            email="sam@example.com",
            phone="555-0101",
            patron_type=PatronType.STUDENT,
        )
    )
    library.patrons.add_patron(
        Patron(
            id="patron_faculty",
            name="Fay Faculty",
            email="fay@example.com",
            patron_type=PatronType.FACULTY,
        )
    )
    library.patrons.add_patron(
        Patron(
            id="patron_general",
            name="Gil General",
            email="gil@example.com",
            patron_type=PatronType.GENERAL,
        )
    )

    for book in (
        make_book("isbn-001", "Clean Code", "Robert C. Martin", 2008),
        make_book("isbn-002", "Clean Architecture", "Robert C. Martin", 2017),
        make_book("isbn-003", "The Clean Coder", "Robert C. Martin", 2011),
        make_book("isbn-004", "Refactoring", "Martin Fowler", 1999),
        make_book("isbn-005", "Domain-Driven Design", "Eric Evans", 2003),
        make_book("isbn-006", "Patterns of Enterprise Application Architecture", "Martin Fowler", 2002),
    ):
        library.catalog.add_book(book.model_copy(update={"current_branch_id": branch.id}))


@pytest.fixture
def library() -> Generator[Library, None, None]:
    """A seeded library of its own."""
    lib = Library(database_url="sqlite://")
    seed_library(lib)
    yield lib
    lib.close()


@pytest.fixture
def empty_library() -> Generator[Library, None, None]:
    lib = Library(database_url="sqlite://")
    yield lib
    lib.close()


@pytest.fixture
def lending_sink(library: Library) -> RecordingSink:
    sink = RecordingSink(name="lending")
    library.lending_notifications.attach(sink)
    return sink


@pytest.fixture
def reservation_sink(library: Library) -> RecordingSink:
    sink = RecordingSink(name="reservations")
    library.reservation_notifications.attach(sink)
    return sink


@pytest.fixture
def mcp_library() -> Generator[Library, None, None]:
    """The seeded process-wide library used by tools and resources."""
    reset_library()
    lib = get_library()
    seed_library(lib)
    yield lib
    reset_library()


# === Cleanup Fixtures ===


@pytest.fixture(autouse=True)
def cleanup_after_test():
    """Reset global state so tests stay independent."""
    yield
    reset_library()
    reset_config()
