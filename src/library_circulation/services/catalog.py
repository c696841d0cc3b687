"""
Catalog management: adding, editing, removing and searching books.

Adding or removing a book also keeps the holding branch's inventory in step
with the book's ``current_branch_id``.
"""

import logging

from ..database import BookRepository, BranchRepository
from ..errors import DuplicateError, NotFoundError, OperationNotAllowedError
from ..models import Book, BookStatus
from ..search import SearchStrategy, resolve_strategy, search_catalog


class CatalogService:
    def __init__(
        self,
        books: BookRepository,
        branches: BranchRepository,
        logger: logging.Logger | None = None,
    ):
        self.books = books
        self.branches = branches
        self.logger = logger or logging.getLogger(__name__)

    def _require_book(self, isbn: str) -> Book:
        book = self.books.get_by_id(isbn)
        if book is None:
            self.logger.error("Book not found: %s", isbn)
            raise NotFoundError(f"Book not found: {isbn}")
        return book

    def add_book(self, book: Book) -> Book:
        """
        Add a new book to the catalog.

        If the book names an existing branch, its ISBN joins that branch's
        inventory.

        Raises:
            DuplicateError: A book with this ISBN already exists
        """
        if self.books.exists(book.isbn):
            self.logger.warning("Book already exists: %s", book.isbn)
            raise DuplicateError(f"Book with ISBN {book.isbn} already exists")

        saved = self.books.save(book)
        if book.current_branch_id:
            branch = self.branches.get_by_id(book.current_branch_id)
            if branch is not None:
                branch.add_book_to_inventory(book.isbn)
                self.branches.save(branch)
            else:
                self.logger.warning(
                    "Book %s refers to unknown branch %s", book.isbn, book.current_branch_id
                )

        self.logger.info("Book added: %s (%s)", book.title, book.isbn)
        return saved

    def update_book(
        self,
        isbn: str,
        title: str | None = None,
        author: str | None = None,
        publication_year: int | None = None,
    ) -> Book:
        """Change descriptive fields; ``None`` leaves a field as it is."""
        book = self._require_book(isbn)
        if title is not None:
            book.title = title
        if author is not None:
            book.author = author
        if publication_year is not None:
            book.publication_year = publication_year
        self.logger.info("Book updated: %s", isbn)
        return self.books.save(book)

    def remove_book(self, isbn: str) -> None:
        """
        Delete a book from the catalog and from its branch inventory.

        Raises:
            NotFoundError: No such book
            OperationNotAllowedError: The book is checked out
        """
        book = self._require_book(isbn)
        if book.status == BookStatus.CHECKED_OUT:
            self.logger.warning("Cannot remove checked-out book: %s", isbn)
            raise OperationNotAllowedError(f"Cannot remove book {isbn} while it is checked out")

        if book.current_branch_id:
            branch = self.branches.get_by_id(book.current_branch_id)
            if branch is not None:
                branch.remove_book_from_inventory(isbn)
                self.branches.save(branch)

        self.books.delete(isbn)
        self.logger.info("Book removed: %s", isbn)

    def find_book(self, isbn: str) -> Book | None:
        return self.books.get_by_id(isbn)

    def list_books(self) -> list[Book]:
        return self.books.get_all()

    def books_by_branch(self, branch_id: str) -> list[Book]:
        return self.books.find_by_branch(branch_id)

    def available_books(self) -> list[Book]:
        return self.books.find_by_status(BookStatus.AVAILABLE)

    def update_book_status(self, isbn: str, status: BookStatus) -> Book:
        book = self._require_book(isbn)
        book.status = status
        self.logger.info("Book %s status set to %s", isbn, status.value)
        return self.books.save(book)

    def count(self) -> int:
        return self.books.count()

    def search_books(self, query: str, strategy: str | SearchStrategy = "title") -> list[Book]:
        """
        Search the catalog with a named or custom strategy.

        Raises:
            ValueError: Unknown strategy name
        """
        predicate = resolve_strategy(strategy)
        results = search_catalog(self.books.get_all(), query, predicate)
        self.logger.debug("Search for %r matched %d book(s)", query, len(results))
        return results
