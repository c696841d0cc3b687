"""
Branch management and book transfers between branches.

A transfer moves the ISBN between the two inventories and updates the
book's ``current_branch_id`` together, so the two always agree.
"""

import logging

from ..database import BookRepository, BranchRepository
from ..errors import NotAvailableError, NotFoundError, OperationNotAllowedError
from ..ids import generate_id
from ..models import BookStatus, LibraryBranch


class BranchService:
    def __init__(
        self,
        branches: BranchRepository,
        books: BookRepository,
        logger: logging.Logger | None = None,
    ):
        self.branches = branches
        self.books = books
        self.logger = logger or logging.getLogger(__name__)

    def _require_branch(self, branch_id: str) -> LibraryBranch:
        branch = self.branches.get_by_id(branch_id)
        if branch is None:
            self.logger.error("Branch not found: %s", branch_id)
            raise NotFoundError(f"Branch not found: {branch_id}")
        return branch

    def create_branch(self, name: str, address: str = "") -> LibraryBranch:
        branch = LibraryBranch(id=generate_id("branch"), name=name, address=address)
        self.logger.info("Branch created: %s (%s)", name, branch.id)
        return self.branches.save(branch)

    def update_branch(
        self, branch_id: str, name: str | None = None, address: str | None = None
    ) -> LibraryBranch:
        branch = self._require_branch(branch_id)
        if name is not None:
            branch.name = name
        if address is not None:
            branch.address = address
        self.logger.info("Branch updated: %s", branch_id)
        return self.branches.save(branch)

    def get_branch(self, branch_id: str) -> LibraryBranch | None:
        return self.branches.get_by_id(branch_id)

    def list_branches(self) -> list[LibraryBranch]:
        return self.branches.get_all()

    def delete_branch(self, branch_id: str) -> None:
        """
        Delete an empty branch.

        Raises:
            NotFoundError: No such branch
            OperationNotAllowedError: The branch still holds books
        """
        branch = self._require_branch(branch_id)
        if branch.inventory:
            self.logger.warning("Cannot delete branch %s with inventory", branch_id)
            raise OperationNotAllowedError(
                f"Cannot delete branch {branch_id} while it holds {len(branch.inventory)} book(s)"
            )
        self.branches.delete(branch_id)
        self.logger.info("Branch deleted: %s", branch_id)

    def can_transfer_book(self, isbn: str, from_branch_id: str) -> bool:
        """True if the book is AVAILABLE and held by ``from_branch_id``."""
        book = self.books.get_by_id(isbn)
        branch = self.branches.get_by_id(from_branch_id)
        if book is None or branch is None:
            return False
        return book.status == BookStatus.AVAILABLE and branch.has_book(isbn)

    def transfer_book(self, isbn: str, from_branch_id: str, to_branch_id: str) -> None:
        """
        Move a book from one branch to another.

        Raises:
            NotFoundError: Either branch or the book does not exist
            OperationNotAllowedError: The book is not at the source branch
            NotAvailableError: The book is not AVAILABLE
        """
        source = self._require_branch(from_branch_id)
        destination = self._require_branch(to_branch_id)

        book = self.books.get_by_id(isbn)
        if book is None:
            self.logger.error("Book not found: %s", isbn)
            raise NotFoundError(f"Book not found: {isbn}")

        if not source.has_book(isbn):
            self.logger.warning("Book %s is not at branch %s", isbn, from_branch_id)
            raise OperationNotAllowedError(f"Book {isbn} is not at branch {from_branch_id}")

        if book.status != BookStatus.AVAILABLE:
            self.logger.warning("Book %s cannot be transferred (status: %s)", isbn, book.status.value)
            raise NotAvailableError(
                f"Book {isbn} cannot be transferred (status: {book.status.value})"
            )

        source.remove_book_from_inventory(isbn)
        destination.add_book_to_inventory(isbn)
        book.current_branch_id = to_branch_id

        self.branches.save(source)
        self.branches.save(destination)
        self.books.save(book)
        self.logger.info("Book %s transferred from %s to %s", isbn, from_branch_id, to_branch_id)
