"""
Patron management and the patron factory.

The factory functions build new ``Patron`` models with a generated id; the
service stores them and guards removal of patrons who still hold books.
"""

import logging

from ..database import PatronRepository
from ..errors import DuplicateError, NotFoundError, OperationNotAllowedError
from ..ids import generate_id
from ..models import Patron, PatronType


def create_patron(
    name: str, email: str, phone: str | None = None, patron_type: PatronType = PatronType.GENERAL
) -> Patron:
    """Build a new patron with a freshly generated id."""
    return Patron(
        id=generate_id("patron"),
        name=name,
        email=email,
        phone=phone,
        patron_type=patron_type,
    )


def create_student(name: str, email: str, phone: str | None = None) -> Patron:
    return create_patron(name, email, phone, PatronType.STUDENT)


def create_faculty(name: str, email: str, phone: str | None = None) -> Patron:
    return create_patron(name, email, phone, PatronType.FACULTY)


def create_general_member(name: str, email: str, phone: str | None = None) -> Patron:
    return create_patron(name, email, phone, PatronType.GENERAL)


class PatronService:
    def __init__(self, patrons: PatronRepository, logger: logging.Logger | None = None):
        self.patrons = patrons
        self.logger = logger or logging.getLogger(__name__)

    def _require_patron(self, patron_id: str) -> Patron:
        patron = self.patrons.get_by_id(patron_id)
        if patron is None:
            self.logger.error("Patron not found: %s", patron_id)
            raise NotFoundError(f"Patron not found: {patron_id}")
        return patron

    def add_patron(self, patron: Patron) -> Patron:
        """
        Store a new patron.

        Raises:
            DuplicateError: A patron with this id already exists
        """
        if self.patrons.exists(patron.id):
            self.logger.warning("Patron already exists: %s", patron.id)
            raise DuplicateError(f"Patron with ID {patron.id} already exists")
        self.logger.info("Patron added: %s (%s)", patron.name, patron.id)
        return self.patrons.save(patron)

    def register_patron(
        self,
        name: str,
        email: str,
        phone: str | None = None,
        patron_type: PatronType = PatronType.GENERAL,
    ) -> Patron:
        """Create a patron through the factory and store it."""
        return self.add_patron(create_patron(name, email, phone, patron_type))

    def update_patron(
        self,
        patron_id: str,
        name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
    ) -> Patron:
        """Change contact details; ``None`` leaves a field as it is."""
        patron = self._require_patron(patron_id)
        if name is not None:
            patron.name = name
        if email is not None:
            patron.email = email
        if phone is not None:
            patron.phone = phone
        self.logger.info("Patron updated: %s", patron_id)
        return self.patrons.save(patron)

    def update_patron_type(self, patron_id: str, patron_type: PatronType) -> Patron:
        """
        Reclassify a patron.

        Raises:
            NotFoundError: No such patron
            OperationNotAllowedError: The patron holds more books than the new
                type allows
        """
        patron = self._require_patron(patron_id)
        if len(patron.current_borrowed_books) > patron_type.max_books_allowed:
            self.logger.warning(
                "Cannot make patron %s %s while holding %d book(s)",
                patron_id,
                patron_type.value,
                len(patron.current_borrowed_books),
            )
            raise OperationNotAllowedError(
                f"Patron {patron_id} holds {len(patron.current_borrowed_books)} book(s); "
                f"{patron_type.value} patrons may borrow at most {patron_type.max_books_allowed}"
            )
        patron.patron_type = patron_type
        self.logger.info("Patron %s is now %s", patron_id, patron_type.value)
        return self.patrons.save(patron)

    def find_patron(self, patron_id: str) -> Patron | None:
        return self.patrons.get_by_id(patron_id)

    def list_patrons(self) -> list[Patron]:
        return self.patrons.get_all()

    def remove_patron(self, patron_id: str) -> None:
        """
        Delete a patron.

        Raises:
            NotFoundError: No such patron
            OperationNotAllowedError: The patron still has borrowed books
        """
        patron = self._require_patron(patron_id)
        if patron.current_borrowed_books:
            self.logger.warning("Cannot remove patron %s with borrowed books", patron_id)
            raise OperationNotAllowedError(
                f"Cannot remove patron {patron_id} with {len(patron.current_borrowed_books)} "
                "borrowed book(s)"
            )
        self.patrons.delete(patron_id)
        self.logger.info("Patron removed: %s", patron_id)

    def count(self) -> int:
        return self.patrons.count()
