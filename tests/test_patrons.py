"""Tests for patron management and the patron factory."""

import pytest

from library_circulation.errors import DuplicateError, NotFoundError, OperationNotAllowedError
from library_circulation.models import Patron, PatronType
from library_circulation.services import (
    create_faculty,
    create_general_member,
    create_patron,
    create_student,
)


class TestPatronFactory:
    @pytest.mark.parametrize(
        ("factory", "patron_type"),
        [
            (create_student, PatronType.STUDENT),
            (create_faculty, PatronType.FACULTY),
            (create_general_member, PatronType.GENERAL),
        ],
    )
    def test_typed_factories(self, factory, patron_type):
        patron = factory("Pat Reader", "pat@example.com", "555-0199")

        assert patron.patron_type == patron_type
        assert patron.phone == "555-0199"
        assert patron.id.startswith("patron_")

    def test_generated_ids_are_unique(self):
        ids = {create_patron("Pat Reader", "pat@example.com").id for _ in range(50)}
        assert len(ids) == 50


class TestPatronService:
    def test_register_patron(self, library):
        patron = library.patrons.register_patron(
            "New Reader", "new@example.com", patron_type=PatronType.STUDENT
        )

        assert library.patrons.find_patron(patron.id) == patron
        assert library.patrons.count() == 4

    def test_add_duplicate_rejected(self, library):
        with pytest.raises(DuplicateError):
            library.patrons.add_patron(
                Patron(id="patron_student", name="Imposter", email="x@example.com")
            )

    def test_update_patron(self, library):
        updated = library.patrons.update_patron("patron_general", email="gil.new@example.com")

        assert updated.email == "gil.new@example.com"
        assert updated.name == "Gil General"

    def test_update_missing_patron(self, library):
        with pytest.raises(NotFoundError):
            library.patrons.update_patron("patron_missing", name="Nobody")

    def test_update_patron_type(self, library):
        updated = library.patrons.update_patron_type("patron_student", PatronType.FACULTY)

        assert updated.patron_type == PatronType.FACULTY
        assert updated.patron_type.max_books_allowed == 10

    def test_downgrade_over_limit_rejected(self, library):
        for isbn in ["isbn-001", "isbn-002", "isbn-003", "isbn-004"]:
            library.lending.checkout("patron_faculty", isbn)

        with pytest.raises(OperationNotAllowedError, match="at most 3"):
            library.patrons.update_patron_type("patron_faculty", PatronType.STUDENT)

        assert library.patrons.find_patron("patron_faculty").patron_type == PatronType.FACULTY

    def test_remove_patron(self, library):
        library.patrons.remove_patron("patron_general")

        assert library.patrons.find_patron("patron_general") is None
        assert [p.id for p in library.patrons.list_patrons()] == [
            "patron_student",
            "patron_faculty",
        ]

    def test_remove_patron_with_loans_rejected(self, library):
        library.lending.checkout("patron_general", "isbn-001")

        with pytest.raises(OperationNotAllowedError):
            library.patrons.remove_patron("patron_general")

    def test_remove_missing_patron(self, library):
        with pytest.raises(NotFoundError):
            library.patrons.remove_patron("patron_missing")
