"""
Tests for the Patron model.

These tests verify that the Patron model correctly:
1. Applies the borrowing limits of each patron type
2. Treats borrowed and reserved ISBNs as sets
3. Never holds more books than its type allows
"""

import pytest
from pydantic import ValidationError

from library_circulation.models.patron import Patron, PatronType


def make_patron(**overrides) -> Patron:
    data = {
        "id": "patron_test0001",
        "name": "Test Patron",
        "email": "test@example.com",
    }
    data.update(overrides)
    return Patron(**data)


class TestPatronType:
    @pytest.mark.parametrize(
        ("patron_type", "max_books", "max_days"),
        [
            (PatronType.STUDENT, 3, 14),
            (PatronType.FACULTY, 10, 30),
            (PatronType.GENERAL, 5, 21),
        ],
    )
    def test_borrowing_limits(self, patron_type, max_books, max_days):
        assert patron_type.max_books_allowed == max_books
        assert patron_type.max_borrow_days == max_days


class TestPatronModel:
    """Test suite for the Patron model."""

    def test_create_valid_patron(self):
        patron = make_patron(phone="+1 (555) 123-4567", patron_type=PatronType.STUDENT)

        assert patron.patron_type == PatronType.STUDENT
        assert patron.borrowing_history == []
        assert patron.current_borrowed_books == []
        assert patron.reserved_books == []
        assert patron.can_borrow_more_books is True

    def test_default_type_is_general(self):
        assert make_patron().patron_type == PatronType.GENERAL

    def test_email_validation(self):
        with pytest.raises(ValidationError):
            make_patron(email="not-an-email")

    def test_phone_validation(self):
        with pytest.raises(ValidationError):
            make_patron(phone="call me maybe")

    def test_name_too_short(self):
        with pytest.raises(ValidationError):
            make_patron(name="A")

    def test_duplicate_isbns_collapsed(self):
        patron = make_patron(
            current_borrowed_books=["a", "b", "a"],
            reserved_books=["x", "x"],
        )

        assert patron.current_borrowed_books == ["a", "b"]
        assert patron.reserved_books == ["x"]

    def test_cannot_exceed_type_limit(self):
        with pytest.raises(ValidationError, match="limit"):
            make_patron(patron_type=PatronType.STUDENT, current_borrowed_books=["a", "b", "c", "d"])

    def test_downgrade_rejected_when_holding_too_many(self):
        patron = make_patron(
            patron_type=PatronType.FACULTY,
            current_borrowed_books=["a", "b", "c", "d"],
        )

        with pytest.raises(ValidationError):
            patron.patron_type = PatronType.STUDENT

    def test_can_borrow_more_books_at_limit(self):
        patron = make_patron(patron_type=PatronType.STUDENT, current_borrowed_books=["a", "b", "c"])
        assert patron.can_borrow_more_books is False

    def test_borrowed_book_helpers(self):
        patron = make_patron()

        patron.add_current_borrowed_book("a")
        patron.add_current_borrowed_book("a")
        assert patron.current_borrowed_books == ["a"]

        patron.remove_current_borrowed_book("a")
        patron.remove_current_borrowed_book("missing")
        assert patron.current_borrowed_books == []

    def test_reserved_book_helpers(self):
        patron = make_patron()

        patron.add_reserved_book("x")
        patron.add_reserved_book("x")
        assert patron.reserved_books == ["x"]

        patron.remove_reserved_book("x")
        assert patron.reserved_books == []

    def test_borrowing_history_keeps_order(self):
        patron = make_patron()
        patron.add_borrowing_record("record_1")
        patron.add_borrowing_record("record_2")

        assert patron.borrowing_history == ["record_1", "record_2"]
