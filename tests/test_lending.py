"""Tests for the lending core: checkout, return and renewal."""

import logging
from datetime import date, timedelta

import pytest

from library_circulation.errors import (
    LimitExceededError,
    NoActiveLoanError,
    NotAvailableError,
    NotFoundError,
)
from library_circulation.models import BookStatus


def backdate(library, record_id: str, checkout_days_ago: int, due_days_ago: int) -> None:
    """Move an open loan into the past."""
    record = library.record_repository.get_by_id(record_id)
    today = date.today()
    record.checkout_date = today - timedelta(days=checkout_days_ago)
    record.due_date = today - timedelta(days=due_days_ago)
    library.record_repository.save(record)


class TestCheckout:
    def test_checkout_success(self, library, lending_sink):
        record = library.lending.checkout("patron_student", "isbn-001", "branch_main")

        assert record.patron_id == "patron_student"
        assert record.isbn == "isbn-001"
        assert record.branch_id == "branch_main"
        assert record.checkout_date == date.today()
        assert record.due_date == date.today() + timedelta(days=14)
        assert record.return_date is None

        book = library.catalog.find_book("isbn-001")
        patron = library.patrons.find_patron("patron_student")
        assert book.status == BookStatus.CHECKED_OUT
        assert patron.current_borrowed_books == ["isbn-001"]
        assert patron.borrowing_history == [record.id]
        assert library.record_repository.get_by_id(record.id) == record

        assert lending_sink.messages == [
            f"Book 'Clean Code' checked out successfully. Due date: {record.due_date}"
        ]

    @pytest.mark.parametrize(
        ("patron_id", "days"),
        [("patron_student", 14), ("patron_faculty", 30), ("patron_general", 21)],
    )
    def test_due_date_follows_patron_type(self, library, patron_id, days):
        record = library.lending.checkout(patron_id, "isbn-001")
        assert record.due_date == date.today() + timedelta(days=days)

    def test_unknown_patron(self, library, lending_sink):
        with pytest.raises(NotFoundError, match="Patron"):
            library.lending.checkout("patron_missing", "isbn-001")
        assert lending_sink.messages == []

    def test_unknown_book(self, library):
        with pytest.raises(NotFoundError, match="Book"):
            library.lending.checkout("patron_student", "isbn-missing")

    def test_unavailable_book_changes_nothing(self, library, lending_sink):
        library.lending.checkout("patron_student", "isbn-001")
        lending_sink.clear()

        with pytest.raises(NotAvailableError):
            library.lending.checkout("patron_general", "isbn-001")

        patron = library.patrons.find_patron("patron_general")
        assert patron.current_borrowed_books == []
        assert patron.borrowing_history == []
        assert library.record_repository.count() == 1
        assert lending_sink.messages == []

    @pytest.mark.parametrize("status", [BookStatus.MAINTENANCE, BookStatus.LOST, BookStatus.RESERVED])
    def test_non_available_statuses_rejected(self, library, status):
        library.catalog.update_book_status("isbn-001", status)

        with pytest.raises(NotAvailableError):
            library.lending.checkout("patron_student", "isbn-001")

    def test_student_limit(self, library):
        for isbn in ["isbn-001", "isbn-002", "isbn-003"]:
            library.lending.checkout("patron_student", isbn)

        with pytest.raises(LimitExceededError):
            library.lending.checkout("patron_student", "isbn-004")

        assert library.catalog.find_book("isbn-004").status == BookStatus.AVAILABLE
        patron = library.patrons.find_patron("patron_student")
        assert len(patron.current_borrowed_books) == 3

    def test_limit_checked_before_book(self, library):
        for isbn in ["isbn-001", "isbn-002", "isbn-003"]:
            library.lending.checkout("patron_student", isbn)

        with pytest.raises(LimitExceededError):
            library.lending.checkout("patron_student", "isbn-missing")


class TestReturn:
    def test_return_success(self, library, lending_sink):
        record = library.lending.checkout("patron_general", "isbn-004")
        lending_sink.clear()

        closed = library.lending.return_book("isbn-004", "patron_general")

        assert closed.id == record.id
        assert closed.is_returned is True
        assert closed.return_date == date.today()
        assert library.catalog.find_book("isbn-004").status == BookStatus.AVAILABLE
        patron = library.patrons.find_patron("patron_general")
        assert patron.current_borrowed_books == []
        assert patron.borrowing_history == [record.id]
        assert lending_sink.messages == ["Book 'Refactoring' returned successfully. Thank you!"]

    def test_late_return_message(self, library, lending_sink):
        record = library.lending.checkout("patron_general", "isbn-004")
        backdate(library, record.id, checkout_days_ago=30, due_days_ago=9)
        lending_sink.clear()

        library.lending.return_book("isbn-004", "patron_general")

        assert lending_sink.messages == [
            "Book 'Refactoring' was returned late. Please check for any late fees."
        ]

    def test_return_without_loan(self, library):
        with pytest.raises(NoActiveLoanError):
            library.lending.return_book("isbn-001", "patron_general")

    def test_return_by_other_patron(self, library):
        library.lending.checkout("patron_student", "isbn-001")

        with pytest.raises(NoActiveLoanError):
            library.lending.return_book("isbn-001", "patron_general")

    def test_return_unknown_entities(self, library):
        with pytest.raises(NotFoundError):
            library.lending.return_book("isbn-001", "patron_missing")
        with pytest.raises(NotFoundError):
            library.lending.return_book("isbn-missing", "patron_general")

    def test_second_return_fails(self, library):
        library.lending.checkout("patron_general", "isbn-001")
        library.lending.return_book("isbn-001", "patron_general")

        with pytest.raises(NoActiveLoanError):
            library.lending.return_book("isbn-001", "patron_general")


class TestRenew:
    def test_renew_extends_from_current_due_date(self, library, lending_sink):
        record = library.lending.checkout("patron_student", "isbn-001")
        lending_sink.clear()

        renewed = library.lending.renew("isbn-001", "patron_student")

        assert renewed.id == record.id
        assert renewed.due_date == record.due_date + timedelta(days=14)
        assert library.record_repository.get_by_id(record.id).due_date == renewed.due_date
        assert lending_sink.messages == [
            f"Book 'Clean Code' renewed successfully. New due date: {renewed.due_date}"
        ]

    def test_renew_twice(self, library):
        record = library.lending.checkout("patron_faculty", "isbn-001")
        library.lending.renew("isbn-001", "patron_faculty")
        renewed = library.lending.renew("isbn-001", "patron_faculty")

        assert renewed.due_date == record.due_date + timedelta(days=60)

    def test_renew_without_loan(self, library):
        with pytest.raises(NoActiveLoanError):
            library.lending.renew("isbn-001", "patron_student")

    def test_renew_with_waiting_reservation_is_allowed(self, library, caplog):
        library.lending.checkout("patron_student", "isbn-001")
        library.reservations.reserve("patron_general", "isbn-001")

        with caplog.at_level(logging.WARNING):
            library.lending.renew("isbn-001", "patron_student")

        assert "reservation(s) are waiting" in caplog.text


class TestQueries:
    def test_history_active_and_overdue(self, library):
        first = library.lending.checkout("patron_general", "isbn-001")
        second = library.lending.checkout("patron_general", "isbn-002")
        library.lending.return_book("isbn-001", "patron_general")
        third = library.lending.checkout("patron_faculty", "isbn-003")
        backdate(library, third.id, checkout_days_ago=40, due_days_ago=10)

        history = library.lending.borrowing_history("patron_general")
        assert [r.id for r in history] == [first.id, second.id]
        assert [r.id for r in library.lending.active_borrowings()] == [second.id, third.id]
        assert [r.id for r in library.lending.overdue_borrowings()] == [third.id]

    def test_queries_on_empty_store(self, empty_library):
        assert empty_library.lending.borrowing_history("patron_missing") == []
        assert empty_library.lending.active_borrowings() == []
        assert empty_library.lending.overdue_borrowings() == []
