"""
Recommendation engine.

Four rankings, all read-only:

- content-based: books by the authors a patron borrows most
- collaborative: books borrowed by patrons with overlapping history
- popularity: books borrowed most often across every record ever written
- by author: one author's books the patron has not read yet

Patrons with no history get the popularity ranking from both personalised
rankings. Ties keep catalog (insertion) order. An unknown patron is logged
and yields an empty list rather than an error.
"""

import logging
from collections import Counter

from ..database import BookRepository, BorrowingRecordRepository, PatronRepository
from ..models import Book, Patron


class RecommendationService:
    def __init__(
        self,
        books: BookRepository,
        patrons: PatronRepository,
        records: BorrowingRecordRepository,
        logger: logging.Logger | None = None,
    ):
        self.books = books
        self.patrons = patrons
        self.records = records
        self.logger = logger or logging.getLogger(__name__)

    def _find_patron(self, patron_id: str) -> Patron | None:
        patron = self.patrons.get_by_id(patron_id)
        if patron is None:
            self.logger.error("Cannot recommend for unknown patron: %s", patron_id)
        return patron

    def _history_isbns(self, patron: Patron) -> list[str]:
        """ISBNs from the patron's borrowing history, one per record, oldest first."""
        isbns = []
        for record_id in patron.borrowing_history:
            record = self.records.get_by_id(record_id)
            if record is not None:
                isbns.append(record.isbn)
        return isbns

    def _books_for(self, isbns, limit: int) -> list[Book]:
        """Resolve ISBNs to catalog books, skipping missing ones, up to ``limit``."""
        books = []
        for isbn in isbns:
            if len(books) >= limit:
                break
            book = self.books.get_by_id(isbn)
            if book is not None:
                books.append(book)
        return books

    def get_recommendations(self, patron_id: str, limit: int) -> list[Book]:
        """Unread books by the patron's most-borrowed authors."""
        if limit <= 0:
            return []
        patron = self._find_patron(patron_id)
        if patron is None:
            return []

        history = self._history_isbns(patron)
        if not history:
            return self.get_popular_books(limit)

        author_counts: Counter[str] = Counter()
        for isbn in history:
            book = self.books.get_by_id(isbn)
            if book is not None:
                author_counts[book.author] += 1

        borrowed = set(history)
        candidates = [
            book
            for book in self.books.get_all()
            if book.author in author_counts and book.isbn not in borrowed
        ]
        # sorted() is stable, so equal author counts keep catalog order
        candidates.sort(key=lambda book: -author_counts[book.author])
        return candidates[:limit]

    def get_collaborative_recommendations(self, patron_id: str, limit: int) -> list[Book]:
        """
        Books read by similar patrons.

        A patron's similarity is the number of distinct ISBNs they share with
        the target. A candidate book scores the summed similarity of every
        similar patron who borrowed it.
        """
        if limit <= 0:
            return []
        patron = self._find_patron(patron_id)
        if patron is None:
            return []

        target_isbns = set(self._history_isbns(patron))
        if not target_isbns:
            return self.get_popular_books(limit)

        scores: dict[str, int] = {}
        for other in self.patrons.get_all():
            if other.id == patron.id:
                continue
            other_isbns = list(dict.fromkeys(self._history_isbns(other)))
            similarity = len(target_isbns.intersection(other_isbns))
            if similarity == 0:
                continue
            for isbn in other_isbns:
                if isbn not in target_isbns:
                    scores[isbn] = scores.get(isbn, 0) + similarity

        ranked = sorted(scores, key=lambda isbn: -scores[isbn])
        return self._books_for(ranked, limit)

    def get_popular_books(self, limit: int) -> list[Book]:
        """Most-borrowed books, counting returned and open loans alike."""
        if limit <= 0:
            return []
        counts = Counter(record.isbn for record in self.records.get_all())
        ranked = sorted(counts, key=lambda isbn: -counts[isbn])
        return self._books_for(ranked, limit)

    def get_recommendations_by_author(self, patron_id: str, author: str, limit: int) -> list[Book]:
        """Catalog books by ``author`` (case-insensitive) the patron never borrowed."""
        if limit <= 0:
            return []
        patron = self._find_patron(patron_id)
        if patron is None:
            return []

        borrowed = set(self._history_isbns(patron))
        wanted = author.lower()
        matches = [
            book
            for book in self.books.get_all()
            if book.author.lower() == wanted and book.isbn not in borrowed
        ]
        return matches[:limit]
