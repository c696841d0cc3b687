"""
Catalog search strategies.

A strategy is a predicate ``(book, query) -> bool``. ``search_catalog``
applies one to every book, keeping catalog order. All shipped strategies do
case-insensitive substring matching.
"""

from collections.abc import Callable, Iterable

from .models.book import Book

SearchStrategy = Callable[[Book, str], bool]


def by_title(book: Book, query: str) -> bool:
    return query.lower() in book.title.lower()


def by_author(book: Book, query: str) -> bool:
    return query.lower() in book.author.lower()


def by_isbn(book: Book, query: str) -> bool:
    return query.lower() in book.isbn.lower()


STRATEGIES: dict[str, SearchStrategy] = {
    "title": by_title,
    "author": by_author,
    "isbn": by_isbn,
}


def resolve_strategy(strategy: str | SearchStrategy) -> SearchStrategy:
    """
    Turn a strategy name into its predicate; predicates pass through.

    Raises:
        ValueError: If the name is not one of ``STRATEGIES``
    """
    if callable(strategy):
        return strategy
    try:
        return STRATEGIES[strategy.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown search strategy '{strategy}'. Expected one of: {', '.join(STRATEGIES)}"
        ) from None


def search_catalog(catalog: Iterable[Book], query: str, predicate: SearchStrategy) -> list[Book]:
    """Books from ``catalog`` matching ``query`` under ``predicate``."""
    return [book for book in catalog if predicate(book, query)]
