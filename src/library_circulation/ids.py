"""Identifier generation for entities created by the library."""

from uuid import uuid4


def generate_id(kind: str) -> str:
    """
    Return a new opaque identifier of the form ``<kind>_<10 hex chars>``.

    >>> generate_id("patron")  # doctest: +SKIP
    'patron_1a2b3c4d5e'
    """
    return f"{kind}_{uuid4().hex[:10]}"
