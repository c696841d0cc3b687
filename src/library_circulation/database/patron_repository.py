"""
Patron repository implementation.

Patron snapshots carry their circulation state (history, held ISBNs,
reserved ISBNs) as JSON arrays; the base upsert writes them back whole.
"""

from ..database.schema import Patron as PatronDB
from ..models.patron import Patron as PatronModel
from .repository import BaseRepository


class PatronRepository(BaseRepository[PatronDB, PatronModel]):
    """Repository for library patrons."""

    @property
    def model_class(self) -> type[PatronDB]:
        return PatronDB

    @property
    def response_schema(self) -> type[PatronModel]:
        return PatronModel
