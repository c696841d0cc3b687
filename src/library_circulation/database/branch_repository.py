"""Branch repository implementation."""

from ..database.schema import LibraryBranch as BranchDB
from ..models.branch import LibraryBranch as BranchModel
from .repository import BaseRepository


class BranchRepository(BaseRepository[BranchDB, BranchModel]):
    """Repository for library branches."""

    @property
    def model_class(self) -> type[BranchDB]:
        return BranchDB

    @property
    def response_schema(self) -> type[BranchModel]:
        return BranchModel
