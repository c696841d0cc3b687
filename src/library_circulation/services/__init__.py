"""Domain services operating on the entity store."""

from .branches import BranchService
from .catalog import CatalogService
from .lending import LendingService
from .patrons import (
    PatronService,
    create_faculty,
    create_general_member,
    create_patron,
    create_student,
)
from .recommendations import RecommendationService
from .reservations import ReservationService

__all__ = [
    "BranchService",
    "CatalogService",
    "LendingService",
    "PatronService",
    "RecommendationService",
    "ReservationService",
    "create_faculty",
    "create_general_member",
    "create_patron",
    "create_student",
]
