"""
Library branch model.

A branch's ``inventory`` lists the ISBNs physically present there. It always
agrees with the ``current_branch_id`` of the books involved; the catalog and
branch services keep both sides in step.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LibraryBranch(BaseModel):
    """Represents a physical library branch."""

    id: str = Field(
        ...,
        description="Unique identifier for the branch",
        min_length=1,
        max_length=50,
        examples=["branch_main000001"],
    )

    name: str = Field(
        ...,
        description="Display name of the branch",
        min_length=1,
        max_length=200,
        examples=["Main Library", "East Branch"],
    )

    address: str = Field(
        default="",
        description="Street address of the branch",
        max_length=500,
        examples=["123 Main St"],
    )

    inventory: list[str] = Field(
        default_factory=list,
        description="ISBNs physically present at the branch",
    )

    @field_validator("inventory")
    @classmethod
    def remove_duplicates(cls, v: list[str]) -> list[str]:
        """Inventory is a set of ISBNs; keep first occurrences."""
        return list(dict.fromkeys(v))

    def add_book_to_inventory(self, isbn: str) -> None:
        if isbn not in self.inventory:
            self.inventory.append(isbn)

    def remove_book_from_inventory(self, isbn: str) -> None:
        if isbn in self.inventory:
            self.inventory.remove(isbn)

    def has_book(self, isbn: str) -> bool:
        return isbn in self.inventory

    model_config = ConfigDict(validate_assignment=True, from_attributes=True)
