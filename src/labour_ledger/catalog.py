"""Fixed worker category catalogue."""

from __future__ import annotations

from dataclasses import dataclass

from labour_ledger.errors import ValidationError


@dataclass(frozen=True)
class Category:
    """A worker category and its allowed subcategories, in display order."""

    id: str
    name: str
    subcategories: tuple[str, ...]


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(
        id="1",
        name="Construction",
        subcategories=("Mason", "Carpenter", "Electrician", "Plumber", "Helper", "Supervisor"),
    ),
    Category(
        id="2",
        name="Household",
        subcategories=("Cook", "Cleaner", "Gardener", "Driver", "Security", "Caretaker"),
    ),
    Category(
        id="3",
        name="General Labor",
        subcategories=(
            "Daily Worker",
            "Casual Labor",
            "Seasonal Worker",
            "Part-time",
            "Contract Worker",
        ),
    ),
)


def list_categories() -> list[Category]:
    """Return the catalogue in display order."""
    return list(DEFAULT_CATEGORIES)


def get_category(name: str) -> Category | None:
    for category in DEFAULT_CATEGORIES:
        if category.name == name:
            return category
    return None


def validate_classification(category: str, subcategory: str) -> None:
    """Check that a category exists and owns the given subcategory.

    Raises:
        ValidationError: If either label is not in the catalogue
    """
    found = get_category(category)
    if found is None:
        raise ValidationError(f"Unknown category '{category}'", field="category")
    if subcategory not in found.subcategories:
        raise ValidationError(
            f"Subcategory '{subcategory}' is not allowed for category '{category}'",
            field="subcategory",
        )
