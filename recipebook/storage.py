from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Protocol

from .models import Recipe, RecipeFields

# Firestore auto-generated document ids: 20 characters from [A-Za-z0-9].
RECIPE_ID_RE = re.compile(r"^[A-Za-z0-9]{20}$")


class InvalidRecipeId(ValueError):
    """Raised for identifiers that can never name a stored recipe."""


class RecipeNotFound(KeyError):
    """Raised when a well-formed identifier matches no recipe."""


class StorageUnavailable(RuntimeError):
    """Raised when the document store cannot be reached."""


def is_valid_recipe_id(recipe_id: Any) -> bool:
    return isinstance(recipe_id, str) and bool(RECIPE_ID_RE.match(recipe_id))


def ensure_valid_recipe_id(recipe_id: Any) -> str:
    if not is_valid_recipe_id(recipe_id):
        raise InvalidRecipeId(f"Invalid recipe ID format: {recipe_id!r}")
    return recipe_id


class RecipeRepository(Protocol):
    """Protocol describing the behaviour required by the web layer."""

    def list_recipes(self) -> Iterable[Recipe]:
        """Return an iterable of stored recipes ordered newest first."""

    def get_recipe(self, recipe_id: str) -> Recipe:
        """Return a single recipe or raise :class:`RecipeNotFound` if missing."""

    def add_recipe(self, fields: RecipeFields) -> Recipe:
        """Persist a new recipe and return the stored instance."""

    def update_recipe(self, recipe_id: str, changes: Mapping[str, Any]) -> Recipe:
        """Merge ``changes`` into a recipe, re-validate and return it."""

    def delete_recipe(self, recipe_id: str) -> Recipe:
        """Remove a recipe and return what was removed."""

    def check_connection(self) -> None:
        """Raise :class:`StorageUnavailable` if the store is unreachable."""

    def close(self) -> None:
        """Release the underlying client."""


__all__ = [
    "InvalidRecipeId",
    "RECIPE_ID_RE",
    "RecipeNotFound",
    "RecipeRepository",
    "StorageUnavailable",
    "ensure_valid_recipe_id",
    "is_valid_recipe_id",
]
