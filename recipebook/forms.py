"""Controllers behind the recipe list and the add/edit form.

They hold UI state only; rendering is left to whatever view layer drives them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .client import RecipeClient, RecipeClientError
from .validation import find_errors, parse_cooking_time

logger = logging.getLogger(__name__)


@dataclass
class RecipeForm:
    """State of the add/edit recipe form.

    ``recipe_id`` is set in edit mode. Values are kept exactly as typed;
    :meth:`to_payload` does the trimming and parsing.
    """

    recipe_id: Optional[str] = None
    title: str = ""
    image: str = ""
    ingredients: List[str] = field(default_factory=lambda: [""])
    instructions: str = ""
    cooking_time: str = ""
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_edit(self) -> bool:
        return self.recipe_id is not None

    @classmethod
    def load(cls, client: RecipeClient, recipe_id: str) -> "RecipeForm":
        """Fill a form from a stored recipe for editing."""

        recipe = client.get_recipe(recipe_id)
        cooking_time = recipe.get("cookingTime")
        return cls(
            recipe_id=recipe_id,
            title=recipe.get("title", ""),
            image=recipe.get("image") or "",
            ingredients=list(recipe.get("ingredients") or [""]),
            instructions=recipe.get("instructions", ""),
            cooking_time="" if cooking_time is None else str(cooking_time),
        )

    def set_field(self, name: str, value: str) -> None:
        if name not in ("title", "image", "instructions", "cooking_time"):
            raise AttributeError(name)
        setattr(self, name, value)
        self.errors.pop(name, None)

    def set_ingredient(self, index: int, value: str) -> None:
        self.ingredients[index] = value
        self.errors.pop("ingredients", None)

    def add_ingredient(self) -> None:
        self.ingredients.append("")

    def remove_ingredient(self, index: int) -> None:
        # The form always keeps at least one ingredient row.
        if len(self.ingredients) > 1:
            del self.ingredients[index]

    def validate(self) -> bool:
        """Run the recipe rules against the form and record per-field errors."""

        candidate = {
            "title": self.title,
            "image": self.image,
            "ingredients": self.ingredients,
            "instructions": self.instructions,
            "cookingTime": self.cooking_time,
        }
        self.errors = {}
        for error in find_errors(candidate):
            key = "cooking_time" if error.field == "cookingTime" else error.field
            self.errors.setdefault(key, error.message)
        return not self.errors

    def to_payload(self) -> Dict[str, Any]:
        """Build the request body from the form.

        Meant to run after :meth:`validate` has passed. An unparsable cooking
        time raises :class:`~recipebook.validation.InvalidCookingTime`.
        """

        payload: Dict[str, Any] = {
            "title": self.title.strip(),
            "ingredients": [item.strip() for item in self.ingredients if item.strip()],
            "instructions": self.instructions.strip(),
        }
        if self.image.strip():
            payload["image"] = self.image.strip()
        cooking_time = parse_cooking_time(self.cooking_time)
        if cooking_time is not None:
            payload["cookingTime"] = cooking_time
        elif self.is_edit:
            # Clearing the field on edit removes the stored value.
            payload["cookingTime"] = None
        if self.is_edit and "image" not in payload:
            payload["image"] = None
        return payload

    def submit(self, client: RecipeClient) -> Optional[Dict[str, Any]]:
        """Create or update the recipe.

        Returns the saved recipe, or ``None`` when the form does not pass
        validation. Client errors are left to the caller to report.
        """

        if not self.validate():
            return None

        payload = self.to_payload()
        if self.is_edit:
            return client.update_recipe(self.recipe_id, payload)

        recipe = client.create_recipe(payload)
        logger.debug("Created recipe %s", recipe.get("id"))
        return recipe


@dataclass
class RecipeListController:
    """State of the recipe list with its delete confirmation."""

    client: RecipeClient
    recipes: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None
    pending_delete: Optional[Dict[str, Any]] = None

    def refresh(self) -> bool:
        try:
            self.recipes = list(self.client.list_recipes())
        except RecipeClientError as exc:
            self.error = str(exc)
            return False
        self.error = None
        return True

    def request_delete(self, recipe: Dict[str, Any]) -> None:
        self.pending_delete = recipe

    def cancel_delete(self) -> None:
        self.pending_delete = None

    def confirm_delete(self) -> bool:
        recipe = self.pending_delete
        if recipe is None:
            return False

        try:
            self.client.delete_recipe(recipe["id"])
        except RecipeClientError as exc:
            self.error = f"Failed to delete recipe: {exc}"
            return False
        finally:
            self.pending_delete = None

        self.recipes = [item for item in self.recipes if item["id"] != recipe["id"]]
        self.error = None
        return True


__all__ = ["RecipeForm", "RecipeListController"]
