"""Validation rules for recipes.

The rules are plain functions so that the API and the form controllers run
exactly the same checks. Every rule is evaluated, and all violations are
reported together in field order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from .models import Recipe, RecipeFields

TITLE_MAX_LENGTH = 100
COOKING_TIME_MIN = 1
COOKING_TIME_MAX = 1440

_INTEGER_RE = re.compile(r"^[+-]?\d+$")

# Wire names of the fields a client may set.
EDITABLE_FIELDS = ("title", "image", "ingredients", "instructions", "cookingTime")


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class RecipeValidationError(ValueError):
    """Raised when a candidate recipe breaks one or more field rules."""

    def __init__(self, errors: List[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__(", ".join(self.messages))

    @property
    def messages(self) -> List[str]:
        return [error.message for error in self.errors]


class InvalidCookingTime(ValueError):
    pass


def parse_cooking_time(value: Any) -> Optional[int]:
    """Parse a cooking time given as an int, an integral float or digits.

    ``None`` and blank strings mean "no cooking time". Anything that is not a
    whole number raises :class:`InvalidCookingTime`. Range is not checked here.
    """

    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidCookingTime(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise InvalidCookingTime(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if _INTEGER_RE.match(text):
            try:
                return int(text)
            except ValueError as exc:
                # More digits than int() will convert.
                raise InvalidCookingTime(value) from exc
    raise InvalidCookingTime(value)


def find_errors(candidate: Mapping[str, Any]) -> List[FieldError]:
    """Return every rule the candidate breaks, without raising."""

    errors: List[FieldError] = []

    title = candidate.get("title")
    if not isinstance(title, str) or not title.strip():
        errors.append(FieldError("title", "Recipe title is required"))
    elif len(title.strip()) > TITLE_MAX_LENGTH:
        errors.append(
            FieldError("title", f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
        )

    image = candidate.get("image")
    if image is not None and not isinstance(image, str):
        errors.append(FieldError("image", "Image must be a URL string"))

    ingredients = candidate.get("ingredients")
    if ingredients is None:
        errors.append(FieldError("ingredients", "At least one ingredient is required"))
    elif not isinstance(ingredients, list) or not all(
        isinstance(item, str) for item in ingredients
    ):
        errors.append(
            FieldError("ingredients", "Ingredients must be a list of text entries")
        )
    elif not _clean_ingredients(ingredients):
        errors.append(
            FieldError("ingredients", "Recipe must have at least one ingredient")
        )

    instructions = candidate.get("instructions")
    if not isinstance(instructions, str) or not instructions.strip():
        errors.append(FieldError("instructions", "Cooking instructions are required"))

    try:
        cooking_time = parse_cooking_time(candidate.get("cookingTime"))
    except InvalidCookingTime:
        errors.append(
            FieldError("cookingTime", "Cooking time must be a whole number of minutes")
        )
    else:
        if cooking_time is not None and cooking_time < COOKING_TIME_MIN:
            errors.append(
                FieldError("cookingTime", "Cooking time must be at least 1 minute")
            )
        elif cooking_time is not None and cooking_time > COOKING_TIME_MAX:
            errors.append(
                FieldError(
                    "cookingTime",
                    "Cooking time cannot exceed 24 hours (1440 minutes)",
                )
            )

    return errors


def validate_recipe(candidate: Mapping[str, Any]) -> RecipeFields:
    """Check a candidate recipe and return its normalized fields.

    Raises :class:`RecipeValidationError` listing all violations.
    """

    errors = find_errors(candidate)
    if errors:
        raise RecipeValidationError(errors)

    image = candidate.get("image")
    return RecipeFields(
        title=candidate["title"].strip(),
        ingredients=_clean_ingredients(candidate["ingredients"]),
        instructions=candidate["instructions"].strip(),
        image=(image.strip() or None) if image is not None else None,
        cooking_time=parse_cooking_time(candidate.get("cookingTime")),
    )


def merge_changes(current: Recipe, changes: Mapping[str, Any]) -> RecipeFields:
    """Apply a partial update to a stored recipe and validate the result."""

    merged = {
        "title": current.title,
        "image": current.image,
        "ingredients": list(current.ingredients),
        "instructions": current.instructions,
        "cookingTime": current.cooking_time,
    }
    for name in EDITABLE_FIELDS:
        if name in changes:
            merged[name] = changes[name]
    return validate_recipe(merged)


def _clean_ingredients(ingredients: List[str]) -> List[str]:
    return [item.strip() for item in ingredients if item.strip()]


__all__ = [
    "EDITABLE_FIELDS",
    "FieldError",
    "InvalidCookingTime",
    "RecipeValidationError",
    "find_errors",
    "merge_changes",
    "parse_cooking_time",
    "validate_recipe",
]
