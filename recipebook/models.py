from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class RecipeFields:
    """The user-editable part of a recipe, already trimmed and checked."""

    title: str
    ingredients: List[str]
    instructions: str
    image: Optional[str] = None
    cooking_time: Optional[int] = None


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: str
    title: str
    ingredients: List[str]
    instructions: str
    image: Optional[str] = None
    cooking_time: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def fields(self) -> RecipeFields:
        return RecipeFields(
            title=self.title,
            ingredients=list(self.ingredients),
            instructions=self.instructions,
            image=self.image,
            cooking_time=self.cooking_time,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON representation used by the API."""

        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "ingredients": list(self.ingredients),
            "instructions": self.instructions,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }
        if self.image:
            data["image"] = self.image
        if self.cooking_time is not None:
            data["cookingTime"] = self.cooking_time
        return data


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


__all__ = ["Recipe", "RecipeFields"]
