"""JSON API for the recipe resource.

Every response, successful or not, uses the same envelope::

    {"success": bool, "message": str, "data": ..., "errors": [str], "count": int}

Keys without a value are left out.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, Response, current_app, jsonify, request

from .storage import InvalidRecipeId, RecipeNotFound, RecipeRepository
from .validation import RecipeValidationError, validate_recipe

REQUIRED_FIELDS = ("title", "ingredients", "instructions")

# Messages for the generic 500 envelope, keyed by endpoint.
SERVER_ERROR_MESSAGES = {
    "recipes.create_recipe": "Server error while creating recipe",
    "recipes.list_recipes": "Server error while fetching recipes",
    "recipes.get_recipe": "Server error while fetching recipe",
    "recipes.update_recipe": "Server error while updating recipe",
    "recipes.delete_recipe": "Server error while deleting recipe",
}

bp = Blueprint("recipes", __name__)


class PayloadError(ValueError):
    """Raised when a request body is unusable before field validation."""


def envelope(
    status: int,
    *,
    message: Optional[str] = None,
    data: Any = None,
    errors: Optional[List[str]] = None,
    count: Optional[int] = None,
    **extra: Any,
) -> Tuple[Response, int]:
    body: Dict[str, Any] = {"success": status < 400}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if errors is not None:
        body["errors"] = errors
    if count is not None:
        body["count"] = count
    body.update(extra)
    return jsonify(body), status


def _storage() -> RecipeRepository:
    return current_app.config["RECIPE_STORAGE"]


def _json_payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise PayloadError("Request body must be a JSON object")
    return payload


@bp.errorhandler(PayloadError)
def handle_payload_error(exc: PayloadError):
    return envelope(400, message=str(exc))


@bp.errorhandler(RecipeValidationError)
def handle_validation_error(exc: RecipeValidationError):
    return envelope(400, message="Validation failed", errors=exc.messages)


@bp.errorhandler(InvalidRecipeId)
def handle_invalid_id(exc: InvalidRecipeId):
    return envelope(400, message="Invalid recipe ID format")


@bp.errorhandler(RecipeNotFound)
def handle_not_found(exc: RecipeNotFound):
    return envelope(404, message="Recipe not found")


@bp.post("/recipes")
def create_recipe():
    payload = _json_payload()

    if any(payload.get(name) is None for name in REQUIRED_FIELDS):
        raise PayloadError("Please provide title, ingredients, and instructions")
    if not isinstance(payload["ingredients"], list):
        raise PayloadError("Ingredients must be a non-empty array")

    fields = validate_recipe(payload)
    recipe = _storage().add_recipe(fields)
    return envelope(201, message="Recipe created successfully", data=recipe.to_dict())


@bp.get("/recipes")
def list_recipes():
    recipes = [recipe.to_dict() for recipe in _storage().list_recipes()]
    return envelope(200, count=len(recipes), data=recipes)


@bp.get("/recipes/<recipe_id>")
def get_recipe(recipe_id: str):
    recipe = _storage().get_recipe(recipe_id)
    return envelope(200, data=recipe.to_dict())


@bp.put("/recipes/<recipe_id>")
def update_recipe(recipe_id: str):
    changes = _json_payload()

    if "ingredients" in changes and not isinstance(changes["ingredients"], list):
        raise PayloadError("Ingredients must be a non-empty array")

    recipe = _storage().update_recipe(recipe_id, changes)
    return envelope(200, message="Recipe updated successfully", data=recipe.to_dict())


@bp.delete("/recipes/<recipe_id>")
def delete_recipe(recipe_id: str):
    recipe = _storage().delete_recipe(recipe_id)
    return envelope(200, message="Recipe deleted successfully", data=recipe.to_dict())


__all__ = ["SERVER_ERROR_MESSAGES", "bp", "envelope"]
