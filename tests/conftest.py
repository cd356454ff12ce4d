from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from recipebook import create_app
from recipebook.client import RecipeClient
from recipebook.config import Settings
from recipebook.models import Recipe
from recipebook.storage import RecipeNotFound, ensure_valid_recipe_id
from recipebook.validation import merge_changes, validate_recipe


class InMemoryRecipeStorage:
    """Simple storage backend used for tests."""

    def __init__(self) -> None:
        self._recipes: list[Recipe] = []
        self._last_timestamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.closed = False

    def _now(self) -> datetime:
        # Strictly increasing, so ordering and "updatedAt advances" are testable.
        now = max(datetime.now(timezone.utc), self._last_timestamp + timedelta(microseconds=1))
        self._last_timestamp = now
        return now

    def list_recipes(self):
        return sorted(self._recipes, key=lambda recipe: recipe.created_at, reverse=True)

    def get_recipe(self, recipe_id: str) -> Recipe:
        ensure_valid_recipe_id(recipe_id)
        for recipe in self._recipes:
            if recipe.id == recipe_id:
                return recipe
        raise RecipeNotFound(recipe_id)

    def add_recipe(self, fields) -> Recipe:
        now = self._now()
        recipe = Recipe(
            id=secrets.token_hex(10),
            title=fields.title,
            ingredients=list(fields.ingredients),
            instructions=fields.instructions,
            image=fields.image,
            cooking_time=fields.cooking_time,
            created_at=now,
            updated_at=now,
        )
        self._recipes.append(recipe)
        return recipe

    def update_recipe(self, recipe_id: str, changes) -> Recipe:
        recipe = self.get_recipe(recipe_id)
        fields = merge_changes(recipe, changes)
        recipe.title = fields.title
        recipe.ingredients = fields.ingredients
        recipe.instructions = fields.instructions
        recipe.image = fields.image
        recipe.cooking_time = fields.cooking_time
        recipe.updated_at = self._now()
        return recipe

    def delete_recipe(self, recipe_id: str) -> Recipe:
        recipe = self.get_recipe(recipe_id)
        self._recipes.remove(recipe)
        return recipe

    def check_connection(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True


def make_recipe(storage: InMemoryRecipeStorage, **overrides) -> Recipe:
    candidate = {
        "title": "Pancakes",
        "ingredients": ["flour", "milk", "eggs"],
        "instructions": "Whisk and fry.",
    }
    candidate.update(overrides)
    return storage.add_recipe(validate_recipe(candidate))


@pytest.fixture
def storage() -> InMemoryRecipeStorage:
    return InMemoryRecipeStorage()


@pytest.fixture
def settings() -> Settings:
    return Settings(env="production", cors_origin="http://localhost:5173")


@pytest.fixture
def app(storage, settings):
    app = create_app(storage=storage, settings=settings)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def api_client(app):
    """A RecipeClient talking to the Flask app in-process."""

    transport = httpx.WSGITransport(app=app)
    with RecipeClient("http://testserver/api", transport=transport) as recipe_client:
        yield recipe_client


@pytest.fixture
def recipe_factory(storage):
    def factory(**overrides) -> Recipe:
        return make_recipe(storage, **overrides)

    return factory
