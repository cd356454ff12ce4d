from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from google.api_core import exceptions as gcloud_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore

from .config import Settings
from .models import Recipe, RecipeFields
from .storage import RecipeNotFound, RecipeRepository, StorageUnavailable, ensure_valid_recipe_id
from .validation import merge_changes

logger = logging.getLogger(__name__)

CONNECTION_CHECK_TIMEOUT = 10.0


def _fields_to_doc(fields: RecipeFields) -> dict:
    return {
        "title": fields.title,
        "image": fields.image,
        "ingredients": list(fields.ingredients),
        "instructions": fields.instructions,
        "cooking_time": fields.cooking_time,
    }


class FirestoreRecipeStorage(RecipeRepository):
    """Recipe storage backed by a Firestore collection."""

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        database: Optional[str] = None,
        collection_name: str = "recipes",
        client: Optional[firestore.Client] = None,
    ) -> None:
        self._collection_name = collection_name

        if client is None:
            try:
                client = firestore.Client(project=project, database=database)
            except auth_exceptions.GoogleAuthError as exc:
                raise StorageUnavailable(f"Could not create Firestore client: {exc}") from exc
        self._firestore_client = client
        self._collection = self._firestore_client.collection(collection_name)

    @classmethod
    def from_env(cls, settings: Optional[Settings] = None) -> "FirestoreRecipeStorage":
        """Build a storage instance from environment variables."""

        settings = settings or Settings.from_env()
        return cls(
            project=settings.project,
            database=settings.database,
            collection_name=settings.collection_name,
        )

    def check_connection(self) -> None:
        try:
            list(self._collection.limit(1).stream(timeout=CONNECTION_CHECK_TIMEOUT))
        except (gcloud_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as exc:
            raise StorageUnavailable(
                f"Could not reach Firestore collection '{self._collection_name}': {exc}"
            ) from exc
        logger.info("Connected to Firestore collection '%s'", self._collection_name)

    def close(self) -> None:
        self._firestore_client.close()

    def list_recipes(self) -> Iterable[Recipe]:
        query = self._collection.order_by("created_at", direction=firestore.Query.DESCENDING)
        for doc in query.stream():
            yield self._doc_to_recipe(doc.id, doc.to_dict() or {})

    def get_recipe(self, recipe_id: str) -> Recipe:
        snapshot = self._get_snapshot(recipe_id)
        return self._doc_to_recipe(snapshot.id, snapshot.to_dict() or {})

    def add_recipe(self, fields: RecipeFields) -> Recipe:
        doc = _fields_to_doc(fields)
        doc["created_at"] = firestore.SERVER_TIMESTAMP
        doc["updated_at"] = firestore.SERVER_TIMESTAMP

        doc_ref = self._collection.document()
        doc_ref.set(doc)
        logger.info("Created recipe %s", doc_ref.id)

        snapshot = doc_ref.get()
        return self._doc_to_recipe(snapshot.id, snapshot.to_dict() or {})

    def update_recipe(self, recipe_id: str, changes: Mapping[str, Any]) -> Recipe:
        snapshot = self._get_snapshot(recipe_id)
        current = self._doc_to_recipe(snapshot.id, snapshot.to_dict() or {})

        fields = merge_changes(current, changes)

        update_doc = _fields_to_doc(fields)
        update_doc["updated_at"] = firestore.SERVER_TIMESTAMP
        snapshot.reference.update(update_doc)
        logger.info("Updated recipe %s", recipe_id)

        snapshot = snapshot.reference.get()
        return self._doc_to_recipe(snapshot.id, snapshot.to_dict() or {})

    def delete_recipe(self, recipe_id: str) -> Recipe:
        snapshot = self._get_snapshot(recipe_id)
        removed = self._doc_to_recipe(snapshot.id, snapshot.to_dict() or {})

        snapshot.reference.delete()
        logger.info("Deleted recipe %s", recipe_id)
        return removed

    def _get_snapshot(self, recipe_id: str):
        ensure_valid_recipe_id(recipe_id)
        snapshot = self._collection.document(recipe_id).get()

        if not snapshot.exists:
            raise RecipeNotFound(f"Recipe '{recipe_id}' does not exist.")
        return snapshot

    def _doc_to_recipe(self, doc_id: str, data: dict) -> Recipe:
        ingredients = data.get("ingredients")
        if isinstance(ingredients, list):
            parsed_ingredients: List[str] = [str(item) for item in ingredients]
        else:
            parsed_ingredients = []

        return Recipe(
            id=doc_id,
            title=data.get("title", ""),
            ingredients=parsed_ingredients,
            instructions=data.get("instructions", ""),
            image=data.get("image") or None,
            cooking_time=data.get("cooking_time"),
            created_at=_as_datetime(data.get("created_at")),
            updated_at=_as_datetime(data.get("updated_at")),
        )


def _as_datetime(value: Any) -> Optional[datetime]:
    return value if isinstance(value, datetime) else None


__all__ = ["FirestoreRecipeStorage"]
