import logging
import traceback
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, NotFound

from .api import SERVER_ERROR_MESSAGES, bp as recipes_bp, envelope
from .config import Settings
from .gcp_storage import FirestoreRecipeStorage
from .models import Recipe
from .storage import RecipeRepository

logger = logging.getLogger(__name__)


def create_app(
    storage: Optional[RecipeRepository] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    """Build the recipe API around a recipe repository.

    ``storage`` is the repository the views read and write; without one a
    Firestore repository is opened from ``settings``. ``settings`` default to
    :meth:`Settings.from_env`.
    """

    settings = settings or Settings.from_env()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_content_length
    app.config["SETTINGS"] = settings

    if storage is None:
        storage = FirestoreRecipeStorage.from_env(settings)
    app.config["RECIPE_STORAGE"] = storage

    app.register_blueprint(recipes_bp, url_prefix=settings.api_prefix)

    @app.get("/health")
    def health():
        return jsonify(
            success=True,
            message="Server is running",
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    CORS(
        app,
        origins=[settings.cors_origin],
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.after_request
    def log_request(response):
        logger.debug("%s %s -> %s", request.method, request.path, response.status_code)
        return response

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        if isinstance(exc, NotFound):
            return envelope(404, message="Route not found")
        return envelope(exc.code or 500, message=exc.description)

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = SERVER_ERROR_MESSAGES.get(request.endpoint or "", "Server error")
        if settings.development:
            return envelope(
                500,
                message=message,
                error=str(exc),
                stack="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            )
        return envelope(500, message=message)

    return app


__all__ = ["create_app", "Recipe"]
