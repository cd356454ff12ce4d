"""Process entrypoint for the recipe API, served by Gunicorn as ``main:app``.

Configuration and logging come from the environment. The document store is
connected before the app is handed to the server; when that fails the process
exits with status 1.
"""

import atexit
import logging
import sys

from recipebook import create_app
from recipebook.config import Settings
from recipebook.gcp_storage import FirestoreRecipeStorage
from recipebook.storage import StorageUnavailable

settings = Settings.from_env()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("recipebook")

try:
    storage = FirestoreRecipeStorage.from_env(settings)
    storage.check_connection()
except StorageUnavailable as exc:
    logger.critical("Failed to start server: %s", exc)
    sys.exit(1)
atexit.register(storage.close)

app = create_app(storage=storage, settings=settings)
logger.info("Recipe API ready under %s (%s mode)", settings.api_prefix, settings.env)


__all__ = ["app"]
