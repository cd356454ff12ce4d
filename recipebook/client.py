"""HTTP client for the recipe API.

Calls return the ``data`` payload of the response envelope. Failures are
raised as :class:`RecipeClientError` subclasses so callers can tell a
rejected request (:class:`RecipeServerError`) from an unreachable server
(:class:`RecipeConnectionError`).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"
DEFAULT_TIMEOUT = 10.0
CONNECTION_ERROR_MESSAGE = "Unable to connect to server. Please check your connection."


class RecipeClientError(Exception):
    """Base error for all client failures."""


class RecipeServerError(RecipeClientError):
    """The server answered with an error envelope."""

    def __init__(self, message: str, status_code: int, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.errors = list(errors or [])


class RecipeConnectionError(RecipeClientError):
    """The request never got an answer from the server."""

    def __init__(self, message: str = CONNECTION_ERROR_MESSAGE) -> None:
        super().__init__(message)


def _log_request(request: httpx.Request) -> None:
    logger.debug("%s %s", request.method, request.url)


def _log_response(response: httpx.Response) -> None:
    logger.debug("%s %s -> %s", response.request.method, response.request.url, response.status_code)


class RecipeClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._http = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
            event_hooks={"request": [_log_request], "response": [_log_response]},
        )

    def __enter__(self) -> "RecipeClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def list_recipes(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/recipes")

    def get_recipe(self, recipe_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/recipes/{recipe_id}")

    def create_recipe(self, recipe: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/recipes", json=dict(recipe))

    def update_recipe(self, recipe_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/recipes/{recipe_id}", json=dict(changes))

    def delete_recipe(self, recipe_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/recipes/{recipe_id}")

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = self._http.request(method, url, **kwargs)
            if response.is_error:
                raise _server_error(response)
            return response.json().get("data")
        except RecipeClientError:
            raise
        except httpx.TransportError as exc:
            logger.debug("%s %s failed: %r", method, url, exc)
            raise RecipeConnectionError() from exc
        except Exception as exc:
            raise RecipeClientError(str(exc) or "An unexpected error occurred") from exc


def _server_error(response: httpx.Response) -> RecipeServerError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    errors = body.get("errors") or []
    if errors:
        message = ", ".join(str(error) for error in errors)
    else:
        message = body.get("message") or "An error occurred"
    return RecipeServerError(message, response.status_code, errors)


__all__ = [
    "RecipeClient",
    "RecipeClientError",
    "RecipeConnectionError",
    "RecipeServerError",
]
