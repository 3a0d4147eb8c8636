"""
HTTP client for the wishlist REST API.

Every request carries the persisted bearer token when one exists. A 401 from
any endpoint tears the session down unconditionally (no refresh attempt) and
signals the UI to go to the login route. All other statuses are mapped onto
the typed errors in clients.exceptions; callers decide what to do with them.
"""

import json
import logging
from typing import Any

import requests

from auth.session import SessionManager
from clients.exceptions import (
    ApiError,
    AuthExpiredError,
    ConflictError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from core.config import ClientConfig

logger = logging.getLogger(__name__)


def _error_details(body: Any) -> tuple[str | None, list[str]]:
    """
    Pull a message and validation details out of an error body.

    Understands {"message": "..."} and {"message": ["...", "..."]}.
    """
    if not isinstance(body, dict):
        return None, []

    message = body.get("message")
    if isinstance(message, list):
        details = [str(m) for m in message if m]
        return (details[0] if details else None), details
    if isinstance(message, str) and message:
        return message, []

    error = body.get("error")
    if isinstance(error, str) and error:
        return error, []
    return None, []


class ApiClient:
    """
    Authenticated JSON client.

    Usage:
        api = ApiClient(config, session)
        wishlists = api.get("/wishlists/mine")
        api.post("/wishlists", json={"title": "Birthday"})
    """

    def __init__(
        self,
        config: ClientConfig,
        session: SessionManager,
        http: requests.Session | None = None,
    ):
        self._config = config
        self._session = session
        self._base_url = config.api_base_url.rstrip("/")
        self._http = http or requests.Session()
        self._http.headers.update({"Content-Type": "application/json"})

    @property
    def base_url(self) -> str:
        return self._base_url

    def get(self, path: str, params: dict | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict | None = None,
    ) -> Any:
        """
        Send one request and decode the JSON response.

        Returns:
            Decoded body, or None for empty bodies (204, DELETE, ...)

        Raises:
            AuthExpiredError: 401 (session already torn down)
            NotFoundError: 404
            ConflictError: 409
            ValidationError: any other 4xx
            ServerError: 5xx
            NetworkError: timeout or connection failure
        """
        url = f"{self._base_url}{path}"
        headers = {}
        token = self._session.stored_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug(f"{method} {url}")

        try:
            response = self._http.request(
                method,
                url,
                json=json,
                params=params,
                headers=headers,
                timeout=self._config.request_timeout_seconds,
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"{method} {path} timed out: {e}")
            raise NetworkError(
                f"The request timed out after {self._config.request_timeout_seconds:g} seconds."
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise NetworkError()

        logger.debug(f"{method} {path} -> {response.status_code}")

        if response.status_code == 401:
            self._handle_unauthorized(method, path)

        body = self._decode(response)

        if response.status_code >= 400:
            raise self._map_error(response.status_code, body)

        return body

    def _handle_unauthorized(self, method: str, path: str) -> None:
        logger.warning(f"{method} {path} returned 401, ending session")
        self._session.teardown(reason="expired", redirect_to=self._config.login_route)
        raise AuthExpiredError(status_code=401)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError):
            if response.status_code < 400:
                logger.error(f"Invalid JSON from API: {response.text[:200]}")
                raise ServerError("The server sent an unreadable response.", response.status_code)
            return None

    @staticmethod
    def _map_error(status_code: int, body: Any) -> ApiError:
        message, details = _error_details(body)

        if status_code == 404:
            error_cls = NotFoundError
        elif status_code == 409:
            error_cls = ConflictError
        elif status_code >= 500:
            error_cls = ServerError
        else:
            error_cls = ValidationError

        return error_cls(message, status_code=status_code, details=details)

    def close(self) -> None:
        self._http.close()
