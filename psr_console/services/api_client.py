"""
REST client for the PSR AI backend.

One place that knows how to talk to the backend:
- Attaches the bearer token from the session provider
- Turns every failure into a single `APIError` with a category the UI can act on
- Lets a 401 reach the session provider so the token can be dropped

Failure taxonomy:
- network: the request never got an answer (connection refused, timeout)
- HTTP status: non-2xx, message taken from the JSON `detail` / `message`
- response: 2xx but the body is not what we expected
"""
from enum import Enum
from typing import Any, Optional
import logging

import requests

from psr_console.config import settings

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error occurred. Please check your connection."


class ErrorCategory(str, Enum):
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    SERVER = "server"
    HTTP = "http"
    RESPONSE = "response"


class APIError(Exception):
    def __init__(
        self,
        message: str,
        status: int = 0,
        category: ErrorCategory = ErrorCategory.HTTP,
        errors: Optional[list[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.category = category
        self.errors = errors or []

    def __repr__(self):
        return f"APIError({self.status}, {self.category.value}, {self.message!r})"


def categorize_status(status: int) -> ErrorCategory:
    if status == 401:
        return ErrorCategory.AUTHENTICATION
    if status == 403:
        return ErrorCategory.PERMISSION
    if status == 404:
        return ErrorCategory.NOT_FOUND
    if status in (400, 422):
        return ErrorCategory.VALIDATION
    if status >= 500:
        return ErrorCategory.SERVER
    return ErrorCategory.HTTP


def _error_message(response: requests.Response) -> tuple[str, list[str]]:
    """Pull a readable message out of an error body (detail wins over message)."""
    fallback = f"HTTP {response.status_code}: {response.reason or 'Error'}"
    try:
        data = response.json()
    except ValueError:
        return fallback, []
    if not isinstance(data, dict):
        return fallback, []

    errors = [str(e) for e in data.get("errors") or []]
    detail = data.get("detail")
    if isinstance(detail, str) and detail:
        return detail, errors
    if isinstance(detail, list) and detail:
        # FastAPI validation errors
        parts = [
            d.get("msg", str(d)) if isinstance(d, dict) else str(d)
            for d in detail
        ]
        return "; ".join(parts), errors + parts
    message = data.get("message")
    if isinstance(message, str) and message:
        return message, errors
    return fallback, errors


class ApiClient:
    def __init__(
        self,
        session_provider,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ):
        self.session_provider = session_provider
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout_seconds
        self.http = http or requests.Session()

    def _headers(self, json_body: bool) -> dict:
        headers = {}
        if json_body:
            headers["Content-Type"] = "application/json"
        token = self.session_provider.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[dict] = None,
        files: Any = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None if empty)."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.http.request(
                method,
                url,
                json=json,
                params=params,
                files=files,
                headers=self._headers(json_body=files is None),
                timeout=timeout or self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise APIError(NETWORK_ERROR_MESSAGE, 0, ErrorCategory.NETWORK) from e

        if not response.ok:
            message, errors = _error_message(response)
            category = categorize_status(response.status_code)
            logger.warning(
                f"{method} {url} -> {response.status_code} ({category.value}): {message}"
            )
            if category == ErrorCategory.AUTHENTICATION:
                self.session_provider.on_unauthorized()
            raise APIError(message, response.status_code, category, errors)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise APIError(
                f"Unexpected non-JSON response from {path}",
                response.status_code,
                ErrorCategory.RESPONSE,
            ) from e

    def get(self, path: str, params: Optional[dict] = None, **kwargs) -> Any:
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("PUT", path, json=json, **kwargs)

    def delete(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("DELETE", path, json=json, **kwargs)
