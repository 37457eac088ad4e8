"""HTTP client for the Scaleway API with retry on transient failures."""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..errors import NotFoundError, ResponseError, TransientHTTPError
from ..settings import ProviderSettings, get_settings

logger = logging.getLogger(__name__)

USER_AGENT = "scwprovider/0.1.0"


class ApiModel(BaseModel):
    """Base model for API payloads, unknown response fields are ignored."""

    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    @classmethod
    def from_response(cls, data: Any):
        """Validate a response payload, a malformed one is a ResponseError."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ResponseError(
                200, f"unexpected {cls.__name__} payload: {exc}", "invalid_response"
            ) from exc


def is_retryable_status(status_code: int) -> bool:
    """Determine if HTTP status code is retryable."""
    return status_code in (408, 429, 500, 502, 503, 504)


def _error_from_response(response: httpx.Response) -> ResponseError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    message = body.get("message") or response.text or response.reason_phrase
    error_type = body.get("type")
    if response.status_code == 404:
        return NotFoundError(message, error_type)
    return ResponseError(response.status_code, message, error_type)


class ScalewayClient:
    """Synchronous client for the Scaleway REST API.

    Handles authentication, JSON encoding, error mapping and retries of
    transient failures (429, 5xx, network errors) with exponential backoff.
    Resource specific calls live in the API classes wrapping this client.
    """

    def __init__(
        self,
        *,
        api_url: str = "https://api.scaleway.com",
        secret_key: str | None = None,
        default_project_id: str | None = None,
        default_region: str = "fr-par",
        default_zone: str = "fr-par-1",
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_factor: float = 2.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.default_project_id = default_project_id
        self.default_region = default_region
        self.default_zone = default_zone
        self._secret_key = secret_key
        self._max_retries = max_retries
        self._backoff_factor = backoff_factor
        self._http = httpx.Client(
            base_url=self.api_url,
            timeout=timeout,
            transport=transport,
            headers=self._headers(),
        )

    @classmethod
    def from_settings(
        cls,
        settings: ProviderSettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> "ScalewayClient":
        settings = settings or get_settings()
        return cls(
            api_url=settings.api_url,
            secret_key=settings.secret_key,
            default_project_id=settings.default_project_id,
            default_region=settings.default_region,
            default_zone=settings.default_zone,
            timeout=settings.http_timeout,
            max_retries=settings.http_max_retries,
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "User-Agent": USER_AGENT}
        if self._secret_key:
            headers["X-Auth-Token"] = self._secret_key
        return headers

    def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None,
        json: dict[str, Any] | None,
    ) -> dict[str, Any]:
        try:
            response = self._http.request(method, path, params=params, json=json)
        except httpx.TransportError as exc:
            logger.warning(f"Network error on {method} {path}: {exc}")
            raise TransientHTTPError(str(exc)) from exc

        if is_retryable_status(response.status_code):
            logger.warning(f"Retryable HTTP {response.status_code} on {method} {path}")
            raise TransientHTTPError(f"HTTP {response.status_code}: {response.text}")

        if response.is_error:
            error = _error_from_response(response)
            logger.debug(f"{method} {path} failed: {error}")
            raise error

        return response.json() if response.content else {}

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute a request, retrying transient failures.

        Raises:
            NotFoundError: On HTTP 404
            ResponseError: On any other non-2xx answer
            TransientHTTPError: When retries are exhausted
        """
        retrying = Retrying(
            retry=retry_if_exception_type(TransientHTTPError),
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=self._backoff_factor, max=30),
            reraise=True,
        )
        return retrying(self._send, method, path, params, json)

    def get(self, path: str, *, params: dict[str, Any] | None = None) -> dict[str, Any]:
        return self.request("GET", path, params=params)

    def post(self, path: str, *, json: dict[str, Any] | None = None) -> dict[str, Any]:
        return self.request("POST", path, json=json or {})

    def patch(self, path: str, *, json: dict[str, Any] | None = None) -> dict[str, Any]:
        return self.request("PATCH", path, json=json or {})

    def put(self, path: str, *, json: dict[str, Any] | None = None) -> dict[str, Any]:
        return self.request("PUT", path, json=json or {})

    def delete(self, path: str) -> dict[str, Any]:
        return self.request("DELETE", path)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ScalewayClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
