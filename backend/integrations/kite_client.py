"""Kite Connect REST client.

Thin synchronous wrapper around ``httpx`` for the handful of Kite
endpoints the sync engine needs. Every transport, HTTP-status and JSON
decoding failure is translated into the typed exceptions from
:mod:`integrations.exceptions`; nothing is retried.
"""

import logging
from typing import Any

import httpx

from config import settings
from integrations.exceptions import KiteAPIError, KiteConnectionError, KiteDataError
from integrations.kite_protocol import KITE_VERSION_HEADER

logger = logging.getLogger(__name__)

HOLDINGS_PATH = "/portfolio/holdings"
POSITIONS_PATH = "/portfolio/positions"
ORDERS_PATH = "/orders"
SESSION_TOKEN_PATH = "/session/token"


class KiteClient:
    """HTTP client for the Kite Connect API.

    One ``httpx.Client`` is held for the lifetime of the object; pass
    ``http_client`` to substitute a preconfigured one (e.g. with a mock
    transport in tests).
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: Kite API key (defaults to settings).
            api_url: API base URL (defaults to settings).
            timeout: Per-request timeout in seconds (defaults to settings).
            http_client: Optional preconfigured ``httpx.Client``.
        """
        self._api_key = api_key or settings.KITE_API_KEY
        self._api_url = (api_url or settings.KITE_API_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.KITE_REQUEST_TIMEOUT
        self._client = http_client or httpx.Client(timeout=self._timeout)

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def api_url(self) -> str:
        return self._api_url

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def is_configured(self) -> bool:
        """Return True if an API key is available."""
        return bool(self._api_key)

    def _auth_headers(self, access_token: str) -> dict[str, str]:
        return {
            **KITE_VERSION_HEADER,
            "Authorization": f"token {self._api_key}:{access_token}",
        }

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Send a request and map failures to Kite exceptions.

        Raises:
            KiteConnectionError: On timeouts and other transport failures.
            KiteAPIError: On any non-2xx status.
        """
        url = f"{self._api_url}{path}"
        try:
            response = self._client.request(method, url, timeout=self._timeout, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise KiteAPIError(
                f"Kite API error on {method} {path} (HTTP {status}): "
                f"{_error_detail(exc.response)}",
                status_code=status,
            ) from exc
        except httpx.TimeoutException as exc:
            raise KiteConnectionError(
                f"Kite request timed out after {self._timeout}s: {method} {path}"
            ) from exc
        except httpx.HTTPError as exc:
            raise KiteConnectionError(f"Kite connection failed: {method} {path}: {exc}") from exc
        return response

    @staticmethod
    def _decode(response: httpx.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise KiteDataError(f"Kite returned a non-JSON body for {path}") from exc

    def get_json(self, path: str, access_token: str) -> Any:
        """GET an authenticated resource and return the decoded JSON body."""
        response = self._request("GET", path, headers=self._auth_headers(access_token))
        data = self._decode(response, path)
        logger.debug("Kite: GET %s -> HTTP %d", path, response.status_code)
        return data

    def post_form(self, path: str, data: dict[str, str]) -> Any:
        """POST a form-encoded body and return the decoded JSON body."""
        response = self._request("POST", path, headers=dict(KITE_VERSION_HEADER), data=data)
        return self._decode(response, path)

    def fetch_holdings(self, access_token: str) -> Any:
        return self.get_json(HOLDINGS_PATH, access_token)

    def fetch_positions(self, access_token: str) -> Any:
        return self.get_json(POSITIONS_PATH, access_token)

    def fetch_orders(self, access_token: str) -> Any:
        return self.get_json(ORDERS_PATH, access_token)


def _error_detail(response: httpx.Response) -> str:
    """Pull Kite's ``error_type``/``message`` out of an error body if present."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "no detail"
    if isinstance(body, dict):
        message = body.get("message") or response.reason_phrase or "no detail"
        error_type = body.get("error_type")
        return f"{error_type}: {message}" if error_type else str(message)
    return response.reason_phrase or "no detail"
