"""Kite Connect login and request-token exchange.

Kite's login flow: the user is redirected to the Kite login page with our
API key, logs in, and is sent back to our redirect URL with a one-time
``request_token``. That token is exchanged at ``/session/token`` for an
access token, proving possession of the API secret with a checksum
instead of sending the secret itself.
"""

import hashlib
import logging
from datetime import timedelta

import httpx

from config import settings
from integrations.exceptions import KiteAuthError, KiteDataError, KiteRemoteError
from integrations.kite_client import SESSION_TOKEN_PATH, KiteClient
from integrations.kite_protocol import KiteSession

logger = logging.getLogger(__name__)

# Kite access tokens expire at a fixed time the next morning; the API does
# not report it, so a flat one-day lifetime is assumed.
SESSION_LIFETIME = timedelta(days=1)


def generate_checksum(api_key: str, request_token: str, api_secret: str) -> str:
    """Compute the ``/session/token`` checksum.

    SHA-256 over the UTF-8 bytes of ``api_key + request_token + api_secret``
    (no delimiter), as lowercase hex. The order is fixed by Kite.
    """
    data = f"{api_key}{request_token}{api_secret}".encode("utf-8")
    return hashlib.sha256(data).hexdigest()


class KiteAuthClient:
    """Builds login URLs and exchanges request tokens for access tokens."""

    def __init__(
        self,
        client: KiteClient | None = None,
        api_secret: str | None = None,
        login_url: str | None = None,
    ):
        self._client = client or KiteClient()
        self._api_secret = api_secret or settings.KITE_API_SECRET
        self._login_url = login_url or settings.KITE_LOGIN_URL

    @property
    def api_key(self) -> str:
        return self._client.api_key

    def build_authorization_url(self, state: str, login_url: str | None = None) -> str:
        """Return the browser login URL carrying the API key and ``state``.

        Args:
            state: Opaque token echoed back on the callback so it can be
                tied to the user that started the login.
            login_url: Override for the configured login base URL.
        """
        # Merge so a configured query such as "?v=3" is kept
        url = httpx.URL(login_url or self._login_url).copy_merge_params(
            {"api_key": self.api_key, "redirect_params": state}
        )
        return str(url)

    def exchange_request_token(
        self, request_token: str, api_secret: str | None = None
    ) -> KiteSession:
        """Exchange a one-time request token for an access token.

        Args:
            request_token: Token received on the login callback.
            api_secret: Override for the configured API secret.

        Returns:
            The new session. The caller persists the token together with
            an expiry of now + :data:`SESSION_LIFETIME`.

        Raises:
            KiteAuthError: If the request fails, times out, is rejected, or
                the response carries no access token.
        """
        secret = api_secret or self._api_secret
        if not self.api_key or not secret:
            raise KiteAuthError("Kite API key/secret not configured")
        if not request_token:
            raise KiteAuthError("Missing request token")

        checksum = generate_checksum(self.api_key, request_token, secret)
        try:
            body = self._client.post_form(
                SESSION_TOKEN_PATH,
                {
                    "api_key": self.api_key,
                    "request_token": request_token,
                    "checksum": checksum,
                },
            )
        except KiteRemoteError as exc:
            raise KiteAuthError(f"Token exchange failed: {exc}") from exc
        except KiteDataError as exc:
            raise KiteAuthError(f"Token exchange returned an unreadable response: {exc}") from exc

        data = body.get("data") if isinstance(body, dict) else None
        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            raise KiteAuthError("Token exchange response did not include an access token")

        logger.info("Kite: request token exchanged for user %s", data.get("user_id") or "<unknown>")
        return KiteSession(
            access_token=str(access_token),
            user_id=data.get("user_id"),
        )
