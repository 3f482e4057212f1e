"""Tests for the Kite REST client."""

import httpx
import pytest

from integrations.exceptions import (
    KiteAPIError,
    KiteConnectionError,
    KiteDataError,
    KiteRemoteError,
)
from tests.fixtures import SAMPLE_HOLDINGS_RESPONSE
from tests.fixtures.mocks import TEST_API_KEY


class TestKiteClient:
    def test_fetch_holdings_returns_body(self, kite_api):
        kite_api.set_json("GET", "/portfolio/holdings", SAMPLE_HOLDINGS_RESPONSE)

        body = kite_api.client().fetch_holdings("tok")

        assert body == SAMPLE_HOLDINGS_RESPONSE

    def test_sends_auth_and_version_headers(self, kite_api):
        kite_api.set_json("GET", "/orders", {"data": []})

        kite_api.client().fetch_orders("tok")

        [request] = kite_api.calls("/orders")
        assert request.headers["Authorization"] == f"token {TEST_API_KEY}:tok"
        assert request.headers["X-Kite-Version"] == "3"

    def test_positions_path(self, kite_api):
        kite_api.set_json("GET", "/portfolio/positions", {"data": {"net": []}})

        kite_api.client().fetch_positions("tok")

        assert len(kite_api.calls("/portfolio/positions")) == 1

    def test_http_error_raises_api_error(self, kite_api):
        kite_api.set_json(
            "GET", "/portfolio/holdings",
            {"status": "error", "message": "Incorrect `api_key` or `access_token`.", "error_type": "TokenException"},
            status_code=403,
        )

        with pytest.raises(KiteAPIError) as exc_info:
            kite_api.client().fetch_holdings("tok")

        assert exc_info.value.status_code == 403
        assert "TokenException" in str(exc_info.value)
        assert isinstance(exc_info.value, KiteRemoteError)

    def test_http_error_with_non_json_body(self, kite_api):
        kite_api.set_text("GET", "/portfolio/holdings", "Service Unavailable", status_code=503)

        with pytest.raises(KiteAPIError) as exc_info:
            kite_api.client().fetch_holdings("tok")

        assert exc_info.value.status_code == 503

    def test_timeout_raises_connection_error(self, kite_api):
        kite_api.set_error("GET", "/portfolio/holdings", httpx.ReadTimeout)

        with pytest.raises(KiteConnectionError, match="timed out"):
            kite_api.client().fetch_holdings("tok")

    def test_connect_error_raises_connection_error(self, kite_api):
        kite_api.set_error("GET", "/portfolio/holdings", httpx.ConnectError)

        with pytest.raises(KiteConnectionError, match="connection failed"):
            kite_api.client().fetch_holdings("tok")

    def test_non_json_body_raises_data_error(self, kite_api):
        kite_api.set_text("GET", "/portfolio/holdings", "<html></html>")

        with pytest.raises(KiteDataError):
            kite_api.client().fetch_holdings("tok")

    def test_is_configured(self, kite_api):
        assert kite_api.client().is_configured()
