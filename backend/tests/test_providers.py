"""Tests for data-fetch providers."""

from datetime import date

import httpx
import pytest

from athlete_insights.core.errors import UpstreamFetchError
from athlete_insights.models.biometrics import BiometricRecord
from athlete_insights.services.providers import (
    HttpBiometricProvider,
    InMemoryBiometricProvider,
    InMemoryGeneticProvider,
)


def _provider(handler) -> HttpBiometricProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpBiometricProvider(base_url="http://provider.test/", client=client)


class TestHttpBiometricProvider:
    """Tests for the HTTP biometric provider."""

    async def test_parses_rows_newest_first(self):
        """Test a list payload is parsed and sorted."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            return httpx.Response(
                200,
                json=[
                    {"date": "2024-05-01", "hrv_ms": 48, "athlete_id": 99},
                    {"date": "2024-05-03", "hrv_ms": 52},
                    {"date": "not-a-date"},
                    "garbage",
                ],
            )

        provider = _provider(handler)
        records = await provider.get_history("a1")
        await provider.close()

        assert seen["url"] == "http://provider.test/athletes/a1/biometrics"
        assert [r.date for r in records] == [date(2024, 5, 3), date(2024, 5, 1)]
        assert all(r.athlete_id == "a1" for r in records)

    async def test_items_envelope(self):
        """Test an ``{"items": [...]}`` payload."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"items": [{"date": "2024-05-01", "spo2_pct": 97}]})

        records = await _provider(handler).get_history("a1")
        assert len(records) == 1
        assert records[0].spo2_pct == 97

    async def test_http_error_status(self):
        """Test non-2xx responses become fetch errors."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        with pytest.raises(UpstreamFetchError) as exc_info:
            await _provider(handler).get_history("a1")
        assert exc_info.value.athlete_id == "a1"
        assert "503" in str(exc_info.value)

    async def test_transport_error(self):
        """Test connection failures become fetch errors."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamFetchError):
            await _provider(handler).get_history("a1")

    async def test_invalid_json(self):
        """Test an unparsable body becomes a fetch error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>")

        with pytest.raises(UpstreamFetchError):
            await _provider(handler).get_history("a1")

    async def test_unexpected_shape(self):
        """Test a scalar payload is rejected."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"items": "nope"})

        with pytest.raises(UpstreamFetchError):
            await _provider(handler).get_history("a1")

    async def test_unconfigured_url(self):
        """Test missing base URL fails without a request."""
        provider = HttpBiometricProvider(base_url="")
        with pytest.raises(UpstreamFetchError):
            await provider.get_history("a1")


class TestInMemoryProviders:
    """Tests for dict-backed providers."""

    async def test_history_sorted_newest_first(self):
        """Test in-memory history ordering."""
        provider = InMemoryBiometricProvider(
            {
                "a1": [
                    BiometricRecord(date=date(2024, 5, 1)),
                    BiometricRecord(date=date(2024, 5, 2)),
                ]
            }
        )
        records = await provider.get_history("a1")
        assert records[0].date == date(2024, 5, 2)

    async def test_unknown_athlete(self):
        """Test unknown athletes raise fetch errors."""
        with pytest.raises(UpstreamFetchError):
            await InMemoryBiometricProvider({}).get_history("a1")
        with pytest.raises(UpstreamFetchError):
            await InMemoryGeneticProvider({}).get_profile("a1")
