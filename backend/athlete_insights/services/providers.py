"""Data-fetch collaborators.

The scoring code never fetches; these providers hand it already-materialized
collections. Every failure surfaces as ``UpstreamFetchError`` so callers can
isolate it per athlete.
"""

import logging
from typing import Any, Mapping, Optional, Protocol, Sequence

import httpx
from pydantic import ValidationError

from athlete_insights.core.config import get_settings
from athlete_insights.core.errors import UpstreamFetchError
from athlete_insights.models.biometrics import BiometricRecord

logger = logging.getLogger(__name__)


class BiometricHistoryProvider(Protocol):
    """Per-athlete biometric history, most recent first."""

    async def get_history(self, athlete_id: str) -> list[BiometricRecord]:
        ...


class GeneticProfileProvider(Protocol):
    """Per-athlete raw genetic category summaries."""

    async def get_profile(self, athlete_id: str) -> list[dict[str, Any]]:
        ...


class InMemoryBiometricProvider:
    """Provider backed by already-fetched histories."""

    def __init__(self, histories: Mapping[str, Sequence[BiometricRecord]]):
        self._histories = histories

    async def get_history(self, athlete_id: str) -> list[BiometricRecord]:
        if athlete_id not in self._histories:
            raise UpstreamFetchError(athlete_id, "no history supplied")
        return sorted(self._histories[athlete_id], key=lambda r: r.date, reverse=True)


class InMemoryGeneticProvider:
    """Provider backed by already-fetched genetic summaries."""

    def __init__(self, profiles: Mapping[str, Sequence[dict[str, Any]]]):
        self._profiles = profiles

    async def get_profile(self, athlete_id: str) -> list[dict[str, Any]]:
        if athlete_id not in self._profiles:
            raise UpstreamFetchError(athlete_id, "no genetic profile supplied")
        return list(self._profiles[athlete_id])


class HttpBiometricProvider:
    """Biometric history over HTTP.

    Expects ``GET {base_url}/athletes/{athlete_id}/biometrics`` to return a
    JSON list of records (or ``{"items": [...]}``).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.biometric_provider_url or "").rstrip("/")
        self.timeout = timeout or settings.biometric_provider_timeout_seconds
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def get_history(self, athlete_id: str) -> list[BiometricRecord]:
        if not self.base_url:
            raise UpstreamFetchError(athlete_id, "biometric provider URL not configured")

        client = await self._get_client()
        url = f"{self.base_url}/athletes/{athlete_id}/biometrics"
        try:
            response = await client.get(url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchError(athlete_id, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamFetchError(athlete_id, str(e) or type(e).__name__) from e

        rows = payload.get("items", []) if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            raise UpstreamFetchError(athlete_id, "unexpected payload shape")

        records: list[BiometricRecord] = []
        for row in rows:
            try:
                records.append(BiometricRecord.model_validate({**row, "athlete_id": athlete_id}))
            except (ValidationError, TypeError) as e:
                logger.debug(f"Skipping malformed biometric row for {athlete_id}: {e}")

        records.sort(key=lambda r: r.date, reverse=True)
        return records
