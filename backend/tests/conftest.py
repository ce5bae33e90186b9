"""Pytest configuration and fixtures for backend tests."""

from datetime import date, timedelta
from typing import AsyncGenerator, Callable

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from athlete_insights.main import app as main_app
from athlete_insights.models.biometrics import BiometricRecord
from athlete_insights.models.team import Athlete

TODAY = date(2024, 5, 10)


# -------------------------------------------------------------------------
# App Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def app() -> FastAPI:
    """FastAPI app instance."""
    return main_app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# -------------------------------------------------------------------------
# Biometric Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def today() -> date:
    """Fixed reference date for recency checks."""
    return TODAY


@pytest.fixture
def make_record() -> Callable[..., BiometricRecord]:
    """Factory for records with healthy defaults, dated ``days_ago`` before TODAY."""

    def _make(days_ago: int = 0, **overrides) -> BiometricRecord:
        values = {
            "athlete_id": "a1",
            "date": TODAY - timedelta(days=days_ago),
            "onset_time": "22:30",
            "wake_time": "06:30",
            "hrv_ms": 50.0,
            "resting_hr_bpm": 60.0,
            "avg_hr_bpm": 62.0,
            "spo2_pct": 97.0,
            "respiratory_rate": 14.0,
            "temperature_c": 36.5,
            "deep_sleep_pct": 20.0,
            "rem_sleep_pct": 22.0,
        }
        values.update(overrides)
        return BiometricRecord(**values)

    return _make


@pytest.fixture
def week_history(make_record) -> list[BiometricRecord]:
    """Seven consecutive healthy nights, newest first."""
    return [make_record(days_ago=i) for i in range(7)]


@pytest.fixture
def roster() -> list[Athlete]:
    """Three-athlete roster."""
    return [
        Athlete(athlete_id="a1", name="Alex"),
        Athlete(athlete_id="a2", name="Sam"),
        Athlete(athlete_id="a3", name="Jordan"),
    ]


# -------------------------------------------------------------------------
# Genetic Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def genetic_summaries() -> list[dict]:
    """Category summaries in each of the supported gene payload shapes."""
    return [
        {
            "category": "Power and Strength",
            "genes": {"ACTN3": "RR", "ACE": "DD", "$type": "map", "id": "x1"},
        },
        {
            "Category": "Recovery & Adaptation",
            "Genes": [
                {"gene": "PPARGC1A", "genotype": "GG"},
                {"Gene": "BDNF", "Genotype": "Met/Met"},
            ],
        },
        {
            "category": "Injury Risk",
            "genes": [
                {"Key": "COL1A1", "Value": "TT"},
                {"key": "GDF5", "value": "TC"},
            ],
        },
    ]
