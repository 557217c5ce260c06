"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Callable
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from infusion_schedule.config import get_policy_flags
from infusion_schedule.core.bag_schedule import PolicyFlags
from infusion_schedule.main import app

# A fixed "today" keeps alert tests independent of the wall clock.
TODAY = date(2026, 10, 19)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing the API."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def set_policy() -> Callable[..., PolicyFlags]:
    """Override the bag size policy seen by the API for one test."""

    def _set(enable_5: bool = False, enable_6: bool = False) -> PolicyFlags:
        policy = PolicyFlags(enable_5_day_bags=enable_5, enable_6_day_bags=enable_6)
        app.dependency_overrides[get_policy_flags] = lambda: policy
        return policy

    _set()
    yield _set
    app.dependency_overrides.pop(get_policy_flags, None)
