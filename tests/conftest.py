"""
Pytest configuration and shared fixtures for the yield agent scheduler test suite.

Test Structure:
- tests/unit/ - Fast tests with a mocked agent (no external services)

Run all tests:
    pytest

Skip the timer-driven tests:
    pytest -m "not slow"
"""

from unittest.mock import AsyncMock

import pytest

from yield_agent.scheduler import ScheduleConfig, YieldScheduler


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (waits for real timer ticks)"
    )


@pytest.fixture
def agent() -> AsyncMock:
    """Agent entry point that echoes the risk mode it was called with."""
    return AsyncMock(side_effect=lambda mode: {"mode": mode, "strategy": f"{mode}-yield"})


@pytest.fixture
def make_scheduler(agent):
    """
    Factory for schedulers that are stopped again on teardown.

    Usage:
        scheduler = make_scheduler(interval_minutes=30, max_runs=2)
    """
    created: list[YieldScheduler] = []

    def _make(agent_fn=None, **config_kwargs) -> YieldScheduler:
        config = ScheduleConfig(**config_kwargs)
        scheduler = YieldScheduler(config, agent=agent_fn or agent)
        created.append(scheduler)
        return scheduler

    yield _make

    for scheduler in created:
        scheduler.stop()
