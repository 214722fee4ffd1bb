"""Tests for agent entry point resolution."""

import asyncio

import pytest

from yield_agent.agent import load_agent
from yield_agent.exceptions import AgentLoadError


class TestLoadAgent:
    """Tests for load_agent."""

    def test_loads_coroutine_function(self):
        assert load_agent("asyncio:sleep") is asyncio.sleep

    def test_loads_dotted_attribute(self):
        assert load_agent("asyncio:Queue.get") is asyncio.Queue.get

    def test_strips_whitespace(self):
        assert load_agent("  asyncio:sleep ") is asyncio.sleep

    @pytest.mark.parametrize("reference", ["", "asyncio", "asyncio:", ":sleep"])
    def test_malformed_reference(self, reference):
        with pytest.raises(AgentLoadError, match="Invalid agent reference"):
            load_agent(reference)

    def test_missing_module(self):
        with pytest.raises(AgentLoadError, match="Cannot import"):
            load_agent("no_such_agent_module_xyz:main")

    def test_missing_attribute(self):
        with pytest.raises(AgentLoadError, match="not found"):
            load_agent("asyncio:no_such_main")

    def test_rejects_sync_function(self):
        with pytest.raises(AgentLoadError, match="must be an async function"):
            load_agent("os.path:join")
