"""
Agent entry point resolution.

The strategy-selection agent lives outside this package. It is referenced as
"package.module:function" (AGENT_ENTRYPOINT) and must be an async callable
taking the risk mode string.
"""

import importlib
import inspect

from yield_agent.exceptions import AgentLoadError
from yield_agent.scheduler.models import AgentEntryPoint
from yield_agent.utils.logging import get_logger

log = get_logger(__name__)


def load_agent(reference: str) -> AgentEntryPoint:
    """
    Import and return the agent entry point.

    Args:
        reference: "package.module:function" (attribute may be dotted)

    Returns:
        The async callable.

    Raises:
        AgentLoadError: If the reference is malformed, cannot be imported,
            or does not point at a coroutine function.
    """
    module_path, sep, attr_path = reference.strip().partition(":")
    if not sep or not module_path or not attr_path:
        raise AgentLoadError(
            f"Invalid agent reference: {reference!r}. Expected 'package.module:function'"
        )

    try:
        target = importlib.import_module(module_path)
    except ImportError as e:
        raise AgentLoadError(f"Cannot import agent module {module_path!r}: {e}") from e

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as e:
            raise AgentLoadError(f"Agent {attr_path!r} not found in {module_path!r}") from e

    if not inspect.iscoroutinefunction(target):
        raise AgentLoadError(f"Agent {reference!r} must be an async function")

    log.debug("agent_loaded", reference=reference)
    return target
