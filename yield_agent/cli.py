"""
Command-line entry point.

    python -m yield_agent -i 30 -m 5

Builds the schedule from environment settings overridden by CLI flags,
resolves the agent from AGENT_ENTRYPOINT and runs until the scheduler stops
(max runs reached) or the process receives SIGINT/SIGTERM.
"""

import asyncio
import json
import signal
from collections.abc import Sequence
from dataclasses import replace

from yield_agent.agent import load_agent
from yield_agent.config import settings
from yield_agent.exceptions import AgentLoadError, StrategyRunError
from yield_agent.scheduler import (
    USAGE,
    AgentEntryPoint,
    RunResult,
    ScheduleConfig,
    YieldScheduler,
    parse_schedule_from_args,
)
from yield_agent.utils.logging import get_logger, setup_logging

log = get_logger(__name__)

EXIT_OK = 0
EXIT_AGENT_UNAVAILABLE = 2


def _print_run_result(result: RunResult) -> None:
    print(json.dumps(result.to_dict(), indent=2, default=str))


def _log_run_error(error: StrategyRunError) -> None:
    log.warning("run_error_reported", run_number=error.run_number, mode=error.mode)


async def run_scheduler(config: ScheduleConfig, agent: AgentEntryPoint) -> YieldScheduler:
    """
    Run the scheduler until it stops.

    SIGINT/SIGTERM stop the scheduler; an in-flight run is allowed to finish
    before this returns.
    """
    scheduler = YieldScheduler(config, agent=agent, timezone=settings.scheduler.timezone)

    loop = asyncio.get_running_loop()
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, scheduler.stop)
            installed.append(sig)
        except NotImplementedError:
            # Windows event loops have no signal handler support
            pass

    try:
        await scheduler.start()
        await scheduler.wait_until_stopped()
        await scheduler.shutdown()
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)

    log.info("scheduler_exiting", **scheduler.get_status().to_dict())
    return scheduler


def main(argv: Sequence[str] | None = None) -> int:
    """
    CLI main.

    Returns:
        Process exit status.
    """
    parsed = parse_schedule_from_args(
        argv,
        base=ScheduleConfig.from_settings(settings.scheduler),
    )
    if parsed.show_help:
        print(USAGE, end="")
        return EXIT_OK

    setup_logging()

    if not settings.agent.entrypoint:
        log.error("agent_not_configured", hint="set AGENT_ENTRYPOINT=package.module:function")
        return EXIT_AGENT_UNAVAILABLE

    try:
        agent = load_agent(settings.agent.entrypoint)
    except AgentLoadError as e:
        log.error("agent_load_failed", error=str(e))
        return EXIT_AGENT_UNAVAILABLE

    config = replace(
        parsed.config,
        on_run_complete=_print_run_result,
        on_error=_log_run_error,
    )
    asyncio.run(run_scheduler(config, agent))
    return EXIT_OK

