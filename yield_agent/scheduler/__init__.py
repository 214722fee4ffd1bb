"""
Scheduler module for periodic yield strategy runs.

Provides the APScheduler-backed YieldScheduler and command-line schedule parsing.
"""

from yield_agent.scheduler.args import (
    USAGE,
    ScheduleArgs,
    parse_positive_int,
    parse_schedule_from_args,
)
from yield_agent.scheduler.models import (
    RUN_MODES,
    UNLIMITED_RUNS,
    AgentEntryPoint,
    ModeOutcome,
    RiskMode,
    RunResult,
    ScheduleConfig,
    SchedulerStatus,
)
from yield_agent.scheduler.runner import RUN_JOB_ID, YieldScheduler

__all__ = [
    # Runner
    "RUN_JOB_ID",
    "YieldScheduler",
    # Models
    "AgentEntryPoint",
    "ModeOutcome",
    "RiskMode",
    "RunResult",
    "RUN_MODES",
    "ScheduleConfig",
    "SchedulerStatus",
    "UNLIMITED_RUNS",
    # Args
    "USAGE",
    "ScheduleArgs",
    "parse_positive_int",
    "parse_schedule_from_args",
]
