"""
Scheduler data structures.

Defines what flows through a run cycle:
    ScheduleConfig → (run cycle) → ModeOutcome x 2 → RunResult

plus the SchedulerStatus snapshot returned by YieldScheduler.get_status().
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Self

if TYPE_CHECKING:
    from yield_agent.config import SchedulerSettings
    from yield_agent.exceptions import StrategyRunError

# Sentinel for "no cap on run count"
UNLIMITED_RUNS = -1

DEFAULT_INTERVAL_MINUTES = 60


class RiskMode(str, Enum):
    """Risk mode passed to the agent entry point."""
    LOW = "low"
    HIGH = "high"


# Order in which each run cycle invokes the agent
RUN_MODES: tuple[RiskMode, ...] = (RiskMode.LOW, RiskMode.HIGH)

AgentEntryPoint = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True)
class ScheduleConfig:
    """
    Immutable schedule configuration.

    Fixed at YieldScheduler construction; defaults match the CLI defaults.
    """
    interval_minutes: float = DEFAULT_INTERVAL_MINUTES
    start_immediately: bool = True
    max_runs: int = UNLIMITED_RUNS
    on_run_complete: Callable[[RunResult], None] | None = field(default=None, compare=False)
    on_error: Callable[[StrategyRunError], None] | None = field(default=None, compare=False)

    def __post_init__(self):
        if self.interval_minutes <= 0:
            raise ValueError(f"interval_minutes must be positive, got {self.interval_minutes}")
        if self.max_runs != UNLIMITED_RUNS and self.max_runs <= 0:
            raise ValueError(
                f"max_runs must be positive or {UNLIMITED_RUNS} (unlimited), got {self.max_runs}"
            )

    @property
    def has_run_limit(self) -> bool:
        return self.max_runs != UNLIMITED_RUNS

    @property
    def interval_seconds(self) -> float:
        return self.interval_minutes * 60

    @classmethod
    def from_settings(cls, scheduler_settings: SchedulerSettings) -> Self:
        """
        Build a config from environment settings.

        Invalid values are replaced by defaults, the same way the CLI treats
        malformed flags.
        """
        interval = scheduler_settings.interval_minutes
        max_runs = scheduler_settings.max_runs
        return cls(
            interval_minutes=interval if interval > 0 else DEFAULT_INTERVAL_MINUTES,
            start_immediately=scheduler_settings.start_immediately,
            max_runs=max_runs if max_runs > 0 else UNLIMITED_RUNS,
        )


@dataclass
class ModeOutcome:
    """Successful agent invocation for a single risk mode."""
    mode: RiskMode
    result: Any = None  # Opaque agent payload
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "result": self.result,
            "duration_seconds": round(self.duration_seconds, 3),
        }


@dataclass
class RunResult:
    """
    Outcome of one successful run cycle.

    Only built when both risk modes succeed; failed runs are reported
    through StrategyRunError instead.
    """
    run_number: int
    started_at: datetime
    low_risk: ModeOutcome
    high_risk: ModeOutcome
    finished_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_number": self.run_number,
            "timestamp": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "low_risk": self.low_risk.to_dict(),
            "high_risk": self.high_risk.to_dict(),
        }


@dataclass
class SchedulerStatus:
    """Point-in-time snapshot of scheduler state."""
    is_running: bool
    run_count: int
    next_run: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_running": self.is_running,
            "run_count": self.run_count,
            "next_run": self.next_run.isoformat() if self.next_run else None,
        }
