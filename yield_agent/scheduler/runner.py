"""
Periodic yield strategy runner.

Invokes the agent entry point once per risk mode ("low", then "high") on a
fixed interval. The recurring timer is an APScheduler interval job; the
scheduler itself only owns lifecycle state and the run counter.

Usage:
    scheduler = YieldScheduler(ScheduleConfig(interval_minutes=30), agent=main)
    await scheduler.start()
    ...
    scheduler.stop()
"""

import asyncio
import time
from datetime import UTC, datetime, timedelta

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from yield_agent.exceptions import StrategyRunError
from yield_agent.scheduler.models import (
    RUN_MODES,
    AgentEntryPoint,
    ModeOutcome,
    RunResult,
    ScheduleConfig,
    SchedulerStatus,
)
from yield_agent.utils.logging import get_logger

log = get_logger(__name__)

RUN_JOB_ID = "yield_strategy_run"


class YieldScheduler:
    """
    Runs the yield strategy agent every `interval_minutes`.

    State is only mutated through start(), stop() and the run cycle, all of
    which execute on the event loop the scheduler was started from.

    Ticks are registered with max_instances=1, so a tick that fires while the
    previous run is still in flight is skipped rather than overlapping it.
    """

    def __init__(
        self,
        config: ScheduleConfig,
        agent: AgentEntryPoint,
        timezone: str = "UTC",
    ):
        """
        Initialize the scheduler.

        Args:
            config: Schedule configuration (snapshot, never modified)
            agent: Async callable invoked with the risk mode string
            timezone: Timezone for the underlying APScheduler instance
        """
        self._config = config
        self._agent = agent
        self._engine = AsyncIOScheduler(timezone=timezone)
        self._job: Job | None = None
        self._run_count = 0
        self._is_running = False
        self._stopped = asyncio.Event()
        self._stopped.set()
        # Set whenever no run cycle is executing
        self._active_runs = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def config(self) -> ScheduleConfig:
        return self._config

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def run_count(self) -> int:
        return self._run_count

    async def start(self) -> None:
        """
        Start periodic runs.

        Performs the immediate run first (when configured), then arms the
        interval job. Recurring runs are not awaited.
        """
        if self._is_running:
            log.warning("scheduler_already_running", run_count=self._run_count)
            return

        self._is_running = True
        self._stopped.clear()
        log.info(
            "scheduler_starting",
            interval_minutes=self._config.interval_minutes,
            start_immediately=self._config.start_immediately,
            max_runs=self._config.max_runs if self._config.has_run_limit else None,
        )

        if self._config.start_immediately:
            await self._run_cycle()

        # The immediate run may have stopped us (run cap or a callback)
        if not self._is_running:
            log.info("scheduler_not_armed", reason="stopped_during_immediate_run")
            return

        self._arm()

    def stop(self) -> None:
        """
        Stop future runs.

        An in-flight run is not cancelled; it finishes on its own.
        """
        if self._job is not None:
            try:
                self._job.remove()
            except JobLookupError:
                log.debug("scheduler_job_already_removed", job_id=RUN_JOB_ID)
            self._job = None

        self._is_running = False
        self._stopped.set()
        log.info("scheduler_stopped", run_count=self._run_count)

    def get_status(self) -> SchedulerStatus:
        """
        Get a snapshot of scheduler state.

        next_run is the armed job's next fire time. Before the job is armed
        (e.g. during the immediate run) it falls back to now + interval.
        """
        status = SchedulerStatus(is_running=self._is_running, run_count=self._run_count)

        if self._is_running:
            next_run = getattr(self._job, "next_run_time", None) if self._job else None
            if next_run is None:
                next_run = datetime.now(UTC) + timedelta(minutes=self._config.interval_minutes)
            status.next_run = next_run

        return status

    async def wait_until_stopped(self) -> None:
        """Block until the scheduler is stopped (explicitly or by max_runs)."""
        await self._stopped.wait()

    async def shutdown(self) -> None:
        """
        Stop, wait for the in-flight run to finish, then shut down the engine.

        Call before the event loop is torn down; otherwise the loop cancels
        the tick task that is still running.
        """
        if self._is_running:
            self.stop()

        if not self._idle.is_set():
            log.info("scheduler_draining", active_runs=self._active_runs)
            await self._idle.wait()

        if self._engine.running:
            self._engine.shutdown(wait=False)
            # AsyncIOScheduler.shutdown is scheduled on the loop
            await asyncio.sleep(0)
            log.info("scheduler_engine_shutdown")

    def _arm(self) -> None:
        """Register the interval job, starting the APScheduler engine if needed."""
        if not self._engine.running:
            self._engine.start()

        self._job = self._engine.add_job(
            self._run_cycle,
            trigger=IntervalTrigger(seconds=self._config.interval_seconds),
            id=RUN_JOB_ID,
            name=f"Yield strategy run every {self._config.interval_minutes} min",
            replace_existing=True,
            max_instances=1,  # Don't overlap runs
            coalesce=True,
            misfire_grace_time=None,  # Late ticks still run
        )

        log.info(
            "scheduler_started",
            job_id=RUN_JOB_ID,
            next_run=self._job.next_run_time.isoformat() if self._job.next_run_time else None,
        )

    async def _run_cycle(self) -> None:
        """
        Execute one run: the agent in "low" then "high" risk mode.

        Errors never propagate out of here; they are reported through
        on_error and the scheduler keeps running.
        """
        if self._config.has_run_limit and self._run_count >= self._config.max_runs:
            log.info("max_runs_reached", max_runs=self._config.max_runs)
            self.stop()
            return

        self._active_runs += 1
        self._idle.clear()
        try:
            await self._execute_run()
        finally:
            self._active_runs -= 1
            if self._active_runs == 0:
                self._idle.set()

    async def _execute_run(self) -> None:
        self._run_count += 1
        run_number = self._run_count
        started_at = datetime.now(UTC)

        log.info("run_started", run_number=run_number, started_at=started_at.isoformat())

        outcomes: dict = {}
        for mode in RUN_MODES:
            mode_start = time.monotonic()
            try:
                result = await self._agent(mode.value)
            except Exception as e:
                error = StrategyRunError(run_number, mode.value, e)
                error.__cause__ = e
                log.error(
                    "run_failed",
                    run_number=run_number,
                    mode=mode.value,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True,
                )
                self._dispatch_error(error)
                return

            outcomes[mode] = ModeOutcome(
                mode=mode,
                result=result,
                duration_seconds=time.monotonic() - mode_start,
            )

        run_result = RunResult(
            run_number=run_number,
            started_at=started_at,
            low_risk=outcomes[RUN_MODES[0]],
            high_risk=outcomes[RUN_MODES[1]],
        )

        log.info(
            "run_completed",
            run_number=run_number,
            duration_seconds=round(run_result.duration_seconds, 3),
        )
        self._dispatch_complete(run_result)

    def _dispatch_complete(self, run_result: RunResult) -> None:
        callback = self._config.on_run_complete
        if callback is None:
            return
        try:
            callback(run_result)
        except Exception as e:
            log.error(
                "run_complete_callback_failed",
                run_number=run_result.run_number,
                error=str(e),
                exc_info=True,
            )

    def _dispatch_error(self, error: StrategyRunError) -> None:
        callback = self._config.on_error
        if callback is None:
            return
        try:
            callback(error)
        except Exception as e:
            log.error(
                "run_error_callback_failed",
                run_number=error.run_number,
                error=str(e),
                exc_info=True,
            )
