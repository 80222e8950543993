"""Scheduler for running monitoring cycles on a fixed interval."""

import asyncio
import logging
import signal
from typing import Awaitable, Callable, Optional, Tuple

import schedule


class Scheduler:
    """Runs one async job on a fixed interval, never overlapping itself."""

    def __init__(self, interval_seconds: float = 60):
        """Initialize scheduler.

        Args:
            interval_seconds: Seconds between monitoring cycles (default: 60)
        """
        self.interval_seconds = interval_seconds
        self.logger = logging.getLogger(__name__)
        self.is_running = False
        self._scheduler = schedule.Scheduler()
        self._job: Optional[schedule.Job] = None
        self._job_func: Optional[Tuple[Callable[[], Awaitable[object]], str]] = None
        self._immediate = False
        self._due = False
        self._stop_event: Optional[asyncio.Event] = None
        self._current: Optional[asyncio.Task] = None

    def schedule_job(
        self,
        func: Callable[[], Awaitable[object]],
        job_name: str = "monitoring",
        run_immediately: bool = True,
    ) -> None:
        """Schedule a job to run on interval.

        Args:
            func: Async function to execute on schedule
            job_name: Human-readable name for the job
            run_immediately: If True, run the job on startup before waiting for interval
        """
        self.logger.info(
            f"Scheduling {job_name} to run every {self.interval_seconds} second(s)"
        )

        # The schedule job only marks the tick; the async job runs in run_forever.
        self._scheduler.clear()
        self._job = self._scheduler.every(self.interval_seconds).seconds.do(self._mark_due)
        self._job_func = (func, job_name)
        self._immediate = run_immediately

    def _mark_due(self) -> None:
        self._due = True

    async def _run_job(self) -> None:
        func, job_name = self._job_func
        self.logger.info(f"Running scheduled job: {job_name}")
        try:
            await func()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.error(f"Error in scheduled job {job_name}: {e}", exc_info=True)

    async def _run_current(self) -> None:
        """Run the job as a task that stop() can cancel."""
        task = asyncio.ensure_future(self._run_job())
        self._current = task
        try:
            # wait() does not raise when the job task itself is cancelled
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            self._current = None

        if task.cancelled():
            self.logger.info(f"Scheduled job {self._job_func[1]} cancelled")

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()

        def handle_shutdown(sig):
            self.logger.info(f"Received signal {sig}, shutting down gracefully")
            self.stop()

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, handle_shutdown, sig)
            except (NotImplementedError, RuntimeError):
                # Windows event loops and non-main threads
                self.logger.debug(f"Signal handler for {sig} not installed")

    async def run_forever(self, install_signal_handlers: bool = True) -> None:
        """Run the scheduled job until stop() is called.

        Jobs run sequentially: the next tick is only considered once the
        previous run has finished. A failing job is logged and the loop
        continues. stop() cancels the job in flight.
        """
        if self._job_func is None:
            raise RuntimeError("No job scheduled")

        self._stop_event = asyncio.Event()
        self.is_running = True
        self.logger.info("Scheduler starting")

        if install_signal_handlers:
            self._install_signal_handlers()

        try:
            if self._immediate:
                self.logger.info(f"Running immediate startup job: {self._job_func[1]}")
                await self._run_current()

            while self.is_running:
                self._scheduler.run_pending()
                if self._due:
                    self._due = False
                    await self._run_current()
                    if not self.is_running:
                        break

                idle = self._scheduler.idle_seconds
                timeout = max(idle, 0) if idle is not None else self.interval_seconds
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=timeout)
                except asyncio.TimeoutError:
                    pass
        finally:
            self.is_running = False
            self.logger.info("Scheduler stopped")

    def stop(self) -> None:
        """Stop the scheduler, cancelling an in-flight job.

        A job calling stop() on itself is left to return normally.
        """
        self.is_running = False
        if self._stop_event is not None:
            self._stop_event.set()

        current = self._current
        if current is not None and not current.done() and current is not asyncio.current_task():
            self.logger.info("Cancelling in-flight job")
            current.cancel()
        self.logger.info("Stop signal received")

    def clear(self) -> None:
        """Clear all scheduled jobs."""
        self._scheduler.clear()
        self._job = None
        self._job_func = None
        self.logger.info("All jobs cleared")
