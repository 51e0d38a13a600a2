"""Periodic sampling and aggregation of CPU state."""

import asyncio
from collections.abc import Callable

import structlog

from cputune.aggregator import Aggregator
from cputune.errors import EmptySampleError
from cputune.models import AggregatedView, CpuSample
from cputune.sampler import HardwareSampler

log = structlog.get_logger()

UpdateListener = Callable[[CpuSample, AggregatedView], None]


class PollLoop:
    """
    Samples the hardware once on start and then every ``poll_rate`` seconds.

    Runs as a task on the current asyncio loop. A failed tick keeps the
    previous sample and view, so the latest good result always wins.
    """

    def __init__(
        self,
        sampler: HardwareSampler,
        aggregator: Aggregator | None = None,
        poll_rate: float = 2.0,
    ) -> None:
        """
        Initialize the PollLoop.

        Args:
            sampler: Source of hardware snapshots.
            aggregator: Aggregator to refresh; a new one is created if omitted.
            poll_rate: Seconds between ticks. Default 2.0s.
        """
        self._sampler = sampler
        self._aggregator = aggregator or Aggregator()
        self._poll_rate = max(0.1, poll_rate)
        self._task: asyncio.Task[None] | None = None
        self._latest: CpuSample | None = None
        self._listeners: list[UpdateListener] = []

    @property
    def poll_rate(self) -> float:
        """Get the current poll rate."""
        return self._poll_rate

    @poll_rate.setter
    def poll_rate(self, value: float) -> None:
        """Set the poll rate."""
        self._poll_rate = max(0.1, value)  # Minimum 0.1 seconds

    @property
    def is_running(self) -> bool:
        """Check if the polling task is running."""
        return self._task is not None and not self._task.done()

    @property
    def latest(self) -> CpuSample | None:
        """The last successfully aggregated sample."""
        return self._latest

    @property
    def view(self) -> AggregatedView:
        """The most recent aggregated view."""
        return self._aggregator.view

    def add_listener(self, listener: UpdateListener) -> None:
        """Register a callback for every successful tick."""
        self._listeners.append(listener)

    def start(self) -> None:
        """Start polling on the running event loop."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="PollLoop"
        )

    def stop(self) -> None:
        """Cancel the polling task. Safe to call repeatedly or before start."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    def tick(self) -> bool:
        """
        Run one sample-and-aggregate pass.

        Returns:
            True if the view was replaced, False if the tick was absorbed.
        """
        try:
            sample = self._sampler.sample()
            view = self._aggregator.refresh(sample.cores)
        except EmptySampleError:
            log.warning("empty_sample", sysfs_root=str(self._sampler.sysfs_root))
            return False
        except Exception:
            # Keep the loop alive; the previous sample and view stay current
            log.exception("sample_failed")
            return False

        self._latest = sample
        log.debug("sample_aggregated", cores=view.active_cores)
        for listener in list(self._listeners):
            try:
                listener(sample, view)
            except Exception:
                log.exception("poll_listener_failed")
        return True

    async def _run(self) -> None:
        """Main polling loop running as an asyncio task."""
        while True:
            self.tick()
            await asyncio.sleep(self._poll_rate)
