"""
Expiry sweeper: purges secrets whose expiration has passed.

Runs with no caller and no scope checks. A single bad record never stops a
sweep; it is logged and counted, and the sweep moves on.
"""
import asyncio
import time
from datetime import timedelta
from typing import Optional

import structlog

from ..errors import CorruptEnvelope
from ..metrics import Metrics
from .secret_store import SecretStore

log = structlog.get_logger()


class ExpirySweeper:
    """
    Batch purge of logically expired secrets, on demand or on an interval.
    """

    def __init__(
        self,
        store: SecretStore,
        interval_seconds: float = 3600.0,
        expiration_delay: timedelta = timedelta(0),
        metrics: Optional[Metrics] = None,
    ):
        """
        Initialize the sweeper.

        Args:
            store: Store whose records are swept
            interval_seconds: Seconds between periodic sweeps (0 disables start())
            expiration_delay: Added to now to form the purge cutoff
            metrics: Optional metrics sink
        """
        self._store = store
        self._interval = interval_seconds
        self._delay = expiration_delay
        self._metrics = metrics
        self._task: Optional[asyncio.Task] = None

    async def sweep(self) -> int:
        """
        Delete every record with ``expires <= now + expiration_delay``.

        Returns:
            Number of records deleted by this sweep
        """
        start = time.time()
        cutoff = self._store.now() + self._delay
        purged = 0
        failures = 0

        for name, envelope in await self._store.records():
            try:
                expires = self._store.expiry_of(name, envelope)
            except CorruptEnvelope as e:
                failures += 1
                log.error("sweep.corrupt_envelope", name=name, reason=e.reason)
                continue

            if expires > cutoff:
                continue

            try:
                if await self._store.purge(name, envelope):
                    purged += 1
            except Exception as e:
                failures += 1
                log.error("sweep.delete_failed", name=name, error=str(e), error_type=type(e).__name__)

        duration = time.time() - start
        if self._metrics is not None:
            self._metrics.record_sweep(purged, failures, duration)
        log.info(
            "sweep.completed",
            purged=purged,
            failures=failures,
            cutoff=cutoff.isoformat(),
            duration_ms=round(duration * 1000, 2),
        )
        return purged

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start periodic sweeping on the running event loop."""
        if self._interval <= 0:
            log.info("sweep.disabled")
            return
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run_periodically())
        log.info("sweep.scheduled", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Cancel the periodic task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        log.info("sweep.stopped")

    async def _run_periodically(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.sweep()
            except Exception as e:
                log.error("sweep.failed", error=str(e), error_type=type(e).__name__, exc_info=True)
