"""Serialized execution of command sequences against one printer."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from uuid import uuid4

from receipt_print.commands import CommandSequence
from receipt_print.errors import PrinterFault, PrintTimeout
from receipt_print.printer import PrinterDriver, translate_fault

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobOutcome:
    """Metadata for a job the printer accepted."""

    job_id: str
    commands: int
    duration_seconds: float


class PrintQueue:
    """
    Run print jobs for one printer strictly one at a time.

    A single worker thread owns the driver, so concurrent callers queue up
    instead of interleaving bytes on the device. Every job is followed by a
    driver reset whether it succeeded or failed.
    """

    def __init__(self, driver: PrinterDriver, name: str = "printer") -> None:
        self.name = name
        self._driver = driver
        self._worker = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"print-{name}")

    def submit(
        self,
        sequence: CommandSequence,
        timeout: float | None = None,
        character_set: str | None = None,
    ) -> JobOutcome:
        """Queue a sequence and wait for it; raises PrinterFault or PrintTimeout."""
        job_id = uuid4().hex[:12]
        logger.info("Queued print job %s on %s (%d commands)", job_id, self.name, len(sequence))
        future = self._worker.submit(self._run, job_id, sequence, character_set)
        try:
            return future.result(timeout=timeout)
        except FutureTimeout:
            if future.cancel():
                # Never reached the printer; still reset in its queue slot.
                self._worker.submit(self._reset_quietly, job_id)
                logger.warning("Print job %s timed out while queued", job_id)
            else:
                logger.warning("Print job %s timed out while printing; reset follows completion", job_id)
            raise PrintTimeout(f"Print job {job_id} did not finish within {timeout}s") from None

    def schedule_reset(self) -> Future:
        """Queue a standalone printer reset without waiting for it."""
        return self._worker.submit(self._reset_quietly, "manual")

    def reset(self, timeout: float | None = None) -> None:
        """Queue a standalone printer reset and wait for it."""
        try:
            self.schedule_reset().result(timeout=timeout)
        except FutureTimeout:
            raise PrintTimeout(f"Printer reset did not run within {timeout}s") from None

    def is_online(self, timeout: float | None = None) -> bool:
        """Query the printer; a query stuck behind a running job counts as offline."""
        future = self._worker.submit(self._driver.is_online)
        try:
            return future.result(timeout=timeout)
        except FutureTimeout:
            future.cancel()
            logger.warning("Status query on %s timed out behind a running job", self.name)
            return False

    def close(self) -> None:
        self._worker.shutdown(wait=True)

    def __enter__(self) -> "PrintQueue":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _run(self, job_id: str, sequence: CommandSequence, character_set: str | None) -> JobOutcome:
        started = time.monotonic()
        try:
            if character_set:
                try:
                    self._driver.set_character_set(character_set)
                    logger.info("Character set for job %s: %s", job_id, character_set)
                except PrinterFault as exc:
                    logger.error("Could not set character set %r: %s", character_set, exc)
            self._driver.execute(sequence)
        except PrinterFault:
            logger.error("Print job %s failed", job_id, exc_info=True)
            raise
        except Exception as exc:
            logger.error("Print job %s failed", job_id, exc_info=True)
            raise translate_fault(exc) from exc
        finally:
            self._reset_quietly(job_id)
        duration = time.monotonic() - started
        logger.info("Print job %s done in %.2fs", job_id, duration)
        return JobOutcome(job_id=job_id, commands=len(sequence), duration_seconds=duration)

    def _reset_quietly(self, job_id: str) -> None:
        try:
            self._driver.reset()
        except Exception:
            logger.error("Printer reset after job %s failed", job_id, exc_info=True)
