"""Background scanning for interactive callers; only the newest result is delivered."""
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

import logging
import threading

from docscan.imaging.buffers import PipelineParameters, PixelBuffer
from docscan.pipeline import ScanPipeline, ScanResult

LOGGER = logging.getLogger(__name__)

ResultCallback = Callable[[ScanResult], None]


class ScanWorker:
    """Runs scans on one worker thread.

    Each submission bumps a generation counter. When a scan completes after a
    newer submission was made, its result is dropped instead of being passed
    to the callback.
    """

    def __init__(self, pipeline: Optional[ScanPipeline] = None) -> None:
        self.pipeline = pipeline or ScanPipeline()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="docscan")
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def submit(
        self,
        buffer: PixelBuffer,
        params: Optional[PipelineParameters] = None,
        on_result: Optional[ResultCallback] = None,
    ) -> "Future[Optional[ScanResult]]":
        with self._lock:
            self._generation += 1
            generation = self._generation
        return self._executor.submit(self._run, generation, buffer, params, on_result)

    def _run(
        self,
        generation: int,
        buffer: PixelBuffer,
        params: Optional[PipelineParameters],
        on_result: Optional[ResultCallback],
    ) -> Optional[ScanResult]:
        try:
            result = self.pipeline.run(buffer, params)
        except Exception:
            LOGGER.exception("Scan failed (generation %s)", generation)
            raise
        if generation != self.generation:
            LOGGER.debug("Discarding stale scan result (generation %s)", generation)
            return None
        if on_result is not None:
            on_result(result)
        return result

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ScanWorker":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
