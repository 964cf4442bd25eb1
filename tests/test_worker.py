import logging
import threading

import pytest

from docscan.imaging.buffers import PipelineParameters, PixelBuffer
from docscan.pipeline import ScanOutcome, ScanResult
from docscan.worker import ScanWorker

from conftest import uniform_array


class _GatedPipeline:
    """Stands in for ScanPipeline; the first run blocks until released."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def run(self, buffer, params=None, progress=None):
        self.calls += 1
        if self.calls == 1:
            self.started.set()
            self.release.wait(timeout=5)
        return ScanResult(image=buffer, outcome=ScanOutcome.ENHANCED)


def test_only_newest_submission_is_delivered():
    pipeline = _GatedPipeline()
    delivered = []
    first_photo = PixelBuffer(uniform_array(4, 4, 1))
    second_photo = PixelBuffer(uniform_array(4, 4, 2))

    with ScanWorker(pipeline) as worker:
        first = worker.submit(first_photo, on_result=delivered.append)
        assert pipeline.started.wait(timeout=5)
        second = worker.submit(second_photo, on_result=delivered.append)
        pipeline.release.set()

        assert first.result(timeout=5) is None
        assert second.result(timeout=5).image is second_photo

    assert [result.image for result in delivered] == [second_photo]
    assert worker.generation == 2


def test_single_submission_runs_real_pipeline(document_photo):
    delivered = []

    with ScanWorker() as worker:
        result = worker.submit(document_photo, on_result=delivered.append).result(timeout=60)

    assert result.outcome is ScanOutcome.RECTIFIED
    assert delivered == [result]


def test_failed_scan_is_logged_and_raised(document_photo, caplog):
    with caplog.at_level(logging.ERROR, logger="docscan.worker"), ScanWorker() as worker:
        future = worker.submit(document_photo, PipelineParameters(contrast=3.0))

        with pytest.raises(ValueError):
            future.result(timeout=10)

    assert "Scan failed (generation 1)" in caplog.text
