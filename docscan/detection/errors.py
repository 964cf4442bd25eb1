"""Errors raised inside the detection stages."""
from __future__ import annotations


class StageFailure(RuntimeError):
    """A detection stage hit a numeric or bounds problem it cannot recover from."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage
