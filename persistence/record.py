"""
Outcome records for benchmark trials.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from common.metrics_utils import mean_or_none

logger = logging.getLogger(__name__)

FAILURE_ERROR = "error"
FAILURE_REDIRECT_LIMIT = "redirect_limit_exceeded"


class TransferResult:
    """A successful transfer.

    `started_on` is wall-clock epoch milliseconds; `duration` is measured on a
    monotonic clock so wall-clock adjustments cannot distort it, and
    `finished_on` is derived as started_on + duration. `source` and `result`
    identify what was transferred; their JSON keys differ between uploads
    (fileSource -> fileUrl) and downloads (fileUrl -> fileOutput).
    """

    success = True

    def __init__(self, started_on: int, duration: int, source: str, result: str,
                 source_key: str, result_key: str):
        if duration < 0:
            raise ValueError(f"duration must be non-negative, got {duration}")
        self.started_on = started_on
        self.duration = duration
        self.finished_on = started_on + duration
        self.source = source
        self.result = result
        self.source_key = source_key
        self.result_key = result_key

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startedOn": self.started_on,
            "finishedOn": self.finished_on,
            "duration": self.duration,
            self.source_key: self.source,
            self.result_key: self.result,
        }

    def __repr__(self):
        return f"TransferResult({self.source!r} -> {self.result!r}, {self.duration} ms)"


class TransferFailure:
    """A failed transfer. The error itself is logged where it happens."""

    success = False

    def __init__(self, reason: str = FAILURE_ERROR):
        self.reason = reason

    def to_dict(self) -> bool:
        return False

    def __eq__(self, other):
        return isinstance(other, TransferFailure) and other.reason == self.reason

    def __hash__(self):
        return hash(self.reason)

    def __repr__(self):
        return f"TransferFailure({self.reason!r})"


TransferOutcome = Union[TransferResult, TransferFailure]


class TrialSet:
    """All outcomes of the trials against one target, in execution order."""

    def __init__(self, outcomes: List[TransferOutcome], metadata: Optional[Dict[str, Any]] = None):
        self.outcomes = list(outcomes)
        self.metadata = dict(metadata or {})

    @property
    def successes(self) -> List[TransferResult]:
        return [o for o in self.outcomes if o.success]

    @property
    def failure_count(self) -> int:
        return len(self.outcomes) - len(self.successes)

    @property
    def average_duration(self) -> Optional[float]:
        """Mean duration of successful trials; None if every trial failed."""
        return mean_or_none(o.duration for o in self.successes)

    def __len__(self):
        return len(self.outcomes)

    def to_dict(self) -> Dict[str, Any]:
        """Report entry: metadata, then averageDuration and the raw results."""
        entry = dict(self.metadata)
        entry["averageDuration"] = self.average_duration
        entry["results"] = [o.to_dict() for o in self.outcomes]
        return entry
