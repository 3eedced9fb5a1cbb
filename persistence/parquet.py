"""
Parquet persistence for per-trial benchmark rows.
"""

import os
import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from persistence.json_report import resolve_result_location
from persistence.record import TrialSet

logger = logging.getLogger(__name__)

COLUMNS = [
    "kind",
    "storage",
    "target",
    "size_bytes",
    "trial",
    "success",
    "started_on",
    "finished_on",
    "duration_ms",
    "source",
    "result",
]


class ParquetPersistence:
    """Flat table of every trial of a run, saved as a Parquet file.

    One row per trial, failures included, so a run can be analysed with
    pandas without walking the nested JSON reports.

    Attributes:
        base_dir: Directory relative output locations are resolved against
        rows: Rows accumulated during the run
    """

    def __init__(self, base_dir: str = "."):
        self.base_dir: str = base_dir
        self.rows: List[Dict[str, Any]] = []

    def store_trial_set(self, kind: str, target: str, trial_set: TrialSet,
                        storage: Optional[str] = None, size_bytes: Optional[int] = None) -> None:
        """Store one row per outcome of trial_set.

        Args:
            kind: 'upload' or 'download'
            target: File path for uploads, URL for downloads
            trial_set: Outcomes to store
            storage: Storage name for uploads
            size_bytes: Source file size for uploads
        """
        for i, outcome in enumerate(trial_set.outcomes, start=1):
            self.rows.append({
                "kind": kind,
                "storage": storage,
                "target": target,
                "size_bytes": size_bytes,
                "trial": i,
                "success": outcome.success,
                "started_on": outcome.started_on if outcome.success else None,
                "finished_on": outcome.finished_on if outcome.success else None,
                "duration_ms": outcome.duration if outcome.success else None,
                "source": outcome.source if outcome.success else None,
                "result": outcome.result if outcome.success else None,
            })

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=COLUMNS)

    def save_to_file(self, template: str, timestamp_ms: Optional[int] = None) -> Optional[str]:
        """Save all rows to a Parquet file.

        Args:
            template: Output location, {time} is replaced by epoch milliseconds
            timestamp_ms: Timestamp to substitute, defaults to now

        Returns:
            Path to the saved file, or None if there are no rows to save
        """
        if not self.rows:
            return None

        filepath = resolve_result_location(template, self.base_dir, timestamp_ms)
        directory = os.path.dirname(filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)

        logger.info(f"Saving {len(self.rows)} trial rows to {filepath}")
        self.to_dataframe().to_parquet(filepath, index=False)
        return filepath
