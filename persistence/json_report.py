"""
JSON persistence for benchmark reports.
"""

import json
import logging
import os
from typing import Any, Optional

from configuration import TIME_PLACEHOLDER
from common.metrics_utils import current_time_ms

logger = logging.getLogger(__name__)


def resolve_result_location(template: str, base_dir: str, timestamp_ms: Optional[int] = None) -> str:
    """Substitute {time} in a result location template and make it absolute.

    Args:
        template: Location such as 'results/upload-{time}.json'
        base_dir: Directory relative templates are resolved against
        timestamp_ms: Epoch milliseconds, defaults to now

    Returns:
        Absolute output path
    """
    if timestamp_ms is None:
        timestamp_ms = current_time_ms()
    location = template.replace(TIME_PLACEHOLDER, str(timestamp_ms))
    return os.path.abspath(os.path.join(base_dir, location))


class JsonReportWriter:
    """Writes report payloads as indented JSON files."""

    def __init__(self, base_dir: str = "."):
        self.base_dir: str = base_dir

    def write(self, template: str, payload: Any, timestamp_ms: Optional[int] = None) -> str:
        """Write payload to the location derived from template.

        Returns:
            Path of the written file

        Raises:
            OSError: If the directory cannot be created or the file written
        """
        path = resolve_result_location(template, self.base_dir, timestamp_ms)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)

        logger.info(f"JSON saved to {path}")
        return path
