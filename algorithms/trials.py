"""
Trial runner: repeat one transfer against one target and aggregate the outcomes.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from common.metrics_utils import format_duration
from persistence.record import TransferOutcome, TrialSet

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_trials(
    transfer_fn: Callable[[T], Awaitable[TransferOutcome]],
    target: T,
    count: int,
    metadata: Optional[Dict[str, Any]] = None,
) -> TrialSet:
    """Run transfer_fn against target count times, one after another.

    Trials are awaited sequentially so that no two transfers share the network
    at the same time.

    Args:
        transfer_fn: Coroutine function performing one transfer; must not raise
        target: Argument passed to every call of transfer_fn
        count: Number of trials
        metadata: Descriptive fields copied into the report entry

    Returns:
        TrialSet with exactly `count` outcomes in call order
    """
    if count < 0:
        raise ValueError(f"Trial count must be non-negative, got {count}")

    label = (metadata or {}).get("fileSource") or (metadata or {}).get("fileUrl") or repr(target)
    outcomes = []
    for i in range(count):
        outcome = await transfer_fn(target)
        outcomes.append(outcome)
        if outcome.success:
            logger.info(f"Trial {i + 1}/{count} for {label}: {format_duration(outcome.duration)}")
        else:
            logger.warning(f"Trial {i + 1}/{count} for {label}: failed")

    trial_set = TrialSet(outcomes, metadata)

    if count and trial_set.average_duration is None:
        logger.warning(f"All {count} trials failed for {label}; no average duration")
    else:
        logger.info(
            f"Completed {len(trial_set.successes)}/{count} trials for {label}, "
            f"average {format_duration(trial_set.average_duration)}"
        )
    return trial_set
