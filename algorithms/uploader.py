"""
Upload transfer primitive: one file, one PutObject, one timed outcome.
"""

import logging

from common.metrics_utils import current_time_ms, elapsed_ms, format_duration, monotonic_ms
from common.naming import make_object_key
from common.targets import FileSource
from persistence.record import TransferFailure, TransferOutcome, TransferResult
from systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)


async def upload(file_source: FileSource, storage_system: ObjectStorageSystem) -> TransferOutcome:
    """Upload a local file to the storage system's bucket with public-read access.

    Never raises: every error is logged and turned into a TransferFailure.

    Args:
        file_source: File to upload
        storage_system: Bucket client, entered here for the duration of the call

    Returns:
        TransferResult with the object's public URL, or TransferFailure
    """
    key = make_object_key(file_source.path)

    try:
        stream = open(file_source.path, "rb")
    except OSError as e:
        logger.error(f"File uploading stream error for {file_source.path}: {e}")
        return TransferFailure()

    try:
        with stream:
            async with storage_system:
                started_on = current_time_ms()
                start_monotonic = monotonic_ms()
                location, uploaded_key = await storage_system.put_public_object(key, stream)
                duration = elapsed_ms(start_monotonic)

        if not location or not uploaded_key:
            logger.error(f"Upload of {file_source.path} returned no location or key")
            return TransferFailure()

        result = TransferResult(
            started_on=started_on,
            duration=duration,
            source=file_source.path,
            result=location,
            source_key="fileSource",
            result_key="fileUrl",
        )

    except Exception as e:
        logger.error(f"S3 uploading error for {file_source.path} as {key}: {e}")
        return TransferFailure()

    logger.debug(f"Uploaded {file_source.path} to {location} in {format_duration(result.duration)}")
    return result
