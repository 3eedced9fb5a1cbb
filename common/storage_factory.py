"""
Factory module for creating storage system instances.
"""

import logging
from typing import Optional

# Suppress boto3/botocore logging before importing any boto3-related modules
logging.getLogger('botocore').setLevel(logging.CRITICAL)
logging.getLogger('botocore.credentials').setLevel(logging.CRITICAL)
logging.getLogger('boto3').setLevel(logging.CRITICAL)
logging.getLogger('aioboto3').setLevel(logging.CRITICAL)
logging.getLogger('urllib3').setLevel(logging.CRITICAL)
logging.getLogger('s3transfer').setLevel(logging.CRITICAL)

from systems.base import ObjectStorageSystem
from common.targets import StorageTarget

logger = logging.getLogger(__name__)


def create_storage_system(target: StorageTarget,
                          request_timeout_seconds: Optional[float] = None) -> ObjectStorageSystem:
    """Create the storage system for a configured storage target.

    Args:
        target: Resolved storage target
        request_timeout_seconds: Optional connect/read timeout, None for botocore defaults

    Returns:
        ObjectStorageSystem bound to the target's endpoint and bucket
    """
    credentials = {
        "access_key_id": target.access_key_id,
        "secret_access_key": target.secret_access_key,
        "region_name": target.region_name,
    }
    logger.debug(f"Creating storage system for '{target.name}' ({target.endpoint})")
    return ObjectStorageSystem(
        endpoint=target.endpoint,
        bucket_name=target.bucket_name,
        credentials=credentials,
        request_timeout_seconds=request_timeout_seconds,
    )
