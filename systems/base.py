"""
Async client for S3-compatible object storage systems.
"""

import logging
from typing import BinaryIO, Optional, Tuple
from urllib.parse import quote

import aioboto3
from botocore.config import Config

from configuration import UPLOAD_ACL

logger = logging.getLogger(__name__)


class ObjectStorageSystem:
    """Async S3-compatible bucket client.

    The botocore client only exists inside `async with`, so every trial can
    open and close its own connection. Botocore's internal retries are
    disabled: one trial is exactly one request.
    """

    def __init__(self, endpoint: str, bucket_name: str, credentials: dict,
                 request_timeout_seconds: Optional[float] = None):
        self.endpoint = endpoint
        self.bucket_name = bucket_name
        self.credentials = credentials
        self.request_timeout_seconds = request_timeout_seconds

        self._config = self._create_config()

        self.session = aioboto3.Session(
            aws_access_key_id=credentials.get("access_key_id"),
            aws_secret_access_key=credentials.get("secret_access_key"),
            region_name=credentials.get("region_name", "auto"),
        )

        self.client = None
        self._client_context = None

        logger.debug(f"Initialized storage client for {endpoint} (bucket {bucket_name})")

    def _create_config(self) -> Config:
        """Create the botocore config shared by every client of this system."""
        options = {
            "retries": {
                "max_attempts": 1,
                "mode": "standard",
            },
            "s3": {
                "addressing_style": "path",
            },
        }
        if self.request_timeout_seconds is not None:
            options["connect_timeout"] = self.request_timeout_seconds
            options["read_timeout"] = self.request_timeout_seconds
        return Config(**options)

    async def __aenter__(self):
        """Async context manager entry."""
        self._client_context = self.session.client(
            "s3",
            endpoint_url=self.endpoint,
            config=self._config,
        )
        self.client = await self._client_context.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client_context:
            await self._client_context.__aexit__(exc_type, exc_val, exc_tb)
        self.client = None
        self._client_context = None

    def object_url(self, key: str) -> str:
        """Public path-style URL of an object in this bucket."""
        return f"{self.endpoint.rstrip('/')}/{self.bucket_name}/{quote(key)}"

    async def put_public_object(self, key: str, body: BinaryIO) -> Tuple[Optional[str], Optional[str]]:
        """Upload body in a single PutObject call with a public-read ACL.

        Args:
            key: Destination object key
            body: Binary stream positioned at the start of the content

        Returns:
            (public URL, key) of the stored object; (None, None) if the
            service response does not acknowledge the write with an ETag

        Raises:
            RuntimeError: If called outside the async context manager
            botocore.exceptions.ClientError: On a service error response
        """
        if not self.client:
            raise RuntimeError("Storage client not initialized. Use async context manager.")

        response = await self.client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=body,
            ACL=UPLOAD_ACL,
        )

        if not response or not response.get("ETag"):
            logger.error(f"PutObject response for {key} carries no ETag: {response}")
            return None, None

        return self.object_url(key), key

    async def verify_connection(self) -> bool:
        """Verify the bucket is reachable with the configured credentials."""
        if not self.client:
            logger.error("Client not initialized. Use async context manager.")
            return False

        try:
            logger.info(f"Verifying bucket {self.bucket_name} at {self.endpoint}...")
            await self.client.head_bucket(Bucket=self.bucket_name)
            logger.info(f"✓ Successfully connected to bucket: {self.bucket_name}")
            return True

        except Exception as e:
            logger.error(f"✗ Connection verification failed for {self.bucket_name}: {e}")
            return False
