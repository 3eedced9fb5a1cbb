"""
Tests for the upload transfer primitive.
"""

import os
import sys
import tempfile
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from botocore.exceptions import ClientError

from algorithms.uploader import upload
from common.targets import FileSource
from persistence.record import TransferFailure
from systems.base import ObjectStorageSystem


def make_storage(put_result=None, put_error=None):
    """Mock storage system usable as an async context manager."""
    storage = MagicMock()
    storage.__aenter__.return_value = storage
    storage.__aexit__.return_value = False
    storage.put_public_object = AsyncMock(return_value=put_result, side_effect=put_error)
    return storage


class TestUpload(unittest.IsolatedAsyncioTestCase):
    """Test upload()."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "sample.bin")
        with open(self.path, "wb") as f:
            f.write(b"x" * 1024)
        self.source = FileSource(path=self.path, size_bytes=1024)

    def tearDown(self):
        self.tmp.cleanup()

    async def test_success(self):
        """A stored object yields a timed result with the public URL."""
        storage = make_storage(put_result=("http://s3.local/bucket/tests-1-sample.bin", "tests-1-sample.bin"))

        with patch("algorithms.uploader.current_time_ms", return_value=1000), \
             patch("algorithms.uploader.monotonic_ms", return_value=5000.0), \
             patch("common.metrics_utils.monotonic_ms", return_value=5250.0):
            outcome = await upload(self.source, storage)

        self.assertTrue(outcome.success)
        self.assertEqual(outcome.duration, 250)
        self.assertEqual(outcome.to_dict(), {
            "startedOn": 1000,
            "finishedOn": 1250,
            "duration": 250,
            "fileSource": self.path,
            "fileUrl": "http://s3.local/bucket/tests-1-sample.bin",
        })

        key, body = storage.put_public_object.call_args[0]
        self.assertRegex(key, r"^tests-\d+-sample\.bin$")
        self.assertTrue(body.closed)
        storage.__aexit__.assert_awaited()

    async def test_wall_clock_step_back(self):
        """A wall clock moving backwards mid-transfer does not affect the duration."""
        storage = make_storage(put_result=("http://s3.local/bucket/tests-1-sample.bin", "tests-1-sample.bin"))

        with patch("algorithms.uploader.current_time_ms", side_effect=[1000, 400]), \
             patch("algorithms.uploader.monotonic_ms", return_value=10.0), \
             patch("common.metrics_utils.monotonic_ms", return_value=60.0):
            outcome = await upload(self.source, storage)

        self.assertTrue(outcome.success)
        self.assertEqual(outcome.duration, 50)
        self.assertEqual(outcome.finished_on, 1050)

    async def test_missing_file(self):
        """An unreadable source is a failure and no request is made."""
        storage = make_storage(put_result=("u", "k"))
        outcome = await upload(FileSource(path=os.path.join(self.tmp.name, "nope"), size_bytes=0), storage)

        self.assertEqual(outcome, TransferFailure())
        storage.put_public_object.assert_not_called()

    async def test_service_error(self):
        """A ClientError from the service is recovered into a failure."""
        error = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
        storage = make_storage(put_error=error)

        outcome = await upload(self.source, storage)

        self.assertFalse(outcome.success)

    async def test_incomplete_response(self):
        """A response without location or key is a failure."""
        storage = make_storage(put_result=(None, None))

        outcome = await upload(self.source, storage)

        self.assertFalse(outcome.success)


class TestObjectStorageSystem(unittest.IsolatedAsyncioTestCase):
    """Test the storage client wrapper."""

    def setUp(self):
        self.system = ObjectStorageSystem(
            endpoint="http://s3.local:9000/",
            bucket_name="bench",
            credentials={"access_key_id": "id", "secret_access_key": "secret"},
        )

    def test_object_url_is_path_style(self):
        self.assertEqual(self.system.object_url("tests-5-a b.txt"), "http://s3.local:9000/bench/tests-5-a%20b.txt")

    def test_single_attempt_config(self):
        self.assertEqual(self.system._config.retries["max_attempts"], 1)

    async def test_put_requires_context(self):
        with self.assertRaises(RuntimeError):
            await self.system.put_public_object("k", b"")

    async def test_put_public_object(self):
        self.system.client = MagicMock()
        self.system.client.put_object = AsyncMock(return_value={"ETag": '"abc"'})

        location, key = await self.system.put_public_object("tests-1-a.bin", b"data")

        self.assertEqual(location, "http://s3.local:9000/bench/tests-1-a.bin")
        self.assertEqual(key, "tests-1-a.bin")
        kwargs = self.system.client.put_object.call_args.kwargs
        self.assertEqual(kwargs["ACL"], "public-read")
        self.assertEqual(kwargs["Bucket"], "bench")

    async def test_put_without_etag(self):
        self.system.client = MagicMock()
        self.system.client.put_object = AsyncMock(return_value={})

        self.assertEqual(await self.system.put_public_object("k", b""), (None, None))


if __name__ == '__main__':
    unittest.main()
