"""
Tests for object key and download file name generation.
"""

import os
import re
import sys
import unittest
from unittest.mock import patch

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.naming import (
    make_download_file_name,
    make_download_location,
    make_object_key,
    url_basename,
)
from configuration import DOWNLOAD_NAME_MAX_LENGTH, RANDOM_SUFFIX_MAX, RANDOM_SUFFIX_MIN


class TestObjectKey(unittest.TestCase):
    """Test upload object keys."""

    def test_key_format(self):
        key = make_object_key("/data/files/photo.jpg")
        match = re.fullmatch(r"tests-(\d+)-photo\.jpg", key)
        self.assertIsNotNone(match)
        self.assertTrue(RANDOM_SUFFIX_MIN <= int(match.group(1)) <= RANDOM_SUFFIX_MAX)

    def test_key_uses_random_suffix(self):
        with patch("common.naming.random.randint", return_value=417):
            self.assertEqual(make_object_key("/x/y.bin"), "tests-417-y.bin")

    def test_keys_rarely_collide_within_a_run(self):
        """Ten keys for the same file are almost always distinct."""
        batches = 200
        distinct = [
            len({make_object_key("/data/same.bin") for _ in range(10)})
            for _ in range(batches)
        ]
        self.assertGreater(sum(distinct) / batches, 9.8)


class TestDownloadFileName(unittest.TestCase):
    """Test download output names."""

    def test_prefix_and_basename(self):
        name = make_download_file_name("https://example.com/files/archive.zip?x=1")
        self.assertRegex(name, r"^test-\d+archive\.zip$")

    def test_long_basename_keeps_last_characters(self):
        basename = "a" * 30 + "0123456789abcdefghijklmnopqrstuvwxyz.bin"
        with patch("common.naming.random.randint", return_value=7):
            name = make_download_file_name(f"http://example.com/{basename}")
        self.assertEqual(name, "test-7" + basename[-DOWNLOAD_NAME_MAX_LENGTH:])
        self.assertEqual(len(name) - len("test-7"), DOWNLOAD_NAME_MAX_LENGTH)

    def test_short_basename_untouched(self):
        with patch("common.naming.random.randint", return_value=1000):
            self.assertEqual(make_download_file_name("http://h/dir/f.txt"), "test-1000f.txt")

    def test_url_without_path(self):
        self.assertEqual(url_basename("http://example.com"), "")
        self.assertRegex(make_download_file_name("http://example.com/"), r"^test-\d+$")

    def test_location_is_absolute(self):
        location = make_download_location("http://h/f.txt", "downloads")
        self.assertTrue(os.path.isabs(location))
        self.assertEqual(os.path.basename(os.path.dirname(location)), "downloads")


if __name__ == '__main__':
    unittest.main()
