"""
Randomized names for uploaded objects and downloaded files.

A bounded random integer keeps repeated trials of the same file from
overwriting each other with high probability.
"""

import os
import random
from urllib.parse import unquote, urlparse

from configuration import (
    DOWNLOAD_FILE_PREFIX,
    DOWNLOAD_NAME_MAX_LENGTH,
    RANDOM_SUFFIX_MAX,
    RANDOM_SUFFIX_MIN,
    UPLOAD_KEY_PREFIX,
    UPLOAD_KEY_SEPARATOR,
)


def random_suffix() -> int:
    """Random integer in [RANDOM_SUFFIX_MIN, RANDOM_SUFFIX_MAX]."""
    return random.randint(RANDOM_SUFFIX_MIN, RANDOM_SUFFIX_MAX)


def make_object_key(file_path: str) -> str:
    """Destination key for an upload, e.g. 'tests-417-photo.jpg'."""
    return f"{UPLOAD_KEY_PREFIX}{random_suffix()}{UPLOAD_KEY_SEPARATOR}{os.path.basename(file_path)}"


def url_basename(file_url: str) -> str:
    """Last path segment of a URL, without query string."""
    return os.path.basename(unquote(urlparse(file_url).path))


def make_download_file_name(file_url: str) -> str:
    """File name for a downloaded body, e.g. 'test-42archive.zip'.

    The URL basename is cut down to its last DOWNLOAD_NAME_MAX_LENGTH characters.
    """
    name = url_basename(file_url)
    if len(name) > DOWNLOAD_NAME_MAX_LENGTH:
        name = name[-DOWNLOAD_NAME_MAX_LENGTH:]
    return f"{DOWNLOAD_FILE_PREFIX}{random_suffix()}{name}"


def make_download_location(file_url: str, download_directory: str) -> str:
    """Absolute output path for a download of file_url."""
    return os.path.abspath(os.path.join(download_directory, make_download_file_name(file_url)))
