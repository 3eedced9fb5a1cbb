"""
Configuration constants for the transfer benchmark.

This module contains the fixed parameters of a benchmark run:
- Config file and credential file conventions
- Naming rules for uploaded objects and downloaded files
- Download redirect handling
- Defaults applied to optional config fields
"""

from typing import Tuple

# =============================================================================
# CONFIG FILE
# =============================================================================

DEFAULT_CONFIG_FILE: str = "config.json"
TIME_PLACEHOLDER: str = "{time}"

# Keys every storage credential file must define
BUCKET_ENDPOINT_KEY: str = "BUCKET_ENDPOINT"
BUCKET_NAME_KEY: str = "BUCKET_NAME"
BUCKET_ACCESS_ID_KEY: str = "BUCKET_ACCESS_ID"
BUCKET_SECRET_KEY_KEY: str = "BUCKET_SECRET_KEY"
BUCKET_REGION_KEY: str = "BUCKET_REGION"  # optional
REQUIRED_CREDENTIAL_KEYS: Tuple[str, ...] = (
    BUCKET_ENDPOINT_KEY,
    BUCKET_NAME_KEY,
    BUCKET_ACCESS_ID_KEY,
    BUCKET_SECRET_KEY_KEY,
)
DEFAULT_REGION: str = "auto"

# =============================================================================
# TEST DEFAULTS
# =============================================================================

DEFAULT_NUMBER_UPLOAD: int = 1
DEFAULT_NUMBER_DOWNLOAD: int = 1
DEFAULT_UPLOAD_RESULT_LOCATION: str = "results/upload-{time}.json"
DEFAULT_DOWNLOAD_RESULT_LOCATION: str = "results/download-{time}.json"
DEFAULT_DOWNLOAD_DIRECTORY: str = "downloads"

# =============================================================================
# NAMING
# =============================================================================

RANDOM_SUFFIX_MIN: int = 1
RANDOM_SUFFIX_MAX: int = 1000
UPLOAD_KEY_PREFIX: str = "tests-"
UPLOAD_KEY_SEPARATOR: str = "-"
DOWNLOAD_FILE_PREFIX: str = "test-"
DOWNLOAD_NAME_MAX_LENGTH: int = 40  # keep the last N characters of the URL basename

# =============================================================================
# TRANSFERS
# =============================================================================

UPLOAD_ACL: str = "public-read"
MAX_REDIRECTS: int = 10
REDIRECT_STATUSES: Tuple[int, ...] = (301, 302)
ACCEPTED_STATUS_MIN: int = 200
ACCEPTED_STATUS_MAX: int = 302
DOWNLOAD_CHUNK_SIZE: int = 64 * 1024
IDENTITY_ENCODING: str = "identity"  # downloads never negotiate compression

# =============================================================================
# LOGGING
# =============================================================================

LOG_FORMAT: str = "%(asctime)s - %(levelname)s - %(message)s"
