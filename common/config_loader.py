"""
Loading and resolution of the benchmark configuration.

The JSON config file is validated eagerly with pydantic models; every optional
field has a documented default. Resolution then turns the validated config into
immutable targets: credential files are parsed with python-dotenv and source
file sizes are read from disk. Any problem raises ConfigurationError, since no
benchmark can run on a partially resolved configuration.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from configuration import (
    BUCKET_ACCESS_ID_KEY,
    BUCKET_ENDPOINT_KEY,
    BUCKET_NAME_KEY,
    BUCKET_REGION_KEY,
    BUCKET_SECRET_KEY_KEY,
    DEFAULT_DOWNLOAD_DIRECTORY,
    DEFAULT_DOWNLOAD_RESULT_LOCATION,
    DEFAULT_NUMBER_DOWNLOAD,
    DEFAULT_NUMBER_UPLOAD,
    DEFAULT_REGION,
    DEFAULT_UPLOAD_RESULT_LOCATION,
    REQUIRED_CREDENTIAL_KEYS,
)
from common.targets import DownloadTarget, FileSource, StorageTarget

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when the configuration cannot be loaded or resolved."""


class _ConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class StorageConfig(_ConfigModel):
    name: str
    env_file: str = Field(alias="envFile")
    is_used: bool = Field(default=True, alias="isUsed")


class FileConfig(_ConfigModel):
    location: str
    is_used: bool = Field(default=True, alias="isUsed")


class DownloadConfig(_ConfigModel):
    file_url: str = Field(alias="fileUrl")
    is_used: bool = Field(default=True, alias="isUsed")


class RunSettings(_ConfigModel):
    """The `test` section: trial counts, output locations and switches."""

    number_upload: int = Field(default=DEFAULT_NUMBER_UPLOAD, ge=0, alias="numberUpload")
    number_download: int = Field(default=DEFAULT_NUMBER_DOWNLOAD, ge=0, alias="numberDownload")
    upload_result_location: str = Field(
        default=DEFAULT_UPLOAD_RESULT_LOCATION, alias="uploadResultLocation"
    )
    download_result_location: str = Field(
        default=DEFAULT_DOWNLOAD_RESULT_LOCATION, alias="downloadResultLocation"
    )
    download_directory: str = Field(default=DEFAULT_DOWNLOAD_DIRECTORY, alias="downloadDirectory")
    is_upload: bool = Field(default=True, alias="isUpload")
    is_download: bool = Field(default=True, alias="isDownload")
    # None disables request timeouts
    request_timeout_seconds: Optional[float] = Field(
        default=None, gt=0, alias="requestTimeoutSeconds"
    )
    parquet_result_location: Optional[str] = Field(default=None, alias="parquetResultLocation")


class BenchmarkConfig(_ConfigModel):
    storages: List[StorageConfig] = Field(default_factory=list)
    files: List[FileConfig] = Field(default_factory=list)
    downloads: List[DownloadConfig] = Field(default_factory=list)
    test: RunSettings = Field(default_factory=RunSettings)


@dataclass
class ResolvedTargets:
    """Enabled targets with credentials and file sizes resolved."""

    storages: List[StorageTarget] = field(default_factory=list)
    files: List[FileSource] = field(default_factory=list)
    downloads: List[DownloadTarget] = field(default_factory=list)


def load_config(config_path: str) -> BenchmarkConfig:
    """Read and validate a JSON config file.

    Args:
        config_path: Path to the JSON config file

    Returns:
        Validated BenchmarkConfig

    Raises:
        ConfigurationError: If the file is unreadable, not JSON or invalid
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Malformed JSON in config file {config_path}: {e}") from e

    try:
        config = BenchmarkConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e

    logger.debug(
        f"Loaded config {config_path}: {len(config.storages)} storages, "
        f"{len(config.files)} files, {len(config.downloads)} downloads"
    )
    return config


def resolve_path(base_dir: str, location: str) -> str:
    """Resolve a config-relative location to an absolute path."""
    return os.path.abspath(os.path.join(base_dir, location))


def load_storage_target(storage: StorageConfig, base_dir: str) -> StorageTarget:
    """Build a StorageTarget from the storage's credential file."""
    env_path = resolve_path(base_dir, storage.env_file)
    if not os.path.isfile(env_path):
        raise ConfigurationError(
            f"Credential file for storage '{storage.name}' not found: {env_path}"
        )

    env = dotenv_values(env_path)
    missing = [key for key in REQUIRED_CREDENTIAL_KEYS if not env.get(key)]
    if missing:
        raise ConfigurationError(
            f"Credential file {env_path} for storage '{storage.name}' "
            f"is missing: {', '.join(missing)}"
        )

    return StorageTarget(
        name=storage.name,
        endpoint=env[BUCKET_ENDPOINT_KEY],
        bucket_name=env[BUCKET_NAME_KEY],
        access_key_id=env[BUCKET_ACCESS_ID_KEY],
        secret_access_key=env[BUCKET_SECRET_KEY_KEY],
        region_name=env.get(BUCKET_REGION_KEY) or DEFAULT_REGION,
    )


def load_file_source(file: FileConfig, base_dir: str) -> FileSource:
    """Build a FileSource, reading the file size from disk."""
    path = resolve_path(base_dir, file.location)
    try:
        size = os.stat(path).st_size
    except OSError as e:
        raise ConfigurationError(f"Cannot stat source file {path}: {e}") from e
    if not os.path.isfile(path):
        raise ConfigurationError(f"Source file is not a regular file: {path}")
    return FileSource(path=path, size_bytes=size)


def resolve_targets(config: BenchmarkConfig, base_dir: str) -> ResolvedTargets:
    """Resolve every enabled storage, file and download of the config.

    Entries with isUsed=false are skipped; entries without the flag are used.

    Args:
        config: Validated config
        base_dir: Directory that relative locations are resolved against

    Returns:
        ResolvedTargets for the run

    Raises:
        ConfigurationError: If a credential or source file cannot be used
    """
    download_directory = resolve_path(base_dir, config.test.download_directory)

    targets = ResolvedTargets(
        storages=[
            load_storage_target(storage, base_dir)
            for storage in config.storages
            if storage.is_used
        ],
        files=[load_file_source(file, base_dir) for file in config.files if file.is_used],
        downloads=[
            DownloadTarget(file_url=download.file_url, download_directory=download_directory)
            for download in config.downloads
            if download.is_used
        ],
    )

    logger.info(
        f"Resolved {len(targets.storages)} storages, {len(targets.files)} files, "
        f"{len(targets.downloads)} downloads"
    )
    if config.test.is_upload and not (targets.storages and targets.files):
        logger.warning("Upload test enabled but no storages or files are in use")
    if config.test.is_download and not targets.downloads:
        logger.warning("Download test enabled but no downloads are in use")

    return targets
