"""
Resolved benchmark targets.

Instances are created once by the config loader and never mutated.
"""

from dataclasses import dataclass

from configuration import DEFAULT_REGION


@dataclass(frozen=True)
class StorageTarget:
    """An S3-compatible bucket and the credentials used to upload into it."""

    name: str
    endpoint: str
    bucket_name: str
    access_key_id: str
    secret_access_key: str
    region_name: str = DEFAULT_REGION

    def __repr__(self) -> str:
        # never print the secret
        return (
            f"StorageTarget(name={self.name!r}, endpoint={self.endpoint!r}, "
            f"bucket_name={self.bucket_name!r})"
        )


@dataclass(frozen=True)
class FileSource:
    """A local file uploaded on every upload trial."""

    path: str
    size_bytes: int


@dataclass(frozen=True)
class DownloadTarget:
    """A URL fetched on every download trial."""

    file_url: str
    download_directory: str
