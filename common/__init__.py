"""
Common utilities for the transfer benchmark.
"""

from .targets import DownloadTarget, FileSource, StorageTarget

__all__ = ['DownloadTarget', 'FileSource', 'StorageTarget']
