"""
Benchmark runner: upload and download trials across every configured target.
"""

import logging
import os
from typing import Any, Callable, Dict, List, Optional

from algorithms.downloader import download
from algorithms.trials import run_trials
from algorithms.uploader import upload
from common.config_loader import BenchmarkConfig, ResolvedTargets, resolve_path
from common.metrics_utils import throughput_mbps
from common.storage_factory import create_storage_system
from common.targets import DownloadTarget, FileSource, StorageTarget
from persistence.json_report import JsonReportWriter
from persistence.parquet import ParquetPersistence
from persistence.record import TransferFailure, TrialSet

logger = logging.getLogger(__name__)


class RunSummary:
    """What a run produced: the reports, where they went and what failed to save."""

    def __init__(self):
        self.upload_report: Optional[List[Dict[str, Any]]] = None
        self.download_report: Optional[List[Dict[str, Any]]] = None
        self.written_reports: Dict[str, str] = {}
        self.failed_reports: List[str] = []

    @property
    def ok(self) -> bool:
        return not self.failed_reports


class BenchmarkRunner:
    """Runs every configured upload and download trial, strictly one at a time."""

    def __init__(
        self,
        config: BenchmarkConfig,
        targets: ResolvedTargets,
        base_dir: str = ".",
        storage_factory: Callable = create_storage_system,
    ):
        self.config = config
        self.settings = config.test
        self.targets = targets
        self.base_dir = base_dir
        self.storage_factory = storage_factory
        self.writer = JsonReportWriter(base_dir)
        self.persistence = ParquetPersistence(base_dir) if self.settings.parquet_result_location else None

        logger.info(
            f"Initialized benchmark runner: upload={self.settings.is_upload} "
            f"({self.settings.number_upload} trials), download={self.settings.is_download} "
            f"({self.settings.number_download} trials)"
        )

    async def run(self) -> RunSummary:
        """Execute the enabled tests and save their reports."""
        summary = RunSummary()

        if self.settings.is_upload:
            logger.info("=== Upload Test ===")
            summary.upload_report = await self.run_upload_test()
            self._save_report(summary, "upload", self.settings.upload_result_location,
                              summary.upload_report)

        if self.settings.is_download:
            logger.info("=== Download Test ===")
            summary.download_report = await self.run_download_test()
            self._save_report(summary, "download", self.settings.download_result_location,
                              summary.download_report)

        if self.persistence is not None:
            try:
                path = self.persistence.save_to_file(self.settings.parquet_result_location)
                if path:
                    summary.written_reports["parquet"] = path
            except Exception as e:
                logger.error(f"Failed to save parquet report: {e}")
                summary.failed_reports.append("parquet")

        return summary

    async def run_upload_test(self) -> List[Dict[str, Any]]:
        """Upload every file to every storage `numberUpload` times."""
        results = []
        for storage in self.targets.storages:
            logger.info(f"Uploading {len(self.targets.files)} files to storage '{storage.name}'")
            storage_results = []
            for file in self.targets.files:
                trial_set = await self._run_upload_trials(storage, file)
                storage_results.append(trial_set.to_dict())
                if self.persistence is not None:
                    self.persistence.store_trial_set(
                        "upload", file.path, trial_set, storage=storage.name, size_bytes=file.size_bytes
                    )
            results.append({
                "name": storage.name,
                "results": storage_results,
            })
        return results

    async def _run_upload_trials(self, storage: StorageTarget, file: FileSource) -> TrialSet:
        metadata = {
            "fileSource": file.path,
            "fileSizeBytes": file.size_bytes,
        }
        try:
            storage_system = self.storage_factory(storage, self.settings.request_timeout_seconds)
        except Exception as e:
            logger.error(f"Failed to initialize storage '{storage.name}': {e}")
            return TrialSet([TransferFailure() for _ in range(self.settings.number_upload)], metadata)

        async def upload_to_storage(file_source: FileSource):
            return await upload(file_source, storage_system)

        trial_set = await run_trials(upload_to_storage, file, self.settings.number_upload, metadata)
        speed = throughput_mbps(file.size_bytes, trial_set.average_duration)
        if speed is not None:
            logger.info(f"Upload speed to '{storage.name}': {speed:.2f} Mbps")
        return trial_set

    async def run_download_test(self) -> List[Dict[str, Any]]:
        """Download every target URL `numberDownload` times."""
        os.makedirs(resolve_path(self.base_dir, self.settings.download_directory), exist_ok=True)
        timeout = self.settings.request_timeout_seconds

        async def download_target(target: DownloadTarget):
            return await download(target.file_url, target.download_directory, timeout)

        results = []
        for target in self.targets.downloads:
            trial_set = await run_trials(
                download_target, target, self.settings.number_download, {"fileUrl": target.file_url}
            )
            results.append(trial_set.to_dict())
            if self.persistence is not None:
                self.persistence.store_trial_set("download", target.file_url, trial_set)
        return results

    async def check_storages(self) -> bool:
        """Verify every enabled storage bucket is reachable."""
        all_ok = True
        for storage in self.targets.storages:
            try:
                storage_system = self.storage_factory(storage, self.settings.request_timeout_seconds)
                async with storage_system:
                    if not await storage_system.verify_connection():
                        all_ok = False
            except Exception as e:
                logger.error(f"✗ Storage '{storage.name}' could not be checked: {e}")
                all_ok = False
        return all_ok

    def _save_report(self, summary: RunSummary, name: str, template: str, payload) -> None:
        try:
            summary.written_reports[name] = self.writer.write(template, payload)
        except OSError as e:
            logger.error(f"Failed to save {name} report to {template}: {e}")
            summary.failed_reports.append(name)
