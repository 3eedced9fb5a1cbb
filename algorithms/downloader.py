"""
Download transfer primitive: fetch a URL over HTTP(S), following redirects, and
store the body under the download directory.
"""

import asyncio
import logging
from typing import Optional
from urllib.parse import urljoin

import aiohttp

from configuration import (
    ACCEPTED_STATUS_MAX,
    ACCEPTED_STATUS_MIN,
    DOWNLOAD_CHUNK_SIZE,
    IDENTITY_ENCODING,
    MAX_REDIRECTS,
    REDIRECT_STATUSES,
)
from common.metrics_utils import current_time_ms, elapsed_ms, format_duration, monotonic_ms
from common.naming import make_download_location
from persistence.record import (
    FAILURE_REDIRECT_LIMIT,
    TransferFailure,
    TransferOutcome,
    TransferResult,
)

logger = logging.getLogger(__name__)


async def download(
    file_url: str,
    download_directory: str,
    request_timeout_seconds: Optional[float] = None,
    max_redirects: int = MAX_REDIRECTS,
) -> TransferOutcome:
    """Download file_url into download_directory and time the transfer.

    301/302 responses with a Location header are followed, at most
    max_redirects times. The clock restarts on every request, so the recorded
    duration covers only the request that served the body, and the success
    outcome records the final URL. Compression is not negotiated: the body
    is timed and stored exactly as it crosses the wire.

    Never raises: every error is logged and turned into a TransferFailure.

    Args:
        file_url: http:// or https:// URL
        download_directory: Existing directory for the downloaded file
        request_timeout_seconds: Total timeout per request, None for no timeout
        max_redirects: Number of redirects to follow before giving up

    Returns:
        TransferResult with the output path, or TransferFailure
    """
    timeout = aiohttp.ClientTimeout(total=request_timeout_seconds)
    url = file_url
    buffer = None

    try:
        async with aiohttp.ClientSession(
            timeout=timeout,
            auto_decompress=False,
            headers={"Accept-Encoding": IDENTITY_ENCODING},
        ) as session:
            for _ in range(max_redirects + 1):
                started_on = current_time_ms()
                start_monotonic = monotonic_ms()
                async with session.get(url, allow_redirects=False) as response:
                    status = response.status

                    if not ACCEPTED_STATUS_MIN <= status <= ACCEPTED_STATUS_MAX:
                        logger.error(
                            f"HTTP status code is not 2xx, 301, or 302. "
                            f"Status Code: {status}. URL: {url}"
                        )
                        return TransferFailure()

                    if status in REDIRECT_STATUSES:
                        location = response.headers.get("Location")
                        if not location:
                            logger.error(f"Redirection without destination (HTTP {status}). URL: {url}")
                            return TransferFailure()
                        logger.debug(f"HTTP {status}: {url} -> {location}")
                        url = urljoin(url, location)
                        continue

                    if status >= 300:
                        logger.error(f"Unsupported HTTP status {status} without body handling. URL: {url}")
                        return TransferFailure()

                    buffer = bytearray()
                    async for chunk in response.content.iter_chunked(DOWNLOAD_CHUNK_SIZE):
                        buffer.extend(chunk)
                    duration = elapsed_ms(start_monotonic)
                    break

        if buffer is None:
            logger.error(f"Exceeded {max_redirects} redirects while downloading {file_url}")
            return TransferFailure(FAILURE_REDIRECT_LIMIT)

    except asyncio.TimeoutError:
        logger.error(f"HTTP request timed out. URL: {url}")
        return TransferFailure()
    except aiohttp.ClientError as e:
        logger.error(f"HTTP request error for {url}: {e}")
        return TransferFailure()
    except Exception as e:
        logger.error(f"Unexpected error downloading {url}: {e}", exc_info=True)
        return TransferFailure()

    try:
        result = TransferResult(
            started_on=started_on,
            duration=duration,
            source=url,
            result=make_download_location(url, download_directory),
            source_key="fileUrl",
            result_key="fileOutput",
        )
        with open(result.result, "wb") as f:
            f.write(buffer)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to store download of {url} in {download_directory}: {e}")
        return TransferFailure()

    logger.debug(
        f"Downloaded {len(buffer)} bytes from {url} to {result.result} "
        f"in {format_duration(result.duration)}"
    )
    return result
