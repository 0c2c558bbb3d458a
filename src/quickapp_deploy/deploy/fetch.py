"""Fetch utilities for downloading quick app archives to the scratch directory."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import httpx
import structlog

from quickapp_deploy.core.exceptions import DownloadError
from quickapp_deploy.deploy.models import ArchiveLocation, FetchedArchive


logger = structlog.get_logger()


def scratch_path_for(scratch_dir: Path, package_name: str, archive_extension: str = "rpk") -> Path:
    """Return ``{scratch_dir}/{package_name}.{archive_extension}``."""
    return Path(f"{scratch_dir}/{package_name}.{archive_extension}")


def _write_chunks_to_file(chunks: Iterable[bytes], dest_path: Path, max_size_bytes: int) -> int:
    """Write byte chunks to ``dest_path`` with max-size enforcement.

    Returns number of bytes written.
    """
    bytes_written = 0
    with open(dest_path, "wb") as f:
        for chunk in chunks:
            if not chunk:
                continue
            bytes_written += len(chunk)
            if bytes_written > max_size_bytes:
                raise DownloadError(
                    f"Archive exceeds maximum allowed size of {max_size_bytes} bytes"
                )
            f.write(chunk)
    return bytes_written


def fetch_archive(
    location: ArchiveLocation,
    scratch_dir: Path,
    *,
    archive_extension: str = "rpk",
    timeout_sec: float = 30.0,
    max_size_bytes: int = 200 * 1024 * 1024,
) -> FetchedArchive:
    """Download the archive at ``location.url`` into the scratch directory.

    The whole response body is buffered in memory and then written verbatim.
    A partially written file is left in place when the write fails.

    Raises:
        DownloadError: If the URL is empty, the request fails, the server
            answers with an error status, or the file cannot be written
    """
    if not location.url:
        raise DownloadError(f"No download URL for package {location.package_name}")

    dest_path = scratch_path_for(scratch_dir, location.package_name, archive_extension)
    logger.info("Downloading archive", url=location.url, dest=str(dest_path))

    try:
        with httpx.Client(timeout=httpx.Timeout(timeout_sec)) as client:
            resp = client.get(location.url, follow_redirects=True)
            resp.raise_for_status()
            content = resp.content
    except httpx.HTTPStatusError as e:
        raise DownloadError(f"Download failed with HTTP {e.response.status_code}: {location.url}")
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise DownloadError(f"Download failed: {e}")

    try:
        bytes_written = _write_chunks_to_file([content], dest_path, max_size_bytes)
    except OSError as e:
        raise DownloadError(f"Failed to save archive to {dest_path}: {e}")

    logger.info("Saved archive", path=str(dest_path), bytes=bytes_written)
    return FetchedArchive(path=dest_path, package_name=location.package_name, size_bytes=bytes_written)

