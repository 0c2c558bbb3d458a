"""Unpack a downloaded archive into its deploy directory."""

from __future__ import annotations

import shutil
import zipfile
import zlib
from pathlib import Path

import structlog

from quickapp_deploy.core.exceptions import ExtractionError


logger = structlog.get_logger()


def _check_limits(zf: zipfile.ZipFile, max_entries: int, max_total_bytes: int) -> None:
    """Reject archives whose declared size or entry count is too large."""
    members = zf.infolist()
    if len(members) > max_entries:
        raise ExtractionError(
            f"Archive has {len(members)} entries, limit is {max_entries}"
        )
    total = sum(m.file_size for m in members)
    if total > max_total_bytes:
        raise ExtractionError(
            f"Archive expands to {total} bytes, limit is {max_total_bytes}"
        )


def _safe_extract_zip(zf: zipfile.ZipFile, dest_dir: Path, max_total_bytes: int) -> int:
    """Extract a zipfile to dest_dir, preventing zip-slip.

    Returns the number of entries extracted.
    """
    base = dest_dir.resolve()
    for member in zf.infolist():
        member_path = Path(member.filename)
        if member_path.is_absolute() or ".." in member_path.parts:
            raise ExtractionError(f"Archive contains unsafe path (zip-slip): {member.filename}")
        target = (base / member_path).resolve()
        if target != base and base not in target.parents:
            raise ExtractionError(f"Archive entry escapes destination (zip-slip): {member.filename}")

    written = 0
    count = 0
    for member in zf.infolist():
        target = base / member.filename
        if member.is_dir():
            target.mkdir(parents=True, exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(member, "r") as src, open(target, "wb") as dst:
                shutil.copyfileobj(src, dst)
            # file_size comes from the archive header; count what was really written
            written += target.stat().st_size
            if written > max_total_bytes:
                raise ExtractionError(
                    f"Archive expands beyond the limit of {max_total_bytes} bytes"
                )
        count += 1
    return count


def extract_archive(
    archive_path: Path,
    deploy_dir: Path,
    *,
    max_entries: int = 20000,
    max_total_bytes: int = 1024 * 1024 * 1024,
) -> int:
    """Expand the zip archive at ``archive_path`` into ``deploy_dir``.

    Relative paths inside the archive are preserved. Existing files in
    ``deploy_dir`` are overwritten by entries of the same name.

    Args:
        archive_path: Scratch file produced by the fetcher
        deploy_dir: Target directory (created if missing)
        max_entries: Maximum number of archive entries
        max_total_bytes: Maximum total uncompressed size

    Returns:
        Number of extracted entries

    Raises:
        ExtractionError: If the archive cannot be opened, is not a valid zip,
            violates the limits, or an entry cannot be written
    """
    logger.info("Extracting archive", archive=str(archive_path), dest=str(deploy_dir))
    try:
        deploy_dir.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive_path, "r") as zf:
            _check_limits(zf, max_entries, max_total_bytes)
            count = _safe_extract_zip(zf, deploy_dir, max_total_bytes)
    except ExtractionError:
        raise
    except zipfile.BadZipFile as e:
        raise ExtractionError(f"Not a valid archive: {archive_path}: {e}")
    except (OSError, zlib.error, zipfile.LargeZipFile, RuntimeError) as e:
        raise ExtractionError(f"Failed to extract {archive_path}: {e}")

    logger.info("Archive extracted", entries=count, dest=str(deploy_dir))
    return count
