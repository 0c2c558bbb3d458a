from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from quickapp_deploy.core.exceptions import DownloadError
from quickapp_deploy.deploy.fetch import fetch_archive, scratch_path_for
from quickapp_deploy.deploy.models import ArchiveLocation

URL = "https://cdn.example.com/demo.rpk"


def _response(status: int = 200, content: bytes = b"") -> httpx.Response:
    return httpx.Response(status, content=content, request=httpx.Request("GET", URL))


def _patched_client(response=None, side_effect=None):
    client = MagicMock()
    if side_effect is not None:
        client.get.side_effect = side_effect
    else:
        client.get.return_value = response
    return client


def test_download_written_to_scratch_path(tmp_path: Path):
    data = b"PK\x03\x04 archive bytes"
    with patch("httpx.Client") as Client:
        Client.return_value.__enter__.return_value = _patched_client(_response(content=data))
        archive = fetch_archive(ArchiveLocation(url=URL, package_name="demo"), tmp_path)

    assert archive.path == tmp_path / "demo.rpk"
    assert archive.path.read_bytes() == data
    assert archive.size_bytes == len(data)


def test_scratch_path_uses_extension():
    assert scratch_path_for(Path("/tmp/download"), "com.x", "zip") == Path("/tmp/download/com.x.zip")


def test_http_error_raises_download_error(tmp_path: Path):
    with patch("httpx.Client") as Client:
        Client.return_value.__enter__.return_value = _patched_client(_response(404))
        with pytest.raises(DownloadError) as exc_info:
            fetch_archive(ArchiveLocation(url=URL, package_name="demo"), tmp_path)
    assert "404" in str(exc_info.value)
    assert exc_info.value.code == "download"
    assert not (tmp_path / "demo.rpk").exists()


def test_transport_error_raises_download_error(tmp_path: Path):
    with patch("httpx.Client") as Client:
        Client.return_value.__enter__.return_value = _patched_client(
            side_effect=httpx.ReadTimeout("timed out")
        )
        with pytest.raises(DownloadError):
            fetch_archive(ArchiveLocation(url=URL, package_name="demo"), tmp_path)


def test_empty_url_raises_download_error(tmp_path: Path):
    with patch("httpx.Client") as Client:
        with pytest.raises(DownloadError):
            fetch_archive(ArchiveLocation(url="", package_name="demo"), tmp_path)
        Client.assert_not_called()


def test_size_limit(tmp_path: Path):
    with patch("httpx.Client") as Client:
        Client.return_value.__enter__.return_value = _patched_client(_response(content=b"a" * 1024))
        with pytest.raises(DownloadError):
            fetch_archive(
                ArchiveLocation(url=URL, package_name="demo"), tmp_path, max_size_bytes=10
            )


def test_missing_scratch_dir_is_a_write_failure(tmp_path: Path):
    with patch("httpx.Client") as Client:
        Client.return_value.__enter__.return_value = _patched_client(_response(content=b"data"))
        with pytest.raises(DownloadError) as exc_info:
            fetch_archive(ArchiveLocation(url=URL, package_name="demo"), tmp_path / "missing")
    assert "Failed to save archive" in str(exc_info.value)
