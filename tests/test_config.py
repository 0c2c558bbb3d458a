import pytest
from pydantic import ValidationError

from quickapp_deploy.core.config import Settings


def test_log_level_normalized():
    assert Settings(log_level="debug").log_level == "DEBUG"
    assert Settings(log_level=" Warning ").log_level == "WARNING"


@pytest.mark.parametrize("level", ["verbose", "basic_format", ""])
def test_unknown_log_level_rejected(level):
    with pytest.raises(ValidationError):
        Settings(log_level=level)


@pytest.mark.parametrize("name", ["certs/cp.cert", "..", ".", "", "a\\b"])
def test_cert_filename_must_be_plain(name):
    with pytest.raises(ValidationError):
        Settings(cert_filename=name)


def test_cert_filename_from_env(monkeypatch):
    monkeypatch.setenv("QUICKAPP_CERT_FILENAME", "app.cert")
    assert Settings().cert_filename == "app.cert"


def test_archive_extension_strips_dot():
    assert Settings(archive_extension=".zip").archive_extension == "zip"
