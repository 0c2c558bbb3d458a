"""Configuration management for quickapp-deploy."""

import logging
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_WORKSPACE = "/opt/xxxx/yyyy"
DEFAULT_SCRATCH_DIR = "/tmp/download"
DEFAULT_CATALOG_URL = "http://stores1.hispace.hicloud.com/hwmarket/api/tlsApis"
DEFAULT_PAYLOAD_TEMPLATE = "method=client.getRpkInfo&serviceType=13&pkgName="


class Settings(BaseSettings):
    """Deployment configuration settings.

    Every field can be overridden through a ``QUICKAPP_``-prefixed
    environment variable, e.g. ``QUICKAPP_SCRATCH_DIR=/var/tmp/rpk``.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUICKAPP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Filesystem layout
    default_workspace: str = Field(DEFAULT_WORKSPACE, description="Workspace root used when --workspace is omitted")
    scratch_dir: str = Field(DEFAULT_SCRATCH_DIR, description="Directory for downloaded archives")
    archive_extension: str = Field("rpk", description="File extension of saved archives")

    # Package resolution
    download_url: Optional[str] = Field(
        None,
        description="Fixed archive URL; when set the catalog lookup is skipped",
    )
    catalog_url: str = Field(DEFAULT_CATALOG_URL, description="Catalog lookup endpoint")
    payload_template: str = Field(
        DEFAULT_PAYLOAD_TEMPLATE,
        description="Catalog request body; the package name is appended verbatim",
    )
    strict_lookup: bool = Field(
        False,
        description="Treat a catalog response without rpkInfo.url as an error",
    )

    # Network
    request_timeout_seconds: float = Field(30.0, description="Timeout for each HTTP request")

    # Archive limits
    max_archive_size_mb: int = Field(200, description="Maximum size of a downloaded archive")
    max_extracted_size_mb: int = Field(1024, description="Maximum total uncompressed size")
    max_archive_entries: int = Field(20000, description="Maximum number of entries in an archive")

    # Finalization
    sign_package: bool = Field(True, description="Write the certificate file after extraction")
    cert_filename: str = Field("cp.cert", description="Certificate file name inside the deploy directory")
    cert_content: str = Field("123123123", description="Placeholder certificate content")

    # Observability
    log_level: str = Field("INFO")
    log_format: str = Field("console")

    @field_validator("archive_extension")
    @classmethod
    def strip_extension_dot(cls, v: str) -> str:
        """Accept both ``rpk`` and ``.rpk``."""
        v = v.strip().lstrip(".")
        if not v:
            raise ValueError("archive_extension cannot be empty")
        return v

    @field_validator("download_url", mode="before")
    @classmethod
    def empty_url_is_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("request_timeout_seconds")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout_seconds must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in logging.getLevelNamesMapping():
            raise ValueError(f"Unsupported log level: {v}")
        return v

    @field_validator("cert_filename")
    @classmethod
    def plain_cert_filename(cls, v: str) -> str:
        # Written directly inside the deploy directory
        if not v or "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"Invalid certificate file name: {v!r}")
        return v

    @field_validator("log_format")
    @classmethod
    def known_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError(f"Unsupported log format: {v}")
        return v

    @property
    def max_archive_size_bytes(self) -> int:
        return self.max_archive_size_mb * 1024 * 1024

    @property
    def max_extracted_size_bytes(self) -> int:
        return self.max_extracted_size_mb * 1024 * 1024
