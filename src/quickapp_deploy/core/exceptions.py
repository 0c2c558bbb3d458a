"""Custom exceptions for quickapp-deploy."""

from typing import Optional


class QuickAppDeployError(Exception):
    """Base exception for all deployment errors."""

    default_code: Optional[str] = None

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code or self.default_code


class UsageError(QuickAppDeployError):
    """Invalid invocation parameters, rejected before the pipeline starts."""

    default_code = "usage"


class CatalogLookupError(QuickAppDeployError):
    """Catalog query failed or returned an unusable response."""

    default_code = "lookup"


class DownloadError(QuickAppDeployError):
    """Archive could not be downloaded or saved to the scratch directory."""

    default_code = "download"


class ExtractionError(QuickAppDeployError):
    """Archive could not be opened or unpacked."""

    default_code = "extract"


class WriteError(QuickAppDeployError):
    """Post-extraction write (certificate, signature) failed."""

    default_code = "write"


class DeployEnvironmentError(QuickAppDeployError):
    """Scratch or deploy directory could not be prepared."""

    default_code = "environment"
