"""
Deployment pipeline for quick app packages.

- DeploymentRequest: resolved invocation parameters
- Locator / StaticLocator / CatalogLocator: package name -> archive URL
- fetch_archive: archive URL -> scratch file
- extract_archive: scratch file -> deploy directory
- Signer / PlaceholderSigner / NoopSigner: post-extraction step
- DeployProcessor: runs the stages in order
"""

from .models import (
    ArchiveLocation,
    DeploymentRequest,
    DeploymentResult,
    DeploymentStage,
    FetchedArchive,
)
from .environment import prepare_environment
from .extract import extract_archive
from .fetch import fetch_archive
from .locator import CatalogLocator, Locator, StaticLocator
from .processor import DeployProcessor
from .signer import NoopSigner, PlaceholderSigner, Signer

__all__ = [
    "ArchiveLocation",
    "CatalogLocator",
    "DeployProcessor",
    "DeploymentRequest",
    "DeploymentResult",
    "DeploymentStage",
    "FetchedArchive",
    "Locator",
    "NoopSigner",
    "PlaceholderSigner",
    "Signer",
    "StaticLocator",
    "extract_archive",
    "fetch_archive",
    "prepare_environment",
]
