"""Sequential deployment pipeline: prepare, locate, download, extract, sign."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError

from quickapp_deploy.core.config import Settings
from quickapp_deploy.core.exceptions import UsageError
from quickapp_deploy.deploy.environment import prepare_environment
from quickapp_deploy.deploy.extract import extract_archive
from quickapp_deploy.deploy.fetch import fetch_archive
from quickapp_deploy.deploy.locator import CatalogLocator, Locator, StaticLocator
from quickapp_deploy.deploy.models import DeploymentRequest, DeploymentResult, DeploymentStage
from quickapp_deploy.deploy.signer import NoopSigner, PlaceholderSigner, Signer


logger = structlog.get_logger()


def default_locator(settings: Settings) -> Locator:
    """Fixed URL when one is configured, catalog lookup otherwise."""
    if settings.download_url:
        return StaticLocator(settings.download_url)
    return CatalogLocator(
        settings.catalog_url,
        settings.payload_template,
        timeout_sec=settings.request_timeout_seconds,
        strict=settings.strict_lookup,
    )


def default_signer(settings: Settings) -> Signer:
    if settings.sign_package:
        return PlaceholderSigner(settings.cert_filename, settings.cert_content)
    return NoopSigner()


class DeployProcessor:
    """Runs one deployment.

    Each stage consumes the output of the previous one. Any
    ``QuickAppDeployError`` raised by a stage stops the pipeline and is
    propagated to the caller unchanged.
    """

    def __init__(
        self,
        request: DeploymentRequest,
        settings: Optional[Settings] = None,
        locator: Optional[Locator] = None,
        signer: Optional[Signer] = None,
    ):
        self.request = request
        if settings is None:
            try:
                settings = Settings()
            except ValidationError as e:
                messages = "; ".join(err["msg"] for err in e.errors())
                raise UsageError(f"Invalid configuration: {messages}")
        self.settings = settings
        self.locator = locator or default_locator(self.settings)
        self.signer = signer or default_signer(self.settings)
        self.stage = DeploymentStage.PREPARING

    def _enter(self, stage: DeploymentStage) -> None:
        self.stage = stage
        logger.debug("Deployment stage", stage=stage.value)

    def process(self) -> DeploymentResult:
        settings = self.settings
        request = self.request
        deploy_dir = request.deploy_path
        scratch_dir = Path(settings.scratch_dir)

        self._enter(DeploymentStage.PREPARING)
        prepare_environment(scratch_dir, deploy_dir, request.overwrite_existing)

        self._enter(DeploymentStage.LOCATING)
        location = self.locator.locate(request.package_name)

        self._enter(DeploymentStage.DOWNLOADING)
        archive = fetch_archive(
            location,
            scratch_dir,
            archive_extension=settings.archive_extension,
            timeout_sec=settings.request_timeout_seconds,
            max_size_bytes=settings.max_archive_size_bytes,
        )

        self._enter(DeploymentStage.EXTRACTING)
        entries = extract_archive(
            archive.path,
            deploy_dir,
            max_entries=settings.max_archive_entries,
            max_total_bytes=settings.max_extracted_size_bytes,
        )

        self._enter(DeploymentStage.SIGNING)
        cert_path = self.signer.sign(deploy_dir)

        self._enter(DeploymentStage.DEPLOYED)
        logger.info("Deployment finished", deploy_dir=request.deploy_directory, entries=entries)
        return DeploymentResult(
            package_name=request.package_name,
            deploy_directory=request.deploy_directory,
            download_url=location.url,
            archive_path=archive.path,
            extracted_entries=entries,
            certificate_path=cert_path,
        )
