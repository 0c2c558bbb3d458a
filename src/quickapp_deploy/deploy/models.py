"""Models for a single quick app deployment."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from quickapp_deploy.core.config import Settings
from quickapp_deploy.core.exceptions import UsageError


class DeploymentStage(str, Enum):
    PREPARING = "preparing"
    LOCATING = "locating"
    DOWNLOADING = "downloading"
    EXTRACTING = "extracting"
    SIGNING = "signing"
    DEPLOYED = "deployed"


class DeploymentRequest(BaseModel):
    """Fully resolved deployment target."""

    package_name: str = Field(..., description="Logical package identifier")
    workspace_root: str = Field(..., description="Directory holding deployed packages")
    overwrite_existing: bool = Field(True, description="Recreate an existing deploy directory")

    @field_validator("package_name")
    @classmethod
    def validate_package_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("package name cannot be empty")
        # The deploy directory must be a direct child of the workspace
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"package name must be a single path component: {v!r}")
        return v

    @field_validator("workspace_root")
    @classmethod
    def validate_workspace_root(cls, v: str) -> str:
        if not v:
            raise ValueError("workspace cannot be empty")
        return v

    @property
    def deploy_directory(self) -> str:
        return f"{self.workspace_root}/{self.package_name}"

    @property
    def deploy_path(self) -> Path:
        return Path(self.deploy_directory)

    @classmethod
    def resolve(
        cls,
        package_name: str,
        workspace: Optional[str] = None,
        replace_if_exists: Optional[bool] = None,
        settings: Optional[Settings] = None,
    ) -> "DeploymentRequest":
        """Apply defaults to raw invocation parameters.

        Raises:
            UsageError: If the package name, the workspace or the environment
                configuration is not usable
        """
        try:
            if settings is None:
                settings = Settings()
            return cls(
                package_name=package_name,
                workspace_root=workspace if workspace is not None else settings.default_workspace,
                overwrite_existing=True if replace_if_exists is None else replace_if_exists,
            )
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise UsageError(f"Invalid deployment parameters: {messages}")


class ArchiveLocation(BaseModel):
    """Resolved archive URL for one package."""

    url: str
    package_name: str


class FetchedArchive(BaseModel):
    """Archive downloaded to the scratch directory."""

    path: Path
    package_name: str
    size_bytes: int = 0


class DeploymentResult(BaseModel):
    package_name: str
    deploy_directory: str
    download_url: str
    archive_path: Path
    extracted_entries: int = 0
    certificate_path: Optional[Path] = None
