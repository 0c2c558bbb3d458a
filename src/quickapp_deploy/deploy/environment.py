"""Prepare scratch and deploy directories before a deployment."""

from __future__ import annotations

import shutil
from pathlib import Path

import structlog

from quickapp_deploy.core.exceptions import DeployEnvironmentError


logger = structlog.get_logger()


def ensure_scratch_dir(scratch_dir: Path) -> None:
    try:
        scratch_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DeployEnvironmentError(f"Failed to create scratch directory {scratch_dir}: {e}")


def prepare_deploy_dir(deploy_dir: Path, overwrite_existing: bool) -> None:
    """Apply the overwrite policy to ``deploy_dir``.

    - absent: created
    - present, overwrite: removed recursively, then recreated empty
    - present, no overwrite: left untouched; extraction writes over it

    Raises:
        DeployEnvironmentError: If the old directory cannot be removed or the
            directory cannot be created
    """
    if deploy_dir.exists():
        if not overwrite_existing:
            logger.info("Keeping existing deploy directory", path=str(deploy_dir))
            return
        try:
            if deploy_dir.is_dir() and not deploy_dir.is_symlink():
                shutil.rmtree(deploy_dir)
            else:
                deploy_dir.unlink()
        except OSError as e:
            raise DeployEnvironmentError(f"Failed to delete old version at {deploy_dir}: {e}")
        logger.info("Removed old deployment", path=str(deploy_dir))

    try:
        deploy_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DeployEnvironmentError(f"Failed to create deploy directory {deploy_dir}: {e}")


def prepare_environment(scratch_dir: Path, deploy_dir: Path, overwrite_existing: bool = True) -> None:
    """Ensure both working directories exist before the pipeline runs."""
    ensure_scratch_dir(scratch_dir)
    prepare_deploy_dir(deploy_dir, overwrite_existing)
