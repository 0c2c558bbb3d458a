"""Post-extraction signing step.

The deployment tool does not sign anything itself. It writes a placeholder
certificate by default; embedding applications can pass their own
:class:`Signer` to :class:`~quickapp_deploy.deploy.processor.DeployProcessor`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol

import structlog

from quickapp_deploy.core.exceptions import WriteError


logger = structlog.get_logger()


class Signer(Protocol):
    def sign(self, directory: Path) -> Optional[Path]:
        """Sign the deployed package in ``directory``.

        Returns the path of the written certificate, if any.
        """
        ...


class NoopSigner:
    """Skips signing."""

    def sign(self, directory: Path) -> Optional[Path]:
        logger.info("Skipping package signing", path=str(directory))
        return None


class PlaceholderSigner:
    """Writes a fixed certificate file into the deploy directory."""

    def __init__(self, filename: str = "cp.cert", content: str = "123123123"):
        if not filename or "/" in filename or filename in (".", ".."):
            raise ValueError(f"Invalid certificate file name: {filename!r}")
        self.filename = filename
        self.content = content

    def sign(self, directory: Path) -> Optional[Path]:
        cert_path = directory / self.filename
        try:
            cert_path.write_text(self.content, encoding="utf-8")
        except OSError as e:
            raise WriteError(f"Failed to write certificate {cert_path}: {e}")
        logger.info("Wrote placeholder certificate", path=str(cert_path))
        return cert_path
