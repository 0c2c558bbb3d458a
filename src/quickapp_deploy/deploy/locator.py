"""Resolve a package name to the URL of its archive."""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

import httpx
import structlog

from quickapp_deploy.core.config import DEFAULT_CATALOG_URL, DEFAULT_PAYLOAD_TEMPLATE
from quickapp_deploy.core.exceptions import CatalogLookupError
from quickapp_deploy.deploy.models import ArchiveLocation


logger = structlog.get_logger()


class Locator(Protocol):
    """Anything that can turn a package name into an archive location."""

    def locate(self, package_name: str) -> ArchiveLocation:
        ...


class StaticLocator:
    """Always returns the same, preconfigured URL."""

    def __init__(self, url: str):
        self.url = url

    def locate(self, package_name: str) -> ArchiveLocation:
        logger.info("Using fixed download URL", url=self.url)
        return ArchiveLocation(url=self.url, package_name=package_name)


class CatalogLocator:
    """Looks up the archive URL through the remote catalog service.

    The request body is ``payload_template`` with the package name appended
    verbatim. The response is a JSON object carrying the URL at
    ``rpkInfo.url``.
    """

    def __init__(
        self,
        catalog_url: str = DEFAULT_CATALOG_URL,
        payload_template: str = DEFAULT_PAYLOAD_TEMPLATE,
        *,
        timeout_sec: float = 30.0,
        strict: bool = False,
    ):
        self.catalog_url = catalog_url
        self.payload_template = payload_template
        self.timeout_sec = timeout_sec
        self.strict = strict

    def build_payload(self, package_name: str) -> str:
        return f"{self.payload_template}{package_name}"

    def locate(self, package_name: str) -> ArchiveLocation:
        """Query the catalog for ``package_name``.

        Raises:
            CatalogLookupError: On transport errors, error statuses, a body that is
                not a JSON object, or (in strict mode) a missing URL
        """
        payload = self.build_payload(package_name)
        logger.info("Querying catalog", url=self.catalog_url, payload=payload)

        try:
            with httpx.Client(timeout=httpx.Timeout(self.timeout_sec)) as client:
                resp = client.post(
                    self.catalog_url,
                    content=payload.encode("utf-8"),
                    headers={
                        "Content-Type": "text/plain",
                        "Accept-Encoding": "gzip",
                    },
                )
                resp.raise_for_status()
                body = resp.json()
        except httpx.HTTPStatusError as e:
            raise CatalogLookupError(f"Catalog returned HTTP {e.response.status_code}")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise CatalogLookupError(f"Catalog request failed: {e}")
        except ValueError as e:
            raise CatalogLookupError(f"Catalog response is not valid JSON: {e}")

        if not isinstance(body, dict):
            raise CatalogLookupError(
                f"Catalog response is not a JSON object (got {type(body).__name__})"
            )

        logger.info("Catalog response", body=body)
        url = self._extract_url(body)
        if url is None:
            if self.strict:
                raise CatalogLookupError(f"Catalog response has no rpkInfo.url for {package_name}")
            logger.warning("Catalog response has no rpkInfo.url, using empty URL", package=package_name)
            url = ""
        else:
            logger.info("Resolved download URL", url=url)

        return ArchiveLocation(url=url, package_name=package_name)

    @staticmethod
    def _extract_url(body: Dict[str, Any]) -> Optional[str]:
        rpk_info = body.get("rpkInfo")
        if not isinstance(rpk_info, dict) or "url" not in rpk_info:
            return None
        url = rpk_info["url"]
        if not isinstance(url, str):
            raise CatalogLookupError(f"rpkInfo.url is not a string: {url!r}")
        return url
