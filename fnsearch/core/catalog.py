"""
Published package catalog.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from .config import get_settings
from ..models.package import PackageMetadata

logger = logging.getLogger(__name__)


class CatalogError(RuntimeError):
    """The package catalog could not be fetched or decoded."""


async def fetch_package_catalog(
    url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None
) -> List[PackageMetadata]:
    """
    Download the package catalog.

    Entries that do not validate are skipped with a warning.

    Args:
        url: Catalog URL, defaults to ``settings.package_catalog_url``
        client: HTTP client to use, a short-lived one is created if omitted

    Raises:
        CatalogError: on transport errors, non-2xx responses or a non-list body
    """
    url = url or get_settings().package_catalog_url
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=30.0, follow_redirects=True)

    try:
        response = await client.get(url)
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Failed to fetch package catalog from {url}: {e}")
        raise CatalogError(f"Failed to fetch package catalog: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    if not isinstance(payload, list):
        raise CatalogError("Package catalog is not a list")

    packages = []
    for entry in payload:
        try:
            packages.append(PackageMetadata.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping malformed catalog entry {entry!r}: {e}")
            continue

    logger.info(f"Fetched {len(packages)} packages from catalog")
    return packages


def find_git_url(package: PackageMetadata, git_host_url: Optional[str] = None) -> str:
    """Repository URL of a package; every published package lives on the git host under its name."""
    host = (git_host_url or get_settings().git_host_url).rstrip("/")
    return f"{host}/{package.name}"
