#!/usr/bin/env python3
"""
Scrape job: fetch the package catalog, sync package repositories and index
their exported functions.

Run with ``python -m fnsearch.jobs.scrape --cache-dir ./repo_cache``.
"""

import argparse
import asyncio
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import httpx

from fnsearch.core.catalog import CatalogError, fetch_package_catalog
from fnsearch.core.config import get_settings
from fnsearch.core.database import FunctionDatabase
from fnsearch.core.indexer import PackageIndexer
from fnsearch.core.repo_cache import RepoSyncError, get_repo_path, sync_repo
from fnsearch.models.package import PackageMetadata

logger = logging.getLogger(__name__)


class ScrapeJob:
    """Fetches, syncs and indexes packages."""

    def __init__(
        self,
        cache_dir: str,
        db: Optional[FunctionDatabase] = None,
        workers: Optional[int] = None,
        skip_sync: bool = False
    ):
        """
        Initialize the scrape job.

        Args:
            cache_dir: Directory holding package checkouts
            db: Persistence layer, created from settings if omitted
            workers: Number of concurrent git operations
            skip_sync: Index existing checkouts without touching git
        """
        self.settings = get_settings()
        self.cache_dir = Path(cache_dir)
        self.db = db or FunctionDatabase()
        self.indexer = PackageIndexer(self.db)
        self.workers = workers or self.settings.scrape_workers
        self.skip_sync = skip_sync

    def sync_packages(self, packages: List[PackageMetadata]) -> List[Tuple[PackageMetadata, Path]]:
        """Clone or update every package in a thread pool; failures are logged and dropped."""
        if self.skip_sync:
            synced = []
            for package in packages:
                path = get_repo_path(package, self.cache_dir)
                if path.is_dir():
                    synced.append((package, path))
            return synced

        def _sync(package: PackageMetadata):
            try:
                return package, sync_repo(package, self.cache_dir)
            except RepoSyncError as e:
                logger.warning(f"Skipping {package.name}: {e}")
                return package, None

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            results = list(pool.map(_sync, packages))

        synced = [(package, path) for package, path in results if path is not None]
        logger.info(f"Synced {len(synced)} of {len(packages)} packages")
        return synced

    async def run(self, limit: Optional[int] = None) -> Dict[str, int]:
        """
        Run the whole job.

        Returns:
            Counters of synced, indexed and failed packages and stored functions
        """
        packages = await fetch_package_catalog(self.settings.package_catalog_url)
        if limit is not None:
            packages = packages[:limit]

        synced = await asyncio.to_thread(self.sync_packages, packages)

        indexed = 0
        failed = 0
        functions = 0
        for package, path in synced:
            try:
                result = await self.indexer.index_package(package, path)
                indexed += 1
                functions += result["functions"]
            except Exception as e:
                logger.error(f"Failed to index {package.name}: {e}")
                failed += 1

        summary = {
            "packages": len(packages),
            "synced": len(synced),
            "indexed": indexed,
            "failed": failed,
            "functions": functions
        }
        logger.info(f"Scrape finished: {summary}")
        return summary


async def trigger_refresh(url: str, client: Optional[httpx.AsyncClient] = None) -> bool:
    """Ask a running server to rebuild its signature index."""
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=300.0)
    try:
        response = await client.post(url)
        response.raise_for_status()
        logger.info(f"Refresh triggered: {response.text}")
        return True
    except httpx.HTTPError as e:
        logger.error(f"Failed to trigger refresh at {url}: {e}")
        return False
    finally:
        if owns_client:
            await client.aclose()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrape and index published Elm packages")
    parser.add_argument("-d", "--cache-dir", required=True, help="Directory for repositories to be cached in")
    parser.add_argument("--workers", type=int, help="Concurrent git operations")
    parser.add_argument("--limit", type=int, help="Only process the first N catalog entries")
    parser.add_argument("--skip-sync", action="store_true", help="Index cached checkouts without running git")
    parser.add_argument("--refresh-url", help="POST here when done, e.g. http://localhost:8080/update_functions")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Sets verbosity level. -v : info, -vv : debug"
    )
    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the scrape job."""
    args = build_arg_parser().parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    logger.info(f"Starting scrape job with cache directory {args.cache_dir}")

    try:
        job = ScrapeJob(args.cache_dir, workers=args.workers, skip_sync=args.skip_sync)
        summary = await job.run(limit=args.limit)
    except CatalogError as e:
        logger.error(f"Scrape job aborted: {e}")
        return 1

    if args.refresh_url and not await trigger_refresh(args.refresh_url):
        return 1
    return 0 if summary["failed"] == 0 else 1


def cli():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
