"""
Tests for the scrape job.
"""

from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from fnsearch.core.catalog import CatalogError
from fnsearch.core.repo_cache import RepoSyncError
from fnsearch.jobs.scrape import ScrapeJob, build_arg_parser, main, trigger_refresh
from fnsearch.models.function import FunctionRecord
from fnsearch.models.package import PackageMetadata


MODULE = """module Pkg exposing (length)

length : List a -> Int
length xs =
    0
"""


@pytest.fixture
def db():
    db = Mock()
    db.upsert_package = AsyncMock(return_value=True)
    db.update_package = AsyncMock(return_value=True)

    async def replace_package_functions(package_id, functions):
        return [FunctionRecord(id=i, **f.model_dump()) for i, f in enumerate(functions)]

    db.replace_package_functions = AsyncMock(side_effect=replace_package_functions)
    return db


@pytest.fixture
def cache_dir(tmp_path):
    source = tmp_path / "author" / "pkg" / "src" / "Pkg.elm"
    source.parent.mkdir(parents=True)
    source.write_text(MODULE, encoding="utf-8")
    return tmp_path


PACKAGES = [PackageMetadata(name="author/pkg"), PackageMetadata(name="author/missing")]


class TestScrapeJob:
    """Test the scrape job."""

    def test_sync_packages_skip_sync_uses_existing_checkouts(self, cache_dir, db):
        job = ScrapeJob(str(cache_dir), db=db, skip_sync=True)
        synced = job.sync_packages(PACKAGES)

        assert [package.name for package, _ in synced] == ["author/pkg"]

    def test_sync_packages_drops_failures(self, cache_dir, db):
        def fake_sync(package, cache_dir):
            if package.name == "author/missing":
                raise RepoSyncError("clone failed")
            return cache_dir / package.author / package.project

        job = ScrapeJob(str(cache_dir), db=db, workers=2)
        with patch("fnsearch.jobs.scrape.sync_repo", side_effect=fake_sync):
            synced = job.sync_packages(PACKAGES)

        assert [package.name for package, _ in synced] == ["author/pkg"]

    @pytest.mark.asyncio
    async def test_run(self, cache_dir, db):
        job = ScrapeJob(str(cache_dir), db=db, skip_sync=True)

        with patch("fnsearch.jobs.scrape.fetch_package_catalog", AsyncMock(return_value=PACKAGES)):
            summary = await job.run()

        assert summary == {"packages": 2, "synced": 1, "indexed": 1, "failed": 0, "functions": 1}
        functions = db.replace_package_functions.call_args.args[1]
        assert functions[0].typeSignature == "List a -> Int"

    @pytest.mark.asyncio
    async def test_run_with_limit(self, cache_dir, db):
        job = ScrapeJob(str(cache_dir), db=db, skip_sync=True)

        with patch("fnsearch.jobs.scrape.fetch_package_catalog", AsyncMock(return_value=PACKAGES)):
            summary = await job.run(limit=1)

        assert summary["packages"] == 1

    @pytest.mark.asyncio
    async def test_index_failure_is_counted(self, cache_dir, db):
        db.replace_package_functions = AsyncMock(side_effect=RuntimeError("unavailable"))
        job = ScrapeJob(str(cache_dir), db=db, skip_sync=True)

        with patch("fnsearch.jobs.scrape.fetch_package_catalog", AsyncMock(return_value=PACKAGES)):
            summary = await job.run()

        assert summary["indexed"] == 0
        assert summary["failed"] == 1


class TestTriggerRefresh:
    """Test the refresh call to a running server."""

    @pytest.mark.asyncio
    async def test_trigger_refresh(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"success": True})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            assert await trigger_refresh("http://search.local/update_functions", client=client)

        assert requests[0].method == "POST"

    @pytest.mark.asyncio
    async def test_trigger_refresh_failure(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        async with httpx.AsyncClient(transport=transport) as client:
            assert not await trigger_refresh("http://search.local/update_functions", client=client)


class TestCommandLine:
    """Test argument parsing and the entry point."""

    def test_arguments(self):
        args = build_arg_parser().parse_args(["-d", "cache", "--workers", "8", "--skip-sync", "-vv"])

        assert args.cache_dir == "cache"
        assert args.workers == 8
        assert args.skip_sync is True
        assert args.verbose == 2
        assert args.refresh_url is None

    def test_cache_dir_is_required(self):
        with pytest.raises(SystemExit):
            build_arg_parser().parse_args([])

    @pytest.mark.asyncio
    async def test_main_catalog_failure(self, cache_dir, db):
        with patch("fnsearch.jobs.scrape.FunctionDatabase", return_value=db), \
                patch("fnsearch.jobs.scrape.fetch_package_catalog", AsyncMock(side_effect=CatalogError("offline"))):
            assert await main(["-d", str(cache_dir), "--skip-sync"]) == 1

    @pytest.mark.asyncio
    async def test_main_success(self, cache_dir, db):
        with patch("fnsearch.jobs.scrape.FunctionDatabase", return_value=db), \
                patch("fnsearch.jobs.scrape.fetch_package_catalog", AsyncMock(return_value=PACKAGES)):
            assert await main(["-d", str(cache_dir), "--skip-sync"]) == 0
