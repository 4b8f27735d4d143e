"""
Package indexer: parses every exposed module of a cached package and stores
its exported, annotated functions.
"""

import json
import logging
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional, Set, Union

from .catalog import find_git_url
from .config import get_settings
from .database import FunctionDatabase
from .parser import CodeParser, ParseResult
from ..models.function import NewFunction
from ..models.package import PackageMetadata, PackageRecord

logger = logging.getLogger(__name__)


class PackageIndexer:
    """
    Indexes one package checkout at a time.

    A file that fails to parse is counted and logged; the remaining files of
    the package are still indexed.
    """

    def __init__(self, db: FunctionDatabase, parser: Optional[CodeParser] = None):
        """
        Initialize package indexer.

        Args:
            db: Persistence layer for packages and functions
            parser: Code parser, a default one is created if omitted
        """
        self.db = db
        self.parser = parser or CodeParser()
        self.settings = get_settings()

    def get_source_files(self, repo_path: Union[str, Path]) -> List[str]:
        """
        List source files of a checkout, relative to its root and sorted.

        Only files under the configured source folders are considered.
        """
        root = Path(repo_path)
        extensions = {ext.lower() for ext in self.settings.source_extensions}
        files = []
        for folder in self.settings.source_folders:
            base = root / folder
            if not base.is_dir():
                continue
            for file_path in base.rglob('*'):
                if file_path.is_file() and file_path.suffix.lower() in extensions:
                    files.append(file_path.relative_to(root).as_posix())
        files.sort()
        return files

    def get_exposed_modules(self, repo_path: Union[str, Path]) -> Optional[Set[str]]:
        """
        Read ``exposed-modules`` from the package's elm.json.

        The field is either a list or a mapping of category to list. Returns
        None when there is no readable elm.json, meaning every module counts.
        """
        manifest = Path(repo_path) / "elm.json"
        if not manifest.is_file():
            return None
        try:
            data = json.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable elm.json in {repo_path}: {e}")
            return None

        exposed = data.get("exposed-modules") if isinstance(data, dict) else None
        if isinstance(exposed, dict):
            return {name for group in exposed.values() if isinstance(group, list) for name in group}
        if isinstance(exposed, list):
            return set(exposed)
        return None

    def module_name_for(self, file_path: str) -> str:
        """
        ``src/Json/Decode.elm`` -> ``Json.Decode``

        The longest configured source folder that contains the file is
        stripped; a file outside every source folder keeps its full path.
        """
        parts = PurePosixPath(file_path).with_suffix("").parts
        folders = sorted(
            (PurePosixPath(folder).parts for folder in self.settings.source_folders),
            key=len,
            reverse=True
        )
        for prefix in folders:
            if len(parts) > len(prefix) and parts[:len(prefix)] == prefix:
                return ".".join(parts[len(prefix):])
        return ".".join(parts)

    def collect_functions(self, package_id: str, result: ParseResult) -> List[NewFunction]:
        """Turn the exported, annotated functions of a parse result into records to store."""
        functions = []
        for entry in result.exports.functions():
            if entry.typeSignature is None:
                continue
            functions.append(NewFunction(
                packageId=package_id,
                name=entry.name,
                typeSignature=entry.normalized_signature,
                moduleName=result.module_name or None
            ))
        return functions

    async def index_file(self, file_path: str, content: Union[str, bytes]) -> ParseResult:
        """Parse a single file."""
        return await self.parser.parse_file(file_path, content)

    async def index_package(
        self,
        package: PackageMetadata,
        repo_path: Union[str, Path]
    ) -> Dict[str, Any]:
        """
        Index a package checkout and replace its stored functions.

        Args:
            package: Catalog entry of the package
            repo_path: Path of the package working tree

        Returns:
            Dictionary with indexing results
        """
        package_id = package.package_id
        logger.info(f"Indexing package {package.name} from {repo_path}")

        await self.db.upsert_package(PackageRecord(
            packageId=package_id,
            name=package.name,
            url=find_git_url(package),
            status="processing",
            lastIndexed=datetime.utcnow()
        ))

        files = self.get_source_files(repo_path)
        exposed = self.get_exposed_modules(repo_path)

        processed = 0
        failed = 0
        skipped = 0
        errors: List[str] = []
        functions: List[NewFunction] = []

        for file_path in files:
            if exposed is not None and self.module_name_for(file_path) not in exposed:
                skipped += 1
                continue

            try:
                content = (Path(repo_path) / file_path).read_bytes()
            except OSError as e:
                logger.warning(f"Could not read {file_path}: {e}")
                failed += 1
                errors.append(f"{file_path}: {e}")
                continue

            result = await self.index_file(file_path, content)
            if result.parse_errors:
                failed += 1
                errors.extend(f"{file_path}: {error}" for error in result.parse_errors)
                continue

            processed += 1
            functions.extend(self.collect_functions(package_id, result))

        try:
            stored = await self.db.replace_package_functions(package_id, functions)
        except Exception as e:
            logger.error(f"Indexing {package.name} failed while storing functions: {e}")
            await self.db.update_package(package_id, {"status": "failed"})
            raise

        await self.db.update_package(package_id, {
            "status": "completed",
            "totalFiles": len(files) - skipped,
            "processedFiles": processed,
            "functionCount": len(stored)
        })

        logger.info(
            f"Indexed {package.name}: {processed} files, {failed} failed, "
            f"{skipped} skipped, {len(stored)} functions"
        )
        return {
            "package": package.name,
            "total_files": len(files),
            "processed": processed,
            "failed": failed,
            "skipped": skipped,
            "functions": len(stored),
            "errors": errors
        }
