"""
Firestore persistence for packages and function records.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from google.cloud import firestore
from google.cloud.firestore import CollectionReference, DocumentReference

from .config import get_settings
from ..models.function import CompleteFunction, FunctionRecord, NewFunction
from ..models.package import PackageRecord

logger = logging.getLogger(__name__)

PACKAGES: str = "packages"
FUNCTIONS: str = "functions"
COUNTERS: str = "counters"
FUNCTION_ID_COUNTER: str = "function_ids"


@firestore.transactional
def _reserve_ids_in_transaction(transaction, counter_ref: DocumentReference, count: int) -> int:
    """Atomically reserve ``count`` consecutive ids and return the first one."""
    snapshot = counter_ref.get(transaction=transaction)
    next_id = snapshot.get("next") if snapshot.exists else 0
    transaction.set(counter_ref, {"next": next_id + count})
    return next_id


class FunctionDatabase:
    """Firestore client for package and function documents."""

    def __init__(self, client: Optional[firestore.Client] = None):
        """
        Initialize the database layer.

        Args:
            client: Existing Firestore client; a new one is created from settings if omitted
        """
        self.settings = get_settings()
        self.client: Optional[firestore.Client] = client
        if self.client is None:
            self._initialize_client()

    def _initialize_client(self):
        """Initialize Firestore client with proper configuration."""
        try:
            if self.settings.service_account_key_path:
                self.client = firestore.Client.from_service_account_json(
                    self.settings.service_account_key_path,
                    project=self.settings.gcp_project_id,
                    database=self.settings.firestore_database_id or "(default)"
                )
            else:
                self.client = firestore.Client(
                    project=self.settings.gcp_project_id,
                    database=self.settings.firestore_database_id or "(default)"
                )

            logger.info(f"Firestore client initialized for project: {self.settings.gcp_project_id}")

        except Exception as e:
            logger.error(f"Failed to initialize Firestore client: {e}")
            raise

    def _get_collection(self, collection_name: str) -> CollectionReference:
        """Get a Firestore collection reference."""
        if not self.client:
            raise RuntimeError("Firestore client not initialized")

        prefix = self.settings.firestore_collection_prefix
        if prefix:
            collection_path = f"{prefix}_{collection_name}"
        else:
            collection_path = collection_name

        return self.client.collection(collection_path)

    def _get_document_ref(self, collection_name: str, doc_id: str) -> DocumentReference:
        """Get a Firestore document reference."""
        return self._get_collection(collection_name).document(doc_id)

    # Packages

    async def upsert_package(self, package: PackageRecord) -> bool:
        """Create or overwrite a package document."""
        try:
            doc_ref = self._get_document_ref(PACKAGES, package.packageId)
            doc_ref.set(package.model_dump())
            logger.info(f"Package stored: {package.packageId}")
            return True

        except Exception as e:
            logger.error(f"Failed to store package {package.packageId}: {e}")
            return False

    async def get_package(self, package_id: str) -> Optional[PackageRecord]:
        """Retrieve a package document."""
        try:
            doc_snapshot = self._get_document_ref(PACKAGES, package_id).get()
            if doc_snapshot.exists:
                return PackageRecord(**doc_snapshot.to_dict())
            return None

        except Exception as e:
            logger.error(f"Failed to retrieve package {package_id}: {e}")
            return None

    async def update_package(self, package_id: str, updates: Dict[str, Any]) -> bool:
        """Update fields of a package document."""
        try:
            updates["lastIndexed"] = datetime.utcnow().isoformat() + "Z"
            self._get_document_ref(PACKAGES, package_id).update(updates)
            logger.info(f"Package updated: {package_id}")
            return True

        except Exception as e:
            logger.error(f"Failed to update package {package_id}: {e}")
            return False

    # Functions

    def reserve_function_ids(self, count: int) -> int:
        """Reserve ``count`` consecutive function ids and return the first."""
        counter_ref = self._get_document_ref(COUNTERS, FUNCTION_ID_COUNTER)
        return _reserve_ids_in_transaction(self.client.transaction(), counter_ref, count)

    def _delete_documents(self, docs: Sequence[Any]) -> int:
        """Delete document snapshots in batches and return how many were removed."""
        batch_size = self.settings.firestore_batch_size
        for start in range(0, len(docs), batch_size):
            batch = self.client.batch()
            for doc in docs[start:start + batch_size]:
                batch.delete(doc.reference)
            batch.commit()
        return len(docs)

    async def replace_package_functions(
        self,
        package_id: str,
        functions: Sequence[NewFunction]
    ) -> List[FunctionRecord]:
        """
        Replace the functions stored for a package.

        New ids are reserved in one transaction and the new records written
        in batches before any stale record is deleted, so a failed write
        leaves the previous functions in place.

        Raises:
            Exception: any Firestore failure, after logging it
        """
        try:
            stale = list(self._get_collection(FUNCTIONS).where("packageId", "==", package_id).stream())

            records: List[FunctionRecord] = []
            if functions:
                first_id = self.reserve_function_ids(len(functions))
                records = [
                    FunctionRecord(id=first_id + offset, **function.model_dump())
                    for offset, function in enumerate(functions)
                ]

            batch_size = self.settings.firestore_batch_size
            for start in range(0, len(records), batch_size):
                batch = self.client.batch()
                for record in records[start:start + batch_size]:
                    batch.set(self._get_document_ref(FUNCTIONS, str(record.id)), record.model_dump())
                batch.commit()

            new_ids = {str(record.id) for record in records}
            removed = self._delete_documents([doc for doc in stale if doc.id not in new_ids])
            if removed:
                logger.info(f"Removed {removed} stale functions for {package_id}")

            logger.info(f"Stored {len(records)} functions for {package_id}")
            return records

        except Exception as e:
            logger.error(f"Failed to store functions for {package_id}: {e}")
            raise

    async def get_all_signatures(self) -> List[Tuple[str, int]]:
        """
        Load every ``(type signature, function id)`` pair, ordered by id.

        Raises:
            Exception: any Firestore failure, so a failed load never replaces a good index
        """
        try:
            query = self._get_collection(FUNCTIONS).select(["typeSignature", "id"]).order_by("id")
            pairs = []
            for doc in query.stream():
                data = doc.to_dict()
                pairs.append((data["typeSignature"], int(data["id"])))
            logger.info(f"Loaded {len(pairs)} function signatures")
            return pairs

        except Exception as e:
            logger.error(f"Failed to load function signatures: {e}")
            raise

    async def get_functions(self, ids: Sequence[int]) -> List[CompleteFunction]:
        """Fetch functions by id, joined with their package, in the order of ``ids``."""
        if not ids:
            return []

        refs = [self._get_document_ref(FUNCTIONS, str(func_id)) for func_id in ids]
        by_id: Dict[int, FunctionRecord] = {}
        for snapshot in self.client.get_all(refs):
            if snapshot.exists:
                record = FunctionRecord(**snapshot.to_dict())
                by_id[record.id] = record

        packages: Dict[str, Optional[PackageRecord]] = {}
        results = []
        for func_id in ids:
            record = by_id.get(func_id)
            if record is None:
                logger.warning(f"Function {func_id} is indexed but missing from the database")
                continue
            if record.packageId not in packages:
                packages[record.packageId] = await self.get_package(record.packageId)
            package = packages[record.packageId]
            results.append(CompleteFunction(
                packageId=record.packageId,
                packageName=package.name if package else record.packageId,
                packageUrl=package.url if package else "",
                funcId=record.id,
                funcName=record.name,
                funcTypeSig=record.typeSignature,
                moduleName=record.moduleName
            ))
        return results


# Global database instance
_db: Optional[FunctionDatabase] = None


def get_database() -> FunctionDatabase:
    """Get database instance."""
    global _db
    if _db is None:
        _db = FunctionDatabase()
    return _db
