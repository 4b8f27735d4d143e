"""
Hot-swappable holder for the active signature index.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from .locks import ReadWriteLock
from .signature_index import SignatureIndex

logger = logging.getLogger(__name__)


class SignatureCache:
    """
    Holds one immutable SignatureIndex snapshot behind a reader-writer lock.

    The lock only guards copying or overwriting the reference. Searches run
    on the snapshot returned by ``current()`` without any lock held, and a
    snapshot stays consistent for as long as the caller keeps it, even if a
    newer one has been installed in the meantime.
    """

    def __init__(self, index: Optional[SignatureIndex] = None):
        self._lock = ReadWriteLock()
        self._index = index if index is not None else SignatureIndex()
        self._generation = 0
        self._replaced_at: Optional[str] = None

    def current(self) -> SignatureIndex:
        """Return the active snapshot."""
        with self._lock.read_lock():
            return self._index

    def replace(self, new_index: SignatureIndex) -> Tuple[int, str]:
        """
        Install a fully built index. Last writer wins.

        Returns:
            The generation and timestamp assigned to this install
        """
        if not isinstance(new_index, SignatureIndex):
            raise TypeError("replace() expects a SignatureIndex")
        with self._lock.write_lock():
            self._index = new_index
            self._generation += 1
            self._replaced_at = datetime.utcnow().isoformat() + "Z"
            generation = self._generation
            replaced_at = self._replaced_at
        logger.info(
            f"Installed signature index generation {generation} "
            f"({new_index.signature_count} signatures, {len(new_index)} functions)"
        )
        return generation, replaced_at

    def rebuild(self, pairs: Iterable[Tuple[str, int]]) -> SignatureIndex:
        """Build a new index outside the lock, then swap it in."""
        new_index = SignatureIndex.build(pairs)
        self.replace(new_index)
        return new_index

    def search(self, signature: str, limit: int, offset: Optional[int] = None) -> Optional[List[int]]:
        return self.current().search(signature, limit, offset)

    def suggest(self, prefix: str, limit: int) -> Optional[List[str]]:
        return self.current().suggest(prefix, limit)

    @property
    def generation(self) -> int:
        with self._lock.read_lock():
            return self._generation

    @property
    def replaced_at(self) -> Optional[str]:
        with self._lock.read_lock():
            return self._replaced_at


# Global cache instance
_cache: Optional[SignatureCache] = None


def get_cache() -> SignatureCache:
    """Get the process-wide signature cache."""
    global _cache
    if _cache is None:
        _cache = SignatureCache()
    return _cache
