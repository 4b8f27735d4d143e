"""
Prefix tree over normalized type signatures.

Each stored signature maps to the function ids that share it, in load order.
An index is built once from a complete list of ``(signature, id)`` pairs and
never mutated afterwards; a refresh builds a new one.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from fnsearch.models.function import FunctionRecord

logger = logging.getLogger(__name__)


class _Node:
    __slots__ = ("children", "ids")

    def __init__(self):
        self.children = {}
        self.ids: Optional[List[int]] = None


class SignatureIndex:
    """
    Exact-match and prefix lookup of function ids by type signature.

    Signatures are opaque strings: ``"Int -> Int"`` and ``"Int->Int"`` are
    different keys. Empty strings and duplicate ids are accepted as given.
    """

    def __init__(self):
        self._root = _Node()
        self._id_count = 0
        self._signature_count = 0

    @classmethod
    def build(cls, pairs: Iterable[Tuple[str, int]]) -> "SignatureIndex":
        """Build an index from ``(signature, function id)`` pairs."""
        index = cls()
        for signature, func_id in pairs:
            index._insert(signature, func_id)
        logger.info(f"Built signature index with {index._signature_count} signatures and {index._id_count} functions")
        return index

    @classmethod
    def from_records(cls, records: Iterable[FunctionRecord]) -> "SignatureIndex":
        return cls.build((record.typeSignature, record.id) for record in records)

    def _insert(self, signature: str, func_id: int) -> None:
        # Assumes each function is inserted once per build.
        node = self._root
        for char in signature:
            child = node.children.get(char)
            if child is None:
                child = _Node()
                node.children[char] = child
            node = child
        if node.ids is None:
            node.ids = []
            self._signature_count += 1
        node.ids.append(func_id)
        self._id_count += 1

    def _find(self, key: str) -> Optional[_Node]:
        node = self._root
        for char in key:
            node = node.children.get(char)
            if node is None:
                return None
        return node

    def search(self, signature: str, limit: int, offset: Optional[int] = None) -> Optional[List[int]]:
        """
        Return at most ``limit`` ids stored under ``signature``, starting at ``offset``.

        Args:
            signature: Exact signature key
            limit: Maximum number of ids to return
            offset: Index of the first id to return (defaults to 0)

        Returns:
            The ids in insertion order, or None if the signature is unknown or
            ``offset`` is past the last id
        """
        if limit < 0:
            raise ValueError("limit cannot be negative")
        start = 0 if offset is None else offset
        if start < 0:
            raise ValueError("offset cannot be negative")

        node = self._find(signature)
        if node is None or node.ids is None:
            return None
        if start >= len(node.ids):
            return None
        return node.ids[start:start + limit]

    def suggest(self, prefix: str, limit: int) -> Optional[List[str]]:
        """
        Return up to ``limit`` distinct stored signatures beginning with ``prefix``.

        A signature equal to ``prefix`` is a valid suggestion. Traversal is
        pre-order in insertion order, so results are stable for one index.
        Returns None when nothing matches.
        """
        if limit < 0:
            raise ValueError("limit cannot be negative")
        node = self._find(prefix)
        if node is None:
            return None

        suggestions = []
        for signature in self._walk(node, prefix):
            if len(suggestions) >= limit:
                break
            suggestions.append(signature)
        return suggestions or None

    @staticmethod
    def _walk(node: _Node, prefix: str) -> Iterator[str]:
        stack = [(node, prefix)]
        while stack:
            current, key = stack.pop()
            if current.ids is not None:
                yield key
            # reversed so children pop in insertion order
            for char, child in reversed(list(current.children.items())):
                stack.append((child, key + char))

    def signatures(self) -> Iterator[str]:
        return self._walk(self._root, "")

    def __contains__(self, signature: str) -> bool:
        node = self._find(signature)
        return node is not None and node.ids is not None

    def __len__(self) -> int:
        return self._id_count

    @property
    def signature_count(self) -> int:
        return self._signature_count
