"""
Core business logic for the function signature search service.
"""

from .parser import CodeParser, ElmParser, ElmParseError, ParseResult
from .resolver import resolve
from .signature_index import SignatureIndex
from .cache import SignatureCache, get_cache

__all__ = [
    "CodeParser",
    "ElmParser",
    "ElmParseError",
    "ParseResult",
    "resolve",
    "SignatureIndex",
    "SignatureCache",
    "get_cache",
]
