"""
Source export parsing.
"""

from .base import ElmParseError, LanguageParser, ParseResult
from .elm import ElmParser, ParsedModule, split_type_signature
from .main import CodeParser

__all__ = [
    'ElmParseError',
    'LanguageParser',
    'ParseResult',
    'ElmParser',
    'ParsedModule',
    'split_type_signature',
    'CodeParser',
]
