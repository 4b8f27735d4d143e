"""
Base classes for language-specific parsers.
"""

import logging
from typing import List, Optional

from fnsearch.models.elm_module import ExposeList
from fnsearch.models.exports import Exports

logger = logging.getLogger(__name__)


class ElmParseError(ValueError):
    """Structural failure while parsing one source unit."""

    def __init__(self, message: str, position: int = 0):
        super().__init__(f"{message} (at offset {position})")
        self.message = message
        self.position = position


class ParseResult:
    """Result of parsing a file."""

    def __init__(self):
        self.module_name: str = ""
        self.export_spec = ExposeList()
        self.declarations: List = []
        self.exports: Exports = Exports()
        self.language: str = ""
        self.parse_errors: List[str] = []

    @property
    def ok(self) -> bool:
        return not self.parse_errors


class LanguageParser:
    """Base class for language-specific parsers."""

    EXTENSIONS: List[str] = []
    LANGUAGE_NAME: Optional[str] = None

    def __init__(self, language_name: Optional[str] = None):
        self.language_name = language_name or self.LANGUAGE_NAME

    def parse(self, content: str) -> ParseResult:
        """Parse file content and extract exports."""
        raise NotImplementedError("Subclasses must implement parse method")

    def detect_language(self, file_path: str) -> bool:
        """Check if this parser can handle the given file."""
        raise NotImplementedError("Subclasses must implement detect_language method")
