"""
Main code parser that delegates to language-specific parsers.
"""

import logging
from pathlib import Path
from typing import Dict, Union

from .base import ElmParseError, LanguageParser, ParseResult
from .elm import ElmParser

logger = logging.getLogger(__name__)


class CodeParser:
    """
    Main code parser that delegates to language-specific parsers.

    Failures are reported through ``ParseResult.parse_errors`` so that one
    bad file never interrupts a batch.
    """

    def __init__(self):
        """Initialize the code parser with supported languages."""
        self.parsers: Dict[str, LanguageParser] = {
            ElmParser.LANGUAGE_NAME: ElmParser(),
        }

    def detect_language(self, file_path: str) -> str:
        """
        Detect programming language based on file extension.

        Args:
            file_path: Path to the file

        Returns:
            Language identifier
        """
        ext = Path(file_path).suffix.lower()

        if ext in ElmParser.EXTENSIONS:
            return ElmParser.LANGUAGE_NAME
        return 'unknown'

    async def parse_file(self, file_path: str, content: Union[str, bytes]) -> ParseResult:
        """
        Parse a file and extract its exports.

        Args:
            file_path: Path to the file
            content: File content, bytes are decoded as UTF-8

        Returns:
            ParseResult with extracted information
        """
        language = self.detect_language(file_path)

        parser = self.parsers.get(language)
        if not parser:
            result = ParseResult()
            result.language = language
            result.parse_errors.append(f"Unsupported language for file: {file_path}")
            return result

        if isinstance(content, bytes):
            try:
                content = content.decode('utf-8')
            except UnicodeDecodeError as e:
                result = ParseResult()
                result.language = language
                result.parse_errors.append(f"File is not valid UTF-8: {file_path} ({e})")
                return result

        try:
            logger.debug(f"Parsing {file_path} with {language} parser")
            return parser.parse(content)
        except ElmParseError as e:
            logger.warning(f"Failed to parse {file_path}: {e}")
            result = ParseResult()
            result.language = language
            result.parse_errors.append(f"Error parsing {language} file: {e}")
            return result
