"""
Elm export parser.

Extracts the ``exposing`` clause of a module header and the top-level
declarations that matter for search: comments, function type annotations and
type declarations. Everything else is consumed one character at a time so the
parser always makes progress, whatever the input looks like.
"""

import logging
from pathlib import Path
from typing import Callable, Final, List, NamedTuple, Optional, Union

from fnsearch.models.elm_module import (
    CommentDeclaration,
    ExportedFunction,
    ExportedType,
    ExposeAll,
    ExposeList,
    FunctionDeclaration,
    TypeDeclaration,
)
from ..resolver import resolve
from .base import ElmParseError, LanguageParser, ParseResult
from .lexical import (
    FUNCTION_KIND,
    TYPE_KIND,
    classify_name,
    is_allowed_in_export_group,
    is_identifier_char,
    is_operator_char,
    is_space_or_newline,
    is_space_or_newline_or_comma,
)

logger = logging.getLogger(__name__)

MODULE_KEYWORD: Final[str] = "module"
EXPOSING_KEYWORD: Final[str] = "exposing"


def split_type_signature(body: str) -> List[str]:
    """
    Split an annotation body on ``->``.

    Newlines, carriage returns and tabs are removed from every term and the
    term is trimmed. Parenthesised tuples and records are not re-associated,
    so ``(a -> b) -> c`` splits naively like any other body.
    """
    return [
        term.replace("\n", "").replace("\r", "").replace("\t", "").strip()
        for term in body.split("->")
    ]


class ParsedModule(NamedTuple):
    export_spec: Union[ExposeAll, ExposeList]
    declarations: list
    module_name: str


class _Cursor:
    """A position in the source text with a handful of primitive matchers."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str, pos: int = 0):
        self.text = text
        self.pos = pos

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        if i < len(self.text):
            return self.text[i]
        return ""

    def startswith(self, token: str) -> bool:
        return self.text.startswith(token, self.pos)

    def tag(self, token: str) -> bool:
        if self.text.startswith(token, self.pos):
            self.pos += len(token)
            return True
        return False

    def take_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.pos
        text = self.text
        end = len(text)
        while self.pos < end and predicate(text[self.pos]):
            self.pos += 1
        return text[start:self.pos]

    def at_line_start(self) -> bool:
        return self.pos > 0 and self.text[self.pos - 1] == "\n"


class ElmParser(LanguageParser):
    """Parser for Elm module headers and top-level annotations."""

    EXTENSIONS: Final[List[str]] = ['.elm']
    LANGUAGE_NAME: Final[str] = 'elm'

    def __init__(self):
        super().__init__(ElmParser.LANGUAGE_NAME)

    def detect_language(self, file_path: str) -> bool:
        """Check if file is Elm."""
        return Path(file_path).suffix.lower() in ElmParser.EXTENSIONS

    def parse(self, content: str) -> ParseResult:
        """
        Parse Elm source and resolve its exports.

        Raises:
            ElmParseError: when no ``module ... exposing (...)`` header can be found
        """
        parsed = self.parse_module(content)

        result = ParseResult()
        result.language = ElmParser.LANGUAGE_NAME
        result.module_name = parsed.module_name
        result.export_spec = parsed.export_spec
        result.declarations = parsed.declarations
        result.exports = resolve(parsed.export_spec, parsed.declarations)
        return result

    def parse_module(self, content: str) -> ParsedModule:
        """
        Parse the header and body of one module.

        The returned declarations exclude unclassified characters.
        """
        cursor = _Cursor(content)
        export_spec, module_name = self._parse_header(cursor)
        declarations = self._parse_body(cursor)
        return ParsedModule(export_spec, declarations, module_name)

    # Header

    def _parse_header(self, cursor: _Cursor):
        text = cursor.text

        # A "module" inside an earlier comment or string is taken as the header.
        module_at = text.find(MODULE_KEYWORD)
        if module_at == -1:
            raise ElmParseError("no module declaration found", 0)
        cursor.pos = module_at + len(MODULE_KEYWORD)

        exposing_at = text.find(EXPOSING_KEYWORD, cursor.pos)
        if exposing_at == -1:
            raise ElmParseError("module declaration has no exposing clause", cursor.pos)
        module_name = " ".join(text[cursor.pos:exposing_at].split())
        cursor.pos = exposing_at + len(EXPOSING_KEYWORD)

        cursor.take_while(is_space_or_newline_or_comma)
        if not cursor.tag("("):
            raise ElmParseError("expected '(' after exposing", cursor.pos)

        export_spec = self._parse_export_spec(cursor)

        if not cursor.tag(")"):
            raise ElmParseError("expected ')' to close the exposing list", cursor.pos)
        return export_spec, module_name

    def _parse_export_spec(self, cursor: _Cursor):
        start = cursor.pos
        self._skip_trivia(cursor)
        if cursor.tag(".."):
            self._skip_trivia(cursor)
            return ExposeAll()
        cursor.pos = start

        self._skip_trivia(cursor)
        if cursor.peek() == ")":
            return ExposeList(names=[])

        names = [self._parse_export_item(cursor)]
        while cursor.tag(","):
            names.append(self._parse_export_item(cursor))
        return ExposeList(names=names)

    def _parse_export_item(self, cursor: _Cursor):
        self._skip_trivia(cursor)
        start = cursor.pos

        if cursor.tag("("):
            operator = cursor.take_while(is_operator_char)
            if not operator or not cursor.tag(")"):
                raise ElmParseError("malformed operator in exposing list", start)
            item = ExportedFunction(name=f"({operator})")
        else:
            name = cursor.take_while(is_identifier_char)
            if not name:
                raise ElmParseError("empty item in exposing list", start)

            if classify_name(name) == FUNCTION_KIND:
                item = ExportedFunction(name=name)
            else:
                definition = None
                group_start = cursor.pos
                if cursor.tag("("):
                    group = cursor.take_while(is_allowed_in_export_group)
                    if not cursor.tag(")"):
                        raise ElmParseError("unterminated constructor group", group_start)
                    definition = "".join(group.split())
                item = ExportedType(name=name, definition=definition)

        self._skip_trivia(cursor)
        return item

    def _skip_trivia(self, cursor: _Cursor) -> None:
        """Skip whitespace and comments."""
        while True:
            cursor.take_while(is_space_or_newline)
            if cursor.startswith("{-"):
                end = self._block_comment_end(cursor.text, cursor.pos)
                if end is None:
                    return
                cursor.pos = end
            elif cursor.startswith("--"):
                newline = cursor.text.find("\n", cursor.pos)
                cursor.pos = newline if newline != -1 else len(cursor.text)
            else:
                return

    # Body

    def _parse_body(self, cursor: _Cursor) -> list:
        declarations = []
        ignored = 0

        while not cursor.at_end():
            declaration = self._comment(cursor)
            if declaration is None and cursor.at_line_start():
                declaration = self._function(cursor)
                if declaration is None:
                    declaration = self._type(cursor)

            if declaration is None:
                cursor.pos += 1
                ignored += 1
                continue
            declarations.append(declaration)

        logger.debug(f"Parsed {len(declarations)} declarations, skipped {ignored} characters")
        return declarations

    def _comment(self, cursor: _Cursor) -> Optional[CommentDeclaration]:
        start = cursor.pos
        if cursor.startswith("{-"):
            end = self._block_comment_end(cursor.text, start)
            if end is None:
                return None
        elif cursor.startswith("--"):
            end = cursor.text.find("\n", start)
            if end == -1:
                end = len(cursor.text)
        else:
            return None

        cursor.pos = end
        return CommentDeclaration(text=cursor.text[start:end])

    @staticmethod
    def _block_comment_end(text: str, start: int) -> Optional[int]:
        """Offset just past the ``-}`` closing the (possibly nested) comment at ``start``."""
        depth = 0
        i = start
        while True:
            opening = text.find("{-", i)
            closing = text.find("-}", i)
            if closing == -1:
                return None
            if opening != -1 and opening < closing:
                depth += 1
                i = opening + 2
                continue
            depth -= 1
            i = closing + 2
            if depth == 0:
                return i

    def _function(self, cursor: _Cursor) -> Optional[FunctionDeclaration]:
        """
        Match ``name : signature`` followed by the implementation header.

        The signature ends at the next standalone occurrence of ``name``, so a
        signature that mentions the function's own name is cut short there.
        """
        start = cursor.pos
        name = cursor.take_while(is_identifier_char)
        if not name or classify_name(name) != FUNCTION_KIND:
            cursor.pos = start
            return None

        cursor.take_while(is_space_or_newline_or_comma)
        if not cursor.tag(":") or cursor.peek() == ":":
            cursor.pos = start
            return None
        cursor.take_while(is_space_or_newline_or_comma)

        end = self._find_standalone(cursor.text, name, cursor.pos)
        if end is None:
            cursor.pos = start
            return None

        body = cursor.text[cursor.pos:end]
        cursor.pos = end + len(name)
        return FunctionDeclaration(name=name, typeSignature=split_type_signature(body))

    @staticmethod
    def _find_standalone(text: str, name: str, start: int) -> Optional[int]:
        i = text.find(name, start)
        while i != -1:
            after = i + len(name)
            before_ok = i == 0 or not is_identifier_char(text[i - 1])
            after_ok = after >= len(text) or not is_identifier_char(text[after])
            if before_ok and after_ok:
                return i
            i = text.find(name, i + 1)
        return None

    def _type(self, cursor: _Cursor) -> Optional[TypeDeclaration]:
        start = cursor.pos
        if not cursor.tag("type") or not cursor.peek().isspace():
            cursor.pos = start
            return None
        cursor.take_while(is_space_or_newline)

        alias = False
        before_alias = cursor.pos
        if cursor.tag("alias") and cursor.peek().isspace():
            alias = True
            cursor.take_while(is_space_or_newline)
        else:
            cursor.pos = before_alias

        name = cursor.take_while(is_identifier_char)
        if not name or classify_name(name) != TYPE_KIND:
            cursor.pos = start
            return None

        end = self._top_level_end(cursor.text, cursor.pos)
        definition = " ".join(cursor.text[cursor.pos:end].split()) or None
        cursor.pos = end
        return TypeDeclaration(name=name, definition=definition, alias=alias)

    @staticmethod
    def _top_level_end(text: str, start: int) -> int:
        """Offset of the newline that precedes the next line starting in column zero."""
        i = start
        while True:
            newline = text.find("\n", i)
            if newline == -1:
                return len(text)
            following = newline + 1
            if following >= len(text) or not text[following].isspace():
                return newline
            i = following
