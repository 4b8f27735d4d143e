"""
Character classifiers shared by the Elm export parser.
"""

from typing import Final, FrozenSet

OPERATOR_CHARS: Final[FrozenSet[str]] = frozenset("+-/*^=><&|.:!%?~$#@\\")
EXPORT_GROUP_CHARS: Final[FrozenSet[str]] = frozenset(".,")

FUNCTION_KIND: Final[str] = "function"
TYPE_KIND: Final[str] = "type"


def is_space_or_newline(c: str) -> bool:
    return c.isspace()


def is_space_or_newline_or_comma(c: str) -> bool:
    return c.isspace() or c == ","


def is_identifier_char(c: str) -> bool:
    """Letters, digits and underscores; dots are handled by callers that accept qualified names."""
    return c.isalnum() or c == "_"


def is_operator_char(c: str) -> bool:
    return c in OPERATOR_CHARS


def is_allowed_in_export_group(c: str) -> bool:
    """Characters allowed inside an exposed constructor group such as ``Msg(A, B)``."""
    return is_identifier_char(c) or c in EXPORT_GROUP_CHARS or c.isspace()


def classify_name(name: str) -> str:
    """
    Classify an exported or declared name.

    A name whose first character is a lowercase letter is a function,
    anything else is a type.
    """
    if name and name[0].islower():
        return FUNCTION_KIND
    return TYPE_KIND
