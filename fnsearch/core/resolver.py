"""
Cross-references a module's exposing clause with its parsed declarations.
"""

import logging
from typing import Dict, Iterable, Optional

from fnsearch.models.elm_module import (
    CommentDeclaration,
    ExportedFunction,
    ExportedType,
    ExposeAll,
    ExposeList,
    FunctionDeclaration,
    IgnoreDeclaration,
    TypeDeclaration,
)
from fnsearch.models.exports import ExportEntry, Exports

logger = logging.getLogger(__name__)


def _to_entry(declaration, exported=None) -> Optional[ExportEntry]:
    """
    Build an export entry from a body declaration.

    When the header carried inline data for the same name it is used only
    where the body declaration has none.
    """
    if isinstance(declaration, FunctionDeclaration):
        signature = declaration.typeSignature
        if signature is None and isinstance(exported, ExportedFunction):
            signature = exported.typeSignature
        return ExportEntry(name=declaration.name, kind="function", typeSignature=signature)
    elif isinstance(declaration, TypeDeclaration):
        definition = declaration.definition
        if definition is None and isinstance(exported, ExportedType):
            definition = exported.definition
        return ExportEntry(name=declaration.name, kind="type", definition=definition)
    elif isinstance(declaration, (CommentDeclaration, IgnoreDeclaration)):
        return None
    raise TypeError(f"Unknown declaration variant: {type(declaration).__name__}")


def resolve(spec, declarations: Iterable) -> Exports:
    """
    Keep the declarations a module actually exports.

    With ``exposing (..)`` every function and type declaration is kept. With
    an explicit list only declarations whose name is listed are kept; listed
    names without a body declaration (re-exports, values without an
    annotation) are dropped. Source order of the body is preserved.
    """
    if isinstance(spec, ExposeAll):
        exported: Optional[Dict[str, object]] = None
    elif isinstance(spec, ExposeList):
        exported = {}
        for item in spec.names:
            # first occurrence wins for inline data, membership is what matters
            exported.setdefault(item.name, item)
    else:
        raise TypeError(f"Unknown export spec variant: {type(spec).__name__}")

    entries = []
    for declaration in declarations:
        if isinstance(declaration, (CommentDeclaration, IgnoreDeclaration)):
            continue
        if not isinstance(declaration, (FunctionDeclaration, TypeDeclaration)):
            raise TypeError(f"Unknown declaration variant: {type(declaration).__name__}")
        if exported is None:
            entry = _to_entry(declaration)
        elif declaration.name in exported:
            entry = _to_entry(declaration, exported[declaration.name])
        else:
            continue
        if entry is not None:
            entries.append(entry)

    logger.debug(f"Resolved {len(entries)} exports")
    return Exports(entries=entries)
