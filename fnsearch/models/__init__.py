"""
Data models for the function signature search service.
"""

from .elm_module import (
    ExportedType,
    ExportedFunction,
    ExportedName,
    ExposeAll,
    ExposeList,
    ExportSpec,
    CommentDeclaration,
    FunctionDeclaration,
    TypeDeclaration,
    IgnoreDeclaration,
    Declaration,
)
from .exports import ExportEntry, Exports, normalize_signature
from .function import NewFunction, FunctionRecord, CompleteFunction
from .package import PackageMetadata, PackageRecord

__all__ = [
    "ExportedType",
    "ExportedFunction",
    "ExportedName",
    "ExposeAll",
    "ExposeList",
    "ExportSpec",
    "CommentDeclaration",
    "FunctionDeclaration",
    "TypeDeclaration",
    "IgnoreDeclaration",
    "Declaration",
    "ExportEntry",
    "Exports",
    "normalize_signature",
    "NewFunction",
    "FunctionRecord",
    "CompleteFunction",
    "PackageMetadata",
    "PackageRecord",
]
