"""
Resolved exports for one source module.
"""

from typing import Iterator, List, Literal, Optional
from pydantic import BaseModel, Field, model_validator

SIGNATURE_SEPARATOR = " -> "


def normalize_signature(terms: List[str]) -> str:
    """Join signature terms into the string form stored in the signature index."""
    return SIGNATURE_SEPARATOR.join(terms)


class ExportEntry(BaseModel):
    """One exported function or type together with its signature or definition."""

    name: str = Field(..., description="Exported name")
    kind: Literal["function", "type"] = Field(..., description="'function' or 'type'")
    typeSignature: Optional[List[str]] = Field(None, description="Signature terms (functions only)")
    definition: Optional[str] = Field(None, description="Type definition (types only)")

    @model_validator(mode="after")
    def check_payload(self):
        """A function never carries a definition and a type never carries a signature."""
        if self.kind == "function" and self.definition is not None:
            raise ValueError("Function exports cannot carry a type definition")
        if self.kind == "type" and self.typeSignature is not None:
            raise ValueError("Type exports cannot carry a type signature")
        return self

    @property
    def normalized_signature(self) -> Optional[str]:
        if self.typeSignature is None:
            return None
        return normalize_signature(self.typeSignature)


class Exports(BaseModel):
    """Ordered export entries of a module."""

    entries: List[ExportEntry] = Field(default_factory=list, description="Entries in source order")

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ExportEntry]:
        return iter(self.entries)

    def functions(self) -> List[ExportEntry]:
        return [e for e in self.entries if e.kind == "function"]

    def types(self) -> List[ExportEntry]:
        return [e for e in self.entries if e.kind == "type"]

    def names(self) -> List[str]:
        return [e.name for e in self.entries]
