"""
Parsed module structure: the exposing clause and the top-level declarations.

Every sum type here is a closed discriminated union keyed on ``kind``.
"""

from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExportedType(BaseModel):
    """A type named in the exposing list, e.g. ``Model`` or ``Msg(..)``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["type"] = "type"
    name: str = Field(..., description="Exposed type name")
    definition: Optional[str] = Field(None, description="Inline constructor group written in the header, e.g. '..'")


class ExportedFunction(BaseModel):
    """A function (or operator) named in the exposing list."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["function"] = "function"
    name: str = Field(..., description="Exposed function name")
    typeSignature: Optional[List[str]] = Field(None, description="Inline signature, never present in a module header")


ExportedName = Annotated[Union[ExportedType, ExportedFunction], Field(discriminator="kind")]


class ExposeAll(BaseModel):
    """``exposing (..)``"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["all"] = "all"


class ExposeList(BaseModel):
    """An explicit exposing list, in source order and not deduplicated."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    names: List[ExportedName] = Field(default_factory=list, description="Exposed names in header order")

    def name_set(self) -> set:
        return {item.name for item in self.names}


ExportSpec = Annotated[Union[ExposeAll, ExposeList], Field(discriminator="kind")]


class CommentDeclaration(BaseModel):
    """A block ``{- -}`` or line ``--`` comment."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["comment"] = "comment"
    text: str = Field("", description="Raw comment text including delimiters")


class FunctionDeclaration(BaseModel):
    """A top-level type annotation ``name : A -> B``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["function"] = "function"
    name: str = Field(..., description="Function name")
    typeSignature: Optional[List[str]] = Field(None, description="Arrow-separated terms, last one is the return type")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Reject empty names."""
        if not v:
            raise ValueError("Function name cannot be empty")
        return v


class TypeDeclaration(BaseModel):
    """A ``type`` or ``type alias`` declaration."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["type"] = "type"
    name: str = Field(..., description="Type name")
    definition: Optional[str] = Field(None, description="Text following the name, whitespace collapsed")
    alias: bool = Field(False, description="Whether this is a type alias")


class IgnoreDeclaration(BaseModel):
    """One unclassified source character."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ignore"] = "ignore"


Declaration = Annotated[
    Union[CommentDeclaration, FunctionDeclaration, TypeDeclaration, IgnoreDeclaration],
    Field(discriminator="kind"),
]
