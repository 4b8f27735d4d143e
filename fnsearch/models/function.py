"""
Function records persisted per exported, type-annotated function.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class NewFunction(BaseModel):
    """A function waiting to be persisted; the database assigns its id."""

    packageId: str = Field(..., description="Owning package identifier")
    name: str = Field(..., description="Function name")
    typeSignature: str = Field(..., description="Normalized type signature, e.g. 'Int -> List Int -> Int'")
    moduleName: Optional[str] = Field(None, description="Module that exposes the function")


class FunctionRecord(BaseModel):
    """A persisted function. Immutable once created."""

    id: int = Field(..., description="Durable integer id assigned at persistence time")
    packageId: str = Field(..., description="Owning package identifier")
    name: str = Field(..., description="Function name")
    typeSignature: str = Field(..., description="Normalized type signature")
    moduleName: Optional[str] = Field(None, description="Module that exposes the function")

    model_config = ConfigDict(frozen=True)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v):
        """Ids are non-negative."""
        if v < 0:
            raise ValueError("Function id cannot be negative")
        return v


class CompleteFunction(BaseModel):
    """A function joined with its package, as returned by search."""

    packageId: str = Field(..., description="Owning package identifier")
    packageName: str = Field(..., description="Package name, e.g. 'elm/core'")
    packageUrl: str = Field(..., description="Repository URL of the package")
    funcId: int = Field(..., description="Function id")
    funcName: str = Field(..., description="Function name")
    funcTypeSig: str = Field(..., description="Normalized type signature")
    moduleName: Optional[str] = Field(None, description="Module that exposes the function")
