"""
Package catalog entries and per-package indexing status.
"""

from datetime import datetime
from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class PackageMetadata(BaseModel):
    """One entry of the published package catalog."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Package name in 'author/project' form")
    summary: Optional[str] = Field(None, description="Package summary")
    license: Optional[str] = Field(None, description="License identifier")
    version: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("version", "versions"),
        description="Latest published version",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Package names look like 'author/project'."""
        author, _, project = v.partition("/")
        if not author or not project:
            raise ValueError("Package name must be in 'author/project' form")
        return v

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any):
        """Accept the catalog's 'versions' list as well as a single version."""
        if isinstance(v, list):
            return v[-1] if v else None
        return v

    @property
    def author(self) -> str:
        return self.name.split("/", 1)[0]

    @property
    def project(self) -> str:
        return self.name.split("/", 1)[1]

    @property
    def package_id(self) -> str:
        return self.name.replace("/", "__")


class PackageRecord(BaseModel):
    """Persisted package with its indexing status."""

    packageId: str = Field(..., description="Package identifier")
    name: str = Field(..., description="Package name")
    url: str = Field(..., description="Repository URL")
    lastIndexed: Optional[str] = Field(None, description="ISO 8601 UTC timestamp of the last indexing run")
    status: str = Field("pending", description="Indexing status")
    totalFiles: int = Field(0, description="Source files found")
    processedFiles: int = Field(0, description="Source files parsed successfully")
    functionCount: int = Field(0, description="Functions persisted")

    @field_validator("lastIndexed", mode="before")
    @classmethod
    def ensure_utc_timestamp(cls, v):
        """Ensure timestamps are in ISO 8601 UTC format."""
        if isinstance(v, datetime):
            return v.isoformat() + "Z"
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        """Validate status values."""
        valid_statuses = ["pending", "processing", "completed", "failed"]
        if v not in valid_statuses:
            raise ValueError(f"Status must be one of: {', '.join(valid_statuses)}")
        return v

    @field_validator("totalFiles", "processedFiles", "functionCount")
    @classmethod
    def validate_counts(cls, v):
        """Validate count values."""
        if v < 0:
            raise ValueError("Counts cannot be negative")
        return v

    @property
    def has_failures(self) -> bool:
        return self.status == "failed" or (self.totalFiles > 0 and self.processedFiles < self.totalFiles)
