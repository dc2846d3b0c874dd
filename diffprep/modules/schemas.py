"""
diffprep - Wire schemas (Pydantic)

Defines the records that leave the engine and are surfaced verbatim by the
calling service:
- ProcessingInfo: how a diff was reduced before prompt construction
- CommitMessage: the commit message extracted from generation-service text

Field names on the wire are camelCase; Python attributes are snake_case.
"""

from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# PROCESSING METADATA
# =============================================================================


class ProcessingInfo(BaseModel):
    """How a raw diff was processed before being handed to the generator."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    original_size: int = Field(..., ge=0, alias="originalSize", description="Bytes of raw input")
    processed_size: int = Field(..., ge=0, alias="processedSize", description="Bytes of the produced payload")
    files_analyzed: int = Field(..., ge=0, alias="filesAnalyzed", description="Units present in the payload")
    total_files: int = Field(..., ge=0, alias="totalFiles", description="File sections found in the input")
    was_truncated: bool = Field(..., alias="wasTruncated")
    processing_strategy: Literal["direct", "chunked", "summarized"] = Field(..., alias="processingStrategy")

    def to_wire(self) -> Dict[str, Any]:
        """Serialize with the camelCase field names clients assert on."""
        return self.model_dump(by_alias=True)


# =============================================================================
# GENERATION RESPONSE
# =============================================================================


DEFAULT_COMMIT_MESSAGE = "feat: update codebase"
DEFAULT_DESCRIPTION = "Various improvements and changes"
DEFAULT_SUMMARY = "Code changes"


class CommitMessage(BaseModel):
    """Commit message fields extracted from a generation-service answer."""

    model_config = ConfigDict(populate_by_name=True)

    commit_message: str = Field(default=DEFAULT_COMMIT_MESSAGE, alias="commitMessage")
    description: str = Field(default=DEFAULT_DESCRIPTION)
    summary: str = Field(default=DEFAULT_SUMMARY)

    @field_validator("commit_message", "description", "summary", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
