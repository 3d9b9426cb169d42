"""Data models for instruction entries and sync results."""
import re
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, computed_field, field_validator

_WHITESPACE = re.compile(r"\s")
# Characters XML 1.0 cannot represent, even as character references
_XML_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

class MergeOutcome(str, Enum):
    """What happened to a single entry during a merge."""
    CREATED = "created"
    UPDATED = "updated"

class InstructionEntry(BaseModel):
    """A single custom instruction keyed by the action it belongs to."""
    instruction_id: str = Field(..., description="Identifier of the owning action")
    content: str = Field(default="", description="Instruction text, may span lines")

    @field_validator("instruction_id")
    @classmethod
    def validate_instruction_id(cls, v: str) -> str:
        """Instruction ids are single non-empty tokens."""
        if not v or _WHITESPACE.search(v) or _XML_ILLEGAL.search(v):
            raise ValueError(f"Invalid instruction id: {v!r}")
        return v

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Content must be storable in an XML attribute."""
        match = _XML_ILLEGAL.search(v)
        if match:
            raise ValueError(f"Content contains control character {match.group()!r}")
        return v

class ExportResult(BaseModel):
    """Outcome of exporting the instruction section to files."""
    written_files: List[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.written_files

class ImportResult(BaseModel):
    """Outcome of merging instruction files into the workspace document."""
    created: List[str] = Field(default_factory=list)
    updated: List[str] = Field(default_factory=list)
    skipped_files: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def merged_count(self) -> int:
        return len(self.created) + len(self.updated)

    @property
    def is_empty(self) -> bool:
        return self.merged_count == 0

    def record(self, instruction_id: str, outcome: MergeOutcome) -> None:
        """Record the merge outcome for one instruction."""
        if outcome is MergeOutcome.CREATED:
            self.created.append(instruction_id)
        else:
            self.updated.append(instruction_id)
