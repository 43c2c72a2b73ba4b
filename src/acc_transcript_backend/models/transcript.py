"""
Transcript models for the ACC transcript backend.

Transcripts are loaded once at startup and never modified, so every model here
is frozen. Wire field names are camelCase; Python attributes are snake_case.
"""

import datetime
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field


class SpeechChunk(BaseModel):
    """A single spoken passage inside a transcript."""

    model_config = ConfigDict(frozen=True)

    speaker: str = Field(description="Speaker name")
    text: str = Field(description="What the speaker said")
    timestamp: str = Field(description="Offset into the call (HH:MM:SS)")


class Transcript(BaseModel):
    """Complete call transcript record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Unique transcript identifier")
    client_name: str = Field(alias="clientName", description="Client the call was held with")
    date: datetime.date = Field(description="Date of the call")
    participants: Tuple[str, ...] = Field(default=(), description="Participant names, in order")
    content: str = Field(default="", description="Free-text body of the transcript")
    chunks: Tuple[SpeechChunk, ...] = Field(default=(), description="Speaker chunks, in order")
    action_items: Tuple[str, ...] = Field(
        default=(), alias="actionItems", description="Follow-ups agreed on the call"
    )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize with camelCase keys and an ISO-8601 date."""
        return self.model_dump(mode="json", by_alias=True)
