"""Pydantic request models for the darkroom API."""

from typing import Literal

from pydantic import BaseModel, Field

TriageActionName = Literal["journal", "archive", "delete"]


class CaptureRequest(BaseModel):
    """Registers an uploaded capture."""

    image_url: str = Field(min_length=1)


class TriageRequest(BaseModel):
    """Single triage decision."""

    action: TriageActionName


class DecisionPayload(BaseModel):
    """One decision inside a batch commit."""

    photo_id: str
    action: TriageActionName


class BatchTriageRequest(BaseModel):
    """Decisions from a finished triage session."""

    decisions: list[DecisionPayload] = Field(default_factory=list)
    photo_tags: dict[str, list[str]] = Field(default_factory=dict)


class TriageCompletionRequest(BaseModel):
    """Number of photos posted to the story in a finished session."""

    journaled_count: int = Field(ge=0)


class ReactionRequest(BaseModel):
    """Emoji reaction payload."""

    emoji: str = Field(min_length=1)


class OwnerRequest(BaseModel):
    """Identifies the user acting on their own photo."""

    user_id: str = Field(min_length=1)


class TagsRequest(BaseModel):
    """Friend tags for a photo."""

    tagged_user_ids: list[str] = Field(default_factory=list)
