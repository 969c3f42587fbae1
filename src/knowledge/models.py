"""
Knowledge base models - Protocols, policies and school metadata.

Protocols carry an urgency level (how quickly staff must act); policies
are standing rules. Both share the same fields otherwise. Partial update
models mirror each variant with every field optional and are used to
validate admin edits before they are merged into an existing entry.
"""
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


Urgency = Literal["high", "medium", "low"]
EntryType = Literal["protocol", "policy"]

PROTOCOL: EntryType = "protocol"
POLICY: EntryType = "policy"


def _normalize_urgency(value):
    if isinstance(value, str):
        value = value.strip().lower()
        return value or None
    return value


class KnowledgeEntry(BaseModel):
    """Fields shared by protocols and policies."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., min_length=1, description="Stable unique identifier")
    topic: str = Field(..., min_length=1, description="Short subject line")
    content: str = Field(..., min_length=1, description="Grounding text given to the model")
    display_source: str = Field(default="", description="Citation label, e.g. 'Handbook p.4'")
    operator_action: str = Field(default="", description="Handling instruction for the model")


class Protocol(KnowledgeEntry):
    """An operational procedure with an urgency level."""
    urgency: Optional[Urgency] = None

    @field_validator("urgency", mode="before")
    @classmethod
    def lowercase_urgency(cls, value):
        return _normalize_urgency(value)

    @property
    def entry_type(self) -> EntryType:
        return PROTOCOL


class Policy(KnowledgeEntry):
    """A standing rule of the center."""

    @property
    def entry_type(self) -> EntryType:
        return POLICY


class PolicyUpdate(BaseModel):
    """Partial update for a policy. Unset fields keep their current value."""
    model_config = ConfigDict(extra="forbid")

    topic: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    display_source: Optional[str] = None
    operator_action: Optional[str] = None


class ProtocolUpdate(PolicyUpdate):
    """Partial update for a protocol."""
    urgency: Optional[Urgency] = None

    @field_validator("urgency", mode="before")
    @classmethod
    def lowercase_urgency(cls, value):
        return _normalize_urgency(value)


class SchoolInfo(BaseModel):
    """
    Static school metadata.

    Only the name is required; extra keys such as address, phone or
    hours are kept as-is.
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    name: str = Field(..., min_length=1)


class KnowledgeBase(BaseModel):
    """School metadata plus ordered protocol and policy lists."""
    school_info: SchoolInfo
    protocols: List[Protocol] = Field(default_factory=list)
    policies: List[Policy] = Field(default_factory=list)

    @model_validator(mode="after")
    def _ids_are_unique(self) -> "KnowledgeBase":
        seen: Dict[str, str] = {}
        for entry in [*self.protocols, *self.policies]:
            if entry.id in seen:
                raise ValueError(f"Duplicate knowledge entry id: {entry.id}")
            seen[entry.id] = entry.entry_type
        return self


AnyEntry = Union[Protocol, Policy]

ENTRY_MODELS = {
    PROTOCOL: Protocol,
    POLICY: Policy,
}

UPDATE_MODELS = {
    PROTOCOL: ProtocolUpdate,
    POLICY: PolicyUpdate,
}
