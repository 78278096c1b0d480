"""Workspace record type definitions."""

from dataclasses import dataclass, field
from typing import Literal, get_args

ThoughtProductType = Literal[
    "insight",
    "idea",
    "claim",
    "assumption",
    "decision",
    "question",
    "tension",
    "principle",
]
ThoughtProductState = Literal[
    "surfaced",
    "claimed",
    "supported",
    "challenged",
    "validated",
    "superseded",
    "abandoned",
]
EvidenceType = Literal["quote", "observation", "data"]
MessageRole = Literal["user", "assistant", "system"]
OutputType = Literal[
    "spec",
    "user_story",
    "journey",
    "problem_frame",
    "design_brief",
    "roadmap",
    "persona_preview",
    "persona",
    "adept",
    "epics",
    "strategic_context",
    "information_architecture",
    "handoff_notes",
    "solution_brief",
    "feature_spec",
    "content_brief",
    "technical_context",
    "positioning",
]

THOUGHT_PRODUCT_TYPES: tuple[str, ...] = get_args(ThoughtProductType)
THOUGHT_PRODUCT_STATES: tuple[str, ...] = get_args(ThoughtProductState)
EVIDENCE_TYPES: tuple[str, ...] = get_args(EvidenceType)
OUTPUT_TYPES: tuple[str, ...] = get_args(OutputType)


@dataclass
class Workspace:
    id: str
    name: str
    created_at: str


@dataclass
class Thread:
    id: str
    workspace_id: str
    title: str | None
    created_at: str


@dataclass
class Message:
    id: str
    thread_id: str
    role: MessageRole
    content: str
    model: str | None
    created_at: str


@dataclass
class Node:
    """One user/assistant exchange inside a thread."""

    id: str
    thread_id: str
    message_ids: list[str]
    position: int
    summary: str | None
    created_at: str


@dataclass
class ThoughtProduct:
    """A single captured unit of reasoning."""

    id: str
    workspace_id: str
    type: ThoughtProductType
    content: str
    state: ThoughtProductState
    confidence: float
    citation_count: int
    created_at: str
    source_node_id: str | None = None
    influenced_by: list[str] = field(default_factory=list)
    influences: list[str] = field(default_factory=list)
    superseded_by: str | None = None


@dataclass
class Evidence:
    id: str
    workspace_id: str
    thought_product_id: str
    type: EvidenceType
    content: str
    source: str | None
    supports: bool
    created_at: str


@dataclass
class Persona:
    id: str
    workspace_id: str
    name: str
    traits: dict[str, str]
    voice: str | None
    created_at: str


@dataclass
class Output:
    """A generated document grounded in thought products."""

    id: str
    workspace_id: str
    type: OutputType
    content: dict
    depends_on: list[str]
    establishes: list[str]
    created_at: str


@dataclass
class Notebook:
    id: str
    workspace_id: str
    name: str
    description: str | None
    notes: str | None
    created_at: str
    updated_at: str


@dataclass
class NotebookEntry:
    notebook_id: str
    thought_product_id: str
    position: int
    annotation: str | None
    added_at: str
