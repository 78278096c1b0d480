"""Render selected knowledge, personas and recent activity into prompt text."""

from dataclasses import dataclass

from ..store.types import Persona, ThoughtProduct

MAX_PERSONAS = 5
MAX_PERSONA_TRAITS = 3
MAX_RECENT_SUMMARIES = 3
# responses are told apart by their opening characters
RECENT_DEDUP_PREFIX = 50
MAX_SUMMARY_CHARS = 200

STATE_MARKERS = {
    "validated": "✓",
    "challenged": "⚠",
}


@dataclass(frozen=True)
class AssembledContext:
    """Context sections for one prompt. Empty sections are empty strings."""

    thought_products: str = ""
    personas: str = ""
    recent_activity: str = ""

    @property
    def full(self) -> str:
        sections = [self.thought_products, self.personas, self.recent_activity]
        return "\n\n".join(s for s in sections if s)

    @property
    def is_empty(self) -> bool:
        return not self.full


def format_thought_products(grouped: dict[str, list[ThoughtProduct]]) -> str:
    if not any(grouped.values()):
        return ""

    blocks = ["## Relevant Knowledge"]
    for type_, items in grouped.items():
        if not items:
            continue
        lines = [f"### {type_heading(type_)}"]
        lines.extend(f"- {_state_prefix(tp.state)}{tp.content}" for tp in items)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def format_personas(personas: list[Persona]) -> str:
    if not personas:
        return ""

    lines = ["## Active Personas", ""]
    for persona in personas[:MAX_PERSONAS]:
        values = list(persona.traits.values()) if isinstance(persona.traits, dict) else []
        traits = ", ".join(str(value) for value in values[:MAX_PERSONA_TRAITS])
        lines.append(f"- **{persona.name}**: {traits or 'No traits defined'}")
    return "\n".join(lines)


def format_recent_activity(responses: list[str]) -> str:
    """Summarise recent assistant responses, newest first, by their first sentence."""
    seen: set[str] = set()
    summaries: list[str] = []

    for response in responses:
        if len(seen) >= MAX_RECENT_SUMMARIES:
            break
        if not isinstance(response, str):
            continue
        key = response[:RECENT_DEDUP_PREFIX]
        if key in seen:
            continue
        seen.add(key)

        first_sentence = response.split(".")[0].strip()
        if first_sentence and len(first_sentence) < MAX_SUMMARY_CHARS:
            summaries.append(f"- {first_sentence}.")

    if not summaries:
        return ""
    return "\n".join(["## Recent Thinking", "", *summaries])


def type_heading(type_: str) -> str:
    """'decision' -> 'Decisions'."""
    return f"{type_[:1].upper()}{type_[1:]}s"


def _state_prefix(state: str) -> str:
    marker = STATE_MARKERS.get(state)
    return f"{marker} " if marker else ""
