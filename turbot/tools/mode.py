"""Mode tool — methodology primer with a summary of the workspace so far."""

from ..llm.prompts import build_mode_prompt
from ..store.types import Persona, ThoughtProduct
from ..store.workspace import WorkspaceStore

DEFAULT_MODE = "think"
RECENT_LIMIT = 20
CONTENT_CHARS = 100
VOICE_CHARS = 50


def summarize_workspace(
    workspace_name: str | None,
    thought_products: list[ThoughtProduct],
    personas: list[Persona],
) -> str:
    """What's established, decided, in tension and assumed, plus available personas."""
    established = [tp for tp in thought_products if tp.state in ("validated", "supported")]
    decisions = [tp for tp in thought_products if tp.type == "decision"]
    tensions = [tp for tp in thought_products if tp.type == "tension"]
    assumed = [
        tp for tp in thought_products if tp.type == "assumption" and tp.state != "validated"
    ]

    def _items(tps: list[ThoughtProduct], n: int, empty: str, typed: bool = False) -> str:
        lines = [
            f"- {f'[{tp.type}] ' if typed else ''}{tp.content[:CONTENT_CHARS]}..."
            for tp in tps[:n]
        ]
        return "\n".join(lines) or empty

    persona_lines = "\n".join(
        f"- {p.name}: {(p.voice or 'No voice defined')[:VOICE_CHARS]}..." for p in personas
    )

    return "\n\n".join(
        [
            f"## Current Workspace: {workspace_name or 'Unknown'}",
            f"### What's Established ({len(established)} items)\n"
            + _items(established, 5, "Nothing validated yet", typed=True),
            f"### Key Decisions ({len(decisions)})\n"
            + _items(decisions, 3, "No decisions captured yet"),
            f"### Active Tensions ({len(tensions)})\n"
            + _items(tensions, 3, "No tensions identified yet"),
            f"### Unvalidated Assumptions ({len(assumed)})\n"
            + _items(assumed, 3, "No unvalidated assumptions"),
            f"### Available Personas ({len(personas)})\n"
            + (persona_lines or "No personas created yet"),
        ]
    )


async def handle_mode(workspace_id: str, mode: str | None = None) -> str:
    """Prime the session with the methodology, a behavioural mode and workspace context."""
    with WorkspaceStore() as store:
        workspace = store.get_workspace(workspace_id)
        thought_products = sorted(
            store.list_context_thought_products(workspace_id),
            key=lambda tp: tp.created_at,
            reverse=True,
        )[:RECENT_LIMIT]
        personas = store.list_personas(workspace_id)

    summary = summarize_workspace(
        workspace.name if workspace else None, thought_products, personas
    )
    return build_mode_prompt(mode or DEFAULT_MODE, summary)
