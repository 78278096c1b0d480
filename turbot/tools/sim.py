"""Sim tool — talk to a persona; persona listing."""

from ..llm import client
from ..llm.parser import extract_persona_feedback, feedback_to_thought_product_type
from ..store.types import Persona
from ..store.workspace import WorkspaceStore


def parse_persona_sketch(sketch: str) -> tuple[str, dict[str, str]]:
    """'busy founder, technical, skeptical' -> ('busy founder', {'trait_1': 'technical', ...})."""
    parts = [p.strip() for p in sketch.split(",")]
    name = parts[0] or "User"
    traits = {f"trait_{i}": trait for i, trait in enumerate((p for p in parts[1:] if p), start=1)}
    return name, traits


async def handle_sim(
    workspace_id: str,
    prompt: str,
    persona_id: str | None = None,
    persona_sketch: str | None = None,
) -> str:
    """Ask a persona; its validations, concerns and questions become thought products."""
    with WorkspaceStore() as store:
        persona: Persona | None
        if persona_id:
            persona = store.get_persona(persona_id)
            if not persona:
                return f"Persona not found: {persona_id}"
        elif persona_sketch:
            name, traits = parse_persona_sketch(persona_sketch)
            persona = store.find_persona_by_name(workspace_id, name) or store.create_persona(
                workspace_id, name, traits, voice=persona_sketch
            )
        else:
            return "Either personaId or personaSketch is required"

        try:
            response = await client.simulate_persona(persona, prompt)
        except Exception as err:
            return f"Error simulating persona: {err}"

        feedback = extract_persona_feedback(response)
        for item in feedback:
            store.insert_thought_product(
                workspace_id,
                feedback_to_thought_product_type(item.type),  # type: ignore[arg-type]
                f"[From {persona.name}] {item.content}",
            )

    feedback_summary = ""
    if feedback:
        feedback_summary = (
            f"\n\n---\nCaptured {len(feedback)} feedback item(s) as thought products"
        )

    return f"**{persona.name}** responds:\n\n{response}{feedback_summary}"


async def handle_persona_list(workspace_id: str) -> str:
    """List all personas in a workspace."""
    with WorkspaceStore() as store:
        personas = store.list_personas(workspace_id)

    if not personas:
        return (
            "No personas in this workspace yet.\n\n"
            "Create one with turbot_sim using a personaSketch, e.g.:\n"
            '"busy startup founder, technical background, skeptical of new tools"'
        )

    entries = "\n---\n\n".join(
        f"## {p.name}\n"
        f"**ID:** {p.id}\n"
        f"**Voice:** {p.voice or 'Not defined'}\n"
        f"**Traits:** {', '.join(map(str, p.traits.values())) or 'No traits defined'}\n"
        for p in personas
    )
    return (
        f"# Personas ({len(personas)})\n\n{entries}\n---\n"
        "Use turbot_sim with personaId to talk to a persona."
    )
