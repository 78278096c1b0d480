"""Evaluate tool — ADEPT evaluation of solution concepts, saved as an output."""

from datetime import datetime, timezone

from ..llm import client
from ..store.workspace import WorkspaceStore


async def handle_evaluate(
    workspace_id: str,
    concept: str,
    compare_with: list[str] | None = None,
) -> str:
    """Rate a concept, or compare it with alternatives, against the workspace's knowledge."""
    concepts = [concept, *(compare_with or [])]

    with WorkspaceStore() as store:
        thought_products = store.list_context_thought_products(workspace_id)
        personas = store.list_personas(workspace_id)

        try:
            evaluation = await client.evaluate_concepts(concepts, thought_products, personas)
        except Exception as err:
            return f"Error evaluating concept: {err}"

        output = store.insert_output(
            workspace_id,
            "adept",
            {
                "concepts": concepts,
                "evaluation": evaluation,
                "generated_at": datetime.now(timezone.utc).isoformat(),
            },
            depends_on=[],
        )

    return f"{evaluation}\n\n---\nEvaluation saved. Output ID: {output.id}"
