"""Output tools — generate grounded documents and list them."""

import json
from datetime import datetime

from ..llm import client
from ..store.types import OUTPUT_TYPES
from ..store.workspace import WorkspaceStore

GROUNDING_LIMIT = 20
PREVIEW_CHARS = 100


async def handle_create(workspace_id: str, type_: str, context: str) -> str:
    """Generate a document grounded in the workspace's most confident thought products."""
    if type_ not in OUTPUT_TYPES:
        return f"Error creating output: unknown output type {type_!r}"

    with WorkspaceStore() as store:
        thought_products = store.list_grounding_thought_products(
            workspace_id, limit=GROUNDING_LIMIT
        )

        try:
            text = await client.generate_output(type_, context, thought_products)
        except Exception as err:
            return f"Error generating output: {err}"

        output = store.insert_output(
            workspace_id,
            type_,  # type: ignore[arg-type]
            {"text": text, "context": context},
            depends_on=[tp.id for tp in thought_products],
        )

    return (
        f"{text}\n\n---\n"
        f"Output ID: {output.id}\n"
        f"Grounded in {len(thought_products)} thought products"
    )


async def handle_output_list(workspace_id: str, type_: str | None = None) -> str:
    """List generated outputs, newest first."""
    with WorkspaceStore() as store:
        outputs = store.list_outputs(workspace_id, type_=type_)  # type: ignore[arg-type]

    if not outputs:
        type_note = f' of type "{type_}"' if type_ else ""
        return f"No outputs found{type_note}.\n\nGenerate outputs with turbot_create."

    entries = []
    for o in outputs:
        body = (
            o.content.get("text") or o.content.get("evaluation")
            if isinstance(o.content, dict)
            else None
        )
        preview = (body if isinstance(body, str) else json.dumps(o.content))[:PREVIEW_CHARS]
        created = datetime.fromisoformat(o.created_at).date().isoformat()
        entries.append(
            f"**{o.type.upper()}** ({created})\n  ID: {o.id}\n  Preview: {preview}..."
        )

    filter_note = f"\nFilter: type={type_}" if type_ else ""
    return f"# Outputs ({len(outputs)}){filter_note}\n\n" + "\n\n".join(entries)
