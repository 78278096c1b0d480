"""Think tool — context-enhanced thinking sessions, and claim grounding."""

import logging

from ..context.assembly import enhance_prompt_with_context
from ..llm import client
from ..llm.parser import extract_thought_products
from ..llm.prompts import build_method_prompt
from ..store.workspace import WorkspaceStore

logger = logging.getLogger(__name__)

THREAD_TITLE_CHARS = 50


async def handle_think(
    workspace_id: str,
    prompt: str,
    method: str | None = None,
    thread_id: str | None = None,
) -> str:
    """Run one thinking exchange and store what it surfaces.

    The prompt sent to the model carries the workspace's most relevant
    knowledge; if that cannot be assembled the bare prompt is used.
    """
    prompt_with_method = build_method_prompt(prompt, method)

    with WorkspaceStore() as store:
        history: list[dict] = []
        if thread_id:
            thread = store.get_thread(thread_id)
            if not thread:
                return f"Thread not found: {thread_id}"
            history = [
                {"role": m.role, "content": m.content}
                for m in store.list_messages(thread_id)
                if m.role != "system"
            ]
        else:
            title = prompt[:THREAD_TITLE_CHARS] + ("..." if len(prompt) > THREAD_TITLE_CHARS else "")
            thread = store.create_thread(workspace_id, title)

        user_message = store.add_message(thread.id, "user", prompt)

        enhanced = enhance_prompt_with_context(
            workspace_id, prompt_with_method, store=store, scoring_query=prompt
        )
        if not enhanced.used_context:
            logger.debug("No workspace context for thread %s", thread.id)

        try:
            response = await client.generate_thinking_response(enhanced.text, history)
        except Exception as err:
            return f"Error generating response: {err}"

        assistant_message = store.add_message(
            thread.id, "assistant", response, model=client.get_model()
        )
        node = store.create_node(
            thread.id,
            [user_message.id, assistant_message.id],
            position=len(history) // 2,
        )

        try:
            summary = await client.summarize_exchange(prompt, response)
            if summary:
                store.set_node_summary(node.id, summary)
        except Exception as err:
            logger.warning("Node summary failed for %s: %s", node.id, err)

        stored: list[str] = []
        for item in extract_thought_products(response):
            store.insert_thought_product(
                workspace_id, item.type, item.content, source_node_id=node.id  # type: ignore[arg-type]
            )
            stored.append(f"{item.type}: {item.content[:50]}...")

    products_summary = ""
    if stored:
        products_summary = (
            f"\n\n---\nExtracted {len(stored)} thought product(s):\n"
            + "\n".join(f"- {p}" for p in stored)
        )

    return f"{response}{products_summary}\n\n---\nThread: {thread.id} | Node: {node.id}"


async def handle_ground(workspace_id: str, claim: str) -> str:
    """Check what supports or challenges a claim."""
    with WorkspaceStore() as store:
        thought_products = store.list_thought_products(workspace_id)
        evidence = store.list_evidence(workspace_id=workspace_id)

    try:
        analysis = await client.analyze_grounding(claim, thought_products, evidence)
    except Exception as err:
        return f"Error analyzing claim: {err}"

    return f'Grounding Analysis for: "{claim}"\n\n{analysis}'
