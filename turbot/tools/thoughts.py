"""Thought product tools — capture, list, search, update, link, trace, evidence."""

from ..store.errors import NotFoundError
from ..store.types import EVIDENCE_TYPES, THOUGHT_PRODUCT_STATES, THOUGHT_PRODUCT_TYPES
from ..store.workspace import WorkspaceStore

DEFAULT_LIST_LIMIT = 20
DEFAULT_SEARCH_LIMIT = 10
LIST_PREVIEW_CHARS = 150
SEARCH_PREVIEW_CHARS = 200


async def handle_capture(
    workspace_id: str,
    type_: str,
    content: str,
    node_id: str | None = None,
) -> str:
    """Manually capture a thought product."""
    if type_ not in THOUGHT_PRODUCT_TYPES:
        return f"Error capturing thought product: unknown type {type_!r}"

    with WorkspaceStore() as store:
        tp = store.insert_thought_product(
            workspace_id, type_, content, source_node_id=node_id  # type: ignore[arg-type]
        )

    return (
        f'Captured {tp.type}: "{tp.content}"\n'
        f"ID: {tp.id}\n"
        f"State: {tp.state}, Confidence: {tp.confidence}"
    )


async def handle_thought_list(
    workspace_id: str,
    type_: str | None = None,
    state: str | None = None,
    limit: int | None = None,
) -> str:
    """List thought products, newest first."""
    with WorkspaceStore() as store:
        thoughts = store.list_thought_products(
            workspace_id,
            type_=type_,  # type: ignore[arg-type]
            state=state,  # type: ignore[arg-type]
            limit=limit or DEFAULT_LIST_LIMIT,
        )

    if not thoughts:
        type_note = f' of type "{type_}"' if type_ else ""
        state_note = f' in state "{state}"' if state else ""
        return f"No thought products found{type_note}{state_note}."

    entries = []
    for tp in thoughts:
        citations = f" (cited {tp.citation_count}x)" if tp.citation_count > 0 else ""
        entries.append(
            f"**[{tp.type.upper()}]** {_preview(tp.content, LIST_PREVIEW_CHARS)}\n"
            f"  ID: {tp.id} | State: {tp.state} | Confidence: {tp.confidence}{citations}"
        )

    filters = " ".join(
        f for f in (f"type={type_}" if type_ else "", f"state={state}" if state else "") if f
    )
    filter_note = f"\nFilters: {filters}" if filters else ""
    return f"# Thought Products ({len(thoughts)}){filter_note}\n\n" + "\n\n".join(entries)


async def handle_search(workspace_id: str, query: str, limit: int | None = None) -> str:
    """Search thought products by keyword."""
    with WorkspaceStore() as store:
        thoughts = store.search_thought_products(
            workspace_id, query, limit=limit or DEFAULT_SEARCH_LIMIT
        )

    if not thoughts:
        return f'No thought products found matching "{query}".'

    results = "\n\n".join(
        f"**[{tp.type.upper()}]** {_preview(tp.content, SEARCH_PREVIEW_CHARS)}\n"
        f"  ID: {tp.id} | State: {tp.state}"
        for tp in thoughts
    )
    return f'# Search Results for "{query}" ({len(thoughts)} matches)\n\n{results}'


async def handle_update_state(
    tp_id: str,
    state: str,
    reason: str | None = None,
    confidence: float | None = None,
) -> str:
    """Move a thought product through its lifecycle."""
    if state not in THOUGHT_PRODUCT_STATES:
        return f"Error updating state: unknown state {state!r}"

    try:
        with WorkspaceStore() as store:
            tp = store.update_state(tp_id, state, confidence)  # type: ignore[arg-type]
    except NotFoundError as err:
        return f"Error updating state: {err}"

    response = f'State updated to "{state}"'
    if confidence is not None:
        response += f" with confidence {tp.confidence}"
    if reason:
        response += f"\nReason: {reason}"
    return f"{response}\n\n[{tp.type}] {tp.content}"


async def handle_link(from_id: str, to_id: str) -> str:
    """Create an influence link between two thought products."""
    if from_id == to_id:
        return "A thought product cannot influence itself."

    try:
        with WorkspaceStore() as store:
            from_tp, to_tp = store.link(from_id, to_id)
    except NotFoundError as err:
        return str(err)

    return (
        "Link created:\n"
        f"[{from_tp.type}] {from_tp.content[:50]}...\n"
        "  ↓ influences ↓\n"
        f"[{to_tp.type}] {to_tp.content[:50]}..."
    )


async def handle_trace(tp_id: str) -> str:
    """Show what influenced a thought product, what it influences, and its evidence."""
    with WorkspaceStore() as store:
        tp = store.get_thought_product(tp_id)
        if not tp:
            return f"Thought product not found: {tp_id}"
        influencers = store.get_thought_products(tp.influenced_by)
        influenced = store.get_thought_products(tp.influences)
        evidence = store.list_evidence(tp_id=tp_id)

    lines = [
        f"Trace for: [{tp.type}] {tp.content}",
        f"State: {tp.state} | Confidence: {tp.confidence}",
        "",
    ]

    if influencers:
        lines.append(f"Influenced by ({len(influencers)}):")
        lines.extend(f"  ← [{i.type}] {i.content[:60]}..." for i in influencers)
    else:
        lines.append("Influenced by: (none - this is a root thought)")
    lines.append("")

    if influenced:
        lines.append(f"Influences ({len(influenced)}):")
        lines.extend(f"  → [{i.type}] {i.content[:60]}..." for i in influenced)
    else:
        lines.append("Influences: (none yet)")
    lines.append("")

    if evidence:
        lines.append(f"Evidence ({len(evidence)}):")
        lines.extend(
            f"  {'✓' if e.supports else '✗'} [{e.type}] {e.content[:50]}..." for e in evidence
        )
    else:
        lines.append("Evidence: (none attached)")

    if tp.superseded_by:
        lines.append(f"\nSuperseded by: {tp.superseded_by}")

    return "\n".join(lines)


async def handle_evidence(
    workspace_id: str,
    tp_id: str,
    type_: str,
    content: str,
    supports: bool,
    source: str | None = None,
) -> str:
    """Attach supporting or challenging evidence and suggest a state change."""
    if type_ not in EVIDENCE_TYPES:
        return f"Error adding evidence: unknown evidence type {type_!r}"

    try:
        with WorkspaceStore() as store:
            evidence = store.add_evidence(
                workspace_id, tp_id, type_, content, supports, source  # type: ignore[arg-type]
            )
            all_evidence = store.list_evidence(tp_id=tp_id)
    except NotFoundError as err:
        return f"Error adding evidence: {err}"

    supporting = sum(1 for e in all_evidence if e.supports)
    challenging = len(all_evidence) - supporting

    suggestion = ""
    if supporting and not challenging:
        suggestion = 'Consider updating state to "supported"'
    elif challenging and not supporting:
        suggestion = 'Consider updating state to "challenged"'
    elif supporting and challenging:
        suggestion = "Mixed evidence: may indicate a tension"

    return (
        f"Evidence added ({'supporting' if supports else 'challenging'}):\n"
        f'"{content}"\n\n'
        f"Evidence ID: {evidence.id}\n"
        f"Total evidence: {supporting} supporting, {challenging} challenging\n"
        f"{suggestion}"
    ).rstrip()


def _preview(content: str, limit: int) -> str:
    return content[:limit] + ("..." if len(content) > limit else "")
