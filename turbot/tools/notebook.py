"""Notebook tools — organise thought products into curated collections."""

from ..context.formatting import STATE_MARKERS
from ..store.errors import DuplicateEntryError, NotFoundError
from ..store.workspace import WorkspaceStore


async def handle_notebook_create(
    workspace_id: str, name: str, description: str | None = None
) -> str:
    with WorkspaceStore() as store:
        notebook = store.create_notebook(workspace_id, name, description)

    result = f'Notebook created: "{notebook.name}"\nID: {notebook.id}'
    if description:
        result += f"\nDescription: {description}"
    return result


async def handle_notebook_add(
    notebook_id: str, tp_id: str, annotation: str | None = None
) -> str:
    """Append a thought product to a notebook."""
    with WorkspaceStore() as store:
        if not store.get_notebook(notebook_id):
            return f"Notebook not found: {notebook_id}"
        tp = store.get_thought_product(tp_id)
        if not tp:
            return f"Thought product not found: {tp_id}"
        try:
            store.add_notebook_entry(notebook_id, tp_id, annotation)
        except DuplicateEntryError:
            return "This thought product is already in the notebook."

    result = f"Added to notebook:\n[{tp.type}] {tp.content[:60]}..."
    if annotation:
        result += f"\nAnnotation: {annotation}"
    return result


async def handle_notebook_list(workspace_id: str) -> str:
    with WorkspaceStore() as store:
        notebooks = store.list_notebooks(workspace_id)

    if not notebooks:
        return "No notebooks in this workspace. Create one with turbot_notebook_create."

    entries = []
    for nb, count in notebooks:
        entry = f"- **{nb.name}** ({count} items)\n  ID: {nb.id}"
        if nb.description:
            entry += f"\n  {nb.description}"
        entries.append(entry)
    return "## Notebooks\n\n" + "\n\n".join(entries)


async def handle_notebook_view(notebook_id: str) -> str:
    """Render a notebook: description, notes, then its thought products in order."""
    with WorkspaceStore() as store:
        notebook = store.get_notebook(notebook_id)
        if not notebook:
            return f"Notebook not found: {notebook_id}"
        entries = store.list_notebook_entries(notebook_id)
        products = {
            tp.id: tp
            for tp in store.get_thought_products([e.thought_product_id for e in entries])
        }

    parts = [f"## {notebook.name}"]
    if notebook.description:
        parts.append(f"*{notebook.description}*")
    parts.append("")
    if notebook.notes:
        parts.append(f"### Notes\n{notebook.notes}\n")

    if not entries:
        parts.append("*No thought products in this notebook yet.*")
        return "\n".join(parts)

    parts.append(f"### Thought Products ({len(entries)})\n")
    for entry in entries:
        tp = products.get(entry.thought_product_id)
        if not tp:
            continue
        marker = f"{STATE_MARKERS[tp.state]} " if tp.state in STATE_MARKERS else ""
        parts.append(f"{entry.position + 1}. {marker}[{tp.type}] {tp.content}")
        parts.append(f"   *{tp.state} • confidence: {tp.confidence}*")
        if entry.annotation:
            parts.append(f"   Note: {entry.annotation}")
        parts.append("")

    return "\n".join(parts).rstrip()


async def handle_notebook_note(notebook_id: str, notes: str) -> str:
    """Replace a notebook's freeform notes."""
    try:
        with WorkspaceStore() as store:
            notebook = store.update_notebook_notes(notebook_id, notes)
    except NotFoundError as err:
        return f"Error updating notes: {err}"
    return f'Notes updated for "{notebook.name}"'


async def handle_notebook_remove(notebook_id: str, tp_id: str) -> str:
    with WorkspaceStore() as store:
        removed = store.remove_notebook_entry(notebook_id, tp_id)

    if not removed:
        return "That thought product is not in this notebook."
    return "Removed thought product from notebook."
