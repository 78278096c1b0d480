"""Workspace tools — create and list workspaces."""

from ..store.workspace import WorkspaceStore


async def handle_workspace_create(name: str) -> str:
    """Create a new workspace for a project or initiative."""
    if not name.strip():
        return "Error creating workspace: name must not be empty"

    with WorkspaceStore() as store:
        workspace = store.create_workspace(name.strip())

    return f'Created workspace "{workspace.name}" with ID: {workspace.id}'


async def handle_workspace_list() -> str:
    """List all available workspaces."""
    with WorkspaceStore() as store:
        workspaces = store.list_workspaces()

    if not workspaces:
        return "No workspaces found. Create one with turbot_workspace_create."

    listing = "\n".join(f"- {w.name} ({w.id})" for w in workspaces)
    return f"Workspaces:\n{listing}"
