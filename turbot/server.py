#!/usr/bin/env python3
"""Turbot MCP Server — capture, link and reason over workspace knowledge."""

import asyncio
import logging
import os
import sys

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .llm.prompts import method_names, mode_names
from .store.types import (
    EVIDENCE_TYPES,
    OUTPUT_TYPES,
    THOUGHT_PRODUCT_STATES,
    THOUGHT_PRODUCT_TYPES,
)
from .tools.evaluate import handle_evaluate
from .tools.mode import handle_mode
from .tools.notebook import (
    handle_notebook_add,
    handle_notebook_create,
    handle_notebook_list,
    handle_notebook_note,
    handle_notebook_remove,
    handle_notebook_view,
)
from .tools.outputs import handle_create, handle_output_list
from .tools.sim import handle_persona_list, handle_sim
from .tools.status import handle_pipeline_status, handle_status
from .tools.think import handle_ground, handle_think
from .tools.thoughts import (
    handle_capture,
    handle_evidence,
    handle_link,
    handle_search,
    handle_thought_list,
    handle_trace,
    handle_update_state,
)
from .tools.workspace import handle_workspace_create, handle_workspace_list

logger = logging.getLogger(__name__)

server = Server("turbot")

_WORKSPACE_ID = {"type": "string", "description": "The workspace ID"}


@server.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(
            name="turbot_think",
            description=(
                "Start or continue a thinking session. Optionally apply a thinking method. "
                "Returns the response, records the exchange, and extracts thought products."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "workspaceId": _WORKSPACE_ID,
                    "prompt": {
                        "type": "string",
                        "description": "The thinking prompt or question",
                    },
                    "method": {
                        "type": "string",
                        "enum": method_names(),
                        "description": "Optional thinking method or framework",
                    },
                    "threadId": {
                        "type": "string",
                        "description": "Optional: continue an existing thread",
                    },
                },
                "required": ["workspaceId", "prompt"],
            },
        ),
        Tool(
            name="turbot_capture",
            description="Manually capture a thought product (insight, decision, assumption, etc.)",
            inputSchema={
                "type": "object",
                "properties": {
                    "workspaceId": _WORKSPACE_ID,
                    "type": {
                        "type": "string",
                        "enum": list(THOUGHT_PRODUCT_TYPES),
                        "description": "The type of thought product",
                    },
                    "content": {
                        "type": "string",
                        "description": "The content of the thought product",
                    },
                    "nodeId": {
                        "type": "string",
                        "description": "Optional: link to a specific node",
                    },
                },
                "required": ["workspaceId", "type", "content"],
            },
        ),
        Tool(
            name="turbot_status",
            description=(
                "High-level workspace summary: pipeline position, counts by type/state, "
                "what is established vs assumed, and suggested next steps"
            ),
            inputSchema={
                "type": "object",
                "properties": {"workspaceId": _WORKSPACE_ID},
                "required": ["workspaceId"],
            },
        ),
        Tool(
            name="turbot_workspace_create",
            description="Create a new workspace for a project or initiative",
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Name for the workspace"},
                },
                "required": ["name"],
            },
        ),
        Tool(
            name="turbot_workspace_list",
            description="List all available workspaces",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="turbot_ground",
            description="Check what supports or challenges a claim, based on workspace thought products and evidence",
            inputSchema={
                "type": "object",
                "properties": {
                    "workspaceId": _WORKSPACE_ID,
                    "claim": {"type": "string", "description": "The claim to ground"},
                },
                "required": ["workspaceId", "claim"],
            },
        ),
        Tool(
            name="turbot_trace",
            description="Trace the lineage of a thought product: what influenced it and what it influences",
            inputSchema={
                "type": "object",
                "properties": {
                    "thoughtProductId": {
                        "type": "string",
                        "description": "The thought product ID to trace",
                    },
                },
                "required": ["thoughtProductId"],
            },
        ),
        Tool(
            name="turbot_sim",
            description=(
                "Talk to a persona for validation. Provide personaId to use an existing persona, "
                "or personaSketch to create one"
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "workspaceId": _WORKSPACE_ID,
                    "prompt": {
                        "type": "string",
                        "description": "What to ask or present to the persona",
                    },
                    "personaId": {
                        "type": "string",
                        "description": "Optional: ID of an existing persona",
                    },
                    "personaSketch": {
                        "type": "string",
                        "description": 'Optional: comma-separated sketch, e.g. "busy founder, technical, skeptical of new tools"',
                    },
                },
                "required": ["workspaceId", "prompt"],
            },
        ),
        Tool(
            name="turbot_create",
            description="Generate a traceable document (spec, journey, persona, ADEPT evaluation, etc.) grounded in workspace knowledge",
            inputSchema={
                "type": "object",
                "properties": {
                    "workspaceId": _WORKSPACE_ID,
                    "type": {
                        "type": "string",
                        "enum": list(OUTPUT_TYPES),
                        "description": "The type of output to create",
                    },
                    "context": {
                        "type": "string",
                        "description": "Additional context, concept to evaluate, or requirements",
                    },
                },
                "required": ["workspaceId", "type", "context"],
            },
        ),
        Tool(
            name="turbot_evidence",
            description="Add supporting or challenging evidence to a thought product",
            inputSchema={
                "type": "object",
                "properties": {
                    "workspaceId": _WORKSPACE_ID,
                    "thoughtProductId": {
                        "type": "string",
                        "description": "The thought product to attach evidence to",
                    },
                    "type": {
                        "type": "string",
                        "enum": list(EVIDENCE_TYPES),
                        "description": "The type of evidence",
                    },
                    "content": {"type": "string", "description": "The evidence content"},
                    "source": {
                        "type": "string",
                        "description": "Optional: where this evidence came from",
                    },
                    "supports": {
                        "type": "boolean",
                        "description": "true if it supports the thought product, false if it challenges it",
                    },
                },
                "required": ["workspaceId", "thoughtProductId", "type", "content", "supports"],
            },
        ),
        Tool(
            name="turbot_update_state",
            description="Update the lifecycle state (and optionally confidence) of a thought product",
            inputSchema={
                "type": "object",
                "properties": {
                    "thoughtProductId": {
                        "type": "string",
                        "description": "The thought product ID to update",
                    },
                    "state": {
                        "type": "string",
                        "enum": list(THOUGHT_PRODUCT_STATES),
                        "description": "The new state",
                    },
                    "reason": {
                        "type": "string",
                        "description": "Optional: reason for the state change",
                    },
                    "confidence": {
                        "type": "number",
                        "minimum": 0,
                        "maximum": 1,
                        "description": "Optional: new confidence score (0-1)",
                    },
                },
                "required": ["thoughtProductId", "state"],
            },
        ),
        Tool(
            name="turbot_link",
            description="Create an influence link between two thought products",
            inputSchema={
                "type": "object",
                "properties": {
                    "fromId": {
                        "type": "string",
                        "description": "The thought product that influences",
                    },
                    "toId": {
                        "type": "string",
                        "description": "The thought product that is influenced",
                    },
                },
                "required": ["fromId", "toId"],
            },
        ),
        Tool(
            name="turbot_notebook_create",
            description="Create a notebook for organizing thought products (e.g. Research Notes, Decision Log)",
            inputSchema={
                "type": "object",
                "properties": {
                    "workspaceId": _WORKSPACE_ID,
                    "name": {"type": "string", "description": "Name for the notebook"},
                    "description": {
                        "type": "string",
                        "description": "Optional description of the notebook's purpose",
                    },
                },
                "required": ["workspaceId", "name"],
            },
        ),
        Tool(
            name="turbot_notebook_add",
            description="Add a thought product to a notebook",
            inputSchema={
                "type": "object",
                "properties": {
                    "notebookId": {"type": "string", "description": "The notebook ID"},
                    "thoughtProductId": {
                        "type": "string",
                        "description": "The thought product ID to add",
                    },
                    "annotation": {
                        "type": "string",
                        "description": "Optional note about why it belongs in this notebook",
                    },
                },
                "required": ["notebookId", "thoughtProductId"],
            },
        ),
        Tool(
            name="turbot_notebook_list",
            description="List all notebooks in a workspace",
            inputSchema={
                "type": "object",
                "properties": {"workspaceId": _WORKSPACE_ID},
                "required": ["workspaceId"],
            },
        ),
        Tool(
            name="turbot_notebook_view",
            description="View a notebook including all its thought products",
            inputSchema={
                "type": "object",
                "properties": {
                    "notebookId": {"type": "string", "description": "The notebook ID to view"},
                },
                "required": ["notebookId"],
            },
        ),
        Tool(
            name="turbot_notebook_note",
            description="Add or replace the freeform notes of a notebook",
            inputSchema={
                "type": "object",
                "properties": {
                    "notebookId": {"type": "string", "description": "The notebook ID"},
                    "notes": {"type": "string", "description": "Markdown notes"},
                },
                "required": ["notebookId", "notes"],
            },
        ),
        Tool(
            name="turbot_notebook_remove",
            description="Remove a thought product from a notebook",
            inputSchema={
                "type": "object",
                "properties": {
                    "notebookId": {"type": "string", "description": "The notebook ID"},
                    "thoughtProductId": {
                        "type": "string",
                        "description": "The thought product ID to remove",
                    },
                },
                "required": ["notebookId", "thoughtProductId"],
            },
        ),
        Tool(
            name="turbot_persona_list",
            description="List all personas in a workspace with their traits and voice",
            inputSchema={
                "type": "object",
                "properties": {"workspaceId": _WORKSPACE_ID},
                "required": ["workspaceId"],
            },
        ),
        Tool(
            name="turbot_thought_list",
            description="List thought products in a workspace, optionally filtered by type or state",
            inputSchema={
                "type": "object",
                "properties": {
                    "workspaceId": _WORKSPACE_ID,
                    "type": {
                        "type": "string",
                        "enum": list(THOUGHT_PRODUCT_TYPES),
                        "description": "Filter by thought product type",
                    },
                    "state": {
                        "type": "string",
                        "enum": list(THOUGHT_PRODUCT_STATES),
                        "description": "Filter by state",
                    },
                    "limit": {
                        "type": "integer",
                        "minimum": 1,
                        "description": "Max results (default: 20)",
                    },
                },
                "required": ["workspaceId"],
            },
        ),
        Tool(
            name="turbot_output_list",
            description="List generated outputs in a workspace",
            inputSchema={
                "type": "object",
                "properties": {
                    "workspaceId": _WORKSPACE_ID,
                    "type": {
                        "type": "string",
                        "enum": list(OUTPUT_TYPES),
                        "description": "Filter by output type",
                    },
                },
                "required": ["workspaceId"],
            },
        ),
        Tool(
            name="turbot_search",
            description="Search thought products by keyword",
            inputSchema={
                "type": "object",
                "properties": {
                    "workspaceId": _WORKSPACE_ID,
                    "query": {"type": "string", "description": "Search keyword or phrase"},
                    "limit": {
                        "type": "integer",
                        "minimum": 1,
                        "description": "Max results (default: 10)",
                    },
                },
                "required": ["workspaceId", "query"],
            },
        ),
        Tool(
            name="turbot_mode",
            description=(
                "Initialize the Turbot methodology for this session. Returns Double Diamond "
                "guidance, current workspace context and a behavioural mode. Call this at the "
                "start of a thinking session."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "workspaceId": {
                        "type": "string",
                        "description": "The workspace ID to load context from",
                    },
                    "mode": {
                        "type": "string",
                        "enum": mode_names(),
                        "description": (
                            "Behavioural mode: capture (process data), think (strategic "
                            "analysis), create (generate deliverables), sim (persona embodiment)"
                        ),
                    },
                },
                "required": ["workspaceId"],
            },
        ),
        Tool(
            name="turbot_pipeline_status",
            description=(
                "Show pipeline position across the 8 stages: Research → Personas → Vision → "
                "Problems → Journeys → Concepts → Definition → Outputs."
            ),
            inputSchema={
                "type": "object",
                "properties": {"workspaceId": _WORKSPACE_ID},
                "required": ["workspaceId"],
            },
        ),
        Tool(
            name="turbot_evaluate",
            description=(
                "Evaluate a solution concept with the ADEPT framework (Attractive, Doable, "
                "Effective, Practical, Targetable). Returns ratings, evidence levels and "
                "de-risking recommendations, and saves the evaluation as an output."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "workspaceId": _WORKSPACE_ID,
                    "concept": {
                        "type": "string",
                        "description": "Description of the solution concept to evaluate",
                    },
                    "compareWith": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Optional: other concepts to compare against",
                    },
                },
                "required": ["workspaceId", "concept"],
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    try:
        result = await dispatch(name, arguments or {})
    except KeyError as err:
        result = f"Missing required argument: {err.args[0]}"
    except Exception as err:
        logger.exception("Tool %s failed", name)
        result = f"Error running {name}: {err}"

    return [TextContent(type="text", text=result)]


async def dispatch(name: str, arguments: dict) -> str:
    if name == "turbot_think":
        return await handle_think(
            workspace_id=arguments["workspaceId"],
            prompt=arguments["prompt"],
            method=arguments.get("method"),
            thread_id=arguments.get("threadId"),
        )
    if name == "turbot_capture":
        return await handle_capture(
            workspace_id=arguments["workspaceId"],
            type_=arguments["type"],
            content=arguments["content"],
            node_id=arguments.get("nodeId"),
        )
    if name == "turbot_status":
        return await handle_status(workspace_id=arguments["workspaceId"])
    if name == "turbot_workspace_create":
        return await handle_workspace_create(name=arguments["name"])
    if name == "turbot_workspace_list":
        return await handle_workspace_list()
    if name == "turbot_ground":
        return await handle_ground(
            workspace_id=arguments["workspaceId"],
            claim=arguments["claim"],
        )
    if name == "turbot_trace":
        return await handle_trace(tp_id=arguments["thoughtProductId"])
    if name == "turbot_sim":
        return await handle_sim(
            workspace_id=arguments["workspaceId"],
            prompt=arguments["prompt"],
            persona_id=arguments.get("personaId"),
            persona_sketch=arguments.get("personaSketch"),
        )
    if name == "turbot_create":
        return await handle_create(
            workspace_id=arguments["workspaceId"],
            type_=arguments["type"],
            context=arguments["context"],
        )
    if name == "turbot_evidence":
        return await handle_evidence(
            workspace_id=arguments["workspaceId"],
            tp_id=arguments["thoughtProductId"],
            type_=arguments["type"],
            content=arguments["content"],
            supports=bool(arguments["supports"]),
            source=arguments.get("source"),
        )
    if name == "turbot_update_state":
        return await handle_update_state(
            tp_id=arguments["thoughtProductId"],
            state=arguments["state"],
            reason=arguments.get("reason"),
            confidence=arguments.get("confidence"),
        )
    if name == "turbot_link":
        return await handle_link(from_id=arguments["fromId"], to_id=arguments["toId"])
    if name == "turbot_notebook_create":
        return await handle_notebook_create(
            workspace_id=arguments["workspaceId"],
            name=arguments["name"],
            description=arguments.get("description"),
        )
    if name == "turbot_notebook_add":
        return await handle_notebook_add(
            notebook_id=arguments["notebookId"],
            tp_id=arguments["thoughtProductId"],
            annotation=arguments.get("annotation"),
        )
    if name == "turbot_notebook_list":
        return await handle_notebook_list(workspace_id=arguments["workspaceId"])
    if name == "turbot_notebook_view":
        return await handle_notebook_view(notebook_id=arguments["notebookId"])
    if name == "turbot_notebook_note":
        return await handle_notebook_note(
            notebook_id=arguments["notebookId"],
            notes=arguments["notes"],
        )
    if name == "turbot_notebook_remove":
        return await handle_notebook_remove(
            notebook_id=arguments["notebookId"],
            tp_id=arguments["thoughtProductId"],
        )
    if name == "turbot_persona_list":
        return await handle_persona_list(workspace_id=arguments["workspaceId"])
    if name == "turbot_thought_list":
        return await handle_thought_list(
            workspace_id=arguments["workspaceId"],
            type_=arguments.get("type"),
            state=arguments.get("state"),
            limit=arguments.get("limit"),
        )
    if name == "turbot_output_list":
        return await handle_output_list(
            workspace_id=arguments["workspaceId"],
            type_=arguments.get("type"),
        )
    if name == "turbot_search":
        return await handle_search(
            workspace_id=arguments["workspaceId"],
            query=arguments["query"],
            limit=arguments.get("limit"),
        )
    if name == "turbot_mode":
        return await handle_mode(
            workspace_id=arguments["workspaceId"],
            mode=arguments.get("mode"),
        )
    if name == "turbot_pipeline_status":
        return await handle_pipeline_status(workspace_id=arguments["workspaceId"])
    if name == "turbot_evaluate":
        return await handle_evaluate(
            workspace_id=arguments["workspaceId"],
            concept=arguments["concept"],
            compare_with=arguments.get("compareWith"),
        )
    return f"Unknown tool: {name}"


def configure_logging() -> None:
    """Log to stderr; stdout carries the MCP protocol."""
    level = os.environ.get("TURBOT_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def main() -> None:
    configure_logging()
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
