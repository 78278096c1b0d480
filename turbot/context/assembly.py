"""Assemble workspace context and splice it into prompts.

Context enrichment is best-effort: a failed read degrades its section to
empty, and a failed assembly degrades the prompt to the raw query.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, TypeVar

from ..store.workspace import WorkspaceStore
from .config import DEFAULT_SCORING, ContextOptions, ScoringConfig
from .formatting import (
    MAX_PERSONAS,
    AssembledContext,
    format_personas,
    format_recent_activity,
    format_thought_products,
)
from .ranking import group_by_type, select_thought_products

logger = logging.getLogger(__name__)

RECENT_MESSAGE_LIMIT = 5
CONTEXT_SEPARATOR = "\n\n---\n\n"

T = TypeVar("T")


def assemble_context(
    workspace_id: str,
    query: str,
    options: ContextOptions | None = None,
    *,
    store: WorkspaceStore | None = None,
    now: datetime | None = None,
    config: ScoringConfig = DEFAULT_SCORING,
) -> AssembledContext:
    """Select and format the workspace knowledge most relevant to `query`.

    `store` defaults to a fresh WorkspaceStore that is closed afterwards.
    `now` defaults to the current UTC time and is only used for recency decay.
    """
    opts = options or ContextOptions()
    current = now or datetime.now(timezone.utc)

    owned = store is None
    if store is None:
        try:
            store = WorkspaceStore()
        except Exception:
            logger.warning("Workspace store unavailable, assembling empty context", exc_info=True)
            return AssembledContext()

    try:
        thought_products = _safe_fetch(
            "thought products", lambda: store.list_context_thought_products(workspace_id)
        )
        personas = (
            _safe_fetch("personas", lambda: store.list_personas(workspace_id, limit=MAX_PERSONAS))
            if opts.include_personas
            else []
        )
        recent = (
            _safe_fetch(
                "recent activity",
                lambda: store.recent_assistant_messages(workspace_id, limit=RECENT_MESSAGE_LIMIT),
            )
            if opts.include_recent_activity
            else []
        )
    finally:
        if owned:
            store.close()

    selected = select_thought_products(
        thought_products, query, opts.max_thought_products, current, config
    )
    return AssembledContext(
        thought_products=_safe_format(
            "thought products", lambda: format_thought_products(group_by_type(selected))
        ),
        personas=_safe_format("personas", lambda: format_personas(personas)),
        recent_activity=_safe_format("recent activity", lambda: format_recent_activity(recent)),
    )


def enhance_prompt(context_text: str, raw_query: str) -> str:
    """Prefix the raw query with workspace context, if there is any."""
    if not context_text:
        return raw_query
    return f"{context_text}{CONTEXT_SEPARATOR}User's current focus: {raw_query}"


@dataclass(frozen=True)
class EnhancedPrompt:
    """Outcome of prompt enhancement.

    `context` is None when enhancement fell back to the raw query, in which
    case `fallback_reason` says why.
    """

    text: str
    context: AssembledContext | None = None
    fallback_reason: str | None = None

    @property
    def used_context(self) -> bool:
        return self.context is not None and not self.context.is_empty


def enhance_prompt_with_context(
    workspace_id: str,
    raw_query: str,
    options: ContextOptions | None = None,
    *,
    store: WorkspaceStore | None = None,
    now: datetime | None = None,
    config: ScoringConfig = DEFAULT_SCORING,
    scoring_query: str | None = None,
) -> EnhancedPrompt:
    """Build the generative-backend prompt for `raw_query`. Never raises.

    `scoring_query` lets callers rank knowledge against a different text than
    the one presented (e.g. the user's words without a method preamble).
    """
    try:
        context = assemble_context(
            workspace_id,
            scoring_query if scoring_query is not None else raw_query,
            options,
            store=store,
            now=now,
            config=config,
        )
        return EnhancedPrompt(text=enhance_prompt(context.full, raw_query), context=context)
    except Exception as err:
        logger.warning("Context assembly failed, using raw prompt: %s", err, exc_info=True)
        return EnhancedPrompt(text=raw_query, fallback_reason=str(err) or type(err).__name__)


def _safe_fetch(label: str, fetch: Callable[[], list[T]]) -> list[T]:
    try:
        return list(fetch() or [])
    except Exception:
        logger.warning("Failed to load %s for context, treating as empty", label, exc_info=True)
        return []


def _safe_format(label: str, render: Callable[[], str]) -> str:
    try:
        return render()
    except Exception:
        logger.warning(
            "Failed to format %s for context, leaving section empty", label, exc_info=True
        )
        return ""
