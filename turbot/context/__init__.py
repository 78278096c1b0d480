"""Relevance ranking and assembly of workspace context for prompts."""

from .assembly import EnhancedPrompt, assemble_context, enhance_prompt, enhance_prompt_with_context
from .config import ContextOptions, ScoringConfig
from .formatting import AssembledContext
from .ranking import group_by_type, select_thought_products
from .scoring import score_thought_product

__all__ = [
    "AssembledContext",
    "ContextOptions",
    "EnhancedPrompt",
    "ScoringConfig",
    "assemble_context",
    "enhance_prompt",
    "enhance_prompt_with_context",
    "group_by_type",
    "score_thought_product",
    "select_thought_products",
]
