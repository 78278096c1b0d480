"""Rank and select thought products for context assembly."""

import logging
import math
from collections import Counter
from datetime import datetime

from ..store.types import ThoughtProduct
from .config import DEFAULT_SCORING, ScoringConfig
from .scoring import parse_timestamp, score_thought_product

logger = logging.getLogger(__name__)

EXCLUDED_STATES = frozenset({"abandoned"})


def select_thought_products(
    items: list[ThoughtProduct],
    query: str,
    limit: int,
    now: datetime,
    config: ScoringConfig = DEFAULT_SCORING,
) -> list[ThoughtProduct]:
    """Return at most `limit` eligible items, most relevant first.

    Ties are broken by newer `created_at`, then by id, so the order is stable
    across runs.
    """
    eligible = [tp for tp in items if tp.state not in EXCLUDED_STATES]
    if not eligible or limit <= 0:
        return []

    _warn_unrecognised(eligible, config)

    scored = [
        (score_thought_product(tp, query, now, config), _created_sort_key(tp), tp)
        for tp in eligible
    ]
    scored.sort(key=lambda entry: (-entry[0], -entry[1], str(entry[2].id)))
    return [tp for _, _, tp in scored[:limit]]


def group_by_type(items: list[ThoughtProduct]) -> dict[str, list[ThoughtProduct]]:
    """Group by type, keeping first-seen type order and the order inside groups."""
    grouped: dict[str, list[ThoughtProduct]] = {}
    for tp in items:
        grouped.setdefault(str(tp.type), []).append(tp)
    return grouped


def _created_sort_key(tp: ThoughtProduct) -> float:
    created = parse_timestamp(tp.created_at)
    return created.timestamp() if created else -math.inf


def _warn_unrecognised(items: list[ThoughtProduct], config: ScoringConfig) -> None:
    unknown_types = Counter(tp.type for tp in items if tp.type not in config.type_weights)
    unknown_states = Counter(tp.state for tp in items if tp.state not in config.state_weights)
    if unknown_types:
        logger.warning(
            "Scoring %d thought product(s) with default type weight, unrecognised types: %s",
            sum(unknown_types.values()),
            ", ".join(sorted(map(str, unknown_types))),
        )
    if unknown_states:
        logger.warning(
            "Scoring %d thought product(s) with default state weight, unrecognised states: %s",
            sum(unknown_states.values()),
            ", ".join(sorted(map(str, unknown_states))),
        )
