"""Relevance scoring for thought products.

Malformed fields contribute a neutral value instead of raising.
"""

import math
from datetime import datetime, timezone

from ..store.types import ThoughtProduct
from .config import DEFAULT_SCORING, ScoringConfig

SECONDS_PER_DAY = 60 * 60 * 24


def score_thought_product(
    tp: ThoughtProduct,
    query: str,
    now: datetime,
    config: ScoringConfig = DEFAULT_SCORING,
) -> float:
    """Relevance of a thought product to a query. Higher = more relevant."""
    return (
        state_weight(tp.state, config)
        + confidence_weight(tp.confidence, config)
        + type_weight(tp.type, config)
        + citation_weight(tp.citation_count, config)
        + recency_weight(tp.created_at, now, config)
        + keyword_weight(tp.content, query, config)
    )


def state_weight(state: object, config: ScoringConfig = DEFAULT_SCORING) -> float:
    if not isinstance(state, str):
        return config.default_state_weight
    return config.state_weights.get(state, config.default_state_weight)


def type_weight(type_: object, config: ScoringConfig = DEFAULT_SCORING) -> float:
    if not isinstance(type_, str):
        return config.default_type_weight
    return config.type_weights.get(type_, config.default_type_weight)


def confidence_weight(confidence: object, config: ScoringConfig = DEFAULT_SCORING) -> float:
    value = _finite_or_zero(confidence)
    return max(0.0, min(1.0, value)) * config.confidence_weight


def citation_weight(citation_count: object, config: ScoringConfig = DEFAULT_SCORING) -> float:
    """log2(count + 1) scaled by the citation weight."""
    count = max(0.0, _finite_or_zero(citation_count))
    return math.log2(count + 1) * config.citation_weight


def recency_weight(
    created_at: object,
    now: datetime,
    config: ScoringConfig = DEFAULT_SCORING,
) -> float:
    """Exponential decay with a configurable half-life."""
    created = parse_timestamp(created_at)
    if created is None or config.half_life_days <= 0:
        return 0.0
    age_days = max(0.0, (_as_utc(now) - created).total_seconds() / SECONDS_PER_DAY)
    return config.recency_weight * math.pow(0.5, age_days / config.half_life_days)


def keyword_weight(content: object, query: str, config: ScoringConfig = DEFAULT_SCORING) -> float:
    if not query or not isinstance(content, str):
        return 0.0
    content_lower = content.lower()
    words = [w for w in query.lower().split() if len(w) > config.min_keyword_length]
    matches = sum(1 for w in words if w in content_lower)
    return matches * config.keyword_weight


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp, assuming UTC when no offset is given."""
    if isinstance(value, datetime):
        return _as_utc(value)
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return _as_utc(parsed)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _finite_or_zero(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    number = float(value)
    return number if math.isfinite(number) else 0.0
