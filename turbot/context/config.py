"""Tunable weights for relevance scoring and context assembly options."""

from dataclasses import dataclass, field

DEFAULT_STATE_WEIGHTS: dict[str, float] = {
    "validated": 10,
    "supported": 8,
    "challenged": 7,
    "claimed": 6,
    "surfaced": 5,
    "superseded": 1,
}

DEFAULT_TYPE_WEIGHTS: dict[str, float] = {
    "decision": 8,
    "principle": 7,
    "insight": 6,
    "assumption": 5,
    "tension": 5,
    "question": 4,
    "idea": 3,
    "claim": 3,
}


@dataclass(frozen=True)
class ScoringConfig:
    """Weights and constants of the relevance score.

    score = state + confidence * confidence_weight + type
            + log2(citations + 1) * citation_weight
            + recency_weight * 0.5 ** (age_days / half_life_days)
            + keyword matches * keyword_weight
    """

    state_weights: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_STATE_WEIGHTS))
    type_weights: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_TYPE_WEIGHTS))
    default_state_weight: float = 5
    default_type_weight: float = 3
    confidence_weight: float = 5
    citation_weight: float = 3
    recency_weight: float = 10
    half_life_days: float = 7
    keyword_weight: float = 2
    # query tokens must be longer than this to count
    min_keyword_length: int = 3


@dataclass(frozen=True)
class ContextOptions:
    max_thought_products: int = 15
    include_personas: bool = True
    include_recent_activity: bool = True


DEFAULT_SCORING = ScoringConfig()
