"""Parse thought products and persona feedback out of model responses."""

import re
from dataclasses import dataclass

THOUGHT_PRODUCT_LABELS = {
    "insight": "Insight",
    "assumption": "Assumption",
    "decision": "Decision",
    "question": "Question",
    "tension": "Tension",
    "idea": "Idea",
    "claim": "Claim",
    "principle": "Principle",
}

FEEDBACK_LABELS = {
    "validation": "Validation",
    "concern": "Concern",
    "question": "Question",
}

# runs to the end of the line or the next bold label
_ITEM_TAIL = r"[ \t]*(.+?)[ \t]*(?=\*\*(?-i:[A-Z])|\n|$)"


@dataclass
class ExtractedItem:
    type: str
    content: str


def _extract(response: str, labels: dict[str, str]) -> list[ExtractedItem]:
    items: list[ExtractedItem] = []
    for type_, label in labels.items():
        pattern = re.compile(rf"\*\*{label}:\*\*{_ITEM_TAIL}", re.IGNORECASE)
        for match in pattern.finditer(response):
            content = match.group(1).strip()
            if content:
                items.append(ExtractedItem(type=type_, content=content))
    return items


def extract_thought_products(response: str) -> list[ExtractedItem]:
    """Find `**Insight:** ...` style call-outs, grouped by type."""
    return _extract(response, THOUGHT_PRODUCT_LABELS)


def extract_persona_feedback(response: str) -> list[ExtractedItem]:
    """Find `**Validation:**`, `**Concern:**` and `**Question:**` call-outs."""
    return _extract(response, FEEDBACK_LABELS)


def feedback_to_thought_product_type(feedback_type: str) -> str:
    if feedback_type == "validation":
        return "insight"
    if feedback_type == "concern":
        return "tension"
    return "question"
