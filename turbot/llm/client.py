"""Generative backend calls using the Anthropic API."""

import os

import anthropic

from ..store.types import Evidence, Persona, ThoughtProduct
from .prompts import build_evaluate_prompt, build_output_prompt, build_sim_prompt, get_prompt

DEFAULT_MODEL = "claude-sonnet-4-20250514"
SUMMARY_PROMPT_CHARS = 500
SUMMARY_RESPONSE_CHARS = 1000


def get_model() -> str:
    return os.environ.get("TURBOT_MODEL") or DEFAULT_MODEL


def _client() -> anthropic.Anthropic:
    api_key = os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        raise RuntimeError("ANTHROPIC_API_KEY environment variable is required")
    return anthropic.Anthropic(api_key=api_key)


def _complete(system: str, messages: list[dict], max_tokens: int) -> str:
    response = _client().messages.create(
        model=get_model(),
        max_tokens=max_tokens,
        system=system,
        messages=messages,
    )
    return "".join(block.text for block in response.content if block.type == "text")


async def generate_thinking_response(
    prompt: str,
    history: list[dict] | None = None,
) -> str:
    """Continue a thinking thread with an (already context-enhanced) prompt."""
    messages = [*(history or []), {"role": "user", "content": prompt}]
    return _complete(get_prompt("system/thinking"), messages, max_tokens=2048)


async def analyze_grounding(
    claim: str,
    thought_products: list[ThoughtProduct],
    evidence: list[Evidence],
) -> str:
    if thought_products:
        tp_context = "Existing thought products:\n" + "\n".join(
            f"- [{tp.type}] {tp.content} (state: {tp.state})" for tp in thought_products
        )
    else:
        tp_context = "No existing thought products in this workspace."

    evidence_context = ""
    if evidence:
        evidence_context = "\n\nExisting evidence:\n" + "\n".join(
            f"- {'Supporting' if e.supports else 'Challenging'}: {e.content}"
            + (f" (source: {e.source})" if e.source else "")
            for e in evidence
        )

    content = (
        f'Analyze how well this claim is grounded:\n\n"{claim}"\n\n'
        f"{tp_context}{evidence_context}"
    )
    return _complete(
        get_prompt("system/grounding"),
        [{"role": "user", "content": content}],
        max_tokens=1024,
    )


async def simulate_persona(persona: Persona, prompt: str) -> str:
    system = build_sim_prompt(persona.name, persona.traits, persona.voice)
    return _complete(system, [{"role": "user", "content": prompt}], max_tokens=1024)


async def generate_output(
    output_type: str,
    context: str,
    thought_products: list[ThoughtProduct],
) -> str:
    if thought_products:
        tp_context = "\n".join(
            f"- [{tp.type}] {tp.content} ({tp.state})" for tp in thought_products
        )
    else:
        tp_context = "No thought products available."

    return _complete(
        build_output_prompt(output_type),
        [{"role": "user", "content": f"Context: {context}\n\nExisting knowledge:\n{tp_context}"}],
        max_tokens=2048,
    )


async def evaluate_concepts(
    concepts: list[str],
    thought_products: list[ThoughtProduct],
    personas: list[Persona],
) -> str:
    """ADEPT evaluation of one concept, or a comparison of several."""
    tp_context = "\n".join(f"[{tp.type}] {tp.content}" for tp in thought_products)
    persona_context = "\n".join(
        f"- {p.name}: {p.voice or 'No voice defined'}" for p in personas
    )

    if len(concepts) > 1:
        numbered = "\n\n".join(f"Concept {i}: {c}" for i, c in enumerate(concepts, start=1))
        content = (
            "Evaluate and compare these solution concepts using the ADEPT framework:\n\n"
            f"{numbered}"
        )
    else:
        content = (
            "Evaluate this solution concept using the ADEPT framework:\n\n"
            f"Concept: {concepts[0]}"
        )

    return _complete(
        build_evaluate_prompt(tp_context, persona_context),
        [{"role": "user", "content": content}],
        max_tokens=4000,
    )


async def summarize_exchange(user_prompt: str, response: str) -> str:
    """One or two sentence summary of a thinking exchange."""
    content = (
        f'User asked: "{_abbreviate(user_prompt, SUMMARY_PROMPT_CHARS)}"\n\n'
        f'Response (abbreviated): "{_abbreviate(response, SUMMARY_RESPONSE_CHARS)}"'
    )
    return _complete(
        get_prompt("system/summary"),
        [{"role": "user", "content": content}],
        max_tokens=150,
    )


def _abbreviate(text: str, limit: int) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."
