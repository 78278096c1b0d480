"""Load prompts from prompts.md (SSOT)."""

import os
import re

_PROMPTS_PATH = os.path.join(os.path.dirname(__file__), "prompts.md")

_SECTION_RE = re.compile(r"^## (\S+)\s*\n+```\n(.*?)```", re.MULTILINE | re.DOTALL)

_prompts: dict[str, str] | None = None


def _load_prompts() -> dict[str, str]:
    """Parse prompts.md into a mapping of section key to prompt text."""
    global _prompts

    with open(_PROMPTS_PATH, "r", encoding="utf-8") as f:
        content = f.read()

    parsed = {key: body.strip() for key, body in _SECTION_RE.findall(content)}
    if "system/thinking" not in parsed:
        raise RuntimeError(f"Failed to parse prompts from {_PROMPTS_PATH}")
    _prompts = parsed
    return parsed


def get_prompt(key: str) -> str:
    prompts = _prompts if _prompts is not None else _load_prompts()
    try:
        return prompts[key]
    except KeyError:
        raise KeyError(f"Unknown prompt: {key}") from None


def method_names() -> list[str]:
    prompts = _prompts if _prompts is not None else _load_prompts()
    return [key.split("/", 1)[1] for key in prompts if key.startswith("method/")]


def get_method_prompt(method: str | None) -> str:
    """Method instructions, or "" for no/unknown method."""
    if not method:
        return ""
    try:
        return get_prompt(f"method/{method}")
    except KeyError:
        return ""


def build_method_prompt(prompt: str, method: str | None = None) -> str:
    """Prefix the user's input with the chosen thinking method, if any."""
    method_prompt = get_method_prompt(method)
    if not method_prompt:
        return prompt
    return f"{method_prompt}\n\n---\n\n**User's Input:**\n{prompt}"


def build_sim_prompt(name: str, traits: dict[str, str], voice: str | None = None) -> str:
    template = get_prompt("system/sim")

    items = traits.items() if isinstance(traits, dict) else []
    traits_block = "\n".join(f"- {k}: {v}" for k, v in items)
    if traits_block:
        traits_block = f"**Traits:**\n{traits_block}"
    voice_block = f"**Voice/Communication style:** {voice}" if voice else ""

    result = template.replace("{{name}}", name)
    result = result.replace("{{traits}}", traits_block)
    result = result.replace("{{voice}}", voice_block)
    return re.sub(r"\n{3,}", "\n\n", result)


def build_output_prompt(output_type: str) -> str:
    """System prompt for a generated document; types without a template use the spec one."""
    try:
        template = get_prompt(f"output/{output_type}")
    except KeyError:
        template = get_prompt("output/spec")

    result = get_prompt("system/output").replace("{{type}}", output_type.replace("_", " "))
    return result.replace("{{template}}", template)


def mode_names() -> list[str]:
    prompts = _prompts if _prompts is not None else _load_prompts()
    return [key.split("/", 1)[1] for key in prompts if key.startswith("mode/")]


def build_mode_prompt(mode: str, context_summary: str) -> str:
    """Methodology primer for a session mode; unknown modes use think."""
    try:
        guidance = get_prompt(f"mode/{mode}")
    except KeyError:
        guidance = get_prompt("mode/think")

    result = get_prompt("system/methodology").replace("{{mode}}", guidance)
    return result.replace("{{context}}", context_summary)


def build_evaluate_prompt(thought_products: str, personas: str) -> str:
    result = get_prompt("system/evaluate")
    result = result.replace("{{thought_products}}", thought_products or "No thought products yet")
    result = result.replace("{{personas}}", personas or "No personas defined yet")
    return result.replace("{{template}}", get_prompt("output/adept"))
