"""Status tools — workspace progress summary and pipeline position."""

from ..store.types import Output, Persona, ThoughtProduct
from ..store.workspace import WorkspaceStore

PIPELINE_STAGES = (
    "Research",
    "Personas",
    "Vision",
    "Problems",
    "Journeys",
    "Concepts",
    "Definition",
    "Outputs",
)


def pipeline_progress(
    thought_products: list[ThoughtProduct],
    personas: list[Persona],
    outputs: list[Output],
) -> dict[str, bool]:
    """Which pipeline stages have at least some material."""
    types = {tp.type for tp in thought_products}
    output_types = {o.type for o in outputs}
    return {
        "Research": "insight" in types,
        "Personas": bool(personas),
        "Vision": "principle" in types
        or any("vision" in tp.content.lower() for tp in thought_products),
        "Problems": bool(types & {"tension", "question"}),
        "Journeys": "journey" in output_types,
        "Concepts": "idea" in types,
        "Definition": bool(output_types & {"spec", "design_brief"}),
        "Outputs": bool(outputs),
    }


def render_pipeline(progress: dict[str, bool]) -> str:
    return " → ".join(
        f"{stage} {'●' if progress[stage] else '○'}" for stage in PIPELINE_STAGES
    )


async def handle_status(workspace_id: str) -> str:
    """Summarise workspace progress and suggest next steps."""
    with WorkspaceStore() as store:
        thought_products = store.list_thought_products(workspace_id)
        personas = store.list_personas(workspace_id)
        outputs = store.list_outputs(workspace_id)
        evidence = store.list_evidence(workspace_id=workspace_id)
        notebooks = store.list_notebooks(workspace_id)
        stats = store.stats(workspace_id)

    progress = pipeline_progress(thought_products, personas, outputs)
    pipeline = f"## Pipeline Status\n{render_pipeline(progress)}"

    if not thought_products:
        return (
            f"{pipeline}\n\n"
            "Workspace is empty. Use turbot_think or turbot_capture to start building knowledge."
        )

    sections = [
        pipeline,
        "## Summary\n"
        f"Thought Products: {stats['total']} | Personas: {len(personas)} | "
        f"Outputs: {len(outputs)} | Notebooks: {len(notebooks)}",
        "## By Type\n" + "\n".join(f"  {t}: {c}" for t, c in stats["byType"].items()),
        "## By State\n" + "\n".join(f"  {s}: {c}" for s, c in stats["byState"].items()),
    ]

    established = [tp for tp in thought_products if tp.state in ("validated", "supported")]
    assumed = [
        tp for tp in thought_products if tp.state == "surfaced" and tp.type == "assumption"
    ]

    if established:
        sections.append(
            "## What's Established\n"
            + "\n".join(f"- [{tp.type}] {tp.content[:60]}..." for tp in established[:5])
        )
    if assumed:
        sections.append(
            f"## What's Assumed ({len(assumed)} unvalidated)\n"
            + "\n".join(f"- {tp.content[:60]}..." for tp in assumed[:5])
        )
    if evidence:
        supporting = sum(1 for e in evidence if e.supports)
        sections.append(
            f"## Evidence\n{supporting} supporting, {len(evidence) - supporting} challenging"
        )
    if notebooks:
        sections.append("## Notebooks\n" + "\n".join(f"- {nb.name}" for nb, _ in notebooks))

    sections.append(
        "## Suggested Next Steps\n"
        + "\n".join(_suggestions(progress, len(assumed), len(thought_products), bool(notebooks)))
    )
    return "\n\n".join(sections)


def _suggestions(
    progress: dict[str, bool],
    assumed_count: int,
    total: int,
    has_notebooks: bool,
) -> list[str]:
    if not progress["Personas"]:
        first = "Create personas with turbot_sim to sharpen your understanding"
    elif assumed_count > 3:
        first = "Validate assumptions: use turbot_ground to check what supports them"
    elif not progress["Journeys"]:
        first = 'Map a user journey with turbot_create type="journey"'
    elif progress["Concepts"] and not progress["Definition"]:
        first = "Create a spec or design brief with turbot_create"
    else:
        first = "Continue exploring with turbot_think"

    steps = [f"1. {first}"]
    if not has_notebooks and total > 5:
        steps.append(
            '2. Organize findings with turbot_notebook_create (e.g., "Research Notes", "Decision Log")'
        )
    return steps


def stage_completion(
    thought_products: list[ThoughtProduct],
    personas: list[Persona],
    outputs: list[Output],
) -> dict[str, bool]:
    """Which methodology stages are complete, judged on live knowledge."""
    live = [tp for tp in thought_products if tp.state != "abandoned"]
    output_types = {o.type for o in outputs}
    return {
        "Research": any(tp.type == "insight" for tp in live),
        "Personas": bool(personas),
        "Vision": any(tp.type == "principle" for tp in thought_products)
        or "design_brief" in output_types,
        "Problems": any(tp.type in ("tension", "question") for tp in live),
        "Journeys": "journey" in output_types,
        "Concepts": any(tp.type in ("idea", "claim") for tp in live),
        "Definition": any(
            tp.type == "decision" and tp.state in ("validated", "supported")
            for tp in thought_products
        ),
        "Outputs": bool(output_types & {"spec", "roadmap", "epics", "handoff_notes"}),
    }


async def handle_pipeline_status(workspace_id: str) -> str:
    """Where the workspace sits in the eight-stage pipeline, and the next step."""
    with WorkspaceStore() as store:
        thought_products = store.list_thought_products(workspace_id)
        personas = store.list_personas(workspace_id)
        outputs = store.list_outputs(workspace_id)

    stages = stage_completion(thought_products, personas, outputs)
    pipeline = " → ".join(
        f"{'●' if stages[stage] else '○'} {stage}" for stage in PIPELINE_STAGES
    )

    pending = [stage for stage in PIPELINE_STAGES if not stages[stage]]
    focus = (
        f"Working toward: {pending[0]}"
        if pending
        else "All stages complete! Ready for implementation."
    )

    established = [tp for tp in thought_products if tp.state in ("validated", "supported")]
    assumed = [
        tp
        for tp in thought_products
        if tp.type == "assumption" and tp.state not in ("validated", "abandoned")
    ]

    text = f"## Pipeline Status\n{pipeline}\n\n## Current Focus\n{focus}"
    if established:
        text += f"\n\n## What's Established\n{len(established)} validated thought products"
    if assumed:
        text += (
            f"\n\n## What's Assumed\n{len(assumed)} unvalidated assumptions"
            " - consider using turbot_ground"
        )
    return f"{text}\n\n## Suggested Next Step\n{_next_step(stages, len(assumed))}"


def _next_step(stages: dict[str, bool], assumed_count: int) -> str:
    if not stages["Research"]:
        return "Start by exploring your problem space with `turbot_think` to surface insights."
    if not stages["Personas"]:
        return "Create personas with `turbot_sim` to ground your understanding in real user types."
    if not stages["Problems"]:
        return "Frame the problem with `turbot_think`: identify tensions and key questions."
    if not stages["Concepts"]:
        return "Generate solution concepts with `turbot_think` and explore different approaches."
    if not stages["Journeys"]:
        return 'Map user journeys with `turbot_create type="journey"` to see the full experience.'
    if assumed_count > 3:
        return "Validate assumptions with `turbot_ground` before moving to definition."
    if not stages["Definition"]:
        return "Converge on decisions: use `turbot_evaluate` to assess your concepts."
    if not stages["Outputs"]:
        return 'Generate handoff outputs with `turbot_create type="epics"` or `type="roadmap"`.'
    return 'Pipeline complete! Review with `turbot_create type="handoff_notes"`.'
