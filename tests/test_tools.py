"""Tests for MCP tool handlers."""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from turbot.tools.evaluate import handle_evaluate
from turbot.tools.mode import handle_mode, summarize_workspace
from turbot.tools.notebook import (
    handle_notebook_add,
    handle_notebook_create,
    handle_notebook_list,
    handle_notebook_note,
    handle_notebook_remove,
    handle_notebook_view,
)
from turbot.tools.outputs import handle_create, handle_output_list
from turbot.tools.sim import handle_persona_list, handle_sim, parse_persona_sketch
from turbot.tools.status import (
    handle_pipeline_status,
    handle_status,
    pipeline_progress,
    render_pipeline,
    stage_completion,
)
from turbot.tools.think import handle_ground, handle_think
from turbot.tools.thoughts import (
    handle_capture,
    handle_evidence,
    handle_link,
    handle_search,
    handle_thought_list,
    handle_trace,
    handle_update_state,
)
from turbot.tools.workspace import handle_workspace_create, handle_workspace_list

THINKING_RESPONSE = (
    "Seat pricing fits how teams buy. It scales with value.\n\n"
    "- **Decision:** Keep seat-based pricing\n"
    "- **Assumption:** Teams grow steadily"
)


class TestWorkspaceTools:
    @pytest.mark.asyncio
    async def test_create_and_list(self):
        created = await handle_workspace_create("  Pricing  ")
        listing = await handle_workspace_list()

        assert created.startswith('Created workspace "Pricing" with ID: ')
        assert "- Pricing (" in listing

    @pytest.mark.asyncio
    async def test_empty_name(self):
        assert "must not be empty" in await handle_workspace_create("   ")

    @pytest.mark.asyncio
    async def test_no_workspaces(self):
        assert (await handle_workspace_list()).startswith("No workspaces found")


class TestThoughtTools:
    """Tests for capture, listing, search and lifecycle tools."""

    @pytest.mark.asyncio
    async def test_capture_and_list(self, store, workspace_id):
        result = await handle_capture(workspace_id, "insight", "Buyers compare on price")

        assert result.startswith('Captured insight: "Buyers compare on price"')
        listing = await handle_thought_list(workspace_id)
        assert listing.startswith("# Thought Products (1)")
        assert "**[INSIGHT]** Buyers compare on price" in listing

    @pytest.mark.asyncio
    async def test_capture_rejects_unknown_type(self, workspace_id):
        result = await handle_capture(workspace_id, "hunch", "Maybe")
        assert result == "Error capturing thought product: unknown type 'hunch'"

    @pytest.mark.asyncio
    async def test_list_empty_with_filters(self, workspace_id):
        result = await handle_thought_list(workspace_id, type_="idea", state="validated")
        assert result == 'No thought products found of type "idea" in state "validated".'

    @pytest.mark.asyncio
    async def test_search(self, store, workspace_id):
        store.insert_thought_product(workspace_id, "insight", "Trial users churn in week 2")

        found = await handle_search(workspace_id, "churn")
        missing = await handle_search(workspace_id, "pricing")

        assert found.startswith('# Search Results for "churn" (1 matches)')
        assert missing == 'No thought products found matching "pricing".'

    @pytest.mark.asyncio
    async def test_update_state(self, store, workspace_id):
        tp = store.insert_thought_product(workspace_id, "claim", "Teams will pay")

        result = await handle_update_state(tp.id, "validated", "Interviews agree", 0.9)

        assert result.startswith('State updated to "validated" with confidence 0.9')
        assert "Reason: Interviews agree" in result
        assert store.get_thought_product(tp.id).state == "validated"

    @pytest.mark.asyncio
    async def test_update_state_errors(self, workspace_id):
        assert "unknown state" in await handle_update_state("x", "pondering")
        assert await handle_update_state("missing", "validated") == (
            "Error updating state: Thought product not found: missing"
        )

    @pytest.mark.asyncio
    async def test_link_and_trace(self, store, workspace_id):
        a = store.insert_thought_product(workspace_id, "insight", "Teams buy bottom-up")
        b = store.insert_thought_product(workspace_id, "decision", "Offer a free team plan")

        linked = await handle_link(a.id, b.id)
        trace = await handle_trace(b.id)

        assert linked.startswith("Link created:")
        assert "Influenced by (1):" in trace
        assert "← [insight] Teams buy bottom-up..." in trace
        assert "Evidence: (none attached)" in trace

    @pytest.mark.asyncio
    async def test_self_link_rejected(self):
        assert await handle_link("a", "a") == "A thought product cannot influence itself."

    @pytest.mark.asyncio
    async def test_trace_missing(self):
        assert await handle_trace("missing") == "Thought product not found: missing"

    @pytest.mark.asyncio
    async def test_evidence_suggestions(self, store, workspace_id):
        tp = store.insert_thought_product(workspace_id, "claim", "Teams will pay")

        first = await handle_evidence(workspace_id, tp.id, "quote", "We'd pay", True)
        second = await handle_evidence(workspace_id, tp.id, "data", "Low conversion", False)

        assert first.endswith('Consider updating state to "supported"')
        assert "Total evidence: 1 supporting, 1 challenging" in second
        assert second.endswith("Mixed evidence: may indicate a tension")

    @pytest.mark.asyncio
    async def test_evidence_errors(self, workspace_id):
        assert "unknown evidence type" in await handle_evidence(
            workspace_id, "x", "rumour", "?", True
        )
        assert await handle_evidence(workspace_id, "missing", "data", "42", True) == (
            "Error adding evidence: Thought product not found: missing"
        )


class TestThinkTool:
    """Tests for context-enhanced thinking."""

    @pytest.mark.asyncio
    async def test_prompt_carries_workspace_context(self, store, workspace_id):
        store.insert_thought_product(
            workspace_id, "decision", "Pricing follows seats", state="validated"
        )

        with patch(
            "turbot.llm.client.generate_thinking_response", return_value=THINKING_RESPONSE
        ) as generate, patch("turbot.llm.client.summarize_exchange", return_value="Summary."):
            result = await handle_think(workspace_id, "How should pricing evolve?")

        sent_prompt = generate.call_args.args[0]
        assert sent_prompt.startswith("## Relevant Knowledge")
        assert "- ✓ Pricing follows seats" in sent_prompt
        assert sent_prompt.endswith("User's current focus: How should pricing evolve?")
        assert result.startswith(THINKING_RESPONSE)
        assert "Extracted 2 thought product(s)" in result
        assert "Thread: " in result

        contents = {tp.content for tp in store.list_thought_products(workspace_id)}
        assert {"Keep seat-based pricing", "Teams grow steadily"} <= contents

    @pytest.mark.asyncio
    async def test_follow_up_uses_history_and_recent_thinking(self, store, workspace_id):
        with patch(
            "turbot.llm.client.generate_thinking_response", return_value=THINKING_RESPONSE
        ) as generate, patch("turbot.llm.client.summarize_exchange", return_value=""):
            first = await handle_think(workspace_id, "Pricing?")
            thread_id = first.rsplit("Thread: ", 1)[1].split(" |")[0]
            await handle_think(workspace_id, "And discounts?", thread_id=thread_id)

        prompt, history = generate.call_args.args
        assert "## Recent Thinking\n\n- Seat pricing fits how teams buy." in prompt
        assert [m["role"] for m in history] == ["user", "assistant"]

    @pytest.mark.asyncio
    async def test_empty_workspace_sends_raw_prompt(self, workspace_id):
        with patch(
            "turbot.llm.client.generate_thinking_response", return_value="Plain answer."
        ) as generate, patch("turbot.llm.client.summarize_exchange", return_value=""):
            await handle_think(workspace_id, "Where do we start?")

        assert generate.call_args.args[0] == "Where do we start?"

    @pytest.mark.asyncio
    async def test_context_failure_sends_raw_prompt(self, workspace_id):
        with patch(
            "turbot.context.assembly.assemble_context", side_effect=RuntimeError("boom")
        ), patch(
            "turbot.llm.client.generate_thinking_response", return_value="Plain answer."
        ) as generate, patch("turbot.llm.client.summarize_exchange", return_value=""):
            result = await handle_think(workspace_id, "Where do we start?")

        assert generate.call_args.args[0] == "Where do we start?"
        assert result.startswith("Plain answer.")

    @pytest.mark.asyncio
    async def test_method_is_applied(self, workspace_id):
        with patch(
            "turbot.llm.client.generate_thinking_response", return_value="Why chain."
        ) as generate, patch("turbot.llm.client.summarize_exchange", return_value=""):
            await handle_think(workspace_id, "Trials stall", method="5whys")

        assert generate.call_args.args[0].startswith("## Method: 5 Whys")

    @pytest.mark.asyncio
    async def test_backend_failure(self, workspace_id):
        with patch(
            "turbot.llm.client.generate_thinking_response",
            side_effect=RuntimeError("overloaded"),
        ):
            result = await handle_think(workspace_id, "Anything")

        assert result == "Error generating response: overloaded"

    @pytest.mark.asyncio
    async def test_summary_failure_is_not_fatal(self, workspace_id):
        with patch(
            "turbot.llm.client.generate_thinking_response", return_value="Fine."
        ), patch("turbot.llm.client.summarize_exchange", side_effect=RuntimeError("nope")):
            result = await handle_think(workspace_id, "Anything")

        assert result.startswith("Fine.")

    @pytest.mark.asyncio
    async def test_unknown_thread(self, workspace_id):
        assert await handle_think(workspace_id, "x", thread_id="missing") == (
            "Thread not found: missing"
        )

    @pytest.mark.asyncio
    async def test_ground(self, store, workspace_id):
        store.insert_thought_product(workspace_id, "insight", "Teams buy bottom-up")

        with patch(
            "turbot.llm.client.analyze_grounding", return_value="Confidence: 0.6"
        ) as analyze:
            result = await handle_ground(workspace_id, "Teams will self-serve")

        assert result == 'Grounding Analysis for: "Teams will self-serve"\n\nConfidence: 0.6'
        assert len(analyze.call_args.args[1]) == 1


class TestSimTools:
    """Tests for persona simulation."""

    def test_parse_persona_sketch(self):
        assert parse_persona_sketch("busy founder, technical, skeptical") == (
            "busy founder",
            {"trait_1": "technical", "trait_2": "skeptical"},
        )
        assert parse_persona_sketch("") == ("User", {})

    @pytest.mark.asyncio
    async def test_sketch_creates_persona_and_captures_feedback(self, store, workspace_id):
        response = "**Concern:** Setup looks long\n**Validation:** Trial is generous"

        with patch("turbot.llm.client.simulate_persona", return_value=response):
            result = await handle_sim(workspace_id, "Thoughts?", persona_sketch="Dana, founder")
            await handle_sim(workspace_id, "Again?", persona_sketch="Dana, founder")

        assert result.startswith("**Dana** responds:")
        assert "Captured 2 feedback item(s)" in result
        assert len(store.list_personas(workspace_id)) == 1
        tensions = store.list_thought_products(workspace_id, type_="tension")
        assert tensions[0].content == "[From Dana] Setup looks long"

    @pytest.mark.asyncio
    async def test_requires_persona(self, workspace_id):
        assert await handle_sim(workspace_id, "Hi") == (
            "Either personaId or personaSketch is required"
        )
        assert await handle_sim(workspace_id, "Hi", persona_id="missing") == (
            "Persona not found: missing"
        )

    @pytest.mark.asyncio
    async def test_persona_list(self, store, workspace_id):
        assert (await handle_persona_list(workspace_id)).startswith("No personas")
        store.create_persona(workspace_id, "Dana", {"role": "founder"})

        listing = await handle_persona_list(workspace_id)

        assert listing.startswith("# Personas (1)")
        assert "**Traits:** founder" in listing


class TestOutputTools:
    """Tests for grounded document generation."""

    @pytest.mark.asyncio
    async def test_create_cites_grounding(self, store, workspace_id):
        tp = store.insert_thought_product(workspace_id, "decision", "Per seat", confidence=0.9)

        with patch("turbot.llm.client.generate_output", return_value="# Spec\nBody"):
            result = await handle_create(workspace_id, "spec", "Pricing v1")

        assert result.startswith("# Spec\nBody\n\n---\nOutput ID: ")
        assert result.endswith("Grounded in 1 thought products")
        assert store.get_thought_product(tp.id).citation_count == 1

        listing = await handle_output_list(workspace_id)
        assert "**SPEC**" in listing
        assert "Preview: # Spec" in listing

    @pytest.mark.asyncio
    async def test_unknown_type(self, workspace_id):
        assert "unknown output type" in await handle_create(workspace_id, "poem", "x")

    @pytest.mark.asyncio
    async def test_empty_list(self, workspace_id):
        assert (await handle_output_list(workspace_id, "roadmap")).startswith(
            'No outputs found of type "roadmap".'
        )


class TestStatusTool:
    """Tests for the workspace status summary."""

    @pytest.mark.asyncio
    async def test_empty_workspace(self, workspace_id):
        result = await handle_status(workspace_id)

        assert result.startswith("## Pipeline Status\nResearch ○ → Personas ○")
        assert "Workspace is empty" in result

    @pytest.mark.asyncio
    async def test_summary_sections(self, store, workspace_id):
        store.insert_thought_product(workspace_id, "insight", "Buyers compare", state="validated")
        store.insert_thought_product(workspace_id, "assumption", "Teams grow")

        result = await handle_status(workspace_id)

        assert "Research ●" in result
        assert "## Summary\nThought Products: 2 | Personas: 0" in result
        assert "## What's Established\n- [insight] Buyers compare..." in result
        assert "## What's Assumed (1 unvalidated)" in result
        assert "1. Create personas with turbot_sim" in result

    def test_pipeline_rendering(self, make_tp):
        progress = pipeline_progress([make_tp(type_="idea")], [], [])

        assert progress["Concepts"] is True
        assert progress["Research"] is False
        assert render_pipeline(progress).endswith("Concepts ● → Definition ○ → Outputs ○")


class TestPipelineStatusTool:
    """Tests for the eight-stage pipeline position."""

    @pytest.mark.asyncio
    async def test_empty_workspace(self, workspace_id):
        result = await handle_pipeline_status(workspace_id)

        assert result.startswith(
            "## Pipeline Status\n○ Research → ○ Personas → ○ Vision → ○ Problems"
        )
        assert "## Current Focus\nWorking toward: Research" in result
        assert "What's Established" not in result
        assert "What's Assumed" not in result
        assert result.endswith(
            "## Suggested Next Step\n"
            "Start by exploring your problem space with `turbot_think` to surface insights."
        )

    def test_stage_rules(self, make_tp, make_persona):
        stages = stage_completion(
            [
                make_tp(type_="insight", state="abandoned"),
                make_tp(type_="claim"),
                make_tp(type_="decision", state="supported"),
                make_tp(type_="question", state="abandoned"),
            ],
            [make_persona()],
            [SimpleNamespace(type="design_brief"), SimpleNamespace(type="persona")],
        )

        assert stages == {
            "Research": False,
            "Personas": True,
            "Vision": True,
            "Problems": False,
            "Journeys": False,
            "Concepts": True,
            "Definition": True,
            "Outputs": False,
        }

    def test_surfaced_decision_is_not_a_definition(self, make_tp):
        stages = stage_completion([make_tp(type_="decision")], [], [])
        assert stages["Definition"] is False

    @pytest.mark.asyncio
    async def test_many_open_assumptions_suggest_grounding(self, store, workspace_id):
        store.insert_thought_product(workspace_id, "insight", "Buyers compare", state="validated")
        store.insert_thought_product(workspace_id, "tension", "Speed vs depth")
        store.insert_thought_product(workspace_id, "idea", "Seat bundles")
        store.create_persona(workspace_id, "Dana", {"role": "founder"})
        store.insert_output(workspace_id, "journey", {"text": "Map"}, depends_on=[])
        for i in range(4):
            store.insert_thought_product(workspace_id, "assumption", f"Assumption {i}")
        dropped = store.insert_thought_product(workspace_id, "assumption", "Dropped")
        store.update_state(dropped.id, "abandoned")

        result = await handle_pipeline_status(workspace_id)

        assert "● Research → ● Personas → ○ Vision" in result
        assert "Working toward: Vision" in result
        assert "## What's Established\n1 validated thought products" in result
        assert "## What's Assumed\n4 unvalidated assumptions" in result
        assert result.endswith(
            "Validate assumptions with `turbot_ground` before moving to definition."
        )

    @pytest.mark.asyncio
    async def test_all_stages_complete(self, store, workspace_id):
        store.insert_thought_product(workspace_id, "insight", "Buyers compare")
        store.insert_thought_product(workspace_id, "principle", "Price on value")
        store.insert_thought_product(workspace_id, "question", "Annual plans?")
        store.insert_thought_product(workspace_id, "idea", "Seat bundles")
        store.insert_thought_product(workspace_id, "decision", "Per seat", state="validated")
        store.create_persona(workspace_id, "Dana", {"role": "founder"})
        for type_ in ("journey", "epics"):
            store.insert_output(workspace_id, type_, {"text": type_}, depends_on=[])

        result = await handle_pipeline_status(workspace_id)

        assert "○" not in result
        assert "All stages complete! Ready for implementation." in result
        assert result.endswith('Review with `turbot_create type="handoff_notes"`.')


class TestModeTool:
    """Tests for the methodology primer."""

    @pytest.mark.asyncio
    async def test_defaults_to_think_mode(self, store, workspace_id):
        store.insert_thought_product(workspace_id, "decision", "Per seat", state="validated")

        result = await handle_mode(workspace_id)

        assert result.startswith("# Double Diamond Thought Partner")
        assert "## Think Mode Active" in result
        assert "## Current Workspace: Pricing research" in result
        assert "### What's Established (1 items)\n- [decision] Per seat..." in result
        assert "### Key Decisions (1)\n- Per seat..." in result
        assert result.endswith("Ready to begin.")

    @pytest.mark.asyncio
    async def test_selected_mode_and_unknown_workspace(self):
        result = await handle_mode("missing", "sim")

        assert "## Sim Mode Active" in result
        assert "## Think Mode Active" not in result
        assert "## Current Workspace: Unknown" in result
        assert "### Available Personas (0)\nNo personas created yet" in result

    def test_summary_sections(self, make_tp, make_persona):
        summary = summarize_workspace(
            "Pricing",
            [
                make_tp("Speed vs depth", type_="tension"),
                make_tp("Teams grow", type_="assumption"),
                make_tp("Checked", type_="assumption", state="validated"),
            ],
            [make_persona("Dana")],
        )

        assert "### What's Established (1 items)\n- [assumption] Checked..." in summary
        assert "### Key Decisions (0)\nNo decisions captured yet" in summary
        assert "### Active Tensions (1)\n- Speed vs depth..." in summary
        assert "### Unvalidated Assumptions (1)\n- Teams grow..." in summary
        assert "### Available Personas (1)\n- Dana: No voice defined..." in summary


class TestEvaluateTool:
    """Tests for ADEPT concept evaluation."""

    @pytest.mark.asyncio
    async def test_single_concept_is_saved_as_adept_output(self, store, workspace_id):
        store.insert_thought_product(workspace_id, "insight", "Buyers compare")
        dropped = store.insert_thought_product(workspace_id, "idea", "Lifetime deal")
        store.update_state(dropped.id, "abandoned")

        with patch(
            "turbot.llm.client.evaluate_concepts", return_value="# ADEPT Evaluation"
        ) as evaluate:
            result = await handle_evaluate(workspace_id, "Seat bundles")

        concepts, thought_products, personas = evaluate.call_args.args
        assert concepts == ["Seat bundles"]
        assert [tp.content for tp in thought_products] == ["Buyers compare"]
        assert personas == []

        output = store.list_outputs(workspace_id, "adept")[0]
        assert result == f"# ADEPT Evaluation\n\n---\nEvaluation saved. Output ID: {output.id}"
        assert output.content["concepts"] == ["Seat bundles"]
        assert output.content["evaluation"] == "# ADEPT Evaluation"
        assert "generated_at" in output.content
        assert output.depends_on == []

    @pytest.mark.asyncio
    async def test_compares_alternatives(self, store, workspace_id):
        with patch("turbot.llm.client.evaluate_concepts", return_value="Compared") as evaluate:
            await handle_evaluate(workspace_id, "Seat bundles", ["Usage billing", "Flat fee"])

        assert evaluate.call_args.args[0] == ["Seat bundles", "Usage billing", "Flat fee"]
        listing = await handle_output_list(workspace_id, "adept")
        assert "Preview: Compared" in listing

    @pytest.mark.asyncio
    async def test_backend_failure_saves_nothing(self, store, workspace_id):
        with patch(
            "turbot.llm.client.evaluate_concepts", side_effect=RuntimeError("overloaded")
        ):
            result = await handle_evaluate(workspace_id, "Seat bundles")

        assert result == "Error evaluating concept: overloaded"
        assert store.list_outputs(workspace_id) == []


class TestNotebookTools:
    """Tests for notebook curation."""

    @pytest.mark.asyncio
    async def test_notebook_lifecycle(self, store, workspace_id):
        tp = store.insert_thought_product(
            workspace_id, "decision", "Charge per seat", state="validated"
        )
        created = await handle_notebook_create(workspace_id, "Decision Log", "Choices made")
        notebook_id = created.split("ID: ", 1)[1].split("\n")[0]

        added = await handle_notebook_add(notebook_id, tp.id, "from pricing call")
        duplicate = await handle_notebook_add(notebook_id, tp.id)
        await handle_notebook_note(notebook_id, "Revisit quarterly")
        view = await handle_notebook_view(notebook_id)
        listing = await handle_notebook_list(workspace_id)

        assert added.startswith("Added to notebook:\n[decision] Charge per seat")
        assert duplicate == "This thought product is already in the notebook."
        assert view.startswith("## Decision Log\n*Choices made*")
        assert "### Notes\nRevisit quarterly" in view
        assert "1. ✓ [decision] Charge per seat" in view
        assert "   Note: from pricing call" in view
        assert "- **Decision Log** (1 items)" in listing

        assert await handle_notebook_remove(notebook_id, tp.id) == (
            "Removed thought product from notebook."
        )
        assert await handle_notebook_remove(notebook_id, tp.id) == (
            "That thought product is not in this notebook."
        )

    @pytest.mark.asyncio
    async def test_missing_records(self, store, workspace_id):
        tp = store.insert_thought_product(workspace_id, "idea", "A")

        assert await handle_notebook_add("missing", tp.id) == "Notebook not found: missing"
        assert await handle_notebook_view("missing") == "Notebook not found: missing"
        assert await handle_notebook_note("missing", "x") == (
            "Error updating notes: Notebook not found: missing"
        )
        assert (await handle_notebook_list(workspace_id)).startswith("No notebooks")
