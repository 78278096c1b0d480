"""Tests for context section rendering."""

from turbot.context.formatting import (
    AssembledContext,
    format_personas,
    format_recent_activity,
    format_thought_products,
    type_heading,
)
from turbot.context.ranking import group_by_type


class TestFormatThoughtProducts:
    """Tests for the knowledge section."""

    def test_groups_with_state_markers(self, make_tp):
        items = [
            make_tp("Charge per seat", type_="decision", state="validated"),
            make_tp("Buyers want annual plans", type_="assumption", state="challenged"),
            make_tp("Ship pricing page first", type_="decision", state="surfaced"),
        ]

        text = format_thought_products(group_by_type(items))

        assert text == (
            "## Relevant Knowledge\n"
            "\n"
            "### Decisions\n"
            "- ✓ Charge per seat\n"
            "- Ship pricing page first\n"
            "\n"
            "### Assumptions\n"
            "- ⚠ Buyers want annual plans"
        )

    def test_empty_is_empty_string(self):
        assert format_thought_products({}) == ""
        assert format_thought_products({"decision": []}) == ""

    def test_type_heading(self):
        assert type_heading("decision") == "Decisions"
        assert type_heading("insight") == "Insights"


class TestFormatPersonas:
    """Tests for the personas section."""

    def test_renders_first_three_traits(self, make_persona):
        persona = make_persona(
            "Dana",
            {"role": "founder", "goal": "grow", "pain": "churn", "budget": "small"},
        )

        text = format_personas([persona])

        assert text == "## Active Personas\n\n- **Dana**: founder, grow, churn"

    def test_persona_without_traits(self, make_persona):
        text = format_personas([make_persona("Sam", {})])
        assert text.endswith("- **Sam**: No traits defined")

    def test_non_mapping_traits_render_as_undefined(self, make_persona):
        text = format_personas([make_persona("Sam", ["founder"]), make_persona("Ana")])
        assert text == (
            "## Active Personas\n\n- **Sam**: No traits defined\n- **Ana**: founder"
        )

    def test_caps_at_five_personas(self, make_persona):
        personas = [make_persona(f"P{i}") for i in range(7)]

        text = format_personas(personas)

        assert text.count("- **") == 5
        assert "P5" not in text

    def test_empty(self):
        assert format_personas([]) == ""


class TestFormatRecentActivity:
    """Tests for the recent thinking section."""

    def test_first_sentences(self):
        text = format_recent_activity(
            ["Pricing should follow seats. More detail here.", "Churn is seasonal. Indeed."]
        )

        assert text == (
            "## Recent Thinking\n\n- Pricing should follow seats.\n- Churn is seasonal."
        )

    def test_deduplicates_on_opening_characters(self):
        opening = "A" * 50
        text = format_recent_activity([opening + " one.", opening + " two.", "Other idea."])

        assert text.count("\n- ") == 2
        assert "- Other idea." in text

    def test_at_most_three_summaries(self):
        responses = [f"Point number {i}. Tail." for i in range(5)]

        text = format_recent_activity(responses)

        assert text.count("\n- ") == 3
        assert "Point number 3" not in text

    def test_long_first_sentence_skipped(self):
        """Overlong sentences count toward the cap but are not shown."""
        long_sentence = "x" * 250 + ". tail"

        text = format_recent_activity([long_sentence, "Short one. Tail."])

        assert text == "## Recent Thinking\n\n- Short one."

    def test_unpunctuated_response_uses_whole_text(self):
        assert format_recent_activity(["No full stop at all"]) == (
            "## Recent Thinking\n\n- No full stop at all."
        )

    def test_blank_first_sentence_skipped(self):
        assert format_recent_activity([". starts with a dot", "   "]) == ""

    def test_empty(self):
        assert format_recent_activity([]) == ""


class TestAssembledContext:
    """Tests for section joining."""

    def test_full_joins_non_empty_sections(self):
        context = AssembledContext(
            thought_products="## Relevant Knowledge",
            personas="",
            recent_activity="## Recent Thinking",
        )

        assert context.full == "## Relevant Knowledge\n\n## Recent Thinking"
        assert not context.is_empty

    def test_all_empty(self):
        context = AssembledContext()
        assert context.full == ""
        assert context.is_empty
