"""Unit tests for template rendering."""

import pytest

from memmachine_node.memory.categorizer import categorize
from memmachine_node.memory.models import CategorizedMemories, EpisodicRecord, SemanticFact
from memmachine_node.memory.rendering import (
    TemplateError,
    TemplateRenderer,
    format_episode_list,
    format_episode_summaries,
    format_profile_facts,
    format_semantic_features,
    render_template,
)


class TestFormatters:
    """Tests for section formatters."""

    def test_episode_list(self) -> None:
        records = [
            EpisodicRecord(content="hello", producer="u1", produced_for="a1"),
            EpisodicRecord(content="hi", producer="a1", produced_for="u1"),
        ]
        assert format_episode_list(records) == "- **u1** → a1: hello\n- **a1** → u1: hi"

    def test_empty_episode_list(self) -> None:
        assert format_episode_list([]) == "*No memories in this category*"

    def test_profile_grouped_by_subject(self) -> None:
        facts = [
            SemanticFact(subject="Prefs", predicate="color", object="blue"),
            SemanticFact(subject="Work", predicate="role", object="engineer"),
            SemanticFact(subject="Prefs", predicate="food", object="pasta"),
        ]

        assert format_profile_facts(facts) == (
            "### Prefs\n- **color**: blue\n- **food**: pasta\n\n### Work\n- **role**: engineer"
        )

    def test_empty_profile(self) -> None:
        assert format_profile_facts([]) == "*No profile information available*"

    def test_semantic_features_skip_empty_values(self) -> None:
        features = [
            {"tag": "Prefs", "feature_name": "color", "value": "blue"},
            {"tag": "Prefs", "feature_name": "food", "value": ""},
        ]
        assert format_semantic_features(features) == "- **Prefs** / color: blue"

    def test_empty_semantic_features(self) -> None:
        assert format_semantic_features([]) == "*No semantic features available*"

    def test_episode_summaries(self) -> None:
        assert format_episode_summaries(["one", "", "two"]) == "> one\n\n> two"
        assert format_episode_summaries([]) == ""


class TestRenderTemplate:
    """Tests for render_template."""

    def test_end_to_end(self) -> None:
        """Records flow through categorization into the template."""
        records = [EpisodicRecord(content="hello", producer="u1", produced_for="a1")]

        template = "H:{{history}}|P:{{profileMemory}}"

        result = render_template(template, categorize(records, 5, 10), [])

        assert result == "H:- **u1** → a1: hello|P:*No profile information available*"

    def test_no_placeholders_is_identity(self) -> None:
        template = "Plain text with {single} braces"
        assert render_template(template, CategorizedMemories(), []) == template

    def test_unknown_placeholder_left_verbatim(self) -> None:
        result = render_template("{{unknown}} {{history}}", CategorizedMemories(), [])
        assert result == "{{unknown}} *No memories in this category*"

    def test_repeated_placeholder_replaced_everywhere(self) -> None:
        result = render_template("{{history}}/{{history}}", CategorizedMemories(), [])
        assert result == "*No memories in this category*/*No memories in this category*"

    def test_inserted_text_not_rescanned(self) -> None:
        """Content containing placeholder syntax is inserted literally."""
        records = [EpisodicRecord(content="{{profileMemory}}", producer="u1", produced_for="a1")]

        result = render_template("{{history}}", categorize(records), [])

        assert result == "- **u1** → a1: {{profileMemory}}"

    def test_all_sections(self) -> None:
        result = render_template(
            "{{semanticMemory}}|{{episodeSummary}}|{{longTermMemory}}",
            CategorizedMemories(),
            [],
            semantic_features=[{"tag": "t", "feature_name": "f", "value": "v"}],
            episode_summaries=["recap"],
        )
        assert result == "- **t** / f: v|> recap|*No memories in this category*"

    def test_non_string_template_rejected(self) -> None:
        with pytest.raises(TemplateError):
            render_template(None, CategorizedMemories(), [])
        assert issubclass(TemplateError, TypeError)

    def test_renderer_lists_placeholders(self) -> None:
        renderer = TemplateRenderer("{{history}} {{history}} {{nope}} {{episodeSummary}}")
        assert renderer.placeholders == {"history", "episodeSummary"}
