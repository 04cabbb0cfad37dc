"""Unit tests for node parameter parsing."""

import pytest

from memmachine_node.memory.enums import EpisodeType
from memmachine_node.node import NodeOperationError, NodeParameters


def _params(**overrides) -> NodeParameters:
    raw = {"org_id": "acme", "project_id": "support", **overrides}
    return NodeParameters.parse(raw, item_index=2)


class TestNodeParameters:
    """Tests for NodeParameters."""

    def test_defaults(self) -> None:
        params = _params()

        assert params.operation == "enrich"
        assert params.history_count == 5
        assert params.short_term_count == 10
        assert params.filter_by_session is True
        assert params.episode_type is EpisodeType.DIALOG
        assert params.metadata == {}

    def test_ids_split_and_trimmed(self) -> None:
        params = _params(agent_ids="agent-1, agent-2,", user_ids=" user-1 ")

        assert params.agent_ids == ["agent-1", "agent-2"]
        assert params.user_ids == ["user-1"]

    def test_scope_trimmed(self) -> None:
        params = _params(org_id="  acme ")
        assert params.org_id == "acme"

    @pytest.mark.parametrize("field", ["org_id", "project_id"])
    def test_scope_required(self, field: str) -> None:
        with pytest.raises(NodeOperationError) as exc_info:
            _params(**{field: "   "})

        assert exc_info.value.item_index == 2
        assert field in exc_info.value.message

    def test_metadata_json_parsed(self) -> None:
        params = _params(metadata='{"channel": "email"}')
        assert params.metadata == {"channel": "email"}

    @pytest.mark.parametrize("value", ["", "{}", "  {} ", None])
    def test_empty_metadata(self, value) -> None:
        assert _params(metadata=value).metadata == {}

    def test_invalid_metadata_json(self) -> None:
        with pytest.raises(NodeOperationError, match="Invalid metadata JSON"):
            _params(metadata="{not json")

    def test_invalid_filter_json(self) -> None:
        with pytest.raises(NodeOperationError, match="Invalid filter JSON"):
            _params(filter="[1, 2]")

    def test_search_filter_merges_session(self) -> None:
        params = _params(session_id="s1", filter='{"category": "history"}')
        assert params.search_filter() == {"session_id": "s1", "category": "history"}

    def test_search_filter_without_session(self) -> None:
        params = _params(session_id="s1", filter_by_session=False)
        assert params.search_filter() == {}

    def test_scope_metadata(self) -> None:
        params = _params(session_id="s1", group_id="g1", agent_ids="a1,a2", user_ids="u1")
        assert params.scope_metadata() == {
            "session_id": "s1",
            "group_id": "g1",
            "agent_id": "a1,a2",
            "user_id": "u1",
        }
