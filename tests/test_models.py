"""Tests for request structs and response models."""

import pytest
from pydantic import ValidationError

from cortex_mcp.models import (
    ConversationTurn,
    DeleteMemoryRequest,
    FetchContentRequest,
    GraphRelation,
    IngestConversationRequest,
    IngestOutcome,
    ListSourcesRequest,
    SearchRequest,
    StoreRequest,
)


class TestSearchRequest:
    def test_defaults(self):
        request = SearchRequest.from_arguments(query="budget", max_results=None, mode=None, graph_context=None)
        assert request.max_results == 10
        assert request.mode == "thinking"
        assert request.graph_context is True

    def test_explicit_values(self):
        request = SearchRequest.from_arguments(query="budget", max_results=5, mode="fast", graph_context=False)
        assert (request.max_results, request.mode, request.graph_context) == (5, "fast", False)

    @pytest.mark.parametrize("max_results", [0, 51])
    def test_max_results_bounds(self, max_results):
        with pytest.raises(ValidationError):
            SearchRequest.from_arguments(query="q", max_results=max_results)

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValidationError):
            SearchRequest.from_arguments(query="q", mode="deep")


class TestStoreRequest:
    def test_defaults(self):
        request = StoreRequest.from_arguments(text="hello world")
        assert request.infer is True
        assert request.is_markdown is False
        assert request.title == "MCP Memory"
        assert request.source_id is None

    def test_text_whitespace_kept(self):
        request = StoreRequest.from_arguments(text="  indented\n")
        assert request.text == "  indented\n"

    def test_empty_text_allowed(self):
        assert StoreRequest.from_arguments(text="").text == ""


class TestOtherRequests:
    def test_ingest_requires_turns(self):
        with pytest.raises(ValidationError):
            IngestConversationRequest.from_arguments(turns=[], source_id="s")

    def test_ingest_accepts_dict_turns(self):
        request = IngestConversationRequest.from_arguments(
            turns=[{"user": "hi", "assistant": "hello"}], source_id="s"
        )
        assert request.turns == [ConversationTurn(user="hi", assistant="hello")]
        assert request.user_name is None

    def test_ids_kept_verbatim(self):
        assert DeleteMemoryRequest.from_arguments(memory_id=" m1 ").memory_id == " m1 "
        assert FetchContentRequest.from_arguments(source_id="src 1 ").source_id == "src 1 "

    def test_fetch_default_mode(self):
        assert FetchContentRequest.from_arguments(source_id="src-1").mode == "content"

    def test_list_sources_optional_ids(self):
        assert ListSourcesRequest.from_arguments().source_ids is None


class TestGraphRelation:
    def test_nested_entities(self):
        relation = GraphRelation.model_validate(
            {"source": {"name": "Alice"}, "predicate": {"canonical_predicate": "knows"}, "target": {"name": "Bob"}}
        )
        assert str(relation) == "Alice -[knows]-> Bob"

    def test_triple(self):
        relation = GraphRelation.model_validate(["Acme", "based_in", "Berlin"])
        assert (relation.source, relation.relation, relation.target) == ("Acme", "based_in", "Berlin")


class TestIngestOutcome:
    def test_addition(self):
        total = IngestOutcome(success_count=1) + IngestOutcome(failed_count=1) + IngestOutcome(success_count=1)
        assert (total.success_count, total.failed_count, total.total) == (2, 1, 3)
