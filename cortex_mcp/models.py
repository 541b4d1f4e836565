"""Data models for Cortex responses and per-tool request structs."""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

RecallMode = Literal["fast", "thinking"]
FetchMode = Literal["content", "url", "both"]

DEFAULT_MAX_RESULTS = 10
DEFAULT_RECALL_MODE: RecallMode = "thinking"
DEFAULT_MEMORY_TITLE = "MCP Memory"
DEFAULT_USER_NAME = "User"
DEFAULT_FETCH_MODE: FetchMode = "content"


# ============================================================================
# Remote Data Models
# ============================================================================

def _entity_name(value: Any) -> str:
    """Reduce an entity given as a plain string or ``{"name": ...}`` object to its name."""
    if isinstance(value, dict):
        return str(value.get("name") or value.get("id") or "")
    return "" if value is None else str(value)


def _path_text(path: Any) -> str:
    """Render an entity path given as a string or a list of entities."""
    if isinstance(path, list):
        return " -> ".join(_entity_name(step) for step in path)
    return _entity_name(path)


class GraphRelation(BaseModel):
    """A single knowledge-graph edge: source -[relation]-> target."""
    model_config = ConfigDict(frozen=True)

    source: str = ""
    relation: str = ""
    target: str = ""
    # Verbatim rendering for relations that are not an edge object or triple
    text: str = ""

    @model_validator(mode="before")
    @classmethod
    def flatten_entities(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)) and len(data) == 3:
            data = {"source": data[0], "relation": data[1], "target": data[2]}
        if isinstance(data, (list, tuple)):
            return {"text": " ".join(_entity_name(part) for part in data)}
        if not isinstance(data, dict):
            return {"text": _entity_name(data)}
        relation = data.get("relation", data.get("predicate"))
        if isinstance(relation, dict):
            relation = relation.get("canonical_predicate") or relation.get("name") or ""
        return {
            "source": _entity_name(data.get("source")),
            "relation": "" if relation is None else str(relation),
            "target": _entity_name(data.get("target")),
        }

    def __str__(self) -> str:
        if self.text:
            return self.text
        return f"{self.source} -[{self.relation}]-> {self.target}"


class MemoryChunk(BaseModel):
    """A ranked fragment of stored memory returned by recall."""
    model_config = ConfigDict(frozen=True)

    chunk_content: str = ""
    relevancy_score: Optional[float] = None
    source_id: Optional[str] = None
    entity_paths: List[str] = Field(default_factory=list)
    graph_relations: List[GraphRelation] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def fill_nulls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        content = data.get("chunk_content")
        data["chunk_content"] = "" if content is None else str(content)
        try:
            data["relevancy_score"] = float(data["relevancy_score"])
        except (KeyError, TypeError, ValueError):
            data["relevancy_score"] = None
        if data.get("source_id") is not None:
            data["source_id"] = str(data["source_id"])
        data["entity_paths"] = [_path_text(path) for path in data.get("entity_paths") or []]
        data["graph_relations"] = data.get("graph_relations") or []
        return data


class GraphContext(BaseModel):
    """Graph data attached to a recall result as a whole."""
    model_config = ConfigDict(frozen=True)

    query_paths: List[str] = Field(default_factory=list)
    chunk_relations: List[GraphRelation] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def fill_nulls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            "query_paths": [_path_text(path) for path in data.get("query_paths") or []],
            "chunk_relations": data.get("chunk_relations") or [],
        }

    @property
    def is_empty(self) -> bool:
        return not self.query_paths and not self.chunk_relations


class RecallResult(BaseModel):
    """Chunks in service-ranked order plus optional graph context."""
    model_config = ConfigDict(frozen=True)

    chunks: List[MemoryChunk] = Field(default_factory=list)
    graph_context: Optional[GraphContext] = None

    @model_validator(mode="before")
    @classmethod
    def drop_null_chunks(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("chunks") is None:
            data = {**data, "chunks": []}
        return data


class IngestOutcome(BaseModel):
    """Aggregate result of one or more ingestion calls."""

    success_count: int = Field(default=0, ge=0)
    failed_count: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.success_count + self.failed_count

    def __add__(self, other: "IngestOutcome") -> "IngestOutcome":
        return IngestOutcome(
            success_count=self.success_count + other.success_count,
            failed_count=self.failed_count + other.failed_count,
        )


class MemoryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    memory_id: str
    memory_content: str = ""


class SourceRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: Optional[str] = None
    type: Optional[str] = None


class SourceList(BaseModel):
    sources: List[SourceRecord] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)


class SourceContent(BaseModel):
    """Result of fetching one source; failures are data, not exceptions."""

    success: bool = False
    content: Optional[str] = None
    content_base64: Optional[str] = None
    presigned_url: Optional[str] = None
    error: Optional[str] = None


class DeleteResult(BaseModel):
    deleted: bool = False


class ConversationTurn(BaseModel):
    """One user/assistant exchange, in session order."""
    model_config = ConfigDict(extra='forbid')

    user: str = Field(..., description="The user's message")
    assistant: str = Field(..., description="The assistant's response")


# ============================================================================
# Tool Request Models
# ============================================================================

class ToolRequest(BaseModel):
    """Base for per-tool request structs.

    Arguments the caller omitted arrive as ``None``; ``from_arguments``
    drops them so the field defaults below apply.
    """
    model_config = ConfigDict(extra='forbid')

    @classmethod
    def from_arguments(cls, **arguments: Any):
        return cls(**{k: v for k, v in arguments.items() if v is not None})


class SearchRequest(ToolRequest):
    query: str
    max_results: int = Field(default=DEFAULT_MAX_RESULTS, ge=1, le=50)
    mode: RecallMode = DEFAULT_RECALL_MODE
    graph_context: bool = True


class StoreRequest(ToolRequest):
    text: str
    title: str = DEFAULT_MEMORY_TITLE
    source_id: Optional[str] = None
    infer: bool = True
    is_markdown: bool = False


class IngestConversationRequest(ToolRequest):
    turns: List[ConversationTurn] = Field(..., min_length=1)
    source_id: str
    user_name: Optional[str] = None


class DeleteMemoryRequest(ToolRequest):
    memory_id: str


class FetchContentRequest(ToolRequest):
    source_id: str
    mode: FetchMode = DEFAULT_FETCH_MODE


class ListSourcesRequest(ToolRequest):
    source_ids: Optional[List[str]] = None
