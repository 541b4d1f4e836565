"""Turn recall results into text for an agent's context window.

Two independent views over the same ``RecallResult``:

- ``build_summary``: a ranked list of short snippets with relevancy scores.
- ``build_recalled_context``: every chunk in full, with entity paths and
  graph relations when graph context was requested.

``render_recall`` joins them into the final tool response.
"""

import math
from typing import List, Optional

from cortex_mcp.models import MemoryChunk, RecallResult

SUMMARY_LIMIT = 10
SNIPPET_CHARS = 150
MAX_CONTEXT_CHARS = 12000
ELLIPSIS = "..."
TRUNCATED_MARKER = "\n... (context truncated)"
SEPARATOR = "\n\n---\nFull context:\n"


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) > limit:
        return f"{text[:limit]}{ELLIPSIS}"
    return text


def score_percent(score: float) -> int:
    """Relevancy score in [0, 1] as a whole percentage, halves rounded up."""
    return int(math.floor(score * 100 + 0.5))


def summary_line(index: int, chunk: MemoryChunk) -> str:
    score = ""
    if chunk.relevancy_score is not None:
        score = f" ({score_percent(chunk.relevancy_score)}%)"
    return f"{index}. {truncate(chunk.chunk_content, SNIPPET_CHARS)}{score}"


def build_summary(result: RecallResult, limit: int = SUMMARY_LIMIT) -> str:
    """Numbered snippets for the first ``limit`` chunks, in service order."""
    return "\n".join(
        summary_line(i, chunk) for i, chunk in enumerate(result.chunks[:limit], start=1)
    )


def _chunk_block(index: int, chunk: MemoryChunk, include_graph: bool) -> str:
    header = f"[{index}]"
    if chunk.source_id:
        header += f" source: {chunk.source_id}"
    lines = [header, chunk.chunk_content]

    if include_graph:
        if chunk.entity_paths:
            lines.append("Entity paths:")
            lines.extend(f"  - {path}" for path in chunk.entity_paths)
        if chunk.graph_relations:
            lines.append("Relations:")
            lines.extend(f"  - {relation}" for relation in chunk.graph_relations)

    return "\n".join(lines)


def _graph_block(result: RecallResult) -> Optional[str]:
    graph = result.graph_context
    if graph is None or graph.is_empty:
        return None

    lines = ["Knowledge graph:"]
    if graph.query_paths:
        lines.append("Paths:")
        lines.extend(f"  - {path}" for path in graph.query_paths)
    if graph.chunk_relations:
        lines.append("Relations:")
        lines.extend(f"  - {relation}" for relation in graph.chunk_relations)
    return "\n".join(lines)


def build_recalled_context(
    result: RecallResult,
    include_graph: bool = True,
    max_chars: int = MAX_CONTEXT_CHARS,
) -> str:
    """Full chunk text, in service order, followed by the graph section.

    The graph section is left out entirely when graph context was not
    requested or the service returned none. The block is capped at
    ``max_chars``.
    """
    sections: List[str] = [
        _chunk_block(i, chunk, include_graph) for i, chunk in enumerate(result.chunks, start=1)
    ]
    if include_graph:
        graph = _graph_block(result)
        if graph:
            sections.append(graph)

    text = "\n\n".join(sections)
    if len(text) > max_chars:
        text = text[:max_chars].rstrip() + TRUNCATED_MARKER
    return text


def render_recall(result: RecallResult, include_graph: bool = True) -> str:
    """Final search response: count, summary, separator, full context."""
    return (
        f"Found {len(result.chunks)} memories:\n\n"
        f"{build_summary(result)}"
        f"{SEPARATOR}"
        f"{build_recalled_context(result, include_graph)}"
    )
