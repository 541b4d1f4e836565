"""Tool handlers: one per Cortex tool, each returning a single text response.

Handlers take the shared ``CortexClient`` and an already-validated request
struct. Recoverable remote failures become readable text; an unreachable
service is raised as ``ToolError`` so the protocol reports it.
"""

import functools
import logging
import unicodedata
from typing import Awaitable, Callable, Optional

from fastmcp.exceptions import ToolError

from cortex_mcp.client import CortexClient, ServiceError, ServiceUnavailableError
from cortex_mcp.context import render_recall, truncate
from cortex_mcp.models import (
    DeleteMemoryRequest,
    FetchContentRequest,
    IngestConversationRequest,
    ListSourcesRequest,
    SearchRequest,
    SourceRecord,
    StoreRequest,
)

logger = logging.getLogger(__name__)

NO_MEMORIES_FOUND = "No relevant memories found in Cortex."
NO_MEMORIES_STORED = "No memories stored yet."
NO_SOURCES_FOUND = "No sources found."
STORE_PREVIEW_CHARS = 80
LISTING_CHARS = 150


def remote_action(action: str) -> Callable[[Callable[..., Awaitable[str]]], Callable[..., Awaitable[str]]]:
    """Convert remote failures raised inside a handler.

    ``ServiceUnavailableError`` becomes a ``ToolError``; any other
    ``ServiceError`` becomes the text ``Cortex <action> failed: <detail>``.
    """

    def decorator(fn: Callable[..., Awaitable[str]]) -> Callable[..., Awaitable[str]]:
        @functools.wraps(fn)
        async def wrapper(*args, **kwargs) -> str:
            try:
                return await fn(*args, **kwargs)
            except ServiceUnavailableError as e:
                logger.error("Cortex %s failed, service unreachable: %s", action, e)
                raise ToolError(f"Cortex is unreachable: {e}") from e
            except ServiceError as e:
                logger.warning("Cortex %s failed (status=%s): %s", action, e.status_code, e)
                return f"Cortex {action} failed: {e}"

        return wrapper

    return decorator


def clean_title(title: str) -> str:
    """NFC-normalize a source title and strip control characters."""
    normalized = unicodedata.normalize("NFC", title)
    return "".join(ch for ch in normalized if not unicodedata.category(ch).startswith("C")).strip()


def source_line(index: int, source: SourceRecord) -> str:
    title = clean_title(source.title) if source.title else ""
    title = f" - {title}" if title else ""
    kind = f" ({source.type})" if source.type else ""
    return f"{index}. [{source.id}]{title}{kind}"


# ============================================================================
# Handlers
# ============================================================================

@remote_action("search")
async def search(client: CortexClient, request: SearchRequest) -> str:
    """Recall memories and render the ranked summary plus full context."""
    logger.debug("cortex_search: %r", request.query)

    result = await client.recall(
        request.query,
        max_results=request.max_results,
        mode=request.mode,
        graph_context=request.graph_context,
    )
    if not result.chunks:
        return NO_MEMORIES_FOUND

    return render_recall(result, include_graph=request.graph_context)


@remote_action("store")
async def store(client: CortexClient, request: StoreRequest) -> str:
    logger.debug("cortex_store: %r", truncate(request.text, 50))

    outcome = await client.ingest_text(
        request.text,
        title=request.title,
        source_id=request.source_id,
        infer=request.infer,
        is_markdown=request.is_markdown,
    )
    preview = truncate(request.text, STORE_PREVIEW_CHARS)
    return (
        f"Saved to Cortex ({outcome.success_count} success, "
        f"{outcome.failed_count} failed): \"{preview}\""
    )


@remote_action("conversation ingest")
async def ingest_conversation(client: CortexClient, request: IngestConversationRequest) -> str:
    logger.debug("cortex_ingest_conversation: %d turns -> %s", len(request.turns), request.source_id)

    outcome = await client.ingest_conversation(
        request.turns,
        request.source_id,
        user_name=request.user_name,
    )
    return (
        f"Ingested {len(request.turns)} conversation turn(s) into Cortex "
        f"(source: {request.source_id}, success: {outcome.success_count}, "
        f"failed: {outcome.failed_count})"
    )


@remote_action("memory listing")
async def list_memories(client: CortexClient) -> str:
    logger.debug("cortex_list_memories")

    memories = await client.list_memories()
    if not memories:
        return NO_MEMORIES_STORED

    lines = [
        f"{i}. [{m.memory_id}] {m.memory_content[:LISTING_CHARS]}"
        for i, m in enumerate(memories, start=1)
    ]
    return f"{len(memories)} memories:\n\n" + "\n".join(lines)


@remote_action("memory deletion")
async def delete_memory(client: CortexClient, request: DeleteMemoryRequest) -> str:
    logger.debug("cortex_delete_memory: %s", request.memory_id)

    result = await client.delete_memory(request.memory_id)
    if result.deleted:
        return f"Deleted memory: {request.memory_id}"
    return f"Memory {request.memory_id} was not found or already deleted."


@remote_action("content fetch")
async def fetch_content(client: CortexClient, request: FetchContentRequest) -> str:
    logger.debug("cortex_fetch_content: %s (%s)", request.source_id, request.mode)

    res = await client.fetch_content(request.source_id, request.mode)
    if not res.success or res.error:
        return f"Could not fetch source {request.source_id}: {res.error or 'unknown error'}"

    parts = [f"Source: {request.source_id}"]
    if res.presigned_url:
        parts[0] += f"\nURL: {res.presigned_url}"

    body: Optional[str] = res.content if res.content is not None else res.content_base64
    if body is None and not res.presigned_url:
        body = "(no text content)"
    if body is not None:
        parts.append(body)
    return "\n\n".join(parts)


@remote_action("source listing")
async def list_sources(client: CortexClient, request: ListSourcesRequest) -> str:
    logger.debug("cortex_list_sources: %s", request.source_ids or "all")

    listing = await client.list_sources(request.source_ids)
    if not listing.sources:
        return NO_SOURCES_FOUND

    lines = [source_line(i, s) for i, s in enumerate(listing.sources, start=1)]
    return f"{listing.total} sources:\n\n" + "\n".join(lines)
