"""
Cortex MCP Server

Exposes the Cortex AI memory and knowledge-graph service to agents as seven
MCP tools:
- cortex_search, cortex_store, cortex_ingest_conversation
- cortex_list_memories, cortex_delete_memory
- cortex_fetch_content, cortex_list_sources

Each tool makes one logical call against the Cortex API and answers with a
single block of plain text.
"""

import logging
from typing import Annotated, Any, Dict, List, Literal, Optional

from fastmcp import FastMCP
from pydantic import Field

from cortex_mcp import tools
from cortex_mcp.client import CortexClient
from cortex_mcp.config import CortexConfig
from cortex_mcp.descriptions import SERVER_INSTRUCTIONS, TOOL_DESCRIPTIONS, param
from cortex_mcp.models import (
    ConversationTurn,
    DeleteMemoryRequest,
    FetchContentRequest,
    IngestConversationRequest,
    ListSourcesRequest,
    SearchRequest,
    StoreRequest,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "cortex-mcp"


def _annotations(tool: str, **hints: bool) -> Dict[str, Any]:
    """Title plus behaviour hints for a tool."""
    annotations: Dict[str, Any] = {
        "title": TOOL_DESCRIPTIONS[tool]["title"],
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False,
    }
    annotations.update(hints)
    return annotations


def create_server(client: CortexClient) -> FastMCP:
    """Build the FastMCP server with every Cortex tool bound to ``client``."""
    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

    # ========================================================================
    # Recall
    # ========================================================================

    @mcp.tool(
        name="cortex_search",
        description=TOOL_DESCRIPTIONS["cortex_search"]["description"],
        annotations=_annotations("cortex_search", readOnlyHint=True, idempotentHint=True, openWorldHint=True),
    )
    async def cortex_search(
        query: Annotated[str, Field(description=param("cortex_search", "query"))],
        max_results: Annotated[
            Optional[int], Field(ge=1, le=50, description=param("cortex_search", "max_results"))
        ] = None,
        mode: Annotated[
            Optional[Literal["fast", "thinking"]], Field(description=param("cortex_search", "mode"))
        ] = None,
        graph_context: Annotated[
            Optional[bool], Field(description=param("cortex_search", "graph_context"))
        ] = None,
    ) -> str:
        request = SearchRequest.from_arguments(
            query=query, max_results=max_results, mode=mode, graph_context=graph_context
        )
        return await tools.search(client, request)

    # ========================================================================
    # Ingest
    # ========================================================================

    @mcp.tool(
        name="cortex_store",
        description=TOOL_DESCRIPTIONS["cortex_store"]["description"],
        annotations=_annotations("cortex_store"),
    )
    async def cortex_store(
        text: Annotated[str, Field(description=param("cortex_store", "text"))],
        title: Annotated[Optional[str], Field(description=param("cortex_store", "title"))] = None,
        source_id: Annotated[Optional[str], Field(description=param("cortex_store", "source_id"))] = None,
        infer: Annotated[Optional[bool], Field(description=param("cortex_store", "infer"))] = None,
        is_markdown: Annotated[
            Optional[bool], Field(description=param("cortex_store", "is_markdown"))
        ] = None,
    ) -> str:
        request = StoreRequest.from_arguments(
            text=text, title=title, source_id=source_id, infer=infer, is_markdown=is_markdown
        )
        return await tools.store(client, request)

    @mcp.tool(
        name="cortex_ingest_conversation",
        description=TOOL_DESCRIPTIONS["cortex_ingest_conversation"]["description"],
        annotations=_annotations("cortex_ingest_conversation"),
    )
    async def cortex_ingest_conversation(
        turns: Annotated[
            List[ConversationTurn],
            Field(min_length=1, description=param("cortex_ingest_conversation", "turns")),
        ],
        source_id: Annotated[str, Field(description=param("cortex_ingest_conversation", "source_id"))],
        user_name: Annotated[
            Optional[str], Field(description=param("cortex_ingest_conversation", "user_name"))
        ] = None,
    ) -> str:
        request = IngestConversationRequest.from_arguments(
            turns=turns, source_id=source_id, user_name=user_name
        )
        return await tools.ingest_conversation(client, request)

    # ========================================================================
    # User Memories
    # ========================================================================

    @mcp.tool(
        name="cortex_list_memories",
        description=TOOL_DESCRIPTIONS["cortex_list_memories"]["description"],
        annotations=_annotations("cortex_list_memories", readOnlyHint=True, idempotentHint=True),
    )
    async def cortex_list_memories() -> str:
        return await tools.list_memories(client)

    @mcp.tool(
        name="cortex_delete_memory",
        description=TOOL_DESCRIPTIONS["cortex_delete_memory"]["description"],
        annotations=_annotations("cortex_delete_memory", destructiveHint=True, idempotentHint=True),
    )
    async def cortex_delete_memory(
        memory_id: Annotated[str, Field(description=param("cortex_delete_memory", "memory_id"))],
    ) -> str:
        request = DeleteMemoryRequest.from_arguments(memory_id=memory_id)
        return await tools.delete_memory(client, request)

    # ========================================================================
    # Sources
    # ========================================================================

    @mcp.tool(
        name="cortex_fetch_content",
        description=TOOL_DESCRIPTIONS["cortex_fetch_content"]["description"],
        annotations=_annotations("cortex_fetch_content", readOnlyHint=True, idempotentHint=True),
    )
    async def cortex_fetch_content(
        source_id: Annotated[str, Field(description=param("cortex_fetch_content", "source_id"))],
        mode: Annotated[
            Optional[Literal["content", "url", "both"]],
            Field(description=param("cortex_fetch_content", "mode")),
        ] = None,
    ) -> str:
        request = FetchContentRequest.from_arguments(source_id=source_id, mode=mode)
        return await tools.fetch_content(client, request)

    @mcp.tool(
        name="cortex_list_sources",
        description=TOOL_DESCRIPTIONS["cortex_list_sources"]["description"],
        annotations=_annotations("cortex_list_sources", readOnlyHint=True, idempotentHint=True),
    )
    async def cortex_list_sources(
        source_ids: Annotated[
            Optional[List[str]], Field(description=param("cortex_list_sources", "source_ids"))
        ] = None,
    ) -> str:
        request = ListSourcesRequest.from_arguments(source_ids=source_ids)
        return await tools.list_sources(client, request)

    return mcp


# ============================================================================
# Server Entry Point
# ============================================================================

async def serve(config: CortexConfig) -> None:
    """Run the server on the configured transport until it exits."""
    async with CortexClient(config) as client:
        mcp = create_server(client)
        logger.info(
            "Starting %s (tenant=%s, sub_tenant=%s, transport=%s)",
            SERVER_NAME, config.tenant_id, config.sub_tenant_id, config.transport,
        )
        if config.transport == "stdio":
            await mcp.run_async(transport="stdio")
        else:
            await mcp.run_async(transport=config.transport, host=config.host, port=config.port)
