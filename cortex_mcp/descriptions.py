"""Titles, descriptions and parameter docs for the Cortex tools."""

TOOL_DESCRIPTIONS = {
    "cortex_search": {
        "title": "Search Cortex Memory",
        "description": (
            "Search memories stored in Cortex AI. Returns ranked chunks with "
            "graph-enriched context: entity paths and knowledge graph relations. "
            "Use this to find previously stored information, past conversations, "
            "user preferences, or any knowledge ingested into Cortex. Supports fast "
            "semantic search and a deeper thinking mode with graph traversal."
        ),
        "params": {
            "query": "The search query to find relevant memories",
            "max_results": "Maximum number of memory chunks to return (1-50, default: 10)",
            "mode": (
                "Recall mode: 'fast' for quick semantic search, 'thinking' for deeper "
                "personalised recall with graph traversal (default: 'thinking')"
            ),
            "graph_context": "Whether to include knowledge graph relations in results (default: true)",
        },
    },
    "cortex_store": {
        "title": "Store to Cortex Memory",
        "description": (
            "Save information to Cortex AI memory. Use this to persist facts, "
            "preferences, decisions, notes, or any text the user wants remembered "
            "across sessions. Cortex extracts insights and preferences and builds a "
            "knowledge graph from the stored content. Accepts plain text or markdown."
        ),
        "params": {
            "text": "The information to store in memory",
            "title": "Optional title for the memory entry (default: 'MCP Memory')",
            "source_id": (
                "Optional source identifier to group related memories together, "
                "such as a session ID or any other unique conversation identifier"
            ),
            "infer": (
                "Whether Cortex should extract insights and build the knowledge graph "
                "from this text (default: true)"
            ),
            "is_markdown": "Whether the text is in markdown format (default: false)",
        },
    },
    "cortex_ingest_conversation": {
        "title": "Ingest Conversation",
        "description": (
            "Ingest one or more user/assistant conversation turns into Cortex AI memory. "
            "Cortex extracts insights, preferences and knowledge graph entities from the "
            "conversation so it can be recalled later. Each turn pairs a user message "
            "with the assistant's response."
        ),
        "params": {
            "turns": "Conversation turns in chronological order, each with a 'user' and 'assistant' field",
            "source_id": "Source identifier grouping all turns from the same session",
            "user_name": "Optional name of the user for personalisation (default: 'User')",
        },
    },
    "cortex_list_memories": {
        "title": "List Memories",
        "description": (
            "List all user memories stored in Cortex AI with their IDs and content. "
            "Use this to browse what has been stored, check that a memory exists, or "
            "find the ID of a memory to delete."
        ),
        "params": {},
    },
    "cortex_delete_memory": {
        "title": "Delete Memory",
        "description": (
            "Delete one user memory from Cortex AI by its memory ID. Call "
            "cortex_list_memories first to find the ID. This cannot be undone."
        ),
        "params": {
            "memory_id": "The ID of the memory to delete",
        },
    },
    "cortex_fetch_content": {
        "title": "Fetch Source Content",
        "description": (
            "Fetch the full content of a source from Cortex AI by its source ID. "
            "Returns the original text that was ingested, a presigned download URL, "
            "or both."
        ),
        "params": {
            "source_id": "The source ID to fetch content for",
            "mode": (
                "Fetch mode: 'content' for text, 'url' for a presigned URL, "
                "'both' for both (default: 'content')"
            ),
        },
    },
    "cortex_list_sources": {
        "title": "List Sources",
        "description": (
            "List the sources ingested into Cortex AI memory with their IDs, titles "
            "and types. Use this to see what has been ingested and to find source IDs "
            "for cortex_fetch_content."
        ),
        "params": {
            "source_ids": "Optional list of source IDs to filter by. Lists every source when omitted.",
        },
    },
}

SERVER_INSTRUCTIONS = (
    "Cortex AI memory server. "
    "Use cortex_search to find relevant memories and knowledge graph context. "
    "Use cortex_store to save important information for future recall. "
    "Use cortex_ingest_conversation to store conversation history. "
    "Use cortex_list_memories to browse stored memories. "
    "Use cortex_delete_memory to remove a specific memory. "
    "Use cortex_fetch_content to retrieve the full content of a source. "
    "Use cortex_list_sources to see all ingested sources. "
    "The server must be configured with a Cortex API key and tenant ID."
)


def param(tool: str, name: str) -> str:
    """Description for one parameter of ``tool``."""
    return TOOL_DESCRIPTIONS[tool]["params"][name]
