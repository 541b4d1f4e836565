"""Cortex AI memory exposed to agents as MCP tools."""

__version__ = "1.0.0"
