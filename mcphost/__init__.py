"""Sessions, usage tracking and terminal rendering for an LLM chat host with MCP tools."""

__version__ = "0.1.0"