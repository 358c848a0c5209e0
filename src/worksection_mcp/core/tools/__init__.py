"""Worksection MCP tools; each public coroutine takes ``client`` first."""
