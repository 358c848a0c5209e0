"""Transport adapters (stdio, streamable HTTP) for worksection-mcp."""
