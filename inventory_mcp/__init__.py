"""Vehicle inventory MCP tools."""
