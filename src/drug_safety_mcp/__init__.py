"""Drug Safety MCP: openFDA pharmacovigilance tools for LLM agents."""

__version__ = "1.1.0"

SERVER_NAME = "drug-safety-mcp"
