# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the tool server's logic: data models, validation,
# the tool registry, the dispatcher, the handlers and the Gemini client.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any MCP transport code.  The
#   dispatcher takes an InvocationRequest and returns a ToolResult or a
#   ToolError; tools/mcp_server.py is the only place that knows about MCP.
# =============================================================================
