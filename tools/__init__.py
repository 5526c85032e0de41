# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP bridge (tools/mcp_server.py).
#
# ARCHITECTURAL ROLE:
#   tools/ translates between MCP and the core dispatcher:
#     1. Publishes one FastMCP tool per core registry descriptor
#     2. Forwards raw call arguments to core.dispatcher.Dispatcher
#     3. Converts ToolResult / ToolError into MCP content / error results
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT validate arguments (core/validation.py does)
#   - They do NOT contain tool logic (core/handlers.py does)
# =============================================================================
