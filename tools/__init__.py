# =============================================================================
# tools/__init__.py
# =============================================================================
# The MCP-facing half of the server.
#
#   mcp_server.py  FastMCP tool declarations, registration and the stdio loop
#   smoke.py       spawns the server over stdio and lists its tools
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build HTTP requests (core/catalogue.py does)
#   - They do NOT format results (core/formatter.py does)
#   - They do NOT catch upstream errors (core/handlers.py does)
#
# Each tool function declares its parameter names, types, defaults and
# descriptions, which is what the agent sees in `tools/list`.  Those names
# are a compatibility surface and change only with a new tool name.
# =============================================================================
