# =============================================================================
# core/__init__.py
# =============================================================================
# The protocol-independent half of the Suarify MCP server.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or the MCP SDK.  It knows how to
#   turn tool arguments into a Suarify API request and how to turn the answer
#   into a result envelope, and nothing about the stdio transport.
#
#   config.py        settings from the environment
#   output_guard.py  stdout purity + logging setup
#   errors.py        ConfigurationWarning, UpstreamError, auth hint
#   client.py        httpx-based Suarify API client
#   models.py        request / outcome / envelope data classes
#   catalogue.py     tool name → HTTP request mapping
#   formatter.py     outcome → envelope
#   handlers.py      invoke(): the three steps of every tool call
# =============================================================================
