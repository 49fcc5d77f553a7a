# =============================================================================
# main.py  -  Entry Point for the Suarify MCP server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py          (or the `suarify-mcp-server` console script)
#
# An MCP client (Claude Desktop, an ADK agent, ...) normally starts this as
# a subprocess and talks to it over stdin/stdout:
#
#     {
#         "mcpServers": {
#             "suarify": {
#                 "command": "suarify-mcp-server",
#                 "env": {"UPSTREAM_API_KEY": "sk_suarify_..."}
#             }
#         }
#     }
#
# WHAT HAPPENS:
#   1. Loads a .env file if present (UPSTREAM_API_KEY, UPSTREAM_BASE_URL, ...)
#   2. Reads Settings from the environment
#   3. Points all logging at STDERR
#   4. Reports configuration problems (a missing API key is logged, not fatal)
#   5. Runs the FastMCP stdio server with the output guard installed
# =============================================================================

import logging

from dotenv import load_dotenv

# Load environment variables from .env before Settings reads them.
load_dotenv()

from core.config import Settings
from core.output_guard import configure_logging
from tools.mcp_server import serve

logger = logging.getLogger("suarify")


def main() -> None:
    settings = Settings.from_env()
    configure_logging(level=settings.log_level)

    for warning in settings.configuration_warnings():
        logger.critical("CRITICAL: %s", warning)

    serve(settings)


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    main()
