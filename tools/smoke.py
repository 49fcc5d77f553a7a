# =============================================================================
# tools/smoke.py  -  Start the server over stdio and list its tools
# =============================================================================
#
# HOW TO RUN:
#   python -m tools.smoke
#
# WHAT HAPPENS:
#   1. Spawns `python main.py` as a subprocess (stdio transport)
#   2. Sends `initialize`, then `tools/list`
#   3. Prints the tool count and exits 0, or prints the error and exits 1
#
# Any non-JSON byte the server writes to STDOUT breaks step 2, so this is
# also a check that the output guard and logging setup hold.
# =============================================================================

import asyncio
import os
import sys
from pathlib import Path

from fastmcp import Client
from fastmcp.client.transports import StdioTransport

PROJECT_ROOT = Path(__file__).resolve().parents[1]
MAIN_PATH = PROJECT_ROOT / "main.py"


def build_transport(api_key: str = "smoke-test-key") -> StdioTransport:
    """Stdio transport that launches this checkout's server with a dummy key."""
    env = dict(os.environ)
    env.setdefault("UPSTREAM_API_KEY", api_key)
    return StdioTransport(
        command=sys.executable,
        args=[str(MAIN_PATH)],
        env=env,
        cwd=str(PROJECT_ROOT),
    )


async def list_tool_names(transport: StdioTransport) -> list[str]:
    async with Client(transport) as client:
        tools = await client.list_tools()
    return [tool.name for tool in tools]


async def run_smoke_check() -> int:
    print("Starting suarify-mcp-server over stdio...")
    try:
        names = await asyncio.wait_for(list_tool_names(build_transport()), timeout=30)
    except Exception as exc:
        print(f"SERVER ERROR: {exc}", file=sys.stderr)
        return 1

    print("--- INITIALIZED SUCCESSFULLY ---")
    print("--- TOOLS LISTED SUCCESSFULLY ---")
    print(f"Tool count: {len(names)}")
    for name in sorted(names):
        print(f"  - {name}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(run_smoke_check()))
