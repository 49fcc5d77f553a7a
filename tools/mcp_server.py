# =============================================================================
# tools/mcp_server.py  -  FastMCP Tool Server (every Suarify tool in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Declares every MCP tool the agent can call.  Each tool is a thin typed
#   wrapper: FastMCP validates the arguments against the signature below,
#   and the function hands them to core.handlers.invoke(), which issues one
#   Suarify API request and returns a result envelope.
#
# HOW IT WORKS (the flow):
#   1. The agent calls a tool by name via MCP (e.g., "suarify_list_leads")
#   2. FastMCP validates the arguments against the function signature
#   3. _run() drops absent optionals and calls core.handlers.invoke()
#   4. The envelope becomes a ToolResult (text + structured data), or a
#      ToolError when it is an error envelope (MCP result with isError=true)
#
# TOOL NAMES:
#   suarify_<name>   canonical catalogue, text + structured content
#   <name>           deprecated aliases from the first release, text only,
#                    registered while UPSTREAM_LEGACY_TOOL_NAMES is on
#
# RUNNING THIS SERVER:
#   a) python main.py                       (loads .env, logging, output guard)
#   b) python -m tools.mcp_server           (same, without .env loading)
#
#   Both go through serve(), which installs the output guard.  Running the
#   server any other way leaves stdout unguarded.
# =============================================================================

import contextlib
import functools
import inspect
import json
import logging
from typing import Annotated, Any, Optional, Union

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import Field

from core.catalogue import base_name, canonical_name, get_spec
from core.client import UpstreamClient
from core.config import Settings
from core.handlers import drop_unset, invoke
from core.models import ResultEnvelope
from core.output_guard import OutputGuard

logger = logging.getLogger(__name__)

# =============================================================================
# Logging helpers
# =============================================================================
# Everything here goes through `logging`, which configure_logging() points
# at STDERR.  STDOUT belongs to the MCP protocol.
#
#   CYAN    incoming tool calls with their arguments
#   YELLOW  intermediate status
#   GREEN   responses
#   RED     error envelopes
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

_SECRET_FIELDS = {"openai_key", "password"}


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN (secrets masked)."""
    param_str = ", ".join(
        f"{k}={'***' if k in _SECRET_FIELDS else repr(v)}" for k, v in params.items()
    )
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, envelope: ResultEnvelope) -> ResultEnvelope:
    """Log the envelope in GREEN (or RED for errors), then return it."""
    if envelope.is_error:
        logger.info(f"{_RED}  ← {tool_name} error: {envelope.text}{_RESET}")
    else:
        compact = json.dumps(envelope.structured, separators=(",", ":"), ensure_ascii=False, default=str)
        logger.info(f"{_GREEN}  ← {tool_name} response: {compact}{_RESET}")
    return envelope


# =============================================================================
# Upstream client
# =============================================================================
# One client per process, configured once.  main.py binds it from Settings;
# tests bind one backed by httpx.MockTransport.
# =============================================================================
_client: Optional[UpstreamClient] = None


def get_client() -> UpstreamClient:
    """Get the bound upstream client, building one from the environment if needed."""
    global _client
    if _client is None:
        _client = UpstreamClient.from_settings(Settings.from_env())
    return _client


def set_client(client: Optional[UpstreamClient]) -> None:
    global _client
    _client = client


# =============================================================================
# Envelope → FastMCP result
# =============================================================================
def _to_tool_result(envelope: ResultEnvelope) -> ToolResult:
    if envelope.is_error:
        # FastMCP reports a ToolError as a result with isError=true and this text.
        raise ToolError(envelope.text)

    structured = envelope.structured
    if structured is not None and not isinstance(structured, dict):
        # MCP structured content must be a JSON object.
        structured = {"result": structured}
    return ToolResult(
        content=[TextContent(type="text", text=block["text"]) for block in envelope.content],
        structured_content=structured,
    )


async def _run(tool_name: str, arguments: dict[str, Any]) -> ToolResult:
    """Shared body of every tool: dispatch, log, convert."""
    spec = get_spec(tool_name)
    arguments = drop_unset(arguments)
    _log_request(spec.canonical_name, **arguments)

    client = get_client()
    _log_status(f"{spec.method} {client.base_url}{spec.path}")
    envelope = await invoke(spec, arguments, client)
    return _to_tool_result(_log_response(spec.canonical_name, envelope))


# =============================================================================
# Parameter types
# =============================================================================
PhoneNumber = Annotated[str, Field(description="Target phone number (international format)")]
OwnerEmail = Annotated[str, Field(description="Owner's email address")]
OptionalOwnerEmail = Annotated[Optional[str], Field(description="Filter by owner email")]
OpenAIKey = Annotated[Optional[str], Field(description="Optional OpenAI API key override")]
RecordId = Annotated[str, Field(description="The ID of the record")]
ConfigParams = Annotated[
    Union[dict[str, Any], str],
    Field(description="Configuration parameters object or JSON string"),
]


# =============================================================================
# INBOUND PHONE SETTINGS
# =============================================================================
async def setup_inbound_settings(
    phonenumber: Annotated[str, Field(description="The phone number to configure (e.g., 015487666768)")],
    params: Annotated[str, Field(
        description="JSON string containing main_voice, start_time, owner_email, start_message, "
                    "system_prompt, planned_call_id, transfer_message"
    )],
    openai_key: OpenAIKey = None,
) -> ToolResult:
    """Configure the AI agent behavior, voice, and prompts for inbound calls on a specific
    phone number. This setup is stored as 'inbound-<phonenumber>'. Requires Suarify API Key."""
    return await _run("setup_inbound_settings", {
        "phonenumber": phonenumber,
        "params": params,
        "openai_key": openai_key,
    })


async def get_inbound_settings(
    owner_email: Annotated[Optional[str], Field(
        description="Owner email (required if using system API key)"
    )] = None,
) -> ToolResult:
    """Get the current inbound call settings for the authenticated user's default phone number."""
    return await _run("get_inbound_settings", {"owner_email": owner_email})


# =============================================================================
# GENERIC PHONE CONFIGURATION
# =============================================================================
async def setup_phone_configuration(
    tokenid: Annotated[str, Field(description="Unique token identifier for this configuration")],
    params: ConfigParams,
    openai_key: OpenAIKey = None,
) -> ToolResult:
    """Upsert general phone configuration in the call_params table. Use this for custom
    tokenized configurations.

    `params` may be an object or an already-serialized JSON string; it is forwarded
    exactly as given.
    """
    return await _run("setup_phone_configuration", {
        "tokenid": tokenid,
        "params": params,
        "openai_key": openai_key,
    })


async def get_phone_configuration(
    tokenid: Annotated[Optional[str], Field(
        description="Specific token ID to retrieve. If omitted, returns all (max 100)."
    )] = None,
) -> ToolResult:
    """Retrieve a specific phone configuration by tokenid, or list all configurations."""
    return await _run("get_phone_configuration", {"tokenid": tokenid})


# =============================================================================
# OUTBOUND CALLS
# =============================================================================
async def initiate_call(
    phone_number: Annotated[Optional[str], Field(description="Target phone number (simple format)")] = None,
    system_prompt: Annotated[Optional[str], Field(description="System prompt for AI (simple format)")] = None,
    start_message: Annotated[Optional[str], Field(description="Initial greeting message (simple format)")] = None,
    voice: Annotated[Optional[str], Field(description="Voice selection (simple format)")] = None,
    receipient_phone: Annotated[Optional[str], Field(description="Target phone number (enhanced format)")] = None,
    agent_prompt: Annotated[Optional[str], Field(description="AI instructions (enhanced format)")] = None,
) -> ToolResult:
    """Initiate an outbound AI voice call using simple or enhanced parameters.

    Simple format: phone_number, system_prompt, start_message, voice.
    Enhanced format: receipient_phone, agent_prompt.
    """
    return await _run("initiate_call", {
        "phone_number": phone_number,
        "system_prompt": system_prompt,
        "start_message": start_message,
        "voice": voice,
        "receipient_phone": receipient_phone,
        "agent_prompt": agent_prompt,
    })


async def do_outbound_call(
    owner_email: OwnerEmail,
    password: Annotated[str, Field(description="Must be 'LIVE' to execute the call")],
    receipient_phone: PhoneNumber,
    agent_voice: Annotated[Optional[str], Field(description="Voice selection")] = None,
    agent_prompt: Annotated[Optional[str], Field(description="System prompt")] = None,
    agent_start_message: Annotated[Optional[str], Field(description="First message agent speaks")] = None,
) -> ToolResult:
    """Make an outbound phone call with full validation (balance check, user profile).
    Required for production calls.

    The platform only places the call when `password` is exactly "LIVE".
    """
    return await _run("do_outbound_call", {
        "owner_email": owner_email,
        "password": password,
        "receipient_phone": receipient_phone,
        "agent_voice": agent_voice,
        "agent_prompt": agent_prompt,
        "agent_start_message": agent_start_message,
    })


# =============================================================================
# CALL LOGS
# =============================================================================
async def get_outbound_call_logs(
    current_phone_number: Annotated[str, Field(description="Filter by the outbound phone number used")],
    totalNumberOfRecords: Annotated[int, Field(description="Number of records to return")] = 50,
) -> ToolResult:
    """Get all outbound call logs with optional filters and record limit."""
    return await _run("get_outbound_call_logs", {
        "current_phone_number": current_phone_number,
        "totalNumberOfRecords": totalNumberOfRecords,
    })


async def get_inbound_call_logs(
    current_phone_number: Annotated[str, Field(description="Filter by the inbound phone number")],
    totalNumberOfRecords: Annotated[int, Field(description="Number of records to return")] = 50,
) -> ToolResult:
    """Get all inbound call logs with optional filters and record limit."""
    return await _run("get_inbound_call_logs", {
        "current_phone_number": current_phone_number,
        "totalNumberOfRecords": totalNumberOfRecords,
    })


# =============================================================================
# USER AGENTS
# =============================================================================
async def list_user_agents(
    owner_email: OptionalOwnerEmail = None,
    limit: Annotated[int, Field(description="Maximum number of agents to return")] = 100,
) -> ToolResult:
    """Retrieve all AI agents for the authenticated user."""
    return await _run("list_user_agents", {"owner_email": owner_email, "limit": limit})


async def get_user_agent(
    id: Annotated[str, Field(description="The ID of the user agent")],
    owner_email: OptionalOwnerEmail = None,
) -> ToolResult:
    """Retrieve a single AI agent by ID."""
    return await _run("get_user_agent", {"id": id, "owner_email": owner_email})


async def delete_user_agent(
    id: Annotated[str, Field(description="The ID of the user agent")],
    owner_email: OptionalOwnerEmail = None,
) -> ToolResult:
    """Delete an AI agent by ID."""
    return await _run("delete_user_agent", {"id": id, "owner_email": owner_email})


# =============================================================================
# LEADS MANAGEMENT
# =============================================================================
async def create_lead(
    owner_email: OwnerEmail,
    receipient_name: Annotated[str, Field(description="Name of the recipient")],
    receipient_phone: Annotated[str, Field(description="Phone number of the recipient")],
) -> ToolResult:
    """Create a single lead record with detailed recipient information."""
    return await _run("create_lead", {
        "owner_email": owner_email,
        "receipient_name": receipient_name,
        "receipient_phone": receipient_phone,
    })


async def bulk_upload_leads(
    owner_email: OwnerEmail,
    leads: Annotated[list[dict[str, Any]], Field(
        description="Lead records, each with receipient_name and receipient_phone"
    )],
) -> ToolResult:
    """Create many lead records in one request."""
    return await _run("bulk_upload_leads", {"owner_email": owner_email, "leads": leads})


async def list_leads(
    owner_email: OptionalOwnerEmail = None,
    limit: Annotated[int, Field(description="Maximum number of leads to return")] = 100,
    offset: Annotated[Optional[int], Field(description="Number of leads to skip")] = None,
) -> ToolResult:
    """Retrieve a list of leads with optional filtering and pagination."""
    return await _run("list_leads", {"owner_email": owner_email, "limit": limit, "offset": offset})


async def get_lead(id: Annotated[str, Field(description="The ID of the lead record")]) -> ToolResult:
    """Retrieve a single lead record by ID."""
    return await _run("get_lead", {"id": id})


async def update_lead(
    id: Annotated[str, Field(description="The ID of the lead record")],
    owner_email: OptionalOwnerEmail = None,
    receipient_name: Annotated[Optional[str], Field(description="New name of the recipient")] = None,
    receipient_phone: Annotated[Optional[str], Field(description="New phone number of the recipient")] = None,
) -> ToolResult:
    """Update fields of an existing lead record. Only the fields provided are changed."""
    return await _run("update_lead", {
        "id": id,
        "owner_email": owner_email,
        "receipient_name": receipient_name,
        "receipient_phone": receipient_phone,
    })


async def delete_lead(id: Annotated[str, Field(description="The ID of the lead record")]) -> ToolResult:
    """Remove a lead record from the database."""
    return await _run("delete_lead", {"id": id})


# =============================================================================
# Registration
# =============================================================================
TOOL_FUNCTIONS = [
    setup_inbound_settings,
    get_inbound_settings,
    setup_phone_configuration,
    get_phone_configuration,
    initiate_call,
    do_outbound_call,
    get_outbound_call_logs,
    get_inbound_call_logs,
    list_user_agents,
    get_user_agent,
    delete_user_agent,
    create_lead,
    bulk_upload_leads,
    list_leads,
    get_lead,
    update_lead,
    delete_lead,
]

SERVER_NAME = "suarify-mcp-server"
SERVER_VERSION = "0.2.0"

INSTRUCTIONS = (
    "This server provides tools for interacting with the Suarify voice calling platform. "
    "Use these tools to initiate AI-powered phone calls, manage leads, and configure agent "
    "settings. Requires a valid UPSTREAM_API_KEY environment variable."
)


@contextlib.asynccontextmanager
async def _close_upstream(server: FastMCP):
    """Server lifespan: close the upstream HTTP client when the server stops."""
    try:
        yield {}
    finally:
        if _client is not None:
            await _client.aclose()


def _legacy_variant(fn):
    """Same tool, first-release result shape: text only, no structured content."""

    @functools.wraps(fn)
    async def legacy(*args, **kwargs) -> ToolResult:
        result = await fn(*args, **kwargs)
        return ToolResult(content=result.content)

    return legacy


def create_server(legacy_tool_names: bool = True) -> FastMCP:
    """Build a FastMCP server with the full tool catalogue registered."""
    server = FastMCP(
        name=SERVER_NAME,
        instructions=INSTRUCTIONS,
        version=SERVER_VERSION,
        lifespan=_close_upstream,
    )
    for fn in TOOL_FUNCTIONS:
        name = base_name(fn.__name__)
        server.add_tool(Tool.from_function(fn, name=canonical_name(name)))
        if legacy_tool_names:
            server.add_tool(Tool.from_function(
                _legacy_variant(fn),
                name=name,
                description=f"Deprecated: use {canonical_name(name)}. {inspect.cleandoc(fn.__doc__)}",
            ))
    return server


def serve(settings: Settings) -> None:
    """Run the stdio server until the client disconnects."""
    set_client(UpstreamClient.from_settings(settings))
    server = create_server(settings.legacy_tool_names)
    logger.info(
        "Starting %s %s against %s (%d tools, legacy names %s)",
        SERVER_NAME,
        SERVER_VERSION,
        settings.base_url,
        len(TOOL_FUNCTIONS),
        "on" if settings.legacy_tool_names else "off",
    )
    with OutputGuard().installed():
        server.run()


if __name__ == "__main__":
    from core.output_guard import configure_logging

    _settings = Settings.from_env()
    configure_logging(level=_settings.log_level)
    serve(_settings)
