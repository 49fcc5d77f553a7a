# =============================================================================
# core/catalogue.py  -  The tool catalogue: tool name → HTTP request shape
# =============================================================================
#
# Each tool is a fixed mapping of its arguments onto one Suarify API call.
# This module holds that mapping as data (ToolSpec) so it can be tested
# without an MCP runtime or a network.
#
# TOOL NAMES:
#   Tool names and argument names are a compatibility surface.  The
#   canonical names carry the "suarify_" prefix; the unprefixed base names
#   below are kept as deprecated aliases by the MCP layer.
#
# ARGUMENT NAMES:
#   Arguments are forwarded under the names the API expects, including its
#   own spellings ("receipient_phone", "totalNumberOfRecords").
# =============================================================================

from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

from core.models import Placement, UpstreamRequest, tag_config

TOOL_PREFIX = "suarify_"


def canonical_name(name: str) -> str:
    """Prefixed tool name for a base name (idempotent)."""
    return name if name.startswith(TOOL_PREFIX) else TOOL_PREFIX + name


def base_name(name: str) -> str:
    return name[len(TOOL_PREFIX):] if name.startswith(TOOL_PREFIX) else name


def quote_path_id(value: Any) -> str:
    """Encode an id as exactly one path segment.

    `.` and `..` are dot segments that URL normalization would collapse, so
    their dots are percent-encoded too.
    """
    segment = quote(str(value), safe="")
    if segment in (".", ".."):
        return segment.replace(".", "%2E")
    return segment


def _count(data: Any) -> int:
    return len(data) if isinstance(data, list) else 0


@dataclass(frozen=True)
class ToolSpec:
    """How one tool turns its arguments into a request and a summary line."""

    name: str                            # base name, e.g. "get_lead"
    method: str
    path: str                            # may contain "{id}"
    placement: Placement
    summary: str                         # str.format template, see summarize()
    config_field: Optional[str] = None   # argument holding a free-form config value

    @property
    def canonical_name(self) -> str:
        return canonical_name(self.name)

    def summarize(self, arguments: dict[str, Any], data: Any) -> str:
        """Render the summary line.  `{count}` is the length of a list payload."""
        return self.summary.format(count=_count(data), **arguments)


def build_request(spec: ToolSpec, arguments: dict[str, Any]) -> UpstreamRequest:
    """Map validated call arguments onto exactly one HTTP request.

    For path-based placements the `id` argument is interpolated into the
    path and removed from whatever is sent as query or body.
    """
    rest = dict(arguments)
    path = spec.path
    if spec.placement.uses_path_id:
        if "id" not in rest:
            raise KeyError(f"{spec.name} requires an 'id' argument")
        path = path.format(id=quote_path_id(rest.pop("id")))

    if spec.config_field and spec.config_field in rest:
        rest[spec.config_field] = tag_config(rest[spec.config_field]).value

    if spec.placement in (Placement.BODY, Placement.PATH_BODY):
        return UpstreamRequest(spec.method, path, body=rest)
    if spec.placement in (Placement.QUERY, Placement.PATH_QUERY):
        return UpstreamRequest(spec.method, path, params=rest)
    return UpstreamRequest(spec.method, path)


# -----------------------------------------------------------------------------
# The catalogue
# -----------------------------------------------------------------------------
_SPECS = [
    # --- Inbound phone settings ---
    ToolSpec("setup_inbound_settings", "POST", "/inbound-phone-settings", Placement.BODY,
             "Inbound settings configured for {phonenumber}", config_field="params"),
    ToolSpec("get_inbound_settings", "GET", "/inbound-phone-settings", Placement.QUERY,
             "Retrieved inbound call settings."),

    # --- Generic phone configuration ---
    ToolSpec("setup_phone_configuration", "POST", "/api/phone-configuration", Placement.BODY,
             "Phone configuration upserted for token: {tokenid}", config_field="params"),
    ToolSpec("get_phone_configuration", "GET", "/api/phone-configuration", Placement.QUERY,
             "Retrieved phone configurations."),

    # --- Outbound calls ---
    ToolSpec("initiate_call", "POST", "/api/call", Placement.BODY,
             "Call initiated successfully."),
    ToolSpec("do_outbound_call", "POST", "/do-outbound-phone-call", Placement.BODY,
             "Outbound call executed."),

    # --- Call logs ---
    ToolSpec("get_outbound_call_logs", "GET", "/api/outbound-call-logs", Placement.QUERY,
             "Retrieved {count} outbound logs."),
    ToolSpec("get_inbound_call_logs", "GET", "/api/inbound-call-logs", Placement.QUERY,
             "Retrieved {count} inbound logs."),

    # --- User agents ---
    ToolSpec("list_user_agents", "GET", "/api/user-agents", Placement.QUERY,
             "Retrieved {count} user agents."),
    ToolSpec("get_user_agent", "GET", "/api/user-agents/{id}", Placement.PATH_QUERY,
             "Details for user agent {id}."),
    ToolSpec("delete_user_agent", "DELETE", "/api/user-agents/{id}", Placement.PATH_QUERY,
             "User agent {id} deleted."),

    # --- Leads ---
    ToolSpec("create_lead", "POST", "/api/user-leads", Placement.BODY,
             "Lead created for {receipient_name}"),
    ToolSpec("bulk_upload_leads", "POST", "/api/user-leads/bulk", Placement.BODY,
             "Bulk upload processed."),
    ToolSpec("list_leads", "GET", "/api/user-leads", Placement.QUERY,
             "Retrieved {count} leads."),
    ToolSpec("get_lead", "GET", "/api/user-leads/{id}", Placement.PATH,
             "Details for lead {id}."),
    ToolSpec("update_lead", "PATCH", "/api/user-leads/{id}", Placement.PATH_BODY,
             "Lead {id} updated."),
    ToolSpec("delete_lead", "DELETE", "/api/user-leads/{id}", Placement.PATH,
             "Lead {id} deleted."),
]

CATALOGUE: dict[str, ToolSpec] = {spec.name: spec for spec in _SPECS}


def get_spec(name: str) -> ToolSpec:
    """Look up a tool by base or prefixed name.  Raises KeyError if unknown."""
    try:
        return CATALOGUE[base_name(name)]
    except KeyError:
        raise KeyError(f"Unknown tool: {name!r}") from None
