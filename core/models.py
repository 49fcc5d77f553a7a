# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the translation layer)
# =============================================================================
#
# Every value that crosses a seam of the system has a shape defined here:
#
#   Call Arguments ──▶ UpstreamRequest ──▶ Success | Failure ──▶ ResultEnvelope
#      (from MCP)        (to httpx)          (from client)        (back to MCP)
#
# None of these objects outlive a single tool call.  All long-lived state
# (leads, agents, call logs) lives on the Suarify platform.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


# -----------------------------------------------------------------------------
# Placement: where a tool's arguments go in the outgoing HTTP request
# -----------------------------------------------------------------------------
class Placement(Enum):
    """How call arguments are mapped onto an HTTP request."""

    BODY = "body"                # whole mapping is the JSON body
    QUERY = "query"              # whole mapping is the query string
    PATH_QUERY = "path_query"    # `id` goes into the path, the rest into the query
    PATH_BODY = "path_body"      # `id` goes into the path, the rest into the body
    PATH = "path"                # `id` goes into the path, nothing else is sent

    @property
    def uses_path_id(self) -> bool:
        return self in (Placement.PATH_QUERY, Placement.PATH_BODY, Placement.PATH)


# -----------------------------------------------------------------------------
# UpstreamRequest: one HTTP request, derived deterministically from arguments
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class UpstreamRequest:
    """A single request against the Suarify REST API."""

    method: str                              # "GET", "POST", "PATCH", "DELETE"
    path: str                                # "/api/user-leads/42"
    params: Optional[dict[str, Any]] = None  # query string (GET / DELETE)
    body: Optional[dict[str, Any]] = None    # JSON body (POST / PATCH)


# -----------------------------------------------------------------------------
# Outcome of an upstream call: a tiny result type instead of exceptions
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Success:
    """The upstream call returned 2xx; `data` is the parsed body."""

    data: Any


@dataclass(frozen=True)
class Failure:
    """The upstream call failed; `error` is usually an UpstreamError."""

    error: Exception


Outcome = Union[Success, Failure]


# -----------------------------------------------------------------------------
# Free-form configuration values
# -----------------------------------------------------------------------------
# Phone and inbound settings take a `params` value that callers send either
# as a structured object or as an already-serialized JSON string.  Upstream
# treats the two representations differently, so each is forwarded exactly
# as received.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RawConfig:
    """A configuration value that arrived as a JSON string."""

    text: str

    @property
    def value(self) -> str:
        return self.text


@dataclass(frozen=True)
class StructuredConfig:
    """A configuration value that arrived as a mapping."""

    data: dict[str, Any]

    @property
    def value(self) -> dict[str, Any]:
        return self.data


ConfigValue = Union[RawConfig, StructuredConfig]


def tag_config(value: Any) -> ConfigValue:
    """Tag a configuration value with the representation it arrived in."""
    if isinstance(value, str):
        return RawConfig(value)
    if isinstance(value, dict):
        return StructuredConfig(value)
    raise TypeError(
        f"configuration value must be an object or a JSON string, got {type(value).__name__}"
    )


# -----------------------------------------------------------------------------
# ResultEnvelope: the only object handed back to the MCP runtime
# -----------------------------------------------------------------------------
@dataclass
class ResultEnvelope:
    """MCP tool result: text content blocks, optional structured data, error flag."""

    content: list[dict[str, Any]] = field(default_factory=list)
    structured: Any = None
    is_error: bool = False

    @classmethod
    def text_only(cls, text: str, is_error: bool = False) -> "ResultEnvelope":
        return cls(content=[{"type": "text", "text": text}], is_error=is_error)

    @property
    def text(self) -> str:
        """All text blocks joined together."""
        return "\n".join(
            block["text"] for block in self.content if block.get("type") == "text"
        )

    def to_dict(self) -> dict[str, Any]:
        """Render the envelope in MCP wire shape."""
        result: dict[str, Any] = {"content": list(self.content)}
        if self.structured is not None:
            result["structuredContent"] = self.structured
        if self.is_error:
            result["isError"] = True
        return result
