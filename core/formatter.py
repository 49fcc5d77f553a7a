# =============================================================================
# core/formatter.py  -  Outcome → MCP result envelope
# =============================================================================
#
# Success envelope (one text block):
#
#     Retrieved 2 leads.
#
#     ### Raw Data (JSON):
#     ```json
#     [ ... pretty-printed payload ... ]
#     ```
#
# plus, for the canonical tools, the untouched payload as structured data.
#
# Error envelope (one text block, is_error=True):
#
#     API Error (401): Request failed with status code 401 (...) - {"error":"Unauthorized"}
#     API Error (Network): All connection attempts failed
#     Unexpected Error: <message>
#
# Every function here is total: it returns an envelope for any input and
# never raises.
# =============================================================================

import json
from typing import Any, Callable

from core.errors import UpstreamError
from core.models import Failure, Outcome, ResultEnvelope, Success


def format_success(summary: str, data: Any, structured: bool = True) -> ResultEnvelope:
    """Summary line plus the payload as pretty-printed JSON.

    Args:
        summary: Human-readable one-liner for the agent.
        data: Parsed upstream payload.
        structured: Also attach `data` unchanged as structured content.
    """
    try:
        rendered = json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        return format_error(exc)
    text = f"{summary}\n\n### Raw Data (JSON):\n```json\n{rendered}\n```"
    envelope = ResultEnvelope.text_only(text)
    if structured:
        envelope.structured = data
    return envelope


def format_error(error: BaseException) -> ResultEnvelope:
    """Classify a failure and render it as an error envelope."""
    if isinstance(error, UpstreamError):
        status = error.status if error.status is not None else "Network"
        message = f"API Error ({status}): {error.message}"
        if isinstance(error.payload, (dict, list)):
            message += f" - {_compact(error.payload)}"
    else:
        message = f"Unexpected Error: {error}"
    return ResultEnvelope.text_only(message, is_error=True)


def format_outcome(
    outcome: Outcome,
    summarize: Callable[[Any], str],
    structured: bool = True,
) -> ResultEnvelope:
    """Render a Success or Failure.  `summarize` builds the summary from the payload."""
    if isinstance(outcome, Success):
        return format_success(summarize(outcome.data), outcome.data, structured)
    if isinstance(outcome, Failure):
        return format_error(outcome.error)
    return format_error(TypeError(f"not an outcome: {outcome!r}"))


def _compact(payload: Any) -> str:
    try:
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(payload)
