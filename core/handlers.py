# =============================================================================
# core/handlers.py  -  One tool call, start to finish
# =============================================================================
#
# Every tool runs the same three steps:
#
#   1. build_request()       arguments → UpstreamRequest   (core/catalogue.py)
#   2. client.call()         exactly one HTTP request       (core/client.py)
#   3. format_outcome()      Success | Failure → envelope   (core/formatter.py)
#
# invoke() always returns an envelope.  Upstream failures arrive as Failure
# values; anything else that goes wrong on the way is reported to the agent
# as an "Unexpected Error" envelope instead of a broken protocol stream.
# =============================================================================

import logging
from typing import Any, Mapping

from core.catalogue import ToolSpec, build_request
from core.client import UpstreamClient
from core.formatter import format_error, format_outcome
from core.models import ResultEnvelope

logger = logging.getLogger(__name__)


def drop_unset(arguments: Mapping[str, Any]) -> dict[str, Any]:
    """Remove optional arguments the caller did not provide (None values)."""
    return {key: value for key, value in arguments.items() if value is not None}


async def invoke(
    spec: ToolSpec,
    arguments: Mapping[str, Any],
    client: UpstreamClient,
    structured: bool = True,
) -> ResultEnvelope:
    """Run one tool call against the upstream API.

    Args:
        spec: Catalogue entry of the tool being called.
        arguments: Validated call arguments (absent optionals already dropped).
        client: Upstream client to issue the request with.
        structured: Attach the raw payload as structured content on success.
    """
    args = dict(arguments)
    try:
        request = build_request(spec, args)
        outcome = await client.call(request)
        return format_outcome(
            outcome,
            lambda data: spec.summarize(args, data),
            structured=structured,
        )
    except Exception as exc:
        logger.exception("Tool %s failed outside the HTTP layer", spec.name)
        return format_error(exc)
