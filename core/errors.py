# =============================================================================
# core/errors.py  -  Error taxonomy
# =============================================================================
#
#   ConfigurationWarning  startup problem, logged, never fatal
#   UpstreamError         the HTTP call failed (status, or None for network)
#   anything else         reported to the agent as "Unexpected Error"
# =============================================================================

from typing import Any, Optional

REGISTRATION_URL = "https://suarify.my/register-new-user"

AUTH_HINT = (
    " (API authentication failed. Please ensure your API key is valid "
    f"or sign up at {REGISTRATION_URL})"
)

AUTH_FAILURE_STATUSES = (401, 403)


class ConfigurationWarning(UserWarning):
    """A configuration problem that is reported at startup but does not stop it."""


class UpstreamError(Exception):
    """The Suarify API call failed.

    Attributes:
        status: HTTP status code, or None when no response was received.
        payload: The error body sent by the API (parsed JSON or text), if any.
        message: Human-readable description.
    """

    def __init__(self, status: Optional[int], payload: Any = None, message: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload
        self.message = message

    def __str__(self) -> str:
        return self.message

    @property
    def is_network_error(self) -> bool:
        return self.status is None


def with_auth_hint(error: UpstreamError) -> UpstreamError:
    """Append the sign-up hint to authentication failures (401/403)."""
    if error.status in AUTH_FAILURE_STATUSES:
        error.message += AUTH_HINT
        error.args = (error.message,)
    return error
