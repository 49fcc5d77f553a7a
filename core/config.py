# =============================================================================
# core/config.py  -  Process configuration
# =============================================================================
#
# Settings are read once from the environment at startup and never change
# afterwards.  The entry point loads a `.env` file (python-dotenv) first, so
# either source works.
#
#   UPSTREAM_API_KEY            API key sent as `x-api-key` (required)
#   UPSTREAM_BASE_URL           Suarify API host (optional)
#   UPSTREAM_LEGACY_TOOL_NAMES  also register the unprefixed tool names
#   LOG_LEVEL                   stderr log level
#
# The SUARIFY_API_KEY / SUARIFY_BASE_URL names used by earlier releases are
# still honoured when the UPSTREAM_* variables are not set.
# =============================================================================

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.errors import REGISTRATION_URL, ConfigurationWarning

DEFAULT_BASE_URL = "https://suarify1.my"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _first(environ: Mapping[str, str], *names: str) -> Optional[str]:
    """Return the first non-blank value among the given variable names."""
    for name in names:
        value = environ.get(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


@dataclass(frozen=True)
class Settings:
    """Immutable process-wide configuration."""

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    legacy_tool_names: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ).

        Raises:
            ValueError: if UPSTREAM_LEGACY_TOOL_NAMES is not a boolean word.
        """
        env = os.environ if environ is None else environ
        base_url = _first(env, "UPSTREAM_BASE_URL", "SUARIFY_BASE_URL") or DEFAULT_BASE_URL
        return cls(
            api_key=_first(env, "UPSTREAM_API_KEY", "SUARIFY_API_KEY"),
            base_url=base_url.rstrip("/"),
            legacy_tool_names=_flag(_first(env, "UPSTREAM_LEGACY_TOOL_NAMES"), default=True),
            log_level=(_first(env, "LOG_LEVEL") or "INFO").upper(),
        )

    def configuration_warnings(self) -> list[ConfigurationWarning]:
        """Problems worth reporting at startup.  None of them stop the server."""
        found = []
        if not self.api_key:
            found.append(ConfigurationWarning(
                "UPSTREAM_API_KEY environment variable is not set. "
                f"Please sign up at {REGISTRATION_URL} to get your API key."
            ))
        return found
