# =============================================================================
# core/output_guard.py  -  Keep stdout clean for the MCP protocol
# =============================================================================
#
# The MCP stdio transport uses STDOUT for JSON-RPC frames.  A single stray
# line of text on that stream (a print() left in a library, a warning, a
# progress message) corrupts the protocol and the client drops the server.
#
# Two mechanisms keep the stream clean:
#
#   1. The transport writes frames to `OutputGuard.buffer`, the raw binary
#      writer of the real stdout.  Frames never pass through any filter.
#   2. While the server runs, `sys.stdout` is the guard itself.  Any write
#      that does not look like a JSON frame (first non-blank character is
#      not `{` or `[`) is sent to STDERR instead.
#
# Logging is configured separately (configure_logging) and always targets
# the diagnostic stream.
# =============================================================================

import contextlib
import io
import logging
import sys
from typing import Iterator, Optional, TextIO

_FRAME_OPENERS = ("{", "[")


def is_protocol_frame(text: str) -> bool:
    """True when `text` starts (after whitespace) like a JSON object or array."""
    return text.lstrip().startswith(_FRAME_OPENERS)


class OutputGuard(io.TextIOBase):
    """A stdout stand-in that only lets protocol frames through."""

    def __init__(self, protocol: Optional[TextIO] = None, diagnostic: Optional[TextIO] = None) -> None:
        super().__init__()
        self.protocol = protocol if protocol is not None else sys.stdout
        self.diagnostic = diagnostic if diagnostic is not None else sys.stderr
        self._last = self.diagnostic

    def write(self, text: str) -> int:
        # Whitespace-only writes (print's trailing "\n") follow the previous write.
        if text.strip():
            self._last = self.protocol if is_protocol_frame(text) else self.diagnostic
        self._last.write(text)
        return len(text)

    def writable(self) -> bool:
        return True

    def flush(self) -> None:
        self.protocol.flush()
        self.diagnostic.flush()

    @property
    def buffer(self):
        """Raw frame writer: the protocol stream's underlying binary buffer."""
        return self.protocol.buffer

    @property
    def encoding(self) -> str:
        return getattr(self.protocol, "encoding", "utf-8")

    def fileno(self) -> int:
        return self.protocol.fileno()

    @contextlib.contextmanager
    def installed(self) -> Iterator["OutputGuard"]:
        """Route sys.stdout through the guard for the duration of the block."""
        with contextlib.redirect_stdout(self):
            yield self


def configure_logging(stream: Optional[TextIO] = None, level: str = "INFO") -> None:
    """Send every log record (and Python warnings) to the diagnostic stream."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=stream if stream is not None else sys.stderr,
        force=True,
    )
    logging.captureWarnings(True)
