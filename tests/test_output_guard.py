from __future__ import annotations

import io
import logging
import sys
import warnings

import pytest

from core.output_guard import OutputGuard, configure_logging, is_protocol_frame


class _Stream(io.StringIO):
    """StringIO with a binary buffer, like sys.stdout."""

    def __init__(self) -> None:
        super().__init__()
        self.raw_buffer = io.BytesIO()

    @property
    def buffer(self) -> io.BytesIO:
        return self.raw_buffer


@pytest.mark.parametrize("text, expected", [
    ('{"jsonrpc":"2.0"}\n', True),
    ("  \n[1, 2]", True),
    ("hello world\n", False),
    ("", False),
    ("   ", False),
])
def test_is_protocol_frame(text: str, expected: bool) -> None:
    assert is_protocol_frame(text) is expected


def test_guard_routes_frames_and_diagnostics() -> None:
    protocol, diagnostic = _Stream(), _Stream()
    guard = OutputGuard(protocol, diagnostic)

    guard.write('{"jsonrpc":"2.0","id":1}\n')
    guard.write("Loading plugins...\n")
    guard.write('  [{"batch":true}]\n')

    assert protocol.getvalue() == '{"jsonrpc":"2.0","id":1}\n  [{"batch":true}]\n'
    assert diagnostic.getvalue() == "Loading plugins...\n"


def test_guard_exposes_raw_frame_writer() -> None:
    protocol = _Stream()
    guard = OutputGuard(protocol, _Stream())

    guard.buffer.write(b'{"id":1}\n')

    assert protocol.raw_buffer.getvalue() == b'{"id":1}\n'


def test_installed_redirects_print_and_restores_stdout() -> None:
    protocol, diagnostic = _Stream(), _Stream()
    guard = OutputGuard(protocol, diagnostic)
    original = sys.stdout

    with guard.installed():
        print("stray debug output")
        print('{"jsonrpc":"2.0","result":{}}')

    assert sys.stdout is original
    assert "stray debug output" in diagnostic.getvalue()
    assert "stray debug output" not in protocol.getvalue()
    assert protocol.getvalue().startswith('{"jsonrpc":"2.0"')


def test_whitespace_follows_previous_write() -> None:
    protocol, diagnostic = _Stream(), _Stream()
    guard = OutputGuard(protocol, diagnostic)

    guard.write('{"id":1}')
    guard.write("\n")
    guard.write("note")
    guard.write("\n")

    assert protocol.getvalue() == '{"id":1}\n'
    assert diagnostic.getvalue() == "note\n"


def test_logging_and_warnings_go_to_diagnostic_stream() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    diagnostic = _Stream()
    configure_logging(diagnostic, level="info")
    try:
        logging.getLogger("suarify.test").info("informational")
        logging.getLogger("suarify.test").warning("careful")
        with warnings.catch_warnings():
            warnings.simplefilter("always")
            warnings.warn("deprecated thing")
    finally:
        logging.captureWarnings(False)
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    output = diagnostic.getvalue()
    assert "informational" in output
    assert "careful" in output
    assert "deprecated thing" in output
