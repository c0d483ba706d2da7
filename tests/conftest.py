"""Pytest fixtures for the execdns test suite."""

import logging
import logging.handlers
import stat
import sys
from collections.abc import Generator, Sequence
from pathlib import Path

import pytest

from execdns.exceptions import NonZeroExitError
from execdns.models import ExecutionResult

PLUGIN_NAME = "test-plugin"

# Echoes its arguments to stdout and its environment to stderr for the
# present/cleanup actions, mirroring what a real DNS plugin receives.
PLUGIN_SCRIPT = """\
#!{python}
import os
import signal
import sys

action = sys.argv[1] if len(sys.argv) > 1 else ""

if action == "flood":
    sys.stdout.write("x" * int(sys.argv[2]))
    sys.exit(0)
if action == "accents":
    sys.stdout.buffer.write("\\u00e9".encode("utf-8") * int(sys.argv[2]))
    sys.exit(0)
if action == "kill":
    sys.stdout.write("about to die\\n")
    sys.stdout.flush()
    os.kill(os.getpid(), signal.SIGTERM)
if action not in ("present", "cleanup"):
    print(f"argument {{action}} is not recognized")
    sys.exit(1)

print(" ".join(sys.argv[1:]))
for key, value in os.environ.items():
    # PEP 538 locale coercion adds LC_CTYPE inside the interpreter itself
    if key != "LC_CTYPE":
        print(f"{{key}}={{value}}", file=sys.stderr)
"""


@pytest.fixture
def plugin_dir(tmp_path: Path) -> Path:
    """Directory holding an executable test plugin named PLUGIN_NAME."""
    if sys.platform == "win32":
        pytest.skip("plugins are POSIX executables")
    if " " in sys.executable:
        pytest.skip("interpreter path cannot be used in a shebang line")

    script = tmp_path / PLUGIN_NAME
    script.write_text(PLUGIN_SCRIPT.format(python=sys.executable))
    script.chmod(stat.S_IRWXU)
    return tmp_path


@pytest.fixture
def plugin_path(plugin_dir: Path) -> str:
    """Absolute path of the executable test plugin."""
    return str(plugin_dir / PLUGIN_NAME)


class RecordingRunner:
    """Stand-in for run_command that records calls instead of spawning."""

    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.calls: list[dict] = []

    def __call__(
        self,
        path: str,
        args: Sequence[str],
        env: Sequence[str],
        *,
        max_output_bytes: int | None = None,
    ) -> ExecutionResult:
        self.calls.append(
            {
                "path": path,
                "args": list(args),
                "env": list(env),
                "max_output_bytes": max_output_bytes,
            }
        )
        argv = [path, *args]
        error = None
        if self.returncode:
            error = NonZeroExitError(path, argv, self.returncode, self.stdout, self.stderr)
        return ExecutionResult(
            path=path,
            args=argv,
            returncode=self.returncode,
            stdout=self.stdout,
            stderr=self.stderr,
            error=error,
        )


@pytest.fixture
def recording_runner() -> RecordingRunner:
    """A runner that succeeds without starting any process."""
    return RecordingRunner()


class LogCapture:
    """Helper class to capture and inspect log records."""

    def __init__(self, handler: logging.handlers.MemoryHandler) -> None:
        self._handler = handler

    @property
    def records(self) -> list[logging.LogRecord]:
        """Get all captured log records."""
        return self._handler.buffer

    def get_records(
        self, level: int | None = None, name: str | None = None
    ) -> list[logging.LogRecord]:
        """Get log records filtered by level and/or logger name prefix."""
        records = self.records
        if level is not None:
            records = [r for r in records if r.levelno == level]
        if name is not None:
            records = [r for r in records if r.name.startswith(name)]
        return records

    def get_messages(self, level: int | None = None, name: str | None = None) -> list[str]:
        """Get log messages filtered by level and/or logger name prefix."""
        return [r.getMessage() for r in self.get_records(level, name)]

    def clear(self) -> None:
        """Clear all captured log records."""
        self._handler.buffer.clear()


@pytest.fixture
def log_capture() -> Generator[LogCapture]:
    """Capture logs from the execdns library during a test.

    Usage:
        def test_something(log_capture):
            provider.present(...)
            assert "TXT record presented" in log_capture.get_messages(logging.INFO)
    """
    # Capacity large enough that the handler never flushes mid-test
    handler = logging.handlers.MemoryHandler(capacity=1000)
    handler.setLevel(logging.DEBUG)

    package_logger = logging.getLogger("execdns")
    original_level = package_logger.level
    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(handler)

    try:
        yield LogCapture(handler)
    finally:
        package_logger.removeHandler(handler)
        package_logger.setLevel(original_level)
        handler.close()


@pytest.fixture
def failing_runner() -> RecordingRunner:
    """A runner reporting a plugin that exited with status 2."""
    return RecordingRunner(returncode=2, stdout="partial output\n", stderr="zone not found\n")
