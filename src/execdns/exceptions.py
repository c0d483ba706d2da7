"""Exceptions raised by execdns."""

import signal as _signal
from collections.abc import Sequence

MISSING_PARAMETERS = "execute parameters missing"


class ExecuteError(Exception):
    """Base exception for everything raised by execdns."""


class ConfigurationError(ExecuteError, ValueError):
    """Provider configuration is incomplete or invalid.

    Raised while building a provider, before any plugin is started.
    """

    def __init__(self, message: str = MISSING_PARAMETERS):
        self.message = message
        super().__init__(message)


class ExecutionError(ExecuteError):
    """Running the DNS plugin failed.

    Carries the command line and whatever the plugin wrote before it
    stopped, so callers can log diagnostics without re-running it.

    Args:
        path: Path of the plugin executable.
        args: Full argument vector, argv[0] included.
        detail: Human-readable reason.
        stdout: Captured standard output (possibly partial).
        stderr: Captured standard error (possibly partial).
    """

    retryable = False

    def __init__(
        self,
        path: str,
        args: Sequence[str],
        detail: str,
        stdout: str = "",
        stderr: str = "",
    ):
        self.path = path
        self.args_vector = list(args)
        self.detail = detail
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"{path}: {detail}")


class LaunchFailedError(ExecutionError):
    """The plugin could not be started (missing, not executable, OS error)."""


class NonZeroExitError(ExecutionError):
    """The plugin ran but exited with a non-zero status or was killed."""

    retryable = True

    def __init__(
        self,
        path: str,
        args: Sequence[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ):
        self.returncode = returncode
        super().__init__(path, args, self._describe(returncode), stdout, stderr)

    @property
    def signal(self) -> int | None:
        """Signal number that terminated the plugin, if any."""
        return -self.returncode if self.returncode < 0 else None

    @staticmethod
    def _describe(returncode: int) -> str:
        if returncode >= 0:
            return f"exit status {returncode}"
        try:
            name = _signal.Signals(-returncode).name
        except ValueError:
            name = f"signal {-returncode}"
        return f"terminated by {name}"


class CaptureFailedError(ExecutionError):
    """Reading the plugin's output streams failed."""

    retryable = True
