"""Command runner for DNS plugin executables.

The plugin is started with an environment built only from the configured
KEY=VALUE list; nothing is inherited from the calling process. Both output
streams are drained on background threads so a chatty plugin can never
block on a full pipe, and each stream can be capped to a maximum size.
"""

import codecs
import subprocess
import threading
from collections.abc import Sequence
from typing import IO

from execdns._logging import Timer, get_domain_extra, get_logger
from execdns.exceptions import (
    CaptureFailedError,
    ExecutionError,
    LaunchFailedError,
    NonZeroExitError,
)
from execdns.models import ExecutionResult

logger = get_logger(__name__)

_CHUNK_SIZE = 64 * 1024


def env_to_mapping(env: Sequence[str]) -> dict[str, str]:
    """Convert KEY=VALUE strings into an environment mapping.

    Entries are split on the first "=". Entries without one, or with an
    empty key, cannot be expressed in a process environment and are
    skipped. A repeated key keeps its last value.

    Args:
        env: KEY=VALUE strings.

    Returns:
        Mapping suitable for subprocess.Popen(env=...).
    """
    mapping: dict[str, str] = {}
    for entry in env:
        key, sep, value = entry.partition("=")
        if not sep or not key:
            logger.warning(
                "Skipping malformed environment entry",
                extra={"entry": key, **get_domain_extra()},
            )
            continue
        mapping[key] = value
    return mapping


class _StreamCapture:
    """Drain a pipe on a thread, keeping at most ``limit`` bytes."""

    def __init__(self, stream: IO[bytes], limit: int | None):
        self._stream = stream
        self._limit = limit
        self._chunks: list[bytes] = []
        self._kept = 0
        self.omitted = 0
        self.error: Exception | None = None
        self._thread = threading.Thread(target=self._drain, daemon=True)
        self._thread.start()

    def _drain(self) -> None:
        try:
            while chunk := self._stream.read(_CHUNK_SIZE):
                self._keep(chunk)
        except (OSError, ValueError) as exc:
            self.error = exc
        finally:
            self._stream.close()

    def _keep(self, chunk: bytes) -> None:
        if self._limit is None:
            self._chunks.append(chunk)
            return
        room = max(self._limit - self._kept, 0)
        if room:
            self._chunks.append(chunk[:room])
            self._kept += min(room, len(chunk))
        self.omitted += max(len(chunk) - room, 0)

    def join(self) -> None:
        self._thread.join()

    def text(self) -> str:
        data = b"".join(self._chunks)
        if not self.omitted:
            return data.decode("utf-8", errors="replace")
        # Without a final flush a character split by the cap stays pending
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        text = decoder.decode(data, final=False)
        omitted = self.omitted + len(decoder.getstate()[0])
        return text + f"\n[output truncated: {omitted} bytes omitted]"


def run_command(
    path: str,
    args: Sequence[str],
    env: Sequence[str],
    *,
    max_output_bytes: int | None = None,
) -> ExecutionResult:
    """Run an executable and capture its output.

    Blocks until the process exits. Failures are reported in the returned
    result, never raised, so the captured output is always available.

    Args:
        path: Path of the executable. Also used as argv[0].
        args: Arguments following argv[0].
        env: KEY=VALUE strings forming the complete child environment.
        max_output_bytes: Per-stream capture cap in bytes. None keeps everything.

    Returns:
        ExecutionResult with the exit status, captured stdout and stderr,
        and an ExecutionError subclass when the run failed.
    """
    argv = [path, *args]
    context = {"path": path, "argv": argv, "env": list(env), **get_domain_extra()}

    logger.info("Executing plugin", extra=context)

    with Timer() as timer:
        try:
            proc = subprocess.Popen(
                argv,
                executable=path,
                env=env_to_mapping(env),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except (OSError, ValueError) as exc:
            reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
            error = LaunchFailedError(path, argv, f"failed to start: {reason}")
            logger.error("Plugin failed to start", extra={**context, "error": str(error)})
            return ExecutionResult(path=path, args=argv, error=error)

        try:
            out = _StreamCapture(proc.stdout, max_output_bytes)
            err = _StreamCapture(proc.stderr, max_output_bytes)
            returncode = proc.wait()
            out.join()
            err.join()
        except BaseException:
            # Never leave the plugin running or unreaped
            proc.kill()
            proc.wait()
            raise

    stdout = out.text()
    stderr = err.text()

    logger.info(
        "Plugin finished",
        extra={
            **context,
            "returncode": returncode,
            "stdout": stdout,
            "stderr": stderr,
            "duration_ms": timer.elapsed_ms,
        },
    )

    error: ExecutionError | None = None
    if returncode != 0:
        error = NonZeroExitError(path, argv, returncode, stdout, stderr)
    elif out.error is not None or err.error is not None:
        cause = out.error or err.error
        error = CaptureFailedError(path, argv, f"failed to read output: {cause}", stdout, stderr)

    if error is not None:
        logger.error(
            "Plugin execution failed",
            extra={
                **context,
                "returncode": returncode,
                "stdout": stdout,
                "stderr": stderr,
                "error": str(error),
            },
        )

    return ExecutionResult(
        path=path,
        args=argv,
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
        error=error,
    )
