"""Logging helpers shared by the runner and the providers."""

import logging
import time
from contextvars import ContextVar, Token

# Library stays silent until the application configures logging
logging.getLogger("execdns").addHandler(logging.NullHandler())

# Challenge domain whose plugin run is in progress on this thread/task
_challenge_domain: ContextVar[str | None] = ContextVar("challenge_domain", default=None)


def set_domain(domain: str | None) -> Token[str | None]:
    """Tag log records emitted in this context with a challenge domain.

    Returns:
        Token to pass to reset_domain().
    """
    return _challenge_domain.set(domain)


def reset_domain(token: Token[str | None]) -> None:
    _challenge_domain.reset(token)


def get_domain_extra() -> dict[str, str]:
    """Return ``{"domain": ...}`` for log extra fields, or {} outside a challenge."""
    domain = _challenge_domain.get()
    return {} if domain is None else {"domain": domain}


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class Timer:
    """Measures the wall-clock duration of a block in milliseconds."""

    def __init__(self) -> None:
        self.elapsed_ms: float = 0
        self._start: float = 0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
