"""Pydantic models shared by the runner and the providers."""

from enum import StrEnum

from pydantic import BaseModel, Field

from execdns.exceptions import ExecutionError

DEFAULT_PLUGIN_DIR = "/srv/execute_plugin_dir/"
DEFAULT_MAX_OUTPUT_BYTES = 1024 * 1024


class PluginAction(StrEnum):
    """First argument passed to a DNS plugin."""

    PRESENT = "present"
    CLEANUP = "cleanup"


class ProviderConfig(BaseModel):
    """Settings for the execute DNS provider."""

    plugin_name: str
    environment: tuple[str, ...]
    plugin_dir: str = DEFAULT_PLUGIN_DIR
    max_output_bytes: int | None = Field(default=DEFAULT_MAX_OUTPUT_BYTES, gt=0)

    model_config = {"frozen": True}


class ChallengeRecord(BaseModel):
    """TXT record that answers a DNS-01 challenge."""

    fqdn: str
    value: str
    ttl: int

    model_config = {"frozen": True}


class ExecutionResult(BaseModel):
    """Outcome of one plugin run."""

    path: str
    args: list[str]
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: ExecutionError | None = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def ok(self) -> bool:
        """True when the plugin exited with status zero."""
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise the carried ExecutionError, if any."""
        if self.error is not None:
            raise self.error
