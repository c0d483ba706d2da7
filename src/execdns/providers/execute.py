"""DNS provider that delegates record changes to an external plugin."""

from collections.abc import Callable, Mapping, Sequence
from datetime import timedelta

from execdns._logging import get_domain_extra, get_logger, reset_domain, set_domain
from execdns.challenges.dns01 import dns01_record
from execdns.config import load_config, normalize_max_output
from execdns.exceptions import ConfigurationError
from execdns.models import (
    DEFAULT_MAX_OUTPUT_BYTES,
    DEFAULT_PLUGIN_DIR,
    ChallengeRecord,
    ExecutionResult,
    PluginAction,
    ProviderConfig,
)
from execdns.providers.base import DnsProvider
from execdns.runner import run_command

logger = get_logger(__name__)

Runner = Callable[..., ExecutionResult]
RecordFunc = Callable[[str, str], ChallengeRecord]


class ExecuteProvider(DnsProvider):
    """DNS provider backed by an executable plugin.

    The plugin is called as ``<plugin_dir><plugin_name> present <fqdn> <value>``
    to publish a record and ``<plugin_dir><plugin_name> cleanup <fqdn> ""``
    to remove it. It runs with exactly the configured environment and must
    exit 0 on success.

    Args:
        config: Provider settings.
        runner: Callable used to run the plugin (defaults to run_command).
        record: Callable computing the challenge record (defaults to dns01_record).

    Raises:
        ConfigurationError: If the plugin name or the environment list is empty.
    """

    # Propagation policy advised to callers
    PROPAGATION_TIMEOUT = timedelta(seconds=120)
    POLL_INTERVAL = timedelta(seconds=2)

    def __init__(
        self,
        config: ProviderConfig,
        runner: Runner = run_command,
        record: RecordFunc = dns01_record,
    ):
        if not config.plugin_name or not config.environment:
            raise ConfigurationError()

        self.config = config
        self.binary_path = config.plugin_dir + config.plugin_name
        self._runner = runner
        self._record = record

    @classmethod
    def from_credentials(
        cls,
        plugin_name: str,
        env: Sequence[str],
        *,
        plugin_dir: str = DEFAULT_PLUGIN_DIR,
        max_output_bytes: int | None = DEFAULT_MAX_OUTPUT_BYTES,
    ) -> "ExecuteProvider":
        """Create a provider from an explicit plugin name and environment.

        Args:
            plugin_name: File name of the plugin inside plugin_dir.
            env: KEY=VALUE strings passed to the plugin as its environment.
            plugin_dir: Directory prefix the plugin name is appended to.
            max_output_bytes: Per-stream capture cap; None or 0 for no cap.

        Raises:
            ConfigurationError: If plugin_name or env is empty, or
                max_output_bytes is negative.
        """
        if not plugin_name or not env:
            raise ConfigurationError()

        return cls(
            ProviderConfig(
                plugin_name=plugin_name,
                environment=tuple(env),
                plugin_dir=plugin_dir,
                max_output_bytes=normalize_max_output(max_output_bytes),
            )
        )

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> "ExecuteProvider":
        """Create a provider from EXECUTE_* environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Raises:
            ConfigurationError: If required variables are missing or empty.
        """
        return cls(load_config(environ))

    @property
    def plugin_name(self) -> str:
        return self.config.plugin_name

    @property
    def environment(self) -> tuple[str, ...]:
        return self.config.environment

    def timeout(self) -> tuple[timedelta, timedelta]:
        """Return the (timeout, interval) to use when checking for DNS propagation."""
        return self.PROPAGATION_TIMEOUT, self.POLL_INTERVAL

    def present(self, domain: str, token: str, key_authorization: str) -> None:
        """Publish the challenge TXT record through the plugin.

        The token is not used: the record depends only on the domain and
        the key authorization.

        Raises:
            ExecutionError: If the plugin could not be run or exited non-zero.
        """
        record = self._record(domain, key_authorization)
        self._execute(domain, PluginAction.PRESENT, record.fqdn, record.value)
        logger.info(
            "TXT record presented",
            extra={"fqdn": record.fqdn, "plugin": self.plugin_name, "domain": domain},
        )

    def cleanup(self, domain: str, token: str, key_authorization: str) -> None:
        """Remove the challenge TXT record through the plugin.

        Only the record name is passed; the value argument is always empty.

        Raises:
            ExecutionError: If the plugin could not be run or exited non-zero.
        """
        fqdn = self._record(domain, key_authorization).fqdn
        self._execute(domain, PluginAction.CLEANUP, fqdn, "")
        logger.info(
            "TXT record cleaned up",
            extra={"fqdn": fqdn, "plugin": self.plugin_name, "domain": domain},
        )

    def _execute(self, domain: str, action: PluginAction, fqdn: str, value: str) -> None:
        token = set_domain(domain)
        try:
            logger.debug(
                "Invoking DNS plugin",
                extra={"action": str(action), "fqdn": fqdn, **get_domain_extra()},
            )
            result = self._runner(
                self.binary_path,
                [str(action), fqdn, value],
                list(self.environment),
                max_output_bytes=self.config.max_output_bytes,
            )
        finally:
            reset_domain(token)
        result.raise_for_error()
