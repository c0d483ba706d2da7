"""DNS providers for ACME DNS-01 challenges."""

from collections.abc import Callable, Mapping

from execdns.exceptions import ConfigurationError
from execdns.providers.base import DnsProvider
from execdns.providers.execute import ExecuteProvider

_PROVIDERS: dict[str, Callable[[Mapping[str, str] | None], DnsProvider]] = {
    "execute": ExecuteProvider.from_environment,
}


def get_dns_provider(name: str, environ: Mapping[str, str] | None = None) -> DnsProvider:
    """Instantiate a DNS provider by name.

    Args:
        name: Provider name, case-insensitive (e.g. "execute").
        environ: Mapping the provider reads its settings from. Defaults to os.environ.

    Returns:
        A configured DnsProvider instance.

    Raises:
        ConfigurationError: If the name is unknown or the provider is misconfigured.
    """
    factory = _PROVIDERS.get(name.strip().lower())
    if factory is None:
        raise ConfigurationError(f"Unknown DNS provider: '{name}'")
    return factory(environ)


__all__ = ["DnsProvider", "ExecuteProvider", "get_dns_provider"]
