"""execdns - DNS-01 challenge provider that runs external plugin executables."""

from execdns.exceptions import ConfigurationError, ExecuteError, ExecutionError
from execdns.providers import DnsProvider, ExecuteProvider, get_dns_provider
from execdns.runner import run_command

__all__ = [
    "ConfigurationError",
    "DnsProvider",
    "ExecuteError",
    "ExecuteProvider",
    "ExecutionError",
    "get_dns_provider",
    "run_command",
]
__version__ = "0.1.0"
