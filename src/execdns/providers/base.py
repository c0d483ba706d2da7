"""Abstract base class for DNS providers."""

from abc import ABC, abstractmethod
from datetime import timedelta


class DnsProvider(ABC):
    """Abstract interface for DNS-01 challenge providers.

    A challenge solver calls present() before asking the ACME server to
    validate a challenge and cleanup() once validation has finished.
    """

    @abstractmethod
    def present(self, domain: str, token: str, key_authorization: str) -> None:
        """Publish the TXT record for a DNS-01 challenge.

        Args:
            domain: The domain being validated.
            token: The challenge token.
            key_authorization: The key authorization for the challenge.

        Raises:
            Exception: If the record could not be provisioned.
        """
        ...

    @abstractmethod
    def cleanup(self, domain: str, token: str, key_authorization: str) -> None:
        """Remove the TXT record published by present().

        Args:
            domain: The domain being validated.
            token: The challenge token.
            key_authorization: The key authorization for the challenge.

        Raises:
            Exception: If the record could not be removed.
        """
        ...

    @abstractmethod
    def timeout(self) -> tuple[timedelta, timedelta]:
        """Propagation policy advised to the caller.

        Returns:
            (timeout, interval): how long to wait for the record to become
            visible, and how often to check.
        """
        ...
