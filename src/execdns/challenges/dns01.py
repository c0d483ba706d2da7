"""DNS-01 challenge record naming."""

import base64
import hashlib

from execdns.models import ChallengeRecord

CHALLENGE_LABEL = "_acme-challenge"
DEFAULT_TTL = 120


def compute_dns_txt_value(key_authorization: str) -> str:
    """Compute the DNS TXT record value for DNS-01 challenge.

    The TXT record value is the base64url-encoded SHA-256 digest
    of the key authorization string.

    Args:
        key_authorization: The key authorization string.

    Returns:
        The base64url-encoded SHA-256 digest (without padding).
    """
    digest = hashlib.sha256(key_authorization.encode()).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode()


def dns01_record(domain: str, key_authorization: str) -> ChallengeRecord:
    """Compute the TXT record answering a DNS-01 challenge for a domain.

    Wildcard identifiers are validated on their base domain, so a
    leading "*." is dropped.

    Args:
        domain: The domain being validated, e.g. "example.com" or "*.example.com".
        key_authorization: The key authorization for the challenge.

    Returns:
        ChallengeRecord with the fully-qualified name (trailing dot),
        the TXT value and the TTL to publish it with.
    """
    name = domain.removeprefix("*.").rstrip(".")
    return ChallengeRecord(
        fqdn=f"{CHALLENGE_LABEL}.{name}.",
        value=compute_dns_txt_value(key_authorization),
        ttl=DEFAULT_TTL,
    )
