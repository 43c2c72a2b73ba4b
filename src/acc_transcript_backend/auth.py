"""
Static API-key authentication and client-scope checks.

Keys are compared by exact string equality against a table built from
configuration. There is no hashing, expiry or rotation. Successful logins are
written to the ``audit`` logger so operators can see who accessed what.
"""

import logging
from typing import Dict, Mapping, Optional

from acc_transcript_backend.config.config_schema import ApiKeyEntry
from acc_transcript_backend.errors import Unauthenticated
from acc_transcript_backend.models.user import WILDCARD_CLIENT, CallerIdentity

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("audit")

BEARER_PREFIX = "Bearer "


def mask_credential(token: Optional[str]) -> str:
    """Show only the first few characters of a credential for log output."""
    if not token:
        return "<empty>"
    return f"{token[:min(10, len(token))]}..."


def parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header value.

    Returns None when the header is missing, uses another scheme or carries an
    empty token.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):]
    return token or None


def can_access_client(identity: CallerIdentity, client_name: str) -> bool:
    """True iff the identity holds the wildcard scope or names the client verbatim."""
    return WILDCARD_CLIENT in identity.allowed_clients or client_name in identity.allowed_clients


class ApiKeyTable:
    """Immutable mapping of API key to caller identity."""

    def __init__(self, identities: Mapping[str, CallerIdentity]):
        self._identities: Dict[str, CallerIdentity] = dict(identities)

    @classmethod
    def from_config(cls, api_keys: Mapping[str, ApiKeyEntry]) -> "ApiKeyTable":
        return cls({
            key: CallerIdentity(
                email=entry.email,
                access_level=entry.access_level,
                allowed_clients=frozenset(entry.allowed_clients),
            )
            for key, entry in api_keys.items()
        })

    def lookup(self, credential: str) -> Optional[CallerIdentity]:
        return self._identities.get(credential)

    def __len__(self) -> int:
        return len(self._identities)


class AccessControl:
    """Resolves presented credentials to caller identities."""

    def __init__(self, api_keys: ApiKeyTable):
        self.api_keys = api_keys

    def authenticate(self, credential: Optional[str]) -> CallerIdentity:
        """
        Resolve a raw credential to its identity.

        Raises:
            Unauthenticated: credential is missing or matches no configured key
        """
        if not credential:
            logger.info("[AUTH] No bearer token provided")
            raise Unauthenticated("Bearer token required")

        identity = self.api_keys.lookup(credential)
        if identity is None:
            logger.info(f"[AUTH] Invalid token: {mask_credential(credential)}")
            raise Unauthenticated("Invalid API key")

        audit_logger.info(
            f"[AUTH] {identity.email} authenticated | Access Level: {identity.access_level.value} "
            f"| Clients: {', '.join(sorted(identity.allowed_clients))}"
        )
        return identity

    def authenticate_header(self, authorization: Optional[str]) -> CallerIdentity:
        """Authenticate from an ``Authorization`` header value."""
        if authorization and not authorization.startswith(BEARER_PREFIX):
            logger.info("[AUTH] Authorization header does not use the Bearer scheme")
        return self.authenticate(parse_bearer_token(authorization))
