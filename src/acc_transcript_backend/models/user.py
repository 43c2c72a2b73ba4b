"""Caller identity model."""

from enum import Enum
from typing import Any, Dict, FrozenSet

from pydantic import BaseModel, ConfigDict, Field

WILDCARD_CLIENT = "*"


class AccessLevel(str, Enum):
    """Access levels an API key can carry."""
    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


class CallerIdentity(BaseModel):
    """The principal behind a presented API key."""

    model_config = ConfigDict(frozen=True)

    email: str = Field(description="Caller email address")
    access_level: AccessLevel = Field(default=AccessLevel.READ, description="Access level")
    allowed_clients: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Client names the caller may see; '*' means all clients",
    )

    @property
    def has_wildcard(self) -> bool:
        return WILDCARD_CLIENT in self.allowed_clients

    def to_wire(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "accessLevel": self.access_level.value,
            "allowedClients": sorted(self.allowed_clients),
        }
