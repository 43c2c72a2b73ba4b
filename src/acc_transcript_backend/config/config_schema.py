"""
Pydantic schema for config.yaml structure.

Holds the static API-key table and the transcript fixture location. Both are
read once at startup and handed to the components that need them.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from acc_transcript_backend.models.user import AccessLevel


class ApiKeyEntry(BaseModel):
    """Identity bound to a single API key."""

    email: str = Field(description="Email of the key holder")
    allowed_clients: List[str] = Field(
        default_factory=list,
        description="Client names visible to this key; ['*'] grants every client",
    )
    access_level: AccessLevel = Field(default=AccessLevel.READ, description="Access level")

    @field_validator("allowed_clients")
    @classmethod
    def strip_blank_clients(cls, value: List[str]) -> List[str]:
        return [client for client in value if client != ""]


def _default_api_keys() -> Dict[str, ApiKeyEntry]:
    return {
        "acc-demo-key-001": ApiKeyEntry(
            email="demo@accfinance.com",
            allowed_clients=["*"],
            access_level=AccessLevel.ADMIN,
        ),
        "acc-john-key-002": ApiKeyEntry(
            email="john@accfinance.com",
            allowed_clients=["Client X", "Client Y"],
            access_level=AccessLevel.READ,
        ),
        "acc-sarah-key-003": ApiKeyEntry(
            email="sarah@accfinance.com",
            allowed_clients=["Client Z"],
            access_level=AccessLevel.READ,
        ),
    }


class AuthConfig(BaseModel):
    """Static API-key authentication configuration."""

    api_keys: Dict[str, ApiKeyEntry] = Field(
        default_factory=_default_api_keys,
        description="Mapping of bearer API key to the identity it grants",
    )


class TranscriptServerConfig(BaseModel):
    """
    Root configuration model.

    This is the complete config.yaml structure.
    """

    version: str = Field(default="1.0.0", description="Config schema version")
    server_name: str = Field(default="acc-transcript-server", description="MCP server name")
    server_version: str = Field(default="1.0.0", description="Version reported to MCP clients")

    auth: AuthConfig = Field(default_factory=AuthConfig, description="Authentication configuration")

    transcripts_file: Optional[str] = Field(
        default=None,
        description="YAML/JSON transcript fixture; the built-in fixture is used when unset",
    )
