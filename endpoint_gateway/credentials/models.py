"""Credential models: stored user keys and resolved endpoint credentials."""

from dataclasses import dataclass
from enum import Enum


class CredentialSource(str, Enum):
    LITERAL = "literal"
    UNRESOLVED_PLACEHOLDER = "unresolved_placeholder"
    USER_PROVIDED = "user_provided"


@dataclass(frozen=True)
class ResolvedCredential:
    """One config credential after placeholder expansion, tagged by origin."""

    source: CredentialSource
    value: str


@dataclass
class UserKeyValues:
    """A user's stored secrets for one endpoint. Either field may be absent."""

    api_key: str | None = None
    base_url: str | None = None


@dataclass
class UserKeyRecord:
    user_id: str
    name: str  # endpoint name
    api_key: str | None = None
    base_url: str | None = None
    expires_at: str | None = None  # ISO-8601, informational for the store owner

    @classmethod
    def from_dict(cls, data: dict) -> "UserKeyRecord":
        """Map a stored entry; keys other than the record fields are ignored."""
        return cls(
            user_id=data["user_id"],
            name=data["name"],
            api_key=data.get("api_key"),
            base_url=data.get("base_url"),
            expires_at=data.get("expires_at"),
        )

    @property
    def values(self) -> UserKeyValues:
        return UserKeyValues(api_key=self.api_key, base_url=self.base_url)


@dataclass(frozen=True)
class ResolvedCredentials:
    api_key: str
    base_url: str
    user_provided: bool = False  # True if either field came from the user's stored keys
