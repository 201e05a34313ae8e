"""Credential state for the API key gate."""

from dataclasses import dataclass
from enum import Enum


class CredentialState(str, Enum):
    """Lifecycle of the locally held API key."""

    ABSENT = "ABSENT"
    ACTIVE = "ACTIVE"
    INVALIDATED = "INVALIDATED"


@dataclass(frozen=True)
class Credential:
    """API key together with its client-asserted state."""

    state: CredentialState
    api_key: str | None = None

    @classmethod
    def absent(cls) -> "Credential":
        return cls(state=CredentialState.ABSENT)

    @classmethod
    def active(cls, api_key: str) -> "Credential":
        return cls(state=CredentialState.ACTIVE, api_key=api_key)

    @classmethod
    def invalidated(cls) -> "Credential":
        return cls(state=CredentialState.INVALIDATED)

    @property
    def is_active(self) -> bool:
        return self.state is CredentialState.ACTIVE
