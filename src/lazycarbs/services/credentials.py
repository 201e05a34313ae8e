"""API key gate for mutating backend calls."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from lazycarbs.adapters.credential_store import CredentialStore
from lazycarbs.domain.credentials import Credential, CredentialState
from lazycarbs.domain.errors import EmptyCredential

_logger = logging.getLogger(__name__)


@dataclass
class CredentialGate:
    """Owns the API key and its client-asserted validity.

    A loaded or submitted key is trusted until the server rejects it; only
    ``invalidate`` takes it out of the active state.
    """

    store: CredentialStore
    header_name: str = "X-API-Key"
    credential: Credential = field(default_factory=Credential.absent)
    prompt_requested: bool = False
    on_prompt: Callable[[], None] | None = None

    @classmethod
    def from_store(
        cls,
        store: CredentialStore,
        header_name: str = "X-API-Key",
        on_prompt: Callable[[], None] | None = None,
    ) -> "CredentialGate":
        """Create a gate seeded with the persisted key, if present."""
        stored = store.load()
        gate = cls(store=store, header_name=header_name, on_prompt=on_prompt)
        if stored and stored.strip():
            gate.credential = Credential.active(stored.strip())
        return gate

    @property
    def state(self) -> CredentialState:
        return self.credential.state

    def submit(self, value: str) -> None:
        """Accept a newly entered API key and persist it."""
        api_key = value.strip()
        if not api_key:
            raise EmptyCredential("API key must not be empty")
        self.credential = Credential.active(api_key)
        self.store.store(api_key)
        self.prompt_requested = False

    def is_valid(self) -> bool:
        return self.credential.is_active

    def invalidate(self) -> None:
        """Drop the key after the server rejected it and ask for a new one."""
        if self.credential.is_active:
            _logger.warning("API key rejected by server; clearing stored key")
            self.store.clear()
            self.credential = Credential.invalidated()
        self.request_prompt()

    def request_prompt(self) -> None:
        """Signal that the user should (re-)enter an API key."""
        self.prompt_requested = True
        if self.on_prompt is not None:
            self.on_prompt()

    def attach(self, headers: dict[str, str] | None = None) -> dict[str, str]:
        """Return request headers, with the API key only when the gate is valid."""
        attached = dict(headers or {})
        if self.is_valid() and self.credential.api_key:
            attached[self.header_name] = self.credential.api_key
        return attached
