"""Persistence of the API key between sessions."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

_logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    """Interface for persisting the API key."""

    def load(self) -> str | None:
        """Return the stored API key, if any."""

    def store(self, api_key: str) -> None:
        """Persist the API key."""

    def clear(self) -> None:
        """Erase the persisted API key."""


@dataclass
class FileCredentialStore(CredentialStore):
    """Keeps the API key in a single owner-readable file."""

    path: Path

    def load(self) -> str | None:
        """Return the stored API key, if the file exists and is not blank."""
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        cleaned = content.strip()
        return cleaned or None

    def store(self, api_key: str) -> None:
        """Write the API key, replacing any previous one."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(mode=0o600, exist_ok=True)
        self.path.write_text(api_key, encoding="utf-8")
        self.path.chmod(0o600)
        _logger.info("Stored API key at %s", self.path)

    def clear(self) -> None:
        """Delete the stored API key file."""
        self.path.unlink(missing_ok=True)
        _logger.info("Cleared stored API key at %s", self.path)
