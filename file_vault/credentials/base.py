"""
Base credential store interface for File Vault.

Purpose:
    Define a small, stable contract that credential backends (JSON file,
    htpasswd, LDAP, database) can implement without requiring changes to the
    authenticator.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class UserRecord(BaseModel):
    """One configured user. Built at startup and never mutated."""

    model_config = ConfigDict(frozen=True)

    username: str
    password_hash: str
    root_directory: str


class BaseCredentialStore(ABC):
    """Abstract base class for read-only credential backends."""

    @abstractmethod  # pragma: no cover
    def get_user(self, username: str) -> Optional[UserRecord]:
        """
        Look up a user by name.

        Returns:
            Optional[UserRecord]: The record, or None if no such user exists.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def usernames(self) -> List[str]:
        """
        Return all configured usernames in sorted order.

        LLM Prompt Example:
            "Explain why a credential backend should expose user names for
            startup diagnostics but never expose password hashes."
        """
        raise NotImplementedError
