"""
Credential store for File Vault (JSON file implementation).

Responsibilities:
    - Load username -> (bcrypt hash, root directory) from a JSON file
    - Canonicalize each user's root directory once, at load time
    - Serve lookups from a read-only mapping for the whole process lifetime

File format:
    {
        "alice": {"password": "$2b$12$...", "directory": "/srv/alice"},
        "bob":   "$2b$12$..."
    }

    The string form (and an object without "directory") uses the default
    root passed to `load_users` (FILES_PATH), so a single shared root and
    per-user roots can be mixed in one file.

Design:
    - The store is built once and wrapped in a MappingProxyType. There is no
      mutation API, so request handlers share it without locking.
    - Any problem with the file raises ConfigurationError. This only happens at
      startup; a running server never reloads credentials.

LLM Prompt Example:
    "Show how a load-time-frozen configuration object can be shared across
     concurrent request handlers without locks."
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from ..errors import ConfigurationError
from .base import BaseCredentialStore, UserRecord

log = logging.getLogger("file_vault.credentials")

PathLike = Union[str, Path]


class _UserEntry(BaseModel):
    """Shape of one entry in the credential file."""

    password: str = Field(min_length=1)
    directory: Optional[str] = None


class CredentialStore(BaseCredentialStore):
    def __init__(self, users: Mapping[str, UserRecord]):
        """
        Wrap a fully built mapping of users.

        Internal schema:
            self._users = MappingProxyType({username: UserRecord})
        """
        self._users: Mapping[str, UserRecord] = MappingProxyType(dict(users))

    def get_user(self, username: str) -> Optional[UserRecord]:
        return self._users.get(username)

    def usernames(self) -> List[str]:
        return sorted(self._users)

    @property
    def users(self) -> Mapping[str, UserRecord]:
        """Read-only view of all records."""
        return self._users

    def __contains__(self, username: object) -> bool:
        return username in self._users

    def __len__(self) -> int:
        return len(self._users)


def canonical_root(directory: PathLike) -> str:
    """
    Return `directory` as an absolute, symlink-free path string.

    Relative paths are taken from the current working directory. The directory
    does not have to exist; a missing root only logs a warning.

    Raises:
        ConfigurationError: If the path cannot be resolved at all (symlink loop,
            embedded NUL byte).
    """
    try:
        root = Path(directory).expanduser().resolve()
    except (OSError, RuntimeError, ValueError) as exc:
        raise ConfigurationError(f"Cannot resolve root directory {directory!r}: {exc}") from exc
    if not root.is_dir():
        log.warning("Root directory %s does not exist or is not a directory", root)
    return str(root)


def _build_record(username: Any, entry: Any, default_root: Optional[str]) -> UserRecord:
    if not isinstance(username, str) or not username:
        raise ConfigurationError(f"Invalid username in credential file: {username!r}")
    if ":" in username:
        # Basic credentials split on the first colon, so such a user could never log in
        raise ConfigurationError(f"Username {username!r} must not contain ':'")

    try:
        if isinstance(entry, str):
            parsed = _UserEntry(password=entry)
        else:
            parsed = _UserEntry.model_validate(entry)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid entry for user {username!r}: {exc}") from exc

    directory = parsed.directory or default_root
    if not directory:
        raise ConfigurationError(
            f"User {username!r} has no directory and no default root (FILES_PATH) is set"
        )

    return UserRecord(
        username=username,
        password_hash=parsed.password,
        root_directory=canonical_root(directory),
    )


def load_users(path: PathLike, default_root: Optional[PathLike] = None) -> CredentialStore:
    """
    Load and validate the credential file.

    Args:
        path: JSON file with the user table.
        default_root: Root used for entries that do not name their own directory.

    Returns:
        CredentialStore: Frozen store with one record per user.

    Raises:
        ConfigurationError: If the file is unreadable, is not valid JSON, or any
            entry is malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as exc:
        raise ConfigurationError(f"Failed to read credential file {path}: {exc}") from exc
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise ConfigurationError(f"Invalid JSON in credential file {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Credential file {path} must contain a JSON object")

    default = str(default_root) if default_root is not None else None
    records: Dict[str, UserRecord] = {
        username: _build_record(username, entry, default) for username, entry in raw.items()
    }

    log.info("Loaded %d user(s) from %s", len(records), path)
    return CredentialStore(records)
