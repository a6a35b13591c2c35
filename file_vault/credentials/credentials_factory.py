"""
Credential store factory: build the store from configuration (lazy env version)
===============================================================================

This module centralizes where the user table comes from so the app factory
can stay ignorant of file locations.

- Reads environment **at call time** to avoid stale values in tests.
- Explicit arguments win over the environment.

Environment variables
---------------------
- USERS_JSON_PATH: JSON credential file (required unless `users_path` is given)
- FILES_PATH:      default root for entries without their own directory
"""

from typing import Optional

from ..config import load_settings
from ..errors import ConfigurationError
from .credentials import CredentialStore, PathLike, load_users


def get_credential_store(
    users_path: Optional[PathLike] = None,
    default_root: Optional[PathLike] = None,
) -> CredentialStore:
    """
    Return a CredentialStore loaded from the configured JSON file.

    Parameters
    ----------
    users_path : str or Path, optional
        Credential file. If omitted, reads USERS_JSON_PATH.
    default_root : str or Path, optional
        Shared root directory. If omitted, reads FILES_PATH.

    Raises
    ------
    ConfigurationError
        If no credential file is configured or it cannot be loaded.
    """
    settings = load_settings()
    path = users_path or settings.USERS_JSON_PATH
    if not path:
        raise ConfigurationError("USERS_JSON_PATH is required (path to the users JSON file)")

    root = default_root if default_root is not None else settings.FILES_PATH
    return load_users(path, default_root=root)
