"""
Core authentication logic.

This module turns a raw `Authorization` header into an AuthenticatedIdentity,
or raises AuthenticationFailure. The failure reason is logged but the client
always gets the same 401, whether the user is unknown, the password is wrong,
or the header is unreadable.
"""

import base64
import logging
from typing import Optional, Tuple

from file_vault.credentials.base import BaseCredentialStore
from file_vault.errors import AuthenticationFailure

from .config import SCHEME_PREFIX
from .schemas import AuthenticatedIdentity
from .utils import dummy_hash, verify_password

log = logging.getLogger("file_vault.auth")


def decode_basic_credentials(raw_header: Optional[str]) -> Tuple[str, str]:
    """
    Extract (username, password) from a Basic `Authorization` header value.

    Args:
        raw_header (Optional[str]): The header value, or None if absent.

    Returns:
        Tuple[str, str]: Username and password. The split happens on the first
        ':' so passwords may contain colons; with no colon at all the password
        is the empty string and verification decides.

    Raises:
        AuthenticationFailure: Missing header, other scheme, bad base64, or
        non UTF-8 payload.
    """
    if raw_header is None:
        raise AuthenticationFailure("missing Authorization header")
    if not raw_header.startswith(SCHEME_PREFIX):
        raise AuthenticationFailure("Authorization scheme is not Basic")

    encoded = raw_header[len(SCHEME_PREFIX):]
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except ValueError as exc:
        # also covers binascii.Error and UnicodeDecodeError
        raise AuthenticationFailure(f"undecodable credentials: {exc}") from exc

    username, _, password = decoded.partition(":")
    return username, password


def authenticate(raw_header: Optional[str], store: BaseCredentialStore) -> AuthenticatedIdentity:
    """
    Authenticate a request from its `Authorization` header.

    Args:
        raw_header (Optional[str]): Raw header value.
        store (BaseCredentialStore): Read-only user table.

    Returns:
        AuthenticatedIdentity: The user and their root directory.

    Raises:
        AuthenticationFailure: On any failure (401 Unauthorized).
    """
    username, password = decode_basic_credentials(raw_header)

    user = store.get_user(username)
    if user is None:
        verify_password(password, dummy_hash())
        raise AuthenticationFailure(f"unknown user {username!r}")

    if not verify_password(password, user.password_hash):
        raise AuthenticationFailure(f"invalid password for user {username!r}")

    log.debug("Authenticated %s", username)
    return AuthenticatedIdentity(username=user.username, root_directory=user.root_directory)
