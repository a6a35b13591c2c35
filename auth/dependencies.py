"""
FastAPI dependency functions for authentication.

These can be used in routes with Depends() to protect endpoints. The
credential store is read from `request.app.state`, where `create_app`
puts it, so each app instance authenticates against its own table.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from file_vault.credentials.base import BaseCredentialStore

from .schemas import AuthenticatedIdentity
from .service import authenticate


def get_app_credential_store(request: Request) -> BaseCredentialStore:
    """Return the store the running app was built with."""
    return request.app.state.credential_store


def get_current_identity(
    authorization: Optional[str] = Header(None),
    store: BaseCredentialStore = Depends(get_app_credential_store),
) -> AuthenticatedIdentity:
    """
    Dependency that authenticates the caller.

    Args:
        authorization (Optional[str]): Raw `Authorization` header.
        store (BaseCredentialStore): Credential table of this app.

    Returns:
        AuthenticatedIdentity: Identity scoped to the current request.

    Raises:
        AuthenticationFailure: Turned into a 401 challenge by the app's handler.
    """
    return authenticate(authorization, store)
