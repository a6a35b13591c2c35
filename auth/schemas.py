"""
Pydantic schemas for the auth module.
"""

from pydantic import BaseModel, ConfigDict


class AuthenticatedIdentity(BaseModel):
    """Who made the request and which directory they may see. Lives for one request."""

    model_config = ConfigDict(frozen=True)

    username: str
    root_directory: str
