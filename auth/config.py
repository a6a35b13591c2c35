"""
Configuration for the auth module.

Constants that shape the HTTP Basic challenge. The user table itself is
loaded by `file_vault.credentials` and injected through `app.state`.
"""

from typing import Dict

SCHEME_PREFIX = "Basic "

REALM = "Files"

CHALLENGE_HEADERS: Dict[str, str] = {
    "WWW-Authenticate": f'Basic realm="{REALM}"',
}

UNAUTHORIZED_BODY = "Unauthorized"
