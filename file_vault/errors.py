"""
Exception types for File Vault.

Every failure a request can hit is raised as one of these and turned into a
plain-text response by the handlers registered in `create_app`:

    AuthenticationFailure      -> 401 + Basic challenge
    PathSafetyViolation        -> 404
    ResourceNotFound           -> 404
    UnexpectedFilesystemState  -> 500

`ConfigurationError` is only raised while the app is being built; it is the one
error that is allowed to stop the process.

The `reason` carried by each exception is for logs only and never reaches the
client, so "unknown user" and "bad password" (or "escaped root" and "missing
file") look the same from outside.
"""


class FileVaultError(Exception):
    """Base class for all File Vault errors."""

    def __init__(self, reason: str = "") -> None:
        super().__init__(reason)
        self.reason = reason


class ConfigurationError(FileVaultError):
    """The credential source or settings are unusable; the server cannot start."""


class AuthenticationFailure(FileVaultError):
    """Missing, malformed, or wrong Basic credentials."""


class PathSafetyViolation(FileVaultError):
    """The requested path cannot be proven to stay inside the user's root."""


class ResourceNotFound(FileVaultError):
    """The path was valid but the file or directory is gone or unreadable."""


class UnexpectedFilesystemState(FileVaultError):
    """A resolved path is neither a regular file nor a directory."""
