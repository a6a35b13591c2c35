"""
Utility functions for the auth module.
"""

import functools

import bcrypt


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Return a bcrypt hash of the given password.

    Note:
        Tests pass a low `rounds` value to stay fast; the default matches
        bcrypt's own.
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check `password` against a bcrypt hash.

    A malformed hash or a password bcrypt refuses to process counts as a
    mismatch rather than an error.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


@functools.lru_cache(maxsize=1)
def dummy_hash() -> str:
    """Hash checked for unknown users so they cost as much as real ones."""
    return hash_password("file-vault-unknown-user")
