"""
Path resolver for File Vault.

Responsibilities:
    - Join a client-supplied relative path onto the caller's root directory
    - Refuse anything that could leave that root

Two independent checks guard the root:
    1. Syntactic: any '..' segment in the joined, unnormalized path is rejected
       before the filesystem is touched.
    2. Canonical: the path is resolved through the filesystem (symlinks
       included) and must still be the root or a descendant of it, compared
       component by component so '/srv/alice-evil' is not inside '/srv/alice'.

Neither check covers the other: (1) cannot see symlinks, and (2) would accept
'a/../b' when it happens to land inside the root. Both always run.

The result is only valid at resolution time. A file can still disappear
before the responder opens it; the responder handles that as a 404.

LLM Prompt Example:
    "Explain why a path traversal guard needs both a lexical '..' check and a
     canonical containment check to defeat symlink escapes."
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from auth.schemas import AuthenticatedIdentity

from ..errors import PathSafetyViolation

log = logging.getLogger("file_vault.resolver")

PARENT_DIR = ".."


@dataclass(frozen=True)
class ResolvedPath:
    """A canonical absolute path known to be inside `root`."""

    path: Path
    root: Path

    @property
    def is_root(self) -> bool:
        return self.path == self.root

    @property
    def relative(self) -> str:
        """POSIX path relative to the root; '' for the root itself."""
        return relative_to_root(self.path, self.root)

    @property
    def name(self) -> str:
        return self.path.name


def relative_to_root(path: Path, root: Path) -> str:
    rel = path.relative_to(root).as_posix()
    return "" if rel == "." else rel


def resolve(identity: AuthenticatedIdentity, requested: Optional[str]) -> ResolvedPath:
    """
    Resolve `requested` inside the identity's root directory.

    Args:
        identity (AuthenticatedIdentity): Authenticated caller.
        requested (Optional[str]): Percent-decoded path from the URL, relative
            to the root. None or '' means the root itself.

    Returns:
        ResolvedPath: Canonical path plus the root it was checked against.

    Raises:
        PathSafetyViolation: On a '..' segment, an unresolvable path, or a
            canonical path outside the root.
    """
    root = Path(identity.root_directory)
    joined = root / (requested or "")

    if PARENT_DIR in joined.parts:
        log.warning("404 Ignored due to malicious request (path traversal): %s", joined)
        raise PathSafetyViolation(f"parent directory segment in {joined}")

    try:
        canonical = joined.resolve(strict=True)
    except (OSError, RuntimeError, ValueError) as exc:
        # Missing files land here too; not worth more than debug
        log.debug("Cannot canonicalize %s: %s", joined, exc)
        raise PathSafetyViolation(f"cannot canonicalize {joined}: {exc}") from exc

    if not canonical.is_relative_to(root):
        log.warning(
            "404 Ignored due to malicious request (symlink escape?): %s | %s",
            joined,
            canonical,
        )
        raise PathSafetyViolation(f"{canonical} is outside {root}")

    return ResolvedPath(path=canonical, root=root)
