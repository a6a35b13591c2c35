"""
Global pytest fixtures for the File Vault test suite.

Responsibilities:
    - Build a throwaway directory tree per test (two user roots plus an
      "outside" directory that must never be reachable)
    - Write a users JSON file with low-cost bcrypt hashes
    - Provide a fresh FastAPI TestClient via the app factory
    - Provide a Basic auth header builder

Why an app factory?
    Using `create_app()` ensures each test gets its own credential store and
    settings, with no state carried between tests.
"""

import base64
import json
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from auth.utils import hash_password
from file_vault.credentials.credentials import CredentialStore, load_users
from main import create_app

# Cheap bcrypt cost so the suite stays fast
TEST_ROUNDS = 4

PASSWORDS = {
    "alice": "alice-secret",
    "bob": "bob:with:colons",
}

NOTES = b"alice's notes\nline two\n"


@pytest.fixture
def file_tree(tmp_path: Path) -> SimpleNamespace:
    """
    Layout:
        srv/alice/notes.txt
        srv/alice/docs/report.txt
        srv/alice/docs/deep/inner.txt
        srv/alice/blob.bin            (larger than one stream chunk)
        srv/bob/readme.md
        outside/secret.txt
    """
    srv = tmp_path / "srv"
    alice = srv / "alice"
    bob = srv / "bob"
    outside = tmp_path / "outside"
    for d in (alice / "docs" / "deep", bob, outside):
        d.mkdir(parents=True)

    (alice / "notes.txt").write_bytes(NOTES)
    (alice / "docs" / "report.txt").write_text("quarterly report\n", encoding="utf-8")
    (alice / "docs" / "deep" / "inner.txt").write_text("inner\n", encoding="utf-8")
    (alice / "blob.bin").write_bytes(bytes(range(256)) * 1024)
    (bob / "readme.md").write_text("# bob\n", encoding="utf-8")
    (outside / "secret.txt").write_text("top secret\n", encoding="utf-8")

    return SimpleNamespace(
        base=tmp_path,
        alice=alice.resolve(),
        bob=bob.resolve(),
        outside=outside.resolve(),
    )


@pytest.fixture
def users_file(tmp_path: Path, file_tree: SimpleNamespace) -> Path:
    """Credential file with one rich entry per user."""
    path = tmp_path / "users.json"
    users = {
        "alice": {
            "password": hash_password(PASSWORDS["alice"], rounds=TEST_ROUNDS),
            "directory": str(file_tree.alice),
        },
        "bob": {
            "password": hash_password(PASSWORDS["bob"], rounds=TEST_ROUNDS),
            "directory": str(file_tree.bob),
        },
    }
    path.write_text(json.dumps(users), encoding="utf-8")
    return path


@pytest.fixture
def credential_store(users_file: Path) -> CredentialStore:
    return load_users(users_file)


@pytest.fixture
def client(credential_store: CredentialStore) -> TestClient:
    """
    Provide a fresh TestClient with a new app instance.

    Notes:
        - The credential store is injected, so no environment is needed.
    """
    return TestClient(create_app(credential_store=credential_store))


@pytest.fixture
def basic_auth():
    """Return a builder for `Authorization` headers."""

    def _build(username: str, password: str) -> dict:
        token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {token}"}

    return _build


@pytest.fixture
def passwords() -> dict:
    return dict(PASSWORDS)


@pytest.fixture
def alice_headers(basic_auth) -> dict:
    return basic_auth("alice", PASSWORDS["alice"])
