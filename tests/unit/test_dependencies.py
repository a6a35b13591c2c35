import base64

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from auth.dependencies import get_current_identity
from auth.schemas import AuthenticatedIdentity
from file_vault.errors import AuthenticationFailure


@pytest.fixture
def probe(credential_store):
    """Minimal app exposing the identity dependency's result."""
    app = FastAPI()
    app.state.credential_store = credential_store

    @app.get("/whoami")
    def whoami(identity: AuthenticatedIdentity = Depends(get_current_identity)):
        return identity.model_dump()

    return TestClient(app, raise_server_exceptions=True)


def test_dependency_returns_identity(probe, passwords, file_tree):
    token = base64.b64encode(f"alice:{passwords['alice']}".encode()).decode()
    resp = probe.get("/whoami", headers={"Authorization": f"Basic {token}"})
    assert resp.status_code == 200
    assert resp.json() == {"username": "alice", "root_directory": str(file_tree.alice)}


def test_dependency_raises_without_header(probe):
    # No handler registered on this bare app, so the domain error surfaces as-is
    with pytest.raises(AuthenticationFailure):
        probe.get("/whoami")
