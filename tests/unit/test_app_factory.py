import json
import logging

import pytest
from fastapi.testclient import TestClient

import main
from auth.utils import hash_password
from file_vault.errors import ConfigurationError


def test_create_app_without_credentials_fails(monkeypatch):
    monkeypatch.delenv("USERS_JSON_PATH", raising=False)
    with pytest.raises(ConfigurationError):
        main.create_app()


def test_create_app_with_malformed_file_fails(tmp_path, monkeypatch):
    bad = tmp_path / "users.json"
    bad.write_text("{oops", encoding="utf-8")
    monkeypatch.setenv("USERS_JSON_PATH", str(bad))
    with pytest.raises(ConfigurationError):
        main.create_app()


def test_create_app_from_env(tmp_path, file_tree, monkeypatch, basic_auth):
    users = tmp_path / "users.json"
    users.write_text(json.dumps({"alice": hash_password("pw", rounds=4)}), encoding="utf-8")
    monkeypatch.setenv("USERS_JSON_PATH", str(users))
    monkeypatch.setenv("FILES_PATH", str(file_tree.alice))
    monkeypatch.setenv("FILES_CHUNK_SIZE", "1024")

    app = main.create_app()
    assert app.state.settings.CHUNK_SIZE == 1024

    client = TestClient(app)
    resp = client.get("/files/blob.bin", headers=basic_auth("alice", "pw"))
    assert resp.status_code == 200
    assert resp.content == (file_tree.alice / "blob.bin").read_bytes()


def test_main_exits_on_configuration_error(monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    monkeypatch.delenv("USERS_JSON_PATH", raising=False)
    ran = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *a, **k: ran.append(a))

    with pytest.raises(SystemExit) as excinfo:
        main.main()
    assert excinfo.value.code == 1
    assert ran == []


def test_main_runs_uvicorn(users_file, monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    monkeypatch.setenv("USERS_JSON_PATH", str(users_file))
    monkeypatch.setenv("HTTP_HOST", "0.0.0.0")
    monkeypatch.setenv("HTTP_PORT", "8123")
    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kw: calls.append(kw))

    main.main()
    assert calls == [{"host": "0.0.0.0", "port": 8123}]


def test_startup_log_does_not_name_users(credential_store, caplog):
    with caplog.at_level(logging.INFO, logger="file_vault"):
        main.create_app(credential_store=credential_store)

    info = [r.getMessage() for r in caplog.records if r.levelno >= logging.INFO]
    assert any("serving 2 user(s)" in line for line in info)
    assert not any("alice" in line or "bob" in line for line in info)
