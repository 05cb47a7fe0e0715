"""Tests for auth login, logout, status and whoami."""

from __future__ import annotations

import io
import json
import stat

import pytest

from vector_cli.credentials import CredentialStore
from vector_common import VectorConfig

USER = {"data": {"id": 7, "name": "Ada Lovelace", "email": "ada@example.com"}}


@pytest.fixture
def stored(tmp_config: VectorConfig) -> CredentialStore:
    store = CredentialStore(tmp_config.credentials_file)
    store.persist("file-token-12345")
    return store


class TestLogin:
    def test_flag_token_verified_then_persisted(self, run_cli, api, tmp_config):
        api.respond(200, USER)
        result = run_cli("--no-json", "--token", "tok-abc", "auth", "login")
        assert result.exit_code == 0
        assert result.stdout == "Successfully authenticated.\nLogged in as: ada@example.com\n"
        assert api.last.url.path == "/api/v1/vector/user"
        assert api.last.headers["authorization"] == "Bearer tok-abc"

        path = tmp_config.credentials_file
        assert json.loads(path.read_text()) == {"api_key": "tok-abc"}
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_json_output_is_the_user_payload(self, run_cli, api):
        api.respond(200, USER)
        result = run_cli("--token", "tok-abc", "auth", "login")
        assert json.loads(result.stdout) == USER

    def test_token_from_stdin(self, run_cli, api, monkeypatch, tmp_config):
        monkeypatch.setattr("sys.stdin", io.StringIO("  piped-token \n"))
        api.respond(200, USER)
        assert run_cli("--no-json", "auth", "login").exit_code == 0
        assert api.last.headers["authorization"] == "Bearer piped-token"
        assert CredentialStore(tmp_config.credentials_file).current_token() == "piped-token"

    def test_empty_token(self, run_cli, api, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("\n"))
        result = run_cli("--no-json", "auth", "login")
        assert result.exit_code == 3
        assert "Error: Token cannot be empty" in result.stderr
        assert api.requests == []

    def test_rejected_token_is_not_stored(self, run_cli, api, tmp_config):
        api.respond(401, {"message": "Unauthenticated."})
        result = run_cli("--no-json", "--token", "bad", "auth", "login")
        assert result.exit_code == 2
        assert "Error: Authentication failed: Unauthenticated." in result.stderr
        assert not tmp_config.credentials_file.exists()

    def test_non_ascii_token_is_rejected_before_sending(self, run_cli, api, tmp_config):
        result = run_cli("--no-json", "--token", "t\u00f6ken", "auth", "login")
        assert result.exit_code == 2
        assert "printable ASCII" in result.stderr
        assert api.requests == []
        assert not tmp_config.credentials_file.exists()


class TestLogout:
    def test_not_logged_in(self, run_cli):
        result = run_cli("--no-json", "auth", "logout")
        assert result.exit_code == 0
        assert result.stdout.strip() == "Not logged in."

    def test_not_logged_in_json(self, run_cli):
        assert json.loads(run_cli("auth", "logout").stdout) == {"message": "Not logged in"}

    def test_removes_file(self, run_cli, stored, tmp_config):
        result = run_cli("auth", "logout")
        assert json.loads(result.stdout) == {"message": "Logged out successfully"}
        assert not tmp_config.credentials_file.exists()


class TestStatus:
    def test_not_logged_in(self, run_cli, api):
        result = run_cli("--no-json", "auth", "status")
        assert result.exit_code == 0
        assert result.stdout.strip() == "Not logged in. Run 'vector auth login' to authenticate."
        assert api.requests == []

    def test_not_logged_in_json(self, run_cli):
        assert json.loads(run_cli("auth", "status").stdout) == {
            "authenticated": False,
            "message": "Not logged in",
        }

    def test_authenticated_table(self, run_cli, api, stored):
        api.respond(200, USER)
        result = run_cli("--no-json", "auth", "status")
        assert result.exit_code == 0
        for expected in ("Authenticated", "Ada Lovelace", "ada@example.com",
                         "file-tok...", "credentials file", "https://api.builtfast.com"):
            assert expected in result.stdout
        assert "file-token-12345" not in result.stdout

    def test_authenticated_json(self, run_cli, api, stored):
        api.respond(200, USER)
        assert json.loads(run_cli("auth", "status").stdout) == {
            "authenticated": True,
            "user": {"id": 7, "name": "Ada Lovelace", "email": "ada@example.com"},
        }

    def test_expired_token(self, run_cli, api, stored):
        api.respond(401, {"message": "Token expired."})
        assert run_cli("auth", "status").exit_code == 2


class TestWhoami:
    def test_detail(self, run_cli, api, stored):
        api.respond(200, USER)
        result = run_cli("--no-json", "auth", "whoami")
        assert result.exit_code == 0
        assert "Email" in result.stdout
        assert "ada@example.com" in result.stdout
