"""End-to-end tests: argv in, exit code and output out."""

from __future__ import annotations

import io
import json

import httpx
import pytest

from vector_cli.config import AppContext
from vector_cli.errors import ValidationError
from vector_cli.services.dispatcher import execute, extract_global_options, report_error
from vector_cli.services.output_mode import OutputMode

from conftest import BASE, make_console, output

SITES = {"data": [{"id": "s1", "status": "active", "dev_domain": "s1.vector.test"}]}


class TestGlobalOptions:
    def test_extracted_anywhere(self):
        options, rest = extract_global_options(
            ["site", "--json", "list", "--token", "abc", "--page", "2", "-v", "--compact"]
        )
        assert rest == ["site", "list", "--page", "2"]
        assert options.json is True
        assert options.token == "abc"
        assert options.verbose is True
        assert options.compact is True

    def test_inline_value(self):
        options, rest = extract_global_options(["--api-url=https://x.test", "php", "versions"])
        assert options.api_url == "https://x.test"
        assert rest == ["php", "versions"]

    def test_json_wins_over_no_json(self):
        options, _ = extract_global_options(["--no-json", "--json"])
        assert options.json is True
        options, _ = extract_global_options(["--no-json"])
        assert options.json is False
        options, _ = extract_global_options([])
        assert options.json is None

    def test_double_dash_stops_extraction(self):
        options, rest = extract_global_options(["env", "secret", "create", "--", "--json"])
        assert options.json is None
        assert rest == ["env", "secret", "create", "--", "--json"]

    def test_missing_value_keeps_requested_mode(self, run_cli):
        result = run_cli("--json", "--token", terminal=True)
        assert result.exit_code == 3
        assert json.loads(result.stderr)["error"]["message"] == "Option --token requires a value"

        result = run_cli("--no-json", "--api-url")
        assert result.stderr == "Error: Option --api-url requires a value\n"

    def test_missing_value(self):
        with pytest.raises(ValidationError, match="--token requires a value"):
            extract_global_options(["site", "list", "--token"])


class TestScenarios:
    def test_no_token_exits_2_without_network(self, run_cli, api):
        result = run_cli("site", "list")
        assert result.exit_code == 2
        assert api.requests == []
        error = json.loads(result.stderr)["error"]
        assert error["kind"] == "auth"
        assert error["message"] == "Not logged in. Run 'vector auth login' to authenticate."
        assert result.stdout == ""

    def test_missing_required_field_exits_3_without_network(self, run_cli, api):
        result = run_cli("--no-json", "--token", "t", "site", "create", "--php-version", "8.3")
        assert result.exit_code == 3
        assert api.requests == []
        assert "Error: Missing required option --customer-id" in result.stderr

    def test_422_lists_field_errors(self, run_cli, api):
        api.respond(422, {
            "message": "The given data was invalid.",
            "errors": {"dev_php_version": ["The selected version is invalid."],
                       "your_customer_id": ["Already taken."]},
        })
        result = run_cli("--no-json", "--token", "t", "site", "create",
                         "--customer-id", "c1", "--php-version", "5.6")
        assert result.exit_code == 3
        assert "Error: Validation failed: The given data was invalid." in result.stderr
        assert "  - dev_php_version: The selected version is invalid." in result.stderr
        assert "  - your_customer_id: Already taken." in result.stderr

    def test_422_json_error(self, run_cli, api):
        api.respond(422, {"message": "Invalid.", "errors": {"name": ["required"]}})
        result = run_cli("--token", "t", "webhook", "create", "--name", "n", "--url", "u",
                         "--events", "site.created")
        assert result.exit_code == 3
        error = json.loads(result.stderr)["error"]
        assert error["status"] == 422
        assert error["errors"] == {"name": ["required"]}

    def test_three_503_then_200_succeeds_quietly(self, run_cli, api, sleeps):
        api.respond(503, {"message": "busy"}, times=3).respond(200, SITES)
        result = run_cli("--token", "t", "site", "list")
        assert result.exit_code == 0
        assert json.loads(result.stdout) == SITES
        assert result.stderr == ""
        assert len(api.requests) == 4
        assert len(sleeps) == 3

    def test_retry_budget_exhausted(self, run_cli, api):
        api.respond(503, {"message": "busy"}, times=4)
        result = run_cli("--no-json", "--token", "t", "site", "list")
        assert result.exit_code == 5
        assert "Error: Server error: busy" in result.stderr

    @pytest.mark.parametrize(("status", "code"), [(401, 2), (403, 2), (404, 4), (400, 1)])
    def test_status_exit_codes(self, run_cli, api, status, code):
        api.respond(status, {"message": "nope"})
        assert run_cli("--token", "t", "site", "show", "s1").exit_code == code

    def test_malformed_api_url(self, run_cli, api):
        result = run_cli("--no-json", "--token", "t", "--api-url", "http://[::1", "site", "list")
        assert result.exit_code == 1
        assert "Error: Invalid API URL 'http://[::1'" in result.stderr
        assert api.requests == []

    def test_non_ascii_token(self, run_cli, api):
        result = run_cli("--token", "t\u00f6ken", "site", "list")
        assert result.exit_code == 2
        assert "printable ASCII" in json.loads(result.stderr)["error"]["message"]
        assert api.requests == []

    def test_network_failure(self, run_cli, api):
        api.fail(httpx.ConnectError, times=2)
        result = run_cli("--no-json", "--token", "t", "site", "list", max_retries=1)
        assert result.exit_code == 5
        assert "Error: Network error:" in result.stderr


class TestCommands:
    def test_table_output(self, run_cli, api):
        api.respond(200, SITES)
        result = run_cli("--token", "t", "site", "list", terminal=True)
        assert result.exit_code == 0
        assert "s1.vector.test" in result.stdout
        assert "Customer ID" in result.stdout

    def test_compact_json(self, run_cli, api):
        api.respond(200, SITES)
        result = run_cli("--token", "t", "--compact", "site", "list")
        assert result.stdout.strip() == json.dumps(SITES, separators=(",", ":"))

    def test_request_shape(self, run_cli, api):
        api.respond(200, {"data": {"id": "e1"}})
        run_cli("--token", "secret", "--api-url", "https://x.test/", "env", "show", "e1")
        request = api.last
        assert str(request.url) == "https://x.test/api/v1/vector/environments/e1"
        assert request.headers["authorization"] == "Bearer secret"
        assert request.headers["accept"] == "application/json"

    def test_default_base_url_and_pagination(self, run_cli, api):
        api.respond(200, SITES)
        run_cli("--token", "t", "site", "list", "--per-page", "50")
        assert str(api.last.url) == BASE + "/sites?page=1&per_page=50"

    def test_env_token(self, run_cli, api, monkeypatch, tmp_config):
        api.respond(200, SITES)
        monkeypatch.setattr(tmp_config, "api_key", "env-token")
        assert run_cli("site", "list").exit_code == 0
        assert api.last.headers["authorization"] == "Bearer env-token"

    def test_boolean_and_list_flags(self, run_cli, api):
        api.respond(201, {"data": {"id": "sec1", "key": "K"}})
        result = run_cli("--no-json", "--token", "t", "env", "secret", "create", "e1",
                         "--key", "K", "--value", "V", "--no-secret")
        assert result.exit_code == 0
        assert json.loads(api.last.content) == {"key": "K", "value": "V", "is_secret": False}
        assert result.stdout.strip() == "Secret created: K (sec1)"

    def test_repeated_list_option(self, run_cli, api):
        api.respond(201, {"data": {"id": "s9", "status": "pending"}})
        result = run_cli("--no-json", "--token", "t", "site", "create", "--customer-id", "c1",
                         "--php-version", "8.3", "--tags", "a,b", "--tags", "c")
        assert json.loads(api.last.content)["tags"] == ["a", "b", "c"]
        assert result.stdout.strip() == "Site created: s9 (pending)"

    def test_unknown_option_is_validation_error(self, run_cli, api):
        result = run_cli("--token", "t", "site", "list", "--bogus")
        assert result.exit_code == 3
        assert api.requests == []

    def test_log_cursor_hint_on_stderr(self, run_cli, api):
        api.respond(200, {"data": {
            "logs": {"tables": [{"rows": [["12:00", "error", "boom"]]}]},
            "has_more": True,
            "cursor": "next-1",
        }})
        result = run_cli("--no-json", "--token", "t", "site", "logs", "s1", "--limit", "10")
        assert result.exit_code == 0
        assert result.stdout.strip() == "12:00 | error | boom"
        assert "Use --cursor next-1 to continue." in result.stderr
        assert "limit=10" in str(api.last.url)

    def test_db_import_too_large(self, run_cli, api, tmp_path):
        big = tmp_path / "big.sql"
        with big.open("wb") as fh:
            fh.truncate(50 * 1024 * 1024 + 1)
        result = run_cli("--no-json", "--token", "t", "db", "import", "s1", "--file", str(big))
        assert result.exit_code == 3
        assert "import-session" in result.stderr
        assert api.requests == []

    def test_db_import_reports_failure(self, run_cli, api, tmp_path):
        dump = tmp_path / "dump.sql"
        dump.write_text("SELECT 1;")
        api.respond(200, {"data": {"success": False, "error": "Syntax error near line 1"}})
        result = run_cli("--no-json", "--token", "t", "db", "import", "s1", "--file", str(dump))
        assert result.exit_code == 1
        assert "Error: Syntax error near line 1" in result.stderr


class TestNavigation:
    def test_unknown_noun(self, run_cli, api):
        result = run_cli("--no-json", "sitez", "list")
        assert result.exit_code == 1
        assert "Error: Unknown command 'sitez'. Did you mean: site" in result.stderr
        assert "Available commands:" in result.stderr
        assert api.requests == []

    def test_unknown_verb(self, run_cli):
        result = run_cli("site", "explode")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["kind"] == "unknown_command"

    def test_noun_without_verb_prints_help(self, run_cli):
        result = run_cli("site")
        assert result.exit_code == 0
        assert "list" in result.stdout
        assert "ssh-key" in result.stdout

    def test_version(self, run_cli, capsys):
        from vector_cli import __version__

        assert run_cli("--version").exit_code == 0
        assert capsys.readouterr().out.strip() == f"vector {__version__}"


class TestConfirmation:
    def test_declined(self, run_cli, api, monkeypatch):
        prompts = []
        monkeypatch.setattr("typer.confirm", lambda text, **kw: prompts.append(text) or False)
        result = run_cli("--no-json", "--token", "t", "site", "delete", "s1")
        assert result.exit_code == 0
        assert result.stdout.strip() == "Aborted."
        assert prompts == ["Are you sure you want to delete site s1?"]
        assert api.requests == []

    def test_force_skips_prompt(self, run_cli, api, monkeypatch):
        monkeypatch.setattr("typer.confirm", lambda *a, **kw: pytest.fail("prompted"))
        api.respond(200, {"message": "deleted"})
        result = run_cli("--no-json", "--token", "t", "site", "delete", "s1", "--force")
        assert result.exit_code == 0
        assert result.stdout.strip() == "Site deleted successfully."
        assert api.last.method == "DELETE"

    def test_end_of_input_declines(self, run_cli, api, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        result = run_cli("--token", "t", "site", "delete", "s1")
        assert result.exit_code == 0
        assert result.stdout.strip() == "Aborted."
        assert api.requests == []

    def test_interrupt(self, run_cli, api, monkeypatch):
        def interrupted(*args, **kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr("typer.confirm", interrupted)
        assert run_cli("--token", "t", "site", "delete", "s1").exit_code == 130
        assert api.requests == []


class TestExecute:
    def test_returns_response_and_writes(self, make_context, api, registry):
        api.respond(200, {"data": ["8.2", "8.3"]})
        ctx: AppContext = make_context(OutputMode.TABLE)
        response = execute(ctx, registry.lookup("php", "versions"), [], {})
        assert response.status_code == 200
        assert "8.3" in output(ctx.console)

    def test_report_error_table(self):
        err_console = make_console()
        code = report_error(ValidationError("Bad input"), OutputMode.TABLE, err_console)
        assert code == 3
        assert output(err_console) == "Error: Bad input\n"
