import json
from collections import Counter
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from bulkdelete.main import app

# These fixtures are defined in tests/conftest.py:
# runner: CliRunner
# tenant_env: sets AUTH0_DOMAIN / AUTH0_CLIENT_ID / AUTH0_CLIENT_SECRET

HEADER = "# Failed users deletion (if any) will be recorded below:"

class FakeTenant:
    """Serves the token endpoint and scripted DELETE responses."""

    def __init__(self, statuses):
        self.statuses = statuses
        self.token_requests = []
        self.deletes = Counter()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth/token":
            self.token_requests.append(json.loads(request.content))
            return httpx.Response(200, json={"access_token": "tok", "token_type": "Bearer"})
        assert request.method == "DELETE"
        assert request.headers["Authorization"] == "Bearer tok"
        entity_id = request.url.path.rsplit("/", 1)[-1]
        self.deletes[entity_id] += 1
        status = self.statuses[entity_id]
        if status == 204:
            return httpx.Response(204)
        return httpx.Response(status, json={"message": f"HTTP {status}"})

@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "entity_ids.delete").write_text("# users to purge\nu1\nu2\nu3\n")
    return tmp_path

@pytest.fixture
def fake_tenant(mocker):
    tenant = FakeTenant({"u1": 204, "u2": 429, "u3": 500})
    mocker.patch(
        "bulkdelete.main.build_http_client",
        side_effect=lambda timeout: httpx.AsyncClient(transport=httpx.MockTransport(tenant)),
    )
    return tenant

def test_delete_command_flow(runner: CliRunner, workdir: Path, tenant_env, fake_tenant: FakeTenant):
    """Full run with real scheduler, retry policy and ledger against a scripted tenant."""
    result = runner.invoke(app, [
        "--mode", "users", "--concurrent", "2", "--delay", "300", "--retry", "3", "--no-prompt",
    ])

    assert result.exit_code == 0, f"CLI command failed: {result.stdout}"
    assert fake_tenant.token_requests[0]["scope"] == "delete:users read:users"
    assert fake_tenant.token_requests[0]["audience"] == "https://acme.eu.auth0.com/api/v2/"
    assert fake_tenant.deletes == Counter({"u1": 1, "u2": 4, "u3": 1})

    lines = (workdir / "failures.log").read_text().splitlines()
    assert lines[0] == HEADER
    assert sorted(lines[1:]) == ["u2,429", "u3,500"]
    assert "Bulk delete summary" in result.stdout

def test_declined_confirmation_deletes_nothing(runner: CliRunner, workdir: Path, tenant_env, fake_tenant: FakeTenant):
    result = runner.invoke(app, ["--mode", "users", "--delay", "300"], input="wrong\n")

    assert result.exit_code == 1
    assert sum(fake_tenant.deletes.values()) == 0
    assert "exiting!" in result.stdout
    assert not (workdir / "failures.log").exists()

def test_confirmed_run_deletes(runner: CliRunner, workdir: Path, tenant_env, fake_tenant: FakeTenant):
    fake_tenant.statuses = {"u1": 204, "u2": 204, "u3": 204}

    result = runner.invoke(app, ["--mode", "users", "--delay", "300"], input="acme\n")

    assert result.exit_code == 0, f"CLI command failed: {result.stdout}"
    assert fake_tenant.deletes == Counter({"u1": 1, "u2": 1, "u3": 1})
    assert (workdir / "failures.log").read_text().splitlines() == [HEADER]

@pytest.mark.parametrize("args", [
    ["--mode", "users", "--concurrent", "50"],
    ["--mode", "users", "--delay", "100"],
    ["--mode", "roles"],
])
def test_invalid_options_fail_before_any_request(runner: CliRunner, workdir: Path, tenant_env, fake_tenant, args):
    result = runner.invoke(app, args + ["--no-prompt"])

    assert result.exit_code == 1
    assert fake_tenant.token_requests == []
    assert sum(fake_tenant.deletes.values()) == 0
    assert not (workdir / "failures.log").exists()

def test_missing_credentials_fail_validation(runner: CliRunner, workdir: Path, fake_tenant: FakeTenant):
    result = runner.invoke(app, ["--mode", "users", "--no-prompt"])

    assert result.exit_code == 1
    assert "AUTH0_DOMAIN" in result.stdout
    assert "AUTH0_CLIENT_SECRET" in result.stdout
    assert "see usage: bulk-delete --help" in result.output
    assert fake_tenant.token_requests == []

def test_missing_ids_file_fails(runner: CliRunner, workdir: Path, tenant_env, fake_tenant: FakeTenant):
    result = runner.invoke(app, ["--mode", "users", "--no-prompt", "--ids-file", "nope.delete"])

    assert result.exit_code == 1
    assert sum(fake_tenant.deletes.values()) == 0
