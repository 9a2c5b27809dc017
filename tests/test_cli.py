import pytest
from typer.testing import CliRunner

from steamauth import __main__ as cli
from steamauth.auth.openid import STEAM_OPENID_ENDPOINT

from conftest import STEAM_ID, StubSteam, make_query

runner = CliRunner()


@pytest.fixture
def stub(monkeypatch):
    stub = StubSteam()
    monkeypatch.setattr(cli, "make_client", lambda timeout: stub.client())
    return stub


def test_login_url():
    result = runner.invoke(cli.app, ["login-url", "--realm", "https://example.com", "--callback-path", "/steam"])
    assert result.exit_code == 0
    assert result.output.startswith(STEAM_OPENID_ENDPOINT + "?")
    assert "openid.return_to=https%3A%2F%2Fexample.com%2Fsteam" in result.output


def test_login_url_uses_settings(monkeypatch):
    monkeypatch.setenv("STEAMAUTH_REALM", "https://example.net")
    result = runner.invoke(cli.app, ["login-url"])
    assert result.exit_code == 0
    assert "openid.realm=https%3A%2F%2Fexample.net" in result.output


def test_login_url_invalid_realm():
    result = runner.invoke(cli.app, ["login-url", "--realm", "nope"])
    assert result.exit_code == 1
    assert "invalid url" in result.output


def test_verify(stub):
    result = runner.invoke(cli.app, ["verify", make_query()])
    assert result.exit_code == 0
    assert result.output.strip() == str(STEAM_ID)
    assert len(stub.requests) == 1


def test_verify_cancelled(stub):
    result = runner.invoke(cli.app, ["verify", "openid.mode=cancel"])
    assert result.exit_code == 0
    assert result.output.strip() == "cancelled"
    assert stub.requests == []


def test_verify_return_to_mismatch(stub):
    qs = make_query(return_to="https://example.com/callback")
    result = runner.invoke(cli.app, ["verify", qs])
    assert result.exit_code == 1
    assert stub.requests == []

    result = runner.invoke(cli.app, ["verify", "--no-check-return-to", qs])
    assert result.exit_code == 0


def test_verify_rejected(stub):
    stub.body = "is_valid:false\n"
    result = runner.invoke(cli.app, ["verify", make_query()])
    assert result.exit_code == 1
    assert "did not confirm" in result.output


def test_login_url_unparsable_callback_path():
    result = runner.invoke(cli.app, ["login-url", "--callback-path", "http://[bad/x"])
    assert result.exit_code == 1
    assert "invalid url" in result.output


def test_invalid_timeout_setting(monkeypatch):
    monkeypatch.setenv("STEAMAUTH_HTTP_TIMEOUT", "abc")
    result = runner.invoke(cli.app, ["login-url"])
    assert result.exit_code == 1
    assert "invalid configuration" in result.output
