"""Tests for the management command line."""

from unittest.mock import MagicMock

import pytest

from src.crm import cli

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(cli, "setup_logging", MagicMock())


def test_parse_create_admin():
    args = cli.parse_args(
        ["create-admin", "--email", "boss@example.com", "--password", "pw", "--first-name", "Kim"]
    )

    assert args.command == "create-admin"
    assert args.email == "boss@example.com"
    assert args.first_name == "Kim"
    assert args.last_name == "User"


def test_migrate_defaults_to_head(monkeypatch: pytest.MonkeyPatch):
    run = MagicMock()
    monkeypatch.setattr(cli, "run_migrations_sync", run)

    assert cli.main(["migrate"]) == 0
    run.assert_called_once_with("head")


def test_create_admin_with_weak_password_fails(capsys: pytest.CaptureFixture[str]):
    exit_code = cli.main(["create-admin", "--email", "boss@example.com", "--password", "password"])

    assert exit_code == 1
    assert "error:" in capsys.readouterr().err


def test_serve_uses_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    run = MagicMock()
    monkeypatch.setattr(cli.uvicorn, "run", run)

    assert cli.main(["serve", "--port", "8080"]) == 0
    run.assert_called_once()
    assert run.call_args.args == ("src.crm.main:app",)
    assert run.call_args.kwargs["port"] == 8080
