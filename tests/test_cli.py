"""Tests for the command-line entry point."""

import pytest

from stockalert.cli import main

from test_config import _ENV_VARS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # setenv first so teardown also removes values loaded from a .env file
    for name in _ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


def test_missing_key_exits_nonzero(capsys):
    assert main([]) == 1
    assert "FINNHUB_API_KEY" in capsys.readouterr().err


def test_bad_config_file_exits_nonzero(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "missing.json"), "--provider", "mock"]) == 1
    assert "Configuration error" in capsys.readouterr().err


def test_bad_config_value_exits_nonzero(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text('{"refreshInterval": "fast"}')
    assert main(["--config", str(path), "--provider", "mock"]) == 1
    assert "refreshInterval" in capsys.readouterr().err


def test_test_email_through_log_notifier():
    assert main(["--provider", "mock", "--test-email"]) == 0


def test_test_email_failure_exits_nonzero(monkeypatch):
    import requests

    def boom(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests, "post", boom)
    monkeypatch.setenv("RESEND_API_KEY", "re_key")
    monkeypatch.setenv("ALERT_EMAIL_FROM", "a@example.com")
    monkeypatch.setenv("ALERT_EMAIL_TO", "b@example.com")
    assert main(["--provider", "mock", "--test-email"]) == 1


def test_once_with_mock_provider():
    assert main(["--provider", "mock", "--once"]) == 0


def test_env_file_supplies_settings(tmp_path, capsys):
    (tmp_path / ".env").write_text("STOCK_ALERT_PROVIDER=mock\nSTOCK_ALERT_NOTIFIERS=log\n")
    assert main(["--test-email"]) == 0
    assert "Provider        : mock" in capsys.readouterr().out


def test_explicit_env_file_path(tmp_path):
    path = tmp_path / "alerts.env"
    path.write_text("STOCK_ALERT_PROVIDER=mock\n")
    assert main(["--env-file", str(path), "--test-email"]) == 0


def test_environment_wins_over_env_file(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("STOCK_ALERT_PROVIDER=finnhub\n")
    monkeypatch.setenv("STOCK_ALERT_PROVIDER", "mock")
    assert main(["--test-email"]) == 0


def test_test_email_uses_reference_timezone(monkeypatch):
    from stockalert.notifiers.log import LogNotifier

    sent = []
    monkeypatch.setattr(LogNotifier, "send", lambda self, events: sent.extend(events))
    assert main(["--provider", "mock", "--test-email"]) == 0
    assert sent[0].timestamp.tzinfo.key == "America/New_York"
