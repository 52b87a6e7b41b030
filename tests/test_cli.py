"""Tests for CLI argument handling."""

import pytest

from dataroom.presentation import cli


@pytest.fixture
def search_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "cmd_search", lambda *args: calls.append(args))
    return calls


@pytest.mark.parametrize("limit", ["abc", "0", "-3"])
def test_search_rejects_bad_limit(monkeypatch, capsys, search_calls, limit):
    monkeypatch.setattr("sys.argv", ["dataroom", "search", "p1", "revenue", limit])

    with pytest.raises(SystemExit) as exc_info:
        cli.main()

    assert exc_info.value.code == 1
    out = capsys.readouterr().out
    assert "Limit must be a positive integer" in out
    assert "Usage:" in out
    assert search_calls == []


def test_search_parses_limit(monkeypatch, search_calls):
    monkeypatch.setattr("sys.argv", ["dataroom", "search", "p1", "revenue", "3"])

    cli.main()

    assert search_calls == [("p1", "revenue", 3)]


def test_search_uses_default_limit(monkeypatch, search_calls):
    monkeypatch.setattr("sys.argv", ["dataroom", "search", "p1", "revenue"])

    cli.main()

    assert search_calls == [("p1", "revenue", cli.settings.search_limit)]


def test_unknown_command_prints_usage(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["dataroom", "frobnicate"])

    with pytest.raises(SystemExit):
        cli.main()

    assert "Usage:" in capsys.readouterr().out
