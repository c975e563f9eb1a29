"""CLI behavior tests."""

import argparse
import json
import sys

import pytest

from samplebank import cli


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "samplebank.config.yaml"
    path.write_text(f"storage:\n  sqlite_path: {tmp_path / 'bank.db'}\n", encoding="utf-8")
    return path


def _args(config_file, **kwargs):
    defaults = {
        "config": str(config_file),
        "log_level": "WARNING",
        "select": None,
        "sort": None,
        "interval": None,
        "elements": None,
        "filter": None,
        "embed": None,
    }
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


def _seed(config_file):
    cli.cmd_init(_args(config_file))
    cli.cmd_demo(_args(config_file))


def test_accounts_list_prints_json(config_file, capsys):
    _seed(config_file)
    capsys.readouterr()

    cli.cmd_accounts_list(_args(config_file, sort="balance-", elements="0|0", filter="name::+"))

    payload = json.loads(capsys.readouterr().out)
    assert payload["accounts"] == [
        {"name": "Nem Konto", "_links": {
            "self": {"href": "/accounts/5479-7654321"},
            "transactions": {"href": "/accounts/5479-7654321/transactions"},
        }}
    ]
    assert payload["query"] == {"sort": "balance-", "elements": "0|0", "filter": "name::+"}


def test_demo_is_idempotent(config_file, capsys):
    _seed(config_file)
    cli.cmd_demo(_args(config_file))
    capsys.readouterr()

    cli.cmd_accounts_list(_args(config_file))

    assert json.loads(capsys.readouterr().out)["total"] == 3


def test_transactions_list_for_account(config_file, capsys):
    _seed(config_file)
    capsys.readouterr()

    cli.cmd_transactions_list(_args(config_file, account="5479-1234567", sort="amount-", elements="0|0"))

    payload = json.loads(capsys.readouterr().out)
    assert [t["description"] for t in payload["transactions"]] == ["Starting balance"]


def test_accounts_get_not_found_exits(config_file):
    _seed(config_file)

    with pytest.raises(SystemExit) as excinfo:
        cli.cmd_accounts_get(_args(config_file, account="0000-1"))
    assert excinfo.value.code == cli.EXIT_NOT_FOUND


def test_split_account_rejects_bad_identity():
    with pytest.raises(ValueError):
        cli._split_account("54791234567")


def test_main_exits_on_malformed_query(config_file, monkeypatch):
    _seed(config_file)
    monkeypatch.setattr(
        sys,
        "argv",
        ["samplebank", "--config", str(config_file), "--log-level", "CRITICAL", "accounts", "list", "--select", "balance"],
    )

    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code == cli.EXIT_BAD_REQUEST


def test_events_metadata(config_file, capsys):
    cli.cmd_events_list(_args(config_file, metadata=True, category=None))

    assert "events" in json.loads(capsys.readouterr().out)["metadata"]
