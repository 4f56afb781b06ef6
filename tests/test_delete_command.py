from __future__ import annotations

from decimal import Decimal

import pytest

from simplebill import cli
from simplebill.commands import delete as delete_cmd
from simplebill.config import CommitResult
from simplebill.invoices import Invoice, Item


def _save(number: str) -> None:
    Invoice(
        invoice_number=number,
        date="2025-03-01",
        due_date="2025-03-15",
        customer="acme",
        items=[Item(product="widget", quantity=1, unit_price=Decimal("19.99"), total=Decimal("19.99"))],
        total=Decimal("19.99"),
    ).save()


@pytest.fixture
def commits(store, monkeypatch) -> list[str]:
    messages: list[str] = []

    def _fake_commit(message, config=None):
        messages.append(message)
        return CommitResult(False, "auto_commit disabled")

    monkeypatch.setattr(delete_cmd, "auto_commit", _fake_commit)
    return messages


def _no_prompt(prompt):
    raise AssertionError("delete must not prompt here")


def test_delete_missing_invoice_fails_without_prompt(store, commits, monkeypatch, capsys):
    _save("INV-2025-0006")
    monkeypatch.setattr("builtins.input", _no_prompt)

    exit_code = cli.main(["delete", "INV-2025-0001"])

    assert exit_code == 1
    assert "invoice INV-2025-0001 not found" in capsys.readouterr().err
    assert (store / "invoices" / "INV-2025-0006.yml").exists()
    assert commits == []


def test_delete_confirmed_flag_removes_yaml_and_pdf(store, commits, monkeypatch):
    _save("INV-2025-0006")
    _save("INV-2025-0007")
    (store / "invoices" / "INV-2025-0006.pdf").write_bytes(b"%PDF")
    monkeypatch.setattr("builtins.input", _no_prompt)

    assert cli.main(["delete", "INV-2025-0006", "--confirm"]) == 0

    remaining = sorted(path.name for path in (store / "invoices").iterdir())
    assert remaining == ["INV-2025-0007.yml"]
    assert commits == ["simplebill: deleted invoice INV-2025-0006"]


def test_delete_short_flag(store, commits, monkeypatch):
    _save("INV-2025-0006")
    monkeypatch.setattr("builtins.input", _no_prompt)

    assert cli.main(["delete", "-y", "INV-2025-0006"]) == 0
    assert not (store / "invoices" / "INV-2025-0006.yml").exists()


def test_delete_prompt_accepted(store, commits, monkeypatch, capsys):
    _save("INV-2025-0006")
    prompts: list[str] = []
    monkeypatch.setattr("builtins.input", lambda prompt: prompts.append(prompt) or "y")

    assert cli.main(["delete", "INV-2025-0006"]) == 0

    assert prompts == ["Delete invoice INV-2025-0006? [y/N] "]
    assert not (store / "invoices" / "INV-2025-0006.yml").exists()
    assert "Deleted INV-2025-0006" in capsys.readouterr().out


def test_delete_prompt_declined(store, commits, monkeypatch, capsys):
    _save("INV-2025-0006")
    monkeypatch.setattr("builtins.input", lambda prompt: "")

    assert cli.main(["delete", "INV-2025-0006"]) == 0

    assert (store / "invoices" / "INV-2025-0006.yml").exists()
    assert "Cancelled." in capsys.readouterr().out
    assert commits == []


def test_delete_rejects_paths(store, commits, capsys):
    assert cli.main(["delete", "../config", "-y"]) == 1
    assert "invalid invoice number" in capsys.readouterr().err
    assert (store / "config.yml").exists()
