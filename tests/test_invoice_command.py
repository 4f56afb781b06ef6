from __future__ import annotations

import os
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
import yaml

from simplebill import cli
from simplebill.commands import invoice as invoice_cmd
from simplebill.config import CommitResult
from simplebill.errors import RendererError

YEAR = date.today().year
NUMBER = f"INV-{YEAR}-0006"


class _Calls:
    def __init__(self) -> None:
        self.previews: list[Path] = []
        self.opened: list[Path] = []
        self.rendered: list[str] = []
        self.commits: list[str] = []


@pytest.fixture
def calls(store, monkeypatch) -> _Calls:
    recorded = _Calls()

    def _fake_temp(invoice, config, customer, products):
        handle, name = tempfile.mkstemp(prefix="simplebill-preview-", suffix=".pdf")
        os.close(handle)
        Path(name).write_bytes(b"%PDF preview")
        recorded.previews.append(Path(name))
        return Path(name)

    def _fake_render(invoice, config, customer, products, output=None):
        recorded.rendered.append(invoice.invoice_number)
        invoice.pdf_path.write_bytes(b"%PDF final")
        return invoice.pdf_path

    def _fake_commit(message, config=None):
        recorded.commits.append(message)
        return CommitResult(False, "auto_commit disabled")

    monkeypatch.setattr(invoice_cmd, "render_pdf_to_temp", _fake_temp)
    monkeypatch.setattr(invoice_cmd, "render_pdf", _fake_render)
    monkeypatch.setattr(invoice_cmd, "open_file", recorded.opened.append)
    monkeypatch.setattr(invoice_cmd, "auto_commit", _fake_commit)
    return recorded


def _invoice_files(store: Path) -> list[str]:
    return sorted(path.name for path in (store / "invoices").iterdir())


def test_draft_invoice_computes_numbers_and_dates(store):
    invoice, cfg, customer, _products = invoice_cmd.draft_invoice(
        "acme", ["widget:10", "gadget:1:25"], today=date(2025, 1, 20)
    )

    assert invoice.invoice_number == "INV-2025-0006"
    assert invoice.date == "2025-01-20"
    assert invoice.due_date == "2025-02-03"
    assert invoice.total == Decimal("274.90")
    assert customer.name == "Acme Corp"
    assert cfg.company.name == "Test Co"
    assert _invoice_files(store) == []


def test_skip_preview_saves_yaml_and_pdf(store, calls, capsys):
    exit_code = cli.main(["invoice", "acme", "widget:10", "-y"])

    assert exit_code == 0
    assert _invoice_files(store) == [f"{NUMBER}.pdf", f"{NUMBER}.yml"]
    assert calls.previews == []
    assert calls.rendered == [NUMBER]
    assert calls.commits == [f"simplebill: created invoice {NUMBER}"]

    data = yaml.safe_load((store / "invoices" / f"{NUMBER}.yml").read_text(encoding="utf-8"))
    assert data["customer"] == "acme"
    assert data["total"] == 199.9

    out = capsys.readouterr().out
    assert f"Created {NUMBER}" in out
    assert str(store / "invoices" / f"{NUMBER}.pdf") in out


def test_preview_confirmed_saves(store, calls, monkeypatch):
    prompts: list[str] = []
    monkeypatch.setattr("builtins.input", lambda prompt: prompts.append(prompt) or "Yes")

    exit_code = cli.main(["invoice", "acme", "widget:2:0:@15.00"])

    assert exit_code == 0
    assert prompts == ["Save invoice? [y/n]: "]
    assert calls.opened == calls.previews
    assert not calls.previews[0].exists()
    assert _invoice_files(store) == [f"{NUMBER}.pdf", f"{NUMBER}.yml"]


def test_preview_declined_writes_nothing(store, calls, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda prompt: "n")

    exit_code = cli.main(["invoice", "acme", "widget:1"])

    assert exit_code == 0
    assert _invoice_files(store) == []
    assert calls.rendered == []
    assert calls.commits == []
    assert not calls.previews[0].exists()
    assert "Invoice cancelled." in capsys.readouterr().out


def test_preview_end_of_input_cancels(store, calls, monkeypatch):
    def _eof(prompt):
        raise EOFError

    monkeypatch.setattr("builtins.input", _eof)

    assert cli.main(["invoice", "acme", "widget:1"]) == 0
    assert _invoice_files(store) == []


def test_unknown_customer(store, calls, capsys):
    exit_code = cli.main(["invoice", "nobody", "widget:1", "-y"])

    assert exit_code == 1
    assert "Error: customer 'nobody' not found in customers.yml" in capsys.readouterr().err
    assert _invoice_files(store) == []


def test_bad_token_creates_nothing(store, calls, capsys):
    exit_code = cli.main(["invoice", "acme", "widget:1", "widget:1:150", "-y"])

    assert exit_code == 1
    assert "widget:1:150" in capsys.readouterr().err
    assert _invoice_files(store) == []


def test_missing_items_is_usage_error(store, calls):
    assert cli.main(["invoice", "acme"]) == 2


def test_numbers_increase_across_invoices(store, calls):
    assert cli.main(["invoice", "acme", "widget:1", "-y"]) == 0
    assert cli.main(["invoice", "globex", "gadget:1", "--yes"]) == 0

    assert _invoice_files(store) == [
        f"INV-{YEAR}-0006.pdf",
        f"INV-{YEAR}-0006.yml",
        f"INV-{YEAR}-0007.pdf",
        f"INV-{YEAR}-0007.yml",
    ]


def test_renderer_failure_keeps_saved_record(store, calls, monkeypatch, capsys):
    def _broken(*args, **kwargs):
        raise RendererError("wkhtmltopdf not installed")

    monkeypatch.setattr(invoice_cmd, "render_pdf", _broken)

    exit_code = cli.main(["invoice", "acme", "widget:1", "-y"])

    assert exit_code == 1
    assert "wkhtmltopdf not installed" in capsys.readouterr().err
    assert _invoice_files(store) == [f"{NUMBER}.yml"]
    assert calls.commits == []


def test_uninitialised_store(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("SIMPLEBILL_HOME", str(tmp_path / "missing"))
    monkeypatch.setenv("SIMPLEBILL_NO_UPDATE_CHECK", "1")

    assert cli.main(["invoice", "acme", "widget:1"]) == 1
    assert "run 'simplebill init' first" in capsys.readouterr().err
