from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


CONFIG_YML = """
company:
  name: "Test Co"
  address: |
    1 Test Street
    Testville, TS 00001
  email: "billing@test.example"
  phone: "555-0100"
  id: "TAX-1"
invoice:
  prefix: "INV"
  starting_number: "0005"
  payment_terms: "Net 14"
  due_days: 14
  notes: "Thanks!"
auto_commit: false
""".lstrip()

CUSTOMERS_YML = """
acme:
  name: "Acme Corp"
  email: "billing@acme.example"
  address: |
    456 Oak Ave
    Denver, CO 80202
  id: "LIC-12345"
globex:
  name: "Globex"
""".lstrip()

PRODUCTS_YML = """
widget:
  name: "Standard Widget"
  sku: "WDG-001"
  price: 19.99
gadget:
  name: "Gadget"
  sku: "GDG-002"
  price: 100.00
""".lstrip()

TEMPLATE_HTML = (
    "<h1>{{ invoice_number }}</h1><p>{{ customer.name }}</p>"
    "{% for item in items %}<li>{{ item.name }} {{ item.quantity }} {{ item.total | money }}</li>{% endfor %}"
    "<b>{{ total | money }}</b>"
)


@pytest.fixture
def store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An initialised store directory selected through ``SIMPLEBILL_HOME``."""

    directory = tmp_path / "store"
    (directory / "invoices").mkdir(parents=True)
    (directory / "config.yml").write_text(CONFIG_YML, encoding="utf-8")
    (directory / "customers.yml").write_text(CUSTOMERS_YML, encoding="utf-8")
    (directory / "products.yml").write_text(PRODUCTS_YML, encoding="utf-8")
    (directory / "template.html").write_text(TEMPLATE_HTML, encoding="utf-8")

    monkeypatch.setenv("SIMPLEBILL_HOME", str(directory))
    monkeypatch.setenv("SIMPLEBILL_NO_UPDATE_CHECK", "1")
    return directory
