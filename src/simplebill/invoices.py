"""Invoice records persisted as ``<store>/invoices/<number>.yml``."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from .config import INVOICES_DIR, InvoiceSettings, load_yaml, store_dir
from .errors import ConfigFileError, InvoiceNotFoundError
from .schema import INVOICE_SCHEMA, validate_document
from .utils import parse_decimal, to_yaml_number

logger = logging.getLogger(__name__)


@dataclass
class Item:
    """Single invoice line; ``total`` is ``unit_price * quantity``."""

    product: str
    quantity: int
    unit_price: Decimal
    total: Decimal
    discount: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "product": self.product,
            "quantity": self.quantity,
            "unit_price": to_yaml_number(self.unit_price),
            "total": to_yaml_number(self.total),
            "discount": self.discount,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Item":
        return cls(
            product=str(data["product"]),
            quantity=int(data["quantity"]),
            unit_price=parse_decimal(data.get("unit_price")),
            total=parse_decimal(data.get("total")),
            discount=int(data.get("discount") or 0),
        )


def _iso(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return "" if value is None else str(value)


@dataclass
class Invoice:
    """Invoice as written to disk; create-once, delete-only."""

    invoice_number: str
    date: str
    due_date: str
    customer: str
    items: list[Item] = field(default_factory=list)
    total: Decimal = Decimal("0")
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def path(self) -> Path:
        return invoices_dir() / f"{self.invoice_number}.yml"

    @property
    def pdf_path(self) -> Path:
        return invoices_dir() / f"{self.invoice_number}.pdf"

    def to_dict(self) -> dict[str, Any]:
        return {
            "invoice_number": self.invoice_number,
            "date": self.date,
            "due_date": self.due_date,
            "customer": self.customer,
            "items": [item.to_dict() for item in self.items],
            "total": to_yaml_number(self.total),
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Invoice":
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        elif not isinstance(created_at, datetime):
            created_at = datetime.min.replace(tzinfo=timezone.utc)
        return cls(
            invoice_number=str(data["invoice_number"]),
            date=_iso(data.get("date")),
            due_date=_iso(data.get("due_date")),
            customer=str(data["customer"]),
            items=[Item.from_dict(item) for item in data.get("items") or []],
            total=parse_decimal(data.get("total")),
            created_at=created_at,
        )

    def save(self) -> Path:
        """Write the record, silently replacing an existing file of the same number."""

        destination = self.path
        destination.parent.mkdir(parents=True, exist_ok=True)
        with destination.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(self.to_dict(), handle, sort_keys=False, allow_unicode=True)
        logger.debug("Saved invoice %s to %s", self.invoice_number, destination)
        return destination


def invoices_dir() -> Path:
    return store_dir() / INVOICES_DIR


def next_number(
    settings: InvoiceSettings,
    *,
    year: int | None = None,
    directory: Path | None = None,
) -> str:
    """Return the next ``PREFIX-YEAR-NNNN`` number for ``settings``.

    The sequence is ``max(starting_number, highest existing) + 1`` where only
    files of the same prefix and year are considered, so numbering restarts
    every year.
    """

    year = date.today().year if year is None else year
    directory = invoices_dir() if directory is None else directory
    prefix = settings.prefix
    pattern = re.compile(rf"^{re.escape(prefix)}-{year}-(\d{{4,}})\.yml$")

    highest = settings.starting_sequence
    if directory.is_dir():
        for entry in directory.iterdir():
            if not entry.is_file():
                continue
            match = pattern.match(entry.name)
            if match:
                highest = max(highest, int(match.group(1)))

    return f"{prefix}-{year}-{highest + 1:04d}"


def read_invoice(path: Path) -> Invoice:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = load_yaml(handle)
    except yaml.YAMLError as exc:
        raise ConfigFileError(f"parsing {path}: {exc}") from exc
    validate_document(data, INVOICE_SCHEMA, path)
    return Invoice.from_dict(data)


def load_invoice(number: str) -> Invoice:
    path = invoices_dir() / f"{number}.yml"
    if not path.is_file():
        raise InvoiceNotFoundError(f"invoice {number} not found")
    return read_invoice(path)


def load_invoices() -> list[Invoice]:
    """Every readable invoice in the store, newest date first."""

    directory = invoices_dir()
    if not directory.is_dir():
        return []

    invoices: list[Invoice] = []
    for path in sorted(directory.glob("*.yml")):
        if not path.is_file():
            continue
        try:
            invoices.append(read_invoice(path))
        except (ConfigFileError, OSError, KeyError, ValueError) as exc:
            logger.warning("Skipping %s: %s", path.name, exc)

    invoices.sort(key=lambda invoice: (invoice.date, invoice.invoice_number), reverse=True)
    return invoices


def invoice_paths(number: str) -> tuple[Path, Path]:
    """Return the YAML and PDF paths for ``number``."""

    directory = invoices_dir()
    return directory / f"{number}.yml", directory / f"{number}.pdf"


def delete_invoice(number: str) -> list[Path]:
    """Remove the invoice record and its PDF; return the removed paths."""

    yml_path, pdf_path = invoice_paths(number)
    if not yml_path.is_file():
        raise InvoiceNotFoundError(f"invoice {number} not found")

    removed = [yml_path]
    yml_path.unlink()
    if pdf_path.exists():
        pdf_path.unlink()
        removed.append(pdf_path)
    return removed


def invoice_total(items: Iterable[Item]) -> Decimal:
    return sum((item.total for item in items), Decimal("0"))


__all__ = [
    "Item",
    "Invoice",
    "invoices_dir",
    "next_number",
    "read_invoice",
    "load_invoice",
    "load_invoices",
    "invoice_paths",
    "delete_invoice",
    "invoice_total",
]
