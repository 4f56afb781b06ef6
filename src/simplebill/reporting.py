"""Aggregate invoices per customer and export them to an Excel workbook."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Mapping

from openpyxl import Workbook

from .config import Customer
from .invoices import Invoice
from .utils import q2


@dataclass
class Totals:
    """Number of invoices and summed totals for a set of invoices."""

    count: int = 0
    total: Decimal = field(default_factory=lambda: Decimal("0"))

    def add(self, amount: Decimal) -> None:
        self.count += 1
        self.total += amount


@dataclass
class ReportData:
    invoices: list[Invoice]
    customer_names: dict[str, str]
    totals_by_customer: dict[str, Totals]
    overall_totals: Totals


def aggregate_invoices(
    invoices: Iterable[Invoice], customers: Mapping[str, Customer]
) -> ReportData:
    """Group ``invoices`` by customer key, resolving display names from ``customers``."""

    rows = list(invoices)
    names: dict[str, str] = {}
    by_customer: dict[str, Totals] = {}
    overall = Totals()

    for invoice in rows:
        customer = customers.get(invoice.customer)
        names[invoice.customer] = customer.name if customer and customer.name else invoice.customer
        by_customer.setdefault(invoice.customer, Totals()).add(invoice.total)
        overall.add(invoice.total)

    return ReportData(
        invoices=rows,
        customer_names=names,
        totals_by_customer=by_customer,
        overall_totals=overall,
    )


def write_excel_report(data: ReportData, destination: Path) -> Path:
    """Write an "Invoices" sheet and a "By customer" summary to ``destination``."""

    destination.parent.mkdir(parents=True, exist_ok=True)

    workbook = Workbook()
    invoices_ws = workbook.active
    invoices_ws.title = "Invoices"
    invoices_ws.append(["Number", "Date", "Due date", "Customer", "Total"])
    for invoice in data.invoices:
        invoices_ws.append(
            [
                invoice.invoice_number,
                invoice.date,
                invoice.due_date,
                data.customer_names.get(invoice.customer, invoice.customer),
                q2(invoice.total),
            ]
        )

    summary_ws = workbook.create_sheet(title="By customer")
    summary_ws.append(["Customer", "Invoices", "Total"])
    for key in sorted(data.totals_by_customer):
        totals = data.totals_by_customer[key]
        summary_ws.append([data.customer_names.get(key, key), totals.count, q2(totals.total)])

    summary_ws.append([])
    summary_ws.append(["Total", data.overall_totals.count, q2(data.overall_totals.total)])

    workbook.save(destination)
    return destination


__all__ = ["Totals", "ReportData", "aggregate_invoices", "write_excel_report"]
