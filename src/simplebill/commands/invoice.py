"""Create an invoice, preview it and save the YAML record plus PDF.

Without ``--yes`` the invoice is rendered to a temporary PDF, opened in the
default viewer and only saved once the user confirms; declining writes
nothing to the store.
"""

from __future__ import annotations

import argparse
from datetime import date, datetime, timedelta, timezone
from typing import Sequence

from ..config import auto_commit, load_config, load_customers, load_products, report_commit
from ..errors import UserInputError
from ..invoices import Invoice, next_number
from ..pdf import open_file, render_pdf, render_pdf_to_temp
from ..pricing import TOKEN_FORMAT, price_items
from ..utils import confirm


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simplebill invoice",
        description="Generate an invoice for a customer from product:quantity items.",
    )
    parser.add_argument("customer", help="Customer key from customers.yml")
    parser.add_argument(
        "items",
        nargs="+",
        metavar="item",
        help=f"Item as {TOKEN_FORMAT}, e.g. widget:10 or widget:2:10:@15.00",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Skip the PDF preview and save immediately.",
    )
    return parser


def draft_invoice(customer_key: str, tokens: Sequence[str], *, today: date | None = None):
    """Load the store and build the in-memory invoice without writing anything."""

    config = load_config()
    customers = load_customers()
    products = load_products()

    customer = customers.get(customer_key)
    if customer is None:
        raise UserInputError(f"customer '{customer_key}' not found in customers.yml")

    items, total = price_items(tokens, products)

    today = date.today() if today is None else today
    invoice = Invoice(
        invoice_number=next_number(config.invoice, year=today.year),
        date=today.isoformat(),
        due_date=(today + timedelta(days=config.invoice.due_days)).isoformat(),
        customer=customer_key,
        items=items,
        total=total,
        created_at=datetime.now(timezone.utc),
    )
    return invoice, config, customer, products


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    invoice, config, customer, products = draft_invoice(args.customer, args.items)

    if not args.yes:
        preview = render_pdf_to_temp(invoice, config, customer, products)
        try:
            open_file(preview)
            accepted = confirm("Save invoice? [y/n]: ")
        finally:
            preview.unlink(missing_ok=True)
        if not accepted:
            print("Invoice cancelled.")
            return 0

    invoice.save()
    pdf_path = render_pdf(invoice, config, customer, products)

    print(f"Created {invoice.invoice_number}")
    print(pdf_path)

    report_commit(auto_commit(f"simplebill: created invoice {invoice.invoice_number}", config))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
