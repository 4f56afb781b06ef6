"""List invoices, customers, products or the current configuration."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable, Sequence

from ..config import load_config, load_customers, load_products
from ..errors import UserInputError
from ..invoices import invoices_dir, load_invoices
from ..reporting import aggregate_invoices, write_excel_report
from ..utils import fmt_money

KINDS = ("invoices", "customers", "products", "config")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simplebill list",
        description="List data from the store (default: invoices).",
    )
    parser.add_argument(
        "kind",
        nargs="?",
        default="invoices",
        help="One of: " + ", ".join(KINDS),
    )
    parser.add_argument(
        "--xlsx",
        type=Path,
        metavar="PATH",
        help="Also export the invoice list to an Excel workbook.",
    )
    return parser


def list_invoices(xlsx: Path | None = None) -> None:
    if not invoices_dir().is_dir():
        print("No invoices yet.")
        return

    customers = load_customers()
    invoices = load_invoices()
    if not invoices:
        print("No invoices yet.")
        return

    for invoice in invoices:
        customer = customers.get(invoice.customer)
        name = customer.name if customer is not None else invoice.customer
        print(f"{invoice.invoice_number:<15}  {invoice.date}  {name:<30}  ${fmt_money(invoice.total):>7}")

    if xlsx is not None:
        destination = write_excel_report(aggregate_invoices(invoices, customers), xlsx)
        print(f"Exported {len(invoices)} invoices to {destination}")


def list_customers() -> None:
    customers = load_customers()
    if not customers:
        print("No customers defined.")
        return

    for key in sorted(customers):
        print(f"{key:<15}  {customers[key].name}")


def list_products() -> None:
    products = load_products()
    if not products:
        print("No products defined.")
        return

    for key in sorted(products):
        product = products[key]
        print(f"{key:<15}  {product.name:<40}  ${fmt_money(product.price)}")


def list_config() -> None:
    config = load_config()
    company = config.company
    settings = config.invoice

    print("Company:")
    print(f"  Name:    {company.name}")
    print(f"  Address: {', '.join(company.address.strip().splitlines())}")
    print(f"  Email:   {company.email}")
    if company.phone:
        print(f"  Phone:   {company.phone}")
    if company.id:
        print(f"  ID:      {company.id}")

    print()
    print("Invoice Settings:")
    print(f"  Prefix:        {settings.prefix}")
    print(f"  Starting #:    {settings.starting_number}")
    print(f"  Payment Terms: {settings.payment_terms}")
    print(f"  Due Days:      {settings.due_days}")
    print(f"  Notes:         {settings.notes}")

    print()
    print(f"Auto-commit: {str(config.auto_commit).lower()}")


_LISTERS: dict[str, Callable[[], None]] = {
    "customers": list_customers,
    "products": list_products,
    "config": list_config,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.kind not in KINDS:
        raise UserInputError(f"unknown list type '{args.kind}'. Use: {', '.join(KINDS)}")
    if args.xlsx is not None and args.kind != "invoices":
        raise UserInputError("--xlsx is only available when listing invoices")

    if args.kind == "invoices":
        list_invoices(args.xlsx)
    else:
        _LISTERS[args.kind]()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
