"""Delete an invoice record and its PDF."""

from __future__ import annotations

import argparse
from typing import Sequence

from ..config import auto_commit, report_commit
from ..errors import InvoiceNotFoundError, UserInputError
from ..invoices import delete_invoice, invoice_paths
from ..utils import confirm


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simplebill delete",
        description="Delete an invoice (YAML record and PDF).",
    )
    parser.add_argument("number", help="Invoice number, e.g. INV-2025-0001")
    parser.add_argument(
        "-y",
        "--confirm",
        action="store_true",
        help="Delete without asking for confirmation.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    number = args.number.strip()
    if not number or "/" in number or "\\" in number or number.startswith("."):
        raise UserInputError(f"invalid invoice number '{args.number}'")

    yml_path, _pdf_path = invoice_paths(number)
    if not yml_path.is_file():
        raise InvoiceNotFoundError(f"invoice {number} not found")

    if not args.confirm and not confirm(f"Delete invoice {number}? [y/N] "):
        print("Cancelled.")
        return 0

    delete_invoice(number)
    print(f"Deleted {number}")

    report_commit(auto_commit(f"simplebill: deleted invoice {number}"))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
