"""Create the store directory with default configuration files."""

from __future__ import annotations

import argparse
from importlib import resources
from typing import Sequence

from ..config import (
    CONFIG_FILE,
    CUSTOMERS_FILE,
    INVOICES_DIR,
    PRODUCTS_FILE,
    TEMPLATE_FILE,
    auto_commit,
    report_commit,
    store_dir,
)
from ..errors import SimplebillError, UserInputError

DEFAULT_FILES = (CONFIG_FILE, CUSTOMERS_FILE, PRODUCTS_FILE, TEMPLATE_FILE)


def build_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        prog="simplebill init",
        description="Initialise the simplebill store directory with default files.",
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    parser.parse_args(argv)

    directory = store_dir()
    if directory.exists():
        raise UserInputError(f"{directory} already exists")

    defaults = resources.files("simplebill") / "defaults"
    try:
        (directory / INVOICES_DIR).mkdir(parents=True)
        for name in DEFAULT_FILES:
            content = (defaults / name).read_text(encoding="utf-8")
            (directory / name).write_text(content, encoding="utf-8")
    except OSError as exc:
        raise SimplebillError(f"could not create {directory}: {exc}") from exc

    print(f"Created {directory}")
    print("Edit your config files there, then run: simplebill invoice <customer> <product:qty>")

    report_commit(auto_commit("simplebill: initialized"))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
