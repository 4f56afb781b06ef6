"""Config store: YAML files kept under the per-user store directory.

Every command re-reads the files it needs; nothing is cached between
invocations and nothing is locked.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import IO, Any, Callable, Mapping

import yaml

from .errors import ConfigFileError, NotInitializedError
from .schema import CONFIG_SCHEMA, CUSTOMERS_SCHEMA, PRODUCTS_SCHEMA, validate_document
from .utils import parse_decimal

logger = logging.getLogger(__name__)

STORE_ENV = "SIMPLEBILL_HOME"
STORE_NAME = ".simplebill"
CONFIG_FILE = "config.yml"
CUSTOMERS_FILE = "customers.yml"
PRODUCTS_FILE = "products.yml"
TEMPLATE_FILE = "template.html"
INVOICES_DIR = "invoices"

Runner = Callable[..., subprocess.CompletedProcess]


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Company:
    name: str = ""
    address: str = ""
    email: str = ""
    phone: str = ""
    id: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Company":
        data = data or {}
        return cls(
            name=_text(data.get("name")),
            address=_text(data.get("address")),
            email=_text(data.get("email")),
            phone=_text(data.get("phone")),
            id=_text(data.get("id")),
        )


# Customers carry the same fields as the company profile.
@dataclass(frozen=True)
class Customer(Company):
    pass


@dataclass(frozen=True)
class Product:
    name: str = ""
    sku: str = ""
    price: Decimal = Decimal("0")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Product":
        return cls(
            name=_text(data.get("name")),
            sku=_text(data.get("sku")),
            price=parse_decimal(data.get("price")),
        )


@dataclass(frozen=True)
class InvoiceSettings:
    prefix: str = "INV"
    starting_number: str = "0000"
    payment_terms: str = ""
    due_days: int = 14
    notes: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "InvoiceSettings":
        data = data or {}
        defaults = cls()
        starting = data.get("starting_number")
        due_days = data.get("due_days")
        return cls(
            prefix=_text(data.get("prefix")) or defaults.prefix,
            starting_number=defaults.starting_number if starting is None else str(starting),
            payment_terms=_text(data.get("payment_terms")),
            due_days=defaults.due_days if due_days is None else int(due_days),
            notes=_text(data.get("notes")),
        )

    @property
    def starting_sequence(self) -> int:
        """Integer value of ``starting_number``.

        A value that is not a plain integer counts as zero, the behaviour
        existing stores rely on; a warning makes the fallback visible.
        """

        text = self.starting_number.strip()
        try:
            return int(text)
        except ValueError:
            logger.warning(
                "starting_number %r in %s is not a number; numbering starts from 0",
                self.starting_number,
                CONFIG_FILE,
            )
            return 0


@dataclass(frozen=True)
class Config:
    company: Company = field(default_factory=Company)
    invoice: InvoiceSettings = field(default_factory=InvoiceSettings)
    auto_commit: bool = False
    skip_update_check: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        return cls(
            company=Company.from_dict(data.get("company")),
            invoice=InvoiceSettings.from_dict(data.get("invoice")),
            auto_commit=bool(data.get("auto_commit")),
            skip_update_check=bool(data.get("skip_update_check")),
        )


@dataclass(frozen=True)
class CommitResult:
    """Outcome of :func:`auto_commit`; ``error`` is set when git failed."""

    committed: bool
    reason: str
    error: str | None = None


_INT_TAG = "tag:yaml.org,2002:int"


class StoreLoader(yaml.SafeLoader):
    """Safe loader that keeps zero-padded scalars such as ``0010`` as text.

    YAML 1.1 reads them as octal, which turns a ``starting_number`` of
    ``0010`` into 8.
    """


StoreLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _INT_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
StoreLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(r"^(?:[-+]?0|[-+]?[1-9][0-9_]*)$"),
    list("-+0123456789"),
)


def load_yaml(handle: IO[str]) -> Any:
    return yaml.load(handle, Loader=StoreLoader)


def store_dir() -> Path:
    """Return the store directory (``$SIMPLEBILL_HOME`` or ``~/.simplebill``)."""

    override = os.getenv(STORE_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / STORE_NAME


def _read_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return load_yaml(handle)
    except yaml.YAMLError as exc:
        raise ConfigFileError(f"parsing {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigFileError(f"reading {path}: {exc.strerror or exc}") from exc


def load_config() -> Config:
    """Read ``config.yml``; a missing file means the store is not initialised."""

    path = store_dir() / CONFIG_FILE
    if not path.exists():
        raise NotInitializedError("run 'simplebill init' first")

    data = _read_yaml(path) or {}
    validate_document(data, CONFIG_SCHEMA, path)
    return Config.from_dict(data)


def load_customers() -> dict[str, Customer]:
    path = store_dir() / CUSTOMERS_FILE
    data = _read_yaml(path) or {}
    validate_document(data, CUSTOMERS_SCHEMA, path)
    return {str(key): Customer.from_dict(value) for key, value in data.items()}


def load_products() -> dict[str, Product]:
    path = store_dir() / PRODUCTS_FILE
    data = _read_yaml(path) or {}
    validate_document(data, PRODUCTS_SCHEMA, path)
    products: dict[str, Product] = {}
    for key, value in data.items():
        price = parse_decimal(value.get("price"), default=None)
        if price is None:
            raise ConfigFileError(f"parsing {path}: {key}.price: {value.get('price')!r} is not a number")
        if price < 0:
            raise ConfigFileError(f"parsing {path}: {key}.price: must not be negative")
        products[str(key)] = Product.from_dict(value)
    return products


def _git(directory: Path, *args: str, runner: Runner) -> subprocess.CompletedProcess:
    return runner(
        ["git", "-C", str(directory), *args],
        check=False,
        capture_output=True,
        text=True,
    )


def _failure(step: str, result: subprocess.CompletedProcess) -> str:
    output = (result.stderr or result.stdout or "").strip()
    return f"git {step} failed (exit {result.returncode}){': ' + output if output else ''}"


def auto_commit(
    message: str,
    config: Config | None = None,
    *,
    runner: Runner = subprocess.run,
) -> CommitResult:
    """Commit every change in the store when ``auto_commit`` is enabled.

    Never raises: the caller has already written its files, so problems are
    reported through the returned :class:`CommitResult`.
    """

    if config is None:
        try:
            config = load_config()
        except (NotInitializedError, ConfigFileError):
            return CommitResult(False, "config unavailable")

    if not config.auto_commit:
        return CommitResult(False, "auto_commit disabled")

    directory = store_dir()
    if not (directory / ".git").exists():
        return CommitResult(False, "store is not a git repository")

    try:
        added = _git(directory, "add", "-A", runner=runner)
        if added.returncode != 0:
            return CommitResult(False, "add failed", _failure("add", added))

        diff = _git(directory, "diff", "--cached", "--quiet", runner=runner)
        if diff.returncode == 0:
            return CommitResult(False, "nothing to commit")

        committed = _git(directory, "commit", "-m", message, runner=runner)
        if committed.returncode != 0:
            return CommitResult(False, "commit failed", _failure("commit", committed))
    except OSError as exc:
        return CommitResult(False, "git unavailable", f"git could not be run: {exc}")

    logger.debug("Committed store changes: %s", message)
    return CommitResult(True, "committed")


def report_commit(result: CommitResult) -> None:
    """Log the outcome of :func:`auto_commit` without failing the command."""

    if result.error:
        logger.warning("auto-commit skipped: %s", result.error)
    else:
        logger.debug("auto-commit: %s", result.reason)


__all__ = [
    "STORE_ENV",
    "CONFIG_FILE",
    "CUSTOMERS_FILE",
    "PRODUCTS_FILE",
    "TEMPLATE_FILE",
    "INVOICES_DIR",
    "Company",
    "Customer",
    "Product",
    "InvoiceSettings",
    "Config",
    "CommitResult",
    "store_dir",
    "load_config",
    "load_customers",
    "load_products",
    "auto_commit",
    "report_commit",
]
