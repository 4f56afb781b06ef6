"""Render invoices to PDF through an HTML template and ``wkhtmltopdf``."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Mapping

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, select_autoescape

from .config import TEMPLATE_FILE, Config, Customer, Product, store_dir
from .errors import RendererError
from .invoices import Invoice
from .utils import fmt_money

logger = logging.getLogger(__name__)

WKHTMLTOPDF = "wkhtmltopdf"
PAGE_OPTIONS = (
    "--page-size", "Letter",
    "--margin-top", "10mm",
    "--margin-bottom", "10mm",
    "--margin-left", "10mm",
    "--margin-right", "10mm",
)
INSTALL_HINT = (
    "wkhtmltopdf not installed\n\n"
    "Install it with:\n"
    "  macOS: brew install wkhtmltopdf\n"
    "  Ubuntu/Debian: sudo apt install wkhtmltopdf\n"
    "  Fedora: sudo dnf install wkhtmltopdf"
)

Runner = Callable[..., subprocess.CompletedProcess]


def build_template_data(
    invoice: Invoice,
    config: Config,
    customer: Customer,
    products: Mapping[str, Product],
) -> dict[str, Any]:
    """Merge invoice, company, customer and product details for the template."""

    items = []
    for item in invoice.items:
        product = products.get(item.product, Product(name=item.product))
        items.append(
            {
                "name": product.name or item.product,
                "sku": product.sku,
                "quantity": item.quantity,
                "price": item.unit_price,
                "discount": item.discount,
                "total": item.total,
            }
        )

    return {
        "invoice_number": invoice.invoice_number,
        "date": invoice.date,
        "due_date": invoice.due_date,
        "company": config.company,
        "customer": customer,
        "payment_terms": config.invoice.payment_terms,
        "notes": config.invoice.notes,
        "items": items,
        "total": invoice.total,
    }


def render_html(data: Mapping[str, Any], template_path: Path | None = None) -> str:
    """Render the user's ``template.html`` with ``data``."""

    template_path = store_dir() / TEMPLATE_FILE if template_path is None else template_path
    if not template_path.is_file():
        raise RendererError(f"reading template: {template_path} not found")

    environment = Environment(
        loader=FileSystemLoader(str(template_path.parent)),
        autoescape=select_autoescape(default=True, default_for_string=True),
        undefined=StrictUndefined,
    )
    environment.filters["money"] = fmt_money

    try:
        template = environment.get_template(template_path.name)
        return template.render(**data)
    except TemplateError as exc:
        raise RendererError(f"rendering template {template_path}: {exc}") from exc


def run_wkhtmltopdf(html_path: Path, pdf_path: Path, *, runner: Runner = subprocess.run) -> None:
    """Convert ``html_path`` into ``pdf_path``; failures become :class:`RendererError`."""

    executable = shutil.which(WKHTMLTOPDF)
    if executable is None:
        raise RendererError(INSTALL_HINT)

    cmd = [executable, *PAGE_OPTIONS]
    if sys.platform != "win32":
        cmd.append("--quiet")
    cmd.extend([str(html_path), str(pdf_path)])

    logger.debug("Running %s", " ".join(cmd))
    result = runner(cmd, check=False, capture_output=True, text=True)
    if result.returncode != 0:
        output = "\n".join(part for part in (result.stdout, result.stderr) if part).strip()
        raise RendererError(f"wkhtmltopdf failed (exit {result.returncode})\n{output}".rstrip())


def _render_to(html: str, pdf_path: Path, runner: Runner) -> None:
    handle, name = tempfile.mkstemp(prefix="simplebill-", suffix=".html")
    html_path = Path(name)
    try:
        with os.fdopen(handle, "w", encoding="utf-8") as stream:
            stream.write(html)
        run_wkhtmltopdf(html_path, pdf_path, runner=runner)
    finally:
        html_path.unlink(missing_ok=True)


def render_pdf(
    invoice: Invoice,
    config: Config,
    customer: Customer,
    products: Mapping[str, Product],
    output: Path | None = None,
    *,
    runner: Runner = subprocess.run,
) -> Path:
    """Render the final PDF, by default to ``<store>/invoices/<number>.pdf``."""

    html = render_html(build_template_data(invoice, config, customer, products))
    destination = invoice.pdf_path if output is None else output
    destination.parent.mkdir(parents=True, exist_ok=True)
    _render_to(html, destination, runner)
    return destination


def render_pdf_to_temp(
    invoice: Invoice,
    config: Config,
    customer: Customer,
    products: Mapping[str, Product],
    *,
    runner: Runner = subprocess.run,
) -> Path:
    """Render a preview PDF to a temporary file the caller must remove."""

    html = render_html(build_template_data(invoice, config, customer, products))
    handle, name = tempfile.mkstemp(prefix="simplebill-preview-", suffix=".pdf")
    os.close(handle)
    preview = Path(name)
    try:
        _render_to(html, preview, runner)
    except BaseException:
        preview.unlink(missing_ok=True)
        raise
    return preview


def open_file(path: Path, *, launcher: Callable[..., Any] = subprocess.Popen) -> None:
    """Open ``path`` with the platform's default application, without waiting."""

    if sys.platform == "darwin":
        cmd = ["open", str(path)]
    elif sys.platform == "win32":
        cmd = ["rundll32", "url.dll,FileProtocolHandler", str(path)]
    else:
        cmd = ["xdg-open", str(path)]

    try:
        launcher(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as exc:
        raise RendererError(f"opening preview: {exc}") from exc


__all__ = [
    "WKHTMLTOPDF",
    "PAGE_OPTIONS",
    "INSTALL_HINT",
    "build_template_data",
    "render_html",
    "run_wkhtmltopdf",
    "render_pdf",
    "render_pdf_to_temp",
    "open_file",
]
