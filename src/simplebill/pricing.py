"""Parse ``product:qty[:discount][:@price]`` tokens and price the lines."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from .config import Product
from .errors import UserInputError
from .invoices import Item, invoice_total
from .utils import HUNDRED, parse_decimal

TOKEN_FORMAT = "product:quantity[:discount][:@price]"

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class LineRequest:
    """One parsed command line token, before catalog prices are applied."""

    token: str
    product: str
    quantity: int
    discount: int = 0
    override_price: Decimal | None = None


def _parse_override(token: str, text: str) -> Decimal:
    if not text.startswith("@"):
        raise UserInputError(f"invalid price '{text}' in '{token}', expected @price (e.g. @15.00)")
    price = parse_decimal(text[1:], default=None)
    if price is None:
        raise UserInputError(f"invalid price '{text[1:]}' in '{token}'")
    if price < 0:
        raise UserInputError(f"price must not be negative in '{token}'")
    return price


def parse_token(token: str) -> LineRequest:
    """Parse a single item token, raising :class:`UserInputError` on any problem."""

    parts = token.split(":")
    if len(parts) < 2 or len(parts) > 4 or not parts[0]:
        raise UserInputError(f"invalid format '{token}', expected {TOKEN_FORMAT}")

    product, quantity_text, *rest = parts
    if not _DIGITS.fullmatch(quantity_text):
        raise UserInputError(
            f"invalid quantity '{quantity_text}' for product '{product}' in '{token}'"
        )
    quantity = int(quantity_text)
    if quantity < 1:
        raise UserInputError(f"quantity must be at least 1 in '{token}'")

    discount = 0
    override: Decimal | None = None
    if rest and not rest[0].startswith("@"):
        discount_text = rest.pop(0)
        if not _DIGITS.fullmatch(discount_text):
            raise UserInputError(
                f"invalid discount '{discount_text}' in '{token}', expected 0-100"
            )
        discount = int(discount_text)
        if not 0 <= discount <= 100:
            raise UserInputError(f"discount {discount} out of range in '{token}', expected 0-100")
    if rest:
        if len(rest) > 1:
            raise UserInputError(f"invalid format '{token}', expected {TOKEN_FORMAT}")
        override = _parse_override(token, rest[0])

    return LineRequest(
        token=token,
        product=product,
        quantity=quantity,
        discount=discount,
        override_price=override,
    )


def price_line(request: LineRequest, product: Product) -> Item:
    """Build the invoice item for ``request`` using the catalog ``product``."""

    base = product.price
    if request.override_price is not None and request.override_price > 0:
        base = request.override_price

    unit_price = base * (HUNDRED - request.discount) / HUNDRED
    return Item(
        product=request.product,
        quantity=request.quantity,
        unit_price=unit_price,
        total=unit_price * request.quantity,
        discount=request.discount,
    )


def price_items(tokens: Iterable[str], products: Mapping[str, Product]) -> tuple[list[Item], Decimal]:
    """Return the priced items and the invoice total for ``tokens``.

    Every token is validated before anything is returned, so a single bad
    token aborts the whole invoice.
    """

    items: list[Item] = []
    for token in tokens:
        request = parse_token(token)
        product = products.get(request.product)
        if product is None:
            raise UserInputError(f"product '{request.product}' not found in products.yml")
        items.append(price_line(request, product))

    if not items:
        raise UserInputError(f"at least one {TOKEN_FORMAT} item is required")

    return items, invoice_total(items)


__all__ = ["TOKEN_FORMAT", "LineRequest", "parse_token", "price_line", "price_items"]
