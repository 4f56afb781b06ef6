"""Utility helpers shared across simplebill modules."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Callable

AMT2 = Decimal("0.01")
HUNDRED = Decimal("100")


def parse_decimal(
    value: str | int | float | Decimal | None, *, default: Decimal | None = Decimal("0")
) -> Decimal | None:
    """Convert the provided value to :class:`~decimal.Decimal`.

    Floats are converted through their ``str`` form so that a YAML ``19.99``
    becomes ``Decimal("19.99")`` instead of its binary approximation. Empty or
    invalid values return ``default``.
    """

    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))

    text = str(value).strip()
    if not text:
        return default

    try:
        result = Decimal(text)
    except (InvalidOperation, ValueError):
        return default
    if not result.is_finite():
        return default
    return result


def q2(value: Decimal) -> Decimal:
    return value.quantize(AMT2, rounding=ROUND_HALF_UP)


def fmt_money(value: Decimal | float | int) -> str:
    """Two decimal places, e.g. ``199.9`` → ``'199.90'``."""

    return f"{q2(parse_decimal(value)):.2f}"


def to_yaml_number(value: Decimal) -> int | float:
    """Plain YAML scalar for a decimal amount."""

    if value == value.to_integral_value():
        return int(value)
    return float(value)


def confirm(question: str, *, reader: Callable[[str], str] | None = None) -> bool:
    """Ask ``question`` on stdin; only ``y``/``yes`` count as confirmation."""

    if reader is None:
        reader = input
    try:
        response = reader(question)
    except EOFError:
        return False
    return response.strip().lower() in {"y", "yes"}


__all__ = ["AMT2", "HUNDRED", "parse_decimal", "q2", "fmt_money", "to_yaml_number", "confirm"]
