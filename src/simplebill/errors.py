"""Exception hierarchy shared by the simplebill commands."""

from __future__ import annotations


class SimplebillError(Exception):
    """Base class for errors reported to the user as ``Error: <message>``."""


class UserInputError(SimplebillError):
    """Invalid command line arguments or unknown customer/product keys."""


class NotInitializedError(SimplebillError):
    """The store directory or its ``config.yml`` does not exist yet."""


class ConfigFileError(SimplebillError):
    """A YAML file in the store is unreadable or does not match its schema."""


class InvoiceNotFoundError(SimplebillError):
    """No invoice record exists for the requested number."""


class RendererError(SimplebillError):
    """Rendering the HTML template or running ``wkhtmltopdf`` failed."""


__all__ = [
    "SimplebillError",
    "UserInputError",
    "NotInitializedError",
    "ConfigFileError",
    "InvoiceNotFoundError",
    "RendererError",
]
