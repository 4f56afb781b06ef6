"""Command line invoicing backed by YAML files in ``~/.simplebill``."""

__version__ = "0.1.2"

__all__ = [
    "__version__",
    "cli",
    "commands",
    "config",
    "errors",
    "invoices",
    "logging",
    "pdf",
    "pricing",
    "reporting",
    "schema",
    "update_check",
    "utils",
]
