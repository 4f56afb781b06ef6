"""Command line entry point: ``simplebill <command> [args]``."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Sequence

from . import __version__
from .commands import delete, init, invoice, listing
from .errors import SimplebillError
from .logging import configure_logging
from .update_check import check_for_update

CommandCallable = Callable[[list[str] | None], int | None]


@dataclass(frozen=True)
class CommandSpec:
    """Metadata describing a CLI command exposed by :mod:`simplebill.cli`."""

    name: str
    usage: str
    summary: str
    handler: CommandCallable
    module: str

    def run(self, argv: list[str] | None) -> int:
        """Execute the command and normalise the resulting exit code."""

        try:
            result = self.handler(argv)
        except SimplebillError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        except SystemExit as exc:  # argparse exits on -h and on usage errors
            code = exc.code
            if code is None:
                return 0
            if isinstance(code, int):
                return code
            print(str(code), file=sys.stderr)
            return 1
        if result is None:
            return 0
        return int(result)


_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        name="init",
        usage="init",
        summary="Initialize the ~/.simplebill/ directory",
        handler=init.main,
        module="simplebill.commands.init",
    ),
    CommandSpec(
        name="invoice",
        usage="invoice <customer> <product:qty>",
        summary="Generate an invoice",
        handler=invoice.main,
        module="simplebill.commands.invoice",
    ),
    CommandSpec(
        name="list",
        usage="list [type]",
        summary="List data (default: invoices)",
        handler=listing.main,
        module="simplebill.commands.listing",
    ),
    CommandSpec(
        name="delete",
        usage="delete <invoice-number>",
        summary="Delete an invoice",
        handler=delete.main,
        module="simplebill.commands.delete",
    ),
)

_COMMAND_INDEX: Mapping[str, CommandSpec] = {spec.name: spec for spec in _COMMANDS}


def available_commands() -> Iterable[CommandSpec]:
    """Return the commands registered in the CLI."""

    return _COMMANDS


def _epilog() -> str:
    lines = ["Commands:"]
    for spec in _COMMANDS:
        lines.append(f"  {spec.usage:<34}{spec.summary}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    """Return the top-level parser; command arguments are parsed by each command."""

    parser = argparse.ArgumentParser(
        prog="simplebill",
        usage="simplebill <command>",
        description="Command line invoicing from YAML files.",
        epilog=_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"simplebill {__version__}",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug diagnostics on stderr.",
    )
    parser.add_argument("command", help=argparse.SUPPRESS)
    # Everything after the command name belongs to the command's own parser.
    parser.add_argument("args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)

    return parser


def run(command: str, argv: Sequence[str] | None = None) -> int:
    """Execute *command* forwarding ``argv`` to the underlying handler."""

    spec = _COMMAND_INDEX.get(command)
    if spec is None:
        raise ValueError(f"Unknown command: {command}")
    return spec.run(list(argv or []))


def main(argv: Sequence[str] | None = None) -> int:
    """Execute the command line interface."""

    parser = build_parser()
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv:
        parser.print_help()
        return 1

    namespace = parser.parse_args(argv)
    configure_logging(namespace.verbose)

    if namespace.command not in _COMMAND_INDEX:
        print(f"Unknown command: {namespace.command}", file=sys.stderr)
        parser.print_help()
        return 1

    forwarded = list(namespace.args)
    if forwarded and forwarded[0] in {"-h", "--help"}:
        return run(namespace.command, ["--help"])

    check_for_update(__version__)
    return run(namespace.command, forwarded)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
