"""Vineyard – town generator CLI dispatcher.

All subcommands live in ``vineyard/commands/*.py`` and expose a
``register(subparsers)`` function that adds themselves to argparse.
"""
from __future__ import annotations

import argparse
import logging
import sys

from vineyard.config import LOG_LEVEL


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="vineyard",
        description="Dogs in the Vineyard town generator",
    )
    sub = parser.add_subparsers(dest="command")

    from vineyard.commands.registry import register_all

    register_all(sub)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s: %(message)s")

    # Each command stores a ``func`` on the namespace
    rc = args.func(args)
    sys.exit(rc or 0)
