"""Argument parsing functionality for cargo-makedocs."""

import argparse
import sys

from constants import Constants


def build_parser():
    """Build the `cargo makedocs` argument parser."""
    parser = argparse.ArgumentParser(
        prog="cargo makedocs",
        description=(
            "`cargo doc` wrapper that only builds documentation for the current "
            "crate's direct dependencies, by scanning Cargo.toml and Cargo.lock. "
            "You can also explicitly include and exclude crates from being "
            "documented using the -e and -i options."
        ),
        add_help=True,
    )

    parser.add_argument("-e", "--exclude",
                        dest="EXCLUDE",
                        help="do not build documentation for a crate",
                        action="append", nargs="+", type=str,
                        default=[])
    parser.add_argument("-i", "--include",
                        dest="INCLUDE",
                        help="build documentation for a crate",
                        action="append", nargs="+", type=str,
                        default=[])
    parser.add_argument("-o", "--open",
                        dest="OPEN",
                        help="opens the built documentation",
                        action="store_true")
    parser.add_argument("-r", "--root",
                        dest="ROOT",
                        help="Build the documentation for the root crate",
                        action="store_true")
    parser.add_argument("-d", "--document-private-items",
                        dest="PRIVATE_ITEMS",
                        help="passes --document-private-items when building the docs for the root crate",
                        action="store_true")
    parser.add_argument("-n", "--no-buildtime",
                        dest="NO_BUILDTIME",
                        help="Ignore buildtime dependencies",
                        action="store_true")

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to a YAML file with exclude/include/buildtime defaults",
                        action="store",
                        type=str)
    parser.add_argument("--dry-run",
                        dest="DRY_RUN",
                        help="Print the cargo commands instead of running them",
                        action="store_true")
    parser.add_argument("--error-on-warnings",
                        dest="ERROR_ON_WARNINGS",
                        help="Exit with a non-zero status code if a dependency was not found in Cargo.lock.",
                        action="store_true")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Cargo runs external subcommands as `cargo-makedocs makedocs ...`, so a
    leading `makedocs` token is dropped.
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    if argv and argv[0] == Constants.SUBCOMMAND_NAME:
        argv = argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.PRIVATE_ITEMS and not args.ROOT:
        parser.error("--document-private-items requires --root")
    return args
