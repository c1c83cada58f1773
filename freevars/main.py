#!/usr/bin/env python3
"""freevars/main.py - CLI entry-point for the free variable checker.

Usage examples
--------------
    # Check one or more tree dumps against the ECMAScript globals
    freevars check app.tree lib.tree

    # Check against the browser globals plus a few extra names
    freevars check app.tree --env browser -g jQuery -g $

    # Extra globals from a file (JSON list/object, or one name per line)
    freevars check app.tree --globals-file .globals.json

    # Machine-readable output
    freevars check app.tree -f json -o report.jsonl

    # Read a tree dump and print it back in canonical form
    freevars dump app.tree --format sexp

    # List the names an environment provides
    freevars globals --env node

Exit codes
----------
    0   Success (no free variables).
    1   Free variables were reported, or a tree dump is malformed.
    2   Infrastructure failure (missing file, unknown environment, etc.).
    3   Internal compiler error (the tree breaks a compiler invariant).

The default environment is taken from the ``FREEVARS_ENV`` environment
variable when set.  The module doubles as ``python -m freevars`` via the
companion ``freevars/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import textwrap
from pathlib import Path
from typing import List, Optional, Sequence, Set, TextIO

from freevars import __version__
from freevars.ambient import AmbientNamespace, get_environment, load_globals_file
from freevars.ast import Program
from freevars.checker import check_program
from freevars.errors import InternalError, TreeSyntaxError
from freevars.reporter import StreamReporter
from freevars.sexp import read_tree_file, write_tree

_log = logging.getLogger("freevars")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2
EXIT_INTERNAL: int = 3

ENV_VARIABLE = "FREEVARS_ENV"
DEFAULT_ENV = "ecmascript"


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``freevars`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("freevars")
    root.setLevel(level)
    # main() may run more than once per process (tests, embedding)
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)


def _resolve_path(raw: str, label: str = "file") -> Path:
    """Resolve *raw* to a ``Path``, raising on missing files."""
    p = Path(raw).expanduser()
    if not p.exists():
        _log.error("%s not found: %s", label, p)
        raise SystemExit(EXIT_INFRA)
    return p


def _open_output(dest: Optional[str]) -> TextIO:
    """Return a writable text stream.

    *dest* ``None`` or ``"-"`` → ``sys.stdout``; otherwise open the path
    for writing (creating parent directories as needed).
    """
    if dest is None or dest == "-":
        return sys.stdout
    p = Path(dest).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)
    return open(p, "w", encoding="utf-8")


def _build_ambient(args: argparse.Namespace) -> AmbientNamespace:
    """The environment named by ``--env`` plus any ``-g``/``--globals-file``."""
    try:
        ambient = get_environment(args.env)
    except KeyError as exc:
        _log.error("%s", exc.args[0])
        raise SystemExit(EXIT_INFRA)

    extra: Set[str] = set(args.globals or ())
    for raw in args.globals_files or ():
        path = _resolve_path(raw, "globals file")
        try:
            extra |= load_globals_file(path)
        except ValueError as exc:
            _log.error("Cannot read globals file %s: %s", path, exc)
            raise SystemExit(EXIT_INFRA)

    if extra:
        _log.info("Adding %d command-line global(s)", len(extra))
        ambient = ambient.extend("command line", extra)
    return ambient


# ===========================================================================
# Sub-command implementations
# ===========================================================================

# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

def cmd_check(args: argparse.Namespace) -> int:
    """Report the free variables of each tree dump.

    Workflow:
        1. Build the ambient namespace from ``--env`` and extra globals.
        2. Read every tree dump; malformed dumps are reported and skipped.
        3. Run the checker on each program, streaming diagnostics.
        4. Return an exit code reflecting the worst outcome.
    """
    ambient = _build_ambient(args)
    paths = [_resolve_path(raw, "tree file") for raw in args.trees]

    out = _open_output(args.output)
    reporter = StreamReporter(out, "json" if args.format == "json" else "gcc")
    syntax_errors = 0
    try:
        for path in paths:
            _log.info("Checking %s", path)
            try:
                tree = read_tree_file(path)
                if not isinstance(tree, Program):
                    raise TreeSyntaxError(
                        f"expected a program, found ({tree.type.tag} ...)",
                        tree.loc,
                    )
            except TreeSyntaxError as exc:
                sys.stderr.write(exc.to_gcc_format() + "\n")
                syntax_errors += 1
                continue

            try:
                check_program(reporter, tree, ambient)
            except InternalError as exc:
                _log.error("Internal compiler error in %s: %s", path, exc)
                return EXIT_INTERNAL

        if args.format == "summary":
            out.write(
                f"\n--- {reporter.error_count()} free variable(s) "
                f"in {len(paths)} file(s) ---\n"
            )
    finally:
        if out is not sys.stdout:
            out.close()

    if reporter.had_error() or syntax_errors:
        return EXIT_ERROR
    return EXIT_OK


# ---------------------------------------------------------------------------
# dump (read a tree and print it back)
# ---------------------------------------------------------------------------

def cmd_dump(args: argparse.Namespace) -> int:
    """Read a tree dump and pretty-print it.

    Useful for debugging the reader without running the checker.
    """
    path = _resolve_path(args.tree, "tree file")
    try:
        tree = read_tree_file(path)
    except TreeSyntaxError as exc:
        sys.stderr.write(exc.to_gcc_format() + "\n")
        return EXIT_ERROR

    out = _open_output(args.output)
    try:
        if args.format == "sexp":
            out.write(write_tree(tree) + "\n")
        elif args.format == "json":
            out.write(json.dumps(tree.to_dict(), indent=2) + "\n")
        else:
            out.write(repr(tree) + "\n")
    finally:
        if out is not sys.stdout:
            out.close()
    return EXIT_OK


# ---------------------------------------------------------------------------
# globals (list an environment)
# ---------------------------------------------------------------------------

def cmd_globals(args: argparse.Namespace) -> int:
    """List every name an environment makes ambient."""
    ambient = _build_ambient(args)

    names: List[str] = sorted(ambient.all_names())
    out = _open_output(args.output)
    try:
        for name in names:
            out.write(f"{name}\n")
        path = " -> ".join(namespace.name for namespace in ambient.chain())
        _log.info("%d name(s) in %s", len(names), path)
    finally:
        if out is not sys.stdout:
            out.close()
    return EXIT_OK


# ===========================================================================
# Argument parser construction
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the full CLI argument parser with subcommands."""

    # --- Top-level parser --------------------------------------------------
    parser = argparse.ArgumentParser(
        prog="freevars",
        description=(
            "freevars - report the free variables of lowered JavaScript\n"
            "parse trees, read from S-expression tree dumps."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              freevars check app.tree --env browser -g jQuery
              freevars dump  app.tree --format json
              freevars globals --env node
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    # Shared argument groups (reusable) ------------------------------------

    def _add_output_arg(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "-o", "--output",
            default=None,
            metavar="FILE",
            help='Output file ("-" or omit for stdout).',
        )

    def _add_ambient_args(p: argparse.ArgumentParser) -> None:
        g = p.add_argument_group("ambient names")
        g.add_argument(
            "-e", "--env",
            default=os.environ.get(ENV_VARIABLE, DEFAULT_ENV),
            metavar="ENV",
            help=(
                "Host environment: none, ecmascript, browser or node "
                f"(default: ${ENV_VARIABLE}, else {DEFAULT_ENV})."
            ),
        )
        g.add_argument(
            "-g", "--global",
            dest="globals",
            action="append",
            metavar="NAME",
            help="Treat NAME as declared (repeatable).",
        )
        g.add_argument(
            "--globals-file",
            dest="globals_files",
            action="append",
            metavar="FILE",
            help="Read extra names from FILE (repeatable).",
        )

    # --- check -------------------------------------------------------------
    p_check = subparsers.add_parser(
        "check",
        help="Report free variables in tree dumps.",
        description="Run the free variable checker on each tree dump.",
    )
    p_check.add_argument(
        "trees",
        nargs="+",
        metavar="TREE",
        help="S-expression tree dump(s) of a program.",
    )
    _add_ambient_args(p_check)
    p_check.add_argument(
        "-f", "--format",
        choices=["gcc", "json", "summary"],
        default="gcc",
        help="Diagnostic output format (default: gcc).",
    )
    _add_output_arg(p_check)
    p_check.set_defaults(func=cmd_check)

    # --- dump --------------------------------------------------------------
    p_dump = subparsers.add_parser(
        "dump",
        help="Read a tree dump and print it back.",
        description="Parse a tree dump and pretty-print the tree.",
    )
    p_dump.add_argument(
        "tree",
        metavar="TREE",
        help="S-expression tree dump.",
    )
    p_dump.add_argument(
        "-f", "--format",
        choices=["sexp", "json", "repr"],
        default="sexp",
        help="Tree output format (default: sexp).",
    )
    _add_output_arg(p_dump)
    p_dump.set_defaults(func=cmd_dump)

    # --- globals -----------------------------------------------------------
    p_globals = subparsers.add_parser(
        "globals",
        help="List the names an environment provides.",
        description="Print every ambient name of an environment, sorted.",
    )
    _add_ambient_args(p_globals)
    _add_output_arg(p_globals)
    p_globals.set_defaults(func=cmd_globals)

    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the freevars CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Configure logging based on verbosity level.
    _configure_logging(args.verbose)

    # No subcommand given → print help.
    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130  # Standard UNIX convention for SIGINT
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA
    except OSError as exc:
        _log.error("%s", exc)
        return EXIT_INFRA


# ---------------------------------------------------------------------------
# Module execution support
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    raise SystemExit(main())
