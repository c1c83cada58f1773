"""freevars - free variable checker for lowered JavaScript parse trees.

This package reports every identifier a program uses without declaring it.
It runs late in a compiler pipeline, after modules, classes and block
scoping have been lowered to plain functions and ``var`` declarations.

Submodules
----------
ast
    Immutable parse tree nodes (``ParseTree`` subclasses), the
    ``ParseTreeType`` kind enum and ``SourceLoc``.

visitor
    ``ParseTreeVisitor`` base class with ``visit_<kind>`` dispatch.

scope
    ``Scope``: one link of the lexical scope chain.

checker
    ``FreeVariableChecker`` and the ``check_program`` entry point.

ambient
    Host namespaces (``ecmascript``, ``browser``, ``node``) whose names
    count as declared.

errors
    Structured error codes (``FV-XXXX``), ``Diagnostic`` records and the
    exception hierarchy (``FreeVarError`` vs. ``InternalError``).

reporter
    ``ErrorReporter`` sinks: ``CollectingReporter``, ``StreamReporter``.

sexp
    S-expression tree dumps: ``read_tree`` / ``write_tree``.

main
    CLI entry-point with subcommands: ``check``, ``dump``, ``globals``.

Usage
-----
Command-line::

    python -m freevars check app.tree --env browser
    python -m freevars --help

Programmatic::

    from freevars import CollectingReporter, ECMASCRIPT, check_program, read_tree

    reporter = CollectingReporter()
    check_program(reporter, read_tree("(program (expr (id zzz)))"), ECMASCRIPT)
    reporter.names  # ['zzz']

"""

from __future__ import annotations

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "check_program",
    "FreeVariableChecker",
    "CollectingReporter",
    "StreamReporter",
    "ErrorReporter",
    "Diagnostic",
    "FreeVarError",
    "InternalError",
    "AmbientNamespace",
    "ECMASCRIPT",
    "BROWSER",
    "NODE",
    "read_tree",
    "write_tree",
]

from freevars.ambient import BROWSER, ECMASCRIPT, NODE, AmbientNamespace
from freevars.checker import FreeVariableChecker, check_program
from freevars.errors import Diagnostic, FreeVarError, InternalError
from freevars.reporter import CollectingReporter, ErrorReporter, StreamReporter
from freevars.sexp import read_tree, write_tree
