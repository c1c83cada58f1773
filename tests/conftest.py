# tests/conftest.py
"""
Shared fixtures and sample trees for the freevars test suite.

Sample programs are S-expression tree dumps (see ``freevars.sexp``); the
JavaScript each one stands for is given in the comment above it.
"""

from typing import List, Optional

import pytest

from freevars.ambient import AmbientSource
from freevars.ast import Program
from freevars.checker import check_program
from freevars.errors import Diagnostic
from freevars.reporter import CollectingReporter
from freevars.sexp import read_tree


# ═══════════════════════════════════════════════════════════════════════
#  Sample trees
# ═══════════════════════════════════════════════════════════════════════

# function f() { return x; } var x;
FORWARD_REFERENCE = """
(program
  (function f (params)
    (body (return (id x))))
  (var (decl x)))
"""

# function outer() { function inner() { return y; } var y; }
CLOSURE_CAPTURE = """
(program
  (function outer (params)
    (body
      (function inner (params)
        (body (return (id y))))
      (var (decl y)))))
"""

# function f() { return zzz; }
GENUINE_FREE = """
(program
  (function f (params)
    (body (return (id zzz)))))
"""

# function f() { return typeof qqq; }
TYPEOF_ONLY = """
(program
  (function f (params)
    (body (return (unary-expression typeof (id qqq))))))
"""

# function f() { typeof qqq; return qqq; }
TYPEOF_THEN_PLAIN = """
(program
  (function f (params)
    (body
      (expr (unary-expression typeof (id qqq)))
      (return (id qqq)))))
"""

# function f() {
#   if (typeof x !== 'undefined') { return x; } else { return x; }
# }
TYPEOF_BOTH_BRANCHES = """
(program
  (function f (params)
    (body
      (if-statement
        (binary-expression !== (unary-expression typeof (id x)) "undefined")
        (block (return (id x)))
        (block (return (id x)))))))
"""

# try {} catch (e) { e; }
CATCH_SCOPED = """
(program
  (try-statement (block)
    (catch e (block (expr (id e))))))
"""

# try {} catch (e) {} e;
CATCH_LEAK = """
(program
  (try-statement (block)
    (catch e (block)))
  (expr (id e)))
"""

# b; a;   (b occurs earlier in the source)
TWO_FREE = """
(program
  (expr (id b))
  (expr (id a)))
"""

# var o = { get size() { return n; }, set size(v) { store = v; } };
ACCESSORS = """
(program
  (var
    (decl o
      (object-literal
        (get-accessor size (body (return (id n))))
        (set-accessor size v
          (body (expr (binary-expression = (id store) (id v)))))))))
"""

# function f({a: b, c = d}, [e, ...rest]) { return b + c + e + rest; }
PATTERNS = """
(program
  (function f
    (params
      (object-pattern
        (object-pattern-field a b)
        (object-pattern-field c (binding-element c (id d))))
      (array-pattern e (rest-parameter rest)))
    (body
      (return
        (binary-expression +
          (binary-expression + (id b) (id c))
          (binary-expression + (id e) (id rest)))))))
"""

# Exercises most pass-through statement kinds; free names: cond, items, k2.
STATEMENTS = """
(program
  (var (decl i 0) (decl k))
  (labelled-statement outer
    (for-statement (var (decl j 0)) (binary-expression < (id j) 10)
      (postfix-expression ++ (id j))
      (block
        (if-statement (id cond) (break-statement outer) (continue-statement)))))
  (for-in-statement (var (decl k)) (id items) (empty-statement))
  (while-statement false (debugger-statement))
  (do-while-statement (block) (binary-expression > (id i) 0))
  (switch-statement (id i)
    (case-clause 1 (expr (call (id k2))))
    (default-clause (throw-statement (new-expression (id Error) "x"))))
  (try-statement (block) nil (finally (block))))
"""


# ═══════════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════════

def tree(text: str) -> Program:
    """Read a sample program."""
    result = read_tree(text)
    assert isinstance(result, Program)
    return result


def check_diagnostics(
    text_or_tree, ambient: AmbientSource = None
) -> List[Diagnostic]:
    """Run the checker and return the diagnostics in report order."""
    program = tree(text_or_tree) if isinstance(text_or_tree, str) else text_or_tree
    reporter = CollectingReporter()
    check_program(reporter, program, ambient)
    return reporter.diagnostics


def check(text_or_tree, ambient: AmbientSource = None) -> List[str]:
    """Run the checker and return the reported free names in order."""
    return [d.name for d in check_diagnostics(text_or_tree, ambient)]


def offset_of(text: str, needle: str, start: Optional[int] = None) -> int:
    """Offset of *needle* in *text*, i.e. the location ``read_tree`` gives
    the node spelled by *needle*."""
    return text.index(needle, start or 0)


# ═══════════════════════════════════════════════════════════════════════
#  Fixtures
# ═══════════════════════════════════════════════════════════════════════

@pytest.fixture
def reporter() -> CollectingReporter:
    return CollectingReporter()


@pytest.fixture
def tree_file(tmp_path):
    """Factory writing a tree dump to a temporary file."""

    def _write(text: str, name: str = "program.tree"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
