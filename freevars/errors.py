# freevars/errors.py
"""
Error Types and Diagnostics for the Free Variable Checker

This module provides the error handling infrastructure of the ``freevars``
pass.  Two outcome channels are kept strictly apart:

  * user-facing **diagnostics** ("x is not defined") travel as structured
    ``Diagnostic`` records to an error reporter and never abort the pass;
  * **internal errors** (a broken scope stack, a compiler-generated name
    that is free) are raised immediately as ``InternalError`` exceptions.

Architecture Overview:
─────────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│                          Error Hierarchy                                    │
├─────────────────────────────────────────────────────────────────────────────┤
│  FreeVarError (base, user-facing)                                           │
│  ├── TreeSyntaxError          - Malformed S-expression tree dump            │
│  └── UndefinedVariablesError  - Raised on request for reported free names   │
│                                                                             │
│  InternalError (NOT a FreeVarError)                                         │
│  ├── ScopeMismatchError       - Scope push/pop discipline violated          │
│  └── GeneratedVariableError   - A synthesised name is free                  │
└─────────────────────────────────────────────────────────────────────────────┘

``InternalError`` deliberately does not derive from ``FreeVarError``: code
that handles ordinary compile errors with ``except FreeVarError`` must never
swallow a compiler bug.

Error Codes:
────────────
Each error has a unique code following the pattern FV-XXXX where XXXX is a
4-digit number in ranges:
  - 1000-1999: Tree syntax errors
  - 3000-3999: Scope errors
  - 9000-9999: Internal compiler errors

Example Usage:
──────────────
    from freevars.errors import Diagnostic, FreeVarErrorCodes
    from freevars.ast import SourceLoc

    diag = Diagnostic(
        FreeVarErrorCodes.UNDEFINED_VARIABLE,
        SourceLoc(offset=42, line=3, column=9, file="app.js"),
        "zzz",
    )
    print(diag.to_gcc_format())
    # app.js:3:9: error: zzz is not defined [FV-3000]
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto, unique
from typing import (
    Any,
    Dict,
    List,
    Optional,
    Sequence,
)

from freevars.ast import SourceLoc


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR SEVERITY AND CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorSeverity(Enum):
    """Severity levels for free variable checker errors."""

    # Compiler bugs; processing of the compilation unit stops
    FATAL = "fatal"

    # Standard errors that must be fixed
    ERROR = "error"


@unique
class ErrorCategory(Enum):
    """
    Fine-grained error categories for filtering and statistics.
    """

    # Tree syntax categories
    INVALID_TREE = auto()
    UNKNOWN_KIND = auto()

    # Scope categories
    UNDEFINED_SYMBOL = auto()

    # Internal categories
    INVARIANT_BROKEN = auto()
    INTERNAL_ERROR = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES
# ═══════════════════════════════════════════════════════════════════════════════

class ErrorCode:
    """
    Structured error code.

    Error codes follow the pattern PREFIX-NNNN.  Each code carries the
    ``str.format`` template used to render its message; templates refer to
    the offending identifier as ``{name}``.
    """

    __slots__ = ("prefix", "number", "category", "default_severity", "template")

    def __init__(
        self,
        prefix: str,
        number: int,
        category: ErrorCategory,
        template: str,
        default_severity: ErrorSeverity = ErrorSeverity.ERROR,
    ) -> None:
        self.prefix = prefix
        self.number = number
        self.category = category
        self.template = template
        self.default_severity = default_severity

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"{self.prefix}-{self.number:04d}"

    def format(self, **values: Any) -> str:
        """Render the message template."""
        return self.template.format(**values)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.category.name})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class FreeVarErrorCodes:
    """Predefined error codes."""

    # ═══════════════════════════════════════════════════════════════════════════
    # TREE SYNTAX ERRORS (1000-1999)
    # ═══════════════════════════════════════════════════════════════════════════

    TREE_SYNTAX = ErrorCode(
        "FV", 1000, ErrorCategory.INVALID_TREE, "{detail}"
    )
    UNKNOWN_TREE_KIND = ErrorCode(
        "FV", 1001, ErrorCategory.UNKNOWN_KIND, "unknown tree kind '{name}'"
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # SCOPE ERRORS (3000-3999)
    # ═══════════════════════════════════════════════════════════════════════════

    UNDEFINED_VARIABLE = ErrorCode(
        "FV", 3000, ErrorCategory.UNDEFINED_SYMBOL, "{name} is not defined"
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # INTERNAL ERRORS (9000-9999)
    # ═══════════════════════════════════════════════════════════════════════════

    SCOPE_MISMATCH = ErrorCode(
        "FV", 9000, ErrorCategory.INVARIANT_BROKEN,
        "FreeVariableChecker scope mismatch",
        ErrorSeverity.FATAL,
    )
    GENERATED_VARIABLE_UNDEFINED = ErrorCode(
        "FV", 9001, ErrorCategory.INTERNAL_ERROR,
        "generated variable {name} is not defined",
        ErrorSeverity.FATAL,
    )


# Short alias
E = FreeVarErrorCodes


# ═══════════════════════════════════════════════════════════════════════════════
# DIAGNOSTICS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Diagnostic:
    """
    A structured, non-fatal finding handed to an error reporter.

    The reporter decides how to present it; ``message`` renders the error
    code's template with the offending ``name``.
    """

    code: ErrorCode
    location: SourceLoc
    name: str

    @property
    def message(self) -> str:
        return self.code.format(name=self.name)

    @property
    def severity(self) -> ErrorSeverity:
        return self.code.default_severity

    def to_gcc_format(self) -> str:
        """Format as a GCC-style error message."""
        return (
            f"{self.location}: {self.severity.value}: "
            f"{self.message} [{self.code}]"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "code": self.code.code,
            "message": self.message,
            "severity": self.severity.value,
            "name": self.name,
            "location": {
                "file": self.location.file,
                "offset": self.location.offset,
                "line": self.location.line,
                "column": self.location.column,
            },
            "category": self.code.category.name,
        }

    def __str__(self) -> str:
        return self.to_gcc_format()


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class FreeVarError(Exception):
    """
    Base exception for user-facing errors.

    Carries the error code and, when known, the source location.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        location: Optional[SourceLoc] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.location = location

    def to_gcc_format(self) -> str:
        """Format as a GCC-style error message."""
        severity = self.code.default_severity.value
        where = str(self.location) if self.location else "<unknown location>"
        return f"{where}: {severity}: {self.message} [{self.code}]"

    def __str__(self) -> str:
        return self.to_gcc_format()


class TreeSyntaxError(FreeVarError):
    """Malformed tree dump given to :mod:`freevars.sexp`."""

    def __init__(
        self,
        detail: str,
        location: Optional[SourceLoc] = None,
        code: ErrorCode = FreeVarErrorCodes.TREE_SYNTAX,
    ) -> None:
        super().__init__(detail, code=code, location=location)


class UndefinedVariablesError(FreeVarError):
    """One or more free variables were reported.

    Raised by ``CollectingReporter.raise_if_errors`` for pipelines that
    want to stop after this pass; the checker itself never raises it.
    """

    def __init__(self, diagnostics: Sequence[Diagnostic]) -> None:
        self.diagnostics: List[Diagnostic] = list(diagnostics)
        first = self.diagnostics[0]
        message = first.message
        if len(self.diagnostics) > 1:
            message += f" (and {len(self.diagnostics) - 1} more)"
        super().__init__(
            message,
            code=FreeVarErrorCodes.UNDEFINED_VARIABLE,
            location=first.location,
        )

    @property
    def names(self) -> List[str]:
        return [d.name for d in self.diagnostics]


# ───────────────────────────────────────────────────────────────────────────────
# INTERNAL ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class InternalError(Exception):
    """Compiler bug (should never happen).

    Signals that an upstream transformation or the checker itself broke an
    invariant.  Not a ``FreeVarError`` on purpose.
    """

    def __init__(self, code: ErrorCode, **values: Any) -> None:
        super().__init__(code.format(**values))
        self.code = code


class ScopeMismatchError(InternalError):
    """A scope was popped while it was not the active one."""

    def __init__(self) -> None:
        super().__init__(FreeVarErrorCodes.SCOPE_MISMATCH)


class GeneratedVariableError(InternalError):
    """A location-less (compiler-generated) reference reached the root
    scope without a declaration."""

    def __init__(self, name: str) -> None:
        super().__init__(FreeVarErrorCodes.GENERATED_VARIABLE_UNDEFINED, name=name)
        self.name = name
