"""
Error reporters: sinks for free variable diagnostics.

The checker hands each ``Diagnostic`` to ``ErrorReporter.report_error`` in
ascending source order and never inspects the reporter afterwards.  What
happens next (collecting, printing, aborting the pipeline) is the
reporter's business.

Reporters provided:
1. ``CollectingReporter`` - keeps diagnostics for later inspection
2. ``StreamReporter`` - writes each diagnostic to a text stream as it arrives
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import List, TextIO

from freevars.errors import Diagnostic, UndefinedVariablesError

logger = logging.getLogger(__name__)

__all__ = [
    "ErrorReporter",
    "CollectingReporter",
    "StreamReporter",
]


class ErrorReporter(ABC):
    """Receives diagnostics from the checker."""

    def __init__(self) -> None:
        self._count = 0

    def report_error(self, diagnostic: Diagnostic) -> None:
        """Report one free variable."""
        self._count += 1
        logger.debug("Reporting %s", diagnostic.to_gcc_format())
        self._report(diagnostic)

    @abstractmethod
    def _report(self, diagnostic: Diagnostic) -> None:
        ...

    def had_error(self) -> bool:
        return self._count > 0

    def error_count(self) -> int:
        return self._count


class CollectingReporter(ErrorReporter):
    """Collects diagnostics in the order they were reported."""

    def __init__(self) -> None:
        super().__init__()
        self._diagnostics: List[Diagnostic] = []

    def _report(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Get all collected diagnostics."""
        return list(self._diagnostics)

    @property
    def names(self) -> List[str]:
        """Names of the reported free variables, in report order."""
        return [d.name for d in self._diagnostics]

    def format_diagnostics(self, *, format: str = "gcc") -> str:
        """Render every diagnostic, one per line."""
        if format == "json":
            return json.dumps([d.to_dict() for d in self._diagnostics], indent=2)
        if format == "gcc":
            return "\n".join(d.to_gcc_format() for d in self._diagnostics)
        raise ValueError(f"unknown diagnostic format: {format!r}")

    def raise_if_errors(self) -> None:
        """Raise ``UndefinedVariablesError`` if anything was reported."""
        if self._diagnostics:
            raise UndefinedVariablesError(self._diagnostics)

    def clear(self) -> None:
        """Clear all collected diagnostics."""
        self._diagnostics.clear()
        self._count = 0


class StreamReporter(ErrorReporter):
    """Writes diagnostics to *stream* immediately.

    ``format`` is ``"gcc"`` (``file:line:col: error: msg [FV-3000]``) or
    ``"json"`` (one JSON object per line).
    """

    FORMATS = ("gcc", "json")

    def __init__(self, stream: TextIO, format: str = "gcc") -> None:
        super().__init__()
        if format not in self.FORMATS:
            raise ValueError(f"unknown diagnostic format: {format!r}")
        self._stream = stream
        self._format = format

    def _report(self, diagnostic: Diagnostic) -> None:
        if self._format == "json":
            self._stream.write(json.dumps(diagnostic.to_dict()) + "\n")
        else:
            self._stream.write(diagnostic.to_gcc_format() + "\n")
