"""
Scope table for the free variable checker.

A ``Scope`` is one link of the lexical scope chain: the program root, a
function body, an accessor body or a catch clause.  It only stores names;
deciding what is free is the checker's job (:mod:`freevars.checker`).

Both tables keep the *first* location recorded for a name.  Later
declarations or uses of the same name in the same scope are ignored, which
makes the reported position of a free variable its first use.
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

from freevars.ast import SourceLoc

__all__ = ["Scope"]


class Scope:
    """A link in the scope chain.

    Attributes:
        parent: The enclosing scope, or None for the program scope
        references: name -> location of the first use in this scope
        declarations: name -> location of the first declaration

    A location of None marks a compiler-generated binding or use that has
    no position in the user's source.
    """

    __slots__ = ("parent", "references", "declarations")

    def __init__(self, parent: Optional[Scope] = None) -> None:
        self.parent = parent
        self.references: Dict[str, Optional[SourceLoc]] = {}
        self.declarations: Dict[str, Optional[SourceLoc]] = {}

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def depth(self) -> int:
        """Number of enclosing scopes (0 for the program scope)."""
        depth = 0
        scope = self.parent
        while scope is not None:
            depth += 1
            scope = scope.parent
        return depth

    def declare(self, name: Optional[str], location: Optional[SourceLoc]) -> bool:
        """Record a declaration of *name*.

        Anonymous bindings (empty or missing name) are ignored.  Returns
        True if this is the first declaration of *name* in this scope.
        """
        if not name or name in self.declarations:
            return False
        self.declarations[name] = location
        return True

    def reference(self, name: str, location: Optional[SourceLoc]) -> bool:
        """Record a use of *name*; returns True for the first use."""
        if name in self.references:
            return False
        self.references[name] = location
        return True

    def is_declared(self, name: str) -> bool:
        return name in self.declarations

    def unresolved(self) -> Iterator[Tuple[str, Optional[SourceLoc]]]:
        """Yield ``(name, location)`` for every use not declared here."""
        for name, location in self.references.items():
            if name not in self.declarations:
                yield name, location

    def __repr__(self) -> str:
        return (
            f"Scope(depth={self.depth}, declarations={len(self.declarations)}, "
            f"references={len(self.references)})"
        )
