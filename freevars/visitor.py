#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
freevars/visitor.py
===================

Visitor pattern infrastructure for parse tree traversal.

Provides:
- ``ParseTreeVisitor`` - depth-first traversal base; ``visit_<kind>``
  methods are optional and ``generic_visit`` recurses into children
- ``visiting`` - decorator registering one method for several kinds
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from freevars import ast as A

__all__ = [
    "ParseTreeVisitor",
    "visiting",
]


class ParseTreeVisitor:
    """Depth-first parse tree visitor.

    ``visit`` dispatches on ``tree.type`` to a ``visit_<kind>`` method
    (``visit_function_declaration``, ``visit_catch``, ...).  Kinds without
    a method fall back to ``generic_visit``, which visits every child, so a
    new pass-through construct needs no visitor changes.

    Subclasses overriding a ``visit_<kind>`` method can call
    ``self.generic_visit(tree)`` to continue into the children.
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Expose methods decorated with @visiting under their kind names.
        for attr in list(vars(cls).values()):
            for kind in getattr(attr, "_visiting_types", ()):
                if kind.visit_method not in vars(cls):
                    setattr(cls, kind.visit_method, attr)

    def visit(self, tree: A.ParseTree) -> Any:
        """Dispatch to the appropriate visit method."""
        return tree.accept(self)

    def visit_any(self, tree: Optional[A.ParseTree]) -> None:
        """Visit *tree*, tolerating an absent optional child."""
        if tree is not None:
            tree.accept(self)

    def visit_list(self, trees: Iterable[Optional[A.ParseTree]]) -> None:
        for tree in trees:
            self.visit_any(tree)

    def generic_visit(self, tree: A.ParseTree) -> Any:
        """Visit all children.

        A run of same-kind trees nested through their first child, such as
        the left-associative chain ``((a + b) + c) + d``, is walked with a
        loop, so long generated concatenations do not exhaust the stack.
        Children are still visited in source order.
        """
        spine = [tree]
        if getattr(self, tree.type.visit_method, None) is None:
            while True:
                first = next(spine[-1].children(), None)
                if first is None or first.type is not tree.type:
                    break
                spine.append(first)

        for child in spine.pop().children():
            self.visit(child)
        while spine:
            # The first child is the spine member already visited.
            rest = spine.pop().children()
            next(rest)
            for child in rest:
                self.visit(child)
        return None


# ---------------------------------------------------------------------------
# Decorator for method-based visitor dispatch
# ---------------------------------------------------------------------------

def visiting(*kinds: A.ParseTreeType) -> Callable:
    """Decorator to register a method as handling specific tree kinds.

    Usage:
        class MyVisitor(ParseTreeVisitor):
            @visiting(A.ParseTreeType.GET_ACCESSOR, A.ParseTreeType.SET_ACCESSOR)
            def visit_accessor(self, tree):
                ...
    """
    def decorator(method: Callable) -> Callable:
        method._visiting_types = kinds
        return method
    return decorator
