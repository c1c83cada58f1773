"""
Free variable checker.

Finds the identifiers that are not bound in a program.  Run this after all
module imports have been resolved.

This is run after all transformations to simplify the analysis.  In
particular we can ignore:
  - module imports
  - block scope (let/const)
  - classes
as all of these nodes will have been replaced.  Synthetic variables
(generated by the compiler, ``loc=None``) are assumed to bind correctly; one
that reaches the program scope unbound is an internal error.

Each scope records what it declares and what it uses.  When a scope is
closed, uses it does not declare are promoted to the parent scope, because
a function can close over variables and can use them before their
declaration.  Whatever is still unresolved when the program scope closes is
free, and is reported in source order.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from freevars import ast as A
from freevars.ambient import AmbientSource, coerce_ambient
from freevars.errors import (
    Diagnostic,
    FreeVarErrorCodes,
    GeneratedVariableError,
    ScopeMismatchError,
)
from freevars.reporter import ErrorReporter
from freevars.scope import Scope
from freevars.visitor import ParseTreeVisitor, visiting

logger = logging.getLogger(__name__)

__all__ = [
    "ARGUMENTS",
    "FreeVariableChecker",
    "check_program",
    "get_variable_name",
]

#: Implicitly declared in every function scope.
ARGUMENTS = "arguments"

TYPEOF = "typeof"

T = A.ParseTreeType


def get_variable_name(
    name: Union[A.IdentifierExpression, A.BindingIdentifier, str, None],
) -> Optional[str]:
    """Gets the name of an identifier expression, binding or plain string."""
    if isinstance(name, (A.IdentifierExpression, A.BindingIdentifier)):
        return name.name
    return name


class FreeVariableChecker(ParseTreeVisitor):
    """Reports the free variables of a ``Program`` to an error reporter.

    A checker instance walks one program; use ``check_program``.
    """

    def __init__(
        self,
        reporter: ErrorReporter,
        ambient: AmbientSource = None,
    ) -> None:
        self._reporter = reporter
        self._ambient = coerce_ambient(ambient)
        # Current scope (function, catch, program)
        self._scope: Optional[Scope] = None

    # ------------------------------------------------------------------
    # Scope stack
    # ------------------------------------------------------------------

    def _push_scope(self) -> Scope:
        self._scope = Scope(self._scope)
        logger.debug("Entering scope at depth %d", self._scope.depth)
        return self._scope

    def _pop_scope(self, scope: Scope) -> None:
        """Pops *scope*, which must be the current scope, after validating it."""
        if self._scope is not scope:
            raise ScopeMismatchError()

        self._validate_scope()

        logger.debug("Leaving scope at depth %d", scope.depth)
        self._scope = scope.parent

    # ------------------------------------------------------------------
    # Scope-introducing constructs
    # ------------------------------------------------------------------

    def visit_program(self, tree: A.Program) -> None:
        scope = self._push_scope()

        # Bind against everything in the host namespace and its ancestors.
        for namespace in self._ambient.chain():
            for name in namespace.names:
                self._declare_variable(name, None)
        logger.info(
            "Checking program with %d ambient name(s)", len(scope.declarations)
        )

        self.visit_list(tree.elements)

        self._pop_scope(scope)

    def _visit_function(
        self,
        name: Optional[A.BindingIdentifier],
        parameters: A.FormalParameterList,
        body: A.ParseTree,
    ) -> None:
        """Shared by function expressions, declarations, methods and arrows.

        *name* is None for anything but a named function expression.
        """
        scope = self._push_scope()

        # Declare the function name, 'arguments' and formal parameters
        # inside the function.
        self.visit_any(name)
        self._declare_variable(ARGUMENTS, None)
        self.visit_any(parameters)

        self.visit_any(body)

        self._pop_scope(scope)

    def visit_function_declaration(self, tree: A.FunctionDeclaration) -> None:
        self._declare_variable(get_variable_name(tree.name), tree.name.loc)
        # Function declaration does not bind the name inside the function body.
        self._visit_function(None, tree.parameters, tree.body)

    def visit_function_expression(self, tree: A.FunctionExpression) -> None:
        self._visit_function(tree.name, tree.parameters, tree.body)

    def visit_arrow_function_expression(self, tree: A.ArrowFunctionExpression) -> None:
        self._visit_function(None, tree.parameters, tree.body)

    def visit_property_method_assignment(self, tree: A.PropertyMethodAssignment) -> None:
        # The method name is a property name, not a binding.
        self._visit_function(None, tree.parameters, tree.body)

    @visiting(T.GET_ACCESSOR, T.SET_ACCESSOR, T.CATCH)
    def _visit_scoped(self, tree: A.ParseTree) -> None:
        scope = self._push_scope()
        self.generic_visit(tree)
        self._pop_scope(scope)

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def visit_binding_identifier(self, tree: A.BindingIdentifier) -> None:
        self._declare_variable(tree.name, tree.loc)

    def visit_identifier_expression(self, tree: A.IdentifierExpression) -> None:
        self._scope.reference(tree.name, tree.loc)

    def visit_unary_expression(self, tree: A.UnaryExpression) -> None:
        # Allow typeof x to be a heuristic for allowing reading x later.
        if tree.operator == TYPEOF and tree.operand.type is T.IDENTIFIER_EXPRESSION:
            self._declare_variable(get_variable_name(tree.operand), tree.operand.loc)
        else:
            self.generic_visit(tree)

    def _declare_variable(self, name: Optional[str], location: Optional[A.SourceLoc]) -> None:
        self._scope.declare(name, location)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate_scope(self) -> None:
        """Once we've visited the body of a scope, check that all variables
        were declared.  Unresolved references are promoted to the parent
        scope; at the program scope they are reported as free variables.
        """
        scope = self._scope

        errors: List[Diagnostic] = []
        for name, location in scope.unresolved():
            if scope.parent is None:
                if location is None:
                    # A location-less reference comes from code the
                    # compiler generated.
                    raise GeneratedVariableError(name)
                errors.append(
                    Diagnostic(FreeVarErrorCodes.UNDEFINED_VARIABLE, location, name)
                )
            else:
                scope.parent.reference(name, location)

        if errors:
            # Issue errors in source order.
            errors.sort(key=lambda d: d.location.offset)
            logger.info("Found %d free variable(s)", len(errors))
            for diagnostic in errors:
                self._reporter.report_error(diagnostic)


def check_program(
    reporter: ErrorReporter,
    tree: A.Program,
    ambient: AmbientSource = None,
) -> None:
    """Checks *tree* for free variables and reports each one to *reporter*.

    Args:
        reporter: Receives one ``Diagnostic`` per free variable, in
            ascending source order
        tree: The fully lowered program
        ambient: Host-provided names (see ``freevars.ambient.coerce_ambient``);
            None means no names are ambient

    Raises:
        InternalError: If the tree breaks a compiler invariant
    """
    FreeVariableChecker(reporter, ambient).visit(tree)
