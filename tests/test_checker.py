# tests/test_checker.py
"""
Tests for the free variable checker: scoping rules, promotion, ordering
and the internal-error channel.
"""

from collections import ChainMap

import pytest

from freevars.ambient import ECMASCRIPT, OBJECT_PROTOTYPE
from freevars.ast import (
    BinaryExpression,
    BindingIdentifier,
    ExpressionStatement,
    FormalParameterList,
    FunctionBody,
    FunctionDeclaration,
    IdentifierExpression,
    Literal,
    Program,
    ReturnStatement,
    SourceLoc,
    VariableDeclaration,
    VariableStatement,
)
from freevars.checker import ARGUMENTS, FreeVariableChecker, check_program, get_variable_name
from freevars.errors import (
    FreeVarError,
    FreeVarErrorCodes,
    GeneratedVariableError,
    InternalError,
    ScopeMismatchError,
)
from freevars.reporter import CollectingReporter
from tests.conftest import (
    ACCESSORS,
    CATCH_LEAK,
    CATCH_SCOPED,
    CLOSURE_CAPTURE,
    FORWARD_REFERENCE,
    GENUINE_FREE,
    PATTERNS,
    STATEMENTS,
    TWO_FREE,
    TYPEOF_BOTH_BRANCHES,
    TYPEOF_ONLY,
    TYPEOF_THEN_PLAIN,
    check,
    check_diagnostics,
    offset_of,
    tree,
)


class TestResolution:

    def test_empty_program(self):
        assert check("(program)") == []

    def test_forward_reference(self):
        assert check(FORWARD_REFERENCE) == []

    def test_closure_capture(self):
        assert check(CLOSURE_CAPTURE) == []

    def test_genuine_free_variable(self):
        diagnostics = check_diagnostics(GENUINE_FREE)
        assert len(diagnostics) == 1
        diag = diagnostics[0]
        assert diag.name == "zzz"
        assert diag.message == "zzz is not defined"
        assert diag.code == FreeVarErrorCodes.UNDEFINED_VARIABLE
        assert diag.location.offset == offset_of(GENUINE_FREE, "(id zzz)")

    def test_parameter_is_declared(self):
        src = "(program (function f (params x) (body (return (id x)))))"
        assert check(src) == []

    def test_parameter_not_visible_outside(self):
        src = """
        (program
          (function f (params x) (body))
          (expr (id x)))
        """
        assert check(src) == ["x"]

    def test_inner_declaration_not_visible_outside(self):
        src = """
        (program
          (function f (params) (body (var (decl local))))
          (expr (id local)))
        """
        assert check(src) == ["local"]

    def test_destructuring_patterns(self):
        assert check(PATTERNS) == ["d"]

    def test_member_names_are_not_references(self):
        src = """
        (program
          (var (decl o (object-literal (property-name-assignment key 1))))
          (expr (member-expression (id o) missing))
          (expr (member-lookup-expression (id o) (id idx))))
        """
        assert check(src) == ["idx"]

    def test_labels_are_not_references(self):
        src = """
        (program
          (labelled-statement loop
            (while-statement true (break-statement loop))))
        """
        assert check(src) == []

    def test_pass_through_statements(self):
        assert check(STATEMENTS, ECMASCRIPT) == ["cond", "items", "k2"]

    def test_this_expression(self):
        assert check("(program (expr (this-expression)))") == []


class TestFunctions:

    def test_declaration_name_bound_in_enclosing_scope(self):
        src = """
        (program
          (function f (params) (body))
          (expr (call (id f))))
        """
        assert check(src) == []

    def test_declaration_name_usable_inside_through_promotion(self):
        src = "(program (function f (params) (body (return (call (id f))))))"
        assert check(src) == []

    def test_declaration_name_not_declared_in_own_scope(self):
        # The outer declaration happens before the function scope opens;
        # inside, f is only a promoted reference.
        seen = []

        class Spy(FreeVariableChecker):
            def visit_function_body(self, body):
                seen.append(self._scope.is_declared("f"))
                self.generic_visit(body)

        Spy(CollectingReporter()).visit(
            tree("(program (function f (params) (body (return (id f)))))")
        )
        assert seen == [False]

    def test_function_expression_name_bound_inside_only(self):
        src = """
        (program
          (expr (function-expression g (params) (body (return (id g)))))
          (expr (id g)))
        """
        assert check(src) == ["g"]

    def test_anonymous_function_expression(self):
        src = "(program (expr (function-expression nil (params x) (body (return (id x))))))"
        assert check(src) == []

    def test_arguments_declared_in_functions(self):
        src = "(program (function f (params) (body (return (id arguments)))))"
        assert check(src) == []

    def test_arguments_declared_in_arrow_functions(self):
        src = """
        (program
          (expr (arrow-function-expression (params) (id arguments))))
        """
        assert check(src) == []

    def test_arguments_free_at_top_level(self):
        assert check("(program (expr (id arguments)))") == [ARGUMENTS]

    def test_arrow_parameters(self):
        src = """
        (program
          (expr (arrow-function-expression (params a)
                  (binary-expression + (id a) (id b)))))
        """
        assert check(src) == ["b"]

    def test_method_name_is_not_bound(self):
        src = """
        (program
          (expr (object-literal
            (property-method-assignment m (params)
              (body (return (id m)))))))
        """
        assert check(src) == ["m"]

    def test_accessors_open_scopes(self):
        assert check(ACCESSORS) == ["n", "store"]

    def test_setter_parameter_not_visible_outside(self):
        src = """
        (program
          (expr (object-literal (set-accessor p v (body))))
          (expr (id v)))
        """
        assert check(src) == ["v"]


class TestTypeofHeuristic:

    def test_typeof_suppresses(self):
        assert check(TYPEOF_ONLY) == []

    def test_typeof_declares_for_the_rest_of_the_scope(self):
        assert check(TYPEOF_THEN_PLAIN) == []

    def test_typeof_covers_unguarded_branch(self):
        assert check(TYPEOF_BOTH_BRANCHES) == []

    def test_typeof_does_not_leak_to_enclosing_scope(self):
        src = """
        (program
          (function f (params)
            (body (expr (unary-expression typeof (id qqq)))))
          (expr (id qqq)))
        """
        assert check(src) == ["qqq"]

    def test_typeof_of_non_identifier_visits_operand(self):
        src = """
        (program
          (expr (unary-expression typeof (member-expression (id obj) prop))))
        """
        assert check(src) == ["obj"]

    def test_other_unary_operators_reference(self):
        assert check("(program (expr (unary-expression ! (id flag))))") == ["flag"]


class TestCatch:

    def test_catch_binding_is_scoped(self):
        assert check(CATCH_SCOPED) == []

    def test_catch_binding_not_visible_after_catch(self):
        diagnostics = check_diagnostics(CATCH_LEAK)
        assert [d.name for d in diagnostics] == ["e"]
        assert diagnostics[0].location.offset == offset_of(CATCH_LEAK, "(id e)")

    def test_catch_body_sees_outer_names(self):
        src = """
        (program
          (var (decl log))
          (try-statement (block)
            (catch err (block (expr (call (id log) (id err)))))))
        """
        assert check(src) == []


class TestAmbient:

    def test_ambient_names_suppress(self):
        src = "(program (function f (params) (body (return (id Math)))))"
        assert check(src) == ["Math"]
        assert check(src, ECMASCRIPT) == []

    def test_ancestor_names_suppress_at_any_depth(self):
        src = """
        (program
          (function a (params)
            (body (function b (params) (body (return (id toString)))))))
        """
        assert "toString" in OBJECT_PROTOTYPE
        assert check(src, ECMASCRIPT) == []

    def test_plain_iterable(self):
        assert check("(program (expr (id custom)))", ["custom"]) == []

    def test_chain_map(self):
        ambient = ChainMap({"inner": 1}, {"outer": 2})
        src = "(program (expr (id inner)) (expr (id outer)) (expr (id other)))"
        assert check(src, ambient) == ["other"]

    def test_source_declaration_of_ambient_name(self):
        src = "(program (var (decl undefined)) (expr (id undefined)))"
        assert check(src, ECMASCRIPT) == []


class TestReporting:

    def test_diagnostics_in_source_order(self):
        diagnostics = check_diagnostics(TWO_FREE)
        assert [d.name for d in diagnostics] == ["b", "a"]
        assert diagnostics[0].location < diagnostics[1].location

    def test_order_follows_offsets_not_traversal(self):
        late = IdentifierExpression("a", loc=SourceLoc(40, 3, 1))
        early = IdentifierExpression("b", loc=SourceLoc(5, 1, 6))
        program = Program((ExpressionStatement(late), ExpressionStatement(early)))
        assert check(program) == ["b", "a"]

    def test_promoted_names_sorted_with_root_names(self):
        src = """
        (program
          (expr (id second))
          (function f (params) (body (return (id first)))))
        """
        # Offsets decide: second appears before first in the dump.
        assert check(src) == ["second", "first"]

    def test_one_diagnostic_per_name_at_first_use(self):
        src = """
        (program
          (function f (params) (body (return (id dup))))
          (expr (id dup))
          (expr (id dup)))
        """
        diagnostics = check_diagnostics(src)
        assert [d.name for d in diagnostics] == ["dup"]
        assert diagnostics[0].location.offset == offset_of(src, "(id dup)")

    def test_promotion_keeps_earlier_parent_reference(self):
        src = """
        (program
          (expr (id dup))
          (function f (params) (body (return (id dup)))))
        """
        diagnostics = check_diagnostics(src)
        assert [d.name for d in diagnostics] == ["dup"]
        assert diagnostics[0].location.offset == offset_of(src, "(id dup)")

    def test_generated_use_promoted_over_located_use(self):
        checker = FreeVariableChecker(CollectingReporter())
        root = checker._push_scope()
        located = SourceLoc(7, 1, 8)
        root.reference("tmp", located)
        inner = checker._push_scope()
        inner.reference("tmp", None)
        checker._pop_scope(inner)
        assert root.references["tmp"] is located
        checker._pop_scope(root)
        assert [d.location for d in checker._reporter.diagnostics] == [located]

    def test_idempotent(self):
        program = tree(STATEMENTS)
        first = check_diagnostics(program)
        second = check_diagnostics(program)
        assert first == second
        assert [d.location for d in first] == [d.location for d in second]

    def test_reports_only_when_program_scope_closes(self):
        reported_at_depth = []

        class DepthReporter(CollectingReporter):
            def _report(self, diagnostic):
                reported_at_depth.append(checker._scope.depth)
                super()._report(diagnostic)

        checker = FreeVariableChecker(DepthReporter())
        checker.visit(tree(GENUINE_FREE))
        assert reported_at_depth == [0]


class TestInternalErrors:

    def test_generated_reference_that_resolves(self):
        # A synthetic temporary declared and used without locations.
        program = Program((
            VariableStatement((VariableDeclaration(BindingIdentifier("$tmp")),)),
            ExpressionStatement(IdentifierExpression("$tmp")),
        ))
        assert check(program) == []

    def test_generated_reference_that_is_free(self):
        program = Program((ExpressionStatement(IdentifierExpression("$tmp")),))
        with pytest.raises(GeneratedVariableError) as excinfo:
            check(program)
        assert excinfo.value.name == "$tmp"
        assert excinfo.value.code == FreeVarErrorCodes.GENERATED_VARIABLE_UNDEFINED

    def test_generated_free_reference_in_function(self):
        body = FunctionBody((ReturnStatement(IdentifierExpression("$gen")),))
        program = Program((
            FunctionDeclaration(
                BindingIdentifier("f", loc=SourceLoc(0)),
                FormalParameterList(()),
                body,
            ),
        ))
        with pytest.raises(GeneratedVariableError):
            check(program)

    def test_scope_mismatch(self):
        checker = FreeVariableChecker(CollectingReporter())
        outer = checker._push_scope()
        checker._push_scope()
        with pytest.raises(ScopeMismatchError):
            checker._pop_scope(outer)

    def test_internal_errors_are_not_user_errors(self):
        assert issubclass(ScopeMismatchError, InternalError)
        assert issubclass(GeneratedVariableError, InternalError)
        assert not issubclass(InternalError, FreeVarError)


class TestHelpers:

    def test_get_variable_name(self):
        assert get_variable_name(IdentifierExpression("a")) == "a"
        assert get_variable_name(BindingIdentifier("b")) == "b"
        assert get_variable_name("c") == "c"
        assert get_variable_name(None) is None

    def test_check_program_default_ambient_is_empty(self, reporter):
        check_program(reporter, tree("(program (expr (id Object)))"))
        assert reporter.names == ["Object"]


class TestDeepTrees:

    @pytest.mark.parametrize("terms", [1000, 5000])
    def test_long_concatenation(self, terms):
        # function f() { return x + "s" + "s" + ... ; }
        chain = IdentifierExpression("x", loc=SourceLoc(0, 1, 1))
        for i in range(1, terms):
            chain = BinaryExpression("+", chain, Literal("s", loc=SourceLoc(i)))
        program = Program((
            FunctionDeclaration(
                BindingIdentifier("f", loc=SourceLoc(terms)),
                FormalParameterList(()),
                FunctionBody((ReturnStatement(chain),)),
            ),
        ))
        assert check(program) == ["x"]

    def test_long_concatenation_of_declared_names(self):
        chain = IdentifierExpression("a", loc=SourceLoc(1))
        for i in range(2, 2000):
            chain = BinaryExpression("+", chain, IdentifierExpression("a", loc=SourceLoc(i)))
        program = Program((
            VariableStatement((VariableDeclaration(BindingIdentifier("a", loc=SourceLoc(0))),)),
            ExpressionStatement(chain),
        ))
        assert check(program) == []
