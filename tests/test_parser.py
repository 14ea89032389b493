"""
Tests for the Entish parser
"""
import pytest
from lark.exceptions import LarkError

from entmoot.entish.model import (
    Fact, Conjunction, Disjunction, ExclusiveDisjunction, Inference, Comment, Claim, Query,
    Rolling, Boolean, String, Number, Roll, Variable, BinaryOperation, Function, Comparison,
)


class TestFacts:
    """Test parsing facts and their fields"""

    def test_simple_fact(self, parser):
        """Capitalized identifiers are strings, numbers are numbers"""
        [fact] = parser.parse("attribute(Gimli, Strength, 17).")
        assert fact == Fact("attribute", (String("Gimli"), String("Strength"), Number(17)))
        assert not fact.negative

    def test_negative_fact(self, parser):
        """A leading ~ marks a negative fact"""
        [fact] = parser.parse("~wielding(Gimli, Axe).")
        assert fact.negative
        assert fact.table == "wielding"

    def test_quoted_strings_and_numbers(self, parser):
        """Quoted strings keep spaces; negative and decimal numbers parse"""
        [fact] = parser.parse('name(A, "Hello world", -2, 1.5, true, false).')
        assert fact.fields == (
            String("A"), String("Hello world"), Number(-2), Number(1.5), Boolean(True), Boolean(False),
        )

    def test_rolls(self, parser):
        """Dice expressions parse with and without modifiers"""
        [fact] = parser.parse("weapon(Axe, 1d8+1, 2d6-1, 1d20).")
        assert fact.fields[1:] == (Roll(1, 8, 1), Roll(2, 6, -1), Roll(1, 20, 0))

    def test_empty_fact(self, parser):
        """A table can be asserted with no fields"""
        [fact] = parser.parse("daytime().")
        assert fact == Fact("daytime", ())

    def test_comment(self, parser):
        """Comments become statements"""
        statements = parser.parse("// the fellowship\np(A).")
        assert statements[0] == Comment("the fellowship")
        assert statements[1] == Fact("p", (String("A"),))


class TestClauses:
    """Test clause operators and statement kinds"""

    def test_inference(self, parser):
        """An inference has a fact head and a clause body"""
        [rule] = parser.parse("strong(c) :- attribute(c, Strength, s) & s >= 16.")
        assert isinstance(rule, Inference)
        assert rule.head == Fact("strong", (Variable("c"),))
        assert rule.body == Conjunction((
            Fact("attribute", (Variable("c"), String("Strength"), Variable("s"))),
            Comparison(Variable("s"), ">=", Number(16)),
        ))

    def test_operator_precedence(self, parse_clause):
        """& binds tighter than ⊕, which binds tighter than |"""
        clause = parse_clause("a(x) & b(x) | c(x) ⊕ d(x)")
        a, b, c, d = (Fact(t, (Variable("x"),)) for t in "abcd")
        assert clause == Disjunction((Conjunction((a, b)), ExclusiveDisjunction((c, d))))

    def test_parentheses(self, parse_clause):
        """Parentheses group clauses"""
        clause = parse_clause("a(x) & (b(x) | c(x))")
        a, b, c = (Fact(t, (Variable("x"),)) for t in "abc")
        assert clause == Conjunction((a, Disjunction((b, c))))

    def test_wildcard(self, parse_clause):
        """? in a field position is the wildcard"""
        clause = parse_clause("p(?, x)")
        assert clause.fields[0].is_wildcard()
        assert not clause.fields[1].is_wildcard()

    def test_claims(self, parser):
        """ergo and ∴ both introduce claims"""
        first, second = parser.parse("ergo p(A).\n∴ ~p(B).")
        assert first == Claim(Fact("p", (String("A"),)))
        assert isinstance(second, Claim)
        assert second.negative

    def test_query_and_rolling(self, parser):
        """? introduces a query and roll a rolling"""
        query, rolling = parser.parse("? p(x).\nroll weapon(w, d).")
        assert isinstance(query, Query)
        assert isinstance(rolling, Rolling)
        assert rolling.clause.table == "weapon"

    def test_function_statement(self, parser):
        """A statement spelled like a built-in is a function call"""
        [stmt] = parser.parse('Load("rules.md").')
        assert stmt == Function("Load", (String("rules.md"),))

    def test_syntax_error(self, parser):
        """Malformed text raises a lark error"""
        with pytest.raises(LarkError):
            parser.parse("p(A")


class TestExpressions:
    """Test arithmetic, comparisons and function calls"""

    def test_arithmetic_precedence(self, parse_expr):
        """* binds tighter than +"""
        assert parse_expr("x + 2 * 3") == BinaryOperation(
            Variable("x"), "+", BinaryOperation(Number(2), "*", Number(3))
        )

    def test_subtraction_is_left_associative(self, parse_expr):
        """10 - 4 - 3 is (10 - 4) - 3"""
        assert parse_expr("10 - 4 - 3") == BinaryOperation(
            BinaryOperation(Number(10), "-", Number(4)), "-", Number(3)
        )

    def test_power_is_right_associative(self, parse_expr):
        """2 ^ 3 ^ 2 is 2 ^ (3 ^ 2)"""
        assert parse_expr("2 ^ 3 ^ 2") == BinaryOperation(
            Number(2), "^", BinaryOperation(Number(3), "^", Number(2))
        )

    def test_comparison_field(self, parse_expr):
        """A comparison can be a field value"""
        assert parse_expr("1d6 >= 4") == Comparison(Roll(1, 6), ">=", Number(4))

    def test_function_names_are_case_insensitive(self, parse_expr):
        """floor(...) and Floor(...) are the same function"""
        assert parse_expr("floor(x / 2)") == Function(
            "Floor", (BinaryOperation(Variable("x"), "/", Number(2)),)
        )

    def test_aggregate_in_head(self, parser):
        """Aggregates appear in inference heads"""
        [rule] = parser.parse("total(x, Sum(y)) :- has(x, y).")
        assert rule.head.fields == (Variable("x"), Function("Sum", (Variable("y"),)))

    def test_unknown_function_survives_parsing(self, parse_expr):
        """Unknown functions only fail when evaluated"""
        assert parse_expr("Bogus(1)") == Function("Bogus", (Number(1),))
