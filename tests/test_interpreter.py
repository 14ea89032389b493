"""
End-to-end tests for the Entish interpreter
"""
import math

import pytest

from entmoot import Interpreter, EngineError, ClaimFailure, UnsupportedFunctionError
from entmoot.entish.model import Fact, Boolean, String, Number, Roll

A, B, C = String("A"), String("B"), String("C")


def fact(table, *fields):
    return Fact(table, tuple(fields))


@pytest.fixture
def interp():
    return Interpreter(seed="seed", strict=True)


class TestAssertion:
    """Test asserting and deleting facts"""

    def test_idempotent_assert(self, interp):
        interp.load("p(A).\np(A).")
        assert interp.tables["p"] == [fact("p", A)]

    def test_negative_assert_removes(self, interp):
        interp.load("p(A).\np(B).\n~p(A).")
        assert interp.tables["p"] == [fact("p", B)]

    def test_negative_assert_when_absent(self, interp):
        interp.load("~q(A).")
        assert "q" not in interp.tables

    def test_exec_returns_the_fact(self, interp, parse_statement):
        assert interp.exec(parse_statement("p(A, 1).")) == [fact("p", A, Number(1))]
        assert interp.exec(parse_statement("// nothing")) == []

    def test_ungrounded_fact_is_an_error(self, interp):
        with pytest.raises(EngineError):
            interp.load("p(x).")

    def test_failed_load_keeps_earlier_statements(self, interp):
        with pytest.raises(EngineError):
            interp.load("p(A).\np(x).\np(B).")
        assert interp.tables["p"] == [fact("p", A)]


class TestForwardChaining:
    """Test inferences and their replay on new facts"""

    def test_rule_derives_existing_facts(self, interp):
        interp.load("q(A).\np(x) :- q(x).")
        assert interp.tables["p"] == [fact("p", A)]

    def test_new_fact_refires_rules(self, interp, parse_statement):
        interp.load("q(A).\np(x) :- q(x).")
        result = interp.exec(parse_statement("q(B)."))
        assert result[0] == fact("q", B)
        assert fact("p", B) in result
        assert interp.tables["p"] == [fact("p", A), fact("p", B)]

    def test_chained_rules(self, interp):
        interp.load("p(x) :- q(x).\nr(x) :- p(x).\nq(A).")
        assert interp.tables["p"] == [fact("p", A)]
        assert interp.tables["r"] == [fact("r", A)]

    def test_rules_are_remembered_once(self, interp):
        interp.load("p(x) :- q(x).\np(x) :- q(x).")
        assert len(interp.inferences) == 1

    def test_replays_are_not_remembered(self, interp, parse_statement):
        interp.load_inference(parse_statement("p(x) :- q(x)."), recursive=True)
        assert interp.inferences == []

    def test_join_conflicts_are_discarded(self, interp):
        interp.load("p(A, 1).\nq(A, 2).\np(B, 1).\nq(C, 2).\nr(x) :- p(x, 1) & q(x, 2).")
        assert interp.tables["r"] == [fact("r", A)]

    def test_exclusive_disjunction(self, interp, parse_clause):
        interp.load("a(One).\nr(x) :- a(x) ⊕ b(x).")
        assert interp.tables["r"] == [fact("r", String("One"))]
        interp.load("b(Two).")
        assert interp.query(parse_clause("a(x) ⊕ b(x)")) == []
        assert interp.query(parse_clause("c(x) ⊕ d(x)")) == []

    def test_aggregation(self, interp):
        interp.load("has(A, 1).\nhas(A, 2).\nhas(B, 5).\ntotal(x, Sum(y)) :- has(x, y).")
        assert interp.tables["total"] == [fact("total", A, Number(3)), fact("total", B, Number(5))]

    def test_min_and_max(self, interp):
        interp.load("has(A, 4).\nhas(A, 2).\nlow(x, Min(y)) :- has(x, y).\nhigh(x, Max(y)) :- has(x, y).")
        assert interp.tables["low"] == [fact("low", A, Number(2))]
        assert interp.tables["high"] == [fact("high", A, Number(4))]

    def test_arithmetic_head(self, interp):
        interp.load("score(A, 3).\nbonus(x, Floor((s - 10) / 2)) :- score(x, s).")
        assert interp.tables["bonus"] == [fact("bonus", A, Number(-4))]

    def test_negative_head_deletes(self, interp):
        interp.load("p(A).\nq(A).\n~p(x) :- q(x).")
        assert interp.tables["p"] == []

    def test_huge_power_head_is_infinite(self, interp):
        interp.load("q(1).\np(2 ^ 2000) :- q(?).\nr(7 ^ 3000000) :- q(?).")
        assert interp.tables["p"] == [fact("p", Number(math.inf))]
        assert interp.tables["r"] == [fact("r", Number(math.inf))]

    def test_roll_average_in_comparison(self, interp):
        """1d8 averages 5"""
        interp.load("weapon(Axe, 1d8).\nweapon(Dagger, 1d4).\nheavy(w) :- weapon(w, d) & d > 4.")
        assert interp.tables["heavy"] == [fact("heavy", String("Axe"))]


class TestClaimsAndQueries:
    """Test claims, queries and function statements"""

    def test_strict_claim_raises(self, interp):
        with pytest.raises(ClaimFailure):
            interp.load("ergo p(A).")

    def test_lenient_claim_returns_false(self, parse_statement):
        interp = Interpreter(strict=False)
        assert interp.exec(parse_statement("ergo p(A).")) == Boolean(False)

    def test_successful_claim_returns_facts(self, interp, parse_statement):
        interp.load("p(A).")
        assert interp.exec(parse_statement("ergo p(x).")) == [fact("p", A)]
        assert len(interp.claims) == 1

    def test_negative_claim(self, interp, parse_statement):
        assert interp.exec(parse_statement("ergo ~p(A).")) == []
        interp.load("p(A).")
        with pytest.raises(ClaimFailure):
            interp.exec(parse_statement("ergo ~p(A)."))

    def test_query_flattens_facts(self, interp, parse_statement):
        interp.load("p(A, 1).\nq(A, 2).")
        assert interp.exec(parse_statement("? p(x, ?) & q(x, ?).")) == [fact("p", A, Number(1)), fact("q", A, Number(2))]

    def test_probability_statement(self, interp, parse_statement):
        assert interp.exec(parse_statement("Pr(1d6 >= 4).")) == Number(0.5)

    def test_count_is_unsupported(self, interp):
        with pytest.raises(UnsupportedFunctionError):
            interp.load("Count(1).")

    def test_match_side_table(self, interp, parse_statement):
        interp.load("p(A).\np(B).")
        query = parse_statement("? p(A).")
        interp.exec(query)
        assert interp.matches(query.clause) == [fact("p", A)]

        other = parse_statement("? q(x).")
        interp.exec(other)
        assert interp.matches(other.clause) == []
        assert interp.matches(query.clause) is None


class TestRolling:
    """Test materializing rolls"""

    def test_roll_asserts_numbers(self, interp):
        interp.load("weapon(Axe, 1d1+2).\nroll weapon(w, d).")
        assert interp.tables["weapon"] == [
            fact("weapon", String("Axe"), Roll(1, 1, 2)),
            fact("weapon", String("Axe"), Number(3)),
        ]

    def test_same_seed_same_results(self):
        program = "weapon(Axe, 3d6).\nweapon(Bow, 1d20+1).\nroll weapon(?, ?).\nroll weapon(?, ?)."
        first, second = Interpreter(seed="mithril"), Interpreter(seed="mithril")
        first.load(program)
        second.load(program)
        assert first.tables == second.tables
        assert len(first.tables["weapon"]) > 2
