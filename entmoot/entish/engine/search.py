import logging
from typing import Callable, Iterator, List, Optional

from ..model.binding import Binding
from ..model.literal import Fact, Conjunction, Disjunction, ExclusiveDisjunction
from ..model.terms import Comparison, Function
from .database import FactDatabase
from .expressions import ExpressionEvaluator
from .unify import bind, equal
from .errors import EngineError

logger = logging.getLogger(__name__)


def combinations(choices: List[List[Binding]]) -> Iterator[List[Binding]]:
    """
    Cartesian product of the per-clause binding lists, leftmost clause
    outermost, walked with an index per list instead of recursion.
    """
    if any(len(c) == 0 for c in choices):
        return
    indices = [0] * len(choices)
    while True:
        yield [c[i] for c, i in zip(choices, indices)]
        position = len(choices) - 1
        while position >= 0:
            indices[position] += 1
            if indices[position] < len(choices[position]):
                break
            indices[position] = 0
            position -= 1
        if position < 0:
            return


class ClauseSearch:
    """
    Evaluates a clause tree against the fact database:
      - fact: one binding per unifying row
      - conjunction: join of the children's bindings (see reduce)
      - disjunction: concatenation of the children's bindings
      - exclusive disjunction: the bindings of the only child that matched
        facts, or nothing when zero or several children did
      - comparison: a single binding carrying the comparison, checked once
        it is joined with bindings that supply its variables

    `on_match(clause, rows)` receives the rows each fact clause matched.
    """

    def __init__(self,
                 db: FactDatabase,
                 evaluator: ExpressionEvaluator,
                 max_combinations: Optional[int] = None,
                 on_match: Optional[Callable[[Fact, List[Fact]], None]] = None) -> None:
        self.db = db
        self.evaluator = evaluator
        self.max_combinations = max_combinations
        self.on_match = on_match

    def search(self, clause) -> List[Binding]:
        match clause:
            case Fact():
                return self._search_fact(clause)
            case Conjunction(clauses=clauses):
                return self._search_conjunction(clauses)
            case Disjunction(clauses=clauses):
                return [b for child in clauses for b in self.search(child)]
            case ExclusiveDisjunction(clauses=clauses):
                return self._search_exclusive(clauses)
            case Comparison():
                return [Binding(comparisons=[clause])]
            case Function():
                raise EngineError(f"can't handle function as clause: {clause!r}")
            case _:
                raise EngineError(f"unhandled clause {clause!r}")

    def _search_fact(self, clause: Fact) -> List[Binding]:
        bindings = []
        for row in self.db.rows(clause.table):
            binding = bind(row, clause)
            if binding is not None:
                bindings.append(binding)
        if self.on_match is not None:
            self.on_match(clause, [b.facts[0] for b in bindings])
        return bindings

    def _search_conjunction(self, clauses) -> List[Binding]:
        choices = [self.search(child) for child in clauses]

        if self.max_combinations is not None:
            total = 1
            for c in choices:
                total *= len(c)
            if total > self.max_combinations:
                raise EngineError(
                    f"conjunction would join {total} combinations, more than the limit of {self.max_combinations}"
                )

        results = []
        for combination in combinations(choices):
            merged = self.reduce(combination)
            if merged is not None:
                results.append(merged)
        logger.debug(f"[CONJUNCTION] {len(results)} bindings survive from {[len(c) for c in choices]}")
        return results

    def _search_exclusive(self, clauses) -> List[Binding]:
        qualifying = []
        for child in clauses:
            bindings = self.search(child)
            if any(b.facts for b in bindings):
                qualifying.append(bindings)
        if len(qualifying) == 1:
            return qualifying[0]
        return []

    def reduce(self, bindings: List[Binding]) -> Optional[Binding]:
        """
        Fold one combination into a single binding. Returns None when two
        bindings disagree on a variable or a carried comparison is false.
        """
        current = Binding()
        for binding in bindings:
            for name, value in binding.values.items():
                bound = current.values.get(name)
                if bound is not None and not equal(bound, value):
                    return None
            current = Binding(
                facts=current.facts + binding.facts,
                values={**current.values, **binding.values},
                comparisons=current.comparisons + binding.comparisons,
            )
            for comparison in binding.comparisons:
                if not self.evaluator.compare(comparison, current):
                    return None
        return current
