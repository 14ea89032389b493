# Aggregate function registry and helpers
import logging
from typing import Callable, Iterator, List

from ..model.binding import Binding
from ..model.literal import Fact
from ..model.terms import Variable, Function, BinaryOperation, Comparison

logger = logging.getLogger(__name__)

AGGREGATE_FUNCS = {}

def agg_sum(values):
    return sum(values)

def agg_max(values):
    return max(values)

def agg_min(values):
    return min(values)

def init_aggregate_registry():
    AGGREGATE_FUNCS['Sum'] = agg_sum
    AGGREGATE_FUNCS['Max'] = agg_max
    AGGREGATE_FUNCS['Min'] = agg_min

init_aggregate_registry()


def is_aggregate(expr) -> bool:
    return isinstance(expr, Function) and expr.name in AGGREGATE_FUNCS


def walk(expr, visit: Callable) -> Iterator:
    """
    Depth-first walk over an expression. `visit` returns the node to yield,
    None to yield nothing, or False to skip the node and its children.
    """
    found = visit(expr)
    if found is False:
        return
    if found is not None:
        yield found
    match expr:
        case BinaryOperation(left=left, right=right) | Comparison(left=left, right=right):
            yield from walk(left, visit)
            yield from walk(right, visit)
        case Function(arguments=arguments):
            for argument in arguments:
                yield from walk(argument, visit)


def head_aggregates(head: Fact) -> List[Function]:
    return [f for field in head.fields
            for f in walk(field, lambda e: e if is_aggregate(e) else None)]


def head_group_variables(head: Fact) -> List[str]:
    """Names of the head variables that appear outside every aggregate."""
    def visit(e):
        if is_aggregate(e):
            return False
        if isinstance(e, Variable) and not e.is_wildcard():
            return e.name
        return None
    names = [name for field in head.fields for name in walk(field, visit)]
    return list(dict.fromkeys(names))


class Aggregator:
    """
    Groups the body bindings of an inference by the values of the head's
    non-aggregated variables. Each group becomes one binding whose `group`
    holds the members, for Sum, Min and Max to fold over.
    """

    def group(self, head: Fact, bindings: List[Binding]) -> List[Binding]:
        if not head_aggregates(head):
            return bindings

        names = head_group_variables(head)
        groups: dict[tuple, list[Binding]] = {}
        for binding in bindings:
            key = tuple(binding.values.get(name) for name in names)
            groups.setdefault(key, []).append(binding)

        logger.debug(f"[AGGREGATE] {head!r}: {len(bindings)} bindings in {len(groups)} groups by {names}")
        return [
            Binding(
                facts=[f for b in members for f in b.facts],
                values=dict(members[0].values),
                comparisons=[c for b in members for c in b.comparisons],
                group=members,
            )
            for members in groups.values()
        ]
