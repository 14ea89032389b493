from typing import Optional

from ..model.binding import Binding
from ..model.literal import Fact
from ..model.terms import Constant, Variable
from .errors import EngineError


def equal(left: Constant, right: Constant) -> bool:
    """
    Constant equality: same type and same value. Numbers compare by value
    (1 == 1.0); rolls compare by count, die and modifier.
    """
    return type(left) is type(right) and left == right


def bind(fact: Fact, clause: Fact) -> Optional[Binding]:
    """
    Match a stored fact against a fact clause, position by position up to
    the shorter of the two. Returns the binding, or None when a constant
    field differs or a repeated variable would bind two different values.
    Clause fields that are neither constants nor variables are skipped.
    """
    for value in fact.fields:
        if not isinstance(value, Constant):
            raise EngineError(f"stored fact {fact!r} holds a non-constant field {value!r}")

    values: dict[str, Constant] = {}
    for value, pattern in zip(fact.fields, clause.fields):
        match pattern:
            case Variable() if pattern.is_wildcard():
                continue
            case Variable(name=name):
                bound = values.get(name)
                if bound is not None and not equal(bound, value):
                    return None
                values[name] = value
            case Constant():
                if not equal(pattern, value):
                    return None
    return Binding(facts=[fact], values=values)
