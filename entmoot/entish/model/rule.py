from dataclasses import dataclass
from typing import Union

from .literal import Fact, Clause
from .terms import Function


@dataclass(frozen=True, slots=True)
class Inference:
    """
    An Entish rule: the head is derived for every binding of the body.

    Example 1 (join + comparison):
        strong(character) :- attribute(character, Strength, score) & score >= 16.

    Example 2 (aggregate):
        encumbrance(character, Sum(weight)) :- carrying(character, item, weight).

    The head may hold variables and arbitrary expressions; it is grounded
    per binding when the rule fires.
    """
    head: Fact
    body: Clause

    def __repr__(self) -> str:
        return f"{self.head!r} :- {self.body!r}."


@dataclass(frozen=True, slots=True)
class Comment:
    value: str

    def __repr__(self) -> str:
        return f"// {self.value}"


@dataclass(frozen=True, slots=True)
class Claim:
    """
    An assertion checked against the tables: `ergo clause.`
    """
    clause: Clause

    @property
    def negative(self) -> bool:
        return isinstance(self.clause, Fact) and self.clause.negative

    def __repr__(self) -> str:
        return f"ergo {self.clause!r}."


@dataclass(frozen=True, slots=True)
class Query:
    clause: Clause

    def __repr__(self) -> str:
        return f"? {self.clause!r}."


@dataclass(frozen=True, slots=True)
class Rolling:
    """
    `roll clause.` resolves every roll field of the matched facts into a
    number and asserts the result.
    """
    clause: Clause

    def __repr__(self) -> str:
        return f"roll {self.clause!r}."


Statement = Union[Comment, Fact, Inference, Claim, Query, Rolling, Function]


def statement_to_string(stmt: Statement) -> str:
    """Render a statement as canonical Entish source, terminator included."""
    match stmt:
        case Fact() | Function():
            return f"{stmt!r}."
        case _:
            return repr(stmt)
