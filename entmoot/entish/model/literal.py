from dataclasses import dataclass
from typing import Union

from .terms import Expression, Comparison, Function, is_constant


@dataclass(frozen=True, slots=True)
class Fact:
    """
    A (possibly negated) row pattern of a named table.
      - table: name of the table, e.g. "wielding"
      - fields: tuple of Expression; all constants once asserted
      - negative: if True, asserting this fact deletes matching rows
    """
    table: str
    fields: tuple[Expression, ...]
    negative: bool = False

    def arity(self) -> int:
        return len(self.fields)

    def is_ground(self) -> bool:
        return all(is_constant(f) for f in self.fields)

    def __repr__(self) -> str:
        inner = ", ".join(repr(f) for f in self.fields)
        return f"{'~' if self.negative else ''}{self.table}({inner})"


@dataclass(frozen=True, slots=True)
class Conjunction:
    clauses: tuple["Clause", ...]

    def __repr__(self) -> str:
        return "(" + " & ".join(repr(c) for c in self.clauses) + ")"


@dataclass(frozen=True, slots=True)
class Disjunction:
    clauses: tuple["Clause", ...]

    def __repr__(self) -> str:
        return "(" + " | ".join(repr(c) for c in self.clauses) + ")"


@dataclass(frozen=True, slots=True)
class ExclusiveDisjunction:
    """
    Holds when exactly one of its clauses matches at least one fact.
    """
    clauses: tuple["Clause", ...]

    def __repr__(self) -> str:
        return "(" + " ⊕ ".join(repr(c) for c in self.clauses) + ")"


# Function is only here because a parsed clause may name one; searching it fails.
Clause = Union[Fact, Conjunction, Disjunction, ExclusiveDisjunction, Comparison, Function]
