import json
import math
import re
from dataclasses import dataclass
from typing import Union

import numpy as np

# Field marker that matches any value positionally without binding it.
WILDCARD = "?"

# Capitalized identifiers are string constants in Entish source.
IDENTIFIER_RE = re.compile(r"[A-Z][A-Za-z0-9_]*")

# Built-in functions; Count is reserved but not implemented.
FUNCTION_NAMES = ("Floor", "Ceil", "Min", "Max", "Sum", "Count", "Load", "Pr")

# Binding strength used when rendering nested arithmetic.
PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "^": 3}


def format_number(value: Union[int, float]) -> str:
    """Positional decimal text; non-finite values render as inf, -inf and nan."""
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        if value.is_integer():
            return str(int(value))
        return np.format_float_positional(value, trim="-")
    return str(value)


@dataclass(frozen=True, slots=True)
class Term:
    """
    Base class for every Entish expression node.
    """


@dataclass(frozen=True, slots=True)
class Constant(Term):
    """
    A grounded value: a boolean, string, number or an unresolved dice roll.
    Facts stored in a table only ever hold constants.
    """


@dataclass(frozen=True, slots=True)
class Boolean(Constant):
    value: bool

    def __repr__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True, slots=True)
class String(Constant):
    value: str

    def __repr__(self) -> str:
        if IDENTIFIER_RE.fullmatch(self.value):
            return self.value
        return json.dumps(self.value)


@dataclass(frozen=True, slots=True)
class Number(Constant):
    value: Union[int, float]

    def __repr__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True, slots=True)
class Roll(Constant):
    """
    A dice expression `countDdie+modifier`. It stays symbolic until a
    rolling statement materializes it into a Number.
    """
    count: int
    die: int
    modifier: int = 0

    def __repr__(self) -> str:
        if self.modifier > 0:
            return f"{self.count}d{self.die}+{self.modifier}"
        if self.modifier < 0:
            return f"{self.count}d{self.die}-{abs(self.modifier)}"
        return f"{self.count}d{self.die}"


@dataclass(frozen=True, slots=True)
class Variable(Term):
    """
    A named placeholder, bound to a constant while a clause is searched.
    """
    name: str

    def is_wildcard(self) -> bool:
        return self.name == WILDCARD

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class BinaryOperation(Term):
    left: "Expression"
    op: str
    right: "Expression"

    def __repr__(self) -> str:
        return f"{_operand(self.left, self.op, False)} {self.op} {_operand(self.right, self.op, True)}"


@dataclass(frozen=True, slots=True)
class Function(Term):
    """
    A call to one of the built-in functions (Floor, Ceil, Min, Max, Sum,
    Count, Load, Pr). Unknown names survive parsing and fail at evaluation.
    """
    name: str
    arguments: tuple["Expression", ...] = ()

    def __repr__(self) -> str:
        return f"{self.name}({', '.join(repr(a) for a in self.arguments)})"


@dataclass(frozen=True, slots=True)
class Comparison(Term):
    """
    A comparison `left op right`. Used both as a clause (a filter on the
    bindings of a conjunction) and as a boolean-valued expression.
    """
    left: "Expression"
    op: str
    right: "Expression"

    def __repr__(self) -> str:
        return f"{_operand(self.left, None, False)} {self.op} {_operand(self.right, None, True)}"


def _operand(expr: "Expression", parent_op, right_side: bool) -> str:
    if isinstance(expr, Comparison):
        return f"({expr!r})"
    if isinstance(expr, BinaryOperation) and parent_op is not None:
        child, parent = PRECEDENCE[expr.op], PRECEDENCE[parent_op]
        if child < parent:
            return f"({expr!r})"
        if child == parent and (right_side != (parent_op == "^")):
            return f"({expr!r})"
    return repr(expr)


Expression = Union[Constant, Variable, BinaryOperation, Function, Comparison]


def is_constant(expr: Term) -> bool:
    return isinstance(expr, Constant)
