import logging
import math
import os
from typing import Callable, Optional

logger = logging.getLogger(__name__)
log_level_str = os.environ.get("ENTMOOT_DEBUG", "INFO").upper()
try:
    logger.setLevel(getattr(logging, log_level_str))
except AttributeError:
    logger.setLevel(logging.INFO)
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter('[%(levelname)s] %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)

from ..model.binding import Binding
from ..model.terms import (
    Constant, Boolean, String, Number, Roll, Variable, BinaryOperation, Function, Comparison,
)
from .aggregate import AGGREGATE_FUNCS
from .dice import Dice, COMPARATORS
from .errors import EngineError, UnsupportedFunctionError


def _divide(a, b):
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1, b)
    return a / b


def _power(a, b):
    # Always float: exact int powers grow without bound.
    try:
        result = float(a) ** b
    except ZeroDivisionError:
        return math.inf
    except OverflowError:
        return -math.inf if a < 0 and b % 2 == 1 else math.inf
    if isinstance(result, complex):
        return math.nan
    return result


ARITHMETIC = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _divide,
    "^": _power,
}


class ExpressionEvaluator:
    """
    Evaluates expressions against a binding:
      - constants evaluate to themselves
      - variables are looked up in the binding (unbound is an error)
      - arithmetic works on numbers only
      - comparisons evaluate to booleans; rolls compare by their average
      - functions: Floor, Ceil, Sum, Min, Max, Pr, Load

    `load` is called with the path given to Load(...).
    """

    def __init__(self, dice: Dice, load: Optional[Callable[[str], object]] = None) -> None:
        self.dice = dice
        self.load = load

    def evaluate(self, expr, binding: Binding) -> Constant:
        match expr:
            case Constant():
                return expr
            case Variable(name=name):
                value = binding.values.get(name)
                if value is None:
                    raise EngineError(f"variable {name} missing from binding")
                return value
            case BinaryOperation():
                return Number(self.arithmetic(expr, binding))
            case Comparison():
                return Boolean(self.compare(expr, binding))
            case Function():
                return self.call(expr, binding)
            case _:
                raise EngineError(f"unhandled expression {expr!r}")

    def _number(self, expr, binding: Binding, what: str):
        value = self.evaluate(expr, binding)
        if not isinstance(value, Number):
            raise EngineError(f"{what} requires a number, got {value!r}")
        return value.value

    def arithmetic(self, op: BinaryOperation, binding: Binding):
        left = self._number(op.left, binding, f"left-hand side of '{op.op}'")
        right = self._number(op.right, binding, f"right-hand side of '{op.op}'")
        if op.op not in ARITHMETIC:
            raise EngineError(f"unknown operator {op.op!r}")
        try:
            return ARITHMETIC[op.op](left, right)
        except OverflowError as e:
            raise EngineError(f"overflow evaluating {op!r}") from e

    def _comparable(self, expr, binding: Binding) -> Constant:
        value = self.evaluate(expr, binding)
        if isinstance(value, Roll):
            return Number(self.dice.average_roll(value))
        return value

    def compare(self, comparison: Comparison, binding: Binding) -> bool:
        left = self._comparable(comparison.left, binding)
        right = self._comparable(comparison.right, binding)
        if comparison.op not in COMPARATORS:
            raise EngineError(f"unknown comparison operator {comparison.op!r}")
        if comparison.op == "=":
            return type(left) is type(right) and left.value == right.value
        if comparison.op == "!=":
            return type(left) is not type(right) or left.value != right.value
        if type(left) is not type(right):
            raise EngineError(f"cannot order {left!r} and {right!r} in {comparison!r}")
        return bool(COMPARATORS[comparison.op](left.value, right.value))

    # Functions

    def call(self, fn: Function, binding: Binding) -> Constant:
        match fn.name:
            case "Floor" | "Ceil":
                return self._rounding(fn, binding)
            case name if name in AGGREGATE_FUNCS:
                return self._aggregate(fn, binding)
            case "Pr":
                return self._probability(fn, binding)
            case "Load":
                return self._load(fn, binding)
            case "Count":
                raise UnsupportedFunctionError("Count is not yet supported")
            case _:
                raise UnsupportedFunctionError(f"can't handle function {fn.name}")

    @staticmethod
    def _single_argument(fn: Function):
        if len(fn.arguments) != 1:
            raise EngineError(f"{fn.name} takes exactly one argument, got {len(fn.arguments)}")
        return fn.arguments[0]

    def _rounding(self, fn: Function, binding: Binding) -> Number:
        value = self._number(self._single_argument(fn), binding, fn.name)
        try:
            return Number(math.floor(value) if fn.name == "Floor" else math.ceil(value))
        except (OverflowError, ValueError) as e:
            raise EngineError(f"{fn.name} of {value} is not an integer") from e

    def _aggregate(self, fn: Function, binding: Binding) -> Number:
        reduce = AGGREGATE_FUNCS[fn.name]
        if binding.group is None:
            if fn.name == "Sum":
                return Number(0)
            values = [self._number(a, binding, fn.name) for a in fn.arguments]
        else:
            argument = self._single_argument(fn)
            if not isinstance(argument, Variable):
                raise EngineError(f"{fn.name} requires a single variable argument, got {argument!r}")
            values = []
            for member in binding.group:
                value = member.values.get(argument.name)
                if value is None or isinstance(value, Roll):
                    continue
                if not isinstance(value, Number):
                    raise EngineError(f"{fn.name} got a non-numerical argument, {argument.name} = {value!r}")
                values.append(value.value)
        if not values and fn.name != "Sum":
            raise EngineError(f"{fn.name} of no values")
        return Number(reduce(values))

    def _probability(self, fn: Function, binding: Binding) -> Constant:
        argument = self._single_argument(fn)
        if isinstance(argument, Comparison):
            roll = self.evaluate(argument.left, binding)
            target = self.evaluate(argument.right, binding)
            if not isinstance(roll, Roll) or not isinstance(target, Number):
                raise EngineError(f"can't compute probability for {argument!r}")
            return Number(self.dice.probability(roll, argument.op, target.value))
        roll = self.evaluate(argument, binding)
        if not isinstance(roll, Roll):
            raise EngineError(f"first argument to probability function must be a roll, got {roll!r}")
        return roll

    def _load(self, fn: Function, binding: Binding) -> Boolean:
        path = self.evaluate(self._single_argument(fn), binding)
        if not isinstance(path, String):
            raise EngineError(f"expected Load(<filename:string>), got {path!r}")
        if self.load is None:
            raise EngineError(f"no source loader available for {path.value!r}")
        logger.debug(f"[LOAD] {path.value}")
        self.load(path.value)
        return Boolean(True)
