import logging
import operator
import random
from typing import Optional

import numpy as np

from ..model.terms import Roll, Number
from .errors import EngineError

logger = logging.getLogger(__name__)

# Comparison operators; they apply to scalars and numpy arrays alike.
COMPARATORS = {
    "=": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


class Dice:
    """
    Resolves rolls from a seeded generator. Two Dice built from the same
    seed produce the same numbers for the same sequence of calls.
    """

    def __init__(self, seed: Optional[str] = "seed") -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def generate_roll(self, roll: Roll) -> Number:
        """
        Draw `count` faces in [1, die]; the modifier is added to every die.
        """
        if roll.die < 1:
            raise EngineError(f"cannot roll a die with {roll.die} faces: {roll!r}")
        total = 0
        for _ in range(roll.count):
            total += self._rng.randint(1, roll.die) + roll.modifier
        logger.debug(f"[ROLL] {roll!r} -> {total}")
        return Number(total)

    @staticmethod
    def average_roll(roll: Roll) -> int:
        return roll.count * (roll.die // 2 + 1 + roll.modifier)

    @staticmethod
    def probability(roll: Roll, op: str, target) -> float:
        """
        Fraction of the `count * die` single-die outcomes (face + modifier)
        satisfying `op target`. Each die is enumerated on its own, so this is
        the exact probability only for one die; sums over several dice are
        not convolved.
        """
        if op not in COMPARATORS:
            raise EngineError(f"unknown comparison operator {op!r}")
        if roll.count < 1 or roll.die < 1:
            return float("nan")
        faces = np.arange(1, roll.die + 1) + roll.modifier
        outcomes = np.tile(faces, roll.count)
        hits = COMPARATORS[op](outcomes, target)
        return float(np.count_nonzero(hits)) / outcomes.size
