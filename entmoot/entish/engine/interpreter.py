import logging
from typing import Dict, List, Optional, Union

from ..model.binding import Binding
from ..model.literal import Fact
from ..model.rule import Inference, Comment, Claim, Query, Rolling
from ..model.terms import Boolean, Constant, Function, Roll
from ..parser.entish_parser import EntishParser
from .aggregate import Aggregator
from .config import config
from .database import FactDatabase
from .dice import Dice
from .errors import EngineError, ClaimFailure
from .expressions import ExpressionEvaluator
from .search import ClauseSearch
from ...sources import SourceLoader

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter('[%(levelname)s] %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)

Result = Union[List[Fact], Constant]


class Interpreter:
    """
    Runs Entish statements against an in-memory fact database.

    Holds:
      - db: the tables of facts
      - inferences: rules remembered for forward chaining, in load order
      - claims: every claim checked so far
      - dice: the seeded generator used by roll statements

    Asserting a new fact replays every remembered inference, so rules
    loaded before a fact still derive from it.
    """

    def __init__(self,
                 seed: Optional[str] = None,
                 strict: Optional[bool] = None,
                 sources=None) -> None:
        self.seed = seed if seed is not None else config.get_seed()
        self.strict = strict if strict is not None else config.is_strict()
        self.sources = sources if sources is not None else SourceLoader()

        self.db = FactDatabase()
        self.dice = Dice(self.seed)
        self.evaluator = ExpressionEvaluator(self.dice, load=self.load_from_file)
        self.aggregator = Aggregator()
        self.searcher = ClauseSearch(
            self.db,
            self.evaluator,
            max_combinations=config.get_max_join_combinations(),
            on_match=self._record_match,
        )
        self.parser = EntishParser()

        self.inferences: List[Inference] = []
        self._remembered: set[str] = set()
        self.claims: List[Claim] = []
        self._matches: Dict[int, tuple] = {}
        self._depth = 0

    # Loading

    def load(self, text: str) -> None:
        """
        Parse `text` and execute its statements in order. The first failing
        statement aborts the rest; earlier assertions stay in place.
        """
        for statement in self.parser.parse(text):
            self.exec(statement)

    def load_from_file(self, path: str) -> None:
        for text in self.sources.read(path):
            self.load(text)

    # Statements

    def exec(self, statement) -> Result:
        if self._depth == 0:
            self._matches.clear()
        self._depth += 1
        try:
            logger.debug(f"[EXEC] {statement!r}")
            match statement:
                case Comment():
                    return []
                case Fact():
                    return self.load_fact(statement)
                case Inference():
                    return self.load_inference(statement)
                case Claim():
                    return self.claim(statement)
                case Query(clause=clause):
                    return self.query(clause)
                case Rolling():
                    return self.roll(statement)
                case Function():
                    return self.evaluator.evaluate(statement, Binding())
                case _:
                    raise EngineError(f"unhandled statement {statement!r}")
        finally:
            self._depth -= 1

    def load_fact(self, fact: Fact) -> List[Fact]:
        """
        Assert a grounded fact. A negative fact deletes the equal rows. A new
        positive fact replays every remembered inference; the result is the
        fact followed by whatever the replay derived.
        """
        if not fact.is_ground():
            raise EngineError(f"facts must be grounded with constants: {fact!r}")

        if fact.negative:
            self.db.delete(Fact(fact.table, fact.fields))
            return [fact]

        if not self.db.insert(fact):
            return [fact]

        derived = []
        for inference in list(self.inferences):
            derived.extend(self.load_inference(inference, recursive=True))
        return [fact] + derived

    def load_inference(self, inference: Inference, recursive: bool = False) -> List[Fact]:
        """
        Derive and assert the head of `inference` for every binding of its
        body. Unless this is a replay (`recursive`), remember the rule.
        """
        head = inference.head
        bindings = self.aggregator.group(head, self.search(inference.body))
        grounded = [
            Fact(head.table, tuple(self.evaluator.evaluate(f, b) for f in head.fields), head.negative)
            for b in bindings
        ]
        results = [asserted for fact in grounded for asserted in self.load_fact(fact)]

        if not recursive:
            key = repr(inference)
            if key not in self._remembered:
                self._remembered.add(key)
                self.inferences.append(inference)
                logger.debug(f"[REMEMBER] {key}")
        return results

    def claim(self, claim: Claim) -> Result:
        self.claims.append(claim)
        facts = self.query(claim.clause)
        empty = len(facts) == 0
        if empty != claim.negative:
            if self.strict:
                raise ClaimFailure(claim)
            logger.debug(f"[CLAIM] failed: {claim!r}")
            return Boolean(False)
        return facts

    def search(self, clause) -> List[Binding]:
        return self.searcher.search(clause)

    def query(self, clause) -> List[Fact]:
        return [fact for binding in self.search(clause) for fact in binding.facts]

    def roll(self, rolling: Rolling) -> List[Fact]:
        """
        Replace every roll in the matched facts by a freshly rolled number
        and assert the results.
        """
        rolled = [
            Fact(
                fact.table,
                tuple(self.dice.generate_roll(f) if isinstance(f, Roll) else f for f in fact.fields),
                fact.negative,
            )
            for fact in self.query(rolling.clause)
        ]
        for fact in rolled:
            self.load_fact(fact)
        return rolled

    # Introspection

    @property
    def tables(self) -> Dict[str, List[Fact]]:
        return self.db.snapshot()

    def _record_match(self, clause: Fact, rows: List[Fact]) -> None:
        entry = self._matches.setdefault(id(clause), (clause, []))
        entry[1].extend(rows)

    def matches(self, clause: Fact) -> Optional[List[Fact]]:
        """Rows matched by `clause` during the latest top-level exec."""
        entry = self._matches.get(id(clause))
        if entry is None or entry[0] is not clause:
            return None
        return list(entry[1])
