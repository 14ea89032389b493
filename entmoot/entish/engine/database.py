import logging
from typing import Dict, List, Any

from ..model.schema import RelationSchema, WIDTH_COLUMN
from ..model.literal import Fact
from ..model.terms import Constant
from .frame import Frame
from .frame_factory import FrameFactory
from .errors import EngineError

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter('[%(levelname)s] %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)


class FactDatabase:
    """
    Holds:
      - _relations: Dict[table -> (RelationSchema, Frame)]
    Rows are sets of grounded facts: inserting an existing row is a no-op and
    deleting removes every field-wise equal row. Rows of one table may have
    different widths; the `width` column records each row's field count.

    Each database instance keeps the Frame implementation it was created
    with, independent of later FrameFactory changes.
    """
    def __init__(self) -> None:
        self._frame_class = FrameFactory.get_implementation()
        self._relations: dict[str, tuple[RelationSchema, Frame]] = {}

    def create_relation(self, table: str, arity: int) -> RelationSchema:
        """
        Ensure a relation named `table` exists with at least `arity` columns.
        A wider fact widens the schema; existing rows keep their width.
        """
        if table in self._relations:
            schema, frame = self._relations[table]
            if arity > schema.arity:
                logger.debug(f"[CREATE_RELATION] Widening '{table}' from {schema.arity} to {arity}")
                schema = schema.widened(arity)
                self._relations[table] = (schema, frame)
            return schema

        schema = RelationSchema.for_arity(table, arity)
        empty_frame = self._frame_class.empty(list(schema.colnames) + [WIDTH_COLUMN])
        self._relations[table] = (schema, empty_frame)
        return schema

    @staticmethod
    def _row_for(fact: Fact) -> Dict[str, Any]:
        row: Dict[str, Any] = {}
        for i, value in enumerate(fact.fields):
            if not isinstance(value, Constant):
                raise EngineError(f"fact fields must be constants, got {value!r} in {fact!r}")
            row[f"arg{i}"] = value
        row[WIDTH_COLUMN] = len(fact.fields)
        return row

    def contains(self, fact: Fact) -> bool:
        if fact.table not in self._relations:
            return False
        _, frame = self._relations[fact.table]
        return frame.select_matching(self._row_for(fact)).num_rows() > 0

    def insert(self, fact: Fact) -> bool:
        """
        Insert a grounded fact. Returns False when an equal row already exists.
        """
        row = self._row_for(fact)
        schema = self.create_relation(fact.table, fact.arity())
        _, frame = self._relations[fact.table]

        if frame.num_rows() > 0 and frame.select_matching(row).num_rows() > 0:
            return False

        candidate = self._frame_class.from_dicts([row], list(schema.colnames) + [WIDTH_COLUMN])
        self._relations[fact.table] = (schema, frame.concat([candidate]))
        logger.debug(f"[INSERT] {fact!r}")
        return True

    def delete(self, fact: Fact) -> int:
        """
        Delete every row field-wise equal to `fact`'s fields. Returns the
        number of rows removed; a missing table removes nothing.
        """
        if fact.table not in self._relations:
            return 0
        row = self._row_for(fact)
        schema, frame = self._relations[fact.table]
        remaining = frame.drop_matching(row)
        removed = frame.num_rows() - remaining.num_rows()
        self._relations[fact.table] = (schema, remaining)
        if removed:
            logger.debug(f"[DELETE] {fact!r}: {removed} row(s)")
        return removed

    def rows(self, table: str) -> List[Fact]:
        """
        Return the rows of `table` as facts, in insertion order. Missing
        tables have no rows.
        """
        if table not in self._relations:
            return []
        _, frame = self._relations[table]
        facts = []
        for record in frame.to_records():
            width = int(record[WIDTH_COLUMN])
            facts.append(Fact(table, tuple(record[f"arg{i}"] for i in range(width))))
        return facts

    def relation_arity(self, table: str) -> int:
        """
        Return the widest arity stored for `table`. Raises KeyError if missing.
        """
        if table not in self._relations:
            raise KeyError(f"relation_arity: no relation named '{table}'.")
        schema, _ = self._relations[table]
        return schema.arity

    def all_predicates(self) -> list[str]:
        return list(self._relations.keys())

    def snapshot(self) -> Dict[str, List[Fact]]:
        return {table: self.rows(table) for table in self._relations}

    def reset(self) -> None:
        """
        Clear all stored facts. Schemas remain declared.
        """
        for table, (schema, _) in self._relations.items():
            empty_frame = self._frame_class.empty(list(schema.colnames) + [WIDTH_COLUMN])
            self._relations[table] = (schema, empty_frame)
