from dataclasses import dataclass

# Column holding the number of fields of each stored row.
WIDTH_COLUMN = "width"


@dataclass(frozen=True, slots=True)
class RelationSchema:
    """
    Relation schema: table name, widest arity stored so far, and column names.
    Rows narrower than the arity leave the trailing columns empty.
    """
    predicate: str
    arity: int
    colnames: tuple[str, ...]

    def __post_init__(self):
        if len(self.colnames) != self.arity:
            raise ValueError("RelationSchema: colnames length must match arity.")

    @classmethod
    def for_arity(cls, predicate: str, arity: int) -> "RelationSchema":
        return cls(predicate, arity, tuple(f"arg{i}" for i in range(arity)))

    def widened(self, arity: int) -> "RelationSchema":
        if arity <= self.arity:
            return self
        return RelationSchema.for_arity(self.predicate, arity)
