from dataclasses import dataclass, field
from typing import Optional

from .literal import Fact
from .terms import Comparison, Constant


@dataclass(slots=True)
class Binding:
    """
    One way of satisfying a clause.
      - facts: the table rows matched so far, in clause order
      - values: variable name -> bound constant (at most one per name)
      - comparisons: comparisons waiting for the variables they reference
      - group: member bindings, only set on bindings built by the aggregator
    """
    facts: list[Fact] = field(default_factory=list)
    values: dict[str, Constant] = field(default_factory=dict)
    comparisons: list[Comparison] = field(default_factory=list)
    group: Optional[list["Binding"]] = None

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self.values.items())
        return f"Binding({inner}; facts={self.facts!r})"
