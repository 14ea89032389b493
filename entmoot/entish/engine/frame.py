from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Dict


class Frame(ABC):
    """
    Abstract base class for a DataFrame-like table of fact rows. Any backend
    must implement these methods.

    Cells hold Entish constants, which compare by type and value; a backend
    must use Python equality on cells rather than its own coercions.
    """
    @classmethod
    @abstractmethod
    def empty(cls, columns: List[str]) -> 'Frame':
        ...

    @classmethod
    @abstractmethod
    def from_dicts(cls, rows: List[Dict[str, Any]], columns: List[str]) -> 'Frame':
        ...

    @abstractmethod
    def copy(self) -> 'Frame':
        ...

    @abstractmethod
    def select_matching(self, row: Dict[str, Any]) -> 'Frame':
        """Keep rows equal to `row` on every column it names."""
        ...

    @abstractmethod
    def drop_matching(self, row: Dict[str, Any]) -> 'Frame':
        """Drop rows equal to `row` on every column it names."""
        ...

    @abstractmethod
    def concat(self, others: Iterable['Frame']) -> 'Frame':
        ...

    @abstractmethod
    def to_records(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def columns(self) -> List[str]:
        ...

    @abstractmethod
    def num_rows(self) -> int:
        ...
