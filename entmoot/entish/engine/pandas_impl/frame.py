import pandas as pd
from typing import Any, Iterable, List, Dict
import logging

from ..frame import Frame

logger = logging.getLogger(__name__)

class PandasFrame(Frame):
    """
    A Frame implementation using pandas.DataFrame under the hood.
    Every fact column has object dtype so cells keep their Entish type.
    """
    __slots__ = ("_df",)

    def __init__(self, df: pd.DataFrame) -> None:
        self._df = df

    @classmethod
    def configure(cls, config: Dict[str, Any]) -> None:
        """Configure pandas-specific settings.

        Args:
            config: Configuration dictionary for pandas implementation
        """
        if config:
            logger.info(f"Received PandasFrame configuration: {config}")
        else:
            logger.debug("Using default PandasFrame configuration")

    @classmethod
    def empty(cls, columns: List[str]) -> 'PandasFrame':
        df = pd.DataFrame({col: pd.Series(dtype="object") for col in columns})
        return cls(df)

    @classmethod
    def from_dicts(cls, rows: List[Dict[str, Any]], columns: List[str] = None) -> 'PandasFrame':
        if rows is None or len(rows) == 0:
            return cls.empty(columns if columns is not None else [])
        df = pd.DataFrame(rows, columns=columns)
        for col in df.columns:
            df[col] = df[col].astype(object)
        return cls(df)

    def copy(self) -> 'PandasFrame':
        return PandasFrame(self._df.copy().reset_index(drop=True))

    def _mask(self, column: str, value: Any) -> pd.Series:
        if column not in self._df.columns:
            return pd.Series(False, index=self._df.index, dtype=bool)
        return self._df[column].apply(lambda cell: bool(cell == value)).astype(bool)

    def _row_mask(self, row: Dict[str, Any]) -> pd.Series:
        mask = pd.Series(True, index=self._df.index, dtype=bool)
        for column, value in row.items():
            mask &= self._mask(column, value)
        return mask

    def select_matching(self, row: Dict[str, Any]) -> 'PandasFrame':
        if self._df.empty:
            return self.copy()
        return PandasFrame(self._df[self._row_mask(row)].reset_index(drop=True))

    def drop_matching(self, row: Dict[str, Any]) -> 'PandasFrame':
        if self._df.empty:
            return self.copy()
        mask = self._row_mask(row)
        if mask.any():
            logger.debug(f"[PandasFrame.drop_matching] Dropping {int(mask.sum())} rows")
        return PandasFrame(self._df[~mask].reset_index(drop=True))

    def concat(self, others: Iterable['Frame']) -> 'PandasFrame':
        frames = [self._df]
        for o in others:
            if isinstance(o, PandasFrame):
                frames.append(o._df)
            else:
                frames.append(PandasFrame.from_dicts(o.to_records(), o.columns())._df)

        # Union of columns, first-seen order; narrower frames get empty cells.
        columns = list(dict.fromkeys(c for df in frames for c in df.columns))
        non_empty = [df for df in frames if len(df) > 0]
        if not non_empty:
            return PandasFrame.empty(columns)
        concatenated = pd.concat(non_empty, ignore_index=True).reindex(columns=columns)
        return PandasFrame(concatenated)

    def to_records(self) -> List[Dict[str, Any]]:
        return self._df.to_dict(orient="records")

    def columns(self) -> List[str]:
        return [str(c) for c in self._df.columns]

    def num_rows(self) -> int:
        return len(self._df)
