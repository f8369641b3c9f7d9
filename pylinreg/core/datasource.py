"""
Row snapshot for pylinreg.

DataSource is the "I have data" abstraction. It holds an immutable
snapshot of tabular rows: each row maps column name to a number, a
string, or None (missing). It doesn't know what a regression is; the
preprocessor decides which rows are usable.

Usage:
    from pylinreg import DataSource

    ds = DataSource.from_records([{'price': 3.2, 'city': 'A'}, ...])
    ds = DataSource.from_dataframe(df)
    ds = DataSource.from_file("houses.csv")

    ds.keys()        # ('price', 'city')
    ds['price']      # (3.2, ...)
    ds.select([0, 2, 5])   # rows kept after manual cleaning
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Sequence, TYPE_CHECKING

from pylinreg.core.exceptions import ValidationError

if TYPE_CHECKING:
    import pandas as pd

Row = Mapping[str, Any]


@dataclass(frozen=True)
class DataSource:
    """
    Immutable row collection with a fixed column set.

    Construct via factory classmethods, not directly.
    """
    _rows: tuple[Row, ...]
    _columns: tuple[str, ...]
    _metadata: Mapping[str, Any] = field(default_factory=dict)

    # === Access ===

    def keys(self) -> tuple[str, ...]:
        """Column names in source order."""
        return self._columns

    @property
    def rows(self) -> tuple[Row, ...]:
        return self._rows

    def __getitem__(self, column: str) -> tuple[Any, ...]:
        """
        All values of one column, in row order.

        Raises:
            KeyError: If column not found, listing available columns
        """
        if column not in self._columns:
            raise KeyError(
                f"DataSource has no column '{column}'. Available: {list(self._columns)}"
            )
        return tuple(row.get(column) for row in self._rows)

    def __contains__(self, column: str) -> bool:
        return column in self._columns

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    @property
    def n_observations(self) -> int:
        return len(self._rows)

    @property
    def metadata(self) -> dict[str, Any]:
        return dict(self._metadata)

    def select(self, indices: Iterable[int]) -> DataSource:
        """
        Subset of rows, in the order given.

        Used by callers that removed rows by hand (outliers, duplicates)
        before running a regression.
        """
        picked = []
        for i in indices:
            if not 0 <= i < len(self._rows):
                raise ValidationError(
                    f"Row index {i} out of range for {len(self._rows)} rows"
                )
            picked.append(self._rows[i])
        metadata = {**self._metadata, 'selected_from': len(self._rows)}
        return DataSource(tuple(picked), self._columns, MappingProxyType(metadata))

    # === Factory Methods ===

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        *,
        columns: Sequence[str] | None = None,
    ) -> DataSource:
        """
        Snapshot an iterable of mappings.

        Args:
            records: Rows as mappings of column name to value
            columns: Fixed column set. Defaults to the union of keys in
                first-seen order. Keys outside it are dropped, missing
                keys read as None.

        Keys are converted to str, matching from_dataframe().
        """
        materialized = [{str(k): v for k, v in r.items()} for r in records]
        if columns is None:
            seen: dict[str, None] = {}
            for record in materialized:
                for key in record:
                    seen.setdefault(key, None)
            cols = tuple(seen)
        else:
            cols = tuple(str(c) for c in columns)

        rows = tuple(
            MappingProxyType({c: record.get(c) for c in cols})
            for record in materialized
        )
        return cls(rows, cols, MappingProxyType({'source': 'records'}))

    @classmethod
    def from_dataframe(
        cls,
        df: 'pd.DataFrame',
        *,
        source_path: str | None = None,
    ) -> DataSource:
        """Construct from a pandas DataFrame. Missing cells become None."""
        import pandas as pd

        cleaned = df.astype(object).where(pd.notna(df), None)
        columns = tuple(str(c) for c in df.columns)
        rows = tuple(
            MappingProxyType(dict(zip(columns, values)))
            for values in cleaned.itertuples(index=False, name=None)
        )
        metadata: dict[str, Any] = {'source': 'dataframe'}
        if source_path:
            metadata['source_path'] = source_path
        return cls(rows, columns, MappingProxyType(metadata))

    @classmethod
    def from_file(cls, path: str | Path) -> DataSource:
        """Construct from a delimited text file (CSV, TSV)."""
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix == '.csv':
            import pandas as pd
            return cls.from_dataframe(pd.read_csv(path), source_path=str(path))
        elif suffix == '.tsv':
            import pandas as pd
            return cls.from_dataframe(pd.read_csv(path, sep='\t'), source_path=str(path))
        else:
            raise ValidationError(f"Unknown file format: {suffix}")

    @classmethod
    def build(cls, data: Any) -> DataSource:
        """
        Convenience factory that dispatches to the appropriate from_* method.

        Examples:
            DataSource.build(ds)              # returned unchanged
            DataSource.build("data.csv")      # from_file
            DataSource.build(df)              # from_dataframe
            DataSource.build([{...}, {...}])  # from_records
        """
        if isinstance(data, DataSource):
            return data
        if isinstance(data, (str, Path)):
            return cls.from_file(data)
        if hasattr(data, 'itertuples') and hasattr(data, 'columns'):
            return cls.from_dataframe(data)
        return cls.from_records(data)
