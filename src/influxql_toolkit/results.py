"""Decoding of InfluxQL query responses into typed tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from numbers import Number
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union
import logging
import re

import pandas as pd

from .exceptions import (
    BadParameterError,
    EmptyResponseError,
    InfluxDBQueryError,
    UnexpectedResponseError,
    UnsupportedOperationError,
)

logger = logging.getLogger(__name__)

TIME_COLUMN = "time"

Value = Union[str, float, bool, datetime, None]

_RFC3339 = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d{1,9})?([Zz]|[+-]\d{2}:\d{2})"
)


def coerce(column: str, value: Any) -> Value:
    """Convert a raw cell into a typed value, depending on its column name.

    Numbers in the ``time`` column are milliseconds since the epoch and are
    truncated to whole seconds. Other numbers become floats. RFC3339 strings
    in the ``time`` column become timestamps with nanosecond precision.
    Everything else is returned unchanged.
    """
    if isinstance(value, Number) and not isinstance(value, bool):
        if column == TIME_COLUMN:
            seconds = int(float(value) / 1e3)
            return pd.Timestamp(seconds, unit="s", tz="UTC")
        return float(value)
    if isinstance(value, str) and column == TIME_COLUMN:
        if _RFC3339.fullmatch(value):
            try:
                return pd.Timestamp(value)
            except ValueError:
                return value
    return value


@dataclass
class Result:
    """One series of one result-set."""

    result: int
    series: int
    name: str
    tags: Dict[str, str] = field(default_factory=dict)
    columns: List[str] = field(default_factory=list)
    values: List[List[Any]] = field(default_factory=list)
    partial: bool = False

    def __len__(self) -> int:
        return len(self.values)

    def column_index(self, column: str) -> int:
        try:
            return self.columns.index(column)
        except ValueError:
            return -1

    def column(self, column: str) -> List[Value]:
        i = self.column_index(column)
        if i < 0:
            raise BadParameterError(f"Unknown column '{column}' in series '{self.name}'")
        width = len(self.columns)
        for n, row in enumerate(self.values):
            if len(row) != width:
                raise UnexpectedResponseError(
                    f"Row {n} of series '{self.name}' has {len(row)} values for {width} columns"
                )
        return [coerce(column, row[i]) for row in self.values]

    def row(self, i: int) -> Optional[Dict[str, Value]]:
        """Return row ``i`` as a column-name to value mapping, or None."""
        values = self.row_array(i)
        if values is None:
            return None
        return dict(zip(self.columns, values))

    def row_array(self, i: int) -> Optional[List[Value]]:
        if i < 0 or i >= len(self.values):
            return None
        raw = self.values[i]
        if len(raw) != len(self.columns):
            return None
        return [coerce(name, value) for name, value in zip(self.columns, raw)]

    def to_dataframe(self) -> pd.DataFrame:
        rows = []
        for i in range(len(self.values)):
            row = self.row(i)
            if row is None:
                continue
            row.update(self.tags)
            rows.append(row)
        df = pd.DataFrame(rows, columns=_frame_columns(self.columns, self.tags))
        return _move_time_first(df)

    def __str__(self) -> str:
        return (
            f"Result(result={self.result}, series={self.series}, name={self.name}, "
            f"columns={self.columns}, rows={len(self.values)}, partial={self.partial})"
        )


class Results:
    """All series of a response, addressed by result-set index and series name."""

    def __init__(self, items: Sequence[Result], result_count: int) -> None:
        self._items = list(items)
        self._result_count = result_count

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Result]:
        return iter(self._items)

    def __getitem__(self, i: int) -> Result:
        return self._items[i]

    @property
    def result_count(self) -> int:
        return self._result_count

    def get(self, result: int, series: str) -> Result:
        if result < 0 or result >= self._result_count:
            raise BadParameterError(f"Result index out of range: {result}")
        for item in self._items:
            if item.result == result and item.name == series:
                return item
        raise BadParameterError(f"No series '{series}' in result {result}")

    def column(self, result: int, series: str, column: str) -> List[Value]:
        """Values of one column of the named series, in row order."""
        return self.get(result, series).column(column)

    def to_dataframe(self) -> pd.DataFrame:
        frames = [item.to_dataframe() for item in self._items]
        frames = [df for df in frames if not df.empty]
        if not frames:
            return pd.DataFrame()
        return _move_time_first(pd.concat(frames, ignore_index=True))

    def __str__(self) -> str:
        return "Results[" + ", ".join(str(item) for item in self._items) + "]"


def decode(response: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]) -> Results:
    """Decode a response (``{"results": [...]}`` or the bare list) into Results."""
    result_sets = _result_sets(response)
    items: List[Result] = []
    for i, result_set in enumerate(result_sets):
        if result_set.get("error"):
            raise InfluxDBQueryError(result_set["error"])
        for j, series in enumerate(result_set.get("series") or []):
            items.append(
                Result(
                    result=i,
                    series=j,
                    name=series.get("name", ""),
                    tags=dict(series.get("tags") or {}),
                    columns=list(series.get("columns") or []),
                    values=[list(row) for row in series.get("values") or []],
                    partial=bool(series.get("partial", False)),
                )
            )
    logger.debug("Decoded %d series from %d result-sets", len(items), len(result_sets))
    return Results(items, result_count=len(result_sets))


def decode_single(response: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]) -> Result:
    """Decode a response which is expected to hold exactly one series."""
    results = decode(response)
    if len(results) > 1:
        raise UnsupportedOperationError(
            f"Expected a single series, response contains {len(results)}"
        )
    return results[0]


def _result_sets(response: Any) -> List[Mapping[str, Any]]:
    if isinstance(response, Mapping):
        result_sets = response.get("results") or []
    else:
        result_sets = list(response or [])
    if not result_sets:
        raise EmptyResponseError("Response contains no result-sets")
    first = result_sets[0]
    if first.get("error"):
        raise InfluxDBQueryError(first["error"])
    if not first.get("series"):
        raise EmptyResponseError("Response contains no series")
    return list(result_sets)


def _frame_columns(columns: List[str], tags: Mapping[str, str]) -> List[str]:
    return list(columns) + [k for k in tags if k not in columns]


def _move_time_first(df: pd.DataFrame) -> pd.DataFrame:
    cols = list(df.columns)
    if cols and cols[0] != TIME_COLUMN and TIME_COLUMN in cols:
        cols = [TIME_COLUMN] + [c for c in cols if c != TIME_COLUMN]
        return df.reindex(columns=cols)
    return df
