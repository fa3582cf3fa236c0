from __future__ import annotations

from datetime import UTC

import pandas as pd
import pytest

from influxql_toolkit.exceptions import (
    BadParameterError,
    EmptyResponseError,
    InfluxDBQueryError,
    UnexpectedResponseError,
    UnsupportedOperationError,
)
from influxql_toolkit.results import coerce, decode, decode_single


def _response() -> dict:
    return {
        "results": [
            {
                "statement_id": 0,
                "series": [
                    {
                        "name": "cpu",
                        "tags": {"host": "a"},
                        "columns": ["time", "value", "state"],
                        "values": [
                            ["2026-02-01T00:00:00Z", 1, "ok"],
                            ["2026-02-01T00:00:10.123456789Z", 2.5, None],
                        ],
                    },
                    {
                        "name": "mem",
                        "columns": ["time", "used"],
                        "values": [[1769904000000, 10]],
                        "partial": True,
                    },
                ],
            },
            {
                "statement_id": 1,
                "series": [{"name": "cpu", "columns": ["time", "value"], "values": [[1769904000500, 3]]}],
            },
        ]
    }


def test_decode_copies_series_verbatim():
    results = decode(_response())
    assert len(results) == 3
    assert results.result_count == 2
    first = results[0]
    assert (first.result, first.series, first.name) == (0, 0, "cpu")
    assert first.tags == {"host": "a"}
    assert first.columns == ["time", "value", "state"]
    assert len(first) == 2
    assert first.partial is False
    assert results[1].partial is True
    assert (results[2].result, results[2].series) == (1, 0)


def test_decode_accepts_bare_result_list():
    results = decode(_response()["results"])
    assert [r.name for r in results] == ["cpu", "mem", "cpu"]


@pytest.mark.parametrize(
    "response",
    [
        {"results": []},
        {},
        [],
        {"results": [{"statement_id": 0}]},
        {"results": [{"statement_id": 0, "series": []}]},
    ],
)
def test_decode_empty_response(response):
    with pytest.raises(EmptyResponseError):
        decode(response)


def test_decode_error_response():
    with pytest.raises(InfluxDBQueryError, match="database not found"):
        decode({"results": [{"statement_id": 0, "error": "database not found: x"}]})


def test_decode_single():
    single = {"results": [{"series": [{"name": "databases", "columns": ["name"], "values": [["_internal"]]}]}]}
    result = decode_single(single)
    assert result.column("name") == ["_internal"]
    with pytest.raises(UnsupportedOperationError):
        decode_single(_response())


def test_column_by_result_and_series_name():
    results = decode(_response())
    assert results.column(0, "cpu", "value") == [1.0, 2.5]
    assert results.column(1, "cpu", "value") == [3.0]
    assert results.column(0, "cpu", "state") == ["ok", None]


@pytest.mark.parametrize(
    "result,series,column",
    [
        (2, "cpu", "value"),
        (-1, "cpu", "value"),
        (0, "disk", "value"),
        (1, "mem", "used"),
        (0, "cpu", "missing"),
    ],
)
def test_column_bad_parameter(result, series, column):
    with pytest.raises(BadParameterError):
        decode(_response()).column(result, series, column)


def test_row_zips_columns_and_values():
    result = decode(_response())[0]
    row = result.row(0)
    assert row == {"time": pd.Timestamp("2026-02-01T00:00:00Z"), "value": 1.0, "state": "ok"}
    assert result.row(2) is None
    assert result.row(-1) is None


def test_row_and_column_agree():
    result = decode(_response())[0]
    for name in result.columns:
        values = result.column(name)
        assert len(values) == len(result)
        for i, value in enumerate(values):
            assert result.row(i)[name] == value


def test_row_with_mismatched_width_is_none():
    response = {"results": [{"series": [{"name": "m", "columns": ["a", "b"], "values": [[1]]}]}]}
    result = decode(response)[0]
    assert result.row(0) is None
    assert result.row_array(0) is None


def test_column_with_ragged_row_raises():
    response = {
        "results": [{"series": [{"name": "m", "columns": ["a", "b"], "values": [[1, 2], [3]]}]}]
    }
    results = decode(response)
    with pytest.raises(UnexpectedResponseError, match="Row 1"):
        results.column(0, "m", "b")
    with pytest.raises(UnexpectedResponseError):
        results[0].column("a")


def test_coerce_numbers():
    assert coerce("value", 3) == 3.0
    assert isinstance(coerce("value", 3), float)
    assert coerce("value", True) is True
    assert coerce("value", None) is None
    assert coerce("value", "text") == "text"


def test_coerce_numeric_time_truncates_to_seconds():
    value = coerce("time", 1769904000999)
    assert value == pd.Timestamp("2026-02-01T00:00:00Z")
    assert value.tzinfo is not None


def test_coerce_string_time_keeps_nanoseconds():
    value = coerce("time", "2026-02-01T00:00:10.123456789Z")
    assert isinstance(value, pd.Timestamp)
    assert value.nanosecond == 789
    assert value.microsecond == 123456
    assert value.tz == UTC or str(value.tz) == "UTC"


@pytest.mark.parametrize(
    "raw", ["yesterday", "2026-02-01", "2026-13-01T00:00:00Z", "2026-02-01T00:00:00Z\n"]
)
def test_coerce_unparsable_time_returns_raw(raw):
    assert coerce("time", raw) == raw


def test_result_to_dataframe_includes_tags():
    df = decode(_response())[0].to_dataframe()
    assert list(df.columns) == ["time", "value", "state", "host"]
    assert list(df["host"]) == ["a", "a"]
    assert df["value"].tolist() == [1.0, 2.5]


def test_results_to_dataframe_concatenates():
    df = decode(_response()).to_dataframe()
    assert len(df) == 4
    assert df.columns[0] == "time"
