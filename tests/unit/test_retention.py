from __future__ import annotations

from datetime import timedelta

import pytest

from influxql_toolkit.exceptions import UnexpectedResponseError
from influxql_toolkit.results import Result
from influxql_toolkit.retention import parse_policies


def _result(values) -> Result:
    return Result(
        result=0,
        series=0,
        name="",
        columns=["name", "duration", "shardGroupDuration", "replicaN", "default"],
        values=values,
    )


def test_parse_policies():
    policies = parse_policies(
        _result(
            [
                ["autogen", "0s", "168h0m0s", 1, True],
                ["policy", "24h0m0s", "1h0m0s", 2, False],
            ]
        )
    )
    assert set(policies) == {"autogen", "policy"}
    autogen = policies["autogen"]
    assert autogen.name == "autogen"
    assert autogen.duration == timedelta(0)
    assert autogen.shard_group_duration == timedelta(days=7)
    assert autogen.replication_factor == 1
    assert autogen.default is True
    policy = policies["policy"]
    assert policy.duration == timedelta(hours=24)
    assert policy.shard_group_duration == timedelta(hours=1)
    assert policy.replication_factor == 2
    assert policy.default is False


def test_parse_policies_last_duplicate_wins():
    policies = parse_policies(
        _result([["p", "1h0m0s", "1h0m0s", 1, False], ["p", "2h0m0s", "1h0m0s", 1, True]])
    )
    assert len(policies) == 1
    assert policies["p"].duration == timedelta(hours=2)
    assert policies["p"].default is True


def test_parse_policies_empty_result():
    assert parse_policies(_result([])) == {}


@pytest.mark.parametrize(
    "row",
    [
        ["p", "1h0m0s", "1h0m0s", 1],
        ["p", "1h0m0s", "1h0m0s", 1, False, "extra"],
        [1, "1h0m0s", "1h0m0s", 1, False],
        ["p", 3600, "1h0m0s", 1, False],
        ["p", "1h0m0s", "soon", 1, False],
        ["p", "1h0m0s", "1h0m0s", 1.5, False],
        ["p", "1h0m0s", "1h0m0s", True, False],
        ["p", "1h0m0s", "1h0m0s", "1", False],
        ["p", "1h0m0s", "1h0m0s", -1, False],
        ["p", "1h0m0s", "1h0m0s", -1.0, False],
        ["p", "1h0m0s", "1h0m0s", None, False],
        ["p", "1h0m0s", "1h0m0s", 1, "false"],
    ],
)
def test_parse_policies_rejects_malformed_rows(row):
    with pytest.raises(UnexpectedResponseError):
        parse_policies(_result([row]))


def test_parse_policies_accepts_integer_valued_float_replication():
    policies = parse_policies(
        _result([["p", "1h0m0s", "1h0m0s", 1.0, False], ["q", "0s", "1h0m0s", 0, False]])
    )
    assert policies["p"].replication_factor == 1
    assert isinstance(policies["p"].replication_factor, int)
    assert policies["q"].replication_factor == 0
