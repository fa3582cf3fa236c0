"""Parse SHOW RETENTION POLICIES responses."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, List
import logging

from .durations import parse_duration
from .exceptions import UnexpectedResponseError
from .models import RetentionPolicy
from .results import Result

logger = logging.getLogger(__name__)

# name, duration, shardGroupDuration, replicaN, default
POLICY_COLUMN_COUNT = 5


def parse_policies(result: Result) -> Dict[str, RetentionPolicy]:
    """Map policy name to RetentionPolicy for every row of ``result``.

    Duplicate names overwrite earlier rows.
    """
    policies: Dict[str, RetentionPolicy] = {}
    for row in result.values:
        policy = parse_policy_row(row)
        policies[policy.name] = policy
    return policies


def parse_policy_row(row: List[Any]) -> RetentionPolicy:
    if len(row) != POLICY_COLUMN_COUNT:
        raise UnexpectedResponseError(
            f"Expected {POLICY_COLUMN_COUNT} columns for a retention policy, got {len(row)}"
        )
    name, duration, shard_duration, replication, is_default = row
    if not isinstance(name, str):
        raise UnexpectedResponseError(f"Invalid policy name: {name!r}")
    if not isinstance(is_default, bool):
        raise UnexpectedResponseError(f"Invalid default flag for policy {name}: {is_default!r}")
    return RetentionPolicy(
        name=name,
        duration=_duration(name, "duration", duration),
        shard_group_duration=_duration(name, "shardGroupDuration", shard_duration),
        replication_factor=_integer(name, replication),
        default=is_default,
    )


def _duration(policy: str, column: str, value: Any) -> timedelta:
    if not isinstance(value, str):
        raise UnexpectedResponseError(f"Invalid {column} for policy {policy}: {value!r}")
    try:
        return parse_duration(value)
    except ValueError as exc:
        logger.debug("Unparsable %s for policy %s: %r", column, policy, value)
        raise UnexpectedResponseError(f"Invalid {column} for policy {policy}: {value!r}") from exc


def _integer(policy: str, value: Any) -> int:
    # 1.0 counts as 1
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise UnexpectedResponseError(f"Invalid replicaN for policy {policy}: {value!r}")
    return value
