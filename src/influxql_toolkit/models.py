"""Data models for influxql_toolkit."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from .durations import format_duration
from .quote import quote


@dataclass
class RetentionPolicy:
    """How long a database keeps data and how it is sharded and replicated."""

    name: Optional[str] = None
    duration: timedelta = timedelta(0)
    shard_group_duration: timedelta = timedelta(0)
    replication_factor: int = 0
    default: bool = False

    def __str__(self) -> str:
        return (
            f"RetentionPolicy(name={self.name}, duration={format_duration(self.duration)}, "
            f"shard_group_duration={format_duration(self.shard_group_duration)}, "
            f"replication_factor={self.replication_factor}, default={self.default})"
        )


@dataclass(frozen=True)
class Measurement:
    """A measurement, optionally qualified by database and retention policy."""

    name: str
    database: Optional[str] = None
    policy: Optional[str] = None

    def render(self) -> str:
        if not self.database and not self.policy:
            return quote(self.name)
        return ".".join(
            [quote(self.database or ""), quote(self.policy or ""), quote(self.name)]
        )

    def __str__(self) -> str:
        return self.render()
