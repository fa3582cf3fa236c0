"""InfluxQL statement builder.

Every statement kind is a subclass of :class:`Query`. All of them accept the
same chainable modifiers; a modifier that has no meaning for a statement kind
is ignored, so callers can build statements uniformly::

    q = select(Measurement("cpu")).filter(tag_equals("host", "a")).offset_limit(0, 10)
    q.render()  # 'SELECT * FROM cpu WHERE host = "a" LIMIT 10'
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from .durations import format_duration
from .models import Measurement, RetentionPolicy
from .predicates import Predicate
from .quote import quote

DEFAULT_POLICY_NAME = "autogen"


class Query(ABC):
    """Base class for InfluxQL statements."""

    # -------------------- Modifiers --------------------

    def database(self, name: str) -> "Query":
        return self

    def retention_policy(self, policy: Optional[RetentionPolicy]) -> "Query":
        return self

    def default(self, value: bool = True) -> "Query":
        return self

    def offset_limit(self, offset: int, limit: int) -> "Query":
        return self

    def measurement(self, *measurements: Measurement) -> "Query":
        return self

    def filter(self, *predicates: Predicate) -> "Query":
        return self

    # -------------------- Rendering --------------------

    @abstractmethod
    def render(self) -> str:
        """Return the statement text."""

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        try:
            text = repr(self.render())
        except ValueError:
            text = "(incomplete)"
        return f"<{type(self).__name__} {text}>"


class ShowDatabases(Query):
    def render(self) -> str:
        return "SHOW DATABASES"


class CreateDatabase(Query):
    def __init__(self, name: str) -> None:
        self._database = name
        self._policy_name = DEFAULT_POLICY_NAME
        self._policy: Optional[RetentionPolicy] = None

    def database(self, name: str) -> "Query":
        self._database = name
        return self

    def retention_policy(self, policy: Optional[RetentionPolicy]) -> "Query":
        self._policy = policy
        return self

    def render(self) -> str:
        text = f"CREATE DATABASE {quote(self._database)}"
        if self._policy is not None:
            clauses = _policy_clauses(self._policy)
            if clauses:
                name = self._policy.name or self._policy_name
                clauses.append(f"NAME {quote(name)}")
                text += " WITH " + " ".join(clauses)
        return text


class DropDatabase(Query):
    def __init__(self, name: str) -> None:
        self._database = name

    def database(self, name: str) -> "Query":
        self._database = name
        return self

    def render(self) -> str:
        return f"DROP DATABASE {quote(self._database)}"


class ShowRetentionPolicies(Query):
    def __init__(self) -> None:
        self._database = ""

    def database(self, name: str) -> "Query":
        self._database = name
        return self

    def render(self) -> str:
        return "SHOW RETENTION POLICIES" + _on(self._database)


class CreateRetentionPolicy(Query):
    def __init__(self, database: str, name: str, policy: Optional[RetentionPolicy]) -> None:
        self._database = database
        self._name = name
        self._policy = policy
        self._default = False

    def database(self, name: str) -> "Query":
        self._database = name
        return self

    def retention_policy(self, policy: Optional[RetentionPolicy]) -> "Query":
        self._policy = policy
        return self

    def default(self, value: bool = True) -> "Query":
        self._default = value
        return self

    def render(self) -> str:
        text = f"CREATE RETENTION POLICY {quote(self._name)}" + _on(self._database)
        if self._policy is not None:
            # A policy always has at least one replica.
            clauses = _policy_clauses(self._policy, min_replication=1)
            if clauses:
                text += " " + " ".join(clauses)
        if self._default:
            text += " DEFAULT"
        return text


class AlterRetentionPolicy(CreateRetentionPolicy):
    def render(self) -> str:
        text = f"ALTER RETENTION POLICY {quote(self._name)}" + _on(self._database)
        if self._policy is not None:
            clauses = _policy_clauses(self._policy)
            if clauses:
                text += " " + " ".join(clauses)
        if self._default:
            text += " DEFAULT"
        return text


class DropRetentionPolicy(Query):
    def __init__(self, database: str, name: str) -> None:
        self._database = database
        self._name = name

    def database(self, name: str) -> "Query":
        self._database = name
        return self

    def render(self) -> str:
        return f"DROP RETENTION POLICY {quote(self._name)}" + _on(self._database)


class ShowSeries(Query):
    def __init__(self) -> None:
        self._database = ""
        self._measurement: Optional[Measurement] = None
        self._offset = 0
        self._limit = 0

    def database(self, name: str) -> "Query":
        self._database = name
        return self

    def measurement(self, *measurements: Measurement) -> "Query":
        self._measurement = measurements[0] if measurements else None
        return self

    def offset_limit(self, offset: int, limit: int) -> "Query":
        self._offset = offset
        self._limit = limit
        return self

    def render(self) -> str:
        text = "SHOW SERIES" + _on(self._database)
        if self._measurement is not None:
            text += " FROM " + self._measurement.render()
        return text + _offset_limit(self._offset, self._limit)


class ShowMeasurements(Query):
    def __init__(self, pattern: Optional[str] = None) -> None:
        self._database = ""
        self._pattern = pattern
        self._where: List[Predicate] = []
        self._offset = 0
        self._limit = 0

    def database(self, name: str) -> "Query":
        self._database = name
        return self

    def filter(self, *predicates: Predicate) -> "Query":
        self._where = list(predicates)
        return self

    def offset_limit(self, offset: int, limit: int) -> "Query":
        self._offset = offset
        self._limit = limit
        return self

    def render(self) -> str:
        text = "SHOW MEASUREMENTS" + _on(self._database)
        if self._pattern:
            text += f" WITH MEASUREMENT =~ /{self._pattern.strip('/')}/"
        text += _where(self._where)
        return text + _offset_limit(self._offset, self._limit)


class Select(Query):
    def __init__(self, *measurements: Measurement) -> None:
        self._measurements = list(measurements)
        self._where: List[Predicate] = []
        self._offset = 0
        self._limit = 0

    def measurement(self, *measurements: Measurement) -> "Query":
        self._measurements = list(measurements)
        return self

    def filter(self, *predicates: Predicate) -> "Query":
        self._where = list(predicates)
        return self

    def offset_limit(self, offset: int, limit: int) -> "Query":
        self._offset = offset
        self._limit = limit
        return self

    def render(self) -> str:
        """Raises ValueError without a measurement, since ``SELECT * FROM`` is no statement."""
        if not self._measurements:
            raise ValueError("SELECT requires at least one measurement")
        text = "SELECT * FROM " + ",".join(m.render() for m in self._measurements)
        text += _where(self._where)
        return text + _offset_limit(self._offset, self._limit)


# -------------------- Constructors --------------------

def show_databases() -> Query:
    return ShowDatabases()


def create_database(name: str) -> Optional[Query]:
    """CREATE DATABASE statement, or None when the name is blank."""
    name = (name or "").strip()
    if not name:
        return None
    return CreateDatabase(name)


def drop_database(name: str) -> Query:
    return DropDatabase(name)


def show_retention_policies() -> Query:
    return ShowRetentionPolicies()


def create_retention_policy(
    database: str, name: str, policy: Optional[RetentionPolicy] = None
) -> Query:
    return CreateRetentionPolicy(database, name, policy)


def alter_retention_policy(
    database: str, name: str, policy: Optional[RetentionPolicy] = None
) -> Query:
    return AlterRetentionPolicy(database, name, policy)


def drop_retention_policy(database: str, name: str) -> Query:
    return DropRetentionPolicy(database, name)


def show_series() -> Query:
    return ShowSeries()


def show_measurements(pattern: Optional[str] = None) -> Query:
    return ShowMeasurements(pattern)


def select(*measurements: Measurement) -> Query:
    return Select(*measurements)


# -------------------- Helper functions --------------------

def _on(database: Optional[str]) -> str:
    if not database:
        return ""
    return f" ON {quote(database)}"


def _where(predicates: List[Predicate]) -> str:
    if not predicates:
        return ""
    return " WHERE " + " AND ".join(p.render() for p in predicates)


def _offset_limit(offset: int, limit: int) -> str:
    text = ""
    if limit > 0:
        text += f" LIMIT {limit}"
    if offset > 0:
        text += f" OFFSET {offset}"
    return text


def _policy_clauses(policy: RetentionPolicy, min_replication: int = 0) -> List[str]:
    clauses = []
    if policy.duration:
        clauses.append(f"DURATION {format_duration(policy.duration)}")
    replication = max(policy.replication_factor, min_replication)
    if replication:
        clauses.append(f"REPLICATION {replication}")
    if policy.shard_group_duration:
        clauses.append(f"SHARD DURATION {format_duration(policy.shard_group_duration)}")
    return clauses
