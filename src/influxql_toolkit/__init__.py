"""influxql_toolkit package."""

from .client import InfluxDBClient
from .config import ClientConfig, config_from_env, load_env, resolve_config
from .durations import format_duration, parse_duration
from .exceptions import (
    AlreadyExistsError,
    BadParameterError,
    EmptyResponseError,
    InfluxDBAuthenticationError,
    InfluxDBConnectionError,
    InfluxDBError,
    InfluxDBQueryError,
    NotConnectedError,
    NotFoundError,
    UnexpectedResponseError,
    UnsafeOperationError,
    UnsupportedOperationError,
)
from .models import Measurement, RetentionPolicy
from .predicates import Predicate, tag_equals, tag_matches, tag_not_equals
from .quote import quote, quote_string
from .results import Result, Results, Value, coerce, decode, decode_single
from .retention import parse_policies
from .statements import (
    Query,
    alter_retention_policy,
    create_database,
    create_retention_policy,
    drop_database,
    drop_retention_policy,
    select,
    show_databases,
    show_measurements,
    show_retention_policies,
    show_series,
)

__all__ = [
    "InfluxDBClient",
    "ClientConfig",
    "load_env",
    "resolve_config",
    "config_from_env",
    "format_duration",
    "parse_duration",
    "InfluxDBError",
    "InfluxDBAuthenticationError",
    "InfluxDBConnectionError",
    "InfluxDBQueryError",
    "NotConnectedError",
    "NotFoundError",
    "AlreadyExistsError",
    "UnexpectedResponseError",
    "EmptyResponseError",
    "BadParameterError",
    "UnsafeOperationError",
    "UnsupportedOperationError",
    "Measurement",
    "RetentionPolicy",
    "Predicate",
    "tag_equals",
    "tag_matches",
    "tag_not_equals",
    "quote",
    "quote_string",
    "Result",
    "Results",
    "Value",
    "coerce",
    "decode",
    "decode_single",
    "parse_policies",
    "Query",
    "alter_retention_policy",
    "create_database",
    "create_retention_policy",
    "drop_database",
    "drop_retention_policy",
    "select",
    "show_databases",
    "show_measurements",
    "show_retention_policies",
    "show_series",
]
