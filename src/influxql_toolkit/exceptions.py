"""Exceptions for influxql_toolkit."""

class InfluxDBError(Exception):
    """Base exception for influxql_toolkit."""


class InfluxDBConnectionError(InfluxDBError):
    """Connection to InfluxDB failed."""


class NotConnectedError(InfluxDBConnectionError):
    """An operation needs a connection but connect() has not succeeded."""


class InfluxDBQueryError(InfluxDBError):
    """Query execution failed."""


class InfluxDBAuthenticationError(InfluxDBError):
    """Authentication failed."""


class NotFoundError(InfluxDBError):
    """A database, retention policy or series does not exist."""


class AlreadyExistsError(InfluxDBError):
    """A database or retention policy already exists."""


class UnexpectedResponseError(InfluxDBError):
    """The server response does not have the expected shape or types."""


class EmptyResponseError(InfluxDBError):
    """The server response is well formed but contains no data."""


class BadParameterError(InfluxDBError):
    """An argument is out of range or refers to something that is absent."""


class UnsafeOperationError(InfluxDBError):
    """Raised when a write/delete/admin operation is blocked by safety rules."""


class UnsupportedOperationError(InfluxDBError):
    """Raised when a response shape or operation is not supported."""
