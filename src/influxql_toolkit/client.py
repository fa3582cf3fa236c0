"""InfluxDB 1.x client which issues built statements and decodes the responses."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional
import logging
import pandas as pd

from .config import ClientConfig, resolve_config
from .exceptions import (
    AlreadyExistsError,
    BadParameterError,
    EmptyResponseError,
    InfluxDBConnectionError,
    InfluxDBQueryError,
    NotConnectedError,
    NotFoundError,
    UnexpectedResponseError,
    UnsafeOperationError,
)
from .models import Measurement, RetentionPolicy
from .results import Results, decode
from .retention import parse_policies
from .statements import (
    Query,
    alter_retention_policy,
    create_database,
    create_retention_policy,
    drop_database,
    drop_retention_policy,
    show_databases,
    show_measurements,
    show_retention_policies,
    show_series,
)

logger = logging.getLogger(__name__)

# Epoch precisions understood by the /query endpoint.
PRECISIONS = ("ns", "u", "ms", "s", "m", "h")
_PRECISION_ALIASES = {"µ": "u", "µs": "u", "us": "u"}

_READ_ONLY_PREFIXES = ("SELECT", "SHOW")


class InfluxDBClient:
    """InfluxDB v1 client using the statement builder and result decoder."""

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str] = None,
        password: Optional[str] = None,
        database: Optional[str] = None,
        ssl: bool = False,
        verify_ssl: bool = False,
        precision: Optional[str] = None,
        timeout: Optional[float] = None,
        allow_write: bool = False,
        client: Optional[object] = None,
    ) -> None:
        self.config: Dict[str, Any] = {
            "host": host,
            "port": port,
            "username": username,
            "password": password,
            "database": database,
            "ssl": ssl,
            "verify_ssl": verify_ssl,
            "timeout": timeout,
        }
        self.connected = False
        self._allow_write = allow_write
        self._database: Optional[str] = None
        self._precision: Optional[str] = None
        self._version: Optional[str] = None
        if precision:
            self.set_precision(precision)
        if client is None:
            from influxdb import InfluxDBClient as _TransportClient

            self._client = _TransportClient(
                host=host,
                port=port,
                username=username,
                password=password,
                ssl=ssl,
                verify_ssl=verify_ssl,
                timeout=timeout,
            )
        else:
            self._client = client

    @classmethod
    def from_config(
        cls, config: ClientConfig | Mapping[str, Any], client: Optional[object] = None
    ) -> "InfluxDBClient":
        cfg = resolve_config(config)
        return cls(
            host=cfg.host,
            port=cfg.port,
            username=cfg.username,
            password=cfg.password,
            database=cfg.database,
            ssl=cfg.ssl,
            verify_ssl=cfg.verify_ssl,
            precision=cfg.precision,
            timeout=cfg.timeout,
            allow_write=cfg.allow_write,
            client=client,
        )

    # -------------------- Connection management --------------------

    def connect(self) -> None:
        try:
            self._version = self._client.ping()
        except Exception as exc:
            self.connected = False
            raise InfluxDBConnectionError(str(exc)) from exc
        self.connected = True
        logger.info(
            "Connected to InfluxDB %s:%s (version=%s)",
            self.config["host"],
            self.config["port"],
            self._version,
        )
        if self.config.get("database"):
            self.set_database(self.config["database"])

    def close(self) -> None:
        if hasattr(self._client, "close"):
            self._client.close()
        self.connected = False
        self._database = None

    def ping(self) -> bool:
        try:
            self._client.ping()
            return True
        except Exception:
            return False

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    @property
    def version(self) -> Optional[str]:
        return self._version if self.connected else None

    @property
    def database(self) -> Optional[str]:
        return self._database

    @property
    def precision(self) -> Optional[str]:
        return self._precision

    def set_precision(self, value: str) -> None:
        """Set the ``epoch`` precision requested for numeric ``time`` values.

        The decoder always reads numeric times as milliseconds, so only
        ``ms`` (or no precision, which returns RFC3339 text) yields correct
        timestamps. Other precisions hand back raw numbers that must be
        interpreted by the caller.
        """
        value = _PRECISION_ALIASES.get(value, value)
        if value not in PRECISIONS:
            raise BadParameterError(f"Unsupported precision: {value}")
        self._precision = value

    def set_database(self, name: str) -> None:
        """Select the database used for subsequent queries; it must exist."""
        if not self.database_exists(name):
            raise NotFoundError(f"Database not found: {name}")
        self._database = name

    # -------------------- Query methods --------------------

    def do(self, query: Query) -> Results:
        """Execute a statement and decode the response."""
        self._ensure_connected()
        text = query.render()
        logger.debug("InfluxQL query: database=%s q=%s", self._database, text)
        method = "GET" if text.upper().startswith(_READ_ONLY_PREFIXES) else "POST"
        try:
            response = self._client.query(
                text, database=self._database, epoch=self._precision, method=method
            )
        except Exception as exc:
            raise InfluxDBQueryError(str(exc)) from exc
        return decode(_raw_response(response))

    def query_dataframe(self, query: Query) -> pd.DataFrame:
        try:
            results = self.do(query)
        except EmptyResponseError:
            return pd.DataFrame()
        return results.to_dataframe()

    # -------------------- Exploration methods --------------------

    def list_databases(self) -> List[str]:
        return self._scalar_column(show_databases(), "databases", "name")

    def database_exists(self, name: str) -> bool:
        return name in self.list_databases()

    def list_measurements(self, pattern: Optional[str] = None) -> List[str]:
        return self._scalar_column(
            show_measurements(pattern).database(self._database or ""), "measurements", "name"
        )

    def list_series(
        self, measurement: Optional[Measurement] = None, offset: int = 0, limit: int = 0
    ) -> List[str]:
        query = show_series().database(self._database or "").offset_limit(offset, limit)
        if measurement is not None:
            query = query.measurement(measurement)
        try:
            results = self.do(query)
        except EmptyResponseError:
            return []
        return [str(v) for item in results for v in item.column("key")]

    def retention_policies(self) -> Dict[str, RetentionPolicy]:
        results = self.do(show_retention_policies().database(self._database or ""))
        if len(results) != 1:
            raise UnexpectedResponseError(
                f"Expected one series of retention policies, got {len(results)}"
            )
        return parse_policies(results[0])

    # -------------------- Admin methods (protected) --------------------

    def create_database(self, name: str, policy: Optional[RetentionPolicy] = None) -> bool:
        self._ensure_writes_allowed("create_database")
        query = create_database(name)
        if query is None:
            raise BadParameterError("Database name must not be empty")
        if self.database_exists(name.strip()):
            raise AlreadyExistsError(f"Database already exists: {name}")
        self._execute(query.retention_policy(policy))
        return True

    def drop_database(self, name: str) -> bool:
        self._ensure_writes_allowed("drop_database")
        if not self.database_exists(name):
            raise NotFoundError(f"Database not found: {name}")
        self._execute(drop_database(name))
        if self._database == name:
            self._database = None
        return True

    def create_retention_policy(
        self, name: str, policy: Optional[RetentionPolicy] = None, default: bool = False
    ) -> bool:
        self._ensure_writes_allowed("create_retention_policy")
        database = self._require_database()
        if name in self._existing_policies():
            raise AlreadyExistsError(f"Retention policy already exists: {name}")
        self._execute(create_retention_policy(database, name, policy).default(default))
        return True

    def alter_retention_policy(
        self, name: str, policy: Optional[RetentionPolicy] = None, default: bool = False
    ) -> bool:
        self._ensure_writes_allowed("alter_retention_policy")
        database = self._require_database()
        if name not in self._existing_policies():
            raise NotFoundError(f"Retention policy not found: {name}")
        self._execute(alter_retention_policy(database, name, policy).default(default))
        return True

    def drop_retention_policy(self, name: str) -> bool:
        self._ensure_writes_allowed("drop_retention_policy")
        database = self._require_database()
        if name not in self._existing_policies():
            raise NotFoundError(f"Retention policy not found: {name}")
        self._execute(drop_retention_policy(database, name))
        return True

    # -------------------- Private methods --------------------

    def _execute(self, query: Query) -> None:
        # DDL statements return no series.
        try:
            self.do(query)
        except EmptyResponseError:
            pass

    def _existing_policies(self) -> Dict[str, RetentionPolicy]:
        try:
            return self.retention_policies()
        except EmptyResponseError:
            return {}

    def _scalar_column(self, query: Query, series: str, column: str) -> List[str]:
        try:
            results = self.do(query)
        except EmptyResponseError:
            return []
        values = results.column(0, series, column)
        if not all(isinstance(v, str) for v in values):
            raise UnexpectedResponseError(f"Expected text values in {series}.{column}")
        return values

    def _require_database(self) -> str:
        if not self._database:
            raise BadParameterError("No database selected, call set_database() first")
        return self._database

    def _ensure_connected(self) -> None:
        if not self.connected:
            raise NotConnectedError("Not connected, call connect() first")

    def _ensure_writes_allowed(self, op: str) -> None:
        if not self._allow_write:
            raise UnsafeOperationError(
                f"{op} blocked. Set INFLUXDB_ALLOW_WRITE=true or allow_write=True in config."
            )

    def __repr__(self) -> str:
        status = "connected" if self.connected else "disconnected"
        writes = "writes_enabled" if self._allow_write else "read_only"
        return f"InfluxDBClient({self.config['host']}:{self.config['port']}, {status}, {writes})"


def _raw_response(response: Any) -> Dict[str, Any]:
    """Shape transport results as ``{"results": [...]}``."""
    if isinstance(response, Mapping):
        return dict(response)
    result_sets = response if isinstance(response, list) else [response]
    return {"results": [getattr(rs, "raw", rs) for rs in result_sets]}
