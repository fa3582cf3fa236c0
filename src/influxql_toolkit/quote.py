"""Identifier and string quoting for InfluxQL."""

from __future__ import annotations

import re

_RESERVED_WORDS_TEXT = """
    ALL          ALTER        AS           ASC          BEGIN        BY
    CREATE       CONTINUOUS   DATABASE     DATABASES    DEFAULT      DELETE
    DESC         DROP         DURATION     END          EXISTS       EXPLAIN
    FIELD        FROM         GRANT        GROUP        IF           IN
    INNER        INSERT       INTO         KEY          KEYS         LIMIT
    SHOW         MEASUREMENT  MEASUREMENTS NOT          OFFSET       ON
    ORDER        PASSWORD     POLICY       POLICIES     PRIVILEGES   QUERIES
    QUERY        READ         REPLICATION  RETENTION    REVOKE       SELECT
    SERIES       SERVER       SHARD        SLIMIT       SOFFSET      TAG
    TO           USER         USERS        VALUES       WHERE        WITH
    WRITE
"""

RESERVED_WORDS = frozenset(word.upper() for word in _RESERVED_WORDS_TEXT.split())

_BARE_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def quote(name: str) -> str:
    """Return a query-safe identifier (database, policy, measurement or tag name).

    Bare identifiers are returned unchanged unless they are reserved words;
    everything else is double-quoted and escaped.
    """
    if not name:
        return name
    if is_reserved_word(name) or not is_bare_identifier(name):
        return f'"{_escape(name)}"'
    return name


def quote_string(value: str) -> str:
    """Always double-quote and escape a literal value."""
    return f'"{_escape(value)}"'


def is_bare_identifier(name: str) -> bool:
    return _BARE_IDENTIFIER.fullmatch(name) is not None


def is_reserved_word(name: str) -> bool:
    return name.strip().upper() in RESERVED_WORDS


def _escape(value: str) -> str:
    # Backslashes first, otherwise the escaped quotes get doubled again.
    return value.replace("\\", "\\\\").replace('"', '\\"')
