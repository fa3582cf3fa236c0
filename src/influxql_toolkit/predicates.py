"""Tag predicates for WHERE clauses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .quote import quote, quote_string

OP_EQUALS = "="
OP_NOT_EQUALS = "!="
OP_MATCHES = "=~"


@dataclass(frozen=True)
class Predicate:
    """A comparison between a tag and one or more literal values."""

    name: str
    op: str
    values: Tuple[str, ...]

    def render(self) -> str:
        if not self.values:
            raise ValueError(f"predicate on {self.name!r} requires at least one value")
        if self.op == OP_MATCHES:
            return f"{quote(self.name)} {self.op} /{self.values[0].strip('/')}/"
        if self.op == OP_EQUALS and len(self.values) > 1:
            members = ",".join(quote_string(v) for v in self.values)
            return f"{quote(self.name)} IN ({members})"
        return f"{quote(self.name)} {self.op} {quote_string(self.values[0])}"

    def __str__(self) -> str:
        return self.render()


def tag_equals(name: str, *values: str) -> Predicate:
    """Tag equals a value, or is one of several values."""
    return Predicate(name=name, op=OP_EQUALS, values=tuple(values))


def tag_not_equals(name: str, value: str) -> Predicate:
    return Predicate(name=name, op=OP_NOT_EQUALS, values=(value,))


def tag_matches(name: str, regexp: str) -> Predicate:
    """Tag matches a regular expression; surrounding slashes are optional."""
    return Predicate(name=name, op=OP_MATCHES, values=(regexp,))
