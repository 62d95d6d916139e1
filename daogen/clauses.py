"""Clause objects produced from a templated SQL statement, rendered as code lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from daogen.model import Status


def _value_of(part: Optional[Any]) -> str:
    return "" if part is None else part.value


@dataclass
class _Clause:
    var_name: str = ""
    type: Status = Status.UNKNOWN


@dataclass
class SQLClause(_Clause):
    """Plain SQL text, possibly with parameters, written to a builder."""

    value: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        sql = "+".join(self.value)
        if sql.startswith('"'):
            sql = '"' + sql.lstrip('" ')
        if not sql.endswith(' "'):
            sql += '+" "'
        return sql.replace('"+"', "")

    def create(self) -> str:
        return f"{self.var_name}.WriteString({self})"

    def finish(self) -> str:
        return f"{self.var_name}.WriteString({self})"


@dataclass
class IfClause(_Clause):
    """A conditional block."""

    value: list[Any] = field(default_factory=list)
    slice: Optional[Any] = None

    def __str__(self) -> str:
        return _value_of(self.slice)

    def create(self) -> str:
        return f"{self} {{"

    def finish(self) -> str:
        return "}"


@dataclass
class ElseClause(IfClause):
    """The alternative branch of a conditional block."""

    def create(self) -> str:
        return f"}} {self} {{"

    def finish(self) -> str:
        return ""


@dataclass
class WhereClause(_Clause):
    """A WHERE block collected into its own builder."""

    value: list[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"helper.WhereTrim({self.var_name}.String())"

    def create(self) -> str:
        return f"var {self.var_name} strings.Builder"

    def finish(self, name: str) -> str:
        return f"helper.JoinWhereBuilder(&{name},{self.var_name})"


@dataclass
class SetClause(_Clause):
    """A SET block collected into its own builder."""

    value: list[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"helper.SetTrim({self.var_name}.String())"

    def create(self) -> str:
        return f"var {self.var_name} strings.Builder"

    def finish(self, name: str) -> str:
        return f"helper.JoinSetBuilder(&{name},{self.var_name})"


@dataclass
class ForClause(_Clause):
    """A loop over a collection parameter."""

    value: list[Any] = field(default_factory=list)
    for_range: Optional[Any] = None
    for_slice: Optional[Any] = None

    def __str__(self) -> str:
        return _value_of(self.for_slice) + "{"

    def create(self) -> str:
        return str(self)

    def finish(self) -> str:
        return "}"