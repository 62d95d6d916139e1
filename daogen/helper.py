"""Runtime helpers for building dynamic SQL clauses and checking objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Protocol, Sequence


@dataclass(frozen=True)
class Cond:
    """A condition and the SQL fragment used when it holds."""

    cond: bool
    result: str


def if_clause(conds: Iterable[Cond]) -> str:
    """Join the fragments of the conditions that hold."""
    clauses = [(c.result if c.cond else "").strip(" ") for c in conds]
    return " " + " ".join(clauses)


def where_clause(conds: Iterable[str]) -> str:
    """Build a WHERE clause, joining conditions with AND where needed."""
    return _join_clause(conds, "WHERE", _where_value, " ")


def set_clause(conds: Iterable[str]) -> str:
    """Build a SET clause from assignments."""
    return _join_clause(conds, "SET", _set_value, ",")


def _join_clause(conds: Iterable[str], keyword: str, deal: Callable[[str], str], sep: str) -> str:
    sql = _trim_all(sep.join(deal(c) for c in conds))
    if sql:
        sql = f" {keyword} {sql}"
    return sql


def _trim_all(text: str) -> str:
    return _trim_right(_trim_left(text))


def _trim_left(text: str) -> str:
    text = text.strip()
    lower = text.lower()
    if lower.startswith("and "):
        return text[4:]
    if lower.startswith("or "):
        return text[3:]
    if lower.startswith("xor "):
        return text[4:]
    if lower.startswith(","):
        return text[1:]
    return text


def _trim_right(text: str) -> str:
    text = text.strip()
    lower = text.lower()
    if lower.endswith(" and"):
        return text[:-3]
    if lower.endswith(" or"):
        return text[:-2]
    if lower.endswith(" xor"):
        return text[:-3]
    if lower.endswith(","):
        return text[:-1]
    return text


def _where_value(value: str) -> str:
    value = value.strip(" ")
    lower = value.lower()
    if not lower:
        return ""
    if lower.startswith(("and ", "or ", "xor ")):
        return value
    return "AND " + value


def _set_value(value: str) -> str:
    return value.strip(", ")


def join_where_builder(where_value: str) -> str:
    """Return the WHERE fragment for accumulated conditions, or an empty string."""
    value = _trim_all(where_value)
    return f"WHERE {value} " if value else ""


def join_set_builder(set_value: str) -> str:
    """Return the SET fragment for accumulated assignments, or an empty string."""
    value = _trim_all(set_value)
    return f"SET {value} " if value else ""


class ObjectField(Protocol):
    """A field of a user-described object."""

    def name(self) -> str: ...

    def type(self) -> str: ...

    def column_name(self) -> str: ...

    def gorm_tag(self) -> str: ...

    def json_tag(self) -> str: ...

    def tag(self) -> str: ...

    def comment(self) -> str: ...


class Object(Protocol):
    """A user-described model object."""

    def table_name(self) -> str: ...

    def struct_name(self) -> str: ...

    def file_name(self) -> str: ...

    def import_pkg_paths(self) -> Sequence[str]: ...

    def fields(self) -> Sequence[ObjectField]: ...


def check_object(obj: Object) -> None:
    """Raise ValueError if the object lacks a struct name or a field name or type."""
    struct_name = obj.struct_name()
    if not struct_name:
        raise ValueError("object's struct_name() cannot be empty")
    for f in obj.fields():
        if f.name() == "":
            raise ValueError(f"object {struct_name}'s field name() cannot be empty")
        if f.type() == "":
            raise ValueError(f"object {struct_name}'s field type() cannot be empty")