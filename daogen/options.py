"""Options that filter, modify or add fields and methods of generated models."""

from __future__ import annotations

import re
from typing import Any, Callable, Optional

from daogen.model import AddMethodOpt, CreateFieldOpt, Field, FilterFieldOpt, ModifyFieldOpt

NameStrategy = Callable[[str], str]


def field_new(field_name: str, field_type: str, field_tag: str) -> CreateFieldOpt:
    """Add a new field of any type, with the given complete tag."""

    def create(_: Optional[Field]) -> Field:
        return Field(name=field_name, type=field_type, overwrite_tag=field_tag)

    return CreateFieldOpt(create)


def field_ignore(*args: str) -> FilterFieldOpt:
    """Drop the columns with the given names."""
    names = frozenset(args)

    def keep(m: Field) -> Optional[Field]:
        return None if m.column_name in names else m

    return FilterFieldOpt(keep)


def field_ignore_reg(*args: str) -> FilterFieldOpt:
    """Drop the columns whose names match any of the regular expressions."""
    patterns = [re.compile(reg) for reg in args]

    def keep(m: Field) -> Optional[Field]:
        if any(p.search(m.column_name) for p in patterns):
            return None
        return m

    return FilterFieldOpt(keep)


def _for_column(column_name: str, change: Callable[[Field], None]) -> ModifyFieldOpt:
    def modify(m: Field) -> Field:
        if m.column_name == column_name:
            change(m)
        return m

    return ModifyFieldOpt(modify)


def _for_matching(column_name_reg: str, change: Callable[[Field], None]) -> ModifyFieldOpt:
    pattern = re.compile(column_name_reg)

    def modify(m: Field) -> Field:
        if pattern.search(m.column_name):
            change(m)
        return m

    return ModifyFieldOpt(modify)


def _for_all(change: Callable[[Field], None]) -> ModifyFieldOpt:
    def modify(m: Field) -> Field:
        change(m)
        return m

    return ModifyFieldOpt(modify)


def field_rename(column_name: str, new_name: str) -> ModifyFieldOpt:
    """Set the struct member name of a column."""

    def change(m: Field) -> None:
        m.name = new_name

    return _for_column(column_name, change)


def field_comment(column_name: str, comment: str) -> ModifyFieldOpt:
    """Set the comment of a column's field."""

    def change(m: Field) -> None:
        m.column_comment = comment
        m.multiline_comment = "\n" in comment

    return _for_column(column_name, change)


def field_type(column_name: str, new_type: str) -> ModifyFieldOpt:
    """Set the type of a column's field."""

    def change(m: Field) -> None:
        m.type = new_type

    return _for_column(column_name, change)


def field_type_reg(column_name_reg: str, new_type: str) -> ModifyFieldOpt:
    """Set the type of the fields whose column names match a regular expression."""

    def change(m: Field) -> None:
        m.type = new_type

    return _for_matching(column_name_reg, change)


def field_gen_type(column_name: str, new_type: str) -> ModifyFieldOpt:
    """Set the query field type used for a column."""

    def change(m: Field) -> None:
        m.custom_gen_type = new_type

    return _for_column(column_name, change)


def field_gen_type_reg(column_name_reg: str, new_type: str) -> ModifyFieldOpt:
    """Set the query field type of the columns matching a regular expression."""

    def change(m: Field) -> None:
        m.custom_gen_type = new_type

    return _for_matching(column_name_reg, change)


def field_tag(column_name: str, gorm_tag: str, json_tag: str) -> ModifyFieldOpt:
    """Set both the ORM tag and the json tag of a column's field."""

    def change(m: Field) -> None:
        m.gorm_tag, m.json_tag = gorm_tag, json_tag

    return _for_column(column_name, change)


def field_json_tag(column_name: str, json_tag: str) -> ModifyFieldOpt:
    """Set the json tag of a column's field."""

    def change(m: Field) -> None:
        m.json_tag = json_tag

    return _for_column(column_name, change)


def field_json_tag_with_ns(schema_name: Optional[NameStrategy]) -> ModifyFieldOpt:
    """Derive every field's json tag from its column name."""

    def change(m: Field) -> None:
        if schema_name is not None:
            m.json_tag = schema_name(m.column_name)

    return _for_all(change)


def field_gorm_tag(column_name: str, gorm_tag: str) -> ModifyFieldOpt:
    """Set the ORM tag of a column's field."""

    def change(m: Field) -> None:
        m.gorm_tag = gorm_tag

    return _for_column(column_name, change)


def field_new_tag(column_name: str, new_tag: str) -> ModifyFieldOpt:
    """Append an extra tag to a column's field."""

    def change(m: Field) -> None:
        m.new_tag += " " + new_tag

    return _for_column(column_name, change)


def field_new_tag_with_ns(tag_name: str, schema_name: Optional[NameStrategy]) -> ModifyFieldOpt:
    """Append a tag named ``tag_name`` to every field, its value derived from the column name."""
    to_value = schema_name if schema_name is not None else (lambda name: name)

    def change(m: Field) -> None:
        m.new_tag = f'{m.new_tag} {tag_name}:"{to_value(m.column_name)}"'

    return _for_all(change)


def field_trim_prefix(prefix: str) -> ModifyFieldOpt:
    """Remove a prefix from every member name."""

    def change(m: Field) -> None:
        m.name = m.name.removeprefix(prefix)

    return _for_all(change)


def field_trim_suffix(suffix: str) -> ModifyFieldOpt:
    """Remove a suffix from every member name."""

    def change(m: Field) -> None:
        m.name = m.name.removesuffix(suffix)

    return _for_all(change)


def field_add_prefix(prefix: str) -> ModifyFieldOpt:
    """Add a prefix to every member name."""

    def change(m: Field) -> None:
        m.name = prefix + m.name

    return _for_all(change)


def field_add_suffix(suffix: str) -> ModifyFieldOpt:
    """Add a suffix to every member name."""

    def change(m: Field) -> None:
        m.name += suffix

    return _for_all(change)


def with_method(*args: Any) -> AddMethodOpt:
    """Bind custom methods to the generated model."""
    methods = list(args)
    return AddMethodOpt(lambda: list(methods))