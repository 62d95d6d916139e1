"""Database column and index descriptions, and their conversion to model fields."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from daogen.model import Field, lookup_data_type

_NUMBER_KINDS = frozenset(
    {
        "int", "int8", "int16", "int32", "int64",
        "uint", "uint8", "uint16", "uint32", "uint64",
        "float32", "float64",
    }
)


def _scan_kind(scan_type: Optional[str]) -> Optional[str]:
    """Classify a scan type name as bool, number, string, struct or None."""
    if not scan_type:
        return None
    if scan_type == "bool":
        return "bool"
    if scan_type in _NUMBER_KINDS:
        return "number"
    if scan_type == "string":
        return "string"
    if scan_type.startswith(("*", "[]", "map[")):
        return None
    if "." in scan_type:
        return "struct"
    return None


@dataclass
class ColumnType:
    """What the database reports about one column.

    Attributes that the database may not report are ``None`` when unknown.
    ``scan_type`` is the name of the type values are scanned into.
    """

    name: str
    database_type_name: str
    column_type: Optional[str] = None
    primary_key: Optional[bool] = None
    auto_increment: Optional[bool] = None
    nullable: Optional[bool] = None
    default_value: Optional[str] = None
    comment: Optional[str] = None
    scan_type: Optional[str] = None


@dataclass
class Index:
    """A table index, with the position of a column inside it."""

    name: str
    columns: list[str] = field(default_factory=list)
    primary_key: Optional[bool] = None
    unique: Optional[bool] = None
    priority: int = 0


def group_by_column(index_list: Iterable[Optional[Index]]) -> dict[str, list[Index]]:
    """Map each column name to the indexes that cover it, with its priority in each."""
    result: dict[str, list[Index]] = {}
    for idx in index_list:
        if idx is None:
            continue
        for position, col in enumerate(idx.columns, start=1):
            result.setdefault(col, []).append(dataclasses.replace(idx, priority=position))
    return result


NameStrategy = Callable[[str], str]


@dataclass
class Column:
    """A table column together with the settings used to turn it into a field."""

    spec: ColumnType
    table_name: str = ""
    indexes: list[Optional[Index]] = field(default_factory=list)
    use_scan_type: bool = False
    _data_type_map: dict[str, Callable[[str], str]] = field(default_factory=dict, repr=False)
    _json_tag_ns: NameStrategy = field(default=lambda n: n, repr=False)
    _new_tag_ns: NameStrategy = field(default=lambda _n: "", repr=False)

    @property
    def name(self) -> str:
        return self.spec.name

    def set_data_type_map(self, mapping: Optional[dict[str, Callable[[str], str]]]) -> None:
        self._data_type_map = dict(mapping or {})

    def get_data_type(self) -> str:
        """Return the generated type for this column."""
        mapping = self._data_type_map.get(self.spec.database_type_name)
        if mapping is not None:
            return mapping(self.column_type())
        if self.use_scan_type and self.spec.scan_type:
            return self.spec.scan_type
        return lookup_data_type(self.spec.database_type_name, self.column_type())

    def with_ns(self, json_tag_ns: Optional[NameStrategy], new_tag_ns: Optional[NameStrategy]) -> None:
        """Set the naming strategies for the json tag and the extra tag."""
        self._json_tag_ns = json_tag_ns if json_tag_ns is not None else (lambda n: n)
        self._new_tag_ns = new_tag_ns if new_tag_ns is not None else (lambda _n: "")

    def to_field(self, nullable: bool, coverable: bool, signable: bool) -> Field:
        """Convert this column into a model field."""
        field_type = self.get_data_type()
        if signable and "unsigned" in self.column_type() and field_type.startswith("int"):
            field_type = "u" + field_type
        if self.name == "deleted_at" and field_type == "time.Time":
            field_type = "gorm.DeletedAt"
        elif coverable and self.need_default_tag(self.default_tag_value()):
            field_type = "*" + field_type
        elif nullable and self.spec.nullable:
            field_type = "*" + field_type

        comment = self.spec.comment or ""
        return Field(
            name=self.name,
            type=field_type,
            column_name=self.name,
            multiline_comment="\n" in comment,
            gorm_tag=self.build_gorm_tag(),
            json_tag=self._json_tag_ns(self.name),
            new_tag=self._new_tag_ns(self.name),
            column_comment=comment,
        )

    def build_gorm_tag(self) -> str:
        """Return the ORM tag describing the column."""
        parts = [f"column:{self.name};type:{self.column_type()}"]
        is_primary = bool(self.spec.primary_key)
        if is_primary:
            parts.append(";primaryKey")
            if self.spec.auto_increment is not None:
                parts.append(f";autoIncrement:{'true' if self.spec.auto_increment else 'false'}")
        elif self.spec.nullable is False:
            parts.append(";not null")

        for idx in self.indexes:
            if idx is None or idx.primary_key:
                continue
            kind = "uniqueIndex" if idx.unique else "index"
            parts.append(f";{kind}:{idx.name},priority:{idx.priority}")

        default = self.default_tag_value()
        if not is_primary and self.need_default_tag(default):
            parts.append(f";default:{default}")
        return "".join(parts)

    def need_default_tag(self, default_tag_value: str) -> bool:
        """Return True if the default value is worth recording in the tag."""
        if not default_tag_value:
            return False
        kind = _scan_kind(self.spec.scan_type)
        if kind == "bool":
            return default_tag_value != "false"
        if kind == "number":
            return default_tag_value != "0"
        if kind == "string":
            return default_tag_value != ""
        if kind == "struct":
            return default_tag_value.strip("'0:- ") != ""
        return self.name not in ("created_at", "updated_at")

    def default_tag_value(self) -> str:
        """Return the default value as written in the tag."""
        value = self.spec.default_value
        if value is None:
            return ""
        if value and not value.strip():
            return f"'{value}'"
        return value

    def column_type(self) -> str:
        """Return the full column type, or the database type name if unknown."""
        if self.spec.column_type is not None:
            return self.spec.column_type
        return self.spec.database_type_name