"""Core data model: SQL template states, keywords, fields, options and model config."""

from __future__ import annotations

import enum
import posixpath
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

DEFAULT_MODEL_PKG = "model"
DEFAULT_DATA_TYPE = "string"

FIELD_OPTION_TYPE = "field"
METHOD_OPTION_TYPE = "method"


class Status(enum.IntEnum):
    """State of a chunk of a templated SQL statement."""

    UNKNOWN = 0
    SQL = 1
    DATA = 2
    VARIABLE = 3
    IF = 4
    ELSE = 5
    WHERE = 6
    SET = 7
    FOR = 8
    END = 9


class SourceCode(enum.IntEnum):
    """Where a query struct description came from."""

    STRUCT = 0
    TABLE = 1
    OBJECT = 2


@dataclass(frozen=True)
class KeyWord:
    """A set of reserved words."""

    words: tuple[str, ...]

    def full_match(self, word: str) -> bool:
        """Return True if ``word`` is exactly one of the reserved words."""
        return word in self.words

    def contain(self, text: str) -> bool:
        """Return True if any reserved word occurs inside ``text``."""
        return any(item in text for item in self.words)


GORM_KEYWORDS = KeyWord(
    (
        "UnderlyingDB", "UseDB", "UseModel", "UseTable", "Quote", "Debug", "TableName", "WithContext",
        "As", "Not", "Or", "Build", "Columns", "Hints",
        "Distinct", "Omit",
        "Select", "Where", "Order", "Group", "Having", "Limit", "Offset",
        "Join", "LeftJoin", "RightJoin",
        "Save", "Create", "CreateInBatches",
        "Update", "Updates", "UpdateColumn", "UpdateColumns",
        "Find", "FindInBatches", "First", "Take", "Last", "Pluck", "Count",
        "Scan", "ScanRows", "Row", "Rows",
        "Delete", "Unscoped",
        "Scopes",
    )
)

DO_KEYWORDS = KeyWord(("Alias", "TableName", "WithContext"))

GEN_KEYWORDS = KeyWord(("generateSQL", "whereClause", "setClause"))


def _constant(value: str) -> Callable[[str], str]:
    return lambda _detail: value


def _tinyint(detail_type: str) -> str:
    if detail_type.strip().startswith("tinyint(1)"):
        return "bool"
    return "int32"


_DATA_TYPES: dict[str, Callable[[str], str]] = {
    "numeric": _constant("int32"),
    "integer": _constant("int32"),
    "int": _constant("int32"),
    "smallint": _constant("int32"),
    "mediumint": _constant("int32"),
    "bigint": _constant("int64"),
    "float": _constant("float32"),
    "real": _constant("float64"),
    "double": _constant("float64"),
    "decimal": _constant("float64"),
    "char": _constant("string"),
    "varchar": _constant("string"),
    "tinytext": _constant("string"),
    "mediumtext": _constant("string"),
    "longtext": _constant("string"),
    "binary": _constant("[]byte"),
    "varbinary": _constant("[]byte"),
    "tinyblob": _constant("[]byte"),
    "blob": _constant("[]byte"),
    "mediumblob": _constant("[]byte"),
    "longblob": _constant("[]byte"),
    "text": _constant("string"),
    "json": _constant("string"),
    "enum": _constant("string"),
    "time": _constant("time.Time"),
    "date": _constant("time.Time"),
    "datetime": _constant("time.Time"),
    "timestamp": _constant("time.Time"),
    "year": _constant("int32"),
    "bit": _constant("[]uint8"),
    "boolean": _constant("bool"),
    "tinyint": _tinyint,
}


def lookup_data_type(data_type: str, detail_type: str) -> str:
    """Map a database column type to a generated field type."""
    convert = _DATA_TYPES.get(data_type.lower())
    if convert is None:
        return DEFAULT_DATA_TYPE
    return convert(detail_type)


_TITLED_TYPES = frozenset(
    {
        "string", "bytes",
        "int", "int8", "int16", "int32", "int64",
        "uint", "uint8", "uint16", "uint32", "uint64",
        "float64", "float32",
        "bool",
    }
)


@dataclass
class Field:
    """A member of a generated model struct."""

    name: str = ""
    type: str = ""
    column_name: str = ""
    column_comment: str = ""
    multiline_comment: bool = False
    json_tag: str = ""
    gorm_tag: str = ""
    new_tag: str = ""
    overwrite_tag: str = ""
    custom_gen_type: str = ""
    relation: Optional[Any] = None

    def tags(self) -> str:
        """Return the struct tag text for this field."""
        if self.overwrite_tag:
            return self.overwrite_tag.strip()
        parts = []
        gorm_tag = self.gorm_tag.strip()
        if gorm_tag:
            parts.append(f'gorm:"{gorm_tag}" ')
        json_tag = self.json_tag.strip()
        if json_tag:
            parts.append(f'json:"{json_tag}" ')
        new_tag = self.new_tag.strip()
        if new_tag:
            parts.append(new_tag)
        return "".join(parts).strip()

    def is_relation(self) -> bool:
        return self.relation is not None

    def gen_type(self) -> str:
        """Return the name of the query field type used for this field."""
        if self.is_relation():
            return self.type
        if self.custom_gen_type:
            return self.custom_gen_type
        typ = self.type.lstrip("*")
        if typ in _TITLED_TYPES:
            return typ[:1].upper() + typ[1:]
        if typ == "time.Time":
            return "Time"
        if typ in ("json.RawMessage", "[]byte"):
            return "Bytes"
        return "Field"

    def escape_keyword(self) -> "Field":
        return self.escape_keyword_for(GORM_KEYWORDS)

    def escape_keyword_for(self, keywords: KeyWord) -> "Field":
        """Append an underscore to the name if it is a reserved word."""
        if keywords.full_match(self.name):
            self.name += "_"
        return self


_WHITESPACE = ("\n", "\t", " ")


class SQLBuffer:
    """Text buffer that collapses runs of whitespace into a single space."""

    def __init__(self) -> None:
        self._text = ""

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def write(self, text: str) -> None:
        """Append text verbatim."""
        self._text += text

    def write_sql(self, ch: str) -> None:
        """Append one character, turning whitespace into at most one space."""
        if ch in _WHITESPACE:
            if not self._text.endswith(" "):
                self._text += " "
        else:
            self._text += ch

    def dump(self) -> str:
        """Return the buffered text and empty the buffer."""
        text, self._text = self._text, ""
        return text


FieldOperator = Callable[[Optional[Field]], Optional[Field]]


@dataclass(frozen=True)
class FieldOption:
    """An option that acts on a model field."""

    operator: FieldOperator

    def option_type(self) -> str:
        return FIELD_OPTION_TYPE

    def __call__(self, f: Optional[Field]) -> Optional[Field]:
        return self.operator(f)


class ModifyFieldOpt(FieldOption):
    """Changes a field in place."""


class FilterFieldOpt(FieldOption):
    """Drops a field by returning None."""


class CreateFieldOpt(FieldOption):
    """Creates a new field."""


@dataclass(frozen=True)
class AddMethodOpt:
    """Adds custom methods to a model."""

    provider: Callable[[], Iterable[Any]]

    def option_type(self) -> str:
        return METHOD_OPTION_TYPE

    def methods(self) -> list[Any]:
        return list(self.provider())


def sort_options(opts: Iterable[Any]):
    """Split options into (modify, filter, create, method) lists."""
    modify: list[FieldOption] = []
    filters: list[FieldOption] = []
    create: list[FieldOption] = []
    methods: list[AddMethodOpt] = []
    for opt in opts:
        if isinstance(opt, ModifyFieldOpt):
            modify.append(opt)
        elif isinstance(opt, FilterFieldOpt):
            filters.append(opt)
        elif isinstance(opt, CreateFieldOpt):
            create.append(opt)
        elif isinstance(opt, AddMethodOpt):
            methods.append(opt)
    return modify, filters, create, methods


def _base_name(path: str) -> str:
    stripped = path.rstrip("/")
    if not stripped:
        return "/" if path else "."
    return posixpath.basename(stripped)


NameFunc = Optional[Callable[[str], str]]


@dataclass
class Config:
    """Configuration for generating one model."""

    model_pkg: str = ""
    table_prefix: str = ""
    table_name: str = ""
    model_name: str = ""

    import_pkg_paths: list[str] = field(default_factory=list)
    model_opts: list[Any] = field(default_factory=list)

    schema_name_opts: list[Callable[[Any], str]] = field(default_factory=list)
    table_name_ns: NameFunc = None
    model_name_ns: NameFunc = None
    file_name_ns: NameFunc = None

    data_type_map: dict[str, Callable[[str], str]] = field(default_factory=dict)
    field_nullable: bool = False
    field_coverable: bool = False
    field_signable: bool = False
    field_with_index_tag: bool = False
    field_with_type_tag: bool = False
    field_json_tag_ns: NameFunc = None
    field_new_tag_ns: NameFunc = None

    modify_opts: list[FieldOption] = field(default_factory=list)
    filter_opts: list[FieldOption] = field(default_factory=list)
    create_opts: list[FieldOption] = field(default_factory=list)
    method_opts: list[AddMethodOpt] = field(default_factory=list)

    def preprocess(self) -> "Config":
        """Fill defaults and sort the model options by kind."""
        if not self.model_pkg:
            self.model_pkg = DEFAULT_MODEL_PKG
        self.model_pkg = _base_name(self.model_pkg)
        (
            self.modify_opts,
            self.filter_opts,
            self.create_opts,
            self.method_opts,
        ) = sort_options(self.model_opts)
        return self

    def get_names(self) -> tuple[str, str, str]:
        """Return (table name, struct name, file name)."""
        table_name, struct_name = self.table_name, self.model_name
        if self.model_name_ns is not None:
            struct_name = self.model_name_ns(table_name)
        if self.table_name_ns is not None:
            table_name = self.table_name_ns(table_name)
        if not table_name.startswith(self.table_prefix):
            table_name = self.table_prefix + table_name

        file_name = table_name.lower()
        if self.file_name_ns is not None:
            file_name = self.file_name_ns(self.table_name)
        return table_name, struct_name, file_name

    def get_model_methods(self) -> list[Any]:
        """Return all methods supplied by the method options."""
        return [method for opt in self.method_opts for method in opt.methods()]

    def get_schema_name(self, db: Any) -> str:
        """Return the first non-empty schema name given by the options."""
        for opt in self.schema_name_opts:
            name = opt(db)
            if name:
                return name
        return ""