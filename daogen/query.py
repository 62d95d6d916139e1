"""Query struct descriptions built from table columns, objects and custom interfaces."""

from __future__ import annotations

import dataclasses
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence

from daogen.column import Column
from daogen.helper import Object, check_object
from daogen.interface import InterfaceMethod
from daogen.model import (
    DO_KEYWORDS,
    GORM_KEYWORDS,
    Config,
    Field,
    FieldOption,
    KeyWord,
    SourceCode,
)
from daogen.params import InterfaceSet, Method, Param
from daogen.utils import get_package_name, is_capitalize, uncapitalize

log = logging.getLogger(__name__)

_MODEL_NAME = re.compile(r"^\w+$", re.ASCII)

_INITIALISMS = (
    "API", "ASCII", "CPU", "CSS", "DNS", "EOF", "GUID", "HTML", "HTTP", "HTTPS",
    "ID", "IP", "JSON", "LHS", "QPS", "RAM", "RHS", "RPC", "SLA", "SMTP", "SSH",
    "TLS", "TTL", "UID", "UI", "UUID", "URI", "URL", "UTF8", "VM", "XML", "XSRF", "XSS",
)
_INITIALISM_PATTERNS = tuple(
    (re.compile(word[:1] + word[1:].lower() + "([A-Z]|$|_)"), word) for word in _INITIALISMS
)
_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

SchemaName = Optional[Callable[[str], str]]


def _default_schema_name(name: str) -> str:
    """Turn a snake_case column name into a CamelCase field name."""
    result = "".join(word[:1].upper() + word[1:] for word in name.replace("_", " ").split(" "))
    for pattern, word in _INITIALISM_PATTERNS:
        result = pattern.sub(lambda m, w=word: w + m.group(1), result)
    return result


def _to_db_name(name: str) -> str:
    """Turn a CamelCase name into snake_case."""
    return _WORD_BOUNDARY.sub("_", name).lower()


@dataclass
class QueryStructMeta:
    """Description of a model struct and the query code generated for it."""

    generated: bool = False
    file_name: str = ""
    s: str = ""
    query_struct_name: str = ""
    model_struct_name: str = ""
    table_name: str = ""
    struct_info: Param = field(default_factory=Param)
    fields: list[Field] = field(default_factory=list)
    source: SourceCode = SourceCode.STRUCT
    import_pkg_paths: list[str] = field(default_factory=list)
    model_methods: list[Method] = field(default_factory=list)
    interface_mode: bool = False

    def revise_field_name(self) -> None:
        """Escape field names that clash with query methods."""
        self.revise_field_name_for(GORM_KEYWORDS)

    def revise_field_name_for(self, keywords: KeyWord) -> None:
        """Escape field names that are among ``keywords``."""
        for f in self.fields:
            f.escape_keyword_for(keywords)

    def append_or_update_field(self, f: Field) -> None:
        """Replace the field of the same name, or append the field."""
        if f.is_relation():
            self.fields.append(f)
        if not f.column_name:
            return
        for i, existing in enumerate(self.fields):
            if existing.name == f.name:
                self.fields[i] = f
                return
        self.fields.append(f)

    def has_field(self) -> bool:
        return bool(self.fields)

    def check(self) -> None:
        """Raise ValueError if no query code can be generated for this struct."""
        if self.struct_info.in_main_pkg():
            raise ValueError(
                f"can't generated data object for struct in main package, ignore:{self.model_struct_name}"
            )
        if not is_capitalize(self.model_struct_name):
            raise ValueError(
                f"can't generated data object for non-exportable struct, ignore:{self.query_struct_name}"
            )

    def relations(self) -> list[Any]:
        """Return the relations of the relation fields."""
        return [f.relation for f in self.fields if f.is_relation()]

    def struct_comment(self) -> str:
        if self.table_name:
            return f"mapped from table <{self.table_name}>"
        return "mapped from object"

    def revise_diy_method(self) -> None:
        """Bind custom methods to the model, dropping duplicates; raise ValueError if any were dropped."""
        duplicated: list[str] = []
        methods: list[Method] = []
        seen: set[str] = set()
        for method in self.model_methods:
            if method.method_name in seen or method.method_name == "TableName":
                duplicated.append(method.method_name)
                continue
            method.receiver.package = ""
            method.receiver.type = self.model_struct_name
            methods.append(method)
            seen.add(method.method_name)
        self.model_methods = methods
        if duplicated:
            raise ValueError(
                "can't generate struct with duplicated method, please check method name: "
                + ",".join(duplicated)
            )

    def _add_methods(self, methods: Iterable[Any]) -> "QueryStructMeta":
        for method in methods:
            if isinstance(method, Method):
                self.model_methods.append(method)
            elif isinstance(method, Iterable) and not isinstance(method, (str, bytes)):
                items = list(method)
                if not all(isinstance(m, Method) for m in items):
                    raise TypeError("add diy method err: method param must be a Method")
                self.model_methods.extend(items)
            else:
                raise TypeError("add diy method err: method param must be a Method")
        try:
            self.revise_diy_method()
        except ValueError as err:
            log.warning("%s", err)
        return self

    def iface_mode(self, on: bool) -> "QueryStructMeta":
        """Return a copy with interface mode switched on or off."""
        return dataclasses.replace(self, interface_mode=on)

    def return_object(self) -> str:
        """Return the type returned by chained query methods in generated code."""
        if self.interface_mode:
            return f"I{self.model_struct_name}Do"
        return f"*{self.query_struct_name}Do"


def filter_field(m: Field, opts: Iterable[FieldOption]) -> Optional[Field]:
    """Return None if any filter drops the field, else the field."""
    for opt in opts:
        if opt(m) is None:
            return None
    return m


def modify_field(m: Field, opts: Iterable[FieldOption]) -> Field:
    """Apply every modify option to the field in turn."""
    for opt in opts:
        m = opt(m)
    return m


def check_struct_name(name: str) -> None:
    """Raise ValueError if ``name`` is not a valid exported struct name."""
    if not name:
        return
    if not _MODEL_NAME.match(name):
        raise ValueError("model name cannot contains invalid character")
    if not ("A" <= name[0] <= "Z"):
        raise ValueError("model name must be initial capital")


def get_fields(conf: Config, columns: Iterable[Column], schema_name: SchemaName = None) -> list[Field]:
    """Convert table columns to model fields, applying the configured options."""
    to_name = schema_name or _default_schema_name
    fields: list[Field] = []
    for col in columns:
        col.set_data_type_map(conf.data_type_map)
        col.with_ns(conf.field_json_tag_ns, conf.field_new_tag_ns)
        m = col.to_field(conf.field_nullable, conf.field_coverable, conf.field_signable)

        if filter_field(m, conf.filter_opts) is None:
            continue
        column_type = col.spec.column_type
        if column_type is not None and not conf.field_with_type_tag:
            m.gorm_tag = m.gorm_tag.replace(";type:" + column_type, "")

        m = modify_field(m, conf.modify_opts)
        m.name = to_name(m.name)
        fields.append(m)

    for create in conf.create_opts:
        m = create(None)
        if m.relation is not None:
            m.type = m.type.replace(conf.model_pkg + ".", "")
        fields.append(m)
    return fields


def get_query_struct_meta(
    conf: Config, columns: Iterable[Column], schema_name: SchemaName = None
) -> Optional[QueryStructMeta]:
    """Describe the model for a table; return None if the table is to be ignored."""
    conf = conf.preprocess()
    table_name, struct_name, file_name = conf.get_names()
    if not table_name:
        return None
    try:
        check_struct_name(struct_name)
    except ValueError as err:
        raise ValueError(f"model name {struct_name!r} is invalid: {err}") from err

    meta = QueryStructMeta(
        source=SourceCode.TABLE,
        generated=True,
        file_name=file_name,
        table_name=table_name,
        model_struct_name=struct_name,
        query_struct_name=uncapitalize(struct_name),
        s=struct_name[:1].lower(),
        struct_info=Param(type=struct_name, package=conf.model_pkg),
        import_pkg_paths=list(conf.import_pkg_paths),
        fields=get_fields(conf, columns, schema_name),
    )
    return meta._add_methods(conf.get_model_methods())


def get_query_struct_meta_from_object(obj: Object, conf: Config) -> QueryStructMeta:
    """Describe the model given by a user object."""
    check_object(obj)
    conf = conf.preprocess()

    table_name = obj.table_name()
    if conf.table_name_ns is not None:
        table_name = conf.table_name_ns(table_name)

    struct_name = obj.struct_name()
    if conf.model_name_ns is not None:
        struct_name = conf.model_name_ns(struct_name)

    file_name = obj.file_name() or table_name or struct_name
    if conf.file_name_ns is not None:
        file_name = conf.file_name_ns(file_name)
    else:
        file_name = _to_db_name(file_name)

    fields = [
        Field(
            name=f.name(),
            type=f.type(),
            column_name=f.column_name(),
            gorm_tag=f.gorm_tag(),
            json_tag=f.json_tag(),
            new_tag=f.tag(),
            column_comment=f.comment(),
            multiline_comment="\n" in f.comment(),
        )
        for f in obj.fields()
    ]

    return QueryStructMeta(
        source=SourceCode.OBJECT,
        generated=True,
        file_name=file_name,
        table_name=table_name,
        model_struct_name=struct_name,
        query_struct_name=uncapitalize(struct_name),
        s=struct_name[:1].lower(),
        struct_info=Param(type=struct_name, package=conf.model_pkg),
        import_pkg_paths=list(conf.import_pkg_paths) + list(obj.import_pkg_paths()),
        fields=fields,
    )


def build_diy_method(
    interface_set: InterfaceSet, meta: QueryStructMeta, data: Sequence[InterfaceMethod]
) -> list[InterfaceMethod]:
    """Check the interface methods that apply to ``meta`` and build their SQL code."""
    results: list[InterfaceMethod] = []
    for info in interface_set.interfaces:
        if not info.match_struct(meta.model_struct_name):
            continue
        for method in info.methods:
            t = InterfaceMethod(
                s=meta.s,
                target_struct=meta.query_struct_name,
                origin_struct=meta.struct_info,
                method_name=method.method_name,
                params=list(method.params),
                doc=method.doc,
                table=meta.table_name,
                interface_name=info.name,
                package=get_package_name(info.package),
            )
            t.check_method(data, meta)
            t.check_params(method.params)
            t.check_result(method.result)
            t.check_sql()
            try:
                t.section.build_sql()
            except ValueError as err:
                raise ValueError(f"sql [{t.sql_string}] build err:{err}") from err
            results.append(t)
    return results


def get_struct_names(bases: Iterable[QueryStructMeta]) -> list[str]:
    """Return the model struct names of the given descriptions."""
    return [base.model_struct_name for base in bases]


__all__ = [
    "DO_KEYWORDS",
    "QueryStructMeta",
    "build_diy_method",
    "check_struct_name",
    "filter_field",
    "get_fields",
    "get_query_struct_meta",
    "get_query_struct_meta_from_object",
    "get_struct_names",
    "modify_field",
]