"""Templates for file headers, model structs and model methods."""

from __future__ import annotations

from typing import Any, Iterable

import jinja2

NOT_EDIT_MARK = (
    "\n"
    "// Code generated by daogen. DO NOT EDIT.\n"
    "// Code generated by daogen. DO NOT EDIT.\n"
    "// Code generated by daogen. DO NOT EDIT.\n"
)

HEADER = NOT_EDIT_MARK + (
    "\n"
    "package {{ package }}\n"
    "\n"
    "import(\t\n"
    "\t{% for path in import_pkg_paths %}{{ path }}\n{% endfor %}\n"
    ")\n"
)

MODEL = NOT_EDIT_MARK + (
    "\n"
    "package {{ meta.struct_info.package }}\n"
    "\n"
    "import (\n"
    '\t"encoding/json"\n'
    '\t"time"\n'
    "\n"
    '\t"gorm.io/datatypes"\n'
    '\t"gorm.io/gorm"\n'
    "\t{% for path in meta.import_pkg_paths %}{{ path }} \n{% endfor %}\n"
    ")\n"
    "\n"
    "{% if meta.table_name -%}"
    'const TableName{{ meta.model_struct_name }} = "{{ meta.table_name }}"'
    "{%- endif %}\n"
    "\n"
    "// {{ meta.model_struct_name }} {{ meta.struct_comment() }}\n"
    "type {{ meta.model_struct_name }} struct {\n"
    "    {% for f in meta.fields %}\n"
    "\t{% if f.multiline_comment -%}\n"
    "\t/*\n"
    "{{ f.column_comment }}\n"
    "    */\n"
    "\t{% endif -%}\n"
    "    {{ f.name }} {{ f.type }} `{{ f.tags() }}` "
    "{% if not f.multiline_comment %}{% if f.column_comment %}// {{ f.column_comment }}{% endif %}{% endif %}"
    "{% endfor %}\n"
    "}\n"
    "\n"
    "{% if meta.table_name -%}\n"
    "// TableName {{ meta.model_struct_name }}'s table name\n"
    "func (*{{ meta.model_struct_name }}) TableName() string {\n"
    "    return TableName{{ meta.model_struct_name }}\n"
    "}\n"
    "{%- endif %}\n"
)

MODEL_METHOD = (
    "\n"
    "\n"
    "{% if method.doc -%}// {{ method.doc_comment() -}}{% endif %}\n"
    "func ({{ method.get_base_struct_tmpl() }}){{ method.method_name }}"
    "({{ method.get_param_in_tmpl() }})({{ method.get_result_param_in_tmpl() }}){{ method.body }}\n"
)

_ENV = jinja2.Environment(
    keep_trailing_newline=True,
    autoescape=False,
    undefined=jinja2.StrictUndefined,
)
_HEADER = _ENV.from_string(HEADER)
_MODEL = _ENV.from_string(MODEL)
_MODEL_METHOD = _ENV.from_string(MODEL_METHOD)


def render_header(package: str, import_pkg_paths: Iterable[str]) -> str:
    """Render the header of a generated file: the package clause and imports."""
    return _HEADER.render(package=package, import_pkg_paths=list(import_pkg_paths))


def render_model(meta: Any) -> str:
    """Render the model struct described by a query struct description."""
    return _MODEL.render(meta=meta)


def render_model_method(method: Any) -> str:
    """Render a custom method bound to a model struct."""
    return _MODEL_METHOD.render(method=method)