# daogen

`daogen` is a library that produces source code for data-access layers.
It turns table column metadata into model struct definitions. It also
checks interface methods whose doc comments hold annotated SQL, and it
works out the lines of code that assemble that SQL at run time.

## Installation

```
pip install daogen
```

To install the test suite's requirements as well and run it:

```
pip install "daogen[test]"
pytest
```

## Modules

- `daogen.model` holds the core data types. `Field` is a member of a
  generated struct: `tags()` renders its struct tag and `gen_type()`
  names its query field type. `Status` lists the kinds of SQL section.
  `KeyWord` is a set of reserved words, and `GORM_KEYWORDS`,
  `DO_KEYWORDS` and `GEN_KEYWORDS` are the sets in use.
  `lookup_data_type` maps a database type to a field type. `SQLBuffer`
  is a text buffer that collapses whitespace. `Config` carries the
  settings for generating one model. The option classes are
  `ModifyFieldOpt`, `FilterFieldOpt`, `CreateFieldOpt` and
  `AddMethodOpt`, and `sort_options` splits a list of options by kind.
- `daogen.column` describes table columns. `ColumnType` holds what the
  database reports about a column, `Index` describes an index, and
  `group_by_column` maps each column to the indexes that cover it.
  `Column.to_field` turns a column into a `Field`. It uses
  `Column.build_gorm_tag` to write the ORM tag, in the form
  `column:…;type:…;primaryKey;autoIncrement:…;not null;index:…,priority:…;default:…`.
- `daogen.options` holds the options that shape generated fields:
  `field_new`, `field_ignore`, `field_ignore_reg`, `field_rename`,
  `field_comment`, `field_type`, `field_type_reg`, `field_gen_type`,
  `field_gen_type_reg`, `field_tag`, `field_json_tag`,
  `field_json_tag_with_ns`, `field_gorm_tag`, `field_new_tag`,
  `field_new_tag_with_ns`, `field_trim_prefix`, `field_trim_suffix`,
  `field_add_prefix`, `field_add_suffix` and `with_method`.
- `daogen.params` describes method signatures with `Param`, `Method`,
  `InterfaceInfo` and `InterfaceSet`.
- `daogen.interface` has `InterfaceMethod`, which checks a method's
  name, parameters and results. It reads the SQL from the method's doc
  comment and splits it into sections.
- `daogen.section` has `Section`, which holds the split SQL, and `Part`,
  one chunk of it. `Section.build_sql` produces the clause objects of
  `daogen.clauses` and the generated code lines, which it keeps in
  `Section.tmpls`.
- `daogen.query` builds a `QueryStructMeta`. `get_query_struct_meta`
  builds one from a `Config` and a list of `Column`s, and
  `get_query_struct_meta_from_object` builds one from a described
  object. `build_diy_method` checks the methods of an `InterfaceSet`
  against a `QueryStructMeta`.
- `daogen.templates` renders output with `render_header`,
  `render_model` and `render_model_method`.
- `daogen.imports` has `ImportList`, an immutable list of quoted,
  de-duplicated import paths. Empty entries separate the groups.
  `IMPORT_LIST` and `UNIT_TEST_IMPORT_LIST` are the default lists.
- `daogen.helper` holds the run-time SQL helpers described below.

## Dynamic SQL

The SQL in a method's doc comment may contain the following:

- `@name` – data bound as a parameter.
- `@@name` – a quoted identifier. `@@table` becomes the table name.
- `{{if …}}`, `{{else …}}`, `{{where}}`, `{{set}}` and
  `{{for i, v := range list}}` blocks, each closed by `{{end}}`.

```python
from daogen.interface import InterfaceMethod
from daogen.params import Param

m = InterfaceMethod(table="users", params=[Param(name="id", type="int")])
m.sql_string = "select * from @@table {{where}} id>@id{{end}}"
m.sql_state_check_and_split()
m.section.build_sql()
print("\n".join(m.section.tmpls))
# generateSQL.WriteString("select * from users ")
# var whereSQL0 strings.Builder
# params["id"] = id
# whereSQL0.WriteString("id>@id ")
# helper.JoinWhereBuilder(&generateSQL,whereSQL0)
```

## Run-time SQL helpers

The functions in `daogen.helper` assemble the final SQL text from
optional fragments. They drop a leading `AND`, `OR` or `XOR` and a
trailing comma:

```python
from daogen.helper import Cond, if_clause, set_clause, where_clause

where_clause(["id > 1", "and name = 'x'"])
# " WHERE id > 1 and name = 'x'"

set_clause(["name=@name,", "age=@age"])
# " SET name=@name,age=@age"

if_clause([Cond(True, "LIMIT 1"), Cond(False, "OFFSET 2")])
# " LIMIT 1 "
```

`join_where_builder` and `join_set_builder` take text that was built
up piece by piece and return it with a `WHERE …` or `SET …` prefix.
They return an empty string when nothing remains.

`check_object` checks an object description before a model is built
from it. It raises `ValueError` when the struct name is empty, or when
any field has no name or no type.

## Errors

The package raises `ValueError` in these cases:

- malformed SQL templates
- unknown variables
- method names that clash with keywords, fields or other interfaces
- invalid model names

The message names the method or the piece of SQL at fault.

## What it does not do

`daogen` is a library only. It has no command-line tool. It does not
connect to a database or list its tables, so the caller supplies the
columns as `ColumnType`/`Column` values. It does not parse source files
to find interfaces, so the caller supplies them as `InterfaceInfo`
values. It renders only file headers, model structs and model methods:
it has no templates for query structs or CRUD methods, and it writes
no files to disk.