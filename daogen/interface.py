"""Custom query methods declared on interfaces, checked and turned into builder code."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from daogen.model import GORM_KEYWORDS, SQLBuffer, Status
from daogen.params import Param, param_to_string
from daogen.section import Part, Section
from daogen.utils import is_end


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _incomplete(sql: str) -> ValueError:
    return ValueError(f"incomplete SQL:{sql}")


@dataclass
class InterfaceMethod:
    """A method of an interface, to be generated for one query struct."""

    doc: str = ""
    s: str = ""
    origin_struct: Param = field(default_factory=Param)
    target_struct: str = ""
    method_name: str = ""
    params: list[Param] = field(default_factory=list)
    result: list[Param] = field(default_factory=list)
    result_data: Param = field(default_factory=Param)
    section: Section = field(default_factory=Section)
    sql_params: list[Param] = field(default_factory=list)
    sql_string: str = ""
    gorm_option: str = ""
    table: str = ""
    interface_name: str = ""
    package: str = ""
    has_for_params: bool = False

    def func_sign(self) -> str:
        return f"{self.method_name}({self.get_param_in_tmpl()}) ({self.get_result_param_in_tmpl()})"

    def has_sql_data(self) -> bool:
        """Return True if a params map is needed in the generated code."""
        return bool(self.sql_params) or self.has_for_params

    def has_got_point(self) -> bool:
        return not self.has_need_new_result()

    def has_need_new_result(self) -> bool:
        data = self.result_data
        return not data.is_array and ((data.is_null() and data.is_time()) or data.is_map())

    def gorm_run_method_name(self) -> str:
        return "Find" if self.result_data.is_array else "Take"

    def return_rows_affected(self) -> bool:
        return any(res.name == "rowsAffected" for res in self.result)

    def return_error(self) -> bool:
        return any(res.is_error() for res in self.result)

    def is_repeat_from_different_interface(self, new_method: "InterfaceMethod") -> bool:
        return (
            self.method_name == new_method.method_name
            and self.interface_name != new_method.interface_name
            and self.target_struct == new_method.target_struct
        )

    def is_repeat_from_same_interface(self, new_method: "InterfaceMethod") -> bool:
        return (
            self.method_name == new_method.method_name
            and self.interface_name == new_method.interface_name
            and self.target_struct == new_method.target_struct
        )

    def get_param_in_tmpl(self) -> str:
        return param_to_string(self.params)

    def get_result_param_in_tmpl(self) -> str:
        return param_to_string(self.result)

    def sql_param_name(self, param: str) -> str:
        """Return the params map key for a SQL variable."""
        return param.replace(".", "")

    def doc_comment(self) -> str:
        return self.doc.strip().replace("\n", "\n//")

    def check_method(self, methods: Iterable["InterfaceMethod"], meta: Any) -> None:
        """Raise ValueError if the method name clashes with keywords, methods or fields."""
        if GORM_KEYWORDS.full_match(self.method_name):
            raise ValueError(f"can not use keyword as method name:{self.method_name}")
        for method in methods:
            if self.is_repeat_from_different_interface(method):
                raise ValueError(
                    "can not generate method with the same name from different interface:"
                    f"[{self.interface_name}.{self.method_name}] and "
                    f"[{method.interface_name}.{method.method_name}]"
                )
        for f in meta.fields:
            if f.name == self.method_name:
                raise ValueError(
                    "can not generate method same name with struct field:"
                    f"[{self.interface_name}.{self.method_name}] and "
                    f"[{meta.model_struct_name}.{f.name}]"
                )

    def check_params(self, params: Iterable[Param]) -> None:
        """Validate the input parameters and resolve placeholder types."""
        checked = []
        for original in params:
            param = dataclasses.replace(original)
            if param.package == "UNDEFINED":
                param.package = self.package
            elif param.is_map() or param.is_gen_m() or param.is_error() or param.is_null():
                raise ValueError(f"type error on interface [{self.interface_name}] param: [{param.name}]")
            elif param.is_gen_t():
                param.type = self.origin_struct.type
                param.package = self.origin_struct.package
            checked.append(param)
        self.params = checked

    def check_result(self, result: Iterable[Param]) -> None:
        """Validate the results and replace generic types by the target struct."""
        checked = []
        has_error = False
        where = f"[{self.interface_name}.{self.method_name}]"
        for original in result:
            param = dataclasses.replace(original)
            if param.package == "UNDEFINED":
                param.package = self.package
            if param.is_gen_m():
                param.type = "map[string]interface{}"
                param.package = ""

            if param.in_main_pkg():
                raise ValueError(f"query method cannot return struct of main package in {where}")
            if param.is_error():
                if has_error:
                    raise ValueError(f"query method cannot return more than 1 error value in {where}")
                param.name = "err"
                has_error = True
            elif param.eq(self.origin_struct) or param.is_gen_t():
                if not self.result_data.is_null():
                    raise ValueError(f"query method cannot return more than 1 data value in {where}")
                param.name = "result"
                param.type = self.origin_struct.type
                param.package = self.origin_struct.package
                param.is_pointer = True
                self.result_data = param
            elif param.is_interface():
                raise ValueError(f"query method can not return interface in {where}")
            elif param.is_gen_rows_affected():
                param.type = "int64"
                param.package = ""
                param.name = "rowsAffected"
                self.gorm_option = "Exec"
            else:
                if not self.result_data.is_null():
                    raise ValueError(f"query method cannot return more than 1 data value in {where}")
                if param.package == "" and not (param.is_base_type() or param.is_map() or param.is_time()):
                    param.package = self.package
                param.name = "result"
                self.result_data = param
            checked.append(param)
        self.result = checked

    def check_sql(self) -> None:
        """Take the SQL from the documentation and split it into sections."""
        self.sql_string = self.parse_doc_string()
        try:
            self.sql_state_check_and_split()
        except ValueError as err:
            raise ValueError(
                f"interface {self.interface_name} member method {self.method_name} check sql err:{err}"
            ) from err

    def _raw_or_exec(self) -> str:
        return "Exec" if self.result_data.is_null() else "Raw"

    def parse_doc_string(self) -> str:
        """Extract the SQL text from the documentation and choose the execution method."""
        doc = self.get_sql_doc_string().strip()
        lower = doc.lower()
        if lower.startswith("sql("):
            doc = doc[4:-1]
            self.gorm_option = self._raw_or_exec()
        elif lower.startswith("where("):
            doc = doc[6:-1]
            self.gorm_option = "Where"
        else:
            self.gorm_option = self._raw_or_exec()

        if len(doc) >= 2 and doc.startswith('"') and doc.endswith('"'):
            doc = doc[1:-1]
        return doc

    def get_sql_doc_string(self) -> str:
        """Return the part of the documentation that holds the SQL."""
        doc = self.doc.strip()
        index = doc.find("\n\n")
        if index != -1:
            if self.method_name in doc[index + 2:]:
                doc = doc[:index]
            else:
                doc = doc[index + 2:]
        if doc.startswith(self.method_name):
            doc = doc[len(self.method_name):]
        return doc

    def _flush_sql(self, buf: SQLBuffer) -> None:
        text = buf.dump()
        if text.strip():
            self.section.members.append(Part(type=Status.SQL, value=_quote(text)))

    def sql_state_check_and_split(self) -> None:
        """Split the SQL into text, variables and templates; raise ValueError if malformed."""
        sql = self.sql_string
        n = len(sql)
        self.section = Section()
        buf = SQLBuffer()

        def copy_quoted(i: int, quote: str) -> int:
            # i points at the opening quote; returns the index of the closing one
            buf.write(sql[i])
            i += 1
            while True:
                if i >= n:
                    raise _incomplete(sql)
                buf.write(sql[i])
                if sql[i] == quote and sql[i - 1] != "\\":
                    return i
                i += 1

        i = 0
        while i < n:
            b = sql[i]
            if b in ('"', "'"):
                i = copy_quoted(i, b)
            elif b == "\\":
                if i + 1 < n and sql[i + 1] == "@":
                    i += 1
                    buf.write_sql(sql[i])
                else:
                    buf.write_sql(b)
            elif b in ("{", "@"):
                self._flush_sql(buf)
                if i + 1 >= n:
                    raise _incomplete(sql)
                if b == "{" and sql[i + 1] == "{":
                    i += 2
                    while True:
                        if i >= n:
                            raise _incomplete(sql)
                        if sql[i] == '"':
                            i = copy_quoted(i, '"') + 1
                        if i + 1 >= n:
                            raise _incomplete(sql)
                        if sql[i] == "}" and sql[i + 1] == "}":
                            i += 1
                            template = buf.dump()
                            try:
                                part = self.section.check_template(template)
                            except ValueError as err:
                                raise ValueError(
                                    f"sql [{sql}] dynamic template {template} err:{err}"
                                ) from err
                            self.section.members.append(part)
                            break
                        buf.write_sql(sql[i])
                        i += 1
                elif b == "@":
                    i += 1
                    status = Status.DATA
                    if sql[i] == "@":
                        i += 1
                        status = Status.VARIABLE
                    while True:
                        if i >= n or is_end(sql[i]):
                            var = buf.dump()
                            try:
                                part = self.section.check_sql_var(var, status, self)
                            except ValueError as err:
                                raise ValueError(f"sql [{sql}] varable {var} err:{err}") from err
                            self.section.members.append(part)
                            i -= 1
                            break
                        buf.write_sql(sql[i])
                        i += 1
            else:
                buf.write_sql(b)
            i += 1
        self._flush_sql(buf)

    def check_sql_var_by_params(self, param: str, status: Status) -> Part:
        """Resolve a SQL variable against the method's parameters or the table name."""
        struct_name = param.split(".")[0]
        for p in self.params:
            if p.name != struct_name:
                continue
            if p.name != param:
                p = Param(name=param, type="string")
            if status == Status.DATA:
                if not self.is_param_exist(param):
                    self.sql_params.append(p)
            elif status == Status.VARIABLE:
                if p.type != "string" or p.is_array:
                    raise ValueError(f"variable name must be string :{param} type is {p.type_name()}")
                param = f"{self.s}.Quote({param})"
            return Part(type=status, value=param)
        if param == "table":
            return Part(type=Status.SQL, value=_quote(self.table))
        raise ValueError(f"unknow variable param:{param}")

    def is_param_exist(self, param_name: str) -> bool:
        return any(p.name == param_name for p in self.sql_params)

    def get_test_param_in_tmpl(self) -> str:
        return test_param_to_string(self.params)

    def get_test_result_param_in_tmpl(self) -> str:
        return ",".join(f"res{i}" for i, _ in enumerate(self.result, start=1))

    def get_assert_in_tmpl(self) -> str:
        """Return the assertion lines for a generated unit test."""
        name = _quote(self.method_name)
        return "\n".join(
            f"assert(t, {name}, res{i + 1}, tt.Expectation.Ret[{i}])" for i, _ in enumerate(self.result)
        )


def test_param_to_string(params: Sequence[Param]) -> str:
    """Render the arguments of a generated unit test call."""
    args = []
    for i, param in enumerate(params):
        typ = param.type
        if param.package:
            typ = f"{param.package}.{typ}"
        if param.is_array:
            typ = "[]" + typ
        if param.is_pointer:
            typ = "*" + typ
        args.append(f"tt.Input.Args[{i}].({typ})")
    return ",".join(args)


test_param_to_string.__test__ = False