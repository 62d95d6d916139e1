"""Splitting of templated SQL into sections and generation of builder code lines."""

from __future__ import annotations

import dataclasses
import json
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from daogen.clauses import ElseClause, ForClause, IfClause, SetClause, SQLClause, WhereClause
from daogen.model import GEN_KEYWORDS, Status

_TEMPLATE_SEPARATORS = re.compile(r"[: =,]+")

_TEXT = frozenset({Status.SQL, Status.DATA, Status.VARIABLE})
_TOP_CHILDREN = _TEXT | {Status.IF, Status.WHERE, Status.SET, Status.FOR}
_IF_CHILDREN = _TOP_CHILDREN | {Status.ELSE}
_LOOP_CHILDREN = _TEXT | {Status.IF, Status.FOR}

_KEYWORD_STATUS = {
    "if": Status.IF,
    "else": Status.ELSE,
    "for": Status.FOR,
    "where": Status.WHERE,
    "set": Status.SET,
    "end": Status.END,
}

Clause = Union[SQLClause, IfClause, ElseClause, WhereClause, SetClause, ForClause]


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _title(text: str) -> str:
    """Upper-case the first letter of every word."""
    chars = []
    prev = " "
    for ch in text:
        separator = not (prev.isalnum() or prev == "_")
        chars.append(ch.upper() if separator else ch)
        prev = ch
    return "".join(chars)


@dataclass
class ForRange:
    """The header of a ``for index, value := range list`` template."""

    index: str = ""
    value: str = ""
    suffix: str = ""
    range_list: str = ""

    def __str__(self) -> str:
        return f"for {self.index}, {self.value} := range {self.range_list}"

    def _map_index_name(self, prefix: str, data_name: str, clause_name: str) -> str:
        key = data_name.replace(".", "")
        return f'"{prefix}{key}For{_title(clause_name)}_"+strconv.Itoa({self.index})'

    def data_value(self, data_name: str, clause_name: str) -> str:
        """Return the SQL placeholder expression for a loop variable."""
        return self._map_index_name("@", data_name, clause_name)

    def append_data_to_params(self, data_name: str, clause_name: str) -> str:
        """Return the code line storing a loop variable in the params map."""
        return f"params[{self._map_index_name('', data_name, clause_name)}]={self.value}{self.suffix}"


@dataclass
class Part:
    """One chunk of a templated SQL statement."""

    type: Status = Status.UNKNOWN
    value: str = ""
    for_range: ForRange = field(default_factory=ForRange)
    sql_slice: Optional["Section"] = field(default=None, repr=False)
    split_list: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        if self.type == Status.FOR:
            return str(self.for_range)
        return self.value

    def is_end(self) -> bool:
        return self.type == Status.END

    def split_template(self) -> None:
        """Split the template text into words."""
        self.split_list = [w for w in _TEMPLATE_SEPARATORS.split(self.value.strip()) if w]

    def check_template(self) -> None:
        """Validate the template and set the part's type; raise ValueError if invalid."""
        if not self.split_list:
            raise ValueError("template is null")
        if GEN_KEYWORDS.contain(self.value):
            raise ValueError("template can not use gen keywords")
        self.section_type(self.split_list[0])
        if self.type == Status.FOR:
            if len(self.split_list) != 5:
                raise ValueError(f"for range syntax error: {self.value}")
            if self.sql_slice is not None and self.sql_slice.has_same_name(self.split_list[2]):
                raise ValueError("cannot use the same value name in different for loops")
            self.for_range.index = self.split_list[1]
            self.for_range.value = self.split_list[2]
            self.for_range.range_list = self.split_list[4]

    def section_type(self, word: str) -> None:
        """Set the type from a template keyword; raise ValueError for unknown words."""
        try:
            self.type = _KEYWORD_STATUS[word]
        except KeyError:
            raise ValueError(f"unknown syntax: {word}") from None

    def set_for_range_key(self, key: str) -> None:
        """Rename the loop index and refresh the text of the part."""
        self.for_range.index = key
        self.value = str(self)

    def add_data_to_param_map(self) -> str:
        return f"params[{_quote(self.sql_param_name())}] = {self.value}"

    def sql_param_name(self) -> str:
        return self.value.replace(".", "")


def _initial_totals() -> dict[Status, int]:
    return {Status.WHERE: 0, Status.SET: 0}


@dataclass
class Section:
    """A templated SQL statement split into parts, and the code generated from it."""

    members: list[Part] = field(default_factory=list)
    tmpls: list[str] = field(default_factory=list)
    current_index: int = 0
    clause_total: dict[Status, int] = field(default_factory=_initial_totals)
    for_value: list[ForRange] = field(default_factory=list)

    def _next(self) -> Part:
        if self.current_index < len(self.members) - 1:
            self.current_index += 1
            return self.members[self.current_index]
        return Part(type=Status.END)

    def sub_index(self) -> None:
        """Step back by one part."""
        self.current_index -= 1

    def has_more(self) -> bool:
        return self.current_index < len(self.members) - 1

    def is_null(self) -> bool:
        return not self.members

    def _current(self) -> Part:
        return self.members[self.current_index]

    def _append_tmpl(self, line: str) -> None:
        self.tmpls.append(line)

    def _in_for_value(self, value: str) -> Optional[ForRange]:
        head, *rest = value.split(".")
        for candidate in self.for_value:
            if candidate.value == head:
                found = dataclasses.replace(candidate)
                if rest:
                    found.suffix = "." + ".".join(rest)
                return found
        return None

    def has_same_name(self, value: str) -> bool:
        return any(p.type == Status.FOR and p.for_range.value == value for p in self.members)

    def build_sql(self) -> list[Clause]:
        """Turn the parts into clauses, appending generated code lines to ``tmpls``."""
        if self.is_null():
            raise ValueError("sql is null")
        name = "generateSQL"
        result: list[Clause] = []
        while True:
            c = self._current()
            if c.type in _TOP_CHILDREN:
                result.append(self._parse_child(c.type, name))
            elif c.type != Status.END:
                raise ValueError(f"unknown clause: {c.value}")
            if not self.has_more():
                break
            self._next()
        return result

    def _parse_child(self, kind: Status, name: str) -> Clause:
        if kind in _TEXT:
            sql = self._parse_sql(name)
            self._append_tmpl(sql.finish())
            return sql
        if kind == Status.IF:
            if_clause = self._parse_if(name)
            self._append_tmpl(if_clause.finish())
            return if_clause
        if kind == Status.WHERE:
            where = self._parse_where()
            self._append_tmpl(where.finish(name))
            return where
        if kind == Status.SET:
            set_clause = self._parse_set()
            self._append_tmpl(set_clause.finish(name))
            return set_clause
        if kind == Status.FOR:
            for_clause = self._parse_for(name)
            self._append_tmpl(for_clause.finish())
            return for_clause
        return self._parse_else(name)

    def _parse_if(self, name: str) -> IfClause:
        res = IfClause(slice=self._current())
        self._append_tmpl(res.create())
        if not self.has_more():
            return res
        self._next()
        while True:
            c = self._current()
            if c.type == Status.END:
                return res
            if c.type not in _IF_CHILDREN:
                raise ValueError(f"unknown clause: {c.value}")
            res.value.append(self._parse_child(c.type, name))
            if not self.has_more():
                return res
            self._next()

    def _parse_else(self, name: str) -> ElseClause:
        res = ElseClause(slice=self._current())
        self._append_tmpl(res.create())
        if not self.has_more():
            return res
        self._next()
        while True:
            c = self._current()
            if c.type not in _IF_CHILDREN:
                self.sub_index()
                return res
            res.value.append(self._parse_child(c.type, name))
            if not self.has_more():
                return res
            self._next()

    def _parse_where(self) -> WhereClause:
        c = self._current()
        res = WhereClause(var_name=self.get_name(c.type), type=c.type)
        self._append_tmpl(res.create())
        if not self.has_more():
            return res
        self._next()
        while True:
            c = self._current()
            if c.type == Status.END:
                return res
            if c.type not in _LOOP_CHILDREN:
                raise ValueError(f"unknown clause: {c.value}")
            res.value.append(self._parse_child(c.type, res.var_name))
            if not self.has_more():
                break
            self._next()
        raise ValueError("incomplete SQL, where not end")

    def _parse_set(self) -> SetClause:
        c = self._current()
        res = SetClause(var_name=self.get_name(c.type))
        self._append_tmpl(res.create())
        if not self.has_more():
            return res
        self._next()
        res.type = self._current().type
        while True:
            c = self._current()
            if c.type == Status.END:
                return res
            if c.type not in _LOOP_CHILDREN:
                raise ValueError(f"unknown clause: {c.value}")
            res.value.append(self._parse_child(c.type, res.var_name))
            if not self.has_more():
                return res
            self._next()

    def _parse_for(self, name: str) -> ForClause:
        c = self._current()
        res = ForClause(for_slice=c)
        self._append_tmpl(res.create())
        self.for_value.append(dataclasses.replace(c.for_range))
        if not self.has_more():
            return res
        self._next()
        while True:
            c = self._current()
            if c.type == Status.END:
                self.for_value.pop()
                return res
            if c.type not in _LOOP_CHILDREN:
                raise ValueError(f"unknown clause: {c.value}")
            res.value.append(self._parse_child(c.type, name))
            if not self.has_more():
                return res
            self._next()

    def _parse_sql(self, name: str) -> SQLClause:
        res = SQLClause(var_name=name, type=Status.SQL)
        while True:
            c = self._current()
            if c.type in (Status.SQL, Status.VARIABLE):
                res.value.append(c.value)
            elif c.type == Status.DATA:
                for_range = self._in_for_value(c.value)
                if for_range is not None:
                    self._append_tmpl(for_range.append_data_to_params(c.value, name))
                    res.value.append(for_range.data_value(c.value, name))
                else:
                    self._append_tmpl(c.add_data_to_param_map())
                    res.value.append(_quote("@" + c.sql_param_name()))
            else:
                self.sub_index()
                return res
            if not self.has_more():
                return res
            self._next()

    def check_sql_var(self, param: str, status: Status, method: Any) -> Part:
        """Resolve a SQL variable against loop variables, then against the method's params."""
        param_name = param.split(".")[0]
        for part in self.members:
            if part.type == Status.FOR and part.for_range.value == param_name:
                if status == Status.DATA:
                    method.has_for_params = True
                    if part.for_range.index == "_":
                        part.set_for_range_key("_index")
                elif status == Status.VARIABLE:
                    param = f"{method.s}.Quote({param})"
                return Part(type=status, value=param)
        return method.check_sql_var_by_params(param, status)

    def get_name(self, status: Status) -> str:
        """Return the builder variable name for a clause, numbering WHERE and SET blocks."""
        if status == Status.WHERE:
            count = self.clause_total[Status.WHERE]
            self.clause_total[Status.WHERE] = count + 1
            return f"whereSQL{count}"
        if status == Status.SET:
            count = self.clause_total[Status.SET]
            self.clause_total[Status.SET] = count + 1
            return f"setSQL{count}"
        return "generateSQL"

    def check_template(self, tmpl: str) -> Part:
        """Parse a dynamic template (if/else/where/set/for/end) into a part."""
        part = Part(value=tmpl, sql_slice=self)
        part.split_template()
        part.check_template()
        return part