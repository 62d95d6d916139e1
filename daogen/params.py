"""Parameters, methods and interfaces used to describe custom query methods."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Iterable, Sequence

_BASE_TYPES = frozenset(
    {
        "string", "byte",
        "int", "int8", "int16", "int32", "int64",
        "uint", "uint8", "uint16", "uint32", "uint64",
        "float64", "float32",
        "bool",
        "time.Time",
    }
)


@dataclass
class Param:
    """A parameter or result of a method, such as ``user model.User``."""

    pkg_path: str = ""
    package: str = ""
    name: str = ""
    type: str = ""
    is_array: bool = False
    is_pointer: bool = False

    def eq(self, other: "Param") -> bool:
        """Return True if both name the same type in the same package."""
        return self.package == other.package and self.type == other.type

    def is_error(self) -> bool:
        return self.type == "error"

    def is_gen_m(self) -> bool:
        return self.package == "gen" and self.type == "M"

    def is_gen_rows_affected(self) -> bool:
        return self.package == "gen" and self.type == "RowsAffected"

    def is_map(self) -> bool:
        return self.type.startswith("map[")

    def is_gen_t(self) -> bool:
        return self.package == "gen" and self.type == "T"

    def is_interface(self) -> bool:
        return self.type == "interface{}"

    def is_null(self) -> bool:
        return self.package == "" and self.type == "" and self.name == ""

    def in_main_pkg(self) -> bool:
        return self.package == "main"

    def is_time(self) -> bool:
        return self.package == "time" and self.type == "Time"

    def type_name(self) -> str:
        return "[]" + self.type if self.is_array else self.type

    def tmpl_string(self) -> str:
        """Render the parameter as it appears in a signature."""
        prefix = f"{self.name} " if self.name else ""
        array = "[]" if self.is_array else ""
        pointer = "*" if self.is_pointer else ""
        package = f"{self.package}." if self.package else ""
        return f"{prefix}{array}{pointer}{package}{self.type}"

    def is_base_type(self) -> bool:
        return self.type in _BASE_TYPES


def param_to_string(params: Iterable[Param]) -> str:
    """Render a parameter list for a signature."""
    return ",".join(p.tmpl_string() for p in params)


@dataclass
class Method:
    """A method bound to a model struct."""

    receiver: Param = field(default_factory=Param)
    method_name: str = ""
    doc: str = ""
    params: list[Param] = field(default_factory=list)
    result: list[Param] = field(default_factory=list)
    body: str = ""

    def func_sign(self) -> str:
        return f"{self.method_name}({self.get_param_in_tmpl()}) ({self.get_result_param_in_tmpl()})"

    def get_base_struct_tmpl(self) -> str:
        return self.receiver.tmpl_string()

    def get_param_in_tmpl(self) -> str:
        return param_to_string(self.params)

    def get_result_param_in_tmpl(self) -> str:
        return param_to_string(self.result)

    def doc_comment(self) -> str:
        """Return the documentation with a comment marker after every line break."""
        return self.doc.strip().replace("\n", "\n//")


@dataclass
class InterfaceInfo:
    """An interface whose methods are generated for some structs."""

    name: str = ""
    doc: str = ""
    methods: list[Method] = field(default_factory=list)
    package: str = ""
    apply_struct: list[str] = field(default_factory=list)

    def match_struct(self, name: str) -> bool:
        return name in self.apply_struct


@dataclass
class InterfaceSet:
    """The interfaces collected for generation."""

    interfaces: list[InterfaceInfo] = field(default_factory=list)

    def add_interface(self, info: InterfaceInfo, package: str, struct_names: Sequence[str]) -> InterfaceInfo:
        """Register an interface for the given package and structs and return it."""
        added = dataclasses.replace(info, package=package, apply_struct=list(struct_names))
        self.interfaces.append(added)
        return added