"""Small string helpers for names of structs, packages and SQL variables."""

from __future__ import annotations

import string

_IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "-_.")


def is_capitalize(s: str) -> bool:
    """Return True if the first character is an ASCII capital letter."""
    return bool(s) and "A" <= s[0] <= "Z"


def is_end(ch: str) -> bool:
    """Return True if ``ch`` cannot be part of a SQL variable name."""
    return ch not in _IDENT_CHARS


def del_pointer_sym(name: str) -> str:
    """Strip leading pointer markers from a type name."""
    return name.lstrip("*")


def get_package_name(full_name: str) -> str:
    """Return the package part of a qualified type name such as ``*model.User``."""
    return del_pointer_sym(full_name).split(".")[0]


def get_pure_name(s: str) -> str:
    """Return the lower-cased first character of a type name, without pointer markers."""
    return del_pointer_sym(s).lower()[0]


def get_struct_name(t: str) -> str:
    """Return the last dotted component of a qualified type name."""
    return t.split(".")[-1]


def uncapitalize(s: str) -> str:
    """Lower-case the first character of ``s``."""
    if not s:
        return ""
    return s[:1].lower() + s[1:]