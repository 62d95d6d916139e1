"""Ordered, quoted import path lists for generated files."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ImportList:
    """Import paths in order; empty strings separate groups."""

    paths: tuple[str, ...] = ()

    def add(self, *args: str) -> "ImportList":
        """Return a new list with the given paths quoted and appended, followed by a separator.

        Paths already in this list are skipped; empty paths are kept as separators.
        """
        added: list[str] = []
        for raw in args:
            path = raw.strip()
            if path and not path.endswith('"'):
                path = f'"{path}"'
            if not path or path not in self.paths:
                added.append(path)
        return ImportList((*self.paths, *added, ""))


def _from_groups(*groups: str) -> ImportList:
    """Build a list from whitespace-separated groups of paths."""
    args: list[str] = []
    for group in groups:
        if args:
            args.append("")
        args.extend(group.split())
    return ImportList().add(*args)


IMPORT_LIST = _from_groups(
    "context database/sql strings",
    "gorm.io/gorm gorm.io/gorm/schema gorm.io/gorm/clause",
    "gorm.io/gen gorm.io/gen/field gorm.io/gen/helper",
    "gorm.io/plugin/dbresolver",
)

UNIT_TEST_IMPORT_LIST = _from_groups(
    "context fmt strconv testing",
    "gorm.io/driver/sqlite gorm.io/gorm",
)