"""Ordered, duplicate-free collection of compiled artifact locations."""

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Classpath:
    """A classpath: an ordered set of directories and archives.

    Entries are never removed. Combining two classpaths keeps the first
    occurrence of each entry, so ``(a + b) + c == a + (b + c)``.
    """

    entries: tuple[Path, ...] = ()

    def __post_init__(self) -> None:
        unique = tuple(dict.fromkeys(Path(entry) for entry in self.entries))
        object.__setattr__(self, "entries", unique)

    @classmethod
    def of(cls, *paths: str | os.PathLike[str]) -> "Classpath":
        """Build a classpath from the given locations."""
        return cls(tuple(Path(path) for path in paths))

    def __add__(self, other: "Classpath | Iterable[Path]") -> "Classpath":
        if isinstance(other, Classpath):
            other = other.entries
        return Classpath((*self.entries, *other))

    def __iter__(self) -> Iterator[Path]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, item: object) -> bool:
        return item in self.entries

    def __bool__(self) -> bool:
        return bool(self.entries)

    def __str__(self) -> str:
        return os.pathsep.join(str(entry) for entry in self.entries)
