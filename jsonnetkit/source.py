"""Source identities and source texts with position mapping."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .location import CodeLocation, location_to_offset, offset_to_location


class SourcePath(ABC):
    """Where a piece of source code came from.

    Paths for which ``is_default`` is true should be resolved relative to the
    default search location, usually the working directory.
    """

    @abstractmethod
    def is_default(self) -> bool:
        """Whether the default search location applies to this path."""

    @abstractmethod
    def path(self) -> Optional[Path]:
        """The filesystem path, if there is one."""


@dataclass(frozen=True)
class SourceDefault(SourcePath):
    """Placeholder path resolving against the default search location."""

    def is_default(self) -> bool:
        return True

    def path(self) -> Optional[Path]:
        return None

    def __str__(self) -> str:
        return "<default>"


@dataclass(frozen=True)
class SourceFile(SourcePath):
    """A file on disk; relative imports resolve next to it."""

    fs_path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "fs_path", Path(self.fs_path))

    def is_default(self) -> bool:
        return False

    def path(self) -> Optional[Path]:
        return self.fs_path

    def __str__(self) -> str:
        return str(self.fs_path)


@dataclass(frozen=True)
class SourceDirectory(SourcePath):
    """A directory on disk; relative imports resolve inside it."""

    fs_path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "fs_path", Path(self.fs_path))

    def is_default(self) -> bool:
        return False

    def path(self) -> Optional[Path]:
        return self.fs_path

    def __str__(self) -> str:
        return str(self.fs_path)


@dataclass(frozen=True)
class SourceVirtual(SourcePath):
    """An in-memory source identified only by a name."""

    name: str

    def is_default(self) -> bool:
        return True

    def path(self) -> Optional[Path]:
        return None

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Source:
    """A source path together with the code it holds."""

    source_path: SourcePath
    code: str

    def map_source_locations(self, offsets: Sequence[int]) -> list[CodeLocation]:
        """Resolve character offsets in the code into locations."""
        return offset_to_location(self.code, offsets)

    def map_from_source_location(self, line: int, column: int) -> Optional[int]:
        """Return the offset of a 1-based line and column, or None."""
        return location_to_offset(self.code, line, column)


def virtual_source(name: str, code: str) -> Source:
    """Build a Source for in-memory code under the given name."""
    return Source(SourceVirtual(name), code)