"""Data models for manifests, lock pools and resolved documentation targets."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import semantic_version


@dataclass(frozen=True)
class DependencySpec:
    """One entry of a [dependencies] or [build-dependencies] table.

    A bare string requirement sets only `version` and `is_table=False`.
    """
    key: str
    version: Optional[str] = None
    path: Optional[str] = None
    git: Optional[str] = None
    package: Optional[str] = None  # rename override: `foo = { package = "bar" }`
    is_table: bool = False


def merge_tables(
    direct: Dict[str, DependencySpec],
    build: Dict[str, DependencySpec],
    include_buildtime: bool,
) -> List[DependencySpec]:
    """Merge [dependencies] and [build-dependencies] in document order.

    Build-time entries follow the direct ones; a key present in both tables
    keeps its [dependencies] declaration.
    """
    merged: Dict[str, DependencySpec] = dict(direct)
    if include_buildtime:
        for key, spec in build.items():
            merged.setdefault(key, spec)
    return list(merged.values())


@dataclass(frozen=True)
class Manifest:
    """Typed view of a Cargo.toml."""
    directory: Path
    dependencies: Dict[str, DependencySpec] = field(default_factory=dict)
    build_dependencies: Dict[str, DependencySpec] = field(default_factory=dict)
    workspace_members: Optional[Tuple[str, ...]] = None
    workspace_exclude: Tuple[str, ...] = ()
    package_name: Optional[str] = None

    @property
    def is_workspace(self) -> bool:
        return self.workspace_members is not None

    def dependency_entries(self, include_buildtime: bool) -> List[DependencySpec]:
        return merge_tables(self.dependencies, self.build_dependencies, include_buildtime)

    def has_dependencies(self, include_buildtime: bool) -> bool:
        return bool(self.dependency_entries(include_buildtime))


@dataclass(frozen=True)
class LockEntry:
    """A single [[package]] record of Cargo.lock."""
    name: str
    version: str
    semver: semantic_version.Version = field(compare=False, repr=False)
    source: Optional[str] = None


@dataclass(frozen=True)
class LockPool:
    """Ordered pinned package set; a name may appear with several versions."""
    entries: Tuple[LockEntry, ...] = ()

    def candidates(self, name: str) -> List[LockEntry]:
        """Return every entry whose name equals `name` exactly."""
        return [entry for entry in self.entries if entry.name == name]

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class ResolvedTarget:
    """A documentation unit rendered as `name` or `name:version`."""
    name: str
    version: Optional[str] = None
    unresolved: bool = False  # set when the lock pool had no match

    def __str__(self) -> str:
        if self.version:
            return f"{self.name}:{self.version}"
        return self.name
