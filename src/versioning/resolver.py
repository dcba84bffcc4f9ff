"""Turn a manifest's dependency tables into documentation targets.

Rename handling and lock lookup are separate steps: `effective_name` and
`effective_constraint` describe what to look up, `select_target` looks it up.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Dict, Iterable, List, Sequence

from constants import Constants
from errors import InvalidDependencyError
from .models import DependencySpec, LockPool, Manifest, ResolvedTarget, merge_tables
from .reconciler import select_target

logger = logging.getLogger(__name__)


def effective_name(spec: DependencySpec) -> str:
    """Name used both for the lock lookup and for display."""
    return spec.package or spec.key


def effective_constraint(spec: DependencySpec) -> str:
    """Version requirement to match against the lock pool.

    Path and git dependencies without an explicit version use the wildcard:
    the user is either developing the dependency locally or wants whatever
    revision was locked.

    Raises:
        InvalidDependencyError: If a table entry has none of version, path or git.
    """
    if spec.version is not None:
        return spec.version
    if spec.is_table and (spec.path is not None or spec.git is not None):
        return Constants.ANY_VERSION
    raise InvalidDependencyError(spec.key)


def resolve_targets(
    entries: Iterable[DependencySpec],
    pool: LockPool,
    excluded: AbstractSet[str] = frozenset(),
    extra: Sequence[str] = (),
) -> List[ResolvedTarget]:
    """Resolve dependency entries in order, then append `extra` verbatim.

    Exclusion matches the manifest key exactly. Extra names are trusted as
    given and never looked up in the pool.
    """
    targets: List[ResolvedTarget] = []
    for spec in entries:
        if spec.key in excluded:
            logger.debug("Excluding %s", spec.key)
            continue
        targets.append(select_target(pool, effective_name(spec), effective_constraint(spec)))
    targets.extend(ResolvedTarget(name=name) for name in extra)
    return targets


def resolve_manifest(
    manifest: Manifest,
    pool: LockPool,
    excluded: AbstractSet[str] = frozenset(),
    extra: Sequence[str] = (),
    include_buildtime: bool = True,
) -> List[ResolvedTarget]:
    """Resolve the (optionally build-time merged) tables of one manifest."""
    return resolve_targets(manifest.dependency_entries(include_buildtime), pool, excluded, extra)


def resolve_dependencies(
    manifest_deps: Dict[str, DependencySpec],
    build_deps: Dict[str, DependencySpec],
    pool: LockPool,
    excluded: AbstractSet[str] = frozenset(),
    extra: Sequence[str] = (),
    include_buildtime: bool = True,
) -> List[str]:
    """Return rendered targets (`name` or `name:version`) for the given tables."""
    entries = merge_tables(manifest_deps, build_deps, include_buildtime)
    return [str(t) for t in resolve_targets(entries, pool, excluded, extra)]
