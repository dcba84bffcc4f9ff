"""Expand a manifest into one plan entry per directory to document.

A plain package yields a single entry for its own directory. A workspace
yields one entry per member, in declared order, resolved against the shared
lock pool, followed by the root itself when it also declares dependencies.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import AbstractSet, Callable, List, Sequence, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from errors import MakedocsError, WorkspaceMemberError
from versioning.models import LockPool, Manifest
from versioning.parser import load_manifest
from versioning.resolver import resolve_manifest
from .models import PlanEntry

logger = logging.getLogger(__name__)

ManifestLoader = Callable[[Path], Manifest]

_GLOB_CHARS = ("*", "?", "[")


def _normalize(member: str) -> str:
    return os.path.normpath(member.replace("\\", "/"))


def _is_excluded(member: str, excluded: AbstractSet[str]) -> bool:
    return any(member == e or member.startswith(e + "/") for e in excluded)


def expand_members(root: Path, members: Sequence[str], exclude: Sequence[str] = ()) -> List[Tuple[str, Path]]:
    """Return (member label, directory) pairs in declared order.

    Glob patterns expand to the sorted directories that hold a Cargo.toml.
    Literal members are returned as-is even if missing so that loading them
    reports the error. A member is dropped when it equals an `exclude` entry
    or lies below one, so excluding `crates/legacy` also drops
    `crates/legacy/old`.
    """
    excluded = {_normalize(e) for e in exclude}
    seen = set()
    expanded: List[Tuple[str, Path]] = []
    for member in members:
        if any(ch in member for ch in _GLOB_CHARS):
            matches = sorted(
                p for p in root.glob(member)
                if p.is_dir() and (p / Constants.MANIFEST_FILE).is_file()
            )
            if not matches:
                logger.warning("Workspace member pattern '%s' matched no packages.", member)
            labels = [(p.relative_to(root).as_posix(), p) for p in matches]
        else:
            labels = [(member, root / member)]
        for label, directory in labels:
            key = _normalize(label)
            if _is_excluded(key, excluded) or key in seen:
                continue
            seen.add(key)
            expanded.append((label, directory))
    return expanded


def plan_workspace(
    root_manifest: Manifest,
    pool: LockPool,
    excluded: AbstractSet[str] = frozenset(),
    extra: Sequence[str] = (),
    include_buildtime: bool = True,
    load_member: ManifestLoader = load_manifest,
) -> List[PlanEntry]:
    """Build the ordered plan for a root manifest.

    Entries with no targets are kept; the caller skips them when running.

    Raises:
        WorkspaceMemberError: If a member manifest is missing or malformed,
            or one of its dependencies fails to resolve.
    """
    root_dir = root_manifest.directory

    if not root_manifest.is_workspace:
        targets = resolve_manifest(root_manifest, pool, excluded, extra, include_buildtime)
        return [PlanEntry(directory=root_dir, targets=tuple(targets))]

    plan: List[PlanEntry] = []
    for label, directory in expand_members(root_dir, root_manifest.workspace_members or (),
                                           root_manifest.workspace_exclude):
        try:
            member = load_member(directory / Constants.MANIFEST_FILE)
            targets = resolve_manifest(member, pool, excluded, extra, include_buildtime)
        except MakedocsError as e:
            raise WorkspaceMemberError(label, e) from e
        if is_debug_enabled(logger):
            logger.debug(
                "Planned workspace member %s",
                label,
                extra=extra_context(
                    event="decision",
                    component="workspace",
                    package=member.package_name,
                    targets=len(targets),
                ),
            )
        plan.append(PlanEntry(directory=directory, targets=tuple(targets)))

    if root_manifest.has_dependencies(include_buildtime):
        targets = resolve_manifest(root_manifest, pool, excluded, extra, include_buildtime)
        plan.append(PlanEntry(directory=root_dir, targets=tuple(targets)))

    return plan
