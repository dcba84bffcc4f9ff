"""Pick the locked version of a dependency that satisfies its requirement."""

from __future__ import annotations

import logging
from typing import List, Optional

import semantic_version

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from errors import ConstraintError
from .models import LockEntry, LockPool, ResolvedTarget
from .parser import normalize_constraint

logger = logging.getLogger(__name__)


def _compile(name: str, constraint: str) -> Optional[semantic_version.SimpleSpec]:
    """Return the compiled requirement, or None for the wildcard."""
    try:
        normalized = normalize_constraint(constraint)
        if normalized is None:
            return None
        return semantic_version.SimpleSpec(normalized)
    except ValueError as e:
        raise ConstraintError(name, constraint, str(e)) from e


def matching_entries(pool: LockPool, name: str, constraint: str) -> List[LockEntry]:
    """Return lock entries for `name` satisfying `constraint`, newest first.

    Raises:
        ConstraintError: If the requirement cannot be parsed.
    """
    spec = _compile(name, constraint)
    matches = [
        entry for entry in pool.candidates(name)
        if spec is None or spec.match(entry.semver)
    ]
    matches.sort(key=lambda entry: entry.semver, reverse=True)

    deduped: List[LockEntry] = []
    for entry in matches:
        if deduped and deduped[-1].name == entry.name and deduped[-1].semver == entry.semver:
            continue
        deduped.append(entry)
    return deduped


def select_target(pool: LockPool, name: str, constraint: str = Constants.ANY_VERSION) -> ResolvedTarget:
    """Select the newest compatible locked version of `name`.

    When nothing in the pool matches (typically because Cargo.lock has not
    been generated yet) a warning is logged and the bare name is returned so
    that cargo can resolve it itself.
    """
    matches = matching_entries(pool, name, constraint)
    if is_debug_enabled(logger):
        logger.debug(
            "Reconciled %s %s",
            name,
            constraint,
            extra=extra_context(
                event="decision",
                component="reconciler",
                candidates=len(matches),
                selected=matches[0].version if matches else None,
                source=matches[0].source if matches else None,
            ),
        )
    if not matches:
        logger.warning(
            "%s not found in %s (did you run `cargo build`?), `cargo doc` might fail.",
            name,
            Constants.LOCK_FILE,
        )
        return ResolvedTarget(name=name, unresolved=True)
    return ResolvedTarget(name=name, version=matches[0].version)


def reconcile(pool: LockPool, name: str, constraint: str = Constants.ANY_VERSION) -> str:
    """Return the rendered `name:version` (or bare `name`) for a dependency."""
    return str(select_target(pool, name, constraint))
