"""Build `cargo doc` command lines from plan entries."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from constants import Constants
from .models import Command, PlanEntry

logger = logging.getLogger(__name__)

PackageIdQuery = Callable[[Path], str]


def _base_args() -> List[str]:
    return [Constants.DOC_SUBCOMMAND, Constants.NO_DEPS_FLAG]


def package_args(names: Sequence[str]) -> List[str]:
    """Flatten names into `-p <name>` pairs, preserving order."""
    args: List[str] = []
    for name in names:
        args.extend((Constants.PACKAGE_FLAG, name))
    return args


def build_invocation(
    entry: PlanEntry,
    want_private_items: bool = False,
    want_root_package: bool = False,
    package_id: Optional[PackageIdQuery] = None,
) -> Command:
    """Return the documentation command for one plan entry.

    Args:
        entry: Directory and resolved targets.
        want_private_items: Append --document-private-items.
        want_root_package: Also document the package in `entry.directory`,
            identified through `package_id`.
        package_id: Query returning the package id for a directory; required
            when `want_root_package` is set.
    """
    args = _base_args() + package_args(entry.rendered())
    if want_private_items:
        args.append(Constants.PRIVATE_ITEMS_FLAG)
    if want_root_package:
        if package_id is None:
            raise ValueError("package_id query is required to document the root package")
        args.extend(package_args([package_id(entry.directory)]))
    return Command(program=Constants.DOC_PROGRAM, args=tuple(args), cwd=entry.directory)


def build_open_invocation(plan: Sequence[PlanEntry], want_root_package: bool = False) -> Optional[Command]:
    """Return the follow-up `cargo doc --open` command, or None.

    `cargo doc --open` refuses more than one -p, so the viewer is opened by a
    separate command restricted to the first target of the first entry. With
    `want_root_package` no restriction is added and cargo opens its default.
    """
    if not plan or plan[0].is_empty:
        logger.warning("Nothing to open: the first plan entry has no targets.")
        return None
    first = plan[0]
    args = _base_args() + [Constants.OPEN_FLAG]
    if not want_root_package:
        args.extend(package_args([str(first.targets[0])]))
    return Command(program=Constants.DOC_PROGRAM, args=tuple(args), cwd=first.directory)
