"""cargo-makedocs - build `cargo doc` only for a crate's direct dependencies.

    Returns:
        int: Exit code
"""
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Callable, List, Optional

from args import parse_args
from cli_config import PlanOptions, build_options, load_config_file
from common.logging_utils import configure_logging
from constants import Constants, ExitCodes
from discovery import find_root_dir
from errors import (
    ConstraintError,
    InvalidDependencyError,
    MakedocsError,
    NothingToDocumentError,
    ToolInvocationError,
    WorkspaceMemberError,
)
from planning.invocation import build_invocation, build_open_invocation
from planning.models import Command, PlanEntry
from planning.workspace import plan_workspace
from versioning.parser import load_lock, load_manifest

logger = logging.getLogger(__name__)

CommandRunner = Callable[[Command], None]


def query_package_id(directory: Path) -> str:
    """Ask cargo for the package id of the crate in `directory`.

    Raises:
        ToolInvocationError: If `cargo pkgid` fails.
    """
    argv = [Constants.DOC_PROGRAM, Constants.PKGID_SUBCOMMAND]
    result = subprocess.run(argv, cwd=directory, capture_output=True, text=True, check=False)  # noqa: S603
    if result.returncode != 0:
        raise ToolInvocationError(argv, result.returncode)
    return result.stdout.replace("\n", "")


def run_command(command: Command) -> None:
    """Run one planned command to completion in its own working directory.

    Raises:
        ToolInvocationError: If the command exits non-zero.
    """
    logger.info("Running: %s (in %s)", command, command.cwd)
    result = subprocess.run(command.argv, cwd=command.cwd, check=False)  # noqa: S603
    if result.returncode != 0:
        raise ToolInvocationError(command.argv, result.returncode)


def _log_command(command: Command) -> None:
    logger.info("Would run: %s (in %s)", command, command.cwd)


def _placeholder_package_id(directory: Path) -> str:
    logger.info("Would run: %s %s (in %s)", Constants.DOC_PROGRAM, Constants.PKGID_SUBCOMMAND, directory)
    return Constants.DRY_RUN_PACKAGE_ID


def build_plan(root: Path, options: PlanOptions) -> List[PlanEntry]:
    """Load the root manifest and shared lock file and plan every directory."""
    manifest = load_manifest(root / Constants.MANIFEST_FILE)
    pool = load_lock(root / Constants.LOCK_FILE)
    logger.debug("Planning %s against %d lock entries", manifest.package_name or root, len(pool))
    return plan_workspace(
        manifest,
        pool,
        excluded=options.excluded,
        extra=options.extra,
        include_buildtime=options.include_buildtime,
    )


def execute_plan(
    plan: List[PlanEntry],
    options: PlanOptions,
    runner: Optional[CommandRunner] = None,
    package_id: Optional[Callable[[Path], str]] = None,
) -> int:
    """Run the documentation commands for every plan entry, then open.

    Entries are processed strictly in order; a failing command aborts the
    remaining plan. In a dry run commands are only logged, including the
    `cargo pkgid` query, whose result is replaced by a placeholder.

    Returns:
        Exit code value.

    Raises:
        NothingToDocumentError: If no entry has any target.
        ToolInvocationError: If an external command fails.
    """
    if runner is None:
        runner = _log_command if options.dry_run else run_command
    if package_id is None:
        package_id = _placeholder_package_id if options.dry_run else query_package_id

    if all(entry.is_empty for entry in plan):
        raise NothingToDocumentError()

    for entry in plan:
        if entry.is_empty:
            logger.warning("Nothing to document in %s, skipping.", entry.directory)
            continue
        runner(build_invocation(entry, options.private_items, options.root_package, package_id))

    if options.open_after_build:
        command = build_open_invocation(plan, options.root_package)
        if command is not None:
            runner(command)

    unresolved = [str(t) for entry in plan for t in entry.targets if t.unresolved]
    if unresolved and options.error_on_warnings:
        logger.error("Not found in %s: %s", Constants.LOCK_FILE, ", ".join(unresolved))
        return ExitCodes.EXIT_WARNINGS.value
    return ExitCodes.SUCCESS.value


def exit_code_for(error: MakedocsError) -> int:
    """Map a fatal error to its process exit code."""
    if isinstance(error, WorkspaceMemberError) and isinstance(error.cause, MakedocsError):
        return exit_code_for(error.cause)
    if isinstance(error, (InvalidDependencyError, ConstraintError)):
        return ExitCodes.RESOLUTION_ERROR.value
    if isinstance(error, NothingToDocumentError):
        return ExitCodes.NOTHING_TO_DOCUMENT.value
    if isinstance(error, ToolInvocationError):
        return ExitCodes.TOOL_FAILURE.value
    return ExitCodes.FILE_ERROR.value


def run(args, cwd: Optional[Path] = None) -> int:
    """Plan and run the documentation build for parsed CLI args."""
    config = load_config_file(getattr(args, "CONFIG", None))
    options = build_options(args, config)
    root = find_root_dir(cwd)
    logger.debug("Manifest root: %s", root)
    plan = build_plan(root, options)
    return execute_plan(plan, options)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging(quiet=args.QUIET, log_file=args.LOG_FILE)

    try:
        code = run(args)
    except MakedocsError as e:
        logger.error("%s", e)
        code = exit_code_for(e)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        code = 130  # Standard SIGINT exit code
    sys.exit(code)


if __name__ == "__main__":
    main()
