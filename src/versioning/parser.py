"""Cargo.toml / Cargo.lock decoding and Cargo requirement normalization."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import semantic_version

try:
    import tomllib as toml  # type: ignore
except ImportError:  # Python < 3.11
    import tomli as toml  # type: ignore

from constants import Constants, DependencyTables
from errors import LockfileError, ManifestError
from .models import DependencySpec, LockEntry, LockPool, Manifest

logger = logging.getLogger(__name__)

_COMPARATOR = re.compile(r"^(?P<op>\^|~|=|==|<=|>=|<|>)?(?P<version>[0-9*xX][0-9A-Za-z.*+\-]*)$")
_WILDCARDS = ("*", "x", "X")


def _split_version(version: str) -> Tuple[List[int], str, bool]:
    """Split a possibly partial version into its numeric parts.

    Returns (numbers, suffix, wildcard) where `suffix` is the `-pre` tail
    of a full version and `wildcard` is set when the version ended in `*`,
    `x` or `X` (`1.*`, `1.2.x`). Build metadata never takes part in
    matching and is dropped.
    """
    core, suffix = version, ""
    m = re.search(r"[-+]", version)
    if m:
        core, suffix = version[:m.start()], version[m.start():].split("+", 1)[0]
    parts = core.split(".")
    if len(parts) > 3:
        raise ValueError(f"too many version components in '{version}'")

    numbers: List[int] = []
    wildcard = False
    for part in parts:
        if part in _WILDCARDS:
            wildcard = True
            continue
        if wildcard or not part.isdigit():
            raise ValueError(f"invalid version '{version}'")
        numbers.append(int(part))
    if m and (wildcard or len(numbers) < 3):
        raise ValueError(f"pre-release or build metadata needs a full version in '{version}'")
    return numbers, suffix, wildcard


def _render(numbers: List[int], suffix: str = "") -> str:
    padded = numbers + [0] * (3 - len(numbers))
    return "{}.{}.{}{}".format(*padded, suffix)


def _bump(numbers: List[int], index: int) -> str:
    """Smallest version above every version starting with numbers[:index + 1]."""
    head = numbers[:index + 1]
    head[-1] += 1
    return _render(head)


def _caret_upper(numbers: List[int]) -> str:
    """Upper bound of a Cargo caret requirement (`^0.0` stops at `0.1.0`)."""
    for index, value in enumerate(numbers):
        if value != 0:
            return _bump(numbers, index)
    return _bump(numbers, len(numbers) - 1)


def _expand_comparator(op: str, version: str) -> List[str]:
    """Expand one Cargo comparator into explicit SimpleSpec comparators."""
    numbers, suffix, wildcard = _split_version(version)
    if wildcard:
        if op not in ("", "=", "=="):
            raise ValueError(f"operator '{op}' cannot be used with a wildcard")
        op = "="
    if not numbers:
        # a lone wildcard: no restriction
        return []

    lower = _render(numbers, suffix)
    full = len(numbers) == 3
    if op in ("", "^"):
        return [f">={lower}", f"<{_caret_upper(numbers)}"]
    if op == "~":
        return [f">={lower}", f"<{_bump(numbers, min(len(numbers), 2) - 1)}"]
    if op in ("=", "=="):
        if full:
            return [f"=={lower}"]
        return [f">={lower}", f"<{_bump(numbers, len(numbers) - 1)}"]
    if op == ">=":
        return [f">={lower}"]
    if op == ">":
        return [f">{lower}"] if full else [f">={_bump(numbers, len(numbers) - 1)}"]
    if op == "<":
        return [f"<{lower}"]
    if op == "<=":
        return [f"<={lower}"] if full else [f"<{_bump(numbers, len(numbers) - 1)}"]
    raise ValueError(f"unknown operator '{op}'")


def normalize_constraint(constraint: str) -> Optional[str]:
    """Translate a Cargo version requirement into SimpleSpec syntax.

    Every comparator is expanded into explicit bounds on full versions, so
    `1.2` becomes `>=1.2.0,<2.0.0`, `~1` becomes `>=1.0.0,<2.0.0` and
    `1.x` becomes `>=1.0.0,<2.0.0`. Returns None when nothing restricts the
    version (`*`).

    Raises:
        ValueError: If a comparator is not recognizable.
    """
    text = constraint.strip()
    if not text:
        raise ValueError("empty requirement")

    blocks: List[str] = []
    for raw in text.split(","):
        block = re.sub(r"\s+", "", raw)
        m = _COMPARATOR.match(block)
        if not m:
            raise ValueError(f"unrecognized comparator '{raw.strip()}'")
        blocks.extend(_expand_comparator(m.group("op") or "", m.group("version")))

    if not blocks:
        return None
    return ",".join(blocks)


def _parse_dependency(key: str, value: Any, source: str) -> DependencySpec:
    if isinstance(value, str):
        return DependencySpec(key=key, version=value)
    if isinstance(value, dict):
        fields: Dict[str, Optional[str]] = {}
        for name in (Constants.KEY_VERSION, Constants.KEY_PATH, Constants.KEY_GIT, Constants.KEY_PACKAGE):
            item = value.get(name)
            if item is not None and not isinstance(item, str):
                raise ManifestError(source, f"invalid value for '{name}' in key {key}")
            fields[name] = item
        return DependencySpec(
            key=key,
            version=fields[Constants.KEY_VERSION],
            path=fields[Constants.KEY_PATH],
            git=fields[Constants.KEY_GIT],
            package=fields[Constants.KEY_PACKAGE],
            is_table=True,
        )
    raise ManifestError(source, f"invalid value in key {key}")


def _parse_table(data: Dict[str, Any], table: DependencyTables, source: str) -> Dict[str, DependencySpec]:
    raw = data.get(table.value)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ManifestError(source, f"[{table.value}] must be a table")
    return {key: _parse_dependency(key, value, source) for key, value in raw.items()}


def _parse_string_list(value: Any, what: str, source: str) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ManifestError(source, f"{what} must be a list of strings")
    return tuple(value)


def parse_manifest(text: str, source: str = Constants.MANIFEST_FILE,
                   directory: Union[str, Path, None] = None) -> Manifest:
    """Decode Cargo.toml text into a Manifest.

    Args:
        text: TOML document.
        source: Name used in error messages.
        directory: Directory the manifest lives in (defaults to the source's parent).

    Raises:
        ManifestError: If the document is not valid TOML or has an unexpected shape.
    """
    try:
        data = toml.loads(text)
    except ValueError as e:
        raise ManifestError(source, str(e)) from e

    members: Optional[Tuple[str, ...]] = None
    exclude: Tuple[str, ...] = ()
    workspace = data.get(Constants.KEY_WORKSPACE)
    if workspace is not None:
        if not isinstance(workspace, dict):
            raise ManifestError(source, "[workspace] must be a table")
        if Constants.KEY_MEMBERS in workspace:
            members = _parse_string_list(workspace[Constants.KEY_MEMBERS], "workspace.members", source)
        if Constants.KEY_EXCLUDE in workspace:
            exclude = _parse_string_list(workspace[Constants.KEY_EXCLUDE], "workspace.exclude", source)

    package = data.get("package")
    package_name = package.get("name") if isinstance(package, dict) else None

    if directory is None:
        directory = Path(source).parent
    return Manifest(
        directory=Path(directory),
        dependencies=_parse_table(data, DependencyTables.DIRECT, source),
        build_dependencies=_parse_table(data, DependencyTables.BUILD, source),
        workspace_members=members,
        workspace_exclude=exclude,
        package_name=package_name if isinstance(package_name, str) else None,
    )


def load_manifest(path: Union[str, Path]) -> Manifest:
    """Read and decode a Cargo.toml from disk.

    Raises:
        ManifestError: If the file is missing, unreadable or malformed.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(str(path), e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise ManifestError(str(path), f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
    return parse_manifest(text, source=str(path), directory=path.parent)


def parse_lock(text: str, source: str = Constants.LOCK_FILE) -> LockPool:
    """Decode Cargo.lock text into a LockPool, preserving [[package]] order.

    Raises:
        LockfileError: If the document is not valid TOML, a record lacks
            name/version, or a version is not valid semver.
    """
    try:
        data = toml.loads(text)
    except ValueError as e:
        raise LockfileError(source, str(e)) from e

    packages = data.get("package", [])
    if not isinstance(packages, list):
        raise LockfileError(source, "'package' must be an array of tables")

    entries: List[LockEntry] = []
    for index, pkg in enumerate(packages):
        if not isinstance(pkg, dict):
            raise LockfileError(source, f"package #{index + 1} is not a table")
        name, version = pkg.get("name"), pkg.get("version")
        if not isinstance(name, str) or not isinstance(version, str):
            raise LockfileError(source, f"package #{index + 1} needs string 'name' and 'version'")
        try:
            semver = semantic_version.Version(version)
        except ValueError as e:
            raise LockfileError(source, f"invalid version '{version}' for package {name}") from e
        entries.append(LockEntry(name=name, version=version, semver=semver, source=pkg.get("source")))

    logger.debug("Parsed %d lock entries from %s", len(entries), source)
    return LockPool(entries=tuple(entries))


def load_lock(path: Union[str, Path]) -> LockPool:
    """Read Cargo.lock from disk.

    A missing lock file yields an empty pool with a warning; every dependency
    then falls back to its bare name.

    Raises:
        LockfileError: If the file exists but cannot be read or parsed.
    """
    path = Path(path)
    if not path.is_file():
        logger.warning("%s not found (did you run `cargo build`?), dependency versions will not be pinned.", path)
        return LockPool()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LockfileError(str(path), e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise LockfileError(str(path), f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
    return parse_lock(text, source=str(path))
