"""Planning options assembled from the CLI and an optional YAML config file.

CLI values have the highest precedence: list options extend the file's
lists and --no-buildtime always wins.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional, Tuple

import yaml

from constants import Constants
from errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanOptions:
    """Recognized planning options."""
    excluded: FrozenSet[str] = frozenset()
    extra: Tuple[str, ...] = ()
    include_buildtime: bool = True
    open_after_build: bool = False
    root_package: bool = False
    private_items: bool = False
    dry_run: bool = False
    error_on_warnings: bool = False

    def __post_init__(self):
        if self.private_items and not self.root_package:
            raise ConfigError("--document-private-items requires --root")


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load option defaults from a YAML file.

    A top-level `makedocs:` section is used when present, otherwise the whole
    document.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    if not config_path:
        return {}
    if not os.path.isfile(config_path):
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Couldn't read config file {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    section = data.get(Constants.CONFIG_SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"'{Constants.CONFIG_SECTION}' in {config_path} must be a mapping")
    logger.debug("Loaded config from %s", config_path)
    return section


def _string_list(config: Dict[str, Any], key: str) -> Tuple[str, ...]:
    value = config.get(key, [])
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of crate names")
    return tuple(value)


def _flatten(values) -> Tuple[str, ...]:
    """argparse `append` + `nargs='+'` yields a list of lists."""
    flat = []
    for group in values or []:
        if isinstance(group, (list, tuple)):
            flat.extend(group)
        else:
            flat.append(group)
    return tuple(flat)


def build_options(args: Any, config: Optional[Dict[str, Any]] = None) -> PlanOptions:
    """Merge parsed CLI args over config file defaults.

    Raises:
        ConfigError: For malformed config values or invalid combinations.
    """
    config = config or {}
    buildtime = config.get("buildtime", True)
    if not isinstance(buildtime, bool):
        raise ConfigError("'buildtime' must be true or false")

    excluded = _string_list(config, "exclude") + _flatten(getattr(args, "EXCLUDE", None))
    extra = _string_list(config, "include") + _flatten(getattr(args, "INCLUDE", None))

    return PlanOptions(
        excluded=frozenset(excluded),
        extra=tuple(dict.fromkeys(extra)),
        include_buildtime=buildtime and not getattr(args, "NO_BUILDTIME", False),
        open_after_build=bool(getattr(args, "OPEN", False)),
        root_package=bool(getattr(args, "ROOT", False)),
        private_items=bool(getattr(args, "PRIVATE_ITEMS", False)),
        dry_run=bool(getattr(args, "DRY_RUN", False)),
        error_on_warnings=bool(getattr(args, "ERROR_ON_WARNINGS", False)),
    )
