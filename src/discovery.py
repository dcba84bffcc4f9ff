"""Locate the manifest root for the current invocation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from constants import Constants
from errors import ManifestError

logger = logging.getLogger(__name__)


def find_root_dir(start: Union[str, Path, None] = None) -> Path:
    """Return the nearest directory, starting at `start`, holding a Cargo.toml.

    Raises:
        ManifestError: If no ancestor contains a manifest.
    """
    current = Path(start) if start is not None else Path.cwd()
    current = current.resolve()
    for candidate in (current, *current.parents):
        if (candidate / Constants.MANIFEST_FILE).is_file():
            logger.debug("Found %s in %s", Constants.MANIFEST_FILE, candidate)
            return candidate
    raise ManifestError(Constants.MANIFEST_FILE, f"cannot find {Constants.MANIFEST_FILE} in any ancestor directory of {current}")
