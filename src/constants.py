"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    RESOLUTION_ERROR = 2
    EXIT_WARNINGS = 3
    NOTHING_TO_DOCUMENT = 4
    TOOL_FAILURE = 5


class DependencyTables(Enum):
    """Manifest tables that can contribute documentation targets.

    Args:
        Enum (string): TOML table names in Cargo.toml.
    """

    DIRECT = "dependencies"
    BUILD = "build-dependencies"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    MANIFEST_FILE = "Cargo.toml"
    LOCK_FILE = "Cargo.lock"

    # External documentation tool
    DOC_PROGRAM = "cargo"
    DOC_SUBCOMMAND = "doc"
    PKGID_SUBCOMMAND = "pkgid"
    DRY_RUN_PACKAGE_ID = "<pkgid>"
    NO_DEPS_FLAG = "--no-deps"
    PACKAGE_FLAG = "-p"
    PRIVATE_ITEMS_FLAG = "--document-private-items"
    OPEN_FLAG = "--open"
    SUBCOMMAND_NAME = "makedocs"

    # Manifest keys
    KEY_VERSION = "version"
    KEY_PATH = "path"
    KEY_GIT = "git"
    KEY_PACKAGE = "package"
    KEY_WORKSPACE = "workspace"
    KEY_MEMBERS = "members"
    KEY_EXCLUDE = "exclude"

    ANY_VERSION = "*"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "MAKEDOCS_LOG_LEVEL"
    CONFIG_SECTION = "makedocs"
