"""Exception hierarchy for manifest parsing, resolution and planning.

Every fatal condition is raised as a subclass of MakedocsError so the
entrypoint can report it as a single line and pick the exit code.
"""

from __future__ import annotations

from typing import Optional, Sequence


class MakedocsError(Exception):
    """Base class for all fatal cargo-makedocs errors."""


class ManifestError(MakedocsError):
    """Raised when a Cargo.toml cannot be read or has an unexpected shape."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Couldn't parse {path}: {reason}")


class LockfileError(MakedocsError):
    """Raised when a Cargo.lock cannot be read or has an unexpected shape."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Couldn't parse {path}: {reason}")


class InvalidDependencyError(MakedocsError):
    """Raised for a dependency table with none of version, path or git."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"dependency {key} is invalid: expected one of 'version', 'path' or 'git'")


class ConstraintError(MakedocsError):
    """Raised when a version requirement cannot be parsed."""

    def __init__(self, name: str, constraint: str, reason: Optional[str] = None):
        self.name = name
        self.constraint = constraint
        msg = f"invalid version requirement '{constraint}' for dependency {name}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class WorkspaceMemberError(MakedocsError):
    """Raised when a workspace member manifest is missing or unparsable."""

    def __init__(self, member: str, cause: Exception):
        self.member = member
        self.cause = cause
        super().__init__(f"workspace member {member}: {cause}")


class NothingToDocumentError(MakedocsError):
    """Raised when the whole plan produced no documentation targets."""

    def __init__(self):
        super().__init__("Found no crates to document")


class ConfigError(MakedocsError):
    """Raised for an invalid option combination or config file."""


class ToolInvocationError(MakedocsError):
    """Raised when the external documentation command exits non-zero."""

    def __init__(self, argv: Sequence[str], returncode: int):
        self.argv = list(argv)
        self.returncode = returncode
        super().__init__(f"`{' '.join(self.argv)}` exited with status {returncode}")
