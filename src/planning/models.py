"""Plan entries and external command descriptions."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from versioning.models import ResolvedTarget


@dataclass(frozen=True)
class PlanEntry:
    """One directory to run the documentation tool in, with its targets."""
    directory: Path
    targets: Tuple[ResolvedTarget, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.targets

    def rendered(self) -> List[str]:
        return [str(t) for t in self.targets]


@dataclass(frozen=True)
class Command:
    """A fully planned external process invocation.

    The working directory is passed to the process runner explicitly; the
    planner never changes the current directory of this process.
    """
    program: str
    args: Tuple[str, ...]
    cwd: Path

    @property
    def argv(self) -> List[str]:
        return [self.program, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv)
