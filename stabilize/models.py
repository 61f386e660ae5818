"""Core data models for cargo-stabilize."""

from dataclasses import dataclass, field
from pathlib import Path

WILDCARD = "*"


@dataclass
class StabilizeConfig:
    """Options collected from the command line."""

    upgrade_all: bool = False
    manifest_path: Path = Path("Cargo.toml")
    registry: str = "crates-io"
    client: str = "cargo"  # cargo, api
    dry_run: bool = False


@dataclass
class VersionChange:
    """A dependency whose version field was rewritten."""

    name: str
    old: str
    new: str
    kind: str = "stabilized"  # stabilized, upgraded


@dataclass
class LookupFailure:
    """A dependency the registry could not answer for."""

    name: str
    message: str


@dataclass
class RunSummary:
    """Outcome of one pass over the dependencies table."""

    outcomes: list[VersionChange | LookupFailure] = field(default_factory=list)
    stabilized: int = 0
    upgraded: int = 0

    @property
    def changes(self) -> list[VersionChange]:
        return [o for o in self.outcomes if isinstance(o, VersionChange)]

    @property
    def failures(self) -> list[LookupFailure]:
        return [o for o in self.outcomes if isinstance(o, LookupFailure)]
