"""Replacement of dependency versions with the newest published ones."""

import logging
from collections.abc import Mapping, MutableMapping

from .errors import InvalidDependenciesError, MissingDependenciesError, RegistryError
from .models import WILDCARD, LookupFailure, RunSummary, VersionChange
from .registry import RegistryClient

logger = logging.getLogger(__name__)


def extract_version(entry) -> str | None:
    """Return the version constraint of a dependency entry.

    Handles both ``name = "1.0"`` and ``name = { version = "1.0", ... }``.
    Anything else (missing version, non-string version, git/path-only
    dependencies) yields None.
    """
    if isinstance(entry, str):
        return str(entry)
    if isinstance(entry, Mapping):
        version = entry.get("version")
        if isinstance(version, str):
            return str(version)
    return None


def should_query(version: str, upgrade_all: bool) -> bool:
    return version == WILDCARD or upgrade_all


def _set_version(dependencies: MutableMapping, name: str, new_version: str) -> None:
    entry = dependencies[name]
    if isinstance(entry, str):
        dependencies[name] = new_version
    else:
        entry["version"] = new_version


def stabilize_dependencies(
    document: MutableMapping, client: RegistryClient, upgrade_all: bool = False
) -> RunSummary:
    """Rewrite the [dependencies] table of ``document`` in place.

    Args:
        document: Parsed manifest
        client: Registry used to look up latest versions
        upgrade_all: Replace every version, not just wildcards

    Returns:
        Changes and lookup failures in document order, with counters

    Raises:
        MissingDependenciesError: If the manifest has no [dependencies]
        InvalidDependenciesError: If [dependencies] is not a table
    """
    if "dependencies" not in document:
        raise MissingDependenciesError("No dependencies")

    dependencies = document["dependencies"]
    if not isinstance(dependencies, MutableMapping):
        raise InvalidDependenciesError("Invalid dependencies")

    summary = RunSummary()

    for name, entry in list(dependencies.items()):
        version = extract_version(entry)
        if version is None:
            logger.debug("Skipping %s: no version string", name)
            continue

        if not should_query(version, upgrade_all):
            continue

        try:
            latest = client.latest_version(name)
        except RegistryError as e:
            logger.debug("Lookup failed for %s: %s", name, e)
            summary.outcomes.append(LookupFailure(name=name, message=str(e)))
            continue

        if latest == version:
            continue

        if version == WILDCARD:
            kind = "stabilized"
            summary.stabilized += 1
        else:
            kind = "upgraded"
            summary.upgraded += 1

        _set_version(dependencies, name, latest)
        summary.outcomes.append(
            VersionChange(name=name, old=version, new=latest, kind=kind)
        )

    return summary


def _dependencies_word(count: int) -> str:
    return "dependency" if count == 1 else "dependencies"


def summary_lines(summary: RunSummary, upgrade_all: bool = False) -> list[str]:
    """Closing report lines for a run."""
    lines = []
    if summary.stabilized > 0:
        lines.append(
            f"Stabilized {summary.stabilized} {_dependencies_word(summary.stabilized)}"
        )
    if summary.upgraded > 0:
        lines.append(
            f"Upgraded {summary.upgraded} {_dependencies_word(summary.upgraded)}"
        )
    if summary.stabilized == 0 and summary.upgraded == 0:
        if upgrade_all:
            lines.append("All dependencies are up to date")
        else:
            lines.append("All dependencies are stable")
    return lines
