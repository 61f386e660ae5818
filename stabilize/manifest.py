"""Cargo.toml loading and saving."""

import logging
from collections.abc import Mapping
from pathlib import Path

import tomlkit
from tomlkit import TOMLDocument
from tomlkit.exceptions import TOMLKitError

from .errors import ManifestIOError, ManifestParseError, ManifestShapeError

logger = logging.getLogger(__name__)


def parse_manifest(content: str) -> TOMLDocument:
    """Parse manifest text into a style-preserving TOML document.

    Args:
        content: The Cargo.toml file content

    Returns:
        Parsed document, mutable in place

    Raises:
        ManifestParseError: If the content is not valid TOML
        ManifestShapeError: If the top-level value is not a table
    """
    try:
        document = tomlkit.parse(content)
    except TOMLKitError as e:
        raise ManifestParseError(str(e)) from e

    if not isinstance(document, Mapping):
        raise ManifestShapeError("Invalid manifest")

    return document


def load_manifest(path: Path) -> TOMLDocument:
    """Read and parse the manifest at ``path``."""
    logger.debug("Reading manifest %s", path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ManifestIOError(f"Could not read {path}: {e.strerror or e}") from e

    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ManifestParseError(f"{path} is not valid UTF-8: {e}") from e

    return parse_manifest(content)


def write_manifest(path: Path, document: TOMLDocument) -> None:
    """Serialize ``document`` and overwrite the file at ``path``."""
    logger.debug("Writing manifest %s", path)
    try:
        path.write_text(tomlkit.dumps(document), encoding="utf-8")
    except OSError as e:
        raise ManifestIOError(f"Could not write {path}: {e.strerror or e}") from e
