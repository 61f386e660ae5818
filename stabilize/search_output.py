"""Parsing of ``cargo search`` output.

``cargo search`` prints one TOML-like line per match, for example::

    serde = "1.0.210"    # A generic serialization/deserialization framework
    serde_json = "1.0.128"    # A JSON serialization file format
    ... and 4410 crates more (use --limit N to see more)

Everything before the ``...`` continuation line is a valid TOML table that
maps crate names to their newest version, with the descriptions parsed as
comments.
"""

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .errors import BadResponseError, NotFoundError

CONTINUATION_MARKER = "\n..."


def extract_record(output: str) -> str:
    """Return the part of ``output`` before the continuation marker."""
    return output.split(CONTINUATION_MARKER, 1)[0]


def parse_search_output(crate_name: str, output: str) -> str:
    """Extract the latest version of ``crate_name`` from search output.

    Args:
        crate_name: The crate that was searched for
        output: Captured standard output of ``cargo search``

    Returns:
        The version string listed for the exact crate name

    Raises:
        NotFoundError: If nothing was found, or only other crates matched
        BadResponseError: If the output is not a name/version table
    """
    record = extract_record(output)
    if not record.strip():
        raise NotFoundError(f"crates.io has no crate named {crate_name!r}")

    try:
        table = tomlkit.parse(record)
    except TOMLKitError as e:
        raise BadResponseError("cargo search returned invalid data") from e

    # Search is fuzzy, other crates may be listed without an exact match
    if crate_name not in table:
        raise NotFoundError(f"crates.io has no crate named {crate_name!r}")

    version = table[crate_name]
    if not isinstance(version, str):
        raise BadResponseError("cargo search returned invalid data")

    return str(version)
