"""Pytest configuration and fixtures."""


import pytest

from stabilize.errors import ClientError, NotFoundError
from stabilize.registry import RegistryClient


class FakeRegistry(RegistryClient):
    """Registry that answers from a dict and records every lookup."""

    def __init__(self, versions=None, errors=None):
        self.versions = dict(versions or {})
        self.errors = dict(errors or {})
        self.queried: list[str] = []

    def latest_version(self, crate_name: str) -> str:
        self.queried.append(crate_name)
        if crate_name in self.errors:
            raise self.errors[crate_name]
        if crate_name not in self.versions:
            raise NotFoundError(f"crates.io has no crate named {crate_name!r}")
        return self.versions[crate_name]


class UnreachableRegistry(RegistryClient):
    """Registry whose every lookup fails to run."""

    def latest_version(self, crate_name: str) -> str:
        raise ClientError("Error running cargo search")


@pytest.fixture
def fake_registry():
    """Factory for registries with canned answers."""
    return FakeRegistry


@pytest.fixture
def unreachable_registry():
    return UnreachableRegistry()


@pytest.fixture
def sample_cargo_toml():
    """Sample Cargo.toml content for testing."""
    return """\
[package]
name = "demo"
version = "0.1.0"
edition = "2021"

# Runtime dependencies
[dependencies]
serde = { version = "*", features = ["derive"] }
rand = "*"  # randomness
log = "0.4"
local = { path = "../local" }
"""


@pytest.fixture
def temp_manifest_file(tmp_path, sample_cargo_toml):
    """Create a temporary Cargo.toml for testing."""
    manifest = tmp_path / "Cargo.toml"
    manifest.write_text(sample_cargo_toml)
    return manifest
