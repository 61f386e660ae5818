"""Exception hierarchy for cargo-stabilize."""


class StabilizeError(Exception):
    """Base class for every error raised by cargo-stabilize."""


class ManifestError(StabilizeError):
    """The manifest could not be loaded or saved."""


class ManifestIOError(ManifestError):
    """Reading or writing the manifest file failed."""


class ManifestParseError(ManifestError):
    """The manifest is not valid TOML."""


class ManifestShapeError(ManifestError):
    """The manifest parsed but its top level is not a table."""


class DependenciesError(StabilizeError):
    """The [dependencies] section cannot be rewritten."""


class MissingDependenciesError(DependenciesError):
    pass


class InvalidDependenciesError(DependenciesError):
    pass


class RegistryError(StabilizeError):
    """A registry lookup for a single dependency failed."""


class ClientError(RegistryError):
    """The registry could not be queried at all."""


class NotFoundError(RegistryError):
    """The registry has no crate with the requested name."""


class BadResponseError(RegistryError):
    """The registry answered with data that could not be understood."""
