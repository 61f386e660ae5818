"""Latest-version lookups against a crate registry."""

import logging
import subprocess

import httpx

from .errors import BadResponseError, ClientError, NotFoundError
from .search_output import parse_search_output

logger = logging.getLogger(__name__)

CRATES_IO_API = "https://crates.io/api/v1"
USER_AGENT = "cargo-stabilize/0.1.0"


class RegistryClient:
    """Interface for looking up the newest published version of a crate."""

    def latest_version(self, crate_name: str) -> str:
        """Return the newest version of ``crate_name``.

        Raises:
            ClientError: If the registry could not be queried
            NotFoundError: If the registry has no such crate
            BadResponseError: If the registry answer is unusable
        """
        raise NotImplementedError


class CargoSearchClient(RegistryClient):
    """Resolver that shells out to ``cargo search``."""

    def __init__(self, registry: str = "crates-io", cargo: str = "cargo"):
        """Initialize the search client.

        Args:
            registry: Registry name passed to ``cargo search --registry``
            cargo: Cargo executable to run
        """
        self.registry = registry
        self.cargo = cargo

    def command(self, crate_name: str) -> list[str]:
        return [self.cargo, "search", "--registry", self.registry, crate_name]

    def latest_version(self, crate_name: str) -> str:
        cmd = self.command(crate_name)
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True)
        except OSError as e:
            logger.debug("cargo search failed to start: %s", e)
            raise ClientError("Error running cargo search") from e

        output = result.stdout.decode("utf-8", errors="replace")
        return parse_search_output(crate_name, output)


class CratesIoClient(RegistryClient):
    """Resolver that reads crate metadata from the crates.io web API."""

    def __init__(
        self,
        base_url: str = CRATES_IO_API,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the API client.

        Args:
            base_url: API root, without trailing slash
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self._cache: dict[str, dict] = {}

    def latest_version(self, crate_name: str) -> str:
        metadata = self._fetch_crate_metadata(crate_name)
        if metadata is None:
            raise NotFoundError(f"crates.io has no crate named {crate_name!r}")

        crate = metadata.get("crate") if isinstance(metadata, dict) else None
        if not isinstance(crate, dict):
            raise BadResponseError("crates.io returned invalid data")

        # Prefer the newest non-prerelease, as cargo search does
        for key in ("max_stable_version", "max_version"):
            version = crate.get(key)
            if isinstance(version, str) and version:
                return version

        raise BadResponseError("crates.io returned invalid data")

    def _fetch_crate_metadata(self, crate_name: str) -> dict | None:
        """Fetch crate metadata from the API.

        Returns:
            Decoded JSON body or None if the crate does not exist
        """
        if crate_name in self._cache:
            return self._cache[crate_name]

        url = f"{self.base_url}/crates/{crate_name}"
        logger.debug("GET %s", url)

        try:
            with httpx.Client(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
                transport=self.transport,
            ) as client:
                response = client.get(url)
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                metadata = response.json()
        except httpx.TimeoutException as e:
            raise ClientError(f"Timeout fetching metadata for {crate_name}") from e
        except httpx.HTTPStatusError as e:
            raise ClientError(f"HTTP error fetching {crate_name}: {e}") from e
        except httpx.HTTPError as e:
            raise ClientError(f"Network error fetching {crate_name}: {e}") from e
        except ValueError as e:
            raise BadResponseError("crates.io returned invalid data") from e

        self._cache[crate_name] = metadata
        return metadata


def build_client(kind: str = "cargo", registry: str = "crates-io") -> RegistryClient:
    """Create the registry client selected on the command line."""
    if kind == "cargo":
        return CargoSearchClient(registry=registry)
    if kind == "api":
        return CratesIoClient()
    raise ValueError(f"Unknown registry client: {kind}")
