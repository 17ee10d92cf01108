"""
RDAP bootstrap registry.

Loads the IANA DNS bootstrap document and resolves a TLD to the RDAP
service(s) responsible for it. The document format is:

    {
        "version": "1.0",
        "publication": "2024-01-01T00:00:00Z",
        "description": "...",
        "services": [
            [["com", "net"], ["https://rdap.verisign.com/com/v1/"]],
            ...
        ]
    }

The registry is fetched once per run and never cached on disk.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import httpx

from .config import IANA_BOOTSTRAP_URL
from .exceptions import BootstrapError


@dataclass
class BootstrapService:
    """One service group: the TLDs it serves and its base URLs."""

    entries: list[str]
    urls: list[str]

    def serves(self, tld: str) -> bool:
        return tld.lower() in (entry.lower() for entry in self.entries)


@dataclass
class BootstrapRegistry:
    """Parsed bootstrap registry document."""

    version: str
    publication: str
    description: str
    services: list[BootstrapService] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "BootstrapRegistry":
        """
        Parse a bootstrap document.

        Raises:
            BootstrapError: If the document does not have the expected shape
        """
        if not isinstance(data, dict):
            raise BootstrapError(
                code="malformed_registry",
                message="Bootstrap registry must be a JSON object",
            )

        raw_services = data.get("services")
        if not isinstance(raw_services, list):
            raise BootstrapError(
                code="malformed_registry",
                message="Bootstrap registry has no 'services' list",
            )

        services = []
        for index, raw in enumerate(raw_services):
            if (
                not isinstance(raw, list)
                or len(raw) < 2
                or not isinstance(raw[0], list)
                or not isinstance(raw[1], list)
            ):
                raise BootstrapError(
                    code="malformed_registry",
                    message=f"Malformed service entry at index {index}",
                    details={"entry": raw},
                )
            services.append(BootstrapService(
                entries=[str(entry) for entry in raw[0]],
                urls=[str(url) for url in raw[1]],
            ))

        return cls(
            version=str(data.get("version", "")),
            publication=str(data.get("publication", "")),
            description=str(data.get("description", "")),
            services=services,
        )

    def find_service(self, tld: str) -> Optional[BootstrapService]:
        """
        Find the service group responsible for a TLD.

        Args:
            tld: The top-level domain without leading dot (e.g. 'com')

        Returns:
            The first service whose entries contain the TLD, or None
        """
        for service in self.services:
            if service.serves(tld):
                return service
        return None

    @property
    def tlds(self) -> list[str]:
        """All TLDs listed in the registry, sorted."""
        return sorted({entry.lower() for s in self.services for entry in s.entries})


def get_service_urls(service: BootstrapService) -> list[str]:
    return service.urls


async def fetch_bootstrap_registry(
    url: str = IANA_BOOTSTRAP_URL,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> BootstrapRegistry:
    """
    Download and parse the bootstrap registry.

    Args:
        url: Location of the bootstrap document
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests)

    Raises:
        BootstrapError: On network failure, non-2xx status or invalid JSON
    """
    headers = {"Accept": "application/json"}
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            transport=transport,
        ) as client:
            response = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        raise BootstrapError(
            code="bootstrap_unreachable",
            message=f"Could not fetch bootstrap registry: {e}",
            details={"url": url, "error_type": type(e).__name__},
        )

    if not response.is_success:
        raise BootstrapError(
            code="bootstrap_http_error",
            message=f"Bootstrap registry request failed with HTTP {response.status_code}",
            details={"url": url, "http_status_code": response.status_code},
        )

    try:
        data = response.json()
    except ValueError as e:
        raise BootstrapError(
            code="malformed_registry",
            message=f"Bootstrap registry is not valid JSON: {e}",
            details={"url": url},
        )

    return BootstrapRegistry.from_dict(data)


def load_bootstrap_registry(path: Path) -> BootstrapRegistry:
    """Read the bootstrap registry from a local JSON file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise BootstrapError(
            code="bootstrap_unreadable",
            message=f"Could not read bootstrap registry from {path}: {e}",
            details={"path": str(path)},
        )
    return BootstrapRegistry.from_dict(data)
