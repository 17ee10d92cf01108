"""
Check Orchestrator for dmncheck.

Coordinates all components for one run:
1. Expand every pattern into candidate domains
2. Validate and normalize the candidates, grouping them by TLD
3. Resolve each TLD to its RDAP service via the bootstrap registry
4. Run the batch query engine per TLD group
5. Hand results and progress to the reporter
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import httpx

from .audit_logger import AuditLogger
from .batch_engine import BatchQueryEngine, ChunkResult
from .bootstrap import (
    BootstrapRegistry,
    fetch_bootstrap_registry,
    get_service_urls,
    load_bootstrap_registry,
)
from .config import SystemConfig
from .domain_validator import DomainValidator
from .enums import LogLevel
from .exceptions import BootstrapError, MissingDomainsError, UnknownTLDError
from .pattern_expander import expand
from .prober import AvailabilityProber
from .rdap_client import RDAPClient
from .reporter import Reporter
from .retry_manager import RetryManager


@dataclass
class DomainAvailability:
    """Final availability answer for one domain."""

    domain: str
    tld: str
    available: bool


class CheckOrchestrator:
    """
    Main orchestrator for availability runs.

    Args:
        config: System configuration
        registry: Pre-loaded bootstrap registry; fetched on demand if None
        reporter: Optional output sink
        logger: Optional audit logger
        transport: Optional httpx transport shared by bootstrap and RDAP requests
    """

    def __init__(
        self,
        config: SystemConfig,
        registry: Optional[BootstrapRegistry] = None,
        reporter: Optional[Reporter] = None,
        logger: Optional[AuditLogger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_manager: Optional[RetryManager] = None,
    ) -> None:
        self._config = config
        self._registry = registry
        self._reporter = reporter
        self._logger = logger
        self._transport = transport
        self._validator = DomainValidator()

        self._retry_manager = retry_manager or RetryManager(config.retry)
        self._rdap_client = RDAPClient(
            timeout=config.query.request_timeout_seconds,
            transport=transport,
        )
        self._prober = AvailabilityProber(
            client=self._rdap_client,
            retry_manager=self._retry_manager,
            deadline_seconds=config.query.probe_deadline_seconds,
            logger=logger,
        )
        self._engine = BatchQueryEngine(
            prober=self._prober,
            chunk_size=config.query.chunk_size,
            logger=logger,
        )

    async def __aenter__(self) -> "CheckOrchestrator":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._rdap_client.close()

    @property
    def config(self) -> SystemConfig:
        return self._config

    @property
    def engine(self) -> BatchQueryEngine:
        return self._engine

    async def load_registry(self) -> BootstrapRegistry:
        """Return the bootstrap registry, loading it once per orchestrator."""
        if self._registry is None:
            bootstrap = self._config.bootstrap
            source = str(bootstrap.file_path) if bootstrap.file_path is not None else bootstrap.url
            try:
                if bootstrap.file_path is not None:
                    self._registry = load_bootstrap_registry(bootstrap.file_path)
                else:
                    self._registry = await fetch_bootstrap_registry(
                        url=bootstrap.url,
                        timeout=bootstrap.timeout_seconds,
                        transport=self._transport,
                    )
            except BootstrapError as e:
                if self._logger:
                    self._logger.log_error(
                        "CheckOrchestrator",
                        "Could not load bootstrap registry",
                        error=e,
                        request_url=source,
                    )
                raise
            self._log_info(
                "CheckOrchestrator",
                f"Loaded bootstrap registry version {self._registry.version}",
                {
                    "source": source,
                    "publication": self._registry.publication,
                    "services": len(self._registry.services),
                },
            )
        return self._registry

    def expand_patterns(self, patterns: Sequence[str]) -> list[str]:
        """Expand every pattern, keeping argument order."""
        domains: list[str] = []
        for pattern in patterns:
            candidates = expand(pattern, max_candidates=self._config.query.max_candidates)
            self._log_debug(
                "PatternExpander",
                f"'{pattern}' expanded to {len(candidates)} candidate(s)",
                {"pattern": pattern, "candidates": len(candidates)},
            )
            domains.extend(candidates)
        return domains

    def group_by_tld(self, domains: Sequence[str]) -> dict[str, list[str]]:
        """
        Normalize domains and group them by TLD in first-seen order.

        Raises:
            UnqualifiedDomainError: If any domain is not fully qualified
        """
        groups: dict[str, list[str]] = {}
        for domain in domains:
            result = self._validator.require_valid(domain)
            groups.setdefault(result.tld, []).append(result.canonical_domain)
        return groups

    def resolve_services(
        self,
        tlds: Sequence[str],
        registry: BootstrapRegistry,
    ) -> dict[str, str]:
        """
        Map each TLD to the first service URL the registry lists for it.

        Raises:
            UnknownTLDError: If a TLD has no bootstrap service
        """
        services: dict[str, str] = {}
        for tld in tlds:
            service = registry.find_service(tld)
            urls = get_service_urls(service) if service else []
            if not urls:
                raise UnknownTLDError(
                    code="unknown_tld",
                    message=f"Could not find a bootstrap service for tld '{tld}'",
                    details={"tld": tld},
                )
            services[tld] = urls[0]
        return services

    async def run(self, patterns: Sequence[str]) -> list[DomainAvailability]:
        """
        Check every domain denoted by the given patterns.

        All input is validated and every TLD resolved before the first
        RDAP query is sent.

        Raises:
            MissingDomainsError: If there are no patterns or no candidates
            UnqualifiedDomainError: If a domain has no TLD
            UnknownTLDError: If a TLD is not in the bootstrap registry
            BootstrapError: If the registry cannot be loaded
        """
        if not patterns:
            raise MissingDomainsError(
                code="missing_domains",
                message="No domains given",
            )

        domains = self.expand_patterns(patterns)
        if not domains:
            raise MissingDomainsError(
                code="no_candidates",
                message="No valid domain names could be generated from the given patterns",
                details={"patterns": list(patterns)},
            )

        groups = self.group_by_tld(domains)
        registry = await self.load_registry()
        services = self.resolve_services(list(groups), registry)

        total = sum(len(group) for group in groups.values())
        if self._reporter is not None and hasattr(self._reporter, "set_total"):
            self._reporter.set_total(total)

        self._log_info(
            "CheckOrchestrator",
            f"Checking {total} domain(s) across {len(groups)} TLD(s)",
            {"total": total, "tlds": list(groups), "chunk_size": self._engine.chunk_size},
        )

        results: list[DomainAvailability] = []
        for tld, group in groups.items():
            endpoint = services[tld]
            self._log_debug(
                "CheckOrchestrator",
                f"Querying {len(group)} domain(s) for .{tld}",
                {"tld": tld, "endpoint": endpoint},
            )
            availabilities = await self._engine.check_domains(
                endpoint,
                group,
                on_progress=self._report_progress,
                on_chunk=self._report_chunk,
            )
            results.extend(
                DomainAvailability(domain=domain, tld=tld, available=available)
                for domain, available in zip(group, availabilities)
            )

        if self._reporter is not None:
            self._reporter.finish()

        return results

    def _report_chunk(self, chunk: ChunkResult) -> None:
        if self._reporter is not None:
            self._reporter.report_chunk(chunk)

    def _report_progress(self, processed: int, total: int) -> None:
        if self._reporter is not None:
            self._reporter.report_progress(processed, total)

    def _log_info(self, component: str, message: str, data: dict) -> None:
        """Log an info message if logger is available."""
        if self._logger:
            self._logger.log(LogLevel.INFO, component, message, data)

    def _log_debug(self, component: str, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(LogLevel.DEBUG, component, message, data)
