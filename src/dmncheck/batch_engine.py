"""
Batch Query Engine.

Fans a list of domains that share one RDAP service out to the prober.
The chunk size selects the concurrency policy:

- 0: every domain is probed at once
- 1: one domain at a time
- k > 1: contiguous chunks of k domains; probes within a chunk run
  concurrently, chunks run one after another

Chunk i always settles completely before chunk i+1 starts, and results keep
the order of the input domains.
"""

import asyncio
import math
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Optional, Sequence, TypeVar

from .audit_logger import AuditLogger
from .enums import LogLevel
from .prober import AvailabilityProber

T = TypeVar("T")


@dataclass
class ChunkResult:
    """Results for one processed chunk plus running progress counters."""

    index: int
    domains: list[str]
    results: list[bool]
    processed: int
    total: int

    @property
    def available_domains(self) -> list[str]:
        return [d for d, free in zip(self.domains, self.results) if free]


def chunk_count(total: int, chunk_size: int) -> int:
    if total == 0:
        return 0
    if chunk_size == 0:
        return 1
    return math.ceil(total / chunk_size)


def partition(items: Sequence[T], chunk_size: int) -> list[list[T]]:
    """
    Split items into contiguous chunks of at most ``chunk_size``.

    Chunk i covers ``items[k*i : k*i + k]``. A chunk size of 0 yields a
    single chunk with every item. Empty input yields no chunks.

    Raises:
        ValueError: If chunk_size is negative
    """
    if chunk_size < 0:
        raise ValueError(f"chunk_size must be >= 0, got {chunk_size}")
    if not items:
        return []
    if chunk_size == 0:
        return [list(items)]
    return [
        list(items[i * chunk_size:(i + 1) * chunk_size])
        for i in range(chunk_count(len(items), chunk_size))
    ]


async def _gather_or_cancel(coros: list) -> list:
    """Run coroutines concurrently; on the first error cancel the rest."""
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class BatchQueryEngine:
    """
    Runs availability probes for one service under a chunking policy.

    Args:
        prober: Prober used for each domain
        chunk_size: 0 for unbounded concurrency, 1 for sequential, k for chunks
        logger: Optional audit logger
    """

    def __init__(
        self,
        prober: AvailabilityProber,
        chunk_size: int = 0,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        if chunk_size < 0:
            raise ValueError(f"chunk_size must be >= 0, got {chunk_size}")
        self._prober = prober
        self._chunk_size = chunk_size
        self._logger = logger

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    async def check_chunk(self, endpoint: str, domains: list[str]) -> list[bool]:
        """Probe every domain of a chunk concurrently, preserving order."""
        if len(domains) == 1:
            return [await self._prober.probe(endpoint, domains[0])]
        return await _gather_or_cancel(
            [self._prober.probe(endpoint, domain) for domain in domains]
        )

    async def iter_chunks(
        self,
        endpoint: str,
        domains: Sequence[str],
    ) -> AsyncIterator[ChunkResult]:
        """Yield a ChunkResult as soon as each chunk has settled."""
        total = len(domains)
        processed = 0

        for index, chunk in enumerate(partition(domains, self._chunk_size)):
            results = await self.check_chunk(endpoint, chunk)
            processed += len(chunk)
            self._log_info(
                "BatchQueryEngine",
                f"Chunk {index + 1} done: {processed}/{total}",
                {
                    "endpoint": endpoint,
                    "chunk": index,
                    "chunk_size": len(chunk),
                    "available": sum(results),
                },
            )
            yield ChunkResult(
                index=index,
                domains=chunk,
                results=results,
                processed=processed,
                total=total,
            )

    async def check_domains(
        self,
        endpoint: str,
        domains: Sequence[str],
        on_progress: Optional[Callable[[int, int], None]] = None,
        on_chunk: Optional[Callable[[ChunkResult], None]] = None,
    ) -> list[bool]:
        """
        Check all domains and return one availability flag per domain.

        Args:
            endpoint: RDAP service base URL shared by all domains
            domains: Domains to check
            on_progress: Called with (processed, total) after each chunk
            on_chunk: Called with the ChunkResult after each chunk

        Returns:
            Availability flags in input order
        """
        results: list[bool] = []
        async for chunk_result in self.iter_chunks(endpoint, domains):
            results.extend(chunk_result.results)
            if on_chunk:
                on_chunk(chunk_result)
            if on_progress:
                on_progress(chunk_result.processed, chunk_result.total)
        return results

    def _log_info(self, component: str, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(LogLevel.INFO, component, message, data)
