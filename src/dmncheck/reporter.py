"""
Output sinks for availability results and progress.

The orchestrator hands every settled chunk and every progress update to a
reporter. ConsoleReporter renders them for a terminal; CollectingReporter
keeps them in memory.
"""

import sys
from typing import Optional, Protocol, TextIO, runtime_checkable

from .batch_engine import ChunkResult
from .i18n import get_message


@runtime_checkable
class Reporter(Protocol):
    """Receives results and progress from the orchestrator."""

    def report_chunk(self, chunk: ChunkResult) -> None:
        ...

    def report_progress(self, processed: int, total: int) -> None:
        ...

    def finish(self) -> None:
        ...


class ConsoleReporter:
    """
    Prints one line per domain.

    In quiet mode only available domain names are printed. Progress, when
    enabled, is redrawn in place on the progress stream as ``[n/total]``.
    """

    def __init__(
        self,
        quiet: bool = False,
        show_progress: bool = False,
        language: str = "en",
        stream: Optional[TextIO] = None,
        progress_stream: Optional[TextIO] = None,
    ) -> None:
        self._quiet = quiet
        self._show_progress = show_progress
        self._language = language
        self._stream = stream or sys.stdout
        self._progress_stream = progress_stream or sys.stderr
        self._progress_shown = False
        # Counts across all TLD groups of a run
        self._processed = 0
        self._total: Optional[int] = None

    def set_total(self, total: int) -> None:
        """Set the overall domain count so progress spans every TLD group."""
        self._total = total
        self._processed = 0

    def report_chunk(self, chunk: ChunkResult) -> None:
        self._clear_progress()
        for domain, available in zip(chunk.domains, chunk.results):
            if self._quiet:
                if available:
                    self._stream.write(f"{domain}\n")
            elif available:
                self._stream.write(get_message("result.available", self._language, domain=domain) + "\n")
            else:
                self._stream.write(get_message("result.not_available", self._language, domain=domain) + "\n")
        self._stream.flush()
        self._processed += len(chunk.domains)

    def report_progress(self, processed: int, total: int) -> None:
        if not self._show_progress:
            return
        if self._total is not None:
            processed, total = self._processed, self._total
        line = get_message("progress.line", self._language, processed=processed, total=total)
        self._progress_stream.write(f"\r{line}")
        self._progress_stream.flush()
        self._progress_shown = True

    def _clear_progress(self) -> None:
        if self._progress_shown:
            self._progress_stream.write("\r\033[K")
            self._progress_stream.flush()
            self._progress_shown = False

    def finish(self) -> None:
        if self._progress_shown:
            self._progress_stream.write("\n")
            self._progress_stream.flush()
            self._progress_shown = False


class CollectingReporter:
    """Reporter that records everything it is given."""

    def __init__(self) -> None:
        self.chunks: list[ChunkResult] = []
        self.progress: list[tuple[int, int]] = []
        self.finished = False

    def report_chunk(self, chunk: ChunkResult) -> None:
        self.chunks.append(chunk)

    def report_progress(self, processed: int, total: int) -> None:
        self.progress.append((processed, total))

    def finish(self) -> None:
        self.finished = True

    @property
    def results(self) -> list[tuple[str, bool]]:
        return [
            (domain, available)
            for chunk in self.chunks
            for domain, available in zip(chunk.domains, chunk.results)
        ]
