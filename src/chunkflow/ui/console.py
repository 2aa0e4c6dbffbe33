"""Console output formatting utilities for chunkflow."""

from __future__ import annotations

import sys
import traceback
from typing import Optional, TextIO


class Console:
    """Reporting interface handed to every pipeline stage."""

    def __init__(
        self,
        debug: bool = False,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
            out: Stream for regular output (defaults to sys.stdout at print time)
            err: Stream for errors and debug output (defaults to sys.stderr)
        """
        self.debug = debug
        self._out = out
        self._err = err

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def _print(self, *lines: str) -> None:
        for line in lines:
            print(line, file=self.out)
        # external tool output is interleaved with ours
        self.out.flush()

    def print_run_started(
        self,
        source: str,
        work_dir: str,
        chunk_count: int,
        chunk_size: int,
    ) -> None:
        """Print run start information."""
        self._print(
            "\nRUN STARTED",
            f"Source: {source}",
            f"Work dir: {work_dir}",
            f"Fragments: {chunk_count} x {chunk_size} bytes",
            "",
        )

    def print_plan(self, stages: list[tuple[str, bool]]) -> None:
        """Print which stages will run and which are skipped."""
        self._print("PLAN")
        for name, enabled in stages:
            self._print(f"  {name}" if enabled else f"  {name} (skipped)")
        self._print("")

    def print_stage(self, name: str) -> None:
        """Print stage start message."""
        self._print(f"\nSTAGE: {name}")

    def print_stage_skipped(self, name: str, reason: str) -> None:
        """Print stage skipped message."""
        self._print(f"\nSTAGE: {name}", f"STATUS: skipped ({reason})")

    def print_success(self, name: str) -> None:
        """Print stage success message."""
        self._print("STATUS: ok")

    def print_fragment(self, action: str, src: str, dst: str) -> None:
        """Print a per-fragment transfer or copy line."""
        self._print(f"{action} {src} -> {dst}")

    def print_digest(self, digest: str) -> None:
        """Print the verified digest."""
        self._print(f"CHECKSUM: verified ({digest})")

    def print_results(self, results: dict[str, str]) -> None:
        """Print final results summary."""
        self._print("\n" + "=" * 40, "RESULTS", "=" * 40)
        for stage, status in results.items():
            status_display = status.upper() if status != "ok" else "SUCCESS"
            self._print(f"  {stage}: {status_display}")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=self.err)
        print(f"{message}", file=self.err)
        if details:
            for detail in details:
                print(f"  {detail}", file=self.err)
        if suggestion:
            print(f"\n{suggestion}", file=self.err)

    def print_exception(self, exc: BaseException) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=self.err)
        else:
            print(f"Error: {exc}", file=self.err)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        self._print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=self.err)
