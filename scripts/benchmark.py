#!/usr/bin/env python3
"""
Reactive Structures Performance Benchmarks

Measures how fast an ObservableSequence publishes change events and how much
the derived streams (element aggregation, any-change merging) cost on top,
with rich-formatted progress and a final results table.

Usage:
    python scripts/benchmark.py            # Run all benchmarks
    python scripts/benchmark.py --config   # Show current benchmark configuration
    python scripts/benchmark.py --quiet    # Only show the final table

Configuration:
    Adjust the constants at the top of the file to change benchmark parameters.
"""

import argparse
import sys
import time
from typing import Any, Callable, Dict

# Add the project root to the Python path
sys.path.insert(0, ".")

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from reactive_structures import (
    ObservableObject,
    ObservableSequence,
    any_change,
    element_changes,
    observable_property,
)

# Configuration constants - adjust these to change benchmark behavior
TIME_LIMIT_SECONDS = 1.0  # Maximum time allowed per operation
STARTING_N = 10  # Starting workload size
SCALE_FACTOR = 1.5  # How much to multiply N by each iteration


class Row(ObservableObject):
    """Minimal observable element used as a table row."""

    value = observable_property(0)

    def __init__(self, value: int) -> None:
        super().__init__()
        self.value = value


class SequenceBenchmark:
    """Rich-formatted display for ObservableSequence benchmarking."""

    def __init__(self, quiet: bool = False):
        self.console = Console()
        self.quiet = quiet
        self.results: Dict[str, Dict[str, Any]] = {}

    def run_benchmarks(self):
        """Run all benchmarks and display results with rich formatting."""
        start_time = time.time()

        self._display_header()

        self._run("append", "Append Events", self._append_operation)
        self._run("replace", "Subscript Replace", self._replace_operation)
        self._run("element", "Element Fan-in", self._element_operation)
        self._run("membership", "Membership Churn", self._membership_operation)
        self._run("any_change", "Any-Change Merge", self._any_change_operation)

        self._display_final_results(start_time)

    # ------------------------------------------------------------------
    # Operations: each returns the number of events it produced
    # ------------------------------------------------------------------

    @staticmethod
    def _append_operation(n: int) -> int:
        seq = ObservableSequence()
        received = []
        seq.changed.subscribe(received.append)
        for i in range(n):
            seq.append(i)
        assert len(received) == n
        return n

    @staticmethod
    def _replace_operation(n: int) -> int:
        seq = ObservableSequence(range(n))
        received = []
        seq.changed.subscribe(received.append)
        for i in range(n):
            seq[i] = -i
        assert len(received) == 2 * n
        return 2 * n

    @staticmethod
    def _element_operation(n: int) -> int:
        rows = [Row(i) for i in range(n)]
        seq = ObservableSequence(rows)
        received = []
        element_changes(seq).subscribe(received.append)
        for row in rows:
            row.value += 1
        assert len(received) == n
        return n

    @staticmethod
    def _membership_operation(n: int) -> int:
        seq = ObservableSequence()
        subscription = element_changes(seq).subscribe(lambda _: None)
        for i in range(n):
            seq.append(Row(i))
        while seq:
            seq.remove_last()
        subscription.dispose()
        return 2 * n

    @staticmethod
    def _any_change_operation(n: int) -> int:
        rows = [Row(i) for i in range(n)]
        seq = ObservableSequence()
        received = []
        any_change(seq).subscribe(received.append)
        seq.append_all(rows)
        for row in rows:
            row.value += 1
        assert len(received) == n + 1
        return n + 1

    # ------------------------------------------------------------------
    # Harness
    # ------------------------------------------------------------------

    def _run(self, key: str, name: str, operation: Callable[[int], int]):
        if not self.quiet:
            self.console.print(f"[yellow]Running {name} benchmark...[/yellow]")
        result = self._run_adaptive_benchmark(operation)
        self.results[key] = dict(result, name=name)
        if not self.quiet:
            self.console.print(
                f"[green]✓[/green] {name}: {result['operations_per_second']:,.0f} events/sec "
                f"({result['max_n']} items)"
            )

    def _run_adaptive_benchmark(self, operation: Callable[[int], int]) -> Dict[str, Any]:
        """Scale the workload until a single run reaches the time limit."""
        n = STARTING_N

        while True:
            start_time = time.perf_counter()
            performed = operation(n)
            operation_time = time.perf_counter() - start_time

            current_result = {
                "max_n": n,
                "operation_time": operation_time,
                "operations_per_second": performed / max(operation_time, 1e-9),
            }

            if operation_time >= TIME_LIMIT_SECONDS:
                return current_result
            n = int(n * SCALE_FACTOR) + 1

    def _display_header(self):
        header = Panel(
            Align.center("Reactive Structures Benchmark Suite"),
            title="ObservableSequence Benchmarks",
            border_style="blue",
        )
        self.console.print(header)
        self.console.print()

    def _display_final_results(self, start_time: float):
        elapsed = time.time() - start_time

        table = Table(title="Final Benchmark Results")
        table.add_column("Benchmark", style="cyan", no_wrap=True)
        table.add_column("Max Workload", style="magenta")
        table.add_column("Throughput", style="green", justify="right")
        table.add_column("Latency", style="yellow", justify="right")

        for result in self.results.values():
            ops_k = result["operations_per_second"] / 1000
            latency_us = 1e6 / max(result["operations_per_second"], 1e-9)
            table.add_row(
                result["name"],
                f"{result['max_n']} items",
                f"{ops_k:.1f}K events/sec",
                f"{latency_us:.2f}μs/event",
            )

        self.console.print()
        self.console.print(table)
        self.console.print()
        self.console.print(f"[dim]Benchmark completed in {elapsed:.2f} seconds[/dim]")


def print_config():
    """Print the current benchmark configuration."""
    print("Reactive Structures Benchmark Configuration:")
    print(f"  TIME_LIMIT_SECONDS: {TIME_LIMIT_SECONDS}")
    print(f"  STARTING_N: {STARTING_N}")
    print(f"  SCALE_FACTOR: {SCALE_FACTOR}")


def main():
    """Main entry point for the benchmark script."""
    parser = argparse.ArgumentParser(description="Reactive Structures Benchmarks")
    parser.add_argument(
        "--config", action="store_true", help="Show current benchmark configuration"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output, show only final results",
    )

    args = parser.parse_args()

    if args.config:
        print_config()
        return

    if not args.quiet:
        print_config()
        print()

    SequenceBenchmark(quiet=args.quiet).run_benchmarks()


if __name__ == "__main__":
    main()
