#!/usr/bin/env python3

"""
Calculate maximum cardinality matching of bipartite graphs in edge list format.
"""

from __future__ import annotations

import sys
import argparse
import os
import os.path
import re
import time
from typing import Optional, TextIO

from kuhnmatching import BipartiteGraph, MalformedInput, MatchingEngine


# Input files used by "--benchmark" when no input files are specified.
DEFAULT_BENCHMARK_FILES = [
    "time-test-files/test-1.txt",
    "time-test-files/test-2.txt",
    "time-test-files/test-3.txt"]

DEFAULT_BENCHMARK_RUNS = 10
DEFAULT_BENCHMARK_LOG = "log.txt"

SIZE_LINE_PREFIX = "Maximum matching size:"


def parse_int(s: str) -> int:
    """Convert a token to an integer value.

    Only plain ASCII decimal digits with an optional leading minus sign
    are accepted.
    """
    if not re.fullmatch(r"-?[0-9]+", s):
        raise MalformedInput(f"Expecting integer but got {s!r}")
    return int(s)


def read_edge_list(f: TextIO) -> BipartiteGraph:
    """Read a bipartite graph in edge list format.

    The input starts with the vertex count "n" and the edge count "m",
    followed by pairs "u v" until the end of the input. The edge count
    is advisory; all pairs in the input are read.
    """

    words = f.read().split()

    if len(words) < 2:
        raise MalformedInput("Missing header (expecting 'n m')")

    num_vertex = parse_int(words[0])
    _num_edge = parse_int(words[1])

    body = words[2:]
    if len(body) % 2 != 0:
        raise MalformedInput(f"Incomplete edge at token {body[-1]!r}")

    edges: list[tuple[int, int]] = []
    for i in range(0, len(body), 2):
        u = parse_int(body[i])
        v = parse_int(body[i+1])
        edges.append((u, v))

    return BipartiteGraph(num_vertex, edges)


def read_edge_list_file(filename: str) -> BipartiteGraph:
    """Read a graph from file or stdin."""
    if filename:
        with open(filename, "r", encoding="ascii") as f:
            try:
                return read_edge_list(f)
            except MalformedInput as exc:
                raise MalformedInput(f"{exc} in {filename!r}") from None
    else:
        try:
            return read_edge_list(sys.stdin)
        except MalformedInput as exc:
            raise MalformedInput(f"{exc} in (stdin)") from None


def read_matching(f: TextIO) -> tuple[int, list[tuple[int, int]]]:
    """Read a matching solution in the output format."""

    size: Optional[int] = None
    pairs: list[tuple[int, int]] = []

    for line in f:
        s = line.strip()

        if not s:
            # Skip empty line.
            continue

        if s.startswith(SIZE_LINE_PREFIX):
            # Handle "size" line.
            if size is not None:
                raise ValueError("Duplicate size line")
            if pairs:
                raise ValueError("Size line must precede matched pairs")
            size = int(s[len(SIZE_LINE_PREFIX):])

        else:
            # Handle matched pair.
            words = s.split()
            if len(words) != 2:
                raise ValueError(f"Expecting matched pair but got {s!r}")
            if size is None:
                raise ValueError("Missing size line")
            u = int(words[0])
            v = int(words[1])
            if (u < 0) or (v < 0):
                raise ValueError(f"Invalid vertex index {s!r}")
            pairs.append((u, v))

    if size is None:
        raise ValueError("Missing size line")

    return (size, pairs)


def read_matching_file(filename: str) -> tuple[int, list[tuple[int, int]]]:
    """Read a matching from file."""
    with open(filename, "r", encoding="ascii") as f:
        try:
            return read_matching(f)
        except ValueError as exc:
            raise ValueError(f"{exc} in {filename!r}") from None


def write_matching(
        f: TextIO,
        size: int,
        pairs: list[tuple[int, int]]
        ) -> None:
    """Write a matching solution in the output format."""

    print(SIZE_LINE_PREFIX, size, file=f)

    for (u, v) in pairs:
        print(u, v, file=f)


def write_matching_file(
        filename: str,
        size: int,
        pairs: list[tuple[int, int]]
        ) -> None:
    """Write a matching to file or stdout."""
    if filename:
        with open(filename, "x", encoding="ascii") as f:
            write_matching(f, size, pairs)
    else:
        write_matching(sys.stdout, size, pairs)


def check_matching(
        graph: BipartiteGraph,
        pairs: list[tuple[int, int]]
        ) -> int:
    """Verify that the pairs form a valid matching in the graph.

    Returns:
        Number of matched pairs.

    Raises:
        ValueError: If the pairs are not a valid matching.
    """

    left_used: set[int] = set()
    right_used: set[int] = set()

    for (u, v) in pairs:
        if u in left_used:
            raise ValueError(f"Matching uses left vertex {u} twice")
        if v in right_used:
            raise ValueError(f"Matching uses right vertex {v} twice")
        if not ((0 <= u < graph.num_vertex) and (0 <= v < graph.num_vertex)
                and graph.has_edge(u, v)):
            raise ValueError(f"Matching contains non-existing edge ({u}, {v})")
        left_used.add(u)
        right_used.add(v)

    return len(pairs)


def compute_matching(graph: BipartiteGraph) -> tuple[int, list[tuple[int, int]]]:
    """Calculate a maximum matching and return its size and pairs."""

    engine = MatchingEngine(graph)
    size = engine.compute()
    engine.verify_maximum()

    return (size, engine.pairs())


def generate_matching(input_filename: str, output_filename: str) -> None:
    """Calculate matching of one graph instance."""

    graph = read_edge_list_file(input_filename)
    (size, pairs) = compute_matching(graph)
    write_matching_file(output_filename, size, pairs)


def run_generate(input_filename: str, output_filename: str) -> int:
    """Calculate matching and write output to file or stdout."""

    generate_matching(input_filename, output_filename)

    if output_filename:
        print(f"Output in file {output_filename!r} successful!")
        sys.stdout.flush()

    return 0


def verify_matching(filename: str) -> bool:
    """Verify matching of one graph instance."""

    print("Verifying", repr(filename), "...", end=" ")
    sys.stdout.flush()

    matching_filename = os.path.splitext(filename)[0] + ".out"

    graph = read_edge_list_file(filename)
    (gold_size, gold_pairs) = read_matching_file(matching_filename)

    try:
        gold_count = check_matching(graph, gold_pairs)
    except ValueError as exc:
        print(f"FAILED (invalid reference matching: {exc})")
        return False

    if gold_count != gold_size:
        print(f"FAILED (reference lists {gold_count} pairs"
              f" but claims size {gold_size})")
        return False

    (size, _pairs) = compute_matching(graph)

    if size != gold_size:
        print(f"FAILED (got size {size}, expected {gold_size})")
        return False

    print("OK")
    return True


def run_verify(filenames: list[str]) -> int:
    """Verify matching(s)."""

    num_passed = 0
    failed_tests: list[str] = []

    for filename in filenames:
        if verify_matching(filename):
            num_passed += 1
        else:
            failed_tests.append(filename)
        sys.stdout.flush()

    print("done.")
    print(num_passed, "tests passed")
    if failed_tests:
        print(len(failed_tests), "tests failed:")
        for filename in failed_tests:
            print("   ", filename, "FAILED")
    else:
        print("All tests passed")
    sys.stdout.flush()

    return 1 if failed_tests else 0


def benchmark_matching(
        log: TextIO,
        filename: str,
        graph: BipartiteGraph,
        num_run: int
        ) -> float:
    """Time repeated matching runs on one graph and write them to the log.

    Each run computes the matching from scratch.

    Returns:
        Average run time in milliseconds.
    """

    print(f"File: {filename}", file=log)

    engine = MatchingEngine(graph)

    run_time: list[float] = []
    for _i in range(num_run):
        t0 = time.monotonic()
        engine.compute()
        t1 = time.monotonic()
        elapsed_ms = (t1 - t0) * 1000.0
        run_time.append(elapsed_ms)
        print(f"{elapsed_ms:.3f}", file=log)

    tavg = sum(run_time) / len(run_time)
    print(f"Average time: {tavg:.3f}ms", file=log)
    print(file=log)

    return tavg


def run_benchmark(filenames: list[str], num_run: int, log_filename: str) -> int:
    """Time matching runs on each input file."""

    # Read all graphs first, so that bad input leaves an existing log intact.
    graphs = [read_edge_list_file(filename) for filename in filenames]

    with open(log_filename, "w", encoding="ascii") as log:
        for (filename, graph) in zip(filenames, graphs):
            print(f"Timing {filename!r}, {num_run} runs ...", end=" ")
            sys.stdout.flush()

            tavg = benchmark_matching(log, filename, graph, num_run)

            print(f"avg={tavg:8.3f} ms")
            sys.stdout.flush()

    print(f"Algorithm time duration logged in {log_filename!r}")
    sys.stdout.flush()

    return 0


def main() -> int:
    """Main program."""

    parser = argparse.ArgumentParser()
    parser.description = (
        "Calculate maximum cardinality matching of bipartite graphs"
        " in edge list format.")

    parser.add_argument("--output",
                        action="store",
                        type=str,
                        metavar="FILE",
                        help="write output to FILE instead of stdout")
    parser.add_argument("--verify",
                        action="store_true",
                        help="verify existing output file(s)")
    parser.add_argument("--benchmark",
                        action="store_true",
                        help="log run times of repeated matching runs")
    parser.add_argument("--runs",
                        action="store",
                        type=int,
                        metavar="R",
                        default=DEFAULT_BENCHMARK_RUNS,
                        help="number of runs per input file for --benchmark")
    parser.add_argument("--log",
                        action="store",
                        type=str,
                        metavar="FILE",
                        default=DEFAULT_BENCHMARK_LOG,
                        help="log file for --benchmark")
    parser.add_argument("input",
                        nargs="*",
                        help="input file(s); leave empty to read from stdin")

    args = parser.parse_args()

    if args.verify and args.benchmark:
        print("ERROR: Specify either --verify or --benchmark, not both",
              file=sys.stderr)
        return 1

    if args.output and (args.verify or args.benchmark):
        print("ERROR: --output can not be combined with --verify"
              " or --benchmark",
              file=sys.stderr)
        return 1

    if args.runs < 1:
        print("ERROR: Number of runs must be >= 1", file=sys.stderr)
        return 1

    try:
        if args.benchmark:
            filenames = args.input or DEFAULT_BENCHMARK_FILES
            return run_benchmark(filenames, args.runs, args.log)

        if (not args.input) and args.verify:
            print("ERROR: Can not verify when reading from stdin",
                  file=sys.stderr)
            return 1

        if args.verify:
            return run_verify(args.input)

        if len(args.input) > 1:
            print("ERROR: Need --verify or --benchmark to process"
                  " multiple inputs",
                  file=sys.stderr)
            return 1

        if (not args.input) and os.isatty(sys.stdin.fileno()):
            print("ERROR: Expecting input from stdin but stdin is a terminal",
                  file=sys.stderr)
            print(file=sys.stderr)
            parser.print_help(sys.stderr)
            return 1

        input_filename = args.input[0] if args.input else ""
        return run_generate(input_filename, args.output or "")

    except (OSError, ValueError) as exc:
        print("ERROR:", exc, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
