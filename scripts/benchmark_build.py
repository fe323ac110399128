#!/usr/bin/env python3
"""
Benchmark the org chart pipeline on generated hierarchies.

Times validation, tree building, flattening and search on record sets of
various shapes: deep management chains, wide flat teams, and random
organizations with assistants and transversal roles.

Usage:
    uv run python scripts/benchmark_build.py [--shapes SHAPE,...] [--sizes N,...]

Examples:
    uv run python scripts/benchmark_build.py
    uv run python scripts/benchmark_build.py --shapes deep --sizes 100000
    uv run python scripts/benchmark_build.py --repeat 5 --json
"""

from __future__ import annotations

import argparse
import json
import random
import time
from typing import Any, Callable

from orgchart_tree import (
    FieldMapping,
    build_tree,
    flatten_tree,
    get_path_to_root,
    search,
    validate_records,
)

MAPPING = FieldMapping(
    id="id",
    parent="parent_id",
    name="name",
    role="title",
    role_type="role_type",
    order="rank",
)

FIRST_NAMES = ["Amélie", "Bruno", "Chloé", "Damien", "Élodie", "François", "Hélène", "Jérôme"]
TITLES = ["Director", "Head of unit", "Engineer", "Analyst", "Assistant", "Coordinator"]


def generate_deep(n: int, seed: int | None = None) -> list[dict[str, Any]]:
    """Single management chain of n people."""
    return [
        {"id": i, "parent_id": i - 1 if i else None, "name": f"Person {i}", "rank": 0}
        for i in range(n)
    ]


def generate_wide(n: int, seed: int | None = None) -> list[dict[str, Any]]:
    """One manager with n - 1 direct reports, in reverse rank order."""
    records: list[dict[str, Any]] = [{"id": 0, "parent_id": None, "name": "Manager"}]
    for i in range(1, n):
        records.append({"id": i, "parent_id": 0, "name": f"Report {i}", "rank": n - i})
    return records


def generate_random(n: int, seed: int | None = None) -> list[dict[str, Any]]:
    """
    Random organization: each person reports to an earlier one.

    About one in ten people is an assistant and one in twenty transversal.
    """
    rng = random.Random(seed)
    records: list[dict[str, Any]] = [
        {"id": 0, "parent_id": None, "name": "Chief Executive", "title": "CEO"}
    ]
    for i in range(1, n):
        roll = rng.random()
        role_type = "assistant" if roll < 0.1 else "transversal" if roll < 0.15 else "standard"
        records.append(
            {
                "id": i,
                "parent_id": rng.randrange(i),
                "name": f"{rng.choice(FIRST_NAMES)} {i}",
                "title": rng.choice(TITLES),
                "role_type": role_type,
                "rank": rng.randint(1, 10),
            }
        )
    rng.shuffle(records)
    return records


SHAPES: dict[str, Callable[[int, int | None], list[dict[str, Any]]]] = {
    "deep": generate_deep,
    "wide": generate_wide,
    "random": generate_random,
}


def timed(fn: Callable[[], Any], repeat: int) -> tuple[float, Any]:
    """Run fn repeat times; return the best wall time and the last result."""
    best = float("inf")
    result: Any = None
    for _ in range(repeat):
        start = time.perf_counter()
        result = fn()
        best = min(best, time.perf_counter() - start)
    return best, result


def benchmark(records: list[dict[str, Any]], repeat: int) -> dict[str, Any]:
    """Time each pipeline stage on one record set."""
    t_validate, issues = timed(lambda: validate_records(records, MAPPING), repeat)
    if issues:
        raise SystemExit(f"Generated records are invalid: {issues[0].message}")

    t_build, tree = timed(lambda: build_tree(records, MAPPING), repeat)
    t_flatten, nodes = timed(lambda: flatten_tree(tree), repeat)
    deepest = max(nodes, key=lambda node: node.depth)
    t_path, path = timed(lambda: get_path_to_root(tree, deepest.id), repeat)
    t_search, results = timed(lambda: search(tree, "helene", MAPPING), repeat)

    return {
        "num_records": len(records),
        "max_depth": deepest.depth,
        "path_length": len(path),
        "search_hits": len(results),
        "validate_seconds": t_validate,
        "build_seconds": t_build,
        "flatten_seconds": t_flatten,
        "path_seconds": t_path,
        "search_seconds": t_search,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark the org chart pipeline")
    parser.add_argument(
        "--shapes",
        default=",".join(SHAPES),
        help=f"Comma-separated shapes to run (default: all of {', '.join(SHAPES)})",
    )
    parser.add_argument(
        "--sizes",
        default="1000,10000,50000",
        help="Comma-separated record counts (default: 1000,10000,50000)",
    )
    parser.add_argument("--repeat", type=int, default=3, help="Runs per stage (best is kept)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    args = parser.parse_args()

    sizes = [int(s) for s in args.sizes.split(",") if s]
    rows: list[dict[str, Any]] = []

    for shape in args.shapes.split(","):
        if shape not in SHAPES:
            print(f"Warning: Unknown shape '{shape}', skipping")
            continue
        for n in sizes:
            records = SHAPES[shape](n, args.seed)
            row = {"shape": shape, **benchmark(records, args.repeat)}
            rows.append(row)
            if not args.json:
                print(
                    f"{shape:>7} n={n:<7} depth={row['max_depth']:<7} "
                    f"validate={row['validate_seconds'] * 1000:8.2f}ms "
                    f"build={row['build_seconds'] * 1000:8.2f}ms "
                    f"flatten={row['flatten_seconds'] * 1000:8.2f}ms "
                    f"search={row['search_seconds'] * 1000:8.2f}ms"
                )

    if args.json:
        print(json.dumps(rows, indent=2))


if __name__ == "__main__":
    main()
