"""Command line helpers for Keepsake."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from random import Random

from rich.console import Console
from rich.table import Table

from .app import KeepsakeApp
from .config import KeepsakeConfig
from .diagnostics.checklist import run_checklist as checklist_run
from .diagnostics.wheel_simulator import WheelSimulator, expected_shards
from .loaders import validate_file

console = Console()


def run_simulator() -> None:
    parser = argparse.ArgumentParser(description="Keepsake prize wheel simulator")
    parser.add_argument("--spins", type=int, default=10000, help="Number of spins to simulate")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args()

    config = KeepsakeConfig.from_env()
    app = KeepsakeApp(config)
    simulator = WheelSimulator(
        app.segments,
        spin_cost=config.wheel.spin_cost,
        catalog=app.catalog,
        rng=None if args.seed is None else Random(args.seed),
    )
    result = simulator.simulate(spins=args.spins)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Segment")
    table.add_column("Weight", justify="right")
    table.add_column("Hits", justify="right")
    table.add_column("Share", justify="right")
    for segment in app.segments:
        table.add_row(
            segment.label,
            f"{segment.weight:g}",
            str(result.hits[segment.segment_id]),
            f"{result.frequency(segment.segment_id):.2%}",
        )
    console.print(f"[bold]Simulated {result.spins} spins[/bold]")
    console.print(table)
    console.print(f"Shards won per spin: {result.shards_per_spin:.1f} (expected {expected_shards(app.segments):.1f})")
    console.print(f"Value won per spin: {result.value_per_spin:.1f}, spin cost: {config.wheel.spin_cost}")
    if result.items:
        console.print("Items: " + ", ".join(f"{item} x{qty}" for item, qty in result.items.items()))


def run_checklist() -> None:
    parser = argparse.ArgumentParser(description="Keepsake balancing checks")
    parser.parse_args()

    app = KeepsakeApp(KeepsakeConfig.from_env())
    issues = checklist_run(app)
    if not issues:
        console.print("No issues found ✅", style="green")
        return
    styles = {"error": "red", "warning": "yellow", "info": "cyan"}
    for issue in issues:
        console.print(f"[{issue.severity.upper()}] {issue.message}", style=styles.get(issue.severity), markup=False)
    if any(issue.severity == "error" for issue in issues):
        sys.exit(1)


def run_validate() -> None:
    parser = argparse.ArgumentParser(description="Keepsake definition validator")
    parser.add_argument(
        "paths",
        nargs="*",
        help="Catalog, wheel, arcade or letters JSON files (defaults to the bundled ones)",
    )
    args = parser.parse_args()

    if args.paths:
        paths = [Path(path) for path in args.paths]
    else:
        config = KeepsakeConfig.from_env()
        paths = [
            config.catalog_path,
            config.wheel.segments_path,
            config.arcade_path,
            config.letters.letters_path,
        ]

    failed = False
    for path in paths:
        errors = validate_file(path)
        if errors:
            failed = True
            console.print(f"{path}: errors", style="red")
            for err in errors:
                console.print(f"- {err}", markup=False)
        else:
            console.print(f"{path}: valid ✅", style="green")
    if failed:
        sys.exit(1)
