"""Command-line interface for inbetween.

Reads a timeline JSON document, rebuilds interpolated samples and prints a
summary of the resulting edit batch.
"""

from __future__ import annotations

import argparse
from fractions import Fraction
import logging
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from inbetween.core.config.loader import configure_logging, load_app_config
from inbetween.core.edits.emitter import EditBatch
from inbetween.core.errors import TimelineError
from inbetween.core.interpolation.models import ScrubDirection
from inbetween.core.session import InterpolationSession
from inbetween.core.timeline.index import TimelineIndex
from inbetween.core.timeline.models import Timeline
from inbetween.core.utils.json import read_json, write_json

console = Console()
logger = logging.getLogger(__name__)


def load_timeline(path: Path) -> Timeline:
    """Read and validate a timeline document."""
    return Timeline.model_validate(read_json(path))


def render_batch(batch: EditBatch) -> Table:
    table = Table(title="Edit batch")
    table.add_column("Keyframe", justify="right")
    table.add_column("Replace", justify="right")
    table.add_column("Insert", justify="right")
    table.add_column("Remove", justify="right")
    for ki in batch.touched_keyframes:
        table.add_row(
            str(ki),
            str(len(batch.replacements.get(ki, []))),
            str(len(batch.insertions.get(ki, []))),
            str(len(batch.removals.get(ki, []))),
        )
    return table


def run_rebuild(args: argparse.Namespace) -> int:
    """Rebuild interpolated samples for the requested ids."""
    timeline_path = Path(args.timeline).resolve()
    if not timeline_path.exists():
        console.print(f"[red]ERROR: Timeline not found: {timeline_path}[/red]")
        return 1

    try:
        app_config = load_app_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]ERROR: Could not load config: {escape(str(e))}[/red]")
        return 1
    configure_logging(app_config)

    try:
        timeline = load_timeline(timeline_path)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]ERROR: Invalid timeline: {escape(str(e))}[/red]")
        return 1

    session = InterpolationSession(timeline, app_config=app_config)
    direction = ScrubDirection(args.direction)
    ids = [(sample_id, set(args.replace or ())) for sample_id in args.id]
    try:
        batch = session.plan(ids, args.root, direction)
    except TimelineError as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1

    for diagnostic in batch.diagnostics:
        console.print(f"[yellow]WARNING: {escape(diagnostic.describe())}[/yellow]")

    if batch.is_empty:
        console.print("[green]Nothing to change[/green]")
    else:
        console.print(render_batch(batch))

    if args.apply:
        session.store.apply(batch)
        out_path = Path(args.apply).resolve()
        write_json(out_path, session.timeline.model_dump(mode="json"))
        console.print(f"[green]Timeline written to:[/green] {out_path}")
    return 0


def run_index(args: argparse.Namespace) -> int:
    """Print the keyframe a root beat resolves to."""
    timeline_path = Path(args.timeline).resolve()
    if not timeline_path.exists():
        console.print(f"[red]ERROR: Timeline not found: {timeline_path}[/red]")
        return 1

    try:
        index = TimelineIndex(load_timeline(timeline_path))
        beat = Fraction(args.beat)
        root = index.root_index_at_beat(beat)
        nearest = index.nearest_root_index(beat)
        keyframe = index.index_at_root(root)
    except (ValidationError, ValueError, ZeroDivisionError) as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1

    console.print(f"Beat: {beat}")
    console.print(f"Root index: {root} (keyframe {keyframe}, loop {index.loop_count(root)})")
    console.print(f"Nearest root index: {nearest}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="inbetween",
        description="inbetween - keyframe interpolation for looping drawings",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    rebuild = sub.add_parser("rebuild", help="Rebuild interpolated samples")
    rebuild.add_argument("timeline", help="Path to timeline JSON")
    rebuild.add_argument("--id", action="append", required=True, help="Sample id (repeatable)")
    rebuild.add_argument(
        "--replace", action="append", help="Id whose slot a rebuilt id may take (repeatable)"
    )
    rebuild.add_argument("--root", type=int, default=0, help="Reference root index (default: 0)")
    rebuild.add_argument(
        "--direction",
        choices=[d.value for d in ScrubDirection],
        default=ScrubDirection.NONE.value,
        help="Scrub direction before the edit (default: none)",
    )
    rebuild.add_argument("--config", default=None, help="Path to app config (JSON or YAML)")
    rebuild.add_argument("--apply", default=None, help="Write the edited timeline to this path")

    index = sub.add_parser("index", help="Resolve a root beat to a keyframe")
    index.add_argument("timeline", help="Path to timeline JSON")
    index.add_argument("--beat", required=True, help="Root beat, e.g. 5/2")

    return p


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    if args.cmd == "rebuild":
        return run_rebuild(args)
    if args.cmd == "index":
        return run_index(args)
    return 2
