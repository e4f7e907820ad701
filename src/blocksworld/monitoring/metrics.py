"""Metrics tracking and export for command-file runs.

Provides dataclasses for tracking what a run did to the heap and utilities
for exporting results to JSON and CSV formats.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import numpy as np


CSV_FIELDS = ["step", "verb", "a", "b", "applied"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CommandRecord:
    """Outcome of a single arm operation.

    Attributes:
        step: 1-based position of the command in the run.
        verb: Verb key (e.g. "moveonto").
        a: First block operand.
        b: Second block operand (None if the line was missing it).
        applied: False when the heap ignored the command.
    """

    step: int
    verb: str
    a: Optional[int]
    b: Optional[int]
    applied: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class RunMetrics:
    """Aggregate metrics for one command-file run.

    Attributes:
        run_id: Unique identifier for the run.
        block_count: Number of blocks on the heap.
        total_commands: Arm operations seen (applied or not).
        applied_count: Operations that changed the heap.
        noop_count: Operations the heap ignored.
        dumps_count: State dumps written.
        by_verb: Operations seen per verb key.
        mean_pile_height: Mean number of blocks per slot at the end.
        max_pile_height: Tallest pile at the end.
        tallest_slot: Slot index holding the tallest pile.
        runtime_seconds: Total runtime in seconds.
        started_at: Run start timestamp.
        completed_at: Run completion timestamp (None while running).
        commands: Per-command records.
    """

    run_id: str
    block_count: int = 0
    total_commands: int = 0
    applied_count: int = 0
    noop_count: int = 0
    dumps_count: int = 0
    by_verb: dict[str, int] = field(default_factory=dict)
    mean_pile_height: float = 0.0
    max_pile_height: int = 0
    tallest_slot: int = 0
    runtime_seconds: float = 0.0
    started_at: datetime = field(default_factory=_now)
    completed_at: datetime | None = None
    commands: list[CommandRecord] = field(default_factory=list)

    def add_command(self, record: CommandRecord) -> None:
        """Add one operation's outcome to the run.

        Example:
            >>> rm = RunMetrics("run_001", block_count=10)
            >>> rm.add_command(CommandRecord(1, "moveonto", 9, 1, True))
            >>> rm.applied_count
            1
        """
        self.commands.append(record)
        self.total_commands += 1
        if record.applied:
            self.applied_count += 1
        else:
            self.noop_count += 1
        self.by_verb[record.verb] = self.by_verb.get(record.verb, 0) + 1

    def record_dump(self) -> None:
        self.dumps_count += 1

    def record_piles(self, pile_heights: list[int]) -> None:
        """Store end-of-run pile statistics.

        Example:
            >>> rm = RunMetrics("run_001")
            >>> rm.record_piles([0, 3, 1])
            >>> rm.max_pile_height, rm.tallest_slot
            (3, 1)
        """
        if not pile_heights:
            return
        heights = np.asarray(pile_heights, dtype=np.int64)
        self.mean_pile_height = float(np.mean(heights))
        self.max_pile_height = int(np.max(heights))
        self.tallest_slot = int(np.argmax(heights))

    def mark_complete(self) -> None:
        """Mark the run as complete and calculate final runtime."""
        self.completed_at = _now()
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamps."""
        d = asdict(self)
        d["started_at"] = self.started_at.isoformat()
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        d["commands"] = [c.to_dict() for c in self.commands]
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Convert to summary dictionary without per-command records."""
        d = self.to_dict()
        del d["commands"]
        return d


def export_to_json(metrics: RunMetrics, output_path: Path | str, include_commands: bool = True) -> None:
    """Export run metrics to a JSON file.

    Args:
        metrics: RunMetrics instance to export.
        output_path: Path to output JSON file.
        include_commands: If True, include per-command records. If False, summary only.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = metrics.to_dict() if include_commands else metrics.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: RunMetrics, output_path: Path | str) -> None:
    """Export per-command records to a CSV file (header only if there are none)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for record in metrics.commands:
            writer.writerow(record.to_dict())


def print_summary(metrics: RunMetrics) -> str:
    """Generate a human-readable summary of run metrics.

    Example:
        >>> rm = RunMetrics("run_001", block_count=10)
        >>> "Run: run_001" in print_summary(rm)
        True
    """
    verbs = ", ".join(f"{verb}={count}" for verb, count in sorted(metrics.by_verb.items()))
    lines = [
        "=" * 60,
        f"Run: {metrics.run_id}",
        f"Blocks: {metrics.block_count}",
        "=" * 60,
        f"Commands: {metrics.total_commands}",
        f"  Applied: {metrics.applied_count}",
        f"  Ignored: {metrics.noop_count}",
        f"  By verb: {verbs or '-'}",
        f"State dumps: {metrics.dumps_count}",
        "",
        "Piles:",
        f"  Mean height: {metrics.mean_pile_height:.2f}",
        f"  Tallest:     {metrics.max_pile_height} (slot {metrics.tallest_slot})",
        "",
        f"Runtime: {metrics.runtime_seconds:.3f} seconds",
        f"Started:   {metrics.started_at.isoformat()}",
        f"Completed: {metrics.completed_at.isoformat() if metrics.completed_at else 'In Progress'}",
        "=" * 60,
    ]
    return "\n".join(lines)
