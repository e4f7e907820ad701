"""Command driver: runs a free-text command file against a block heap."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, TextIO

from blocksworld.config import ConfigError, RunConfig, load_config
from blocksworld.core.heap import BlockHeap
from blocksworld.monitoring.metrics import (
    CommandRecord,
    RunMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from blocksworld.monitoring.telegram_notifier import (
    format_error,
    format_run_start,
    format_run_summary,
    send_telegram,
)
from blocksworld.runner.commands import (
    PRINT_PREFIX,
    Command,
    get_operation,
    parse_block_count,
    parse_instruction,
)

logger = logging.getLogger(__name__)


class CommandDriver:
    """
    Reads robot arm commands line by line and applies them to a BlockHeap.

    The first non-blank, non-comment line gives the block count; every
    later line is an instruction. ``print <text>`` echoes the text, runs it
    as an instruction and then dumps the heap state. ``quit`` dumps the
    heap state. Echoes and dumps are written to *out*.
    """

    def __init__(
        self,
        config: Optional[RunConfig] = None,
        out: Optional[TextIO] = None,
        heap: Optional[BlockHeap] = None,
    ):
        """
        Initialize the driver.

        Args:
            config: Run configuration (default: RunConfig()).
            out: Stream for echoes and state dumps (default: sys.stdout).
            heap: Pre-built heap to drive. When given, the block-count line
                  is still consumed but does not replace it.
        """
        self.config = config or RunConfig()
        self.out = out if out is not None else sys.stdout
        self.heap = heap
        self._given_heap = heap
        self.metrics: Optional[RunMetrics] = None
        self._initialized = False
        self._stopped = False
        self._step = 0

    def run_file(self, path: Path | str) -> RunMetrics:
        """
        Run every command in a file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            return self.run(f, source=str(path))

    def run(self, lines: Iterable[str], source: str = "<stream>") -> RunMetrics:
        """
        Run commands from an iterable of lines.

        Each call starts a fresh run: the count line is read again and a
        heap built by a previous run is discarded. A heap passed to the
        constructor is kept.

        Returns:
            RunMetrics for the run, completed and (if configured) saved.
        """
        self._initialized = False
        self._stopped = False
        self._step = 0
        self.heap = self._given_heap

        run_id = f"run_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"
        self.metrics = RunMetrics(run_id=run_id)
        logger.info("Starting %s from %s", run_id, source)

        for line in lines:
            self.process_line(line)
            if self._stopped:
                logger.info("Stopped on quit after %d commands", self._step)
                break

        if self.heap is not None:
            self.metrics.block_count = self.heap.block_count
            self.metrics.record_piles(self.heap.pile_heights())
        else:
            logger.warning("No block count found in %s", source)
        self.metrics.mark_complete()

        if self.config.results_dir is not None:
            self._save_results(self.metrics, Path(self.config.results_dir))

        logger.info(
            "Finished %s: %d commands, %d applied",
            run_id, self.metrics.total_commands, self.metrics.applied_count,
        )
        return self.metrics

    def process_line(self, line: str) -> None:
        """Handle one raw line of the command source."""
        if not line.strip() or line.startswith(self.config.comment_prefix):
            return

        if not self._initialized:
            count = parse_block_count(line)
            if self.heap is None:
                self.heap = BlockHeap(count)
            self._initialized = True
            logger.info("Heap ready with %d blocks", self.heap.block_count)
            return

        if line.startswith(PRINT_PREFIX):
            text = line[len(PRINT_PREFIX):]
            if self.config.echo_prints:
                self.out.write(text)
            self.execute(parse_instruction(text))
            self.dump_state()
            return

        self.execute(parse_instruction(line))

    def execute(self, command: Command) -> bool:
        """
        Apply a parsed command to the heap.

        Returns:
            True if the heap changed.
        """
        if self.heap is None:
            return False

        if command.is_quit:
            self.dump_state()
            if self.config.stop_on_quit:
                self._stopped = True
            return False

        if not command.is_operation:
            logger.debug("Skipping unrecognised instruction %r", command.text.rstrip("\n"))
            return False

        self._step += 1
        applied = False
        if command.is_complete:
            operation = get_operation(command.verb)
            applied = operation(self.heap, command.a, command.b)

        if self.metrics is not None:
            self.metrics.add_command(CommandRecord(
                step=self._step,
                verb=command.verb,
                a=command.a,
                b=command.b,
                applied=applied,
            ))
        return applied

    def dump_state(self) -> None:
        """Write the heap state to the output stream."""
        if self.heap is None:
            return
        self.out.write(self.heap.dump_state())
        if self.metrics is not None:
            self.metrics.record_dump()

    def _save_results(self, metrics: RunMetrics, results_dir: Path) -> None:
        """Save metrics to JSON and CSV files under *results_dir*."""
        json_path = results_dir / f"{metrics.run_id}.json"
        csv_path = results_dir / f"{metrics.run_id}_commands.csv"
        export_to_json(metrics, json_path)
        export_to_csv(metrics, csv_path)
        logger.info("Saved results to %s and %s", json_path, csv_path)


def _notify(message: str) -> None:
    sent = asyncio.run(send_telegram(message))
    logger.debug("Telegram notification %s", "sent" if sent else "not sent")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blocksworld-robot",
        description="Run a robot arm command file against a blocks-world heap",
    )
    parser.add_argument("commands", help="Command file to run")
    parser.add_argument("--config", default=None, help="YAML run configuration")
    parser.add_argument(
        "--results-dir",
        default=None,
        help="Directory for metrics JSON/CSV (overrides config)",
    )
    parser.add_argument(
        "--telegram",
        action="store_true",
        help="Send start and summary notifications via Telegram",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a run summary to stderr when done",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Console entry point.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError) as e:
        print(f"blocksworld-robot: {e}", file=sys.stderr)
        return 1

    updates: dict = {}
    if args.results_dir is not None:
        updates["results_dir"] = Path(args.results_dir)
    if args.telegram:
        updates["send_telegram_updates"] = True
    if args.verbose:
        updates["log_level"] = "DEBUG"
    if updates:
        config = config.model_copy(update=updates)

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if config.send_telegram_updates:
        _notify(format_run_start(args.commands))

    driver = CommandDriver(config)
    try:
        metrics = driver.run_file(args.commands)
    except OSError as e:
        print(f"blocksworld-robot: {e}", file=sys.stderr)
        if config.send_telegram_updates:
            _notify(format_error(str(e), context=args.commands))
        return 1

    if args.summary:
        print(print_summary(metrics), file=sys.stderr)

    if config.send_telegram_updates:
        _notify(format_run_summary(
            run_id=metrics.run_id,
            total_commands=metrics.total_commands,
            applied=metrics.applied_count,
            ignored=metrics.noop_count,
            runtime_seconds=metrics.runtime_seconds,
        ))
    return 0


if __name__ == "__main__":
    sys.exit(main())
