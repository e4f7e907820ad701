"""Monitoring module for blocksworld-robot.

Provides run metrics tracking and Telegram notifications for command-file runs.
"""

from .metrics import (
    CommandRecord,
    RunMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from .telegram_notifier import (
    format_error,
    format_run_start,
    format_run_summary,
    send_telegram,
)

__all__ = [
    # Metrics
    "CommandRecord",
    "RunMetrics",
    "export_to_csv",
    "export_to_json",
    "print_summary",
    # Telegram
    "send_telegram",
    "format_run_start",
    "format_run_summary",
    "format_error",
]
