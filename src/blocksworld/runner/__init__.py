"""Command parsing and the driver that applies commands to a heap."""

from .commands import OPERATIONS, Command, get_operation, parse_block_count, parse_instruction
from .driver import CommandDriver, main

__all__ = [
    "OPERATIONS",
    "Command",
    "CommandDriver",
    "get_operation",
    "main",
    "parse_block_count",
    "parse_instruction",
]
