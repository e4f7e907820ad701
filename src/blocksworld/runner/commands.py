"""Parsing of free-text robot arm commands."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from blocksworld.core.heap import BlockHeap

logger = logging.getLogger(__name__)

QUIT = "quit"
PRINT_PREFIX = "print "

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


# Map of verb keys to heap operations
OPERATIONS: dict[str, Callable[[BlockHeap, int, int], bool]] = {
    "moveonto": BlockHeap.move_onto,
    "moveover": BlockHeap.move_over,
    "pileonto": BlockHeap.pile_onto,
    "pileover": BlockHeap.pile_over,
}


@dataclass(frozen=True)
class Command:
    """
    One instruction resolved from a line of text.

    Attributes:
        verb: Normalised verb key (e.g. "moveonto", "quit", or anything else
              for an unrecognised instruction).
        a:    First block operand, if the verb takes operands.
        b:    Second block operand; None when the line is missing it.
        text: The raw line the command came from.
    """

    verb: str
    a: Optional[int] = None
    b: Optional[int] = None
    text: str = ""

    @property
    def is_operation(self) -> bool:
        return self.verb in OPERATIONS

    @property
    def is_quit(self) -> bool:
        return self.verb == QUIT

    @property
    def is_complete(self) -> bool:
        """True for an operation with both operands present."""
        return self.is_operation and self.a is not None and self.b is not None

    def __str__(self) -> str:
        if self.is_operation:
            return f"{self.verb}({self.a}, {self.b})"
        return self.verb or "<empty>"


def parse_int(token: str) -> int:
    """
    Parse the leading integer of *token*, defaulting to 0.

    Example:
        >>> parse_int("10 blocks")
        10
        >>> parse_int("ten")
        0
    """
    match = _LEADING_INT.match(token)
    if not match:
        return 0
    return int(match.group(1))


def parse_block_count(line: str) -> int:
    """Read the block count from the first whitespace-delimited token of *line*."""
    tokens = line.split()
    return parse_int(tokens[0]) if tokens else 0


def verb_key(tokens: list[str]) -> str:
    """
    Build the normalised verb key for a split instruction.

    ``move 9 onto 1`` becomes ``moveonto``; lines of one or two tokens use
    the first token alone (``quit``).
    """
    if len(tokens) > 2:
        raw = tokens[0] + tokens[2]
    else:
        raw = tokens[0]
    return _NON_ALNUM.sub("", raw.strip().lower())


def parse_instruction(line: str) -> Command:
    """
    Resolve a line such as ``"move 9 onto 1"`` into a Command.

    Unknown verbs produce a Command that no operation matches. An operation
    with a missing operand keeps None in its place.
    """
    tokens = line.split(" ")
    verb = verb_key(tokens)

    if verb not in OPERATIONS:
        return Command(verb=verb, text=line)

    a = parse_int(tokens[1]) if len(tokens) > 1 else None
    b = parse_int(tokens[3]) if len(tokens) > 3 else None
    if a is None or b is None:
        logger.warning("Instruction %r is missing a block operand", line.rstrip("\n"))
    return Command(verb=verb, a=a, b=b, text=line)


def get_operation(verb: str) -> Callable[[BlockHeap, int, int], bool]:
    """
    Get a heap operation by verb key.

    Raises:
        ValueError: If the verb is not recognised.
    """
    if verb not in OPERATIONS:
        raise ValueError(
            f"Unknown operation: {verb}. "
            f"Available: {list(OPERATIONS.keys())}"
        )
    return OPERATIONS[verb]
