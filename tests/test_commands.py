"""
Unit tests for free-text command parsing.

Tests cover:
- Leading-integer parsing and the block-count line
- Verb resolution (case, punctuation, unknown verbs)
- Missing operands
- Operation lookup
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from blocksworld.core.heap import BlockHeap
from blocksworld.runner.commands import (
    OPERATIONS,
    Command,
    get_operation,
    parse_block_count,
    parse_instruction,
    parse_int,
    verb_key,
)


# ---------------------------------------------------------------------------
# 1. Integers and the block-count line
# ---------------------------------------------------------------------------

class TestIntegers:
    @pytest.mark.parametrize("token, expected", [
        ("10", 10),
        ("10\n", 10),
        ("  7", 7),
        ("-4", -4),
        ("12abc", 12),
        ("abc", 0),
        ("", 0),
    ])
    def test_parse_int(self, token, expected):
        assert parse_int(token) == expected

    @pytest.mark.parametrize("line, expected", [
        ("10\n", 10),
        ("10 blocks\n", 10),
        ("25432", 25432),
        ("  10 blocks\n", 10),
        ("\t7\n", 7),
        ("   \n", 0),
        ("blocks: 10\n", 0),
    ])
    def test_parse_block_count(self, line, expected):
        assert parse_block_count(line) == expected


# ---------------------------------------------------------------------------
# 2. Instructions
# ---------------------------------------------------------------------------

class TestInstructions:
    @pytest.mark.parametrize("line, verb, a, b", [
        ("move 9 onto 1\n", "moveonto", 9, 1),
        ("move 8 over 1", "moveover", 8, 1),
        ("pile 3 onto 5\n", "pileonto", 3, 5),
        ("PILE 8 Over 6\n", "pileover", 8, 6),
        ("move, 2 over! 4\n", "moveover", 2, 4),
    ])
    def test_operations(self, line, verb, a, b):
        command = parse_instruction(line)
        assert command.verb == verb
        assert (command.a, command.b) == (a, b)
        assert command.is_operation
        assert command.is_complete
        assert command.text == line

    @pytest.mark.parametrize("line", ["quit\n", "quit", "QUIT\n"])
    def test_quit(self, line):
        command = parse_instruction(line)
        assert command.is_quit
        assert not command.is_operation

    @pytest.mark.parametrize("line", ["fly 1 to 2\n", "move 1 under 2\n", "hello\n"])
    def test_unknown_verb_is_not_an_operation(self, line):
        command = parse_instruction(line)
        assert not command.is_operation
        assert not command.is_quit

    def test_missing_second_operand(self):
        command = parse_instruction("move 3 onto\n")
        assert command.verb == "moveonto"
        assert command.a == 3
        assert command.b is None
        assert not command.is_complete

    def test_bare_verb_has_no_operands(self):
        command = parse_instruction("moveonto")
        assert command.is_operation
        assert command.a is None and command.b is None

    def test_non_numeric_operands_default_to_zero(self):
        command = parse_instruction("move x onto y\n")
        assert (command.a, command.b) == (0, 0)

    def test_verb_key_short_line(self):
        assert verb_key(["quit\n"]) == "quit"
        assert verb_key(["move", "1", "onto", "2"]) == "moveonto"

    def test_str(self):
        assert str(Command("moveonto", 9, 1)) == "moveonto(9, 1)"
        assert str(Command("quit")) == "quit"


# ---------------------------------------------------------------------------
# 3. Operation lookup
# ---------------------------------------------------------------------------

class TestOperations:
    def test_all_four_registered(self):
        assert set(OPERATIONS) == {"moveonto", "moveover", "pileonto", "pileover"}

    def test_get_operation_applies_to_heap(self):
        heap = BlockHeap(10)
        assert get_operation("pileover")(heap, 2, 9) is True
        assert heap.snapshot()[9] == (9, 2)

    def test_unknown_operation_raises(self):
        with pytest.raises(ValueError, match="Unknown operation"):
            get_operation("flyto")
