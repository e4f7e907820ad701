"""
Block heap - the robot arm's world of numbered blocks.

Every block has a permanent home slot. The four arm operations relocate a
block (or a pile starting at a block) onto another block's pile:

    move a onto b   return blocks above a and above b home, put a on b
    move a over b   return blocks above a home, put a on top of b's pile
    pile a onto b   return blocks above b home, put a's pile on b
    pile a over b   put a's pile on top of b's pile

An operation whose operands are the same block, or two blocks already in
the same pile, is ignored and leaves the heap untouched.

Usage:
    heap = BlockHeap(10)
    heap.move_onto(9, 1)
    heap.pile_over(8, 6)
    print(heap.dump_state(), end="")
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from blocksworld.core.models import (
    MAX_BLOCKS,
    MIN_BLOCKS,
    HomeSlot,
    Positions,
    clamp_block_count,
)

logger = logging.getLogger(__name__)

Chain = list[Optional[int]]
Snapshot = tuple[tuple[Optional[int], ...], ...]


class BlockHeap:
    """
    Fixed set of home slots, each owning a vertical stack of blocks.

    The slot count is clamped to [1, 25] at construction and never changes.
    Slot *i* starts out holding only block *i*.
    """

    def __init__(self, block_count: int = 1) -> None:
        n = clamp_block_count(block_count)
        if n != block_count:
            logger.debug("Clamped block count %d to %d", block_count, n)
        self._slots: list[HomeSlot] = [HomeSlot(i) for i in range(n)]

    @classmethod
    def from_snapshot(cls, slots: Sequence[Iterable[Optional[int]]]) -> "BlockHeap":
        """
        Build a heap from an explicit slot layout.

        Every block 0..N-1 must appear exactly once, and each slot's base
        must hold either its own block or a tombstone.

        Raises:
            ValueError: If the layout has no slots or more than MAX_BLOCKS,
                or breaks one of the rules above.
        """
        n = len(slots)
        if not MIN_BLOCKS <= n <= MAX_BLOCKS:
            raise ValueError(
                f"Layout must have between {MIN_BLOCKS} and {MAX_BLOCKS} slots, "
                f"got {n}"
            )
        home_slots = [HomeSlot(i, positions) for i, positions in enumerate(slots)]

        blocks = [b for slot in home_slots for b in slot.blocks]
        if sorted(blocks) != list(range(n)):
            raise ValueError(
                f"Layout must hold each block 0..{n - 1} exactly once, got {sorted(blocks)}"
            )
        for slot in home_slots:
            base = slot.as_tuple()[0]
            if base is not None and base != slot.index:
                raise ValueError(f"Slot {slot.index} base holds foreign block {base}")

        heap = cls.__new__(cls)
        heap._slots = home_slots
        return heap

    # ── Introspection ────────────────────────────────────────────────────

    @property
    def block_count(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def snapshot(self) -> Snapshot:
        """Immutable copy of every slot's stack, tombstones included."""
        return tuple(slot.as_tuple() for slot in self._slots)

    def pile_heights(self) -> list[int]:
        """Number of blocks currently present in each slot."""
        return [slot.height for slot in self._slots]

    def dump_state(self) -> str:
        """
        Render the heap one slot per line, framed by blank lines.

        Each line is ``"<index>:"`` followed by the blocks found walking
        that slot bottom to top; tombstones print nothing.
        """
        lines = [""]
        for slot in self._slots:
            lines.append(f"{slot.index}:" + "".join(f" {b}" for b in slot.blocks))
        lines.append("")
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        piles = sum(1 for slot in self._slots if slot.height)
        return f"BlockHeap(blocks={self.block_count}, piles={piles})"

    # ── Lookup & legality ────────────────────────────────────────────────

    def locate(self, a: int, b: int) -> tuple[Optional[int], Optional[int]]:
        """
        Find the slots whose stacks currently contain *a* and *b*.

        Slots are scanned in ascending order and each stack bottom to top;
        the scan stops as soon as both blocks are found. A block that is
        not on the heap resolves to None.
        """
        slot_a: Optional[int] = None
        slot_b: Optional[int] = None
        for slot in self._slots:
            for value in slot:
                if value is None:
                    continue
                if slot_a is None and value == a:
                    slot_a = slot.index
                if slot_b is None and value == b:
                    slot_b = slot.index
                if slot_a is not None and slot_b is not None:
                    return slot_a, slot_b
        return slot_a, slot_b

    def legal(self, a: int, b: int) -> Optional[Positions]:
        """Resolve *a* and *b* to their slots, or None if the pair is illegal."""
        if a == b:
            return None
        slot_a, slot_b = self.locate(a, b)
        if slot_a is None or slot_b is None:
            return None
        positions = Positions(slot_a, slot_b)
        if positions.same_pile:
            return None
        return positions

    # ── Mutation primitives ──────────────────────────────────────────────

    def _extract_single(
        self, slot_index: int, block: int, clear_original: bool = False,
    ) -> tuple[Chain, Chain]:
        """
        Cut off whatever sits above *block* in slot *slot_index*.

        Returns ``(single, displaced)``: a fresh one-block chain holding
        *block* and the detached segment that was above it. With
        *clear_original* the block's own position becomes a tombstone.
        """
        slot = self._slots[slot_index]
        pos = slot.position_of(block)
        if pos is None:
            return [block], []
        displaced = slot.cut_above(pos)
        if clear_original:
            slot.clear(pos)
        return [block], displaced

    def _restore_displaced(self, chain: Iterable[Optional[int]]) -> None:
        """Send every block in *chain* back to the top of its own home slot."""
        for block in chain:
            if block is not None:
                self._slots[block].settle(block)

    def _extract_pile(self, slot_index: int, block: int) -> Chain:
        """Detach *block* and everything above it as one chain, order preserved."""
        slot = self._slots[slot_index]
        pos = slot.position_of(block)
        if pos is None:
            return []
        return slot.cut_from(pos)

    def _append_chain(self, slot_index: int, target: int, chain: Chain) -> None:
        """Stack *chain* on the top of the pile in *slot_index* holding *target*."""
        slot = self._slots[slot_index]
        if slot.position_of(target) is None:
            return
        slot.stack(chain)

    # ── Arm operations ───────────────────────────────────────────────────

    def move_onto(self, a: int, b: int) -> bool:
        """Put *a* on *b* after returning the blocks above both of them home."""
        positions = self.legal(a, b)
        if positions is None:
            logger.debug("Ignoring move %d onto %d", a, b)
            return False

        single, displaced = self._extract_single(positions.a, a, clear_original=True)
        self._restore_displaced(displaced)
        _, displaced = self._extract_single(positions.b, b)
        self._restore_displaced(displaced)
        self._append_chain(positions.b, b, single)
        return True

    def move_over(self, a: int, b: int) -> bool:
        """Put *a* on top of the pile holding *b*, returning blocks above *a* home."""
        positions = self.legal(a, b)
        if positions is None:
            logger.debug("Ignoring move %d over %d", a, b)
            return False

        single, displaced = self._extract_single(positions.a, a, clear_original=True)
        self._restore_displaced(displaced)
        self._append_chain(positions.b, b, single)
        return True

    def pile_onto(self, a: int, b: int) -> bool:
        """Put the pile starting at *a* on *b*, returning blocks above *b* home."""
        positions = self.legal(a, b)
        if positions is None:
            logger.debug("Ignoring pile %d onto %d", a, b)
            return False

        _, displaced = self._extract_single(positions.b, b)
        self._restore_displaced(displaced)
        pile = self._extract_pile(positions.a, a)
        self._append_chain(positions.b, b, pile)
        return True

    def pile_over(self, a: int, b: int) -> bool:
        """Put the pile starting at *a* on top of the pile holding *b*."""
        positions = self.legal(a, b)
        if positions is None:
            logger.debug("Ignoring pile %d over %d", a, b)
            return False

        pile = self._extract_pile(positions.a, a)
        self._append_chain(positions.b, b, pile)
        return True
