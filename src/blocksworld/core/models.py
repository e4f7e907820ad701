"""Core data models for the blocks-world heap."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional


MIN_BLOCKS = 1
MAX_BLOCKS = 25


def clamp_block_count(requested: int) -> int:
    """Clamp a requested block count into [MIN_BLOCKS, MAX_BLOCKS]."""
    return max(MIN_BLOCKS, min(MAX_BLOCKS, requested))


@dataclass(frozen=True)
class Positions:
    """Slot indices where two blocks currently live."""

    a: int
    b: int

    @property
    def same_pile(self) -> bool:
        return self.a == self.b


class HomeSlot:
    """
    One home slot and the vertical stack it anchors.

    Position 0 is the base and is never removed; a ``None`` payload is a
    tombstone left behind by a block that moved away.
    """

    def __init__(self, index: int, positions: Optional[Iterable[Optional[int]]] = None):
        self.index = index
        self._positions: list[Optional[int]] = (
            list(positions) if positions is not None else [index]
        )
        if not self._positions:
            self._positions = [None]

    def __iter__(self) -> Iterator[Optional[int]]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    @property
    def blocks(self) -> list[int]:
        """Blocks present in this slot, bottom to top."""
        return [v for v in self._positions if v is not None]

    @property
    def height(self) -> int:
        return len(self.blocks)

    def position_of(self, block: int) -> Optional[int]:
        """Index of *block* in this slot's stack, or None if absent."""
        for pos, value in enumerate(self._positions):
            if value is not None and value == block:
                return pos
        return None

    def cut_above(self, pos: int) -> list[Optional[int]]:
        """Detach and return everything stacked above *pos*."""
        detached = self._positions[pos + 1:]
        del self._positions[pos + 1:]
        return detached

    def cut_from(self, pos: int) -> list[Optional[int]]:
        """Detach *pos* and everything above it, leaving a tombstone at *pos*."""
        detached = self._positions[pos:]
        self._positions[pos:] = [None]
        return detached

    def clear(self, pos: int) -> None:
        self._positions[pos] = None

    def stack(self, chain: Iterable[Optional[int]]) -> None:
        """Put *chain* on top of the current top of this slot."""
        self._positions.extend(chain)

    def settle(self, block: int) -> None:
        """Return *block* to this slot, reusing a tombstone at the top."""
        if self._positions[-1] is None:
            self._positions[-1] = block
        else:
            self._positions.append(block)

    def as_tuple(self) -> tuple[Optional[int], ...]:
        return tuple(self._positions)

    def __repr__(self) -> str:
        return f"HomeSlot(index={self.index}, positions={self._positions})"
