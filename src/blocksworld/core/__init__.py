"""Block heap data structure and its models."""

from .heap import BlockHeap
from .models import MAX_BLOCKS, MIN_BLOCKS, HomeSlot, Positions, clamp_block_count

__all__ = [
    "BlockHeap",
    "HomeSlot",
    "Positions",
    "clamp_block_count",
    "MIN_BLOCKS",
    "MAX_BLOCKS",
]
