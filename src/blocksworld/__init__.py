"""Blocks-world robot arm simulator.

A heap of numbered blocks manipulated by four arm operations, plus a driver
that reads free-text command files.
"""

from .core.heap import BlockHeap

__version__ = "0.1.0"
__all__ = ["BlockHeap", "__version__"]
