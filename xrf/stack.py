"""
XRF Value Stack

LIFO of 32-bit unsigned words, owned by the engine.

Backed by collections.deque with the top at the right end:
  push/pop/peek       O(1)
  swap                O(1)
  send_to_bottom      O(1)   (deque.rotate)
  shuffle             O(n)   (snapshot, Fisher-Yates, write back)

Every operation that needs N values checks the depth first and raises
StackUnderflow with a message naming what could not be done.
"""

from collections import deque
from typing import Iterable, List, Optional
import random

from .errors import StackUnderflow, AllocationFailure
from .opcodes import WORD_MASK


class ValueStack:
    """Unsigned-integer stack with the XRF primitive operations."""

    def __init__(self, values: Iterable[int] = ()):
        # values are given bottom-first
        self._items: deque = deque(v & WORD_MASK for v in values)

    # --- Depth checks ---

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def require(self, count: int, action: str):
        """Raise StackUnderflow unless at least `count` values are present."""
        depth = len(self._items)
        if depth >= count:
            return
        if depth == 0:
            where = "an empty stack"
        else:
            where = "a one-value stack"
        if count == 1:
            raise StackUnderflow(f"Cannot {action}!")
        raise StackUnderflow(f"Cannot {action} of {where}!")

    # --- Core push/pop ---

    def push(self, value: int):
        try:
            self._items.append(value & WORD_MASK)
        except MemoryError as e:
            raise AllocationFailure("Unable to allocate additional stack space!") from e

    def pop(self) -> int:
        if not self._items:
            raise StackUnderflow("Can't pop an empty stack!")
        return self._items.pop()

    def peek(self) -> int:
        if not self._items:
            raise StackUnderflow("Can't read the top of an empty stack!")
        return self._items[-1]

    @property
    def top(self) -> int:
        return self.peek()

    @top.setter
    def top(self, value: int):
        if not self._items:
            raise StackUnderflow("Can't write the top of an empty stack!")
        self._items[-1] = value & WORD_MASK

    # --- Compound operations ---

    def dup(self):
        self.require(1, "duplicate nonexistent value")
        self.push(self._items[-1])

    def swap(self):
        self.require(2, "swap the top two elements")
        items = self._items
        items[-1], items[-2] = items[-2], items[-1]

    def send_to_bottom(self):
        """Move the top value to the bottom; others keep their order."""
        self.require(1, "send nonexistent value to the bottom of the stack")
        self._items.rotate(1)

    def shuffle(self, rng: Optional[random.Random] = None):
        """Uniformly permute the stack in place (no-op when empty)."""
        if len(self._items) < 2:
            return
        values = list(self._items)
        (rng or random).shuffle(values)
        self._items.clear()
        self._items.extend(values)

    # --- Inspection ---

    def snapshot(self) -> List[int]:
        """Values bottom-first."""
        return list(self._items)

    def display(self, limit: int = 8) -> str:
        """Compact top-first rendering, e.g. '[3 2 0]' or '[9 8 ... (12)]'."""
        items = list(reversed(self._items))
        if len(items) <= limit:
            return '[' + ' '.join(str(v) for v in items) + ']'
        shown = ' '.join(str(v) for v in items[:limit])
        return f"[{shown} ... ({len(items)})]"

    def __repr__(self) -> str:
        return f"ValueStack({self.snapshot()!r})"
