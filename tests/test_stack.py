"""
Value Stack Tests: push/pop laws, depth checks, rotate and shuffle.
"""
import random
from collections import deque
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from xrf import AllocationFailure, StackUnderflow, ValueStack


class TestPushPop:
    def test_push_pop_inverse(self):
        s = ValueStack([3, 4])
        for v in (0, 1, 255, 0xFFFFFFFF):
            before = s.snapshot()
            s.push(v)
            assert s.pop() == v
            assert s.snapshot() == before

    def test_push_masks_to_32_bits(self):
        s = ValueStack()
        s.push(0x1_0000_0005)
        assert s.peek() == 5

    def test_pop_empty(self):
        with pytest.raises(StackUnderflow, match="empty stack"):
            ValueStack().pop()

    def test_peek_empty(self):
        with pytest.raises(StackUnderflow):
            ValueStack().peek()

    def test_top_setter_wraps(self):
        s = ValueStack([0xFFFFFFFF])
        s.top += 2
        assert s.top == 1


class TestRequire:
    def test_messages(self):
        with pytest.raises(StackUnderflow, match="^Cannot add the top values of an empty stack!$"):
            ValueStack().require(2, "add the top values")
        with pytest.raises(StackUnderflow, match="^Cannot add the top values of a one-value stack!$"):
            ValueStack([1]).require(2, "add the top values")
        with pytest.raises(StackUnderflow, match="^Cannot duplicate nonexistent value!$"):
            ValueStack().require(1, "duplicate nonexistent value")

    def test_enough_values(self):
        ValueStack([1, 2]).require(2, "swap")


class _ExhaustedDeque(deque):
    def append(self, value):
        raise MemoryError("out of memory")


class TestAllocationFailure:
    def test_push_memory_error_wrapped(self):
        s = ValueStack([1])
        s._items = _ExhaustedDeque(s._items)
        with pytest.raises(AllocationFailure, match="stack space") as exc:
            s.push(2)
        assert isinstance(exc.value.__cause__, MemoryError)
        assert s.snapshot() == [1]

    def test_dup_memory_error_wrapped(self):
        s = ValueStack([7])
        s._items = _ExhaustedDeque(s._items)
        with pytest.raises(AllocationFailure) as exc:
            s.dup()
        assert isinstance(exc.value.__cause__, MemoryError)


class TestCompound:
    def test_dup(self):
        s = ValueStack([1, 2])
        s.dup()
        assert s.snapshot() == [1, 2, 2]

    def test_swap(self):
        s = ValueStack([1, 2])
        s.swap()
        assert s.snapshot() == [2, 1]

    def test_send_to_bottom(self):
        s = ValueStack([1, 2, 3, 4])
        s.send_to_bottom()
        assert s.snapshot() == [4, 1, 2, 3]

    def test_send_to_bottom_empty(self):
        with pytest.raises(StackUnderflow):
            ValueStack().send_to_bottom()

    def test_shuffle_multiset_invariant(self):
        values = [5, 5, 1, 0, 9, 9, 9, 2]
        s = ValueStack(values)
        s.shuffle(random.Random(7))
        assert sorted(s.snapshot()) == sorted(values)

    def test_shuffle_reaches_other_orders(self):
        rng = random.Random(0)
        seen = set()
        for _ in range(200):
            s = ValueStack([1, 2, 3])
            s.shuffle(rng)
            seen.add(tuple(s.snapshot()))
        assert len(seen) == 6

    def test_display(self):
        assert ValueStack([1, 2, 3]).display() == "[3 2 1]"
        assert ValueStack(range(12)).display(limit=3) == "[11 10 9 ... (12)]"


if __name__ == '__main__':
    pytest.main([__file__, "-v"])
