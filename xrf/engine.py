"""
XRF Execution Engine: fetch / execute / jump loop

Integrates:
  - Program store (program.py): chunk opcodes + visited flags
  - Value stack (stack.py)
  - Opcode table (opcodes.py)

Execution model, one step per chunk:
  1. Fetch the 5 opcodes of the chunk at the cursor
  2. Read the chunk's visited flag (fixed for this whole execution)
  3. Execute slots 0-4 in order; SKIPNEW/SKIPOLD may skip one slot,
     RET ends the chunk early, HALT ends the program
  4. Mark the chunk visited
  5. The stack top becomes the next cursor value (must name a chunk)

There is no program counter outside the stack: every jump target is
whatever value the chunk left on top.

Termination reasons:
  - HALT:     opcode B
  - TIMEOUT:  max_chunks exceeded (only when a limit was given)

Every other way out of run() is an XRFError raised at the point of
violation (StackUnderflow, InvalidJump, AllocationFailure).
"""

import logging
import random
import sys
import time
from collections import deque
from enum import Enum
from typing import BinaryIO, Iterable, Optional

from .errors import StackUnderflow, InvalidJump
from .opcodes import COMMANDS_PER_CHUNK, OPCODES, UNDERFLOW_VERBS
from .program import ProgramStore
from .stack import ValueStack

log = logging.getLogger(__name__)

# Trace lines kept in memory; older lines are dropped
TRACE_LIMIT = 1000


class StopReason(Enum):
    HALT = 'HALT'
    TIMEOUT = 'TIMEOUT'


# Handler results that alter intra-chunk flow
_SKIP = 'SKIP'
_RETURN = 'RETURN'


class Engine:
    """XRF interpreter.

    Usage:
        store = load_source("005FF 21BFF")
        engine = Engine(store, input_stream=io.BytesIO(b"X"),
                        output_stream=out)
        reason = engine.run()          # StopReason.HALT
    """

    def __init__(self, program: ProgramStore, *,
                 input_stream: Optional[BinaryIO] = None,
                 output_stream: Optional[BinaryIO] = None,
                 seed: Optional[int] = None,
                 initial_stack: Iterable[int] = (),
                 trace: bool = False,
                 trace_limit: int = TRACE_LIMIT):
        self.program = program
        self._initial_stack = tuple(initial_stack)
        self.stack = ValueStack(self._initial_stack)
        self.cursor = 0

        self.input = input_stream if input_stream is not None else sys.stdin.buffer
        self.output = output_stream if output_stream is not None else sys.stdout.buffer

        # Shuffle source, seeded once per engine
        self.seed = seed if seed is not None else time.time_ns()
        self._rng = random.Random(self.seed)

        # Run statistics
        self.chunks_executed = 0
        self.ops_executed = 0

        self._trace = trace
        self._trace_output: deque = deque(maxlen=trace_limit)

        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Optional[StopReason]:
        """Execute the chunk at the cursor and take the end-of-chunk jump.

        Returns StopReason.HALT if the chunk halted, else None.
        """
        index = self.cursor
        opcodes = self.program.opcodes_of(index)
        visited = self.program.is_visited(index)

        if self._trace:
            line = (f"chunk {index:4d}  {opcodes}  {'V' if visited else '-'}  "
                    f"{self.stack.display()}")
            self._trace_output.append(line)
            log.debug(line)

        self.chunks_executed += 1
        try:
            self._execute_chunk(opcodes, visited)
        except _HaltException:
            return StopReason.HALT

        self.program.mark_visited(index)

        if not self.stack:
            raise StackUnderflow(
                "Can't have an empty stack upon reaching the end of a chunk!")
        target = self.stack.peek()
        if target >= self.program.chunk_count():
            raise InvalidJump(target, self.program.chunk_count())
        self.cursor = target
        return None

    def run(self, max_chunks: Optional[int] = None) -> StopReason:
        """Run until halt (or until max_chunks chunks have executed).

        Output is flushed on every exit path, including errors.
        """
        log.info("Running %d chunks, seed=%d", self.program.chunk_count(), self.seed)
        try:
            while max_chunks is None or self.chunks_executed < max_chunks:
                reason = self.step()
                if reason is not None:
                    log.info("Halted in chunk %d after %d chunks (%d opcodes)",
                             self.cursor, self.chunks_executed, self.ops_executed)
                    return reason
            log.warning("Chunk limit %d reached in chunk %d", max_chunks, self.cursor)
            return StopReason.TIMEOUT
        finally:
            self.output.flush()

    def _execute_chunk(self, opcodes: str, visited: bool):
        i = 0
        while i < COMMANDS_PER_CHUNK:
            sym = opcodes[i]
            needed = OPCODES[sym][1]
            if needed:
                self.stack.require(needed, UNDERFLOW_VERBS[sym])
            self.ops_executed += 1
            result = self._dispatch[sym](visited)
            if result is _RETURN:
                return
            i += 2 if result is _SKIP else 1

    # ══════════════════════════════════════════════
    # Opcode handlers
    # ══════════════════════════════════════════════
    #
    # Handler signature: handler(visited) -> None | _SKIP | _RETURN
    # Stack depth has already been checked against OPCODES.

    def _build_dispatch(self) -> dict:
        return {
            '0': self._op_read,
            '1': self._op_write,
            '2': self._op_drop,
            '3': self._op_dup,
            '4': self._op_swap,
            '5': self._op_inc,
            '6': self._op_dec,
            '7': self._op_add,
            '8': self._op_skipnew,
            '9': self._op_bottom,
            'A': self._op_ret,
            'B': self._op_halt,
            'C': self._op_skipold,
            'D': self._op_shuffle,
            'E': self._op_absdiff,
            'F': self._op_nop,
        }

    # ── I/O ──

    def _op_read(self, visited):
        data = self.input.read(1)
        self.stack.push(data[0] if data else 0)

    def _op_write(self, visited):
        self.output.write(bytes([self.stack.pop() & 0xFF]))

    # ── Stack ──

    def _op_drop(self, visited):
        self.stack.pop()

    def _op_dup(self, visited):
        self.stack.dup()

    def _op_swap(self, visited):
        self.stack.swap()

    def _op_bottom(self, visited):
        self.stack.send_to_bottom()

    def _op_shuffle(self, visited):
        self.stack.shuffle(self._rng)

    # ── Arithmetic ──

    def _op_inc(self, visited):
        self.stack.top += 1

    def _op_dec(self, visited):
        if self.stack.top > 0:
            self.stack.top -= 1

    def _op_add(self, visited):
        value = self.stack.pop()
        self.stack.top += value

    def _op_absdiff(self, visited):
        value = self.stack.pop()
        self.stack.top = abs(value - self.stack.top)

    # ── Control ──

    def _op_skipnew(self, visited):
        if not visited:
            return _SKIP

    def _op_skipold(self, visited):
        if visited:
            return _SKIP

    def _op_ret(self, visited):
        return _RETURN

    def _op_halt(self, visited):
        raise _HaltException("HALT")

    def _op_nop(self, visited):
        pass

    # ══════════════════════════════════════════════
    # Trace / reset
    # ══════════════════════════════════════════════

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def reset(self):
        """Fresh run state: initial stack, cursor 0, no chunk visited."""
        self.stack = ValueStack(self._initial_stack)
        self.cursor = 0
        self.program.reset_visited()
        self.chunks_executed = 0
        self.ops_executed = 0
        self._trace_output.clear()


# Internal exception for flow control
class _HaltException(Exception):
    pass
