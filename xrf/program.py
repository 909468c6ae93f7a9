"""
XRF Program Store: chunked opcode memory with visited flags

Instruction memory for the engine. The loader hands over a validated
opcode string; the store slices it into 5-opcode chunks and keeps one
visited flag per chunk.

Layout:
  opcodes   "00001" "1A111" ...   (flat string, len = 5 * chunk_count)
  visited   [False, False, ...]   (one bool per chunk)

The store does not validate symbols or alignment. That is the loader's
job (loader.py); a store is only ever built from text that passed it.
"""

from typing import Iterator, List, Tuple

from .errors import OutOfRange, AllocationFailure
from .opcodes import COMMANDS_PER_CHUNK, disassemble_chunk


class ProgramStore:
    """Chunk-addressed program memory.

    Usage:
        store = ProgramStore("00001" "1A111")
        store.chunk_count()      # 2
        store.opcodes_of(1)      # '1A111'
        store.mark_visited(1)
        store.is_visited(1)      # True
    """

    def __init__(self, opcodes: str):
        try:
            self._opcodes = str(opcodes)
            self._visited: List[bool] = [False] * (len(self._opcodes) // COMMANDS_PER_CHUNK)
        except MemoryError as e:
            raise AllocationFailure("Unable to allocate space for the code!") from e

    # --- Core access ---

    def chunk_count(self) -> int:
        return len(self._visited)

    @property
    def opcode_count(self) -> int:
        return len(self._opcodes)

    def _check(self, chunk_index: int):
        if not 0 <= chunk_index < len(self._visited):
            raise OutOfRange(chunk_index, len(self._visited))

    def opcodes_of(self, chunk_index: int) -> str:
        """Return the 5 opcode symbols of a chunk."""
        self._check(chunk_index)
        start = chunk_index * COMMANDS_PER_CHUNK
        return self._opcodes[start:start + COMMANDS_PER_CHUNK]

    def is_visited(self, chunk_index: int) -> bool:
        self._check(chunk_index)
        return self._visited[chunk_index]

    def mark_visited(self, chunk_index: int):
        self._check(chunk_index)
        self._visited[chunk_index] = True

    def reset_visited(self):
        """Clear every visited flag (fresh run over the same program)."""
        for i in range(len(self._visited)):
            self._visited[i] = False

    # --- Inspection ---

    def __len__(self) -> int:
        return len(self._visited)

    def __iter__(self) -> Iterator[Tuple[int, str]]:
        for i in range(len(self._visited)):
            yield i, self.opcodes_of(i)

    def visited_chunks(self) -> List[int]:
        return [i for i, flag in enumerate(self._visited) if flag]

    def listing(self) -> str:
        """Human-readable chunk listing.

        Format per line:
          <index>  <opcodes>  <visited marker>  <mnemonics>
        """
        lines = []
        for i, ops in self:
            mark = '*' if self._visited[i] else ' '
            lines.append(f"{i:5d}  {ops}  {mark}  {disassemble_chunk(ops)}")
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f"ProgramStore(chunks={self.chunk_count()}, visited={len(self.visited_chunks())})"
