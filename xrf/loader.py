"""
Loader for XRF program text.

Scans source text one character at a time, discarding whitespace and
collecting opcode symbols. Any other character is rejected with its
line and column. The opcode count must be a positive multiple of the
chunk size before a ProgramStore is built.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Union

from .errors import LoadError
from .opcodes import COMMANDS_PER_CHUNK, OPCODE_ALPHABET
from .program import ProgramStore

log = logging.getLogger(__name__)


class Loader:
    """Turns XRF source text into a validated ProgramStore."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1
        self.opcodes: List[str] = []

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def scan(self) -> str:
        """Return the opcode symbols with whitespace stripped."""
        while self.pos < len(self.source):
            line, col = self.line, self.col
            ch = self._advance()
            if ch.isspace():
                continue
            if ch not in OPCODE_ALPHABET:
                raise LoadError(f"Unknown character {ch!r} encountered", line, col)
            self.opcodes.append(ch)
        return ''.join(self.opcodes)

    def load(self) -> ProgramStore:
        opcodes = self.scan()
        if not opcodes:
            raise LoadError("Program is empty")
        if len(opcodes) % COMMANDS_PER_CHUNK != 0:
            raise LoadError(
                f"Inadequate code length: {len(opcodes)} opcodes is not a "
                f"multiple of {COMMANDS_PER_CHUNK}")
        store = ProgramStore(opcodes)
        log.debug("Loaded %d opcodes in %d chunks", len(opcodes), store.chunk_count())
        return store


def load_source(source: str) -> ProgramStore:
    """Validate program text and build a ProgramStore."""
    return Loader(source).load()


def load_file(path: Union[str, Path]) -> ProgramStore:
    """Read a program file and build a ProgramStore.

    The file is decoded as Latin-1 so every byte maps to one character
    and stray bytes are reported as unknown characters, not decode errors.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise LoadError(f"Unable to open {path}: {e.strerror or e}") from e
    log.info("Reading %s (%d bytes)", path, len(data))
    return load_source(data.decode('latin-1'))
