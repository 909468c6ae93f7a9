"""
Exception hierarchy shared by the loader, program store and engine.

Every fatal interpreter condition is an XRFError. Nothing inside the
interpreter recovers from one; the CLI reports the message and exits.
"""

__all__ = ['XRFError', 'LoadError', 'OutOfRange', 'StackUnderflow',
           'InvalidJump', 'AllocationFailure']


class XRFError(Exception):
    """Base class for all interpreter errors."""


class LoadError(XRFError):
    """Malformed program text or unreadable program file."""
    def __init__(self, message: str, line: int = 0, col: int = 0):
        self.line = line
        self.col = col
        if line:
            super().__init__(f"{message} (line {line}, column {col})")
        else:
            super().__init__(message)


class OutOfRange(XRFError, IndexError):
    """Chunk index outside the program store."""
    def __init__(self, index: int, chunk_count: int):
        self.index = index
        self.chunk_count = chunk_count
        super().__init__(f"Chunk {index} out of range (program has {chunk_count} chunks)")


class StackUnderflow(XRFError):
    """An operation needed more stack elements than were present."""


class InvalidJump(XRFError):
    """The stack top named a chunk that does not exist."""
    def __init__(self, target: int, chunk_count: int):
        self.target = target
        self.chunk_count = chunk_count
        super().__init__(f"Cannot jump to nonexistent chunk {target}!")


class AllocationFailure(XRFError):
    """The host could not provide memory for the stack or program."""
