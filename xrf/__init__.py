"""
XRF Interpreter
===============
A direct interpreter for XRF, a stack-based esoteric language whose
programs are hexadecimal opcodes grouped into 5-opcode chunks.

Architecture:
    ┌───────────┐    ┌──────────┐    ┌───────────────┐    ┌──────────┐
    │ XRF text  │───>│  Loader  │───>│ ProgramStore  │───>│  Engine  │
    │ (.xrf)    │    │ (filter) │    │ chunks+flags  │    │ stack+jmp│
    └───────────┘    └──────────┘    └───────────────┘    └──────────┘

    - loader.py:   whitespace filter + alphabet/length validation
    - program.py:  chunk slicing and per-chunk visited flags
    - stack.py:    deque-backed unsigned value stack
    - opcodes.py:  opcode table, mnemonics, underflow wording
    - engine.py:   fetch/execute/jump loop and opcode handlers
"""

__version__ = "0.1.0"

import io
from typing import Iterable, Optional, Tuple

from .errors import (XRFError, LoadError, OutOfRange, StackUnderflow,
                     InvalidJump, AllocationFailure)
from .opcodes import COMMANDS_PER_CHUNK, OPCODES
from .program import ProgramStore
from .stack import ValueStack
from .loader import Loader, load_source, load_file
from .engine import Engine, StopReason


def run_source(source: str, stdin: bytes = b"", *, seed: Optional[int] = None,
               initial_stack: Iterable[int] = (),
               max_chunks: Optional[int] = None) -> Tuple[StopReason, bytes]:
    """Load and run program text against in-memory I/O.

    Returns (stop_reason, output_bytes). Errors propagate as XRFError.
    """
    store = load_source(source)
    out = io.BytesIO()
    engine = Engine(store, input_stream=io.BytesIO(stdin), output_stream=out,
                    seed=seed, initial_stack=initial_stack)
    reason = engine.run(max_chunks=max_chunks)
    return reason, out.getvalue()
