"""
XRF Opcode Table

Maps each hexadecimal opcode symbol to (mnemonic, stack_needed).
stack_needed is the minimum number of values that must be on the
stack before the opcode runs; the engine checks it before dispatch.

  Sym  Mnemonic  Needs  Effect
  0    READ      0      push next input byte (0 on EOF)
  1    WRITE     1      pop, emit low byte
  2    DROP      1      pop and discard
  3    DUP       1      push copy of top
  4    SWAP      2      exchange top two
  5    INC       1      top + 1
  6    DEC       1      top - 1, saturating at 0
  7    ADD       2      pop a, top + a
  8    SKIPNEW   0      skip next slot if chunk not yet visited
  9    BOTTOM    1      move top to bottom of stack
  A    RET       0      end chunk
  B    HALT      0      end program
  C    SKIPOLD   0      skip next slot if chunk already visited
  D    SHUFFLE   0      randomly permute the stack
  E    ABSDIFF   2      pop a, top = |a - top|
  F    NOP       0      nothing
"""

COMMANDS_PER_CHUNK = 5

# Stack values are 32-bit unsigned words
WORD_MASK = 0xFFFFFFFF

OPCODE_ALPHABET = frozenset('0123456789ABCDEF')

OPCODES = {
    # ── I/O ──
    '0': ('READ',    0),
    '1': ('WRITE',   1),

    # ── Stack manipulation ──
    '2': ('DROP',    1),
    '3': ('DUP',     1),
    '4': ('SWAP',    2),
    '9': ('BOTTOM',  1),
    'D': ('SHUFFLE', 0),

    # ── Arithmetic ──
    '5': ('INC',     1),
    '6': ('DEC',     1),
    '7': ('ADD',     2),
    'E': ('ABSDIFF', 2),

    # ── Control ──
    '8': ('SKIPNEW', 0),
    'A': ('RET',     0),
    'B': ('HALT',    0),
    'C': ('SKIPOLD', 0),
    'F': ('NOP',     0),
}

# Per-opcode wording for underflow messages
UNDERFLOW_VERBS = {
    '1': "output nonexistent value",
    '2': "pop an empty stack",
    '3': "duplicate nonexistent value",
    '4': "swap the top two elements",
    '5': "increment nonexistent value",
    '6': "decrement nonexistent value",
    '7': "add the top values",
    '9': "send nonexistent value to the bottom of the stack",
    'E': "get the difference of the top two values",
}


def mnemonic(symbol: str) -> str:
    """Return the mnemonic for an opcode symbol ('???' if unknown)."""
    entry = OPCODES.get(symbol)
    return entry[0] if entry else '???'


def disassemble_chunk(opcodes) -> str:
    """Render a chunk's opcodes as space-separated mnemonics."""
    return ' '.join(f"{mnemonic(sym):7s}" for sym in opcodes).rstrip()
