"""CHIP-8 instruction decoding."""

import enum

from chex import dataclass


class Op(enum.Enum):
    """Closed set of CHIP-8 operations, named after what they do."""
    CLEAR_SCREEN = "00E0"
    RETURN = "00EE"
    JUMP = "1NNN"
    CALL = "2NNN"
    SKIP_EQ_IMM = "3XNN"
    SKIP_NE_IMM = "4XNN"
    SKIP_EQ_REG = "5XY0"
    LOAD_IMM = "6XNN"
    ADD_IMM = "7XNN"
    COPY = "8XY0"
    OR = "8XY1"
    AND = "8XY2"
    XOR = "8XY3"
    ADD_REG = "8XY4"
    SUB_XY = "8XY5"
    SHIFT_RIGHT = "8XY6"
    SUB_YX = "8XY7"
    SHIFT_LEFT = "8XYE"
    SKIP_NE_REG = "9XY0"
    LOAD_INDEX = "ANNN"
    JUMP_OFFSET = "BNNN"
    RANDOM = "CXNN"
    DRAW = "DXYN"
    SKIP_KEY = "EX9E"
    SKIP_NOT_KEY = "EXA1"
    LOAD_DELAY = "FX07"
    WAIT_KEY = "FX0A"
    SET_DELAY = "FX15"
    SET_SOUND = "FX18"
    ADD_INDEX = "FX1E"
    FONT = "FX29"
    BCD = "FX33"
    STORE_REGS = "FX55"
    LOAD_REGS = "FX65"
    UNKNOWN = "????"


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Op
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)

    def __str__(self) -> str:
        return f"{self.raw:04X} {self.op.name}"


# Families whose operation is fully determined by the top nibble.
_SIMPLE = {
    0x1: Op.JUMP,
    0x2: Op.CALL,
    0x3: Op.SKIP_EQ_IMM,
    0x4: Op.SKIP_NE_IMM,
    0x6: Op.LOAD_IMM,
    0x7: Op.ADD_IMM,
    0xA: Op.LOAD_INDEX,
    0xB: Op.JUMP_OFFSET,
    0xC: Op.RANDOM,
    0xD: Op.DRAW,
}

_SYSTEM = {
    0x00E0: Op.CLEAR_SCREEN,
    0x00EE: Op.RETURN,
}

# 5XY0 and 9XY0 are only valid with a zero trailing nibble.
_REGISTER_SKIPS = {
    0x5: Op.SKIP_EQ_REG,
    0x9: Op.SKIP_NE_REG,
}

_ALU = {
    0x0: Op.COPY,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB_XY,
    0x6: Op.SHIFT_RIGHT,
    0x7: Op.SUB_YX,
    0xE: Op.SHIFT_LEFT,
}

_KEYS = {
    0x9E: Op.SKIP_KEY,
    0xA1: Op.SKIP_NOT_KEY,
}

_MISC = {
    0x07: Op.LOAD_DELAY,
    0x0A: Op.WAIT_KEY,
    0x15: Op.SET_DELAY,
    0x18: Op.SET_SOUND,
    0x1E: Op.ADD_INDEX,
    0x29: Op.FONT,
    0x33: Op.BCD,
    0x55: Op.STORE_REGS,
    0x65: Op.LOAD_REGS,
}


def classify(instruction: int) -> Op:
    """Name the operation encoded by a 16-bit instruction word."""
    family = (instruction & 0xF000) >> 12
    if family in _SIMPLE:
        return _SIMPLE[family]
    if family == 0x0:
        return _SYSTEM.get(instruction, Op.UNKNOWN)
    if family in _REGISTER_SKIPS:
        return _REGISTER_SKIPS[family] if instruction & 0x000F == 0 else Op.UNKNOWN
    if family == 0x8:
        return _ALU.get(instruction & 0x000F, Op.UNKNOWN)
    if family == 0xE:
        return _KEYS.get(instruction & 0x00FF, Op.UNKNOWN)
    return _MISC.get(instruction & 0x00FF, Op.UNKNOWN)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = int(instruction) & 0xFFFF
    return DecodedInstruction(
        raw=instruction,
        op=classify(instruction),
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
