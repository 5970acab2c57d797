"""CHIP-8 machine exceptions.

Unknown opcodes are not errors: they are reported through the logger and
skipped. Everything raised from here indicates a ROM the machine cannot
faithfully run.
"""


class Chip8Error(Exception):
    """Base class for all chip8vm errors."""


class RomTooLargeError(Chip8Error):
    """ROM image does not fit between PROGRAM_START and the end of memory."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"ROM is {size} bytes, at most {limit} bytes fit in memory")
        self.size = size
        self.limit = limit


class MachineFault(Chip8Error):
    """Fatal defect raised while executing an instruction."""


class StackUnderflowError(MachineFault):
    """00EE executed with an empty call stack."""

    def __init__(self, pc: int):
        super().__init__(f"Return with empty call stack at 0x{pc:03X}")
        self.pc = pc


class StackOverflowError(MachineFault):
    """2NNN executed with every stack slot in use."""

    def __init__(self, pc: int, depth: int):
        super().__init__(f"Call stack overflow ({depth} frames) at 0x{pc:03X}")
        self.pc = pc
        self.depth = depth


class MemoryAccessError(MachineFault):
    """An access derived from PC or I reaches beyond the end of memory."""

    def __init__(self, address: int, length: int):
        super().__init__(
            f"Memory access of {length} byte(s) at 0x{address:04X} is out of range"
        )
        self.address = address
        self.length = length


class KeyMapError(Chip8Error):
    """Invalid host key to keypad mapping."""
