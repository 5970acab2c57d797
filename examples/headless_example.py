"""Run a small hand-assembled program without a window and save the result.

Draws the 16 font glyphs in a 8x2 grid, ticking the timers every 10
instructions like a 60 Hz host running at 600 instructions per second.
"""

from chip8vm import Machine, Op
from chip8vm.rendering import save_frame


def assemble(*words):
    return b"".join(word.to_bytes(2, "big") for word in words)


ROM = assemble(
    0x6000,  # 200: V0 = 0      digit
    0x6100,  # 202: V1 = 0      x
    0x6200,  # 204: V2 = 0      y
    0xF029,  # 206: I = glyph(V0)
    0xD125,  # 208: draw 5 rows at (V1, V2)
    0x7001,  # 20A: V0 += 1
    0x7108,  # 20C: V1 += 8
    0x3140,  # 20E: skip if V1 == 64
    0x1206,  # 210: next glyph
    0x6100,  # 212: V1 = 0
    0x7208,  # 214: V2 += 8
    0x3210,  # 216: skip if V2 == 16
    0x1206,  # 218: next row
    0x121A,  # 21A: halt
)


if __name__ == "__main__":
    machine = Machine(ROM)
    while True:
        instruction = machine.execute_one()
        if machine.instruction_count % 10 == 0:
            machine.tick_timers()
        if instruction.op == Op.JUMP and instruction.nnn == 0x21A:
            break

    print(f"Halted after {machine.instruction_count} instructions")
    save_frame(machine.framebuffer, "glyphs.png", scale=8, color_scheme="orange")
    print("Saved glyphs.png")
