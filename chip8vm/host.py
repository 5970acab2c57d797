"""pygame front-end: window, keyboard, 60 Hz pacing and a beeper."""

import os
import time

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import numpy as np
import pygame

from chip8vm.constants import SCREEN_HEIGHT, SCREEN_WIDTH, TIMER_FREQUENCY
from chip8vm.errors import MachineFault
from chip8vm.keypad import DEFAULT_LAYOUT, KeyMap
from chip8vm.logging import get_logger
from chip8vm.machine import Machine
from chip8vm.rendering import create_color_scheme, pixel_size
from chip8vm.state import Quirks


def pygame_key_map() -> KeyMap:
    """Default QWERTY layout expressed in pygame key codes."""
    return KeyMap.translated(DEFAULT_LAYOUT, pygame.key.key_code)


class Beeper:
    """Square-wave tone that plays while the sound timer is active."""

    def __init__(self, frequency: int = 440, volume: float = 0.2, sample_rate: int = 44100):
        self.playing = False
        self.sound = None
        try:
            pygame.mixer.init(frequency=sample_rate, size=-16, channels=1)
        except pygame.error as e:
            get_logger().warning(f"Audio unavailable, running silent: {e}")
            return

        # The mixer may not honour the requested format.
        sample_rate, _, channels = pygame.mixer.get_init()
        period = max(2, sample_rate // frequency)
        wave = np.where(np.arange(period) < period // 2, 1, -1) * int(32767 * volume)
        wave = np.tile(wave, max(1, sample_rate // period // 10)).astype(np.int16)
        if channels > 1:
            wave = np.repeat(wave[:, None], channels, axis=1)
        self.sound = pygame.mixer.Sound(buffer=np.ascontiguousarray(wave).tobytes())

    def update(self, active: bool):
        if self.sound is None or active == self.playing:
            return
        if active:
            self.sound.play(loops=-1)
        else:
            self.sound.stop()
        self.playing = active


def draw_overlay_text(surface, text_lines, position, font, bg_color=(0, 0, 0), text_color=(255, 255, 255), alpha=120):
    """Draw text with semi-transparent background overlay"""
    if not text_lines:
        return

    line_height = font.get_height()
    max_width = max(font.size(line)[0] for line in text_lines)
    overlay = pygame.Surface((max_width + 16, len(text_lines) * line_height + 8))
    overlay.set_alpha(alpha)
    overlay.fill(bg_color)
    surface.blit(overlay, position)

    x, y = position
    for i, line in enumerate(text_lines):
        text_surface = font.render(line, True, text_color)
        surface.blit(text_surface, (x + 8, y + 4 + i * line_height))


def draw_display(surface, framebuffer, on_color, off_color):
    """Draw the framebuffer as rectangles stretched over the whole surface."""
    pixel_width, pixel_height = pixel_size(surface.get_size())
    surface.fill(off_color)
    for row, column in zip(*np.nonzero(framebuffer)):
        rect = pygame.Rect(
            int(column * pixel_width), int(row * pixel_height),
            int(np.ceil(pixel_width)), int(np.ceil(pixel_height)),
        )
        pygame.draw.rect(surface, on_color, rect)


def run_emulator(rom_filename, scale=10, ipf=10, color_scheme="classic", quirks=Quirks(), seed=0):
    """Main emulator loop: ``ipf`` instructions and one timer tick per 60 Hz frame."""
    logger = get_logger()
    on_color, off_color = create_color_scheme(color_scheme)

    def build_machine():
        return Machine.from_file(rom_filename, seed=seed, quirks=quirks)

    machine = build_machine()

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale), pygame.RESIZABLE)
    pygame.display.set_caption(f"chip8vm - {os.path.basename(str(rom_filename))}")
    clock = pygame.time.Clock()
    key_map = pygame_key_map()
    beeper = Beeper()
    font = pygame.font.Font(None, 18)

    held = set()
    running = True
    paused = False
    show_debug = False
    start_time = time.time()

    logger.info("Controls: ESC=Quit, P=Pause, F5=Reset, +/-=Speed, F1=Debug")

    while running:
        clock.tick(TIMER_FREQUENCY)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                elif event.key == pygame.K_F1:
                    show_debug = not show_debug
                elif event.key == pygame.K_F5:
                    machine = build_machine()
                    held.clear()
                    paused = False
                    logger.info("Reset")
                elif event.key == pygame.K_EQUALS:
                    ipf = min(100, ipf + 2)
                    logger.info(f"Speed: {ipf} instructions per frame")
                elif event.key == pygame.K_MINUS:
                    ipf = max(1, ipf - 2)
                    logger.info(f"Speed: {ipf} instructions per frame")
                elif event.key in key_map:
                    held.add(event.key)
            elif event.type == pygame.KEYUP:
                held.discard(event.key)

        if not paused:
            machine.set_keys(key_map.keys_for(held))
            machine.tick_timers()
            for _ in range(ipf):
                try:
                    machine.execute_one()
                except MachineFault as e:
                    logger.error(f"{type(e).__name__}: {e} (pc=0x{machine.pc:03X})")
                    paused = True
                    break

        beeper.update(machine.sound_active and not paused)
        draw_display(screen, machine.framebuffer, on_color, off_color)

        if show_debug:
            runtime = time.time() - start_time
            registers = machine.registers
            lines = [
                f"PC: 0x{machine.pc:03X}  I: 0x{machine.index:03X}  SP: {machine.stack_depth}",
                f"DT: {machine.delay_timer}  ST: {machine.sound_timer}",
                f"IPF: {ipf}  FPS: {clock.get_fps():.1f}",
                f"Instructions: {machine.instruction_count} ({machine.instruction_count / max(runtime, 1e-9):.0f}/s)",
            ]
            lines += [" ".join(f"V{j:X}:{registers[j]:02X}" for j in range(i, i + 4)) for i in range(0, 16, 4)]
            draw_overlay_text(screen, lines, (5, 5), font, alpha=100)
        elif paused:
            draw_overlay_text(screen, ["PAUSED - P to resume"], (5, 5), font, text_color=(255, 255, 0))

        pygame.display.flip()

    beeper.update(False)
    pygame.quit()
