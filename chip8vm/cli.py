"""Command-line entry point."""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from chip8vm.errors import Chip8Error
from chip8vm.logging import get_logger, set_log_level
from chip8vm.machine import Machine
from chip8vm.rendering import save_frame
from chip8vm.state import Quirks


def list_roms(rom_dir: Path) -> list[Path]:
    """Every regular file in ``rom_dir``, sorted by name."""
    if not rom_dir.is_dir():
        raise FileNotFoundError(f"No ROM directory at {rom_dir}")
    return sorted(path for path in rom_dir.iterdir() if path.is_file())


def choose_rom(roms: Sequence[Path], input_fn=input) -> Path:
    """Ask the user to pick one of ``roms`` by number."""
    if not roms:
        raise FileNotFoundError("No ROMs to choose from")
    for number, rom in enumerate(roms, start=1):
        print(f"  {number:3d}) {rom.name}")
    while True:
        answer = input_fn("What ROM do you want to run? ").strip()
        if answer.isdigit() and 1 <= int(answer) <= len(roms):
            return roms[int(answer) - 1]
        matches = [rom for rom in roms if rom.name == answer]
        if matches:
            return matches[0]
        print(f"Please enter a number between 1 and {len(roms)}")


def positive_int(text: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{text!r} is not an integer")
    if value < 1:
        raise argparse.ArgumentTypeError(f"{value} must be at least 1")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8vm", description="CHIP-8 interpreter")
    parser.add_argument("rom", nargs="?", type=Path, help="ROM file to run (prompted for if omitted)")
    parser.add_argument("--rom-dir", type=Path, default=Path("roms"), help="directory listed when no ROM is given")
    parser.add_argument("--scale", type=positive_int, default=10, help="window pixels per CHIP-8 pixel")
    parser.add_argument("--ipf", type=positive_int, default=10, help="instructions executed per 60 Hz frame")
    parser.add_argument("--colors", default="classic", help="color scheme name")
    parser.add_argument("--seed", type=int, default=0, help="seed for CXNN random numbers")
    parser.add_argument("--no-index-increment", action="store_true",
                        help="FX55/FX65 leave I unchanged")
    parser.add_argument("--shift-vx", action="store_true",
                        help="8XY6/8XYE shift VX in place instead of VY")
    parser.add_argument("--headless", action="store_true", help="run without a window")
    parser.add_argument("--cycles", type=int, default=1000, help="instructions to run when headless")
    parser.add_argument("--dump", type=Path, help="save the final frame to this image file when headless")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = get_logger()

    quirks = Quirks(
        increment_index=not args.no_index_increment,
        shift_uses_vy=not args.shift_vx,
    )

    try:
        set_log_level(args.log_level)
        rom = args.rom or choose_rom(list_roms(args.rom_dir))
        if args.headless:
            machine = Machine.from_file(rom, seed=args.seed, quirks=quirks)
            machine.run(args.cycles, ipf=args.ipf, progress=True)
            logger.info(f"Stopped at pc=0x{machine.pc:03X} after {machine.instruction_count} instructions")
            if args.dump:
                save_frame(machine.framebuffer, args.dump, scale=args.scale, color_scheme=args.colors)
                logger.info(f"Frame saved to {args.dump}")
        else:
            from chip8vm.host import run_emulator
            run_emulator(rom, scale=args.scale, ipf=args.ipf, color_scheme=args.colors,
                         quirks=quirks, seed=args.seed)
    except (Chip8Error, OSError, ValueError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
