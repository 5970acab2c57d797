"""
Run a CHIP-8 ROM in a pygame window.

    python main.py roms/PONG.ch8 --ipf 12
"""

import sys

from chip8vm.cli import main

if __name__ == "__main__":
    sys.exit(main())
