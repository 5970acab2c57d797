"""Hexadecimal keypad and host key mapping.

The machine only knows the 16 logical keys 0x0-0xF. Hosts translate their
own key identifiers (pygame key codes, characters, ...) through a
:class:`KeyMap`.
"""

import enum
from typing import Hashable, Iterable, Mapping, Optional

import numpy as np

from chip8vm.constants import NUM_KEYS
from chip8vm.errors import KeyMapError


class Key(enum.IntEnum):
    """Logical CHIP-8 keypad keys."""
    KEY_0 = 0x0
    KEY_1 = 0x1
    KEY_2 = 0x2
    KEY_3 = 0x3
    KEY_4 = 0x4
    KEY_5 = 0x5
    KEY_6 = 0x6
    KEY_7 = 0x7
    KEY_8 = 0x8
    KEY_9 = 0x9
    KEY_A = 0xA
    KEY_B = 0xB
    KEY_C = 0xC
    KEY_D = 0xD
    KEY_E = 0xE
    KEY_F = 0xF


# COSMAC VIP keypad     QWERTY keyboard
#   1 2 3 C               1 2 3 4
#   4 5 6 D               q w e r
#   7 8 9 E               a s d f
#   A 0 B F               z x c v
DEFAULT_LAYOUT = {
    "1": Key.KEY_1, "2": Key.KEY_2, "3": Key.KEY_3, "4": Key.KEY_C,
    "q": Key.KEY_4, "w": Key.KEY_5, "e": Key.KEY_6, "r": Key.KEY_D,
    "a": Key.KEY_7, "s": Key.KEY_8, "d": Key.KEY_9, "f": Key.KEY_E,
    "z": Key.KEY_A, "x": Key.KEY_0, "c": Key.KEY_B, "v": Key.KEY_F,
}


class KeyMap:
    """Fixed bidirectional table between host key identifiers and keypad keys.

    Lookups of unmapped host identifiers return ``None``, which is never a
    valid keypad value.
    """

    def __init__(self, mapping: Mapping[Hashable, int]):
        self._to_key = {}
        self._to_host = {}
        for host_id, value in mapping.items():
            if not 0 <= int(value) < NUM_KEYS:
                raise KeyMapError(f"Keypad value {value!r} is outside 0x0-0xF")
            key = Key(int(value))
            if key in self._to_host:
                raise KeyMapError(
                    f"{key.name} is mapped to both {self._to_host[key]!r} and {host_id!r}"
                )
            self._to_key[host_id] = key
            self._to_host[key] = host_id

    def __len__(self) -> int:
        return len(self._to_key)

    def __contains__(self, host_id: Hashable) -> bool:
        return host_id in self._to_key

    def to_key(self, host_id: Hashable) -> Optional[Key]:
        """Keypad key for ``host_id``, or None if it is not mapped."""
        return self._to_key.get(host_id)

    def to_host(self, key: int) -> Optional[Hashable]:
        """Host identifier bound to ``key``, or None if the key is unbound."""
        return self._to_host.get(Key(key))

    def keys_for(self, held_host_ids: Iterable[Hashable]) -> list[Key]:
        """Keypad keys for the held host identifiers, unmapped ones dropped."""
        keys = (self.to_key(host_id) for host_id in held_host_ids)
        return sorted({key for key in keys if key is not None})

    def keypad_state(self, held_host_ids: Iterable[Hashable]) -> np.ndarray:
        """16-entry boolean array of held keypad keys."""
        state = np.zeros(NUM_KEYS, dtype=np.bool_)
        for key in self.keys_for(held_host_ids):
            state[key] = True
        return state

    @classmethod
    def translated(cls, layout: Mapping[str, int], translate) -> "KeyMap":
        """Build a KeyMap whose host ids are ``translate(char)`` for each layout char."""
        mapping = {}
        for char, key in layout.items():
            host_id = translate(char)
            if host_id in mapping:
                raise KeyMapError(f"Host key {host_id!r} is bound twice")
            mapping[host_id] = key
        return cls(mapping)
