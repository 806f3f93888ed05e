"""Register file of the Intel 8080 and the encodings used to address it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

# Register fields as encoded in op codes.
REGISTER_B = 0
REGISTER_C = 1
REGISTER_D = 2
REGISTER_E = 3
REGISTER_H = 4
REGISTER_L = 5
MEMORY_ACCESS = 6
REGISTER_A = 7

# Register pair fields as encoded in op codes.
PAIR_BC = 0
PAIR_DE = 1
PAIR_HL = 2
PAIR_SP = 3

# Condition fields as encoded in op codes.
CONDITION_NZ = 0
CONDITION_Z = 1
CONDITION_NC = 2
CONDITION_C = 3
CONDITION_PO = 4
CONDITION_PE = 5
CONDITION_P = 6
CONDITION_M = 7

_REGISTER_NAMES = {
    REGISTER_B: "b",
    REGISTER_C: "c",
    REGISTER_D: "d",
    REGISTER_E: "e",
    REGISTER_H: "h",
    REGISTER_L: "l",
    REGISTER_A: "a",
}

_PAIR_NAMES = {PAIR_BC: "bc", PAIR_DE: "de", PAIR_HL: "hl", PAIR_SP: "sp"}


class Flag(IntFlag):
    """Bits of the flags register."""

    CARRY = 0x01
    PARITY = 0x04
    HALF_CARRY = 0x10
    INTERRUPT = 0x20
    ZERO = 0x40
    SIGN = 0x80


def parity(value: int) -> bool:
    """Return True when the low byte of ``value`` has an even number of set bits."""
    return bin(value & 0xFF).count("1") % 2 == 0


@dataclass
class Registers:
    """The 8080 registers; pairs are views over their two 8-bit halves."""

    a: int = 0
    flags: int = 0x02
    b: int = 0
    c: int = 0
    d: int = 0
    e: int = 0
    h: int = 0
    l: int = 0  # noqa: E741
    sp: int = 0
    pc: int = 0

    @property
    def af(self) -> int:
        return (self.a << 8) | self.flags

    @af.setter
    def af(self, value: int) -> None:
        self.a = (value >> 8) & 0xFF
        self.flags = value & 0xFF

    @property
    def bc(self) -> int:
        return (self.b << 8) | self.c

    @bc.setter
    def bc(self, value: int) -> None:
        self.b = (value >> 8) & 0xFF
        self.c = value & 0xFF

    @property
    def de(self) -> int:
        return (self.d << 8) | self.e

    @de.setter
    def de(self, value: int) -> None:
        self.d = (value >> 8) & 0xFF
        self.e = value & 0xFF

    @property
    def hl(self) -> int:
        return (self.h << 8) | self.l

    @hl.setter
    def hl(self, value: int) -> None:
        self.h = (value >> 8) & 0xFF
        self.l = value & 0xFF

    @staticmethod
    def _register_name(index: int) -> str:
        try:
            return _REGISTER_NAMES[index]
        except KeyError:
            raise ValueError(f"{index} does not name an 8-bit register") from None

    @staticmethod
    def _pair_name(index: int) -> str:
        try:
            return _PAIR_NAMES[index]
        except KeyError:
            raise ValueError(f"{index} does not name a register pair") from None

    def get(self, index: int) -> int:
        """Return the 8-bit register selected by an op-code field."""
        return getattr(self, self._register_name(index))

    def set(self, index: int, value: int) -> None:
        """Store the low byte of ``value`` in the selected 8-bit register."""
        setattr(self, self._register_name(index), value & 0xFF)

    def get_pair(self, index: int) -> int:
        """Return the register pair selected by an op-code field."""
        return getattr(self, self._pair_name(index))

    def set_pair(self, index: int, value: int) -> None:
        """Store the low word of ``value`` in the selected register pair."""
        setattr(self, self._pair_name(index), value & 0xFFFF)