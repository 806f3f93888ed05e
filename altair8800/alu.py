"""Arithmetic, logic and flag rules of the Intel 8080 accumulator."""

from __future__ import annotations

from .registers import (
    CONDITION_C,
    CONDITION_M,
    CONDITION_NC,
    CONDITION_NZ,
    CONDITION_P,
    CONDITION_PE,
    CONDITION_PO,
    CONDITION_Z,
    Flag,
    Registers,
    parity,
)

# Each condition field maps to the flag it tests and the state that satisfies it.
_CONDITIONS = {
    CONDITION_NZ: (Flag.ZERO, False),
    CONDITION_Z: (Flag.ZERO, True),
    CONDITION_NC: (Flag.CARRY, False),
    CONDITION_C: (Flag.CARRY, True),
    CONDITION_PO: (Flag.PARITY, False),
    CONDITION_PE: (Flag.PARITY, True),
    CONDITION_P: (Flag.SIGN, False),
    CONDITION_M: (Flag.SIGN, True),
}


def _put_flag(registers: Registers, flag: Flag, state: bool) -> None:
    if state:
        registers.flags |= flag
    else:
        registers.flags &= ~flag & 0xFF


def carry(a: int, b: int) -> bool:
    """Return True when ``a + b`` does not fit in a byte."""
    return a + b > 0xFF


def half_carry(a: int, b: int) -> bool:
    """Return True when adding the low nibbles of ``a`` and ``b`` carries."""
    return (a & 0xF) + (b & 0xF) > 0xF


def update_flags(registers: Registers, value: int) -> None:
    """Set the zero, sign and parity flags from ``value``."""
    value &= 0xFF
    _put_flag(registers, Flag.PARITY, parity(value))
    _put_flag(registers, Flag.ZERO, value == 0)
    _put_flag(registers, Flag.SIGN, bool(value & 0x80))


def add(registers: Registers, value: int) -> int:
    """Add ``value`` to the accumulator, set all flags, return the new accumulator."""
    a = registers.a
    _put_flag(registers, Flag.HALF_CARRY, half_carry(a, value))
    _put_flag(registers, Flag.CARRY, carry(a, value))
    registers.a = (a + value) & 0xFF
    update_flags(registers, registers.a)
    return registers.a


def subtract(registers: Registers, value: int) -> int:
    """Subtract ``value`` from the accumulator by adding its two's complement.

    The carry flag is set on a borrow. Returns the new accumulator.
    """
    a = registers.a
    complement = (0x100 - value) & 0xFFFF
    _put_flag(registers, Flag.HALF_CARRY, half_carry(a, complement))
    _put_flag(registers, Flag.CARRY, not carry(a, complement))
    registers.a = (a + complement) & 0xFF
    update_flags(registers, registers.a)
    return registers.a


def compare(registers: Registers, value: int) -> None:
    """Set the flags as a subtraction would, leaving the accumulator unchanged."""
    saved = registers.a
    subtract(registers, value)
    registers.a = saved


def rotate_left(registers: Registers) -> int:
    """Rotate the accumulator left; bit 7 goes to bit 0 and to carry."""
    high = bool(registers.a & 0x80)
    registers.a = ((registers.a << 1) & 0xFF) | int(high)
    _put_flag(registers, Flag.CARRY, high)
    return registers.a


def rotate_right(registers: Registers) -> int:
    """Rotate the accumulator right; bit 0 goes to bit 7 and to carry."""
    low = bool(registers.a & 0x01)
    registers.a = (registers.a >> 1) | (0x80 if low else 0)
    _put_flag(registers, Flag.CARRY, low)
    return registers.a


def rotate_left_through_carry(registers: Registers) -> int:
    """Rotate the accumulator left through the carry flag."""
    high = bool(registers.a & 0x80)
    carry_in = 1 if registers.flags & Flag.CARRY else 0
    registers.a = ((registers.a << 1) & 0xFF) | carry_in
    _put_flag(registers, Flag.CARRY, high)
    return registers.a


def rotate_right_through_carry(registers: Registers) -> int:
    """Rotate the accumulator right through the carry flag."""
    low = bool(registers.a & 0x01)
    carry_in = 0x80 if registers.flags & Flag.CARRY else 0
    registers.a = (registers.a >> 1) | carry_in
    _put_flag(registers, Flag.CARRY, low)
    return registers.a


def decimal_adjust(registers: Registers) -> int:
    """Adjust the accumulator to packed BCD after an addition."""
    value = registers.a
    adjustment = 0
    if (value & 0xF) > 9 or registers.flags & Flag.HALF_CARRY:
        adjustment += 0x06
    value = (value + adjustment) & 0xFF
    if (value >> 4) > 9 or registers.flags & Flag.CARRY:
        adjustment += 0x60
    return add(registers, adjustment)


def check_condition(registers: Registers, condition: int) -> bool:
    """Return whether the condition field of a jump, call or return holds."""
    try:
        flag, wanted = _CONDITIONS[condition]
    except KeyError:
        raise ValueError(f"{condition} is not a condition code") from None
    return bool(registers.flags & flag) == wanted