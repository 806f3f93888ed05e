import pytest

from altair8800 import alu
from altair8800.registers import (
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


def _regs(a=0, flags=0x02):
    return Registers(a=a, flags=flags)


def test_carry_boundary():
    assert alu.carry(0xFF, 0) is False
    assert alu.carry(0xFF, 1) is True
    assert alu.carry(0x80, 0x80) is True


def test_half_carry_uses_low_nibbles_only():
    assert alu.half_carry(0x0F, 0) is False
    assert alu.half_carry(0x0F, 1) is True
    assert alu.half_carry(0xF0, 0xF0) is False


@pytest.mark.parametrize("value", range(256))
def test_update_flags_matches_value(value):
    regs = _regs()
    alu.update_flags(regs, value)
    assert bool(regs.flags & Flag.PARITY) == parity(value)
    assert bool(regs.flags & Flag.ZERO) == (value == 0)
    assert bool(regs.flags & Flag.SIGN) == bool(value & 0x80)


def test_update_flags_leaves_carry_alone():
    regs = _regs(flags=0x02 | Flag.CARRY)
    alu.update_flags(regs, 0)
    assert regs.flags == 0x47


@pytest.mark.parametrize("start,value", [(0, 0), (0x10, 0x20), (0xFF, 1), (0x7F, 0x81), (0x33, 0xCC)])
def test_add_then_subtract_restores_accumulator(start, value):
    regs = _regs(a=start)
    alu.add(regs, value)
    assert alu.subtract(regs, value) == start
    assert regs.a == start


def test_add_overflow_sets_carry_and_zero():
    regs = _regs(a=0xFF)
    assert alu.add(regs, 1) == 0
    assert regs.flags & Flag.CARRY
    assert regs.flags & Flag.ZERO
    assert regs.flags & Flag.HALF_CARRY


def test_subtract_equal_gives_zero_without_borrow():
    regs = _regs(a=5)
    assert alu.subtract(regs, 5) == 0
    assert regs.flags & Flag.ZERO
    assert not regs.flags & Flag.CARRY


def test_subtract_borrow_sets_carry():
    regs = _regs(a=0)
    assert alu.subtract(regs, 1) == 0xFF
    assert regs.flags & Flag.CARRY
    assert regs.flags & Flag.SIGN


def test_subtract_full_byte_with_borrow_keeps_accumulator():
    regs = _regs(a=0x42)
    alu.subtract(regs, 0x100)
    assert regs.a == 0x42
    assert regs.flags & Flag.CARRY


def test_compare_keeps_accumulator():
    regs = _regs(a=0x30)
    alu.compare(regs, 0x30)
    assert regs.a == 0x30
    assert regs.flags & Flag.ZERO
    alu.compare(regs, 0x31)
    assert regs.a == 0x30
    assert regs.flags & Flag.CARRY
    assert not regs.flags & Flag.ZERO


@pytest.mark.parametrize("start", [0x00, 0x01, 0x80, 0xA5, 0xFF])
def test_rotate_left_eight_times_is_identity(start):
    regs = _regs(a=start)
    for _ in range(8):
        alu.rotate_left(regs)
    assert regs.a == start


@pytest.mark.parametrize("start", [0x00, 0x01, 0x80, 0xA5, 0xFF])
def test_rotate_right_undoes_rotate_left(start):
    regs = _regs(a=start)
    alu.rotate_left(regs)
    assert bool(regs.flags & Flag.CARRY) == bool(start & 0x80)
    alu.rotate_right(regs)
    assert regs.a == start
    assert bool(regs.flags & Flag.CARRY) == bool(start & 0x80)


def test_rotate_left_moves_high_bit_to_carry_and_bit_zero():
    regs = _regs(a=0x80)
    assert alu.rotate_left(regs) == 1
    assert regs.flags & Flag.CARRY


@pytest.mark.parametrize("start", [0x00, 0x5A, 0xFF])
@pytest.mark.parametrize("carry_in", [False, True])
def test_rotate_through_carry_nine_times_is_identity(start, carry_in):
    flags = 0x02 | (Flag.CARRY if carry_in else 0)
    left = _regs(a=start, flags=flags)
    right = _regs(a=start, flags=flags)
    for _ in range(9):
        alu.rotate_left_through_carry(left)
        alu.rotate_right_through_carry(right)
    for regs in (left, right):
        assert regs.a == start
        assert bool(regs.flags & Flag.CARRY) == carry_in


@pytest.mark.parametrize("start", [0x00, 0x5A, 0x81])
def test_rotate_through_carry_round_trip(start):
    regs = _regs(a=start, flags=0x02 | Flag.CARRY)
    alu.rotate_left_through_carry(regs)
    alu.rotate_right_through_carry(regs)
    assert regs.a == start
    assert regs.flags & Flag.CARRY


def test_decimal_adjust_manual_example():
    regs = _regs(a=0x9B)
    assert alu.decimal_adjust(regs) == 0x01
    assert regs.flags & Flag.CARRY


@pytest.mark.parametrize(
    "flag,when_set,when_clear",
    [
        (Flag.ZERO, CONDITION_Z, CONDITION_NZ),
        (Flag.CARRY, CONDITION_C, CONDITION_NC),
        (Flag.PARITY, CONDITION_PE, CONDITION_PO),
        (Flag.SIGN, CONDITION_M, CONDITION_P),
    ],
)
def test_check_condition(flag, when_set, when_clear):
    regs = _regs(flags=0x02 | flag)
    assert alu.check_condition(regs, when_set) is True
    assert alu.check_condition(regs, when_clear) is False
    regs = _regs(flags=0x02)
    assert alu.check_condition(regs, when_set) is False
    assert alu.check_condition(regs, when_clear) is True


def test_check_condition_rejects_unknown_code():
    with pytest.raises(ValueError):
        alu.check_condition(_regs(), 8)