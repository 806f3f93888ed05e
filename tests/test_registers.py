import pytest

from altair8800.registers import (
    MEMORY_ACCESS,
    PAIR_BC,
    PAIR_DE,
    PAIR_HL,
    PAIR_SP,
    REGISTER_A,
    REGISTER_B,
    REGISTER_C,
    REGISTER_H,
    REGISTER_L,
    Flag,
    Registers,
    parity,
)


@pytest.mark.parametrize(
    "value, expected",
    [(0x00, True), (0x01, False), (0x03, True), (0xFF, True), (0x80, False)],
)
def test_parity(value, expected):
    assert parity(value) is expected


def test_parity_ignores_high_bits():
    assert parity(0x103) == parity(0x03)


def test_default_flags_have_bit_one_set():
    registers = Registers()
    assert registers.flags == 0x02
    assert registers.af == 0x0002


def test_pair_is_built_from_its_halves():
    registers = Registers()
    registers.set(REGISTER_B, 0x12)
    registers.set(REGISTER_C, 0x34)
    assert registers.get_pair(PAIR_BC) == 0x1234
    assert registers.bc == 0x1234


def test_set_pair_splits_into_halves():
    registers = Registers()
    registers.set_pair(PAIR_HL, 0xABCD)
    assert registers.get(REGISTER_H) == 0xAB
    assert registers.get(REGISTER_L) == 0xCD


def test_set_pair_round_trip_for_every_pair():
    registers = Registers()
    for index, value in zip((PAIR_BC, PAIR_DE, PAIR_HL, PAIR_SP), (1, 2, 3, 4)):
        registers.set_pair(index, value)
    assert [registers.get_pair(i) for i in (PAIR_BC, PAIR_DE, PAIR_HL, PAIR_SP)] == [
        1,
        2,
        3,
        4,
    ]


def test_set_masks_to_a_byte():
    registers = Registers()
    registers.set(REGISTER_A, 0x1FF)
    assert registers.a == 0xFF


def test_set_pair_masks_to_a_word():
    registers = Registers()
    registers.set_pair(PAIR_DE, 0x10001)
    assert registers.de == 0x0001


def test_af_holds_accumulator_and_flags():
    registers = Registers()
    registers.af = 0x42D7
    assert registers.a == 0x42
    assert registers.flags == 0xD7
    assert registers.flags & Flag.SIGN


def test_memory_index_is_not_a_register():
    with pytest.raises(ValueError):
        Registers().get(MEMORY_ACCESS)


def test_unknown_pair_raises():
    with pytest.raises(ValueError):
        Registers().set_pair(4, 0)


def test_flag_bits_land_in_af():
    flags = int(Flag.CARRY | Flag.PARITY | Flag.ZERO | Flag.SIGN)
    registers = Registers(a=0x12, flags=flags)
    assert registers.af == 0x12C5