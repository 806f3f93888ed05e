import pytest

from altair8800.memory import MEMORY_SIZE, Memory


def test_fresh_memory_is_zeroed():
    memory = Memory()
    assert len(memory) == MEMORY_SIZE
    assert all(memory.read8(a) == 0 for a in (0, 0x1234, 0xFFFF))


def test_write8_read8_round_trip():
    memory = Memory()
    memory.write8(0x2000, 0xAB)
    assert memory.read8(0x2000) == 0xAB
    assert memory.read8(0x2001) == 0


def test_write8_keeps_low_byte():
    memory = Memory()
    memory.write8(0x10, 0x1FF)
    assert memory.read8(0x10) == 0xFF


def test_address_wraps_to_16_bits():
    memory = Memory()
    memory.write8(0x10005, 7)
    assert memory.read8(5) == 7


def test_read16_is_little_endian():
    memory = Memory()
    memory.write8(0x100, 0x34)
    memory.write8(0x101, 0x12)
    assert memory.read16(0x100) == 0x1234


def test_write16_round_trip_and_byte_order():
    memory = Memory()
    memory.write16(0x200, 0xBEEF)
    assert memory.read16(0x200) == 0xBEEF
    assert memory.read8(0x200) == 0xEF
    assert memory.read8(0x201) == 0xBE


def test_word_at_top_of_memory_wraps():
    memory = Memory()
    memory.write16(0xFFFF, 0x5566)
    assert memory.read8(0xFFFF) == 0x66
    assert memory.read8(0x0000) == 0x55
    assert memory.read16(0xFFFF) == 0x5566


def test_load_copies_bytes():
    memory = Memory()
    memory.load(0xFF00, bytes([1, 2, 3]))
    assert [memory.read8(0xFF00 + i) for i in range(3)] == [1, 2, 3]


def test_load_that_does_not_fit_raises():
    memory = Memory()
    with pytest.raises(ValueError):
        memory.load(0xFFFF, b"\x01\x02")


def test_load_outside_memory_raises():
    memory = Memory()
    with pytest.raises(ValueError):
        memory.load(MEMORY_SIZE, b"\x01")