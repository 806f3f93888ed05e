"""The 64 KiB address space of the Altair 8800."""

from __future__ import annotations

MEMORY_SIZE = 0x10000


class Memory:
    """Flat, byte-addressable 64 KiB RAM with 16-bit wrapping addresses."""

    def __init__(self) -> None:
        self._cells = bytearray(MEMORY_SIZE)

    def __len__(self) -> int:
        return MEMORY_SIZE

    def read8(self, address: int) -> int:
        """Return the byte stored at ``address``."""
        return self._cells[address & 0xFFFF]

    def write8(self, address: int, value: int) -> None:
        """Store the low eight bits of ``value`` at ``address``."""
        self._cells[address & 0xFFFF] = value & 0xFF

    def read16(self, address: int) -> int:
        """Return the little-endian word at ``address``."""
        return self.read8(address) | (self.read8(address + 1) << 8)

    def write16(self, address: int, value: int) -> None:
        """Store ``value`` as a little-endian word at ``address``."""
        self.write8(address, value & 0xFF)
        self.write8(address + 1, (value >> 8) & 0xFF)

    def load(self, address: int, data: bytes) -> None:
        """Copy ``data`` into memory starting at ``address``."""
        if not 0 <= address < MEMORY_SIZE:
            raise ValueError(f"address {address:#x} is outside memory")
        end = address + len(data)
        if end > MEMORY_SIZE:
            raise ValueError(
                f"{len(data)} bytes at {address:#06x} do not fit in memory"
            )
        self._cells[address:end] = data