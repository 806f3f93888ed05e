"""The 88-DCDD floppy disk controller.

Status lines are active low: asserting a status clears its bit.
"""

from __future__ import annotations

from enum import IntFlag
from typing import BinaryIO

SECTOR_SIZE = 137
SECTORS_PER_TRACK = 32
TRACK_SIZE = SECTORS_PER_TRACK * SECTOR_SIZE
_BUFFER_SIZE = SECTOR_SIZE + 2


class DiskStatus(IntFlag):
    """Bits of the controller status port."""

    ENWD = 1
    MOVE_HEAD = 2
    HEAD = 4
    IE = 32
    TRACK_0 = 64
    NRDA = 128


class DiskControl(IntFlag):
    """Bits written to the controller function port."""

    STEP_IN = 1
    STEP_OUT = 2
    HEAD_LOAD = 4
    HEAD_UNLOAD = 8
    IE = 16
    ID = 32
    HCS = 64
    WE = 128


STATUS_DEFAULT = int(
    DiskStatus.ENWD
    | DiskStatus.MOVE_HEAD
    | DiskStatus.HEAD
    | DiskStatus.IE
    | DiskStatus.TRACK_0
    | DiskStatus.NRDA
)


class Disk:
    """One drive: head position, status and a single sector buffer.

    ``storage`` is a seekable binary stream holding the disk image; a drive
    without storage reads nothing. Writes to a read-only drive are dropped.
    """

    def __init__(self, storage: BinaryIO | None = None, read_only: bool = False):
        self.storage = storage
        self.read_only = read_only
        self.track = 0
        self.sector = 0
        self.status = STATUS_DEFAULT
        self.write_status = 0
        self.disk_pointer = 0
        self.sector_pointer = 0
        self.sector_data = bytearray(_BUFFER_SIZE)
        self.dirty = False
        self.have_sector_data = False

    def assert_status(self, bit: int) -> None:
        self.status &= ~bit & 0xFF

    def deassert_status(self, bit: int) -> None:
        self.status |= bit

    def load_sector(self) -> None:
        """Fill the sector buffer from storage at the current position."""
        self.sector_pointer = 0
        self.have_sector_data = True
        if self.storage is None:
            return
        self.storage.seek(self.disk_pointer)
        data = self.storage.read(SECTOR_SIZE)
        self.sector_data[: len(data)] = data

    def flush(self) -> None:
        """Write the sector buffer back to storage and mark it clean."""
        if self.storage is not None and not self.read_only:
            self.storage.seek(self.disk_pointer)
            self.storage.write(bytes(self.sector_data[:SECTOR_SIZE]))
        self.sector_pointer = 0
        self.dirty = False

    def seek_track(self) -> None:
        if self.dirty:
            self.flush()
        self.disk_pointer = TRACK_SIZE * self.track
        self.have_sector_data = False
        self.sector_pointer = 0


class DiskController:
    """Two drives behind the select, status, function, sector and data ports."""

    def __init__(self, disk1: Disk | None = None, disk2: Disk | None = None):
        self.disk1 = disk1 if disk1 is not None else Disk()
        self.disk2 = disk2 if disk2 is not None else Disk()
        self.nodisk = Disk()
        self.current = self.nodisk
        self.current_index = 0

    def select(self, value: int) -> None:
        """Select drive ``value & 0xF``; numbers other than 0 and 1 select no disk."""
        selected = value & 0xF
        self.current_index = selected
        self.current = {0: self.disk1, 1: self.disk2}.get(selected, self.nodisk)

    def status(self) -> int:
        return self.current.status

    def function(self, value: int) -> None:
        """Carry out the control bits in ``value`` on the selected drive."""
        disk = self.current
        if value & DiskControl.STEP_IN:
            disk.track = (disk.track + 1) & 0xFF
            disk.sector = 0
            if disk.track != 0:
                disk.deassert_status(DiskStatus.TRACK_0)
            disk.seek_track()

        if value & DiskControl.STEP_OUT:
            if disk.track > 0:
                disk.track -= 1
            if disk.track == 0:
                disk.assert_status(DiskStatus.TRACK_0)
            disk.sector = 0
            disk.seek_track()

        if value & DiskControl.HEAD_LOAD:
            disk.assert_status(DiskStatus.HEAD)
            disk.assert_status(DiskStatus.NRDA)

        if value & DiskControl.HEAD_UNLOAD:
            disk.deassert_status(DiskStatus.HEAD)

        if value & DiskControl.WE:
            disk.assert_status(DiskStatus.ENWD)
            disk.write_status = 0

    def sector(self) -> int:
        """Advance to the next sector and return its number shifted left by one."""
        disk = self.current
        if disk.sector == SECTORS_PER_TRACK:
            disk.sector = 0
        if disk.dirty:
            disk.flush()
        disk.disk_pointer = disk.track * TRACK_SIZE + disk.sector * SECTOR_SIZE
        disk.sector_pointer = 0
        disk.have_sector_data = False
        result = (disk.sector << 1) & 0xFF
        disk.sector += 1
        return result

    def write(self, value: int) -> None:
        """Put one byte into the selected drive's sector buffer."""
        disk = self.current
        if not disk.read_only:
            if disk.sector_pointer < _BUFFER_SIZE:
                disk.sector_data[disk.sector_pointer] = value & 0xFF
            disk.sector_pointer = (disk.sector_pointer + 1) & 0xFF
            disk.dirty = True

        if disk.write_status == SECTOR_SIZE:
            disk.write_status = 0
            disk.deassert_status(DiskStatus.ENWD)
        else:
            disk.write_status += 1

    def read(self) -> int:
        """Return the next byte of the current sector, loading it first if needed."""
        disk = self.current
        if not disk.have_sector_data:
            disk.load_sector()
        pointer = disk.sector_pointer
        disk.sector_pointer = (pointer + 1) & 0xFF
        return disk.sector_data[pointer] if pointer < _BUFFER_SIZE else 0