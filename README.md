# altair8800

The core of an Altair 8800 emulator, written in plain Python with no
dependencies. It provides:

- `altair8800.memory.Memory`: 64 KiB of RAM with 16-bit wrapping addresses.
  It has byte access (`read8`, `write8`), little-endian word access
  (`read16`, `write16`) and `load`, which copies a block of bytes in at a
  given address. `load` raises `ValueError` if the block does not fit.
- `altair8800.registers`: the 8080 register file (`Registers`) with its
  8-bit registers and the `af`, `bc`, `de` and `hl` pair views. It also has
  the flag bits (`Flag`) and a `parity` helper. `Registers.get`/`set` and
  `get_pair`/`set_pair` take the register and pair numbers used in op codes
  and raise `ValueError` for numbers that name no register.
- `altair8800.alu`: accumulator helpers that update the flags: `add`,
  `subtract`, `compare`, the four rotates, `decimal_adjust`,
  `check_condition`, `update_flags`, `carry` and `half_carry`.
- `altair8800.disk`: an 88-DCDD floppy disk controller (`DiskController`)
  with two drives (`Disk`), status bits (`DiskStatus`) and control bits
  (`DiskControl`). Status bits are active low. A drive keeps its image in any
  seekable binary stream and holds one 137-byte sector buffer. It can be
  marked `read_only`, which drops writes.
- `altair8800.cpu`: the Intel 8080 processor (`Intel8080`) and its front
  panel status bits (`CpuStatus`).

## Installing

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Using it

Load a program into memory, point the CPU at it and step it one instruction
at a time with `cycle()`. Each call returns the cycle count of the
instruction it ran. The front panel operations `examine`, `examine_next`,
`deposit` and `deposit_next` work like the switches on the real machine.

```python
from altair8800.memory import Memory
from altair8800.cpu import Intel8080

memory = Memory()
# MVI A,2 ; ADI 3 ; JMP 0
memory.load(0x0000, bytes([0x3E, 0x02, 0xC6, 0x03, 0xC3, 0x00, 0x00]))

cpu = Intel8080(memory)
cpu.examine(0x0000)
cpu.cycle()
cpu.cycle()
print(cpu.registers.a)  # 5
```

### I/O

You pass I/O to `Intel8080` as keyword arguments when you construct it:
`terminal_in`, `terminal_out`, `sense_switches`, `disk_controller`, `port_in`
and `port_out`. Ports are routed as follows:

- 0x01 is the serial terminal.
- 0x10 and 0x11 are the 2SIO status and data ports. Reading status fetches
  and holds a pending character from `terminal_in`.
- 0x08 to 0x0A go to the disk controller: select, status and data when
  written; status, sector and data when read.
- An input from port 0x00 reads 0.
- An input from port 0xFF reads the sense switches.
- Every other port goes to `port_in` or `port_out`.

### Attaching a disk

```python
import io
from altair8800.disk import Disk, DiskController

image = io.BytesIO(bytes(77 * 32 * 137))
controller = DiskController(disk1=Disk(image))
cpu = Intel8080(memory, disk_controller=controller)
```

## What it does not do

- It has no command-line program, front panel display or terminal front end.
  You drive the CPU from your own code.
- It comes with no BASIC or boot ROM images. Load any image yourself with
  `Memory.load`.
- Interrupts are not delivered and HLT (0x76) is not executed. EI and DI
  only set and clear the interrupt flag bit. Op codes with no instruction do
  nothing: `cycle()` returns 0 and the program counter does not move.
- Disk storage is whatever stream you pass in. No disk server or sector cache
  is included.