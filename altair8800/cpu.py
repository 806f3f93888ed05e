"""The Intel 8080 processor: instruction decoding, execution and the I/O bus."""

from __future__ import annotations

from enum import IntFlag
from typing import Callable

from . import alu
from .disk import DiskController
from .memory import Memory
from .registers import MEMORY_ACCESS, PAIR_HL, PAIR_SP, Flag, Registers

# Cycle counts reported by each instruction.
CYCLES_JMP = 10
CYCLES_NOP = 4
CYCLES_MOV_REG = 5
CYCLES_MOV_MEM = 7
CYCLES_MVI_REG = 7
CYCLES_MVI_MEM = 10
CYCLES_LXI = 10
CYCLES_LDA = 13
CYCLES_STA = 13
CYCLES_LHLD = 16
CYCLES_SHLD = 16
CYCLES_LDAX = 7
CYCLES_STAX = 7
CYCLES_XCHG = 5
CYCLES_ADD = 4
CYCLES_ADI = 7
CYCLES_ADC = 4
CYCLES_ACI = 7
CYCLES_SUB = 4
CYCLES_SUI = 7
CYCLES_SBB = 4
CYCLES_SBI = 7
CYCLES_INR = 5
CYCLES_DCR = 5
CYCLES_INX = 5
CYCLES_DCX = 5
CYCLES_DAD = 10
CYCLES_ANA = 4
CYCLES_ANI = 7
CYCLES_ORA = 4
CYCLES_ORI = 7
CYCLES_XRA = 4
CYCLES_XRI = 7
CYCLES_EI = 4
CYCLES_DI = 4
CYCLES_XTHL = 18
CYCLES_SPHL = 5
CYCLES_IN = 10
CYCLES_OUT = 10
CYCLES_PUSH = 11
CYCLES_POP = 10
CYCLES_RLC = 4
CYCLES_RRC = 4
CYCLES_RAL = 4
CYCLES_RAR = 4
CYCLES_RET = 5
CYCLES_CALL = 17
CYCLES_RST = 11
CYCLES_CMP = 4
CYCLES_CPI = 7
CYCLES_STC = 1
CYCLES_CMC = 2
CYCLES_CMA = 2
CYCLES_PCHL = 5
CYCLES_DAA = 5


def _destination(op_code: int) -> int:
    return (op_code >> 3) & 7


def _source(op_code: int) -> int:
    return op_code & 7


def _pair(op_code: int) -> int:
    return (op_code >> 4) & 3


class CpuStatus(IntFlag):
    """Bits of the front-panel status lights."""

    INTERRUPT = 0x01
    WRITE_OUTPUT = 0x02
    STACK = 0x04
    HALT = 0x08
    PORT_OUTPUT = 0x10
    OP_CODE_FETCH = 0x20
    PORT_INPUT = 0x40
    MEMORY_READ = 0x80


class Intel8080:
    """An 8080 wired to memory, a terminal, sense switches, a disk controller
    and callbacks for every other I/O port."""

    def __init__(
        self,
        memory: Memory | None = None,
        terminal_in: Callable[[], int] | None = None,
        terminal_out: Callable[[int], None] | None = None,
        sense_switches: Callable[[], int] | None = None,
        disk_controller: DiskController | None = None,
        port_in: Callable[[int], int] | None = None,
        port_out: Callable[[int, int], None] | None = None,
    ) -> None:
        self.memory = memory if memory is not None else Memory()
        self.terminal_in = terminal_in or (lambda: 0)
        self.terminal_out = terminal_out or (lambda value: None)
        self.sense_switches = sense_switches or (lambda: 0)
        self.disk_controller = (
            disk_controller if disk_controller is not None else DiskController()
        )
        self.port_in = port_in or (lambda port: 0xFF)
        self.port_out = port_out or (lambda port, value: None)
        self.reset()

    def reset(self) -> None:
        """Clear registers, buses and status; the flags register reads 0x02."""
        self.registers = Registers()
        self.data_bus = 0
        self.address_bus = 0
        self.current_op_code = 0
        self.cpu_status = 0
        self._pending_character = 0

    # Front panel ---------------------------------------------------------

    def examine(self, address: int) -> None:
        """Jump to ``address`` and show its contents on the data bus."""
        address &= 0xFFFF
        self.registers.pc = address
        self.address_bus = address
        self.data_bus = self.memory.read8(address)

    def examine_next(self) -> None:
        """Advance the address bus by one and show that byte."""
        self.address_bus = (self.address_bus + 1) & 0xFFFF
        self.data_bus = self.memory.read8(self.address_bus)

    def deposit(self, data: int) -> None:
        """Store ``data`` at the address on the address bus."""
        self.data_bus = data & 0xFF
        self._memory_write()

    def deposit_next(self, data: int) -> None:
        """Advance the address bus by one, then store ``data`` there."""
        self.examine_next()
        self.deposit(data)

    # Execution -----------------------------------------------------------

    def cycle(self) -> int:
        """Fetch and execute one instruction; return the cycles it took.

        Op codes without an instruction do nothing and leave the program
        counter where it is.
        """
        self.cpu_status = 0
        self.address_bus = self.registers.pc
        self._memory_read()
        self.current_op_code = self.data_bus
        handler = _DISPATCH[self.current_op_code]
        if handler is None:
            return 0
        return handler(self)

    # Bus helpers ---------------------------------------------------------

    def _memory_read(self) -> None:
        self.cpu_status |= CpuStatus.MEMORY_READ
        self.data_bus = self.memory.read8(self.address_bus)

    def _memory_write(self) -> None:
        self.cpu_status &= ~CpuStatus.MEMORY_READ & 0xFF
        self.memory.write8(self.address_bus, self.data_bus)

    def _read_register(self, index: int) -> int:
        if index == MEMORY_ACCESS:
            self.address_bus = self.registers.hl
            self._memory_read()
            return self.data_bus
        return self.registers.get(index)

    def _write_register(self, index: int, value: int) -> None:
        if index == MEMORY_ACCESS:
            self.address_bus = self.registers.hl
            self.data_bus = value & 0xFF
            self._memory_write()
        else:
            self.registers.set(index, value)

    def _read_pair(self, index: int) -> int:
        self.cpu_status |= CpuStatus.MEMORY_READ
        return self.registers.get_pair(index)

    def _write_pair(self, index: int, value: int) -> None:
        self.cpu_status &= ~CpuStatus.MEMORY_READ & 0xFF
        self.registers.set_pair(index, value)

    def _advance(self, count: int) -> None:
        self.registers.pc = (self.registers.pc + count) & 0xFFFF

    def _operand8(self) -> int:
        return self.memory.read8(self.registers.pc + 1)

    def _operand16(self) -> int:
        return self.memory.read16(self.registers.pc + 1)

    def _carry_in(self) -> int:
        return 1 if self.registers.flags & Flag.CARRY else 0

    def _push_word(self, value: int) -> None:
        self.registers.sp = (self.registers.sp - 2) & 0xFFFF
        self.memory.write16(self.registers.sp, value)

    # Data transfer -------------------------------------------------------

    def _mov(self) -> int:
        dest = _destination(self.current_op_code)
        source = _source(self.current_op_code)
        cycles = (
            CYCLES_MOV_MEM if MEMORY_ACCESS in (dest, source) else CYCLES_MOV_REG
        )
        self._write_register(dest, self._read_register(source))
        self._advance(1)
        return cycles

    def _mvi(self) -> int:
        dest = _destination(self.current_op_code)
        cycles = CYCLES_MVI_MEM if dest == MEMORY_ACCESS else CYCLES_MVI_REG
        self._write_register(dest, self._operand8())
        self._advance(2)
        return cycles

    def _lxi(self) -> int:
        self._write_pair(_pair(self.current_op_code), self._operand16())
        self._advance(3)
        return CYCLES_LXI

    def _lda(self) -> int:
        self.address_bus = self._operand16()
        self._memory_read()
        self.registers.a = self.data_bus
        self._advance(3)
        return CYCLES_LDA

    def _sta(self) -> int:
        self.address_bus = self._operand16()
        self.data_bus = self.registers.a
        self._memory_write()
        self._advance(3)
        return CYCLES_STA

    def _lhld(self) -> int:
        self.registers.hl = self.memory.read16(self._operand16())
        self._advance(3)
        return CYCLES_LHLD

    def _shld(self) -> int:
        self.memory.write16(self._operand16(), self.registers.hl)
        self._advance(3)
        return CYCLES_SHLD

    def _ldax(self) -> int:
        address = self._read_pair(_pair(self.current_op_code))
        self.registers.a = self.memory.read8(address)
        self._advance(1)
        return CYCLES_LDAX

    def _stax(self) -> int:
        address = self._read_pair(_pair(self.current_op_code))
        self.memory.write8(address, self.registers.a)
        self._advance(1)
        return CYCLES_STAX

    def _xchg(self) -> int:
        regs = self.registers
        regs.hl, regs.de = regs.de, regs.hl
        self._advance(1)
        return CYCLES_XCHG

    # Arithmetic ----------------------------------------------------------

    def _add(self) -> int:
        alu.add(self.registers, self._read_register(_source(self.current_op_code)))
        self._advance(1)
        return CYCLES_ADD

    def _adi(self) -> int:
        alu.add(self.registers, self._operand8())
        self._advance(2)
        return CYCLES_ADI

    def _adc(self) -> int:
        value = self._read_register(_source(self.current_op_code)) + self._carry_in()
        alu.add(self.registers, value)
        self._advance(1)
        return CYCLES_ADC

    def _aci(self) -> int:
        alu.add(self.registers, self._operand8() + self._carry_in())
        self._advance(2)
        return CYCLES_ACI

    def _sub(self) -> int:
        alu.subtract(
            self.registers, self._read_register(_source(self.current_op_code))
        )
        self._advance(1)
        return CYCLES_SUB

    def _sui(self) -> int:
        alu.subtract(self.registers, self._operand8())
        self._advance(2)
        return CYCLES_SUI

    def _sbb(self) -> int:
        value = self._read_register(_source(self.current_op_code)) + self._carry_in()
        alu.subtract(self.registers, value)
        self._advance(1)
        return CYCLES_SBB

    def _sbi(self) -> int:
        alu.subtract(self.registers, self._operand8() + self._carry_in())
        self._advance(2)
        return CYCLES_SBI

    def _inr(self) -> int:
        dest = _destination(self.current_op_code)
        value = self._read_register(dest)
        alu._put_flag(self.registers, Flag.HALF_CARRY, alu.half_carry(value, 1))
        result = (value + 1) & 0xFF
        self._write_register(dest, result)
        alu.update_flags(self.registers, result)
        self._advance(1)
        return CYCLES_INR

    def _dcr(self) -> int:
        dest = _destination(self.current_op_code)
        value = self._read_register(dest)
        alu._put_flag(self.registers, Flag.HALF_CARRY, alu.half_carry(value, 0xFF))
        result = (value + 0xFF) & 0xFF
        self._write_register(dest, result)
        alu.update_flags(self.registers, result)
        self._advance(1)
        return CYCLES_DCR

    def _inx(self) -> int:
        pair = _pair(self.current_op_code)
        self._write_pair(pair, self._read_pair(pair) + 1)
        self._advance(1)
        return CYCLES_INX

    def _dcx(self) -> int:
        pair = _pair(self.current_op_code)
        self._advance(1)
        self._write_pair(pair, self._read_pair(pair) - 1)
        return CYCLES_DCX

    def _dad(self) -> int:
        total = self._read_pair(_pair(self.current_op_code)) + self._read_pair(PAIR_HL)
        alu._put_flag(self.registers, Flag.CARRY, total > 0xFFFF)
        self._write_pair(PAIR_HL, total)
        self._advance(1)
        return CYCLES_DAD

    def _daa(self) -> int:
        alu.decimal_adjust(self.registers)
        self._advance(1)
        return CYCLES_DAA

    # Logic ---------------------------------------------------------------

    def _logic(self, operand: int, operation: Callable[[int, int], int],
               clear_half_carry: bool) -> None:
        regs = self.registers
        regs.a = operation(regs.a, operand) & 0xFF
        regs.flags &= ~Flag.CARRY & 0xFF
        if clear_half_carry:
            regs.flags &= ~Flag.HALF_CARRY & 0xFF
        alu.update_flags(regs, regs.a)

    def _ana(self) -> int:
        operand = self._read_register(_source(self.current_op_code))
        self._logic(operand, lambda a, b: a & b, clear_half_carry=False)
        self._advance(1)
        return CYCLES_ANA

    def _ani(self) -> int:
        self._logic(self._operand8(), lambda a, b: a & b, clear_half_carry=True)
        self._advance(2)
        return CYCLES_ANI

    def _ora(self) -> int:
        operand = self._read_register(_source(self.current_op_code))
        self._logic(operand, lambda a, b: a | b, clear_half_carry=True)
        self._advance(1)
        return CYCLES_ORA

    def _ori(self) -> int:
        self._logic(self._operand8(), lambda a, b: a | b, clear_half_carry=True)
        self._advance(2)
        return CYCLES_ORI

    def _xra(self) -> int:
        operand = self._read_register(_source(self.current_op_code))
        self._logic(operand, lambda a, b: a ^ b, clear_half_carry=True)
        self._advance(1)
        return CYCLES_XRA

    def _xri(self) -> int:
        self._logic(self._operand8(), lambda a, b: a ^ b, clear_half_carry=True)
        self._advance(2)
        return CYCLES_XRI

    def _cmp(self) -> int:
        alu.compare(self.registers, self._read_register(_source(self.current_op_code)))
        self._advance(1)
        return CYCLES_CMP

    def _cpi(self) -> int:
        alu.compare(self.registers, self._operand8())
        self._advance(2)
        return CYCLES_CPI

    def _cma(self) -> int:
        self.registers.a = ~self.registers.a & 0xFF
        self._advance(1)
        return CYCLES_CMA

    def _stc(self) -> int:
        self.registers.flags |= Flag.CARRY
        self._advance(1)
        return CYCLES_STC

    def _cmc(self) -> int:
        self.registers.flags ^= Flag.CARRY
        self._advance(1)
        return CYCLES_CMC

    def _rlc(self) -> int:
        alu.rotate_left(self.registers)
        self._advance(1)
        return CYCLES_RAL

    def _rrc(self) -> int:
        alu.rotate_right(self.registers)
        self._advance(1)
        return CYCLES_RAR

    def _ral(self) -> int:
        alu.rotate_left_through_carry(self.registers)
        self._advance(1)
        return CYCLES_RLC

    def _rar(self) -> int:
        alu.rotate_right_through_carry(self.registers)
        self._advance(1)
        return CYCLES_RRC

    # Stack, interrupts and I/O ------------------------------------------

    def _ei(self) -> int:
        self._advance(1)
        self.registers.flags |= Flag.INTERRUPT
        return CYCLES_EI

    def _di(self) -> int:
        self._advance(1)
        self.registers.flags &= ~Flag.INTERRUPT & 0xFF
        return CYCLES_DI

    def _xthl(self) -> int:
        regs = self.registers
        top = self.memory.read16(regs.sp)
        self.memory.write16(regs.sp, regs.hl)
        regs.hl = top
        self._advance(1)
        return CYCLES_XTHL

    def _sphl(self) -> int:
        self.registers.sp = self.registers.hl
        self._advance(1)
        return CYCLES_SPHL

    def _push(self) -> int:
        self.cpu_status |= CpuStatus.STACK
        pair = _pair(self.current_op_code)
        value = self.registers.af if pair == PAIR_SP else self._read_pair(pair)
        self._push_word(value)
        self._advance(1)
        return CYCLES_PUSH

    def _pop(self) -> int:
        self.cpu_status |= CpuStatus.STACK
        pair = _pair(self.current_op_code)
        value = self.memory.read16(self.registers.sp)
        self.registers.sp = (self.registers.sp + 2) & 0xFFFF
        if pair == PAIR_SP:
            self.registers.af = value
        else:
            self._write_pair(pair, value)
        self._advance(1)
        return CYCLES_POP

    def _in(self) -> int:
        port = self._operand8()
        regs = self.registers
        if port == 0x00:
            regs.a = 0
        elif port == 0x01:
            self.cpu_status |= CpuStatus.PORT_INPUT
            regs.a = self.terminal_in() & 0xFF
        elif port == 0x08:
            regs.a = self.disk_controller.status() & 0xFF
        elif port == 0x09:
            regs.a = self.disk_controller.sector() & 0xFF
        elif port == 0x0A:
            regs.a = self.disk_controller.read() & 0xFF
        elif port == 0x10:
            regs.a = 0x02  # transmit buffer empty
            if not self._pending_character:
                self._pending_character = self.terminal_in() & 0xFF
            if self._pending_character:
                regs.a |= 0x01
        elif port == 0x11:
            if self._pending_character:
                regs.a = self._pending_character
                self._pending_character = 0
            else:
                regs.a = self.terminal_in() & 0xFF
        elif port == 0xFF:
            regs.a = self.sense_switches() & 0xFF
        else:
            regs.a = self.port_in(port) & 0xFF
        self._advance(2)
        return CYCLES_IN

    def _out(self) -> int:
        port = self._operand8()
        a = self.registers.a
        if port == 0x01:
            self.cpu_status |= CpuStatus.PORT_OUTPUT
            self.terminal_out(a)
        elif port == 0x08:
            self.disk_controller.select(a)
        elif port == 0x09:
            self.disk_controller.function(a)
        elif port == 0x0A:
            self.disk_controller.write(a)
        elif port == 0x10:
            pass
        elif port == 0x11:
            self.terminal_out(a)
        else:
            self.port_out(port, a)
        self._advance(2)
        return CYCLES_OUT

    # Branches ------------------------------------------------------------

    def _condition_holds(self) -> bool:
        return alu.check_condition(self.registers, _destination(self.current_op_code))

    def _jmp(self) -> int:
        self.registers.pc = self._operand16()
        return CYCLES_JMP

    def _jccc(self) -> int:
        if self._condition_holds():
            self._jmp()
        else:
            self._advance(3)
        return CYCLES_JMP

    def _ret(self) -> int:
        self.cpu_status |= CpuStatus.STACK
        self.registers.pc = self.memory.read16(self.registers.sp)
        self.registers.sp = (self.registers.sp + 2) & 0xFFFF
        return CYCLES_RET

    def _rccc(self) -> int:
        if self._condition_holds():
            self._ret()
        else:
            self._advance(1)
        return CYCLES_RET

    def _rst(self) -> int:
        self.cpu_status |= CpuStatus.STACK
        vector = _destination(self.current_op_code)
        self._push_word(self.registers.pc + 1)
        self.registers.pc = vector * 8
        return CYCLES_RET

    def _call(self) -> int:
        self.cpu_status |= CpuStatus.STACK
        self._push_word(self.registers.pc + 3)
        self.registers.pc = self._operand16()
        return CYCLES_JMP

    def _cccc(self) -> int:
        if self._condition_holds():
            self._call()
        else:
            self._advance(3)
        return CYCLES_CALL

    def _pchl(self) -> int:
        self.registers.pc = self.registers.hl
        return CYCLES_PCHL

    def _nop(self) -> int:
        self._advance(1)
        return CYCLES_NOP


def _build_dispatch() -> tuple:
    table: list = [None] * 256

    def assign(handler, *op_codes: int) -> None:
        for op_code in op_codes:
            table[op_code] = handler

    cpu = Intel8080
    assign(cpu._nop, 0x00)
    assign(cpu._lxi, 0x01, 0x11, 0x21, 0x31)
    assign(cpu._stax, 0x02, 0x12)
    assign(cpu._ldax, 0x0A, 0x1A)
    assign(cpu._inx, 0x03, 0x13, 0x23, 0x33)
    assign(cpu._dcx, 0x0B, 0x1B, 0x2B, 0x3B)
    assign(cpu._inr, *range(0x04, 0x40, 8))
    assign(cpu._dcr, *range(0x05, 0x40, 8))
    assign(cpu._mvi, *range(0x06, 0x40, 8))
    assign(cpu._dad, 0x09, 0x19, 0x29, 0x39)
    assign(cpu._rlc, 0x07)
    assign(cpu._rrc, 0x0F)
    assign(cpu._ral, 0x17)
    assign(cpu._rar, 0x1F)
    assign(cpu._shld, 0x22)
    assign(cpu._daa, 0x27)
    assign(cpu._lhld, 0x2A)
    assign(cpu._cma, 0x2F)
    assign(cpu._sta, 0x32)
    assign(cpu._stc, 0x37)
    assign(cpu._lda, 0x3A)
    assign(cpu._cmc, 0x3F)
    assign(cpu._mov, *(op for op in range(0x40, 0x80) if op != 0x76))
    assign(cpu._add, *range(0x80, 0x88))
    assign(cpu._adc, *range(0x88, 0x90))
    assign(cpu._sub, *range(0x90, 0x98))
    assign(cpu._sbb, *range(0x98, 0xA0))
    assign(cpu._ana, *range(0xA0, 0xA8))
    assign(cpu._xra, *range(0xA8, 0xB0))
    assign(cpu._ora, *range(0xB0, 0xB8))
    assign(cpu._cmp, *range(0xB8, 0xC0))
    assign(cpu._rccc, *range(0xC0, 0x100, 8))
    assign(cpu._pop, 0xC1, 0xD1, 0xE1, 0xF1)
    assign(cpu._jccc, *range(0xC2, 0x100, 8))
    assign(cpu._jmp, 0xC3)
    assign(cpu._cccc, *range(0xC4, 0x100, 8))
    assign(cpu._push, 0xC5, 0xD5, 0xE5, 0xF5)
    assign(cpu._rst, *range(0xC7, 0x100, 8))
    assign(cpu._adi, 0xC6)
    assign(cpu._ret, 0xC9)
    assign(cpu._call, 0xCD)
    assign(cpu._aci, 0xCE)
    assign(cpu._out, 0xD3)
    assign(cpu._sui, 0xD6)
    assign(cpu._in, 0xDB)
    assign(cpu._sbi, 0xDE)
    assign(cpu._xthl, 0xE3)
    assign(cpu._ani, 0xE6)
    assign(cpu._pchl, 0xE9)
    assign(cpu._xchg, 0xEB)
    assign(cpu._xri, 0xEE)
    assign(cpu._di, 0xF3)
    assign(cpu._ori, 0xF6)
    assign(cpu._sphl, 0xF9)
    assign(cpu._ei, 0xFB)
    assign(cpu._cpi, 0xFE)
    return tuple(table)


_DISPATCH = _build_dispatch()