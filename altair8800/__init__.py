"""Intel 8080 CPU, memory, ALU helpers and 88-DCDD disk controller for an Altair 8800 emulator."""

__version__ = "0.1.0"
__all__ = ["memory", "registers", "disk", "alu", "cpu"]