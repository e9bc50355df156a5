"""
Stack Machine Emulator
======================

Interprets the subset of x86-64 that the code generator emits, so that
generated listings can be checked without an assembler or an x86 host.

Supported Instructions
----------------------
| Instruction      | Effect                                          |
|------------------|-------------------------------------------------|
| push imm32       | push sign-extended immediate                    |
| push reg         | push register                                   |
| pop reg          | pop into register                               |
| add reg, reg     | dst = dst + src (wrapping)                      |
| sub reg, reg     | dst = dst - src (wrapping)                      |
| imul reg, reg    | dst = dst * src (wrapping)                      |
| cqo              | RDX = sign extension of RAX                     |
| idiv reg         | RDX:RAX / reg -> quotient RAX, remainder RDX    |
| ret              | stop; RAX is the result                         |

Registers are RAX, RDX and RDI, held as signed 64-bit integers.
Directives (lines starting with '.'), labels and '#' comments are
ignored. Execution starts at the entry label.

Usage
-----
>>> from arithc.emulator import run_assembly
>>> run_assembly(compile_expression("2+3*4"))
14
"""

import logging
import re
from dataclasses import dataclass, field

from arithc.errors import EmulationError
from arithc.evaluator import INT64_MIN, INT64_MAX, wrap_int64

logger = logging.getLogger(__name__)


REGISTERS = ("rax", "rdx", "rdi")

IMM32_MIN = -(2**31)
IMM32_MAX = 2**31 - 1

LABEL_RE = re.compile(r"^([A-Za-z_.$][\w.$]*):$")


@dataclass
class Instruction:
    """One parsed instruction line."""
    mnemonic: str
    operands: list[str]
    line_number: int


@dataclass
class MachineState:
    """
    Register file and evaluation stack.

    The stack list grows at the end; stack[-1] is the top.
    """
    registers: dict[str, int] = field(
        default_factory=lambda: {name: 0 for name in REGISTERS}
    )
    stack: list[int] = field(default_factory=list)
    steps: int = 0


class StackMachine:
    """
    Executes an assembly listing produced by the code generator.

    Example:
        machine = StackMachine(listing)
        result = machine.run()
        assert machine.state.stack == []
    """

    def __init__(self, listing: str, entry_label: str = "main"):
        self.entry_label = entry_label
        self.program = self._load(listing)
        self.state = MachineState()

    def run(self) -> int:
        """
        Execute from the entry label up to the first ret.

        Returns:
            Signed 64-bit value of RAX at ret

        Raises:
            EmulationError: On any fault or if the listing never returns
        """
        self.state = MachineState()

        for instruction in self.program:
            self.state.steps += 1
            if instruction.mnemonic == "ret":
                logger.debug(
                    f"Returned after {self.state.steps} steps, "
                    f"rax={self.state.registers['rax']}"
                )
                return self.state.registers["rax"]
            self._execute(instruction)

        raise EmulationError("execution ran past the end without ret")

    # =========================================================================
    # Loading
    # =========================================================================

    def _load(self, listing: str) -> list[Instruction]:
        """Parse the instructions that follow the entry label."""
        program: list[Instruction] = []
        found_entry = False

        for line_number, raw in enumerate(listing.splitlines(), start=1):
            line = raw.split("#", 1)[0].strip()
            if not line or line.startswith("."):
                continue

            label = LABEL_RE.match(line)
            if label:
                if label.group(1) == self.entry_label:
                    found_entry = True
                continue

            if not found_entry:
                continue

            mnemonic, _, rest = line.partition(" ")
            operands = [op.strip() for op in rest.split(",")] if rest.strip() else []
            program.append(Instruction(mnemonic.lower(), operands, line_number))

        if not found_entry:
            raise EmulationError(f"entry label '{self.entry_label}' not found")

        return program

    # =========================================================================
    # Execution
    # =========================================================================

    def _execute(self, instruction: Instruction) -> None:
        handler = getattr(self, f"_op_{instruction.mnemonic}", None)
        if handler is None:
            raise EmulationError(
                f"unsupported instruction '{instruction.mnemonic}'",
                instruction.line_number,
            )
        handler(instruction)

    def _expect_operands(self, instruction: Instruction, count: int) -> None:
        if len(instruction.operands) != count:
            raise EmulationError(
                f"'{instruction.mnemonic}' takes {count} operand(s), "
                f"got {len(instruction.operands)}",
                instruction.line_number,
            )

    def _register(self, name: str, instruction: Instruction) -> str:
        name = name.lower()
        if name not in REGISTERS:
            raise EmulationError(f"unknown register '{name}'", instruction.line_number)
        return name

    def _read(self, name: str, instruction: Instruction) -> int:
        return self.state.registers[self._register(name, instruction)]

    def _write(self, name: str, value: int, instruction: Instruction) -> None:
        self.state.registers[self._register(name, instruction)] = wrap_int64(value)

    def _op_push(self, instruction: Instruction) -> None:
        self._expect_operands(instruction, 1)
        operand = instruction.operands[0]

        if operand.lower() in REGISTERS:
            self.state.stack.append(self._read(operand, instruction))
            return

        try:
            value = int(operand, 0)
        except ValueError:
            raise EmulationError(
                f"invalid push operand '{operand}'", instruction.line_number
            ) from None
        if not IMM32_MIN <= value <= IMM32_MAX:
            raise EmulationError(
                f"immediate {value} does not fit in 32 bits", instruction.line_number
            )
        self.state.stack.append(value)

    def _op_pop(self, instruction: Instruction) -> None:
        self._expect_operands(instruction, 1)
        if not self.state.stack:
            raise EmulationError("pop from empty stack", instruction.line_number)
        self._write(instruction.operands[0], self.state.stack.pop(), instruction)

    def _binary(self, instruction: Instruction, operation) -> None:
        self._expect_operands(instruction, 2)
        dst, src = instruction.operands
        result = operation(self._read(dst, instruction), self._read(src, instruction))
        self._write(dst, result, instruction)

    def _op_add(self, instruction: Instruction) -> None:
        self._binary(instruction, lambda a, b: a + b)

    def _op_sub(self, instruction: Instruction) -> None:
        self._binary(instruction, lambda a, b: a - b)

    def _op_imul(self, instruction: Instruction) -> None:
        self._binary(instruction, lambda a, b: a * b)

    def _op_cqo(self, instruction: Instruction) -> None:
        self._expect_operands(instruction, 0)
        self.state.registers["rdx"] = -1 if self.state.registers["rax"] < 0 else 0

    def _op_idiv(self, instruction: Instruction) -> None:
        self._expect_operands(instruction, 1)
        divisor = self._read(instruction.operands[0], instruction)
        if divisor == 0:
            raise EmulationError("divide error: division by zero", instruction.line_number)

        # 128-bit signed dividend RDX:RAX
        high = self.state.registers["rdx"]
        low = self.state.registers["rax"] & (2**64 - 1)
        dividend = (high << 64) | low

        quotient = abs(dividend) // abs(divisor)
        if (dividend < 0) != (divisor < 0):
            quotient = -quotient
        remainder = dividend - quotient * divisor

        if not INT64_MIN <= quotient <= INT64_MAX:
            raise EmulationError("divide error: quotient overflow", instruction.line_number)

        self.state.registers["rax"] = quotient
        self.state.registers["rdx"] = remainder


def run_assembly(listing: str, entry_label: str = "main") -> int:
    """
    Run a generated listing and return the value left in RAX.

    Raises:
        EmulationError: If the listing faults or never returns
    """
    return StackMachine(listing, entry_label).run()
