from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import BinaryIO, Optional, Sequence, Tuple, Union

import numpy as np

from .config import EOFPolicy, ExecutionOptions
from .errors import make_input_error, make_pointer_error
from .jit import STOP_INPUT, STOP_OUT_OF_BOUNDS, STOP_OUTPUT, run_batch
from .ops import (
    Decrement,
    Increment,
    Input,
    Instruction,
    JumpIfNonZero,
    JumpIfZero,
    MoveLeft,
    MoveRight,
    Output,
    Program,
)


@dataclass(frozen=True)
class ExecutionResult:
    memory: np.ndarray
    pointer: int
    steps: int


class Interpreter:
    """
    Fetch/execute engine for a translated Program.

    Owns the tape (``memory``), the cursor (``pointer``) and the instruction
    pointer (``pc``). The ``python`` engine executes one instruction per
    ``step()``; the ``jit`` engine hands batches of non-I/O instructions to
    :func:`bfvm.jit.run_batch` and performs I/O here.
    """

    def __init__(self, options: Optional[ExecutionOptions] = None):
        self.options = options or ExecutionOptions()
        self.program = Program(())
        self.stdin: Optional[BinaryIO] = None
        self.stdout: Optional[BinaryIO] = None
        self.reset()

    def reset(self):
        opts = self.options
        self.memory = np.zeros(opts.tape_size, dtype=opts.cell_dtype)
        self.mask = opts.cell_mask
        self.pointer = 0
        self.pc = 0
        self.step_count = 0

    def load(self, program: Union[Program, Sequence[Instruction]]):
        if not isinstance(program, Program):
            # Validates every branch target.
            program = Program(tuple(program))
        self.reset()
        self.program = program

    @property
    def finished(self) -> bool:
        return self.pc >= len(self.program)

    def copy_state(self) -> Tuple[int, int, np.ndarray, int]:
        return self.pc, self.pointer, self.memory.copy(), self.step_count

    # ===== Errors =====

    def _pointer_error(self, attempted: int):
        return make_pointer_error(
            index=self.pc,
            pointer=self.pointer,
            attempted=attempted,
            tape_size=len(self.memory),
            offset=self.program.source_offset(self.pc),
            source=self.program.source,
        )

    def _input_error(self):
        return make_input_error(
            index=self.pc,
            offset=self.program.source_offset(self.pc),
            source=self.program.source,
        )

    # ===== I/O =====

    def _write(self):
        self.stdout.write(bytes((int(self.memory[self.pointer]) & 0xFF,)))

    def _read(self):
        data = self.stdin.read(1)
        if data:
            self.memory[self.pointer] = data[0] & self.mask
            return
        eof = self.options.eof
        if eof is EOFPolicy.FAIL:
            raise self._input_error()
        if eof is EOFPolicy.ZERO:
            self.memory[self.pointer] = 0

    # ===== Execution =====

    def step(self) -> bool:
        """
        Execute the instruction at ``pc``.

        Returns:
            True while there are instructions left to execute.
        """
        if self.finished:
            return False

        ins = self.program.instructions[self.pc]
        memory = self.memory
        next_pc = self.pc + 1

        if isinstance(ins, MoveRight):
            target = self.pointer + ins.count
            if target >= len(memory):
                raise self._pointer_error(target)
            self.pointer = target
        elif isinstance(ins, MoveLeft):
            target = self.pointer - ins.count
            if target < 0:
                raise self._pointer_error(target)
            self.pointer = target
        elif isinstance(ins, Increment):
            memory[self.pointer] = (int(memory[self.pointer]) + ins.amount) & self.mask
        elif isinstance(ins, Decrement):
            memory[self.pointer] = (int(memory[self.pointer]) - ins.amount) & self.mask
        elif isinstance(ins, Output):
            self._write()
        elif isinstance(ins, Input):
            self._read()
        elif isinstance(ins, JumpIfZero):
            if memory[self.pointer] == 0:
                next_pc = ins.target
        elif isinstance(ins, JumpIfNonZero):
            if memory[self.pointer] != 0:
                next_pc = ins.target

        self.pc = next_pc
        self.step_count += 1
        return not self.finished

    def run_jit_step(self) -> int:
        """Run one JIT batch, then service the I/O instruction it stopped on."""
        opcodes, args = self.program.to_arrays()
        new_pc, new_pointer, stop_reason, steps = run_batch(
            opcodes, args, self.memory, self.pc, self.pointer,
            self.mask, self.options.batch_steps,
        )
        self.pc = int(new_pc)
        self.pointer = int(new_pointer)
        self.step_count += int(steps)

        if stop_reason == STOP_OUT_OF_BOUNDS:
            ins = self.program.instructions[self.pc]
            delta = ins.count if isinstance(ins, MoveRight) else -ins.count
            raise self._pointer_error(self.pointer + delta)
        if stop_reason in (STOP_OUTPUT, STOP_INPUT):
            self.step()
        return int(stop_reason)

    def run(self, stdin: Optional[BinaryIO] = None, stdout: Optional[BinaryIO] = None) -> ExecutionResult:
        """Run to completion; streams default to the process's binary stdin/stdout."""
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout.buffer
        if self.options.engine == "jit":
            while not self.finished:
                self.run_jit_step()
        else:
            while self.step():
                pass
        return ExecutionResult(memory=self.memory.copy(), pointer=self.pointer, steps=self.step_count)


def execute(
    program: Union[Program, Sequence[Instruction]],
    *,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
    options: Optional[ExecutionOptions] = None,
) -> ExecutionResult:
    """Run ``program`` on a fresh tape and return the final machine state."""
    interp = Interpreter(options)
    interp.load(program)
    return interp.run(stdin, stdout)
