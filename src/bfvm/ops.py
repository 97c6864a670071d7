from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple, Union

import numpy as np

from .errors import make_target_error, make_unresolved_error

# Placeholder target of a '[' whose matching ']' has not been seen yet.
UNRESOLVED = -1

# ---------------- Instructions ----------------
@dataclass(frozen=True)
class MoveRight:
    count: int = 1

@dataclass(frozen=True)
class MoveLeft:
    count: int = 1

@dataclass(frozen=True)
class Increment:
    amount: int = 1

@dataclass(frozen=True)
class Decrement:
    amount: int = 1

@dataclass(frozen=True)
class Output:
    pass

@dataclass(frozen=True)
class Input:
    pass

@dataclass(frozen=True)
class JumpIfZero:
    target: int = UNRESOLVED  # index to land on when the cell is zero

@dataclass(frozen=True)
class JumpIfNonZero:
    target: int  # index to resume at when the cell is non-zero

Instruction = Union[MoveRight, MoveLeft, Increment, Decrement, Output, Input, JumpIfZero, JumpIfNonZero]

# Opcodes of the array encoding consumed by the JIT loop.
OP_RIGHT = 0
OP_LEFT = 1
OP_INC = 2
OP_DEC = 3
OP_OUT = 4
OP_IN = 5
OP_JZ = 6
OP_JNZ = 7

_OPCODES = {
    MoveRight: OP_RIGHT,
    MoveLeft: OP_LEFT,
    Increment: OP_INC,
    Decrement: OP_DEC,
    Output: OP_OUT,
    Input: OP_IN,
    JumpIfZero: OP_JZ,
    JumpIfNonZero: OP_JNZ,
}

_MNEMONICS = {
    MoveRight: 'RIGHT',
    MoveLeft: 'LEFT',
    Increment: 'INC',
    Decrement: 'DEC',
    Output: 'OUT',
    Input: 'IN',
    JumpIfZero: 'JZ',
    JumpIfNonZero: 'JNZ',
}

_CHARS = {
    MoveRight: '>',
    MoveLeft: '<',
    Increment: '+',
    Decrement: '-',
    Output: '.',
    Input: ',',
    JumpIfZero: '[',
    JumpIfNonZero: ']',
}


def operand(ins: Instruction) -> Optional[int]:
    if isinstance(ins, (MoveRight, MoveLeft)):
        return ins.count
    if isinstance(ins, (Increment, Decrement)):
        return ins.amount
    if isinstance(ins, (JumpIfZero, JumpIfNonZero)):
        return ins.target
    return None


# ---------------- Program ----------------
@dataclass(frozen=True)
class Program:
    """
    A translated, fully resolved instruction stream.

    Jump targets are plain indices into ``instructions``; a target equal to
    ``len(program)`` falls off the end. Construction rejects any branch that
    was never backpatched, so a Program value can always be executed without
    further checks.
    """

    instructions: Tuple[Instruction, ...]
    positions: Optional[Tuple[int, ...]] = None
    source: Optional[str] = field(default=None, repr=False, compare=False)
    _arrays: list = field(default_factory=list, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        instructions = tuple(self.instructions)
        object.__setattr__(self, 'instructions', instructions)
        if self.positions is not None:
            positions = tuple(self.positions)
            if len(positions) != len(instructions):
                raise ValueError(
                    f"positions has {len(positions)} entries for {len(instructions)} instructions"
                )
            object.__setattr__(self, 'positions', positions)

        length = len(instructions)
        for i, ins in enumerate(instructions):
            if type(ins) not in _OPCODES:
                raise TypeError(f"Not an instruction at {i}: {ins!r}")
            n = operand(ins)
            if isinstance(ins, (JumpIfZero, JumpIfNonZero)):
                if n == UNRESOLVED:
                    raise make_unresolved_error(index=i)
                if not 0 <= n <= length:
                    raise make_target_error(index=i, target=n, length=length)
            elif n is not None and n < 1:
                raise ValueError(f"{_MNEMONICS[type(ins)]} at {i} needs a count >= 1, got {n}")

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __getitem__(self, index: int) -> Instruction:
        return self.instructions[index]

    def source_offset(self, index: int) -> Optional[int]:
        if self.positions is None or not 0 <= index < len(self.positions):
            return None
        return self.positions[index]

    def to_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """Encode as parallel ``(opcodes, args)`` int64 arrays for the JIT loop."""
        if not self._arrays:
            n = len(self.instructions)
            opcodes = np.empty(n, dtype=np.int64)
            args = np.zeros(n, dtype=np.int64)
            for i, ins in enumerate(self.instructions):
                opcodes[i] = _OPCODES[type(ins)]
                arg = operand(ins)
                if arg is not None:
                    args[i] = arg
            self._arrays.extend((opcodes, args))
        return self._arrays[0], self._arrays[1]


# ---------------- Emit + counts ----------------
def emit(program: Union[Program, Iterable[Instruction]]) -> str:
    """Reconstruct canonical source text; coalesced runs are expanded again."""
    out: List[str] = []
    for ins in program:
        ch = _CHARS[type(ins)]
        n = operand(ins)
        if isinstance(ins, (JumpIfZero, JumpIfNonZero)) or n is None:
            out.append(ch)
        else:
            out.append(ch * n)
    return "".join(out)


def count_static_ops(program: Union[Program, Iterable[Instruction]]) -> int:
    """Number of primitive source characters the instructions stand for."""
    c = 0
    for ins in program:
        if isinstance(ins, (MoveRight, MoveLeft, Increment, Decrement)):
            c += operand(ins)
        else:
            c += 1
    return c


def disassemble(program: Program) -> str:
    width = max(4, len(str(len(program))))
    lines: List[str] = []
    for i, ins in enumerate(program):
        n = operand(ins)
        text = f"{i:0{width}d}  {_MNEMONICS[type(ins)]:<5}"
        if n is not None:
            text += f" {n}"
        lines.append(text.rstrip())
    return "\n".join(lines)
