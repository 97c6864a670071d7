from __future__ import annotations

from numba import njit

from .ops import OP_DEC, OP_IN, OP_INC, OP_JNZ, OP_JZ, OP_LEFT, OP_OUT, OP_RIGHT

STOP_OUTPUT = 1
STOP_INPUT = 2
STOP_END = 3
STOP_MAX_STEPS = 4
STOP_OUT_OF_BOUNDS = 5


@njit(cache=True)
def run_batch(opcodes, args, memory, pc, pointer, mask, max_steps):
    """
    JIT-compiled execution loop over the array encoding of a Program.

    Runs until the program ends, ``max_steps`` instructions have executed, an
    I/O instruction is reached, or a move would leave the tape. I/O and moves
    that fault are *not* executed: ``pc`` is left on them so the caller can
    perform the I/O (or report the fault) and resume.

    Returns (pc, pointer, stop_reason, steps).
    """
    stop_reason = STOP_END
    mem_len = len(memory)
    prog_len = len(opcodes)
    steps = 0

    while pc < prog_len:
        if steps >= max_steps:
            stop_reason = STOP_MAX_STEPS
            break

        op = opcodes[pc]
        arg = args[pc]

        if op == OP_RIGHT:
            if pointer + arg >= mem_len:
                stop_reason = STOP_OUT_OF_BOUNDS
                break
            pointer += arg
        elif op == OP_LEFT:
            if pointer - arg < 0:
                stop_reason = STOP_OUT_OF_BOUNDS
                break
            pointer -= arg
        elif op == OP_INC:
            memory[pointer] = (memory[pointer] + arg) & mask
        elif op == OP_DEC:
            memory[pointer] = (memory[pointer] - arg) & mask
        elif op == OP_OUT:
            stop_reason = STOP_OUTPUT
            break
        elif op == OP_IN:
            stop_reason = STOP_INPUT
            break
        elif op == OP_JZ:
            if memory[pointer] == 0:
                pc = arg
                steps += 1
                continue
        elif op == OP_JNZ:
            if memory[pointer] != 0:
                pc = arg
                steps += 1
                continue

        pc += 1
        steps += 1

    return pc, pointer, stop_reason, steps
