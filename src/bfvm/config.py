from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

DEFAULT_TAPE_SIZE = 30000
DEFAULT_CELL_BITS = 8
DEFAULT_BATCH_STEPS = 50000

ENGINES = ("python", "jit")

_CELL_DTYPES = {
    8: np.uint8,
    16: np.uint16,
    32: np.uint32,
}


class EOFPolicy(str, Enum):
    """What ',' does once the input stream has no more bytes."""

    FAIL = "fail"
    ZERO = "zero"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class TranslateOptions:
    coalesce: bool = True
    trace: bool = False


@dataclass(frozen=True)
class ExecutionOptions:
    tape_size: int = DEFAULT_TAPE_SIZE
    cell_bits: int = DEFAULT_CELL_BITS
    eof: EOFPolicy = EOFPolicy.FAIL
    engine: str = "python"
    batch_steps: int = DEFAULT_BATCH_STEPS

    def __post_init__(self) -> None:
        for name in ('tape_size', 'batch_steps'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")
            object.__setattr__(self, name, int(value))
        if self.cell_bits not in _CELL_DTYPES:
            raise ValueError(f"cell_bits must be one of {sorted(_CELL_DTYPES)}, got {self.cell_bits}")
        if self.engine not in ENGINES:
            raise ValueError(f"engine must be one of {ENGINES}, got {self.engine!r}")
        # Accept plain strings such as "zero" for the policy.
        object.__setattr__(self, 'eof', EOFPolicy(self.eof))

    @property
    def cell_dtype(self):
        return _CELL_DTYPES[self.cell_bits]

    @property
    def cell_mask(self) -> int:
        return (1 << self.cell_bits) - 1
