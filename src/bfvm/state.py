from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .ops import Instruction


@dataclass
class TranslatorState:
    instructions: List[Instruction] = field(default_factory=list)
    positions: List[int] = field(default_factory=list)
    bracket_stack: List[int] = field(default_factory=list)
    coalesce: bool = True
    trace: List[str] = field(default_factory=list)
    is_tracing: bool = False

    def reset(self, *, coalesce: Optional[bool] = None) -> None:
        self.instructions.clear()
        self.positions.clear()
        self.bracket_stack.clear()
        self.trace.clear()
        if coalesce is not None:
            self.coalesce = coalesce

    def add_trace(self, message: str) -> None:
        if self.is_tracing:
            self.trace.append(message)
