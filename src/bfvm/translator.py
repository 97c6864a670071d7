from __future__ import annotations

from .errors import make_bracket_error
from .ops import (
    Decrement,
    Increment,
    Input,
    JumpIfNonZero,
    JumpIfZero,
    MoveLeft,
    MoveRight,
    Output,
    Program,
    UNRESOLVED,
)
from .state import TranslatorState

# Characters whose repeats collapse into one instruction carrying a count.
_RUNS = {
    '>': (MoveRight, 'count'),
    '<': (MoveLeft, 'count'),
    '+': (Increment, 'amount'),
    '-': (Decrement, 'amount'),
}


class Translator:
    """
    Source text -> resolved Program.

    Strategy:
    - Single left-to-right scan; anything outside the eight command
      characters is skipped without consuming an instruction index
    - '>' '<' '+' '-' coalesce with the immediately preceding instruction
      when it is of the same kind (optional)
    - '[' is emitted with a placeholder target and its index pushed on the
      bracket stack; the matching ']' backpatches it
    """

    def __init__(self, coalesce: bool = True, trace: bool = False):
        self.state = TranslatorState(coalesce=coalesce, is_tracing=trace)

    @property
    def trace(self):
        return self.state.trace

    # ===== Main Translation Pipeline =====

    def translate(self, source: str) -> Program:
        """
        Translate ``source`` into a Program.

        Raises:
            MismatchedBracketError: a ']' without a pending '[', or a '['
                still pending once the whole source has been read.
        """
        st = self.state
        st.reset()

        for offset, ch in enumerate(source):
            if ch in _RUNS:
                self._emit_run(ch, offset)
            elif ch == '.':
                self._emit(Output(), offset)
            elif ch == ',':
                self._emit(Input(), offset)
            elif ch == '[':
                self._open_loop(offset)
            elif ch == ']':
                self._close_loop(source, offset)

        if st.bracket_stack:
            # Report the innermost '[' that never got closed.
            start = st.bracket_stack[-1]
            raise make_bracket_error(kind='unmatched-open', source=source, offset=st.positions[start])

        return Program(tuple(st.instructions), positions=tuple(st.positions), source=source)

    # ===== Emission =====

    def _emit(self, ins, offset: int) -> int:
        st = self.state
        index = len(st.instructions)
        st.instructions.append(ins)
        st.positions.append(offset)
        st.add_trace(f"#{index}: emit {ins!r} (offset {offset})")
        return index

    def _emit_run(self, ch: str, offset: int) -> None:
        st = self.state
        kind, attr = _RUNS[ch]
        if st.coalesce and st.instructions and type(st.instructions[-1]) is kind:
            index = len(st.instructions) - 1
            n = getattr(st.instructions[index], attr) + 1
            st.instructions[index] = kind(n)
            st.add_trace(f"#{index}: coalesce '{ch}' -> {kind.__name__}({n})")
            return
        self._emit(kind(1), offset)

    # ===== Loops =====

    def _open_loop(self, offset: int) -> None:
        st = self.state
        index = self._emit(JumpIfZero(UNRESOLVED), offset)
        st.bracket_stack.append(index)
        st.add_trace(f"#{index}: push '[' (depth {len(st.bracket_stack)})")

    def _close_loop(self, source: str, offset: int) -> None:
        st = self.state
        if not st.bracket_stack:
            raise make_bracket_error(kind='unmatched-close', source=source, offset=offset)

        start = st.bracket_stack.pop()
        index = len(st.instructions)
        # Zero on entry skips the body and this ']'.
        st.instructions[start] = JumpIfZero(index + 1)
        st.add_trace(f"#{start}: patch JumpIfZero -> {index + 1}")
        # Non-zero at the end resumes just after the matching '['.
        self._emit(JumpIfNonZero(start + 1), offset)


def translate(source: str, *, coalesce: bool = True) -> Program:
    return Translator(coalesce=coalesce).translate(source)
