from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple


def _build_context(lines: List[str], line_no_1: int, *, context: int = 2) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
    return "\n".join(out)


def _caret_line(column: int) -> str:
    # Lines in the context block are prefixed with "> NNNN | ".
    return " " * (9 + column - 1) + "^"


def locate(source: str, offset: int) -> Tuple[int, int]:
    """Return the 1-based (line, column) of a character offset in ``source``."""
    line = source.count('\n', 0, offset) + 1
    line_start = source.rfind('\n', 0, offset) + 1
    return line, offset - line_start + 1


def _hint_for(message: str, *, kind: str) -> Optional[str]:
    msg = message.lower()
    if kind == 'translate':
        if 'unmatched' in msg and "'['" in msg:
            return 'Every "[" needs a matching "]" later in the program.'
        if 'unmatched' in msg and "']'" in msg:
            return 'This "]" closes a loop that was never opened. Check for a missing "[" or an extra "]".'
        return None
    if kind == 'runtime':
        if 'out of bounds' in msg:
            return 'The cursor must stay on the tape. Try a larger --tape-size or check for unbalanced "<" / ">".'
        if 'input exhausted' in msg:
            return 'Provide more input bytes, or choose another end-of-input policy (--eof zero / --eof unchanged).'
        return None
    return None


@dataclass
class BFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class MismatchedBracketError(BFError):
    kind: str
    offset: int
    line: int
    column: int
    context: str


@dataclass
class DataPointerOutOfBoundsError(BFError):
    index: int
    pointer: int
    attempted: int


@dataclass
class UnresolvedBranchError(BFError):
    index: int


@dataclass
class InvalidBranchTargetError(BFError):
    index: int
    target: int


@dataclass
class InputExhaustedError(BFError):
    index: int


def _format(prefix: str, message: str, where: str, ctx: str, hint: Optional[str]) -> str:
    ctx_block = f"\n{ctx}" if ctx else ""
    hint_block = f"\nHint: {hint}" if hint else ""
    return f"{prefix}: {message} ({where}){ctx_block}{hint_block}"


def make_bracket_error(*, kind: str, source: str, offset: int) -> MismatchedBracketError:
    if kind == 'unmatched-open':
        message = "Unmatched '[': start bracket has no end match"
    else:
        message = "Unmatched ']': end bracket has no start match"
    line, column = locate(source, offset)
    lines = source.split('\n')
    ctx = _build_context(lines, line) + "\n" + _caret_line(column)
    hint = _hint_for(message, kind='translate')
    return MismatchedBracketError(
        message=_format('TranslateError', message, f"line {line}, column {column}", ctx, hint),
        kind=kind,
        offset=offset,
        line=line,
        column=column,
        context=ctx,
    )


def _runtime_location(index: int, offset: Optional[int], source: Optional[str]) -> Tuple[str, str]:
    if offset is None or source is None:
        return f"instruction {index}", ""
    line, column = locate(source, offset)
    ctx = _build_context(source.split('\n'), line) + "\n" + _caret_line(column)
    return f"instruction {index}, line {line}, column {column}", ctx


def make_pointer_error(
    *,
    index: int,
    pointer: int,
    attempted: int,
    tape_size: int,
    offset: Optional[int] = None,
    source: Optional[str] = None,
) -> DataPointerOutOfBoundsError:
    message = f"Data pointer out of bounds: {pointer} -> {attempted} (tape has {tape_size} cells)"
    where, ctx = _runtime_location(index, offset, source)
    return DataPointerOutOfBoundsError(
        message=_format('RuntimeError', message, where, ctx, _hint_for(message, kind='runtime')),
        index=index,
        pointer=pointer,
        attempted=attempted,
    )


def make_input_error(*, index: int, offset: Optional[int] = None, source: Optional[str] = None) -> InputExhaustedError:
    message = "Input exhausted: no byte available for ','"
    where, ctx = _runtime_location(index, offset, source)
    return InputExhaustedError(
        message=_format('RuntimeError', message, where, ctx, _hint_for(message, kind='runtime')),
        index=index,
    )


def make_unresolved_error(*, index: int) -> UnresolvedBranchError:
    return UnresolvedBranchError(
        message=f"ProgramError: branch at instruction {index} was never resolved",
        index=index,
    )


def make_target_error(*, index: int, target: int, length: int) -> InvalidBranchTargetError:
    return InvalidBranchTargetError(
        message=f"ProgramError: branch at instruction {index} targets {target}, outside [0, {length}]",
        index=index,
        target=target,
    )
