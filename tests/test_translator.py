#!/usr/bin/env python3
"""
Translation tests: coalescing, skipped characters, bracket backpatching.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfvm import (
    Decrement,
    Increment,
    Input,
    JumpIfNonZero,
    JumpIfZero,
    MismatchedBracketError,
    MoveLeft,
    MoveRight,
    Output,
    Translator,
    translate,
)


def test_runs_coalesce():
    program = translate("+++>><<<--")
    assert program.instructions == (
        Increment(3),
        MoveRight(2),
        MoveLeft(3),
        Decrement(2),
    )


def test_coalescing_needs_same_kind_immediately_before():
    program = translate("+>+")
    assert program.instructions == (Increment(1), MoveRight(1), Increment(1))
    # '>' never merges with '<', nor '+' with '-'.
    assert translate("><+-").instructions == (MoveRight(1), MoveLeft(1), Increment(1), Decrement(1))


def test_io_never_coalesces():
    assert translate("..,,").instructions == (Output(), Output(), Input(), Input())


def test_no_coalescing_across_brackets():
    program = translate("+[+]+")
    assert program.instructions == (
        Increment(1),
        JumpIfZero(4),
        Increment(1),
        JumpIfNonZero(2),
        Increment(1),
    )


def test_coalesce_off_emits_one_instruction_per_char():
    program = translate("+++>>", coalesce=False)
    assert program.instructions == (Increment(1),) * 3 + (MoveRight(1),) * 2


def test_other_characters_are_skipped():
    program = translate("hello + world +\n# comment >")
    assert program.instructions == (Increment(2), MoveRight(1))
    # Skipped text between two '+' does not break the run.
    assert translate("+ a +").instructions == (Increment(2),)


def test_empty_source():
    program = translate("no commands here")
    assert len(program) == 0


def test_empty_loop():
    program = translate("[]")
    assert program.instructions == (JumpIfZero(2), JumpIfNonZero(1))


def test_simple_loop_targets():
    program = translate("+[-]")
    assert program.instructions == (
        Increment(1),
        JumpIfZero(4),
        Decrement(1),
        JumpIfNonZero(2),
    )


def test_nested_loops_resolve_innermost_first():
    program = translate("[[]]")
    assert program.instructions == (
        JumpIfZero(4),
        JumpIfZero(3),
        JumpIfNonZero(2),
        JumpIfNonZero(1),
    )


def test_targets_in_range():
    source = "++[>+[>++<-]<-]>>[.[-]],[,]"
    program = translate(source)
    for ins in program:
        if isinstance(ins, (JumpIfZero, JumpIfNonZero)):
            assert 0 <= ins.target <= len(program)


def test_positions_point_at_first_char_of_run():
    program = translate("ab++ >")
    assert program.positions == (2, 5)


def test_unmatched_open():
    with pytest.raises(MismatchedBracketError) as info:
        translate("[+")
    err = info.value
    assert err.kind == 'unmatched-open'
    assert err.offset == 0
    assert (err.line, err.column) == (1, 1)


def test_unmatched_close():
    with pytest.raises(MismatchedBracketError) as info:
        translate("+]")
    err = info.value
    assert err.kind == 'unmatched-close'
    assert err.offset == 1
    assert "Unmatched ']'" in str(err)


def test_unmatched_open_reports_innermost_pending():
    with pytest.raises(MismatchedBracketError) as info:
        translate("[\n+[\n-")
    assert info.value.line == 2
    assert info.value.column == 2


def test_lone_close_bracket():
    with pytest.raises(MismatchedBracketError):
        translate("]")


def test_trace_records_coalescing_and_patching():
    translator = Translator(trace=True)
    translator.translate("++[-]")
    trace = "\n".join(translator.trace)
    assert "coalesce '+' -> Increment(2)" in trace
    assert "patch JumpIfZero -> 4" in trace


def test_trace_is_off_by_default():
    translator = Translator()
    translator.translate("++[-]")
    assert translator.trace == []


def test_translator_can_be_reused():
    translator = Translator()
    with pytest.raises(MismatchedBracketError):
        translator.translate("+[")
    first = translator.translate("++")
    second = translator.translate("--")
    assert first.instructions == (Increment(2),)
    assert second.instructions == (Decrement(2),)
