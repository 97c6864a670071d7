#!/usr/bin/env python3
"""
Command line tests.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import io
import subprocess

import pytest

from bfvm.cli import main

SRC_DIR = os.path.join(os.path.dirname(__file__), '..', 'src')


def test_run_source(capsysbinary):
    assert main(["-e", "++++++++[>++++++++<-]>+."]) == 0
    assert capsysbinary.readouterr().out == b"A"


def test_run_file(tmp_path, capsysbinary):
    path = tmp_path / "prog.bf"
    path.write_text("+++++++[>+++++++<-]>.", encoding="utf-8")
    assert main([str(path)]) == 0
    assert capsysbinary.readouterr().out == b"1"


def test_reads_stdin(monkeypatch, capsysbinary):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"hi")))
    assert main(["-e", ",.,.", "--eof", "zero"]) == 0
    assert capsysbinary.readouterr().out == b"hi"


def test_eof_fail_exit_code(monkeypatch, capsysbinary):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"")))
    assert main(["-e", ","]) == 1
    assert b"Input exhausted" in capsysbinary.readouterr().err


def test_mismatched_bracket_exit_code(capsys):
    assert main(["-e", "+]"]) == 1
    err = capsys.readouterr().err
    assert "Unmatched ']'" in err


def test_out_of_bounds_exit_code(capsysbinary):
    assert main(["-e", "+.>>", "--tape-size", "2"]) == 1
    captured = capsysbinary.readouterr()
    # Output produced before the fault is kept.
    assert captured.out == b"\x01"
    assert b"Data pointer out of bounds" in captured.err


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.bf")]) == 1
    assert "Couldn't find file" in capsys.readouterr().err


def test_dump(capsys):
    assert main(["-e", "++[-]", "--dump"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "0000  INC   2"
    assert out[1] == "0001  JZ    4"


def test_dump_without_coalescing(capsys):
    assert main(["-e", "++", "--dump", "--no-coalesce"]) == 0
    assert capsys.readouterr().out.splitlines() == ["0000  INC   1", "0001  INC   1"]


def test_trace_and_stats(capsysbinary):
    assert main(["-e", "++.", "--trace", "--stats", "--engine", "jit"]) == 0
    captured = capsysbinary.readouterr()
    assert captured.out == b"\x02"
    assert b"coalesce '+'" in captured.err
    assert b"Translation took" in captured.err
    assert b"Execution took" in captured.err
    assert b"2 steps" in captured.err


def test_wide_cells_flag(capsysbinary):
    assert main(["-e", "-.", "--cell-bits", "16"]) == 0
    assert capsysbinary.readouterr().out == b"\xff"


def test_undecodable_file(tmp_path, capsys):
    path = tmp_path / "bad.bf"
    path.write_bytes(b"\xff\xfe+.")
    assert main([str(path)]) == 1
    assert "Couldn't read file" in capsys.readouterr().err


def test_directory_instead_of_file(tmp_path, capsys):
    assert main([str(tmp_path)]) == 1
    assert "Couldn't read file" in capsys.readouterr().err


def test_requires_a_program():
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 2


def test_rejects_bad_tape_size():
    with pytest.raises(SystemExit) as info:
        main(["-e", "+", "--tape-size", "0"])
    assert info.value.code == 2


def test_module_entry_point(tmp_path):
    path = tmp_path / "hi.bf"
    path.write_text("++++++++[>+++++++++<-]>.+.", encoding="utf-8")
    env = dict(os.environ)
    env["PYTHONPATH"] = SRC_DIR + os.pathsep + env.get("PYTHONPATH", "")
    result = subprocess.run(
        [sys.executable, "-m", "bfvm", str(path)],
        input=b"",
        capture_output=True,
        env=env,
    )
    assert result.returncode == 0
    assert result.stdout == b"HI"
