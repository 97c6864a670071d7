from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from .config import ExecutionOptions, TranslateOptions
from .interpreter import execute
from .ops import Program
from .translator import Translator


@dataclass(frozen=True)
class TranslateResult:
    program: Program
    trace: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RunResult:
    output: bytes
    memory: np.ndarray
    pointer: int
    steps: int
    trace: Tuple[str, ...] = ()


def translate_string(source: str, *, options: Optional[TranslateOptions] = None) -> TranslateResult:
    opts = options or TranslateOptions()
    translator = Translator(coalesce=opts.coalesce, trace=opts.trace)
    program = translator.translate(source)
    return TranslateResult(program=program, trace=tuple(translator.trace))


def translate_file(path: str | Path, *, options: Optional[TranslateOptions] = None, encoding: str = "utf-8") -> TranslateResult:
    p = Path(path)
    return translate_string(p.read_text(encoding=encoding), options=options)


def run_string(
    source: str,
    input: bytes = b"",
    *,
    translate_options: Optional[TranslateOptions] = None,
    options: Optional[ExecutionOptions] = None,
) -> RunResult:
    """Translate and run ``source`` with ``input`` as its input stream, collecting the output."""
    translated = translate_string(source, options=translate_options)
    stdout = io.BytesIO()
    result = execute(translated.program, stdin=io.BytesIO(input), stdout=stdout, options=options)
    return RunResult(
        output=stdout.getvalue(),
        memory=result.memory,
        pointer=result.pointer,
        steps=result.steps,
        trace=translated.trace,
    )


def run_file(
    path: str | Path,
    input: bytes = b"",
    *,
    translate_options: Optional[TranslateOptions] = None,
    options: Optional[ExecutionOptions] = None,
    encoding: str = "utf-8",
) -> RunResult:
    p = Path(path)
    return run_string(p.read_text(encoding=encoding), input, translate_options=translate_options, options=options)
