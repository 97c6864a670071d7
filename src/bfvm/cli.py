from __future__ import annotations

import argparse
import sys
import time
from typing import List, Optional

from .config import DEFAULT_TAPE_SIZE, ENGINES, EOFPolicy, ExecutionOptions
from .errors import BFError
from .interpreter import Interpreter
from .ops import count_static_ops, disassemble
from .translator import Translator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfvm",
        description="Translate and run a tape program (> < + - . , [ ]).",
    )
    parser.add_argument("program", nargs="?", help="Program file to run")
    parser.add_argument("-e", "--source", help="Program text given on the command line")
    parser.add_argument("--no-coalesce", action="store_true", help="Emit one instruction per source character")
    parser.add_argument("--tape-size", type=int, default=DEFAULT_TAPE_SIZE, help=f"Number of cells (default {DEFAULT_TAPE_SIZE})")
    parser.add_argument("--cell-bits", type=int, choices=(8, 16, 32), default=8, help="Cell width in bits (default 8)")
    parser.add_argument(
        "--eof",
        choices=[p.value for p in EOFPolicy],
        default=EOFPolicy.FAIL.value,
        help="What ',' does at end of input (default fail)",
    )
    parser.add_argument("--engine", choices=ENGINES, default="python", help="Execution loop (default python)")
    parser.add_argument("--dump", action="store_true", help="Print the translated instructions instead of running")
    parser.add_argument("--trace", action="store_true", help="Print the translation trace to stderr")
    parser.add_argument("--stats", action="store_true", help="Print timings and step counts to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.source is not None:
        source = args.source
    elif args.program:
        try:
            with open(args.program, 'r', encoding='utf-8') as f:
                source = f.read()
        except FileNotFoundError:
            print(f"Couldn't find file: {args.program}", file=sys.stderr)
            return 1
        except (OSError, UnicodeDecodeError) as e:
            print(f"Couldn't read file: {args.program}: {e}", file=sys.stderr)
            return 1
    else:
        parser.error("a program file or -e SOURCE is required")

    try:
        options = ExecutionOptions(
            tape_size=args.tape_size,
            cell_bits=args.cell_bits,
            eof=EOFPolicy(args.eof),
            engine=args.engine,
        )
    except ValueError as e:
        parser.error(str(e))

    translator = Translator(coalesce=not args.no_coalesce, trace=args.trace)
    start = time.time()
    error: Optional[BFError] = None
    try:
        program = translator.translate(source)
    except BFError as e:
        error = e
    end = time.time()

    for line in translator.trace:
        print(line, file=sys.stderr)
    if error is not None:
        print(error, file=sys.stderr)
        return 1

    if args.stats:
        print(f"Translation took {(end - start) * 1000:.2f} ms", file=sys.stderr)
        print(f"{len(program)} instructions for {count_static_ops(program)} commands", file=sys.stderr)

    if args.dump:
        if len(program):
            print(disassemble(program))
        return 0

    interp = Interpreter(options)
    interp.load(program)
    stdout = sys.stdout.buffer
    start = time.time()
    try:
        result = interp.run(sys.stdin.buffer, stdout)
    except BFError as e:
        stdout.flush()
        print(e, file=sys.stderr)
        return 1
    end = time.time()
    stdout.flush()

    if args.stats:
        print(f"Execution took {(end - start) * 1000:.2f} ms", file=sys.stderr)
        print(f"{result.steps} steps, cursor at {result.pointer}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
