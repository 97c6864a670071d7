
from .api import RunResult, TranslateResult, run_file, run_string, translate_file, translate_string
from .config import EOFPolicy, ExecutionOptions, TranslateOptions
from .errors import (
    BFError,
    DataPointerOutOfBoundsError,
    InputExhaustedError,
    InvalidBranchTargetError,
    MismatchedBracketError,
    UnresolvedBranchError,
)
from .interpreter import ExecutionResult, Interpreter, execute
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
    disassemble,
    emit,
)
from .translator import Translator, translate

__all__ = [
    'Translator',
    'translate',
    'Interpreter',
    'execute',
    'ExecutionResult',
    'Program',
    'MoveRight',
    'MoveLeft',
    'Increment',
    'Decrement',
    'Output',
    'Input',
    'JumpIfZero',
    'JumpIfNonZero',
    'emit',
    'disassemble',
    'TranslateOptions',
    'ExecutionOptions',
    'EOFPolicy',
    'BFError',
    'MismatchedBracketError',
    'DataPointerOutOfBoundsError',
    'UnresolvedBranchError',
    'InvalidBranchTargetError',
    'InputExhaustedError',
    'RunResult',
    'TranslateResult',
    'translate_string',
    'translate_file',
    'run_string',
    'run_file',
]
