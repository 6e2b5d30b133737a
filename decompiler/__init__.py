"""
Decompiler front end instruction model and debug trace rendering.
"""

from .core import (
    CodeGenData,
    Instruction,
    InstructionStream,
    InstType,
    Parameter,
    ParamType,
    TypeMismatchError,
    make_instruction,
)
from .formatting import dump_trace, format_instruction, format_param, format_stream

__all__ = [
    "CodeGenData",
    "Instruction",
    "InstructionStream",
    "InstType",
    "Parameter",
    "ParamType",
    "TypeMismatchError",
    "make_instruction",
    "dump_trace",
    "format_instruction",
    "format_param",
    "format_stream",
]
