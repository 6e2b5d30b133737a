"""
Instruction data model: parameters, instructions and instruction streams.
"""

from .parameter import Parameter, ParamType, TypeMismatchError
from .instruction import CodeGenData, Instruction, InstType, make_instruction
from .instruction_stream import InstructionStream

__all__ = [
    "Parameter",
    "ParamType",
    "TypeMismatchError",
    "CodeGenData",
    "Instruction",
    "InstType",
    "make_instruction",
    "InstructionStream",
]
