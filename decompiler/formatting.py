"""
Debug trace rendering for instructions.

The text trace has one line per instruction:

    AAAAAAAA: name p1, p2, ... (delta)

with the address as 8 uppercase hex digits and the stack delta in signed
decimal. Operands of jumps and calls are shown as hex addresses, all other
operands in their default textual form. Tooling may parse this format.
"""

import json
from typing import Any, Dict, Iterable, List

import yaml

from decompiler.core.instruction import Instruction, InstType
from decompiler.core.parameter import Parameter

TRACE_FORMATS = ("text", "json", "yaml")


def format_param(inst_type: InstType, param: Parameter) -> str:
    """
    Render a single operand in the context of its instruction category.

    Args:
        inst_type: Category of the instruction owning the operand
        param: The operand to render

    Returns:
        The operand text. Numeric operands of control transfers are rendered
        as 0x-prefixed uppercase hex, signed values as 32-bit two's complement.
    """
    if inst_type.is_control_transfer:
        if param.type.is_signed:
            return f"0x{param.as_signed() & 0xFFFFFFFF:X}"
        if param.type.is_unsigned:
            return f"0x{param.as_unsigned():X}"
    return param.default_text()


def format_instruction(instruction: Instruction) -> str:
    """Render one instruction as a newline-terminated trace line."""
    line = f"{instruction.address:08X}: {instruction.name}"
    operands = [format_param(instruction.type, param) for param in instruction.params]
    if operands:
        line += " " + ", ".join(operands)
    return f"{line} ({instruction.stack_change})\n"


def format_stream(instructions: Iterable[Instruction]) -> str:
    return "".join(format_instruction(instruction) for instruction in instructions)


def instruction_to_dict(instruction: Instruction) -> Dict[str, Any]:
    """Machine-readable form of an instruction, loadable again as a listing entry."""
    return {
        "address": instruction.address,
        "opcode": instruction.opcode,
        "name": instruction.name,
        "type": instruction.type.value,
        "stack_change": instruction.stack_change,
        "params": [
            {
                "type": param.type.value,
                "value": param.value,
                "display": format_param(instruction.type, param),
            }
            for param in instruction.params
        ],
        "codegen_data": instruction.codegen_data.text,
        "custom_codegen": instruction.requires_custom_codegen,
        "text": format_instruction(instruction).rstrip("\n"),
    }


def dump_trace(instructions: Iterable[Instruction], fmt: str = "text") -> str:
    """
    Render a sequence of instructions in one of TRACE_FORMATS.

    Raises:
        ValueError: If fmt is not a known trace format.
    """
    if fmt == "text":
        return format_stream(instructions)

    records: List[Dict[str, Any]] = [instruction_to_dict(instruction) for instruction in instructions]
    if fmt == "json":
        return json.dumps(records, indent=2) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(records, default_flow_style=False, sort_keys=False)
    raise ValueError(f"Unsupported trace format: {fmt}. Supported formats: {', '.join(TRACE_FORMATS)}")
