"""
Load disassembled instruction listings from JSON or YAML.

A listing is either a list of entries or a mapping with an "instructions"
list. Each entry looks like:

    {"opcode": 1, "address": "0x10", "stack_change": -1, "name": "jump",
     "type": "Jump", "params": [{"type": "SignedInt", "value": -16}],
     "codegen_data": ""}

Integer fields take ints or strings with an optional 0x/0o/0b prefix ("0x10",
"16"). Zero-padded strings without a prefix ("010") are read as decimal.
Mnemonics must be strings. Machine-readable traces written by dump_trace load
back unchanged.
"""

import json
from pathlib import Path
from typing import Any, Optional, Union

import structlog
import yaml

from decompiler.core.instruction import Instruction, InstType
from decompiler.core.instruction_stream import InstructionStream
from decompiler.core.parameter import Parameter, ParamType

logger = structlog.get_logger()

LISTING_FORMATS = ("json", "yaml")

REQUIRED_FIELDS = ("opcode", "address", "name", "type")

_SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def detect_format(path: Union[str, Path]) -> str:
    """Pick the listing format from the file suffix."""
    suffix = Path(path).suffix.lower()
    if suffix not in _SUFFIX_FORMATS:
        raise ValueError(f"Cannot detect listing format of {path}; use one of: {', '.join(_SUFFIX_FORMATS)}")
    return _SUFFIX_FORMATS[suffix]


def load_listing(path: Union[str, Path], fmt: Optional[str] = None) -> InstructionStream:
    """
    Load an instruction listing file into an InstructionStream.

    Args:
        path: Path to the listing file
        fmt: "json" or "yaml"; detected from the suffix when omitted

    Returns:
        The instructions in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a well-formed listing.
        TypeMismatchError: If an operand payload does not match its type.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Listing file not found: {path}")

    fmt = fmt or detect_format(path)
    if fmt not in LISTING_FORMATS:
        raise ValueError(f"Unsupported listing format: {fmt}")

    with path.open("r", encoding="utf-8") as f:
        if fmt == "json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    stream = parse_listing(data)
    logger.info("Loaded instruction listing", path=str(path), format=fmt, instructions=len(stream))
    return stream


def parse_listing(data: Any) -> InstructionStream:
    """Build an InstructionStream from already-decoded listing data."""
    if isinstance(data, dict):
        data = data.get("instructions")
    if not isinstance(data, list):
        raise ValueError("Listing must be a list of instructions or a mapping with an 'instructions' list")

    stream = InstructionStream()
    for index, entry in enumerate(data):
        stream.append(instruction_from_dict(entry, index))
    return stream


def instruction_from_dict(entry: Any, index: int = 0) -> Instruction:
    """Build one Instruction from a listing entry."""
    if not isinstance(entry, dict):
        raise ValueError(f"Entry {index}: expected a mapping, got {type(entry).__name__}")

    missing = [field for field in REQUIRED_FIELDS if field not in entry]
    if missing:
        raise ValueError(f"Entry {index}: missing required fields: {', '.join(missing)}")

    try:
        inst_type = InstType.from_name(str(entry["type"]))
    except ValueError as e:
        raise ValueError(f"Entry {index}: {e}") from None

    params = entry.get("params") or []
    if not isinstance(params, list):
        raise ValueError(f"Entry {index}: 'params' must be a list")

    codegen_data = entry.get("codegen_data") or ""
    if not isinstance(codegen_data, str):
        raise ValueError(f"Entry {index}: 'codegen_data' must be a string")

    opcode = _parse_int(entry["opcode"], "opcode", index)
    address = _parse_int(entry["address"], "address", index)
    stack_change = _parse_int(entry.get("stack_change", 0), "stack_change", index)
    # Operand/type mismatches raise TypeMismatchError from here unchanged
    operands = tuple(_param_from_dict(param, index) for param in params)

    try:
        return Instruction(
            opcode=opcode,
            address=address,
            stack_change=stack_change,
            name=entry["name"],
            type=inst_type,
            params=operands,
            codegen_data=codegen_data,
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Entry {index}: {e}") from None


def _param_from_dict(param: Any, index: int) -> Parameter:
    if not isinstance(param, dict) or "type" not in param or "value" not in param:
        raise ValueError(f"Entry {index}: parameters must be mappings with 'type' and 'value'")

    try:
        param_type = ParamType.from_name(str(param["type"]))
    except ValueError as e:
        raise ValueError(f"Entry {index}: {e}") from None

    value = param["value"]
    if not param_type.is_text and isinstance(value, str):
        value = _parse_int(value, "param value", index)
    return Parameter(param_type, value)


def _parse_int(value: Any, field: str, index: int) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Entry {index}: field '{field}' must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError:
            pass
        # Zero-padded decimals ("010") are not valid with base 0
        try:
            return int(value, 10)
        except ValueError:
            raise ValueError(f"Entry {index}: field '{field}' is not an integer: {value!r}") from None
    raise ValueError(f"Entry {index}: field '{field}' must be an integer, got {type(value).__name__}")
