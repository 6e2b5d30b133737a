import dataclasses
from enum import Enum
from typing import ClassVar, Iterable, Tuple, Union

from decompiler.core.parameter import Parameter, ParamType

UINT32_MAX = 0xFFFFFFFF
INT16_MIN = -0x8000
INT16_MAX = 0x7FFF


class InstType(Enum):
    """Category of an instruction, used by formatting and later analysis passes."""

    BINARY_OP = "BinaryOp"          # Binary operation (e.g. +, &&), including comparisons
    CALL = "Call"                   # Regular function call
    COND_JUMP = "CondJump"          # Conditional jump, absolute address
    COND_JUMP_REL = "CondJumpRel"   # Conditional jump, relative address
    DUP = "Dup"                     # Duplicates the most recent stack entry
    JUMP = "Jump"                   # Unconditional jump, absolute address
    JUMP_REL = "JumpRel"            # Unconditional jump, relative address
    LOAD = "Load"                   # Load value to stack
    RETURN = "Return"               # Return from regular function call
    SPECIAL = "Special"             # Engine specific functions
    STACK = "Stack"                 # Stack allocation or deallocation
    STORE = "Store"                 # Store value from stack in memory
    UNARY_OP = "UnaryOp"            # Unary operation (e.g. !)

    @classmethod
    def from_name(cls, name: str) -> "InstType":
        """Look up a member by enum name (COND_JUMP) or display name (CondJump)."""
        for member in cls:
            if name in (member.name, member.value):
                return member
        raise ValueError(f"Unknown instruction type: {name!r}")

    @property
    def is_control_transfer(self) -> bool:
        """True for jumps and calls, whose operands are target addresses."""
        return self in _CONTROL_TRANSFER_TYPES


_CONTROL_TRANSFER_TYPES = frozenset({
    InstType.COND_JUMP,
    InstType.COND_JUMP_REL,
    InstType.JUMP,
    InstType.JUMP_REL,
    InstType.CALL,
})


@dataclasses.dataclass(frozen=True)
class CodeGenData:
    """
    Opaque code generation hint, passed through to the code generator verbatim.

    A hint whose first character is 0xC0 asks the code generator for custom
    handling of the instruction. Nothing here interprets the rest of the text.
    """

    CUSTOM_HANDLING_MARKER: ClassVar[str] = "\xc0"

    text: str = ""

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise TypeError(f"Code generation data must be a str, got {type(self.text).__name__}")

    @classmethod
    def custom(cls, payload: str) -> "CodeGenData":
        """Build a hint that requests custom handling."""
        return cls(cls.CUSTOM_HANDLING_MARKER + payload)

    @property
    def requires_custom_handling(self) -> bool:
        return self.text.startswith(self.CUSTOM_HANDLING_MARKER)

    @property
    def payload(self) -> str:
        """The hint text with the custom handling marker stripped."""
        if self.requires_custom_handling:
            return self.text[len(self.CUSTOM_HANDLING_MARKER):]
        return self.text

    def __bool__(self) -> bool:
        return bool(self.text)

    def __str__(self) -> str:
        return self.text


@dataclasses.dataclass(frozen=True)
class Instruction:
    """
    One decoded instruction.

    Instructions are immutable once built. Passes that need a changed
    instruction build a new one with replace().
    """

    opcode: int                     # Raw encoded operation id
    address: int                    # Location in the source program
    stack_change: int               # Net effect on the evaluation stack
    name: str                       # Mnemonic
    type: InstType
    params: Tuple[Parameter, ...] = ()
    codegen_data: CodeGenData = CodeGenData()

    def __post_init__(self):
        _check_range("opcode", self.opcode, 0, UINT32_MAX)
        _check_range("address", self.address, 0, UINT32_MAX)
        _check_range("stack_change", self.stack_change, INT16_MIN, INT16_MAX)
        if not isinstance(self.name, str):
            raise TypeError(f"Instruction name must be a str, got {type(self.name).__name__}")
        if not isinstance(self.type, InstType):
            raise TypeError(f"Instruction type must be an InstType, got {self.type!r}")

        params = tuple(self.params)
        for param in params:
            if not isinstance(param, Parameter):
                raise TypeError(f"Instruction parameters must be Parameter objects, got {param!r}")
        object.__setattr__(self, "params", params)

        if isinstance(self.codegen_data, str):
            object.__setattr__(self, "codegen_data", CodeGenData(self.codegen_data))
        elif not isinstance(self.codegen_data, CodeGenData):
            raise TypeError(f"Code generation data must be CodeGenData or str, got {self.codegen_data!r}")

    @property
    def is_control_transfer(self) -> bool:
        return self.type.is_control_transfer

    @property
    def requires_custom_codegen(self) -> bool:
        return self.codegen_data.requires_custom_handling

    def replace(self, **changes) -> "Instruction":
        """Return a copy of this instruction with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def __str__(self) -> str:
        from decompiler.formatting import format_instruction

        return format_instruction(self)


def _check_range(field: str, value: int, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Instruction {field} must be an int, got {type(value).__name__}")
    if not low <= value <= high:
        raise ValueError(f"Instruction {field} {value} out of range [{low}, {high}]")


def make_instruction(
    opcode: int,
    address: int,
    stack_change: int,
    name: str,
    inst_type: InstType,
    params: Iterable[Tuple[Union[str, ParamType], Union[int, str]]] = (),
    codegen_data: Union[str, CodeGenData] = "",
) -> Instruction:
    """
    Build an instruction from raw (type, value) operand pairs, the shape a
    disassembler produces while decoding.
    """
    return Instruction(
        opcode=opcode,
        address=address,
        stack_change=stack_change,
        name=name,
        type=inst_type,
        params=tuple(Parameter.of(param_type, value) for param_type, value in params),
        codegen_data=codegen_data,
    )
