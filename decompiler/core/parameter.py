"""
Typed operand values attached to decoded instructions.

A Parameter pairs a ParamType with its payload. Both are checked together at
construction and the record is frozen afterwards, so a parameter can never
hold a payload its type does not describe.
"""

import dataclasses
from enum import Enum
from typing import Optional, Tuple, Union

ParamValue = Union[int, str]


class TypeMismatchError(TypeError):
    """
    Raised when a parameter payload does not match its declared type, either
    while building the parameter or when reading it through the wrong accessor.
    """

    def __init__(self, message: str, param_type: Optional["ParamType"] = None, requested: Optional[str] = None):
        super().__init__(message)
        self.param_type = param_type
        self.requested = requested


class ParamType(Enum):
    """Storage kind and display rule of a parameter."""

    SIGNED_BYTE = "SignedByte"
    UNSIGNED_BYTE = "UnsignedByte"
    SIGNED_SHORT = "SignedShort"
    UNSIGNED_SHORT = "UnsignedShort"
    SIGNED_INT = "SignedInt"
    UNSIGNED_INT = "UnsignedInt"
    STRING_TEXT = "StringText"

    @classmethod
    def from_name(cls, name: str) -> "ParamType":
        """Look up a member by enum name (SIGNED_INT) or display name (SignedInt)."""
        for member in cls:
            if name in (member.name, member.value):
                return member
        raise ValueError(f"Unknown parameter type: {name!r}")

    @property
    def is_signed(self) -> bool:
        return self in _SIGNED_TYPES

    @property
    def is_unsigned(self) -> bool:
        return self in _UNSIGNED_TYPES

    @property
    def is_text(self) -> bool:
        return self is ParamType.STRING_TEXT

    @property
    def bounds(self) -> Optional[Tuple[int, int]]:
        """Inclusive (min, max) range of a numeric kind, None for text."""
        return _BOUNDS.get(self)


_SIGNED_TYPES = frozenset({ParamType.SIGNED_BYTE, ParamType.SIGNED_SHORT, ParamType.SIGNED_INT})
_UNSIGNED_TYPES = frozenset({ParamType.UNSIGNED_BYTE, ParamType.UNSIGNED_SHORT, ParamType.UNSIGNED_INT})

_BOUNDS = {
    ParamType.SIGNED_BYTE: (-0x80, 0x7F),
    ParamType.UNSIGNED_BYTE: (0, 0xFF),
    ParamType.SIGNED_SHORT: (-0x8000, 0x7FFF),
    ParamType.UNSIGNED_SHORT: (0, 0xFFFF),
    ParamType.SIGNED_INT: (-0x80000000, 0x7FFFFFFF),
    ParamType.UNSIGNED_INT: (0, 0xFFFFFFFF),
}


def _is_int(value) -> bool:
    # bool is an int subclass but never a valid operand
    return isinstance(value, int) and not isinstance(value, bool)


@dataclasses.dataclass(frozen=True)
class Parameter:
    """
    A single typed operand.

    Signed kinds hold an int in the kind's signed range, unsigned kinds hold an
    int in the unsigned range, STRING_TEXT holds a str.
    """

    type: ParamType
    value: ParamValue

    def __post_init__(self):
        if not isinstance(self.type, ParamType):
            raise TypeMismatchError(f"Parameter type must be a ParamType, got {self.type!r}")

        if self.type.is_text:
            if not isinstance(self.value, str):
                raise TypeMismatchError(
                    f"{self.type.value} parameter requires a str payload, got {type(self.value).__name__}",
                    self.type,
                    "text",
                )
            return

        if not _is_int(self.value):
            raise TypeMismatchError(
                f"{self.type.value} parameter requires an int payload, got {type(self.value).__name__}",
                self.type,
                "signed" if self.type.is_signed else "unsigned",
            )
        low, high = self.type.bounds
        if not low <= self.value <= high:
            raise TypeMismatchError(
                f"{self.value} does not fit {self.type.value} [{low}, {high}]",
                self.type,
                "signed" if self.type.is_signed else "unsigned",
            )

    @classmethod
    def of(cls, param_type: Union[ParamType, str], value: ParamValue) -> "Parameter":
        """Build a parameter from a (type, value) pair as handed over by a disassembler."""
        if isinstance(param_type, str):
            param_type = ParamType.from_name(param_type)
        return cls(param_type, value)

    @classmethod
    def signed_byte(cls, value: int) -> "Parameter":
        return cls(ParamType.SIGNED_BYTE, value)

    @classmethod
    def unsigned_byte(cls, value: int) -> "Parameter":
        return cls(ParamType.UNSIGNED_BYTE, value)

    @classmethod
    def signed_short(cls, value: int) -> "Parameter":
        return cls(ParamType.SIGNED_SHORT, value)

    @classmethod
    def unsigned_short(cls, value: int) -> "Parameter":
        return cls(ParamType.UNSIGNED_SHORT, value)

    @classmethod
    def signed_int(cls, value: int) -> "Parameter":
        return cls(ParamType.SIGNED_INT, value)

    @classmethod
    def unsigned_int(cls, value: int) -> "Parameter":
        return cls(ParamType.UNSIGNED_INT, value)

    @classmethod
    def text(cls, value: str) -> "Parameter":
        return cls(ParamType.STRING_TEXT, value)

    def as_signed(self) -> int:
        """
        Get the signed integer payload.

        Raises:
            TypeMismatchError: If the parameter is not one of the signed kinds.
        """
        if not (self.type.is_signed and _is_int(self.value)):
            raise TypeMismatchError(f"{self.type.value} parameter is not a signed integer", self.type, "signed")
        return self.value

    def as_unsigned(self) -> int:
        """
        Get the unsigned integer payload.

        Raises:
            TypeMismatchError: If the parameter is not one of the unsigned kinds.
        """
        if not (self.type.is_unsigned and _is_int(self.value)):
            raise TypeMismatchError(f"{self.type.value} parameter is not an unsigned integer", self.type, "unsigned")
        return self.value

    def as_text(self) -> str:
        """
        Get the text payload.

        Raises:
            TypeMismatchError: If the parameter is not STRING_TEXT.
        """
        if not (self.type.is_text and isinstance(self.value, str)):
            raise TypeMismatchError(f"{self.type.value} parameter is not text", self.type, "text")
        return self.value

    def default_text(self) -> str:
        """Decimal form for numbers, the raw string for text."""
        if self.type.is_text:
            return self.as_text()
        if self.type.is_signed:
            return str(self.as_signed())
        return str(self.as_unsigned())

    def __str__(self) -> str:
        return self.default_text()
