import dataclasses

import pytest
from hypothesis import given
from hypothesis import strategies as st

from decompiler.core.parameter import Parameter, ParamType, TypeMismatchError

ACCESSORS = {
    "signed": Parameter.as_signed,
    "unsigned": Parameter.as_unsigned,
    "text": Parameter.as_text,
}


def accessor_kind(param_type):
    if param_type.is_signed:
        return "signed"
    if param_type.is_unsigned:
        return "unsigned"
    return "text"


def value_strategy(param_type):
    if param_type.is_text:
        return st.text(max_size=32)
    low, high = param_type.bounds
    return st.integers(min_value=low, max_value=high)


parameter_strategy = st.sampled_from(list(ParamType)).flatmap(
    lambda param_type: value_strategy(param_type).map(lambda value: Parameter(param_type, value))
)


@given(param=parameter_strategy)
def test_implied_accessor_returns_stored_value(param):
    """The accessor implied by the type returns the value, every other accessor fails."""
    implied = accessor_kind(param.type)
    assert ACCESSORS[implied](param) == param.value

    for kind, accessor in ACCESSORS.items():
        if kind == implied:
            continue
        with pytest.raises(TypeMismatchError) as excinfo:
            accessor(param)
        assert excinfo.value.param_type is param.type
        assert excinfo.value.requested == kind


def test_type_kind_partition():
    """Every type is exactly one of signed, unsigned or text."""
    for param_type in ParamType:
        flags = [param_type.is_signed, param_type.is_unsigned, param_type.is_text]
        assert flags.count(True) == 1
    assert ParamType.STRING_TEXT.bounds is None
    assert ParamType.SIGNED_SHORT.bounds == (-0x8000, 0x7FFF)


def test_factories():
    assert Parameter.signed_byte(-1) == Parameter(ParamType.SIGNED_BYTE, -1)
    assert Parameter.unsigned_byte(255).as_unsigned() == 255
    assert Parameter.signed_short(-300).as_signed() == -300
    assert Parameter.unsigned_short(65535).as_unsigned() == 65535
    assert Parameter.signed_int(-16).as_signed() == -16
    assert Parameter.unsigned_int(0xFFFFFFFF).as_unsigned() == 0xFFFFFFFF
    assert Parameter.text("room_1").as_text() == "room_1"


def test_of_accepts_type_names():
    assert Parameter.of("SignedInt", 5) == Parameter.signed_int(5)
    assert Parameter.of("UNSIGNED_SHORT", 7) == Parameter.unsigned_short(7)
    assert Parameter.of(ParamType.STRING_TEXT, "x") == Parameter.text("x")
    with pytest.raises(ValueError):
        Parameter.of("Float", 1)


@pytest.mark.parametrize(
    "param_type, value",
    [
        (ParamType.SIGNED_INT, "12"),
        (ParamType.UNSIGNED_INT, 1.5),
        (ParamType.SIGNED_BYTE, True),
        (ParamType.STRING_TEXT, 42),
        (ParamType.UNSIGNED_BYTE, None),
    ],
)
def test_payload_kind_must_match_type(param_type, value):
    with pytest.raises(TypeMismatchError):
        Parameter(param_type, value)


@pytest.mark.parametrize(
    "param_type, value",
    [
        (ParamType.SIGNED_BYTE, 128),
        (ParamType.SIGNED_BYTE, -129),
        (ParamType.UNSIGNED_BYTE, 256),
        (ParamType.UNSIGNED_SHORT, -1),
        (ParamType.SIGNED_SHORT, 0x8000),
        (ParamType.SIGNED_INT, 0x80000000),
        (ParamType.UNSIGNED_INT, 0x100000000),
    ],
)
def test_payload_must_fit_type_width(param_type, value):
    with pytest.raises(TypeMismatchError):
        Parameter(param_type, value)


def test_type_must_be_param_type():
    with pytest.raises(TypeMismatchError):
        Parameter("SignedInt", 1)


def test_parameter_is_immutable():
    param = Parameter.signed_int(3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        param.value = "three"
    with pytest.raises(dataclasses.FrozenInstanceError):
        param.type = ParamType.STRING_TEXT


def test_type_mismatch_is_a_type_error():
    """Callers catching TypeError still see the mismatch."""
    with pytest.raises(TypeError):
        Parameter.text("abc").as_signed()


def test_default_text():
    assert Parameter.signed_int(-16).default_text() == "-16"
    assert Parameter.unsigned_int(4096).default_text() == "4096"
    assert Parameter.text("hello world").default_text() == "hello world"
    assert str(Parameter.signed_byte(-1)) == "-1"
