"""Shared type definitions for API models."""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field, StringConstraints

from bondcurve.safe_int import U64_MAX


def validate_uint64(value: Any) -> str:
    """Validate that a value is a valid u64 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid u64 as decimal string

    Raises:
        ValueError: If value is not a non-negative integer within u64 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint64 must be string or int, got bool")

    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint64 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint64 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint64 cannot be negative: {value}")
    if int_value > U64_MAX:
        raise ValueError(f"Uint64 overflow: {value} > 2^64-1")

    return str(int_value)


# 64-bit unsigned integer as decimal string (validated)
Uint64 = Annotated[
    str,
    BeforeValidator(validate_uint64),
    Field(description="64-bit unsigned integer as decimal string"),
]

# Token type identifier, e.g. "0x2f1a...::meme::MEME". No "/": it travels as one path segment.
TokenType = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=512, pattern=r"^[^/]+$"),
]
