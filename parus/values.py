"""Runtime values of the Parus language."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Union

QUOTE_CHAR = "'"


class ParusError(Exception):
    """An error reported while reading or running Parus code."""


@dataclass(frozen=True)
class Integer:
    """A whole number."""

    value: int


@dataclass(frozen=True)
class Decimal:
    """A floating point number."""

    value: float


@dataclass(frozen=True)
class Symbol:
    """A name that is looked up in the lexicon when applied."""

    name: str


@dataclass(frozen=True)
class Quoted:
    """A value that is pushed unevaluated when applied."""

    value: Value


@dataclass(frozen=True)
class BaseOp:
    """A built-in operator.

    The function receives the interpreter. It may return a value, which the
    interpreter then applies in place of the operator.
    """

    name: str
    function: Callable[[Any], Any]


@dataclass
class UserOp:
    """An operator made of a sequence of instructions."""

    instructions: list[Value] = field(default_factory=list)

    def append(self, instruction: Value) -> None:
        """Add an instruction at the end of the operator."""
        self.instructions.append(instruction)


Value = Union[Integer, Decimal, Symbol, Quoted, BaseOp, UserOp]


def copy_value(value: Value | None) -> Value | None:
    """Return an independent copy of a value."""
    if isinstance(value, Quoted):
        return Quoted(copy_value(value.value))
    if isinstance(value, UserOp):
        return UserOp([copy_value(instruction) for instruction in value.instructions])
    return value


def is_number(value: Value | None) -> bool:
    """Tell whether a value is an integer or a decimal."""
    return isinstance(value, (Integer, Decimal))


def format_value(value: Value | None) -> str:
    """Render a value the way the interpreter prints it."""
    if value is None:
        return ""
    if isinstance(value, Integer):
        return str(value.value)
    if isinstance(value, Decimal):
        return f"{value.value:f}"
    if isinstance(value, Symbol):
        return value.name
    if isinstance(value, Quoted):
        return QUOTE_CHAR + format_value(value.value)
    return f"parusdata@{id(value):x}"