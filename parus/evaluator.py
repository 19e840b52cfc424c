"""Reading and running Parus expressions."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Iterator, TextIO

from .storage import Lexicon, Stack
from .values import (
    BaseOp,
    Decimal,
    Integer,
    ParusError,
    Quoted,
    Symbol,
    UserOp,
    Value,
    copy_value,
)

LP_CHAR = "("
RP_CHAR = ")"
QUOTE_CHAR = "'"
COMMENT_CHAR = ";"

MAXIMUM_CALL_DEPTH = 50000

_DEPTH_MESSAGE = "INSUFFICIENT DATA FOR MEANINGFUL ANSWER"
_SPACES = " \t\n\v\f\r"

_COMMENT = re.compile(r";[^\n]*")
_WORD = re.compile(r"[()']|[^()'\s]+", re.ASCII)
_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_HEX_DECIMAL = re.compile(
    r"[+-]?0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)(?:p[+-]?[0-9]+)?",
    re.IGNORECASE,
)


def paren_count(expr: str) -> int:
    """Return the balance of parentheses, or 1 if a quote is left hanging.

    A positive result means the expression is not yet complete.
    """
    depth = 0
    in_comment = False
    hanging_quote = False
    for char in expr:
        if char == COMMENT_CHAR:
            in_comment = True
        elif char == "\n":
            in_comment = False
        if char == QUOTE_CHAR:
            hanging_quote = True
        if in_comment:
            continue
        if char == LP_CHAR:
            depth += 1
        elif char == RP_CHAR:
            depth -= 1
        if char not in _SPACES and char != QUOTE_CHAR:
            hanging_quote = False
    return 1 if hanging_quote else depth


def tokenize(expr: str) -> list[str]:
    """Split an expression into words, dropping comments."""
    return _WORD.findall(_COMMENT.sub(" ", expr))


def _parse_atom(word: str) -> Value:
    if _INTEGER.fullmatch(word):
        return Integer(int(word))
    if _DECIMAL.fullmatch(word):
        return Decimal(float(word))
    if _HEX_DECIMAL.fullmatch(word):
        return Decimal(float.fromhex(word))
    return Symbol(word)


@dataclass
class _Frame:
    body: Iterator[Value]
    tail: Value


class Interpreter:
    """Holds the stack and lexicon and runs expressions against them."""

    def __init__(
        self,
        lexicon: Lexicon | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.lexicon = lexicon if lexicon is not None else Lexicon()
        self.stack = Stack()
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self._depth = 0

    def _report(self, message: str) -> None:
        self.stderr.write(message + "\n")

    def apply(self, value: Value | None) -> None:
        """Apply a value to the stack.

        Errors of built-in operators and lookups are reported on stderr and
        running goes on; exceeding the call depth raises ParusError.
        """
        base = self._depth
        if base > MAXIMUM_CALL_DEPTH:
            raise ParusError(_DEPTH_MESSAGE)
        frames: list[_Frame] = []
        current = value
        try:
            while True:
                while current is not None:
                    current = self._step(current, frames)
                if not frames:
                    return
                frame = frames[-1]
                instruction = next(frame.body, None)
                if instruction is None:
                    frames.pop()
                    self._depth -= 1
                    current = self._continue_with(frame.tail)
                elif isinstance(instruction, (Symbol, Quoted)):
                    if self._depth > MAXIMUM_CALL_DEPTH:
                        raise ParusError(_DEPTH_MESSAGE)
                    current = copy_value(instruction)
                else:
                    self.stack.push(copy_value(instruction))
        finally:
            self._depth = base

    def _continue_with(self, value: Value) -> Value | None:
        value = copy_value(value)
        if isinstance(value, (Symbol, Quoted)):
            return value
        self.stack.push(value)
        return None

    def _step(self, value: Value, frames: list[_Frame]) -> Value | None:
        if isinstance(value, (Integer, Decimal)):
            self.stack.push(value)
            return None
        if isinstance(value, Symbol):
            try:
                return self.lexicon.get(value.name)
            except ParusError as error:
                self._report(str(error))
                return None
        if isinstance(value, Quoted):
            self.stack.push(copy_value(value.value))
            return None
        if isinstance(value, BaseOp):
            try:
                return value.function(self)
            except ParusError as error:
                self._report(str(error))
                self._report("ERROR")
                return None
        if isinstance(value, UserOp):
            if value.instructions:
                *body, tail = value.instructions
                frames.append(_Frame(iter(body), tail))
                self._depth += 1
            return None
        return None

    def apply_top(self) -> Value:
        """Take the top of the stack as the next value to apply.

        Used as the function of a built-in operator: the returned value is
        applied in place of the operator.
        """
        return self.stack.pull()

    def evaluate(self, expr: str) -> None:
        """Read an expression and run it.

        Raises ParusError on a malformed expression; what was run before the
        fault stays in effect.
        """
        words = tokenize(expr)
        operators: list[UserOp] = []
        quotes: list[bool] = []  # True: pending quote; False: operator mark
        last = len(words) - 1

        for position, word in enumerate(words):
            value: Value | None = None
            if word == RP_CHAR:
                if not operators:
                    raise ParusError("INVALID EXPRESSION GIVEN - EXPECTED AN OPERATOR")
                if quotes and quotes.pop():
                    raise ParusError("INVALID INSTRUCTION GIVEN - STANDALONE QUOTE")
                value = operators.pop()
            elif word == LP_CHAR:
                operators.append(UserOp())
                quotes.append(False)
            elif word == QUOTE_CHAR:
                quotes.append(True)
            else:
                value = _parse_atom(word)

            if position == last:
                if quotes and quotes[-1] and value is None:
                    raise ParusError("INVALID EXPRESSION GIVEN - STANDALONE QUOTE")
                if operators:
                    raise ParusError("INVALID EXPRESSION GIVEN - UNTERMINATED OPERATOR")

            if value is None:
                continue

            while quotes and quotes[-1]:
                quotes.pop()
                value = Quoted(value)

            if operators:
                operators[-1].append(value)
            elif isinstance(value, (Symbol, Quoted)):
                try:
                    self.apply(value)
                except ParusError as error:
                    self._report(str(error))
            else:
                self.stack.push(value)