"""The built-in operators and the lexicon that starts with them."""

from __future__ import annotations

import math
import operator
from typing import Callable

from .evaluator import COMMENT_CHAR, LP_CHAR, QUOTE_CHAR, RP_CHAR, Interpreter
from .storage import Lexicon
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
    format_value,
    is_number,
)

READ_BUFFER = 1024

HELP_MESSAGE = (
    "\nParus - Postfixed Reprogrammable Stack language\n"
    "Values are pushed to the stack; symbols are looked up and applied.\n\n"
    "flags: -help -norepl -notitle file\n\n"
)

_SPACES = " \t\n\v\f\r"
_CASE = Symbol("case")
_ELSE = Symbol("else")
_SEQ = Symbol("seq")


def equivalent(first: Value | None, second: Value | None) -> bool:
    """Tell whether two values are the same for comparison purposes."""
    if first is None or second is None:
        return first is None and second is None
    if isinstance(first, Symbol) and isinstance(second, Symbol):
        return first.name == second.name
    if isinstance(first, Integer) and isinstance(second, Integer):
        return first.value == second.value
    if is_number(first) and is_number(second):
        return float(first.value) == float(second.value)
    if isinstance(first, Quoted) and isinstance(second, Quoted):
        return equivalent(first.value, second.value)
    return False


def _report(interp: Interpreter, message: str) -> None:
    interp.stderr.write(message + "\n")


def _pull(interp: Interpreter) -> Value | None:
    """Pull the top of the stack, or report underflow and give None."""
    if not len(interp.stack):
        _report(interp, "STACK UNDERFLOW")
        return None
    return interp.stack.pull()


def _as_float(value: Value) -> float:
    return float(value.value) if is_number(value) else 0.0


def _truthy(value: Value) -> bool:
    if isinstance(value, (Integer, Decimal)):
        return value.value != 0
    return True


# BASIC


def _define(interp: Interpreter) -> None:
    symbol = _pull(interp)
    value = _pull(interp)
    if value is None or not isinstance(symbol, Symbol):
        raise ParusError("CAN ONLY BIND TO SYMBOLS")
    interp.lexicon.define(symbol.name, value)


def _delete(interp: Interpreter) -> None:
    symbol = _pull(interp)
    if not isinstance(symbol, Symbol):
        raise ParusError("CAN ONLY DELETE BINDED SYMBOLS")
    try:
        interp.lexicon.delete(symbol.name)
    except ParusError as error:
        _report(interp, str(error))


def _apply_top(interp: Interpreter) -> Value | None:
    if not len(interp.stack):
        _report(interp, "STACK UNDERFLOW")
        return None
    return interp.apply_top()


def _quotate(interp: Interpreter) -> None:
    value = _pull(interp)
    if value is None:
        raise ParusError("NOTHING TO QUOTATE")
    interp.stack.push(Quoted(value))


def _if(interp: Interpreter) -> None:
    when_false = _pull(interp)
    when_true = _pull(interp)
    condition = _pull(interp)
    if condition is None or when_true is None or when_false is None:
        raise ParusError("CAN NOT PREFORM IF OPERATION")
    interp.stack.push(when_true if _truthy(condition) else when_false)


def _eqv(interp: Interpreter) -> None:
    second = _pull(interp)
    first = _pull(interp)
    if first is None or second is None:
        raise ParusError("ATTEMPT TO COMPARE NULLITY")
    interp.stack.push(Integer(int(equivalent(first, second))))


def _pull_index(interp: Interpreter) -> int:
    index = _pull(interp)
    if not isinstance(index, Integer):
        raise ParusError("INDEX MUST BE AN INTEGER")
    if not 0 <= index.value < len(interp.stack):
        raise ParusError("INDEX OUT OF RANGE")
    return index.value


def _fetch(interp: Interpreter) -> None:
    index = _pull_index(interp)
    value = interp.stack.get_at(index)
    interp.stack.remove_at(index)
    interp.stack.push(value)


def _fetch_copy(interp: Interpreter) -> None:
    index = _pull_index(interp)
    interp.stack.push(interp.stack.get_at(index))


def _length(interp: Interpreter) -> None:
    interp.stack.push(Integer(len(interp.stack)))


def _drop(interp: Interpreter) -> None:
    _pull(interp)


def _find(interp: Interpreter) -> None:
    target = _pull(interp)
    if target is None:
        raise ParusError("ATTEMPT TO COMPARE NULLITY")
    items = interp.stack.items
    depth = next(
        (depth for depth, item in enumerate(reversed(items)) if equivalent(target, item)),
        -1,
    )
    interp.stack.push(Integer(depth))


# ARITHMETIC


def _two_numbers(interp: Interpreter) -> tuple[Value, Value]:
    second = _pull(interp)
    first = _pull(interp)
    if not is_number(first) or not is_number(second):
        raise ParusError("EXPECTED TWO NUMBERS")
    return first, second


def _arithmetic(
    operation: Callable,
    integer_result: Callable[[object], Value],
    decimal_result: Callable[[object], Value],
) -> Callable[[Interpreter], None]:
    def run(interp: Interpreter) -> None:
        first, second = _two_numbers(interp)
        if isinstance(first, Integer) and isinstance(second, Integer):
            interp.stack.push(integer_result(operation(first.value, second.value)))
        else:
            interp.stack.push(decimal_result(operation(_as_float(first), _as_float(second))))

    return run


def _divide_floats(dividend: float, divisor: float) -> float:
    if divisor == 0:
        if dividend == 0 or math.isnan(dividend):
            return math.nan
        return math.copysign(math.inf, dividend) * math.copysign(1.0, divisor)
    return dividend / divisor


def _odd_integer(number: float) -> bool:
    return math.isfinite(number) and number.is_integer() and number % 2 == 1


def _power_floats(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return -math.inf if base < 0 and _odd_integer(exponent) else math.inf
    except ValueError:
        if base == 0:
            return math.copysign(math.inf, base) if _odd_integer(exponent) else math.inf
        return math.nan


def _divide(interp: Interpreter) -> None:
    first, second = _two_numbers(interp)
    if second.value == 0:
        _report(interp, "WARNING: DIVISION BY ZERO IS UNDEFINED BEHAVIOR")
    interp.stack.push(Decimal(_divide_floats(_as_float(first), _as_float(second))))


def _power(interp: Interpreter) -> None:
    first, second = _two_numbers(interp)
    interp.stack.push(Decimal(_power_floats(_as_float(first), _as_float(second))))


def _round(interp: Interpreter) -> None:
    value = _pull(interp)
    if not is_number(value):
        raise ParusError("CANNOT ROUND A NON NUMERIC VALUE")
    try:
        interp.stack.push(Integer(int(_as_float(value))))
    except (ValueError, OverflowError) as error:
        raise ParusError("CANNOT ROUND A NON NUMERIC VALUE") from error


def _boolean(result: object) -> Value:
    return Integer(int(bool(result)))


# REFLECTION


def _reflection(predicate: Callable[[Value], bool]) -> Callable[[Interpreter], None]:
    def run(interp: Interpreter) -> None:
        value = _pull(interp)
        if value is not None:
            interp.stack.push(value)
        interp.stack.push(Integer(int(value is not None and predicate(value))))

    return run


# IO


def _out(interp: Interpreter) -> None:
    value = _pull(interp)
    if value is None:
        raise ParusError("CANNOT PRINT NULLITY")
    interp.stdout.write(format_value(value))


def _outln(interp: Interpreter) -> None:
    _out(interp)
    interp.stdout.write("\n")


def _read(interp: Interpreter) -> None:
    chars: list[str] = []
    while True:
        char = interp.stdin.read(1)
        if not char or len(chars) >= READ_BUFFER - 2:
            break
        if char in _SPACES:
            break
        if char not in (LP_CHAR, RP_CHAR, COMMENT_CHAR):
            chars.append(char)
    text = QUOTE_CHAR + "".join(chars)
    if text[-1] != QUOTE_CHAR:
        try:
            interp.evaluate(text)
        except ParusError as error:
            _report(interp, str(error))


def _getc(interp: Interpreter) -> None:
    char = interp.stdin.read(1)
    interp.stack.push(Integer(ord(char) if char else -1))


def _putc(interp: Interpreter) -> None:
    code = _pull(interp)
    if not isinstance(code, Integer):
        raise ParusError("CHAR CODE MUST BE AN INTEGER")
    interp.stdout.write(chr(code.value & 0xFF))


# OPTIONALS


def _dpl(interp: Interpreter) -> None:
    value = _pull(interp)
    if value is None:
        raise ParusError("NOTHING TO DUPLICATE")
    interp.stack.push(value)
    interp.stack.push(copy_value(value))


def _setat(interp: Interpreter) -> None:
    index = _pull(interp)
    value = _pull(interp)
    if index is None or value is None or not isinstance(index, Integer):
        raise ParusError("INVALID PARAMTERS GIVEN TO SETAT")
    items = interp.stack.items
    if not 0 <= index.value < len(items):
        raise ParusError("INDEX OUT OF RANGE")
    items[len(items) - index.value - 1] = value


def _for(interp: Interpreter) -> None:
    body = _pull(interp)
    step = _pull(interp)
    compare = _pull(interp)
    high = _pull(interp)
    low = _pull(interp)
    symbol = _pull(interp)
    if (
        body is None
        or not isinstance(step, Integer)
        or not isinstance(compare, (Symbol, UserOp, BaseOp))
        or not isinstance(high, Integer)
        or not isinstance(low, Integer)
        or not isinstance(symbol, Symbol)
    ):
        raise ParusError("WRONG TYPES OF PARAMETERS GIVEN\nSYMBOL MIN MAX CMP INC FN")

    counter = low.value
    while True:
        interp.stack.push(Integer(counter))
        interp.stack.push(copy_value(high))
        interp.apply(copy_value(compare))
        condition = _pull(interp)
        if condition is None:
            raise ParusError("FOR COMPARISON LEFT NO RESULT")
        if not _truthy(condition):
            break
        interp.lexicon.define(symbol.name, Integer(counter))
        interp.apply(copy_value(body))
        try:
            interp.lexicon.delete(symbol.name)
        except ParusError as error:
            _report(interp, str(error))
        counter += step.value


def _end_case(interp: Interpreter) -> None:
    taken: list[Value] = []
    while True:
        value = _pull(interp)
        if value is None:
            interp.stack.items.extend(reversed(taken))
            raise ParusError("NO CASE LABEL FOUND")
        if equivalent(value, _CASE):
            break
        taken.append(value)

    if len(taken) % 2:
        raise ParusError("CASE EXPECTS EVEN NUMBER OF ARGUEMENTS")

    clauses = list(reversed(taken))
    for condition, expression in zip(clauses[0::2], clauses[1::2]):
        interp.apply(condition)
        result = _pull(interp)
        if result is None:
            raise ParusError("CASE CONDITION LEFT NO RESULT")
        if _truthy(result):
            interp.apply(expression)
            break


def _quit(interp: Interpreter) -> None:
    """Flush pending output and end the program."""
    interp.stdout.flush()
    interp.stderr.flush()
    raise SystemExit(0)


# DEBUGGING AND HELP


def _print_stack(interp: Interpreter) -> None:
    interp.stdout.write(interp.stack.format() + "\n")


def _print_lexicon(interp: Interpreter) -> None:
    interp.stdout.write(interp.lexicon.format())


def _help(interp: Interpreter) -> None:
    interp.stdout.write(HELP_MESSAGE)


# EXPERIMENTAL


def _end_seq(interp: Interpreter) -> None:
    items = interp.stack.items
    position = next(
        (position for position in reversed(range(len(items))) if equivalent(_SEQ, items[position])),
        None,
    )
    if position is None:
        raise ParusError("NO SEQUENCE LABEL FOUND")
    body = items[position + 1 :]
    del items[position:]
    interp.stack.push(UserOp(body))


def _op(name: str, function: Callable[[Interpreter], object]) -> tuple[str, Value]:
    return name, BaseOp(name, function)


_BUILTINS: list[tuple[str, Value]] = [
    _op("define", _define),
    _op("delete", _delete),
    _op("!", _apply_top),
    _op("quotate", _quotate),
    _op("if", _if),
    _op("eqv?", _eqv),
    _op("@", _fetch),
    _op("@.", _fetch_copy),
    _op("length", _length),
    _op("drop", _drop),
    _op("find", _find),
    _op("+", _arithmetic(operator.add, Integer, Decimal)),
    _op("-", _arithmetic(operator.sub, Integer, Decimal)),
    _op("*", _arithmetic(operator.mul, Integer, Decimal)),
    _op("/", _divide),
    _op("^", _power),
    _op("=", _arithmetic(operator.eq, _boolean, _boolean)),
    _op("<", _arithmetic(operator.lt, _boolean, _boolean)),
    _op(">", _arithmetic(operator.gt, _boolean, _boolean)),
    _op("round", _round),
    _op("integer?", _reflection(lambda value: isinstance(value, Integer))),
    _op("decimal?", _reflection(lambda value: isinstance(value, Decimal))),
    _op("operator?", _reflection(lambda value: isinstance(value, (UserOp, BaseOp)))),
    _op("symbol?", _reflection(lambda value: isinstance(value, Symbol))),
    _op("quoted?", _reflection(lambda value: isinstance(value, Quoted))),
    _op("out", _out),
    _op("outln", _outln),
    _op("read", _read),
    _op("getc", _getc),
    _op("putc", _putc),
    _op("dpl", _dpl),
    _op("setat", _setat),
    _op("for", _for),
    ("case", Quoted(_CASE)),
    ("else", Quoted(_ELSE)),
    _op("end-case", _end_case),
    _op("quit", _quit),
    _op("?stk", _print_stack),
    _op("?lex", _print_lexicon),
    _op("?help", _help),
    ("seq", Quoted(_SEQ)),
    _op("end-seq", _end_seq),
]


def predefined_lexicon() -> Lexicon:
    """Return a lexicon holding every built-in operator."""
    lexicon = Lexicon()
    for name, value in _BUILTINS:
        lexicon.define(name, value)
    return lexicon