import io
import math

import pytest

from parus.evaluator import Interpreter
from parus.predefined import HELP_MESSAGE, equivalent, predefined_lexicon
from parus.values import Decimal, Integer, Quoted, Symbol, UserOp


def run(code, stdin=""):
    interp = Interpreter(
        predefined_lexicon(),
        stdin=io.StringIO(stdin),
        stdout=io.StringIO(),
        stderr=io.StringIO(),
    )
    interp.evaluate(code)
    return interp


def stack_of(interp):
    return list(interp.stack.items)


def test_equivalent_rules():
    assert equivalent(None, None)
    assert not equivalent(None, Integer(1))
    assert equivalent(Integer(1), Decimal(1.0))
    assert equivalent(Quoted(Symbol("a")), Quoted(Symbol("a")))
    assert not equivalent(Symbol("a"), Symbol("b"))
    assert not equivalent(UserOp(), UserOp())


def test_add_then_subtract_round_trip():
    interp = run("1 2 + 2 -")
    assert stack_of(interp) == [Integer(1)]


def test_mixed_add_gives_decimal():
    interp = run("1 2.5 + decimal?")
    assert stack_of(interp)[-1] == Integer(1)


def test_divide_then_multiply_round_trip():
    interp = run("7 2 / 2 *")
    assert stack_of(interp) == [Decimal(7.0)]


def test_divide_by_zero_warns_and_gives_infinity():
    interp = run("1 0 /")
    assert stack_of(interp) == [Decimal(math.inf)]
    assert "WARNING: DIVISION BY ZERO IS UNDEFINED BEHAVIOR" in interp.stderr.getvalue()


def test_power_edge_cases():
    assert math.isnan(stack_of(run("-8 0.5 ^"))[0].value)
    assert stack_of(run("0 -1 ^")) == [Decimal(math.inf)]
    assert stack_of(run("2 3 ^ decimal?"))[-1] == Integer(1)


def test_comparisons():
    assert stack_of(run("3 3 =")) == [Integer(1)]
    assert stack_of(run("2 3 <")) == [Integer(1)]
    assert stack_of(run("2 3 >")) == [Integer(0)]


def test_round_truncates():
    assert stack_of(run("2.7 round")) == [Integer(2)]
    assert stack_of(run("-2.7 round")) == [Integer(-2)]


def test_arithmetic_needs_two_numbers():
    interp = run("1 +")
    assert stack_of(interp) == []
    err = interp.stderr.getvalue()
    assert "EXPECTED TWO NUMBERS" in err
    assert "ERROR" in err


def test_define_and_lookup():
    interp = run("5 'x define x")
    assert stack_of(interp) == [Integer(5)]


def test_define_requires_symbol():
    interp = run("1 2 define")
    assert stack_of(interp) == []
    assert "CAN ONLY BIND TO SYMBOLS" in interp.stderr.getvalue()


def test_delete_removes_binding():
    interp = run("5 'x define 'x delete x")
    assert stack_of(interp) == []
    assert "UNDEFINED ENTRY - x" in interp.stderr.getvalue()


def test_delete_requires_symbol():
    interp = run("1 delete")
    assert "CAN ONLY DELETE BINDED SYMBOLS" in interp.stderr.getvalue()


def test_apply_top_runs_operator():
    interp = run("'(1 2 +) ! 2 -")
    assert stack_of(interp) == [Integer(1)]


def test_apply_top_on_empty_stack():
    interp = run("!")
    assert stack_of(interp) == []
    assert "STACK UNDERFLOW" in interp.stderr.getvalue()


def test_quotate():
    interp = run("'a quotate")
    assert stack_of(interp) == [Quoted(Symbol("a"))]


@pytest.mark.parametrize(
    "code, expected",
    [("1 10 20 if", 10), ("0 10 20 if", 20), ("0.0 10 20 if", 20), ("'a 10 20 if", 10)],
)
def test_if(code, expected):
    assert stack_of(run(code)) == [Integer(expected)]


def test_if_needs_three_values():
    interp = run("1 2 if")
    assert "CAN NOT PREFORM IF OPERATION" in interp.stderr.getvalue()


@pytest.mark.parametrize(
    "code, expected", [("'a 'a eqv?", 1), ("1 1.0 eqv?", 1), ("'a 'b eqv?", 0)]
)
def test_eqv(code, expected):
    assert stack_of(run(code)) == [Integer(expected)]


def test_fetch_moves_value_to_top():
    interp = run("1 2 3 2 @")
    assert stack_of(interp) == [Integer(2), Integer(3), Integer(1)]


def test_fetch_copy_keeps_value():
    interp = run("1 2 3 2 @.")
    assert stack_of(interp) == [Integer(1), Integer(2), Integer(3), Integer(1)]


def test_fetch_out_of_range():
    interp = run("1 2 5 @")
    assert stack_of(interp) == [Integer(1), Integer(2)]
    assert "INDEX OUT OF RANGE" in interp.stderr.getvalue()


def test_fetch_requires_integer():
    interp = run("1 2 'a @")
    assert "INDEX MUST BE AN INTEGER" in interp.stderr.getvalue()


def test_length_and_drop():
    assert stack_of(run("1 2 length")) == [Integer(1), Integer(2), Integer(2)]
    assert stack_of(run("1 2 drop")) == [Integer(1)]


def test_find():
    interp = run("'a 1 2 'a find")
    assert stack_of(interp)[-1] == Integer(2)
    interp = run("1 2 'z find")
    assert stack_of(interp)[-1] == Integer(-1)


def test_reflection():
    assert stack_of(run("1 integer?")) == [Integer(1), Integer(1)]
    assert stack_of(run("1.5 integer?")) == [Decimal(1.5), Integer(0)]
    assert stack_of(run("'a symbol?"))[-1] == Integer(1)
    assert stack_of(run("''a quoted?"))[-1] == Integer(1)
    assert stack_of(run("'(1) operator?"))[-1] == Integer(1)
    assert stack_of(run("integer?")) == [Integer(0)]


def test_out_and_outln():
    assert run("42 outln").stdout.getvalue() == "42\n"
    assert run("1.5 out").stdout.getvalue() == "1.500000"
    assert run("'a out").stdout.getvalue() == "a"


def test_out_on_empty_stack():
    interp = run("out")
    assert "CANNOT PRINT NULLITY" in interp.stderr.getvalue()


def test_read_word_as_symbol():
    interp = run("read", stdin="hello world")
    assert stack_of(interp) == [Symbol("hello")]


def test_read_number():
    interp = run("read", stdin="17\n")
    assert stack_of(interp) == [Integer(17)]


def test_read_nothing_on_leading_space():
    interp = run("read", stdin=" x")
    assert stack_of(interp) == []


def test_getc_and_putc_round_trip():
    interp = run("getc putc", stdin="Z")
    assert interp.stdout.getvalue() == "Z"


def test_getc_at_end_of_input():
    assert stack_of(run("getc")) == [Integer(-1)]


def test_putc_requires_integer():
    interp = run("'a putc")
    assert "CHAR CODE MUST BE AN INTEGER" in interp.stderr.getvalue()


def test_dpl():
    assert stack_of(run("5 dpl")) == [Integer(5), Integer(5)]
    assert "NOTHING TO DUPLICATE" in run("dpl").stderr.getvalue()


def test_setat():
    interp = run("1 2 3 9 2 setat")
    assert stack_of(interp) == [Integer(9), Integer(2), Integer(3)]


def test_setat_out_of_range():
    interp = run("1 9 5 setat")
    assert stack_of(interp) == [Integer(1)]
    assert "INDEX OUT OF RANGE" in interp.stderr.getvalue()


def test_for_loop_binds_counter():
    interp = run("'i 0 3 '< 1 '(i out) for")
    assert interp.stdout.getvalue() == "012"
    assert stack_of(interp) == []
    assert all(name != "i" for name, _ in interp.lexicon.entries)


def test_for_wrong_types():
    interp = run("'i 0 'x '< 1 '(i out) for")
    assert "WRONG TYPES OF PARAMETERS GIVEN" in interp.stderr.getvalue()


def test_case_picks_first_true_clause():
    interp = run("case 0 '(10) 1 '(20) end-case")
    assert stack_of(interp) == [Integer(20)]


def test_case_else():
    interp = run("case 0 '(10) else '(30) end-case")
    assert stack_of(interp) == [Integer(30)]


def test_case_without_label_restores_stack():
    interp = run("1 2 end-case")
    assert stack_of(interp) == [Integer(1), Integer(2)]
    assert "NO CASE LABEL FOUND" in interp.stderr.getvalue()


def test_case_odd_arguments():
    interp = run("case 1 end-case")
    assert "CASE EXPECTS EVEN NUMBER OF ARGUEMENTS" in interp.stderr.getvalue()


def test_seq_builds_operator():
    interp = run("seq 1 2 '+ end-seq")
    assert stack_of(interp) == [UserOp([Integer(1), Integer(2), Symbol("+")])]
    interp.evaluate("! 2 -")
    assert stack_of(interp) == [Integer(1)]


def test_seq_without_label():
    interp = run("1 end-seq")
    assert "NO SEQUENCE LABEL FOUND" in interp.stderr.getvalue()


def test_recursive_countdown():
    code = "'(dpl 0 > '(dpl outln 1 - loop) '(drop) if !) 'loop define 3 loop"
    interp = run(code)
    assert interp.stdout.getvalue() == "3\n2\n1\n"
    assert stack_of(interp) == []


def test_quit_exits():
    with pytest.raises(SystemExit):
        run("quit")


def test_stack_print():
    assert run("1 2 ?stk").stdout.getvalue() == "1, 2, \n"


def test_lexicon_print_and_help():
    assert "define : parusdata@" in run("?lex").stdout.getvalue()
    assert run("?help").stdout.getvalue() == HELP_MESSAGE


def test_lexicon_holds_markers():
    lexicon = predefined_lexicon()
    assert lexicon.get("case") == Quoted(Symbol("case"))
    assert lexicon.get("seq") == Quoted(Symbol("seq"))