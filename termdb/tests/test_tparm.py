import pytest

from termdb.core.config import Limits
from termdb.core.errors import ProgramLimitError
from termdb.core.tparm import (
    Conditional,
    Literal,
    Operation,
    compile_capability,
    compile_source,
    has_parameters,
    tparm,
)


def test_basic_expansions():
    assert tparm("%p1%d", 42) == "42"
    assert tparm("%i%p1%d;%p2%d", 0, 0) == "1;1"
    assert tparm("%p1%p2%/%d", 7, 3) == "2"
    assert tparm("%p1%p2%/%d", 10, 0) == "0"
    assert tparm("%p1%p2%m%d", 10, 0) == "0"
    assert tparm("%%") == "%"
    assert tparm("\x1b[%i%p1%d;%p2%dH", 4, 9) == "\x1b[5;10H"


def test_conditionals():
    src = "%?%p1%{5}%<%tsmall%ebig%;"
    assert tparm(src, 3) == "small"
    assert tparm(src, 10) == "big"
    assert tparm("%?%p1%tyes%;", 0) == ""
    assert tparm("%?%p1%tyes%;", 1) == "yes"


def test_else_if_chain_and_nesting():
    setaf = "\x1b[%?%p1%{8}%<%t3%p1%d%e%p1%{16}%<%t9%p1%{8}%-%d%e38;5;%p1%d%;m"
    assert tparm(setaf, 1) == "\x1b[31m"
    assert tparm(setaf, 9) == "\x1b[91m"
    assert tparm(setaf, 196) == "\x1b[38;5;196m"

    nested = "%?%p1%t%?%p2%tAB%eA%;%e%?%p2%tB%eN%;%;"
    assert tparm(nested, 1, 1) == "AB"
    assert tparm(nested, 1, 0) == "A"
    assert tparm(nested, 0, 1) == "B"
    assert tparm(nested, 0, 0) == "N"


def test_missing_parameters_default_to_zero():
    assert tparm("%p1%d,%p9%d") == "0,0"
    assert tparm("%p3%d", 1, 2) == "0"


def test_operand_order_and_arithmetic():
    assert tparm("%p1%p2%-%d", 10, 3) == "7"
    assert tparm("%p1%p2%<%d", 1, 2) == "1"
    assert tparm("%p1%p2%>%d", 1, 2) == "0"
    assert tparm("%p1%p2%=%d", 2, 2) == "1"
    assert tparm("%p1%p2%*%d", 6, 7) == "42"
    assert tparm("%p1%p2%&%d", 6, 3) == "2"
    assert tparm("%p1%p2%|%d", 6, 3) == "7"
    assert tparm("%p1%p2%^%d", 6, 3) == "5"
    assert tparm("%p1%~%d", 0) == "-1"
    assert tparm("%p1%!%d", 0) == "1"
    assert tparm("%p1%p2%A%d", 1, 0) == "0"
    assert tparm("%p1%p2%O%d", 1, 0) == "1"


def test_c_style_division_and_wrapping():
    assert tparm("%p1%p2%/%d", -7, 2) == "-3"
    assert tparm("%p1%p2%m%d", -7, 2) == "-1"
    assert tparm("%p1%p2%+%d", 0x7FFFFFFF, 1) == "-2147483648"
    assert tparm("%p1%p2%*%d", 0x10000, 0x10000) == "0"
    assert tparm("%{-5}%d") == "-5"
    assert tparm("%p1%x", -1) == "ffffffff"


def test_output_conversions():
    assert tparm("%p1%o", 8) == "10"
    assert tparm("%p1%x", 255) == "ff"
    assert tparm("%p1%X", 255) == "FF"
    assert tparm("%p1%c", 65) == "A"
    assert tparm("%p1%c", 0x141) == "A"
    assert tparm("%p1%s", 12) == "12"
    assert tparm("%p1%s", "abc") == "abc"
    assert tparm("%p1%l%d", "abcd") == "4"
    assert tparm("%'A'%d") == "65"
    assert tparm("%'A%d") == "65"
    assert tparm("%{1000}%d") == "1000"


def test_printf_style_formats():
    assert tparm("%p1%2d", 5) == " 5"
    assert tparm("%p1%02d", 5) == "05"
    assert tparm("%p1%03d", -5) == "-05"
    assert tparm("%p1%:-3d|", 5) == "5  |"
    assert tparm("%p1%:+d", 5) == "+5"
    assert tparm("%p1% d", 5) == " 5"
    assert tparm("%p1%#x", 255) == "0xff"
    assert tparm("%p1%#X", 255) == "0XFF"
    assert tparm("%p1%#o", 8) == "010"
    assert tparm("%p1%#o", 0) == "0"
    assert tparm("%p1%.3d", 7) == "007"
    assert tparm("%p1%5.2s|", "abcdef") == "   ab|"
    assert tparm("%p1%:-5s|", "ab") == "ab   |"


def test_variables_are_scoped_per_execution():
    program = compile_source("%?%p1%t%p1%Pa%;%ga%d%gZ%d")
    assert program.execute(7) == "70"
    # a second call must not see the first call's variables
    assert program.execute(0) == "00"

    assert tparm("%p1%PZ%gZ%gZ%+%d", 4) == "8"


def test_increment_applies_to_later_references_only():
    assert tparm("%p1%d%i%p1%d", 1) == "12"
    assert tparm("%i%p3%d", 1, 2, 3) == "3"


def test_stack_underflow_pops_zero():
    assert tparm("%d") == "0"
    assert tparm("%+%d") == "0"
    assert tparm("%c") == "\x00"


def test_malformed_input_recovery():
    # unterminated conditional closes at end of string
    assert tparm("%?%p1%tA%eB", 1) == "A"
    assert tparm("%?%p1%tA%eB", 0) == "B"
    # %? without %t just runs its condition
    assert tparm("%?%p1%d", 5) == "5"
    # stray structural directives are ignored
    assert tparm("a%tb%ec%;d") == "abcd"
    # unknown directives and a trailing % are literal
    assert tparm("%z%p0|%") == "%z%p0|%"
    assert tparm("100%") == "100%"
    assert tparm("%{12") == "%{12"


def test_execute_rejects_bad_parameter_types():
    with pytest.raises(TypeError):
        tparm("%p1%d", 1.5)
    with pytest.raises(TypeError):
        compile_source(b"%d")


def test_tree_shape():
    program = compile_source("x%p1%d%?%p2%ty%;")
    assert program.nodes[0] == Literal("x")
    assert program.nodes[1] == Operation("param", 1)
    assert isinstance(program.nodes[3], Conditional)
    assert program.nodes[3].then == (Literal("y"),)
    assert not program.is_constant
    assert compile_source("plain").is_constant


def test_has_parameters():
    assert has_parameters("%p1%d")
    assert has_parameters("%d")
    assert not has_parameters("%%")
    assert not has_parameters("plain\x1b[H")
    assert not has_parameters("100%")
    assert not has_parameters("")


def test_compile_limits_are_enforced():
    limits = Limits(max_program_nodes=10, max_conditional_depth=3)
    with pytest.raises(ProgramLimitError):
        compile_source("%p1" * 11, limits=limits)
    with pytest.raises(ProgramLimitError):
        compile_source("%?" * 4, limits=limits)
    compile_source("%?%?%?%;%;%;", limits=limits)

    # ProgramLimitError is a ValueError
    with pytest.raises(ValueError):
        compile_capability("%?" * 100, limits=Limits())


def test_limits_from_env(monkeypatch):
    monkeypatch.setenv("TERMDB_MAX_PROGRAM_NODES", "5")
    with pytest.raises(ProgramLimitError):
        compile_source("%p1%p1%p1%p1%p1%p1")

    monkeypatch.setenv("TERMDB_MAX_PROGRAM_NODES", "garbage")
    assert Limits.from_env().max_program_nodes == 4096
