import time

from termdb.core.config import Limits
from termdb.core.termcap import (
    TermcapErrorKind,
    decode_termcap_escapes,
    parse_termcap,
    to_capability_set,
)

SAMPLE = r"""# sample termcap database
base|base terminal:\
	:am:co#80:li#24:\
	:cl=\E[H\E[J:bl=^G:

vt100|vt100-am|DEC VT100:\
	:co#132:cm=\E[%i%d;%dH:tc=base:
"""


def test_decode_termcap_escapes():
    assert decode_termcap_escapes(r"\E[H") == "\x1b[H"
    assert decode_termcap_escapes(r"\e[H") == "\x1b[H"
    assert decode_termcap_escapes("^H") == "\x08"
    assert decode_termcap_escapes("^h") == "\x08"
    assert decode_termcap_escapes("^?") == "\x7f"
    assert decode_termcap_escapes(r"\033[H") == "\x1b[H"
    assert decode_termcap_escapes(r"\n\r\t\b\f\s") == "\n\r\t\b\f "
    assert decode_termcap_escapes(r"a\:b\\c\^d") == "a:b\\c^d"
    assert decode_termcap_escapes(r"\0") == "\x00"
    assert decode_termcap_escapes(r"\177") == "\x7f"
    # unknown escapes are kept, backslash included
    assert decode_termcap_escapes(r"\q") == "\\q"
    # caret not followed by a control letter is literal
    assert decode_termcap_escapes("^") == "^"
    assert decode_termcap_escapes("a^~") == "a^~"


def test_names_and_description():
    res = parse_termcap("a|b|desc:am:")
    entry = res.resolve("a")
    assert entry.names == ("a", "b")
    assert entry.description == "desc"
    assert res.resolve("b") is entry
    assert res.resolve("desc") is None


def test_inheritance_child_overrides_parent():
    res = parse_termcap(SAMPLE, source="sample")
    assert res.ok
    assert res.primary_names() == ["base", "vt100"]

    vt = res.resolve("vt100-am")
    assert vt.booleans == {"am": True}
    assert vt.numbers == {"co": 132, "li": 24}
    assert vt.strings["cl"] == "\x1b[H\x1b[J"
    assert vt.strings["bl"] == "\x07"
    assert "tc" not in vt.strings
    assert vt.source == "sample"
    assert vt.line == 6

    # the raw entry still records the chain
    assert res.entries["vt100"].inherits == ("base",)


def test_capability_set_translates_to_canonical_names():
    res = parse_termcap(SAMPLE)
    caps = res.capability_set("vt100")
    assert caps.name == "vt100"
    assert list(caps.names) == ["vt100", "vt100-am"]
    assert caps.description == "DEC VT100"
    assert caps.booleans == {"auto_right_margin": True}
    assert caps.numbers["columns"] == 132
    assert caps.numbers["lines"] == 24
    assert caps.strings["clear_screen"] == "\x1b[H\x1b[J"
    assert caps.strings["cursor_address"] == "\x1b[%i%d;%dH"

    converted = res.capability_set("vt100", convert_parameters=True)
    assert converted.strings["cursor_address"] == "\x1b[%i%p1%d;%p2%dH"
    assert converted.strings["clear_screen"] == "\x1b[H\x1b[J"


def test_unknown_codes_pass_through():
    caps = parse_termcap("x|y:Zz=abc:Q1#5:QQ:").capability_set("x")
    assert caps.strings["Zz"] == "abc"
    assert caps.numbers["Q1"] == 5
    assert caps.booleans["QQ"] is True


def test_cancel_removes_inherited_capability():
    text = "base:am:co#80:cl=X:\nchild:cl@:am@:tc=base:\n"
    entry = parse_termcap(text).resolve("child")
    assert entry.booleans == {}
    assert entry.strings == {}
    assert entry.numbers == {"co": 80}
    assert parse_termcap(text).entries["child"].cancelled == ("cl", "am")


def test_multiple_tc_earlier_parent_wins():
    text = "p1:co#100:\np2:co#200:li#50:\nkid:tc=p1:tc=p2:\n"
    entry = parse_termcap(text).resolve("kid")
    assert entry.numbers == {"co": 100, "li": 50}


def test_octal_numbers_and_first_occurrence_wins():
    entry = parse_termcap("x:co#010:co#99:li#0:").resolve("x")
    assert entry.numbers == {"co": 8, "li": 0}


def test_escaped_colon_stays_in_value():
    entry = parse_termcap(r"x:ab=a\:b:cd=1:").resolve("x")
    assert entry.strings == {"ab": "a:b", "cd": "1"}


def test_errors_are_recorded_and_parsing_continues():
    text = "\n".join(
        [
            "good1:am:",
            ":co#80:",
            "bad|bad number:co#8x:li#24:",
            "orphan:tc=missing:",
            "loop1:tc=loop2:",
            "loop2:tc=loop1:",
            "good2:bs:",
        ]
    )
    res = parse_termcap(text)
    assert not res.ok
    assert res.resolve("good1") is not None
    assert res.resolve("good2") is not None
    assert res.resolve("bad").numbers == {"li": 24}

    kinds = {e.kind for e in res.errors}
    assert kinds == {
        TermcapErrorKind.EMPTY_NAME,
        TermcapErrorKind.INVALID_NUMBER,
        TermcapErrorKind.MISSING_PARENT,
        TermcapErrorKind.INHERITANCE_CYCLE,
    }

    by_kind = {e.kind: e for e in res.errors}
    assert by_kind[TermcapErrorKind.EMPTY_NAME].line == 2
    assert by_kind[TermcapErrorKind.INVALID_NUMBER].line == 3
    assert by_kind[TermcapErrorKind.INVALID_NUMBER].entry == "bad"
    assert by_kind[TermcapErrorKind.MISSING_PARENT].entry == "orphan"


def test_inheritance_depth_is_bounded():
    lines = [f"t{i}:tc=t{i + 1}:" for i in range(10)] + ["t10:am:"]
    res = parse_termcap("\n".join(lines), limits=Limits(max_tc_depth=4))
    assert any(e.kind is TermcapErrorKind.INHERITANCE_TOO_DEEP for e in res.errors)
    assert "am" not in res.resolve("t0").booleans

    res = parse_termcap("\n".join(lines), limits=Limits(max_tc_depth=32))
    assert res.ok
    assert res.resolve("t0").booleans == {"am": True}


def test_continuations_comments_and_blank_lines():
    text = "# comment\n\nx|long entry:\\\n    :am:\\\n\t:co#80:\n# trailing\n"
    res = parse_termcap(text)
    assert res.ok
    entry = res.resolve("x")
    assert entry.line == 3
    assert entry.booleans == {"am": True}
    assert entry.numbers == {"co": 80}


def test_duplicate_entry_first_wins():
    res = parse_termcap("x:co#1:\nx:co#2:\n")
    assert res.resolve("x").numbers == {"co": 1}
    assert res.primary_names() == ["x"]


def test_same_code_in_different_categories_is_kept():
    caps = to_capability_set(parse_termcap("x|desc:ma=^Kk:ma#4:").resolve("x"))
    assert caps.strings == {"arrow_key_map": "\x0bk"}
    assert caps.numbers == {"max_attributes": 4}

    caps = parse_termcap("x:ma#4:ma=^Kk:MT:MT=\\E[%i%d;%dr:").capability_set("x")
    assert caps.booleans == {"gnu_has_meta_key": True}
    assert caps.numbers == {"max_attributes": 4}
    assert caps.strings == {"arrow_key_map": "\x0bk", "set_tb_margin": "\x1b[%i%d;%dr"}


def test_cancel_blocks_every_category():
    res = parse_termcap("base:co#80:co=x:co:\nkid:co@:co#5:co=y:co:tc=base:\n")
    assert res.entries["kid"].cancelled == ("co",)
    entry = res.resolve("kid")
    assert entry.numbers == {}
    assert entry.strings == {}
    assert entry.booleans == {}

    # a value written before the cancel still wins over the parent
    entry = parse_termcap("base:co#80:\nkid:co#5:co@:tc=base:\n").resolve("kid")
    assert entry.numbers == {"co": 5}


def test_shared_ancestors_with_a_cycle_resolve_quickly():
    depth = 30
    lines = []
    for i in range(depth):
        lines.append(f"e{i}:co#{i}:tc=e{i + 1}:tc=f{i + 1}:")
        lines.append(f"f{i}:li#{i}:tc=e{i + 1}:tc=f{i + 1}:")
    lines.append(f"e{depth}:am:tc=e{depth}:")
    lines.append(f"f{depth}:bs:")

    started = time.perf_counter()
    res = parse_termcap("\n".join(lines), limits=Limits(max_tc_depth=64))
    assert time.perf_counter() - started < 2.0

    cycles = [e for e in res.errors if e.kind is TermcapErrorKind.INHERITANCE_CYCLE]
    assert len(cycles) == 1
    top = res.resolve("e0")
    assert top.numbers == {"co": 0, "li": depth - 1}
    assert top.booleans == {"am": True, "bs": True}


def test_duplicate_tc_targets_are_merged_once():
    text = "base:am:\nkid:tc=base:tc=base:tc=base:\n"
    res = parse_termcap(text)
    assert res.ok
    assert res.resolve("kid").booleans == {"am": True}
