import pytest

from termdb.core.capset import ExtendedCapabilities, TerminalCapabilitySet
from termdb.core.errors import CapabilityNotFound, TerminfoParseError
from termdb.core.terminal import Terminal
from termdb.core.terminfo import encode_terminfo
from termdb.core.tparm import ProgramCache


def _caps():
    return TerminalCapabilitySet.create(
        names=["ansi", "ansi-test"],
        description="ANSI test terminal",
        booleans={"auto_right_margin": True},
        numbers={"columns": 80, "lines": 24},
        strings={
            "cursor_address": "\x1b[%i%p1%d;%p2%dH",
            "clear_screen": "\x1b[H\x1b[J",
            "set_a_foreground": "\x1b[3%p1%dm",
        },
        extended=ExtendedCapabilities.create(booleans={"XT": True}, strings={"Ss": "\x1b[%p1%d q"}),
    )


def test_lookup_by_canonical_name_and_termcap_code():
    term = Terminal(_caps())
    assert term.name == "ansi"
    assert term.boolean("auto_right_margin")
    assert term.boolean("am")
    assert not term.boolean("bw")
    assert term.number("co") == 80
    assert term.number("lines") == 24
    assert term.number("colors") is None
    assert term.string("cl") == "\x1b[H\x1b[J"
    assert term.has("cm")
    assert not term.has("kf1")


def test_extended_capabilities_by_raw_name():
    term = Terminal(_caps())
    assert term.has("XT")
    assert term.boolean("XT")
    assert term.tparm("Ss", 2) == "\x1b[2 q"


def test_tparm_and_require():
    term = Terminal(_caps())
    assert term.tparm("cursor_address", 4, 9) == "\x1b[5;10H"
    assert term.tparm("cm", 0, 0) == "\x1b[1;1H"
    assert term.tparm("AF", 1) == "\x1b[31m"
    assert term.tparm("bell") is None

    assert term.require("clear_screen") == "\x1b[H\x1b[J"
    with pytest.raises(CapabilityNotFound) as exc:
        term.require("bell")
    assert "bell" in str(exc.value)
    assert isinstance(exc.value, KeyError)


def test_shared_cache_between_terminals():
    cache = ProgramCache()
    a = Terminal(_caps(), cache)
    b = Terminal(_caps(), cache)
    a.tparm("cm", 1, 1)
    b.tparm("cm", 2, 2)
    assert cache.size() == 1
    assert cache.hits == 1


def test_from_terminfo():
    term = Terminal.from_terminfo(encode_terminfo(_caps()))
    assert term.name == "ansi"
    assert term.tparm("cm", 0, 0) == "\x1b[1;1H"

    with pytest.raises(TerminfoParseError) as exc:
        Terminal.from_terminfo(b"\x00\x00" + bytes(10))
    assert exc.value.kind == "INVALID_MAGIC"
    assert exc.value.offset == 0


def test_from_termcap_converts_parameters():
    text = "vt52|dec vt52:co#80:cm=\\EY%+ %+ :cl=\\EH\\EJ:\n"
    term = Terminal.from_termcap(text, "vt52")
    assert term.tparm("cm", 0, 1) == "\x1bY !"
    assert term.string("clear_screen") == "\x1bH\x1bJ"

    with pytest.raises(CapabilityNotFound):
        Terminal.from_termcap(text, "vt100")
