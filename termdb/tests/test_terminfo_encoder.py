import pytest

from termdb.core.capset import ExtendedCapabilities, TerminalCapabilitySet
from termdb.core.terminfo import encode_terminfo, get_terminfo_format, parse_terminfo


def _sample(**overrides):
    fields = dict(
        names=["xterm", "xterm-256color"],
        description="X Terminal Emulator",
        booleans={"auto_right_margin": True, "back_color_erase": True},
        numbers={"columns": 80, "lines": 24, "max_colors": 256},
        strings={
            "clear_screen": "\x1b[H\x1b[2J",
            "cursor_address": "\x1b[%i%p1%d;%p2%dH",
            "bell": "\x07",
        },
    )
    fields.update(overrides)
    return TerminalCapabilitySet.create(**fields)


def test_encode_then_parse_reproduces_capabilities():
    caps = _sample()
    data = encode_terminfo(caps)

    assert get_terminfo_format(data) == "legacy"
    back = parse_terminfo(data).capabilities
    assert back.name == "xterm"
    assert list(back.names) == ["xterm", "xterm-256color"]
    assert back.description == "X Terminal Emulator"
    assert dict(back.booleans) == dict(caps.booleans)
    assert dict(back.numbers) == dict(caps.numbers)
    assert dict(back.strings) == dict(caps.strings)


def test_description_free_multi_name_entry_keeps_all_names():
    caps = _sample(description="")
    back = parse_terminfo(encode_terminfo(caps)).capabilities
    assert list(back.names) == ["xterm", "xterm-256color"]
    assert back.description == ""


def test_anonymous_entry_stays_anonymous():
    data = encode_terminfo(TerminalCapabilitySet.create(names=[], numbers={"columns": 80}))
    assert data[12:13] == b"\x00"
    back = parse_terminfo(data).capabilities
    assert back.names == ()
    assert back.name == "unknown"
    assert back.numbers["columns"] == 80

    described = TerminalCapabilitySet.create(names=[], description="no name here")
    back = parse_terminfo(encode_terminfo(described)).capabilities
    assert back.names == ()
    assert back.description == "no name here"


def test_large_numbers_select_extended_format():
    caps = _sample(numbers={"max_colors": 0x1000000})
    data = encode_terminfo(caps)
    assert get_terminfo_format(data) == "extended"
    assert parse_terminfo(data).capabilities.numbers["max_colors"] == 0x1000000

    # forcing legacy clamps like tic does
    legacy = parse_terminfo(encode_terminfo(caps, format="legacy")).capabilities
    assert legacy.numbers["max_colors"] == 0x7FFF


def test_termcap_codes_are_accepted_as_keys():
    caps = TerminalCapabilitySet.create(names=["t"], numbers={"co": 132}, strings={"cl": "\x0c"})
    back = parse_terminfo(encode_terminfo(caps)).capabilities
    assert back.numbers["columns"] == 132
    assert back.strings["clear_screen"] == "\x0c"


def test_extended_section_round_trip():
    ext = ExtendedCapabilities.create(
        booleans={"AX": True, "XT": True},
        numbers={"U8": 1},
        strings={"Ss": "\x1b[%p1%d q", "Se": "\x1b[2 q", "kUP5": "\x1b[1;5A"},
    )
    caps = _sample(extended=ext)
    data = encode_terminfo(caps)
    back = parse_terminfo(data).capabilities

    assert dict(back.strings) == dict(caps.strings)
    assert dict(back.extended.booleans) == {"AX": True, "XT": True}
    assert dict(back.extended.numbers) == {"U8": 1}
    assert dict(back.extended.strings) == dict(ext.strings)

    assert back.has("Ss")
    assert back.get_string("kUP5") == "\x1b[1;5A"

    stripped = parse_terminfo(encode_terminfo(caps, include_extended=False)).capabilities
    assert stripped.extended.is_empty


def test_non_latin1_string_is_rejected():
    caps = _sample(strings={"bell": "☃"})
    with pytest.raises(UnicodeEncodeError):
        encode_terminfo(caps)


def test_unknown_format_is_rejected():
    with pytest.raises(ValueError):
        encode_terminfo(_sample(), format="modern")
