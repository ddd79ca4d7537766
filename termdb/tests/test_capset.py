import pytest

from termdb.core.capset import EMPTY_EXTENDED, ExtendedCapabilities, TerminalCapabilitySet


def test_create_normalizes_absence():
    caps = TerminalCapabilitySet.create(
        names=["", "dumb", ""],
        booleans={"auto_right_margin": True, "auto_left_margin": False},
        numbers={"columns": 80, "lines": None},
        strings={"bell": "\x07", "flash_screen": None},
    )
    assert caps.name == "dumb"
    assert caps.names == ("dumb",)
    assert dict(caps.booleans) == {"auto_right_margin": True}
    assert dict(caps.numbers) == {"columns": 80}
    assert dict(caps.strings) == {"bell": "\x07"}
    assert caps.extended is EMPTY_EXTENDED

    assert TerminalCapabilitySet.create(names=[]).name == "unknown"


def test_maps_are_read_only():
    source = {"columns": 80}
    caps = TerminalCapabilitySet.create(names=["t"], numbers=source)
    source["columns"] = 132
    assert caps.numbers["columns"] == 80
    with pytest.raises(TypeError):
        caps.numbers["columns"] = 1  # type: ignore[index]


def test_shared_code_lookups_use_category():
    caps = TerminalCapabilitySet.create(
        names=["t"],
        numbers={"max_attributes": 3},
        strings={"arrow_key_map": "x"},
        booleans={"gnu_has_meta_key": True},
    )
    assert caps.get_number("ma") == 3
    assert caps.get_string("ma") == "x"
    assert caps.get_boolean("MT")
    assert caps.get_string("MT") is None
    assert caps.has("ma")


def test_merged_with_overrides_win():
    base = TerminalCapabilitySet.create(
        names=["base"],
        description="fallback",
        booleans={"auto_right_margin": True},
        numbers={"columns": 80, "lines": 24},
        extended=ExtendedCapabilities.create(booleans={"XT": True}),
    )
    parsed = TerminalCapabilitySet.create(
        names=["xterm"],
        numbers={"columns": 132},
        strings={"bell": "\x07"},
        extended=ExtendedCapabilities.create(numbers={"U8": 1}),
    )
    merged = base.merged_with(parsed)
    assert merged.name == "xterm"
    assert merged.description == "fallback"
    assert dict(merged.numbers) == {"columns": 132, "lines": 24}
    assert merged.get_boolean("am")
    assert merged.get_string("bl") == "\x07"
    assert dict(merged.extended.booleans) == {"XT": True}
    assert dict(merged.extended.numbers) == {"U8": 1}

    anonymous = TerminalCapabilitySet.create(names=[], numbers={"lines": 50})
    kept = base.merged_with(anonymous)
    assert kept.name == "base"
    assert kept.numbers["lines"] == 50


def test_snapshot_is_sorted_plain_data():
    caps = TerminalCapabilitySet.create(
        names=["t", "t2"],
        booleans={"xon_xoff": True, "auto_right_margin": True},
        strings={"bell": "\x07", "back_tab": "\x1b[Z"},
    )
    snap = caps.snapshot()
    assert snap["booleans"] == ["auto_right_margin", "xon_xoff"]
    assert list(snap["strings"]) == ["back_tab", "bell"]
    assert snap["names"] == ["t", "t2"]
    assert "extended" not in snap

    with_ext = TerminalCapabilitySet.create(
        names=["t"], extended=ExtendedCapabilities.create(strings={"Ss": "x"})
    ).snapshot()
    assert with_ext["extended"]["strings"] == {"Ss": "x"}
    assert ExtendedCapabilities.create(strings={"Ss": "x"}).names() == ["Ss"]
