import json
from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel

from termdb.core.config import DEFAULT_LIMITS, Limits
from termdb.core.termcap import TermcapErrorKind, parse_termcap
from termdb.core.terminfo import TerminfoFailureKind
from termdb.utils.json_safe import to_jsonable, visible


def test_limits_defaults_and_env(monkeypatch):
    for var in ("TERMDB_MAX_PROGRAM_NODES", "TERMDB_MAX_CONDITIONAL_DEPTH", "TERMDB_MAX_TC_DEPTH"):
        monkeypatch.delenv(var, raising=False)
    assert Limits.from_env() == DEFAULT_LIMITS == Limits(4096, 32, 32)

    monkeypatch.setenv("TERMDB_MAX_TC_DEPTH", "8")
    monkeypatch.setenv("TERMDB_MAX_CONDITIONAL_DEPTH", "-3")
    monkeypatch.setenv("TERMDB_MAX_PROGRAM_NODES", "  ")
    limits = Limits.from_env()
    assert limits.max_tc_depth == 8
    assert limits.max_conditional_depth == 32
    assert limits.max_program_nodes == 4096


def test_termcap_depth_from_env(monkeypatch):
    monkeypatch.setenv("TERMDB_MAX_TC_DEPTH", "2")
    text = "a:tc=b:\nb:tc=c:\nc:tc=d:\nd:am:\n"
    res = parse_termcap(text)
    assert any(e.kind is TermcapErrorKind.INHERITANCE_TOO_DEEP for e in res.errors)


def test_visible_rendering():
    assert visible("\x1b[H") == "\\E[H"
    assert visible("\x07\x7f") == "^G^?"
    assert visible("a^b\\c") == "a\\^b\\\\c"
    assert visible("\xe9") == "\\351"
    assert visible("plain text") == "plain text"


class _Model(BaseModel):
    name: str
    value: int = 0


def test_to_jsonable_handles_project_types():
    doc = {
        "kind": TerminfoFailureKind.INVALID_MAGIC,
        "path": Path("/tmp/x"),
        "raw": b"\x00\xff",
        "frozen": MappingProxyType({"a": (1, 2)}),
        "model": _Model(name="m"),
        "set": frozenset([3]),
        "other": object,
    }
    out = to_jsonable(doc)
    assert out["kind"] == "INVALID_MAGIC"
    assert out["path"] == "/tmp/x"
    assert out["raw"] == {"__bytes_b64__": "AP8="}
    assert out["frozen"] == {"a": [1, 2]}
    assert out["model"] == {"name": "m", "value": 0}
    assert out["set"] == [3]
    assert isinstance(out["other"], str)
    json.dumps(out)


def test_to_jsonable_walks_frozen_dataclasses():
    res = parse_termcap("x|desc:am:co#80:")
    entry = res.resolve("x")
    out = to_jsonable(entry)
    assert out["name"] == "x"
    assert out["numbers"] == {"co": 80}
    assert out["booleans"] == {"am": True}
    json.dumps(to_jsonable(res.capability_set("x")))
