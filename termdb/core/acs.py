from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping

# VT100 line-drawing codes as they appear in acsc, with their Unicode glyphs.
ACSC_CODES: Mapping[str, str] = MappingProxyType(
    {
        "l": "┌",  # upper-left corner
        "m": "└",  # lower-left corner
        "k": "┐",  # upper-right corner
        "j": "┘",  # lower-right corner
        "t": "├",  # left tee
        "u": "┤",  # right tee
        "v": "┴",  # bottom tee
        "w": "┬",  # top tee
        "q": "─",  # horizontal line
        "x": "│",  # vertical line
        "n": "┼",  # plus
        "`": "◆",  # diamond
        "a": "▒",  # checkerboard
        "f": "°",  # degree
        "g": "±",  # plus/minus
        "b": "␉",  # HT symbol
        "c": "␌",  # FF symbol
        "d": "␍",  # CR symbol
        "e": "␊",  # LF symbol
        "h": "␤",  # NL symbol
        "i": "␋",  # VT symbol
        "o": "⎺",  # scan line 1
        "p": "⎻",  # scan line 3
        "r": "⎼",  # scan line 7
        "s": "⎽",  # scan line 9
        "y": "≤",  # less or equal
        "z": "≥",  # greater or equal
        "{": "π",  # pi
        "|": "≠",  # not equal
        "}": "£",  # pound sterling
        "~": "·",  # bullet
        "+": "→",  # right arrow
        ",": "←",  # left arrow
        "-": "↑",  # up arrow
        ".": "↓",  # down arrow
        "0": "█",  # solid block
    }
)


def parse_acsc(acsc: str) -> Mapping[str, str]:
    """Split an acsc string into {line-drawing code: character to send}.

    acsc is a flat run of pairs: the VT100 code, then the character the
    terminal wants for it in its alternate set. A trailing unpaired character
    is ignored. When a code repeats, the later pair wins.

    Time:  O(n)
    Space: O(n)
    """

    out: Dict[str, str] = {}
    for i in range(0, len(acsc) - 1, 2):
        out[acsc[i]] = acsc[i + 1]
    return MappingProxyType(out)


def acs_unicode(code: str) -> str:
    """Unicode glyph for a line-drawing code; unknown codes come back unchanged."""
    return ACSC_CODES.get(code, code)
