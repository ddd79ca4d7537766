from __future__ import annotations

from typing import Dict, List

ESC = "\x1b"
DEL = "\x7f"

_SIMPLE: Dict[str, str] = {
    "E": ESC,
    "e": ESC,
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "s": " ",
    "\\": "\\",
    ":": ":",
    "^": "^",
}

_OCTAL = "01234567"


def decode_termcap_escapes(value: str) -> str:
    """Decode termcap string escapes into the literal characters.

    - \\E and \\e are ESC; \\n \\r \\t \\b \\f \\s are the usual controls
    - \\\\ \\: \\^ are literal backslash, colon and caret
    - \\ followed by octal digits: up to 4 digits when the first is 0, else 3;
      the value is reduced to one byte
    - ^X is the control character X - 0x40 (X uppercased); ^? is DEL
    - any other backslash escape is kept as-is, backslash included

    Time:  O(n)
    Space: O(n)
    """

    out: List[str] = []
    i = 0
    n = len(value)
    while i < n:
        c = value[i]

        if c == "\\":
            if i + 1 >= n:
                out.append("\\")
                break
            nxt = value[i + 1]
            simple = _SIMPLE.get(nxt)
            if simple is not None:
                out.append(simple)
                i += 2
                continue
            if nxt in _OCTAL:
                limit = 4 if nxt == "0" else 3
                j = i + 1
                while j < n and j - (i + 1) < limit and value[j] in _OCTAL:
                    j += 1
                out.append(chr(int(value[i + 1 : j], 8) & 0xFF))
                i = j
                continue
            out.append(c + nxt)
            i += 2
            continue

        if c == "^" and i + 1 < n:
            nxt = value[i + 1]
            if nxt == "?":
                out.append(DEL)
                i += 2
                continue
            code = ord(nxt.upper()) - 0x40
            if 0 <= code < 0x20:
                out.append(chr(code))
                i += 2
                continue

        out.append(c)
        i += 1

    return "".join(out)
