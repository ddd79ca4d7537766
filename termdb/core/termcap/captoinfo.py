from __future__ import annotations

import re
from typing import List

_PADDING = re.compile(r"^[0-9][0-9.]*\*?")
_TERMINFO_MARKERS = re.compile(r"%(?:p[1-9]|\{|'|g[a-zA-Z]|P[a-zA-Z])")
_TERMCAP_CODES = re.compile(r"%[d23.+\->rmnBDas]|%0[23]")

_MAX_SAVED = 16


def _char_push(ch: str) -> str:
    if " " < ch <= "~" and ch not in ",'\\:":
        return f"%'{ch}'"
    return "%{" + str(ord(ch)) + "}"


class _Converter:
    """Single-pass rewrite of termcap % codes into terminfo stack operations.

    Termcap walks its parameters implicitly: each output code consumes the
    "current" parameter and advances. Terminfo pushes parameters explicitly,
    so the converter tracks which parameter is already on the stack
    (`onstack`) to avoid pushing it twice, plus the %r/%n/%m modifiers that
    affect every later push.
    """

    def __init__(self, source: str, pos: int):
        self.src = source
        self.pos = pos
        self.out: List[str] = []
        self.param = 1
        self.onstack = 0
        self.saved: List[int] = []
        self.seen_r = False
        self.seen_m = False
        self.seen_n = False

    # --- stack bookkeeping ---

    def _effective(self, parm: int) -> int:
        if self.seen_r and parm in (1, 2):
            return 3 - parm
        return parm

    def push_param(self, parm: int, count: int = 1) -> None:
        parm = self._effective(parm)
        if self.onstack == parm:
            if count > 1:
                self.out.append("%Pa" + "%ga" * count)
            return
        if self.onstack != 0 and len(self.saved) < _MAX_SAVED:
            self.saved.append(self.onstack)
        self.onstack = parm
        self.out.append(f"%p{parm}" * count)
        if parm < 3:
            if self.seen_n:
                self.out.append("%{96}%^")
            if self.seen_m:
                self.out.append("%{127}%^")

    def pop_param(self) -> None:
        self.onstack = self.saved.pop() if self.saved else 0
        self.param += 1

    def take_char(self) -> str:
        if self.pos >= len(self.src):
            return _char_push("\x00")
        ch = self.src[self.pos]
        self.pos += 1
        return _char_push(ch)

    # --- output codes ---

    def emit(self, fmt: str) -> None:
        self.push_param(self.param)
        self.out.append(fmt)
        self.pop_param()

    def percent(self) -> None:
        src = self.src
        self.pos += 1
        if self.pos >= len(src):
            self.out.append("%")
            return
        code = src[self.pos]
        self.pos += 1

        if code == "%":
            self.out.append("%%")
        elif code == "r":
            self.seen_r = True
        elif code == "m":
            self.seen_m = True
        elif code == "n":
            self.seen_n = True
        elif code == "i":
            self.out.append("%i")
        elif code in "ds":
            self.emit("%" + code)
        elif code == ".":
            self.emit("%c")
        elif code in "23":
            self.emit(f"%{code}d")
        elif code == "0" and self.pos < len(src) and src[self.pos] in "23":
            width = src[self.pos]
            self.pos += 1
            self.emit(f"%0{width}d")
        elif code == "+":
            self.push_param(self.param)
            self.out.append(self.take_char() + "%+%c")
            self.pop_param()
        elif code == "-":
            self.push_param(self.param)
            self.out.append(self.take_char() + "%-%c")
            self.pop_param()
        elif code == ">":
            # value stays on the stack for the following output code
            self.push_param(self.param, 2)
            self.out.append("%?" + self.take_char() + "%>%t")
            self.out.append(self.take_char() + "%+%;")
        elif code in "B6":
            self.push_param(self.param)
            self.out.append("%{10}%/%{16}%*")
            # the stack now holds the high digit, not the parameter
            self.onstack = 0
            self.push_param(self.param)
            self.out.append("%{10}%m%+")
        elif code in "D8":
            self.push_param(self.param, 2)
            self.out.append("%{16}%m%{2}%*%-")
        elif code == "f":
            self.param += 1
        elif code == "b":
            self.param -= 1
        elif code == "a":
            self.arithmetic()
        else:
            # unknown code: keep it literally
            self.out.append("%")
            self.pos -= 1

    def arithmetic(self) -> None:
        """%a<op><p|c><arg>: arithmetic on the current parameter."""

        src = self.src
        op = src[self.pos] if self.pos < len(src) else ""
        kind = src[self.pos + 1] if self.pos + 1 < len(src) else ""
        has_arg = self.pos + 2 < len(src)
        if not (op and op in "=+-*/" and kind in ("p", "c") and has_arg):
            self.push_param(self.param)
            self.out.append(self.take_char() + "%+")
            return

        if op != "=":
            self.push_param(self.param)
        self.pos += 2
        if kind == "p":
            self.push_param(self.param + ord(src[self.pos]) - 64)
            self.pos += 1
            if self.param != self.onstack:
                self.pop_param()
                self.param -= 1
        else:
            self.out.append(self.take_char())

        if op == "=":
            self.onstack = self._effective(self.param)
        else:
            self.out.append("%" + op)

    def run(self) -> str:
        src = self.src
        while self.pos < len(src):
            ch = src[self.pos]
            if ch == "%":
                self.percent()
            else:
                self.out.append(ch)
                self.pos += 1
        return "".join(self.out)


def captoinfo(value: str, *, strip_padding: bool = True) -> str:
    """Rewrite a termcap string capability into terminfo tparm syntax.

    `value` is the decoded string (escapes already applied), so the
    character operand of %+x, %-x and %>xy is taken literally.

    Examples:
    - "\\E[%i%d;%dH" -> "\\E[%i%p1%d;%p2%dH"
    - "%+ " -> "%p1%{32}%+%c"

    Leading termcap padding ("50", "3.5*") is removed when strip_padding is
    set. Unknown % codes are copied through unchanged.

    Time:  O(n)
    Space: O(n)
    """

    if not value:
        return ""
    pos = 0
    if strip_padding:
        m = _PADDING.match(value)
        if m:
            pos = m.end()
    return _Converter(value, pos).run()


def needs_conversion(value: str) -> bool:
    """True when `value` uses termcap-only % codes.

    Strings that already push parameters explicitly (%p, %{, %', %g, %P) are
    treated as terminfo syntax and left alone.
    """

    if "%" not in value or _TERMINFO_MARKERS.search(value):
        return False
    return bool(_TERMCAP_CODES.search(value))
