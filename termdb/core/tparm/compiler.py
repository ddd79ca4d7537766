from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from termdb.core.config import Limits
from termdb.core.errors import ProgramLimitError

from .program import CompiledCapability, Conditional, FormatSpec, Literal, Node, Operation, wrap32

log = logging.getLogger("termdb.tparm")

_SIMPLE_FORMATS = "doxXs"
_BINARY_OPS = "+-*/m&|^=<>AO"
_UNARY_OPS = "~!"
_PRINTF_START = ":# 0123456789."


class _Parser:
    """Recursive-descent parser for terminfo parameter strings.

    Malformed input follows one fixed recovery policy:
    - an unterminated %? is closed at end of string
    - a %? without %t runs its condition inline and nothing else
    - %t, %e and %; outside a conditional are ignored
    - unknown directives and a trailing lone % are copied literally
    """

    def __init__(self, source: str, limits: Limits):
        self.src = source
        self.pos = 0
        self.limits = limits
        self.count = 0

    # --- helpers ---

    def _bump(self) -> None:
        self.count += 1
        if self.count > self.limits.max_program_nodes:
            raise ProgramLimitError(f"capability exceeds {self.limits.max_program_nodes} instructions")

    def _flush(self, nodes: List[Node], text: List[str]) -> None:
        if text:
            self._bump()
            nodes.append(Literal("".join(text)))
            text.clear()

    def _emit(self, nodes: List[Node], text: List[str], node: Node) -> None:
        self._flush(nodes, text)
        self._bump()
        nodes.append(node)

    # --- grammar ---

    def parse(self) -> Tuple[Node, ...]:
        nodes, _ = self._sequence(0, "")
        return tuple(nodes)

    def _sequence(self, depth: int, stop: str) -> Tuple[List[Node], Optional[str]]:
        """Parse until one of the `stop` directives (t, e, ;) or end of input.

        Returns the nodes and the terminator that ended the run (None at EOF).
        """

        src = self.src
        n = len(src)
        nodes: List[Node] = []
        text: List[str] = []

        while self.pos < n:
            c = src[self.pos]
            if c != "%":
                text.append(c)
                self.pos += 1
                continue
            if self.pos + 1 >= n:
                text.append("%")
                self.pos += 1
                break

            d = src[self.pos + 1]
            if d in "te;":
                self.pos += 2
                if d in stop:
                    self._flush(nodes, text)
                    return nodes, d
                continue

            if d == "?":
                self.pos += 2
                self._flush(nodes, text)
                nodes.extend(self._conditional(depth + 1))
                continue

            node = self._directive(text)
            if node is not None:
                self._emit(nodes, text, node)

        self._flush(nodes, text)
        return nodes, None

    def _conditional(self, depth: int) -> List[Node]:
        if depth > self.limits.max_conditional_depth:
            raise ProgramLimitError(f"conditional nesting deeper than {self.limits.max_conditional_depth}")

        condition, term = self._sequence(depth, "t;")
        if term != "t":
            return condition

        # (condition, then) pairs of an else-if chain, closed by one %;
        arms: List[Tuple[List[Node], List[Node]]] = []
        otherwise: List[Node] = []
        while True:
            then, term = self._sequence(depth, "e;")
            arms.append((condition, then))
            if term != "e":
                break
            rest, term = self._sequence(depth, "t;")
            if term == "t":
                condition = rest
                continue
            otherwise = rest
            break

        tail: Tuple[Node, ...] = tuple(otherwise)
        for cond, then in reversed(arms):
            self._bump()
            tail = (Conditional(tuple(cond), tuple(then), tail),)
        return list(tail)

    def _directive(self, text: List[str]) -> Optional[Node]:
        """Consume one %-directive at self.pos.

        Returns an Operation, or None after appending literal text for
        %% and unrecognised sequences.
        """

        src = self.src
        n = len(src)
        p = self.pos
        d = src[p + 1]
        nxt = src[p + 2] if p + 2 < n else ""

        if d == "%":
            self.pos = p + 2
            text.append("%")
            return None
        if d == "p" and nxt and nxt in "123456789":
            self.pos = p + 3
            return Operation("param", int(nxt))
        if d in "Pg" and nxt.isascii() and nxt.isalpha():
            self.pos = p + 3
            return Operation("set" if d == "P" else "get", nxt)
        if d == "'" and nxt:
            self.pos = p + 3
            if self.pos < n and src[self.pos] == "'":
                self.pos += 1
            return Operation("int", ord(nxt))
        if d == "{":
            node = self._int_literal()
            if node is not None:
                return node
        if d in _SIMPLE_FORMATS:
            self.pos = p + 2
            return Operation("format", FormatSpec(d))
        if d == "c":
            self.pos = p + 2
            return Operation("char")
        if d == "l":
            self.pos = p + 2
            return Operation("strlen")
        if d == "i":
            self.pos = p + 2
            return Operation("increment")
        if d in _BINARY_OPS:
            self.pos = p + 2
            return Operation("binary", d)
        if d in _UNARY_OPS:
            self.pos = p + 2
            return Operation("unary", d)
        if d in _PRINTF_START:
            node = self._printf()
            if node is not None:
                return node

        # unknown: copy "%" and the following character as text
        self.pos = p + 2
        text.append("%" + d)
        return None

    def _int_literal(self) -> Optional[Operation]:
        src = self.src
        j = self.pos + 2
        start = j
        if j < len(src) and src[j] == "-":
            j += 1
        digits_from = j
        while j < len(src) and src[j].isdigit():
            j += 1
        if j == digits_from or j >= len(src) or src[j] != "}":
            return None
        value = wrap32(int(src[start:j]))
        self.pos = j + 1
        return Operation("int", value)

    def _printf(self) -> Optional[Operation]:
        """%[:][flags][width][.precision][doxXs]; '-' and '+' flags need the ':'."""

        src = self.src
        n = len(src)
        j = self.pos + 1
        allowed = "# 0"
        if src[j] == ":":
            allowed = "-+# 0"
            j += 1

        flags: List[str] = []
        while j < n and src[j] in allowed:
            flags.append(src[j])
            j += 1

        width: Optional[int] = None
        w0 = j
        while j < n and src[j].isdigit():
            j += 1
        if j > w0:
            width = int(src[w0:j])

        precision: Optional[int] = None
        if j < n and src[j] == ".":
            j += 1
            p0 = j
            while j < n and src[j].isdigit():
                j += 1
            precision = int(src[p0:j]) if j > p0 else 0

        if j >= n or src[j] not in _SIMPLE_FORMATS:
            return None
        self.pos = j + 1
        return Operation("format", FormatSpec(src[j], "".join(flags), width, precision))


def compile_source(source: str, *, limits: Optional[Limits] = None) -> CompiledCapability:
    """Compile a capability string without caching.

    Raises ProgramLimitError when the string exceeds the instruction or
    nesting limits; any other malformed input compiles under the recovery
    policy documented on the parser.
    """

    if not isinstance(source, str):
        raise TypeError("capability source must be str")
    parser = _Parser(source, limits or Limits.from_env())
    try:
        nodes = parser.parse()
    except ProgramLimitError as e:
        log.info("tparm_limit_exceeded", extra={"length": len(source), "detail": str(e)})
        raise
    return CompiledCapability(source=source, nodes=nodes, node_count=parser.count)


def has_parameters(source: str) -> bool:
    """True when `source` contains any %-directive other than %%."""

    i = 0
    n = len(source)
    while i < n - 1:
        if source[i] == "%":
            if source[i + 1] != "%":
                return True
            i += 2
            continue
        i += 1
    return False
