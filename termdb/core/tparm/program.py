from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

Value = Union[int, str]

MAX_PARAMS = 9

_MASK = 0xFFFFFFFF


def wrap32(value: int) -> int:
    """Reduce to a signed 32-bit two's-complement integer."""
    value &= _MASK
    return value - 0x100000000 if value & 0x80000000 else value


def _as_int(value: Value) -> int:
    return value if isinstance(value, int) else 0


def _c_div(a: int, b: int) -> int:
    if b == 0:
        return 0
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _c_mod(a: int, b: int) -> int:
    if b == 0:
        return 0
    return a - b * _c_div(a, b)


_BINARY = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _c_div,
    "m": _c_mod,
    "&": lambda a, b: a & b,
    "|": lambda a, b: a | b,
    "^": lambda a, b: a ^ b,
    "=": lambda a, b: int(a == b),
    "<": lambda a, b: int(a < b),
    ">": lambda a, b: int(a > b),
    "A": lambda a, b: int(bool(a) and bool(b)),
    "O": lambda a, b: int(bool(a) or bool(b)),
}


@dataclass(frozen=True, slots=True)
class FormatSpec:
    """printf-style output conversion: %[:][flags][width][.precision]conv."""

    conv: str
    flags: str = ""
    width: Optional[int] = None
    precision: Optional[int] = None

    def render(self, value: Value) -> str:
        if self.conv == "s":
            text = str(value)
            if self.precision is not None:
                text = text[: self.precision]
            return self._pad(text, "")

        v = _as_int(value)
        sign = ""
        if self.conv == "d":
            digits = str(abs(v))
            if v < 0:
                sign = "-"
            elif "+" in self.flags:
                sign = "+"
            elif " " in self.flags:
                sign = " "
        else:
            u = v & _MASK
            digits = format(u, "o" if self.conv == "o" else self.conv)
            if "#" in self.flags:
                if self.conv == "o":
                    sign = "" if digits.startswith("0") else "0"
                elif u:
                    sign = "0x" if self.conv == "x" else "0X"

        if self.precision is not None:
            digits = "" if self.precision == 0 and v == 0 else digits.zfill(self.precision)
        return self._pad(digits, sign)

    def _pad(self, body: str, prefix: str) -> str:
        width = self.width or 0
        total = len(prefix) + len(body)
        if total >= width:
            return prefix + body
        if "-" in self.flags:
            return (prefix + body).ljust(width)
        if "0" in self.flags and self.precision is None and self.conv != "s":
            return prefix + body.zfill(width - len(prefix))
        return (prefix + body).rjust(width)


@dataclass(frozen=True, slots=True)
class Literal:
    text: str


@dataclass(frozen=True, slots=True)
class Operation:
    """One stack-machine instruction.

    kind is one of: param, int, set, get, format, char, strlen, binary,
    unary, increment. `arg` carries the parameter index, integer literal,
    variable name, operator or FormatSpec.
    """

    kind: str
    arg: Union[int, str, FormatSpec, None] = None


@dataclass(frozen=True, slots=True)
class Conditional:
    condition: Tuple["Node", ...]
    then: Tuple["Node", ...]
    otherwise: Tuple["Node", ...] = ()


Node = Union[Literal, Operation, Conditional]


class _Machine:
    """Per-call execution state: stack, parameters and variables."""

    __slots__ = ("stack", "params", "variables", "out")

    def __init__(self, params: Sequence[Value]):
        self.stack: List[Value] = []
        given = [wrap32(p) if isinstance(p, int) else p for p in params[:MAX_PARAMS]]
        self.params: List[Value] = given + [0] * (MAX_PARAMS - len(given))
        self.variables: Dict[str, Value] = {}
        self.out: List[str] = []

    def pop(self) -> Value:
        # underflow yields 0
        return self.stack.pop() if self.stack else 0

    def pop_int(self) -> int:
        return _as_int(self.pop())

    def run(self, nodes: Sequence[Node]) -> None:
        for node in nodes:
            if isinstance(node, Literal):
                self.out.append(node.text)
            elif isinstance(node, Operation):
                self.step(node)
            else:
                self.branch(node)

    def branch(self, node: Conditional) -> None:
        # else-if chains are walked iteratively
        current = node
        while True:
            self.run(current.condition)
            if self.pop_int():
                self.run(current.then)
                return
            other = current.otherwise
            if len(other) == 1 and isinstance(other[0], Conditional):
                current = other[0]
                continue
            self.run(other)
            return

    def step(self, op: Operation) -> None:
        kind = op.kind
        arg = op.arg
        if kind == "param":
            self.stack.append(self.params[int(arg) - 1])  # type: ignore[arg-type]
        elif kind == "int":
            self.stack.append(int(arg))  # type: ignore[arg-type]
        elif kind == "format":
            self.out.append(arg.render(self.pop()))  # type: ignore[union-attr]
        elif kind == "char":
            self.out.append(chr(self.pop_int() & 0xFF))
        elif kind == "binary":
            b = self.pop_int()
            a = self.pop_int()
            self.stack.append(wrap32(_BINARY[arg](a, b)))  # type: ignore[index]
        elif kind == "unary":
            v = self.pop_int()
            self.stack.append(wrap32(~v) if arg == "~" else int(not v))
        elif kind == "set":
            self.variables[arg] = self.pop()  # type: ignore[index]
        elif kind == "get":
            self.stack.append(self.variables.get(arg, 0))  # type: ignore[arg-type]
        elif kind == "strlen":
            self.stack.append(len(str(self.pop())))
        elif kind == "increment":
            for i in (0, 1):
                p = self.params[i]
                if isinstance(p, int):
                    self.params[i] = wrap32(p + 1)


@dataclass(frozen=True, slots=True)
class CompiledCapability:
    """Immutable instruction tree for one capability string.

    execute() allocates its own stack and variables, so one instance can be
    shared between threads.
    """

    source: str
    nodes: Tuple[Node, ...]
    node_count: int

    def execute(self, *params: Value) -> str:
        for p in params:
            if not isinstance(p, (int, str)):
                raise TypeError(f"tparm parameters must be int or str, got {type(p).__name__}")
        machine = _Machine(params)
        machine.run(self.nodes)
        return "".join(machine.out)

    @property
    def is_constant(self) -> bool:
        return all(isinstance(n, Literal) for n in self.nodes)
