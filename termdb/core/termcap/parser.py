from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Set, Tuple

from termdb.core.capset import TerminalCapabilitySet
from termdb.core.catalog import STANDARD_CATALOG, CapabilityCatalog
from termdb.core.config import Limits

from .captoinfo import captoinfo, needs_conversion
from .escapes import decode_termcap_escapes

log = logging.getLogger("termdb.termcap")

_DECIMAL = re.compile(r"^[0-9]+$")
_OCTAL = re.compile(r"^0[0-7]+$")


class TermcapErrorKind(str, Enum):
    """
    Recoverable problems found while reading termcap text.
    """

    EMPTY_NAME = "EMPTY_NAME"
    INVALID_NUMBER = "INVALID_NUMBER"
    MISSING_PARENT = "MISSING_PARENT"
    INHERITANCE_CYCLE = "INHERITANCE_CYCLE"
    INHERITANCE_TOO_DEEP = "INHERITANCE_TOO_DEEP"


@dataclass(frozen=True, slots=True)
class TermcapError:
    kind: TermcapErrorKind
    line: int
    entry: str
    message: str


@dataclass(frozen=True, slots=True)
class TermcapEntry:
    """One termcap entry before alias translation.

    Capability maps are keyed by the short termcap codes exactly as written.
    String values are already escape-decoded. `inherits` lists tc= targets
    in file order and `cancelled` lists codes written as `xx@`.
    """

    name: str
    names: Tuple[str, ...]
    description: str
    booleans: Mapping[str, bool]
    numbers: Mapping[str, int]
    strings: Mapping[str, str]
    inherits: Tuple[str, ...] = ()
    cancelled: Tuple[str, ...] = ()
    source: str = "<string>"
    line: int = 0


@dataclass(frozen=True, slots=True)
class TermcapParseResult:
    """Outcome of parse_termcap().

    - entries: raw entries indexed by every one of their names
    - resolved: inheritance-merged entries indexed by primary name
    - errors: everything skipped or dropped, in discovery order
    """

    source: str
    entries: Mapping[str, TermcapEntry]
    resolved: Mapping[str, TermcapEntry]
    errors: Tuple[TermcapError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors

    def primary_names(self) -> List[str]:
        return list(self.resolved)

    def resolve(self, name: str) -> Optional[TermcapEntry]:
        """Return the merged entry for any of its names, or None."""
        raw = self.entries.get(name)
        if raw is None:
            return None
        return self.resolved.get(raw.name)

    def capability_set(
        self,
        name: str,
        *,
        catalog: CapabilityCatalog = STANDARD_CATALOG,
        convert_parameters: bool = False,
    ) -> Optional[TerminalCapabilitySet]:
        entry = self.resolve(name)
        if entry is None:
            return None
        return to_capability_set(entry, catalog=catalog, convert_parameters=convert_parameters)


# ---------------------------------------------------------------------------
# Lexing
# ---------------------------------------------------------------------------


def _ends_with_continuation(line: str) -> bool:
    # an odd number of trailing backslashes escapes the newline
    stripped = line.rstrip("\r")
    count = len(stripped) - len(stripped.rstrip("\\"))
    return count % 2 == 1


def _logical_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield (first line number, joined text) for every entry.

    Comment and blank lines are dropped unless they are inside a
    continuation.
    """

    buf: List[str] = []
    start = 0
    for lineno, raw in enumerate(text.splitlines(), start=1):
        if buf:
            raw = raw.lstrip(" \t")
        else:
            stripped = raw.strip()
            if not stripped or stripped.startswith("#"):
                continue
            start = lineno

        if _ends_with_continuation(raw):
            buf.append(raw.rstrip("\r")[:-1])
            continue

        buf.append(raw)
        yield start, "".join(buf).strip()
        buf = []

    if buf:
        yield start, "".join(buf).strip()


def _split_fields(line: str) -> List[str]:
    """Split on ':' that is not escaped with a backslash."""

    fields: List[str] = []
    cur: List[str] = []
    i = 0
    n = len(line)
    while i < n:
        c = line[i]
        if c == "\\" and i + 1 < n:
            cur.append(line[i : i + 2])
            i += 2
            continue
        if c == ":":
            fields.append("".join(cur))
            cur = []
        else:
            cur.append(c)
        i += 1
    fields.append("".join(cur))
    return fields


def _parse_number(raw: str) -> Optional[int]:
    raw = raw.strip()
    if _OCTAL.match(raw):
        return int(raw, 8)
    if _DECIMAL.match(raw):
        return int(raw, 10)
    return None


def _parse_entry(line: str, lineno: int, source: str, errors: List[TermcapError]) -> Optional[TermcapEntry]:
    fields = _split_fields(line)
    names_field = fields[0].strip()
    parts = [p.strip() for p in names_field.split("|")]
    description = parts.pop() if len(parts) >= 2 else ""
    names = tuple(p for p in parts if p)
    if not names:
        errors.append(
            TermcapError(
                kind=TermcapErrorKind.EMPTY_NAME,
                line=lineno,
                entry=names_field,
                message="entry has no name",
            )
        )
        return None

    primary = names[0]
    booleans: Dict[str, bool] = {}
    numbers: Dict[str, int] = {}
    strings: Dict[str, str] = {}
    inherits: List[str] = []
    cancelled: List[str] = []
    # first occurrence wins within each category; xx@ blocks all three
    blocked: Set[str] = set()

    for f in fields[1:]:
        f = f.strip()
        if not f:
            continue

        eq = f.find("=")
        hs = f.find("#")
        if eq > 0 and (hs < 0 or eq < hs):
            code, value = f[:eq], f[eq + 1 :]
            if code == "tc":
                inherits.append(value.strip())
                continue
            if code not in strings and code not in blocked:
                strings[code] = decode_termcap_escapes(value)
        elif hs > 0:
            code = f[:hs]
            number = _parse_number(f[hs + 1 :])
            if number is None:
                errors.append(
                    TermcapError(
                        kind=TermcapErrorKind.INVALID_NUMBER,
                        line=lineno,
                        entry=primary,
                        message=f"{code}: invalid number {f[hs + 1:]!r}",
                    )
                )
                continue
            if code not in numbers and code not in blocked:
                numbers[code] = number
        elif f.endswith("@") and len(f) > 1:
            code = f[:-1]
            if code not in blocked:
                blocked.add(code)
                cancelled.append(code)
        elif eq < 0 and hs < 0:
            if f not in blocked:
                booleans[f] = True

    return TermcapEntry(
        name=primary,
        names=names,
        description=description,
        booleans=MappingProxyType(booleans),
        numbers=MappingProxyType(numbers),
        strings=MappingProxyType(strings),
        inherits=tuple(inherits),
        cancelled=tuple(cancelled),
        source=source,
        line=lineno,
    )


# ---------------------------------------------------------------------------
# Inheritance
# ---------------------------------------------------------------------------


_Fields = Tuple[Dict[str, bool], Dict[str, int], Dict[str, str]]


class _Resolver:
    """Merges tc= chains, resolving every entry exactly once.

    An entry reached through a cycle or past the depth limit keeps whatever
    it could merge, and that result is memoized like any other. Total work is
    therefore linear in the number of entries and tc= references.
    """

    def __init__(self, entries: Mapping[str, TermcapEntry], limits: Limits, errors: List[TermcapError]):
        self.entries = entries
        self.limits = limits
        self.errors = errors
        self.memo: Dict[str, _Fields] = {}
        self.stack: List[str] = []
        self.active: Set[str] = set()
        self.reported: Set[Tuple[TermcapErrorKind, str, str]] = set()

    def _report(self, kind: TermcapErrorKind, entry: TermcapEntry, target: str, message: str) -> None:
        key = (kind, entry.name, target)
        if key in self.reported:
            return
        self.reported.add(key)
        self.errors.append(TermcapError(kind=kind, line=entry.line, entry=entry.name, message=message))

    def fields(self, entry: TermcapEntry) -> _Fields:
        cached = self.memo.get(entry.name)
        if cached is not None:
            return cached

        self.stack.append(entry.name)
        self.active.add(entry.name)
        booleans: Dict[str, bool] = {}
        numbers: Dict[str, int] = {}
        strings: Dict[str, str] = {}

        # later parents first so that earlier tc= entries win
        for target in reversed(entry.inherits):
            parent = self.entries.get(target)
            if parent is None:
                self._report(TermcapErrorKind.MISSING_PARENT, entry, target, f"tc={target} not found")
                continue
            if parent.name in self.active:
                self._report(
                    TermcapErrorKind.INHERITANCE_CYCLE,
                    entry,
                    target,
                    "tc cycle: " + " -> ".join(self.stack + [parent.name]),
                )
                continue
            if len(self.stack) >= self.limits.max_tc_depth:
                self._report(
                    TermcapErrorKind.INHERITANCE_TOO_DEEP,
                    entry,
                    target,
                    f"tc chain deeper than {self.limits.max_tc_depth}",
                )
                continue
            pb, pn, ps = self.fields(parent)
            booleans.update(pb)
            numbers.update(pn)
            strings.update(ps)

        for code in entry.cancelled:
            booleans.pop(code, None)
            numbers.pop(code, None)
            strings.pop(code, None)

        booleans.update(entry.booleans)
        numbers.update(entry.numbers)
        strings.update(entry.strings)

        self.stack.pop()
        self.active.discard(entry.name)
        result = (booleans, numbers, strings)
        self.memo[entry.name] = result
        return result

    def merged(self, entry: TermcapEntry) -> TermcapEntry:
        booleans, numbers, strings = self.fields(entry)
        return TermcapEntry(
            name=entry.name,
            names=entry.names,
            description=entry.description,
            booleans=MappingProxyType(dict(booleans)),
            numbers=MappingProxyType(dict(numbers)),
            strings=MappingProxyType(dict(strings)),
            source=entry.source,
            line=entry.line,
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_termcap(text: str, *, source: str = "<string>", limits: Optional[Limits] = None) -> TermcapParseResult:
    """Parse termcap text and resolve tc= inheritance.

    Never raises for malformed text. Entries without a name are skipped,
    fields with a bad number are dropped, and unresolvable tc= references
    are ignored; each case is recorded in `errors` with its line number.

    When two entries share a name the first one wins.

    Security notes:
    - Inheritance depth is bounded by Limits.max_tc_depth and cycles are
      detected, so hostile files cannot cause unbounded recursion.

    Time:  O(n + t) for n characters and t tc= references
    Space: O(n)
    """

    if not isinstance(text, str):
        raise TypeError("text must be str")
    limits = limits or Limits.from_env()

    errors: List[TermcapError] = []
    entries: Dict[str, TermcapEntry] = {}
    order: List[TermcapEntry] = []

    for lineno, line in _logical_lines(text):
        entry = _parse_entry(line, lineno, source, errors)
        if entry is None:
            continue
        if entry.name in entries:
            log.debug("termcap_duplicate_entry", extra={"entry": entry.name, "line": lineno, "source": source})
            continue
        order.append(entry)
        for n in entry.names:
            entries.setdefault(n, entry)

    resolver = _Resolver(entries, limits, errors)
    resolved = {e.name: resolver.merged(e) for e in order}

    log.debug(
        "termcap_parsed",
        extra={"source": source, "entries": len(order), "errors": len(errors)},
    )
    return TermcapParseResult(
        source=source,
        entries=MappingProxyType(entries),
        resolved=MappingProxyType(resolved),
        errors=tuple(errors),
    )


def to_capability_set(
    entry: TermcapEntry,
    *,
    catalog: CapabilityCatalog = STANDARD_CATALOG,
    convert_parameters: bool = False,
) -> TerminalCapabilitySet:
    """Translate a (merged) termcap entry to canonical terminfo names.

    Unknown codes are kept under their termcap name. With
    convert_parameters, string values written with termcap % codes are
    rewritten to tparm syntax.
    """

    booleans = {catalog.resolve(k, "boolean"): v for k, v in entry.booleans.items()}
    numbers = {catalog.resolve(k, "number"): v for k, v in entry.numbers.items()}
    strings: Dict[str, str] = {}
    for k, v in entry.strings.items():
        if convert_parameters and needs_conversion(v):
            v = captoinfo(v)
        strings[catalog.resolve(k, "string")] = v

    return TerminalCapabilitySet.create(
        names=entry.names,
        description=entry.description,
        booleans=booleans,
        numbers=numbers,
        strings=strings,
    )
