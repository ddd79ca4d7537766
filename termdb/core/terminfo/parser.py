from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Literal, Optional, Tuple

from termdb.core.capset import EMPTY_EXTENDED, ExtendedCapabilities, TerminalCapabilitySet
from termdb.core.catalog import STANDARD_CATALOG, CapabilityCatalog
from termdb.core.errors import TerminfoParseError

log = logging.getLogger("termdb.terminfo")

LEGACY_MAGIC = 0x011A
EXTENDED_MAGIC = 0x021E

HEADER = struct.Struct("<6H")
EXTENDED_HEADER = struct.Struct("<5h")

TerminfoFormat = Literal["legacy", "extended"]

_FORMATS: Dict[int, TerminfoFormat] = {
    LEGACY_MAGIC: "legacy",
    EXTENDED_MAGIC: "extended",
}


class TerminfoFailureKind(str, Enum):
    """
    Why a terminfo buffer could not be decoded.

    Using str Enum keeps the value stable in logs and JSON output.
    """

    INVALID_MAGIC = "INVALID_MAGIC"
    TRUNCATED_HEADER = "TRUNCATED_HEADER"
    TRUNCATED_NAMES = "TRUNCATED_NAMES"
    TRUNCATED_BOOLEANS = "TRUNCATED_BOOLEANS"
    TRUNCATED_NUMBERS = "TRUNCATED_NUMBERS"
    TRUNCATED_STRINGS = "TRUNCATED_STRINGS"


@dataclass(frozen=True, slots=True)
class TerminfoHeader:
    magic: int
    name_size: int
    bool_count: int
    num_count: int
    str_count: int
    str_table_size: int

    @property
    def format(self) -> TerminfoFormat:
        return _FORMATS[self.magic]

    @property
    def number_width(self) -> int:
        return 4 if self.magic == EXTENDED_MAGIC else 2


@dataclass(frozen=True, slots=True)
class TerminfoFailure:
    kind: TerminfoFailureKind
    offset: int
    message: str


@dataclass(frozen=True, slots=True)
class TerminfoParseResult:
    """Tagged outcome of parse_terminfo(): exactly one of capabilities/failure is set."""

    capabilities: Optional[TerminalCapabilitySet] = None
    failure: Optional[TerminfoFailure] = None
    header: Optional[TerminfoHeader] = None

    @property
    def ok(self) -> bool:
        return self.capabilities is not None

    def unwrap(self) -> TerminalCapabilitySet:
        """Return the capability set or raise TerminfoParseError."""
        if self.capabilities is not None:
            return self.capabilities
        f = self.failure
        if f is None:
            raise TerminfoParseError("EMPTY_RESULT", 0, "neither capabilities nor a failure recorded")
        raise TerminfoParseError(f.kind.value, f.offset, f.message)


class _Truncated(Exception):
    """Internal signal: a section ran past the end of the buffer."""

    def __init__(self, kind: TerminfoFailureKind, offset: int, message: str):
        super().__init__(message)
        self.kind = kind
        self.offset = offset
        self.message = message


# ---------------------------------------------------------------------------
# Format detection
# ---------------------------------------------------------------------------


def get_terminfo_format(data: bytes) -> Optional[TerminfoFormat]:
    """Return "legacy" or "extended" for a buffer with a complete, known header."""

    if len(data) < HEADER.size:
        return None
    magic = int.from_bytes(data[0:2], "little")
    return _FORMATS.get(magic)


def is_valid_terminfo(data: bytes) -> bool:
    """Cheap check on the header only; the body may still be truncated."""

    return get_terminfo_format(data) is not None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _fail(kind: TerminfoFailureKind, offset: int, message: str, header: Optional[TerminfoHeader] = None) -> TerminfoParseResult:
    log.debug("terminfo_parse_failed", extra={"kind": kind.value, "offset": offset, "detail": message})
    return TerminfoParseResult(failure=TerminfoFailure(kind=kind, offset=offset, message=message), header=header)


def _split_names(raw: bytes) -> Tuple[List[str], str]:
    text = raw.split(b"\x00", 1)[0].decode("latin-1")
    parts = text.split("|")
    description = ""
    if len(parts) >= 2:
        description = parts.pop().strip()
    names = [p.strip() for p in parts if p.strip()]
    return names, description


def _require(data: bytes, start: int, length: int, kind: TerminfoFailureKind, what: str) -> None:
    if length < 0 or start + length > len(data):
        raise _Truncated(kind, start, f"{what} needs {length} bytes at offset {start}, buffer has {len(data)}")


def _read_table_string(table: bytes, offset: int) -> Optional[str]:
    if offset < 0 or offset >= len(table):
        return None
    end = table.find(b"\x00", offset)
    if end < 0:
        end = len(table)
    value = table[offset:end].decode("latin-1")
    return value or None


def parse_terminfo(data: bytes, *, catalog: CapabilityCatalog = STANDARD_CATALOG) -> TerminfoParseResult:
    """Decode a compiled terminfo entry.

    Never raises for malformed input: truncation or a bad magic number yields
    a result with `failure` set, naming the section and byte offset.

    Field i of each section maps to the catalog's i-th name of that category.
    Fields beyond the catalog are dropped so newer databases still load.

    Security notes:
    - The buffer is untrusted. Every section size is checked against the
      remaining length before it is sliced.
    - Offsets into the string table are bounds-checked individually.

    Time:  O(n) in buffer size
    Space: O(n)
    """

    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("data must be bytes-like")
    data = bytes(data)

    if len(data) < HEADER.size:
        return _fail(
            TerminfoFailureKind.TRUNCATED_HEADER,
            0,
            f"header needs {HEADER.size} bytes, buffer has {len(data)}",
        )

    header = TerminfoHeader(*HEADER.unpack_from(data, 0))
    if header.magic not in _FORMATS:
        return _fail(TerminfoFailureKind.INVALID_MAGIC, 0, f"unknown magic 0x{header.magic:04X}")

    try:
        return _parse_body(data, header, catalog)
    except _Truncated as e:
        return _fail(e.kind, e.offset, e.message, header)


def _parse_body(data: bytes, header: TerminfoHeader, catalog: CapabilityCatalog) -> TerminfoParseResult:
    offset = HEADER.size

    # 1) Names
    _require(data, offset, header.name_size, TerminfoFailureKind.TRUNCATED_NAMES, "name section")
    names, description = _split_names(data[offset : offset + header.name_size])
    offset += header.name_size

    # 2) Booleans (only byte value 1 means present)
    _require(data, offset, header.bool_count, TerminfoFailureKind.TRUNCATED_BOOLEANS, "boolean section")
    booleans: Dict[str, bool] = {}
    for i, flag in enumerate(data[offset : offset + header.bool_count]):
        name = catalog.name_at("boolean", i)
        if name is None:
            break
        if flag == 1:
            booleans[name] = True
    offset += header.bool_count
    if offset % 2:
        offset += 1

    # 3) Numbers (negative = absent)
    width = header.number_width
    fmt = "<i" if width == 4 else "<h"
    _require(data, offset, header.num_count * width, TerminfoFailureKind.TRUNCATED_NUMBERS, "number section")
    numbers: Dict[str, int] = {}
    for i in range(header.num_count):
        name = catalog.name_at("number", i)
        if name is None:
            break
        (value,) = struct.unpack_from(fmt, data, offset + i * width)
        if value >= 0:
            numbers[name] = value
    offset += header.num_count * width

    # 4) String offsets + table
    _require(data, offset, header.str_count * 2, TerminfoFailureKind.TRUNCATED_STRINGS, "string offsets")
    offsets = struct.unpack_from(f"<{header.str_count}h", data, offset)
    offset += header.str_count * 2
    _require(data, offset, header.str_table_size, TerminfoFailureKind.TRUNCATED_STRINGS, "string table")
    table = data[offset : offset + header.str_table_size]
    offset += header.str_table_size

    strings: Dict[str, str] = {}
    for i, str_offset in enumerate(offsets):
        name = catalog.name_at("string", i)
        if name is None:
            break
        value = _read_table_string(table, str_offset)
        if value is not None:
            strings[name] = value

    dropped = (
        max(0, header.bool_count - catalog.count("boolean"))
        + max(0, header.num_count - catalog.count("number"))
        + max(0, header.str_count - catalog.count("string"))
    )
    if dropped:
        log.debug("terminfo_unknown_fields_dropped", extra={"count": dropped, "terminal": names[:1]})

    # 5) Optional extended section
    if offset % 2:
        offset += 1
    extended = _parse_extended(data, offset, width) if offset < len(data) else EMPTY_EXTENDED

    caps = TerminalCapabilitySet.create(
        names=names,
        description=description,
        booleans=booleans,
        numbers=numbers,
        strings=strings,
        extended=extended,
    )
    return TerminfoParseResult(capabilities=caps, header=header)


def _parse_extended(data: bytes, offset: int, width: int) -> ExtendedCapabilities:
    """Decode the ncurses user-defined capability section.

    Any inconsistency is logged and reported as an empty section; the
    standard capabilities already decoded are kept.
    """

    try:
        return _parse_extended_body(data, offset, width)
    except (_Truncated, struct.error, ValueError) as e:
        log.debug("terminfo_extended_ignored", extra={"offset": offset, "detail": str(e)})
        return EMPTY_EXTENDED


def _parse_extended_body(data: bytes, offset: int, width: int) -> ExtendedCapabilities:
    kind = TerminfoFailureKind.TRUNCATED_STRINGS
    _require(data, offset, EXTENDED_HEADER.size, kind, "extended header")
    n_bool, n_num, n_str, n_items, table_size = EXTENDED_HEADER.unpack_from(data, offset)
    if min(n_bool, n_num, n_str, n_items, table_size) < 0:
        raise ValueError("negative count in extended header")
    offset += EXTENDED_HEADER.size

    _require(data, offset, n_bool, kind, "extended booleans")
    bool_flags = data[offset : offset + n_bool]
    offset += n_bool
    if offset % 2:
        offset += 1

    fmt = "<i" if width == 4 else "<h"
    _require(data, offset, n_num * width, kind, "extended numbers")
    num_values = [struct.unpack_from(fmt, data, offset + i * width)[0] for i in range(n_num)]
    offset += n_num * width

    n_names = n_bool + n_num + n_str
    _require(data, offset, (n_str + n_names) * 2, kind, "extended offsets")
    str_offsets = struct.unpack_from(f"<{n_str}h", data, offset)
    offset += n_str * 2
    name_offsets = struct.unpack_from(f"<{n_names}h", data, offset)
    offset += n_names * 2

    _require(data, offset, table_size, kind, "extended table")
    table = data[offset : offset + table_size]

    # Names start right after the last value string.
    strings_raw: List[Optional[str]] = []
    names_base = 0
    for off in str_offsets:
        value = _read_table_string(table, off)
        strings_raw.append(value)
        if off >= 0 and off < len(table):
            end = table.find(b"\x00", off)
            names_base = max(names_base, (end if end >= 0 else len(table)) + 1)

    ext_names: List[str] = []
    for off in name_offsets:
        name = _read_table_string(table, names_base + off) if off >= 0 else None
        if name is None:
            raise ValueError(f"extended name offset {off} out of range")
        ext_names.append(name)

    booleans = {ext_names[i]: True for i, flag in enumerate(bool_flags) if flag == 1}
    numbers = {ext_names[n_bool + i]: v for i, v in enumerate(num_values) if v >= 0}
    strings = {
        ext_names[n_bool + n_num + i]: v for i, v in enumerate(strings_raw) if v is not None
    }
    return ExtendedCapabilities.create(booleans=booleans, numbers=numbers, strings=strings)
