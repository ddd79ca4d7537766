from __future__ import annotations

import logging
import struct
from typing import Dict, List, Mapping, Optional, Tuple

from termdb.core.capset import ExtendedCapabilities, TerminalCapabilitySet
from termdb.core.catalog import STANDARD_CATALOG, CapabilityCatalog, CapabilityCategory

from .parser import EXTENDED_HEADER, EXTENDED_MAGIC, HEADER, LEGACY_MAGIC, TerminfoFormat

log = logging.getLogger("termdb.terminfo")

_MAX_SHORT = 0x7FFF
_MAX_INT = 0x7FFFFFFF


def _dense(
    values: Mapping[str, object], category: CapabilityCategory, catalog: CapabilityCatalog
) -> Dict[int, object]:
    """Map known capability names to their field index; unknown names are skipped."""

    out: Dict[int, object] = {}
    for name, value in values.items():
        canonical = catalog.resolve(name, category)
        if catalog.category_of(canonical) != category:
            log.debug("terminfo_encode_skipped", extra={"capability": name, "category": category})
            continue
        out[catalog.index_of(canonical)] = value
    return out


def _pad(buf: bytearray) -> None:
    if len(buf) % 2:
        buf.append(0)


def _clamp(value: int, limit: int) -> int:
    if value > limit:
        log.debug("terminfo_number_clamped", extra={"value": value, "limit": limit})
        return limit
    return value


def _encode_names(caps: TerminalCapabilitySet) -> bytes:
    parts = list(caps.names)
    if caps.description or len(parts) >= 2:
        if not parts:
            # a lone segment is read back as a name
            parts.append("")
        # With two or more segments the last one is always read back as the description.
        parts.append(caps.description)
    return "|".join(parts).encode("latin-1") + b"\x00"


def _string_table(values: List[Optional[str]]) -> Tuple[List[int], bytes]:
    offsets: List[int] = []
    table = bytearray()
    for value in values:
        if value is None:
            offsets.append(-1)
            continue
        offsets.append(len(table))
        table += value.encode("latin-1") + b"\x00"
    return offsets, bytes(table)


def choose_format(caps: TerminalCapabilitySet) -> TerminfoFormat:
    """Pick the smallest format that holds every number without clamping."""

    all_numbers = list(caps.numbers.values()) + list(caps.extended.numbers.values())
    if any(v > _MAX_SHORT for v in all_numbers):
        return "extended"
    return "legacy"


def encode_terminfo(
    caps: TerminalCapabilitySet,
    *,
    format: Optional[TerminfoFormat] = None,
    catalog: CapabilityCatalog = STANDARD_CATALOG,
    include_extended: bool = True,
) -> bytes:
    """Serialise a capability set into compiled terminfo bytes.

    This is the inverse of parse_terminfo(). Numbers that do not fit the
    chosen format are clamped, as tic does. Capabilities that the catalog
    does not know are skipped unless they live in `caps.extended`.

    Raises ValueError when the string table outgrows 16-bit offsets or a
    value cannot be represented in latin-1.
    """

    fmt = format or choose_format(caps)
    if fmt not in ("legacy", "extended"):
        raise ValueError(f"unknown terminfo format: {fmt!r}")
    magic = EXTENDED_MAGIC if fmt == "extended" else LEGACY_MAGIC
    num_code = "<i" if fmt == "extended" else "<h"
    num_limit = _MAX_INT if fmt == "extended" else _MAX_SHORT

    names = _encode_names(caps)
    bools = _dense(caps.booleans, "boolean", catalog)
    nums = _dense(caps.numbers, "number", catalog)
    strs = _dense(caps.strings, "string", catalog)

    bool_count = max(bools, default=-1) + 1
    num_count = max(nums, default=-1) + 1
    str_count = max(strs, default=-1) + 1

    str_offsets, table = _string_table([strs.get(i) for i in range(str_count)])  # type: ignore[misc]
    if len(table) > _MAX_SHORT:
        raise ValueError(f"string table too large ({len(table)} bytes)")

    buf = bytearray(HEADER.pack(magic, len(names), bool_count, num_count, str_count, len(table)))
    buf += names
    buf += bytes(1 if bools.get(i) else 0 for i in range(bool_count))
    _pad(buf)
    for i in range(num_count):
        value = nums.get(i)
        buf += struct.pack(num_code, -1 if value is None else _clamp(int(value), num_limit))  # type: ignore[arg-type]
    buf += struct.pack(f"<{str_count}h", *str_offsets)
    buf += table

    if include_extended and not caps.extended.is_empty:
        _pad(buf)
        buf += _encode_extended(caps.extended, num_code, num_limit)

    log.debug(
        "terminfo_encoded",
        extra={"terminal": caps.name, "format": fmt, "size": len(buf)},
    )
    return bytes(buf)


def _encode_extended(ext: ExtendedCapabilities, num_code: str, num_limit: int) -> bytes:
    bool_names = list(ext.booleans)
    num_names = list(ext.numbers)
    str_names = list(ext.strings)

    value_offsets, value_table = _string_table([ext.strings[n] for n in str_names])
    name_offsets, name_table = _string_table(bool_names + num_names + str_names)  # type: ignore[arg-type]
    table = value_table + name_table
    if len(table) > _MAX_SHORT:
        raise ValueError(f"extended string table too large ({len(table)} bytes)")

    out = bytearray(
        EXTENDED_HEADER.pack(
            len(bool_names),
            len(num_names),
            len(str_names),
            len(str_names) + len(name_offsets),
            len(table),
        )
    )
    out += b"\x01" * len(bool_names)
    # header is 10 bytes and starts on an even offset, so parity follows the count
    _pad(out)
    for n in num_names:
        out += struct.pack(num_code, _clamp(int(ext.numbers[n]), num_limit))
    out += struct.pack(f"<{len(value_offsets)}h", *value_offsets)
    out += struct.pack(f"<{len(name_offsets)}h", *name_offsets)
    out += table
    return bytes(out)
