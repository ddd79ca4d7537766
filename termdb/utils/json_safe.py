from __future__ import annotations

import base64
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel


def to_jsonable(obj: Any) -> Any:
    """
    Convert common Python objects to JSON-serializable equivalents.

    Security considerations:
    - bytes are base64-encoded to avoid binary injection / encoding issues.
    - does NOT execute or import anything dynamically.

    """
    if obj is None or isinstance(obj, (bool, int, float)):
        return obj

    # str Enum members are also str; emit the plain value
    if isinstance(obj, Enum):
        return to_jsonable(obj.value)

    if isinstance(obj, str):
        return obj

    if isinstance(obj, Path):
        return str(obj)

    # bytes -> base64 string
    if isinstance(obj, (bytes, bytearray)):
        return {"__bytes_b64__": base64.b64encode(bytes(obj)).decode("ascii")}

    if isinstance(obj, BaseModel):
        return to_jsonable(obj.model_dump())

    # dataclasses (field by field; read-only mappings cannot be deep-copied)
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in fields(obj)}

    # mappings (including MappingProxyType)
    if isinstance(obj, Mapping):
        return {str(k): to_jsonable(v) for k, v in obj.items()}

    # iterables (including set/frozenset/tuple/list)
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_jsonable(x) for x in obj]

    # fallback: string representation
    return str(obj)


def visible(text: str) -> str:
    """Render control characters the way infocmp prints them.

    ESC becomes \\E, other C0 controls ^X, DEL ^?, and bytes above 0x7F a
    three-digit octal escape. Backslash and caret are escaped so the output
    reads back unambiguously.
    """

    out = []
    for ch in text:
        code = ord(ch)
        if ch == "\x1b":
            out.append("\\E")
        elif ch == "\\":
            out.append("\\\\")
        elif ch == "^":
            out.append("\\^")
        elif code < 0x20:
            out.append("^" + chr(code + 0x40))
        elif code == 0x7F:
            out.append("^?")
        elif code > 0x7F:
            out.append(f"\\{code & 0xFF:03o}")
        else:
            out.append(ch)
    return "".join(out)
