from .captoinfo import captoinfo, needs_conversion
from .escapes import decode_termcap_escapes
from .parser import (
    TermcapEntry,
    TermcapError,
    TermcapErrorKind,
    TermcapParseResult,
    parse_termcap,
    to_capability_set,
)

__all__ = [
    "TermcapEntry",
    "TermcapError",
    "TermcapErrorKind",
    "TermcapParseResult",
    "parse_termcap",
    "to_capability_set",
    "decode_termcap_escapes",
    "captoinfo",
    "needs_conversion",
]
