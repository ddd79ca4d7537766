from .encoder import choose_format, encode_terminfo
from .parser import (
    EXTENDED_MAGIC,
    LEGACY_MAGIC,
    TerminfoFailure,
    TerminfoFailureKind,
    TerminfoFormat,
    TerminfoHeader,
    TerminfoParseResult,
    get_terminfo_format,
    is_valid_terminfo,
    parse_terminfo,
)

__all__ = [
    "LEGACY_MAGIC",
    "EXTENDED_MAGIC",
    "TerminfoFormat",
    "TerminfoHeader",
    "TerminfoFailure",
    "TerminfoFailureKind",
    "TerminfoParseResult",
    "parse_terminfo",
    "is_valid_terminfo",
    "get_terminfo_format",
    "encode_terminfo",
    "choose_format",
]
