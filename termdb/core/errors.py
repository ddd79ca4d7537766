class TermdbError(Exception):
    """
    Base exception for all termdb failures.
    """

    pass


class TerminfoParseError(TermdbError):
    """
    Raised by convenience constructors when a terminfo buffer cannot be decoded.

    The parser itself never raises; it returns a tagged result. This exception
    wraps that result for callers that want a hard failure instead.
    """

    def __init__(self, kind: str, offset: int, message: str):
        super().__init__(f"{kind} at offset {offset}: {message}")
        self.kind = kind
        self.offset = offset


class CapabilityNotFound(TermdbError, KeyError):
    """
    Raised when a required capability or terminal entry is absent.
    """

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "capability not found"


class ProgramLimitError(TermdbError, ValueError):
    """
    Raised when a capability string exceeds the compile limits
    (instruction count or conditional nesting depth).
    """

    pass


class LocatorError(TermdbError):
    """
    Raised when a terminal database file cannot be located or read.
    """

    pass
