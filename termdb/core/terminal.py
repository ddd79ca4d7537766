from __future__ import annotations

from typing import Mapping, Optional

from termdb.core.acs import parse_acsc
from termdb.core.capset import TerminalCapabilitySet
from termdb.core.catalog import STANDARD_CATALOG, CapabilityCatalog
from termdb.core.errors import CapabilityNotFound
from termdb.core.termcap import parse_termcap
from termdb.core.terminfo import parse_terminfo
from termdb.core.tparm import ProgramCache
from termdb.core.tparm.program import Value


class Terminal:
    """tput-style access to one terminal's capabilities.

    Names may be canonical terminfo names or termcap codes. Parameterized
    strings are compiled through `cache`; pass a shared ProgramCache to
    reuse compiled programs across Terminal instances.
    """

    def __init__(
        self,
        capabilities: TerminalCapabilitySet,
        cache: Optional[ProgramCache] = None,
        *,
        catalog: CapabilityCatalog = STANDARD_CATALOG,
    ) -> None:
        self.capabilities = capabilities
        self.cache = cache if cache is not None else ProgramCache()
        self.catalog = catalog

    @property
    def name(self) -> str:
        return self.capabilities.name

    @classmethod
    def from_terminfo(cls, data: bytes, cache: Optional[ProgramCache] = None) -> "Terminal":
        """Raises TerminfoParseError when `data` is not a usable entry."""
        return cls(parse_terminfo(data).unwrap(), cache)

    @classmethod
    def from_termcap(cls, text: str, name: str, cache: Optional[ProgramCache] = None) -> "Terminal":
        """Raises CapabilityNotFound when `text` has no entry called `name`."""
        caps = parse_termcap(text).capability_set(name, convert_parameters=True)
        if caps is None:
            raise CapabilityNotFound(f"no termcap entry named {name!r}")
        return cls(caps, cache)

    def has(self, name: str) -> bool:
        return self.capabilities.has(name, catalog=self.catalog)

    def boolean(self, name: str) -> bool:
        return self.capabilities.get_boolean(name, catalog=self.catalog)

    def number(self, name: str) -> Optional[int]:
        return self.capabilities.get_number(name, catalog=self.catalog)

    def string(self, name: str) -> Optional[str]:
        return self.capabilities.get_string(name, catalog=self.catalog)

    def require(self, name: str) -> str:
        value = self.string(name)
        if value is None:
            raise CapabilityNotFound(f"{self.name}: missing string capability {name!r}")
        return value

    def acs_map(self) -> Mapping[str, str]:
        """Line-drawing code to the character this terminal sends for it (from acs_chars)."""
        return parse_acsc(self.string("acs_chars") or "")

    def tparm(self, name: str, *params: Value) -> Optional[str]:
        """Expand string capability `name`; None when the terminal lacks it."""
        source = self.string(name)
        if source is None:
            return None
        return self.cache.compile(source).execute(*params)

    def __repr__(self) -> str:
        return f"Terminal({self.name!r})"
