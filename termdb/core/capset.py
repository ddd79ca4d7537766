from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence

from termdb.core.catalog import STANDARD_CATALOG, CapabilityCatalog

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def _freeze_booleans(values: Optional[Mapping[str, bool]]) -> Mapping[str, bool]:
    if not values:
        return _EMPTY
    return MappingProxyType({k: True for k, v in values.items() if v})


def _freeze_values(values: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if not values:
        return _EMPTY
    return MappingProxyType({k: v for k, v in values.items() if v is not None})


@dataclass(frozen=True, slots=True)
class ExtendedCapabilities:
    """User-defined (ncurses extended) capabilities, keyed by their raw names."""

    booleans: Mapping[str, bool] = field(default_factory=lambda: _EMPTY)
    numbers: Mapping[str, int] = field(default_factory=lambda: _EMPTY)
    strings: Mapping[str, str] = field(default_factory=lambda: _EMPTY)

    @staticmethod
    def create(
        *,
        booleans: Optional[Mapping[str, bool]] = None,
        numbers: Optional[Mapping[str, int]] = None,
        strings: Optional[Mapping[str, str]] = None,
    ) -> "ExtendedCapabilities":
        return ExtendedCapabilities(
            booleans=_freeze_booleans(booleans),
            numbers=_freeze_values(numbers),
            strings=_freeze_values(strings),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.booleans or self.numbers or self.strings)

    def names(self) -> List[str]:
        return list(self.booleans) + list(self.numbers) + list(self.strings)


EMPTY_EXTENDED = ExtendedCapabilities()


@dataclass(frozen=True, slots=True)
class TerminalCapabilitySet:
    """Normalized capabilities of one terminal entry.

    Keys of booleans/numbers/strings are canonical terminfo names regardless
    of whether the entry came from a binary terminfo file or termcap text.
    Absence is key-absence: a boolean that is not set, or a number/string
    that is missing or cancelled, has no key at all.

    Use create() rather than the constructor when the maps come from
    untrusted or mutable sources; it copies them and drops false/None values.
    """

    name: str
    names: Sequence[str]
    description: str
    booleans: Mapping[str, bool]
    numbers: Mapping[str, int]
    strings: Mapping[str, str]
    extended: ExtendedCapabilities = EMPTY_EXTENDED

    @staticmethod
    def create(
        *,
        names: Sequence[str],
        description: str = "",
        booleans: Optional[Mapping[str, bool]] = None,
        numbers: Optional[Mapping[str, int]] = None,
        strings: Optional[Mapping[str, str]] = None,
        extended: Optional[ExtendedCapabilities] = None,
    ) -> "TerminalCapabilitySet":
        cleaned = tuple(n for n in names if n)
        return TerminalCapabilitySet(
            name=cleaned[0] if cleaned else "unknown",
            names=cleaned,
            description=description,
            booleans=_freeze_booleans(booleans),
            numbers=_freeze_values(numbers),
            strings=_freeze_values(strings),
            extended=extended or EMPTY_EXTENDED,
        )

    # --- Queries ---

    def has(self, name: str, *, catalog: CapabilityCatalog = STANDARD_CATALOG) -> bool:
        canonical = catalog.resolve(name)
        if canonical in self.booleans or canonical in self.numbers or canonical in self.strings:
            return True
        ext = self.extended
        return name in ext.booleans or name in ext.numbers or name in ext.strings

    def get_boolean(self, name: str, *, catalog: CapabilityCatalog = STANDARD_CATALOG) -> bool:
        canonical = catalog.resolve(name, "boolean")
        return bool(self.booleans.get(canonical) or self.extended.booleans.get(name))

    def get_number(self, name: str, *, catalog: CapabilityCatalog = STANDARD_CATALOG) -> Optional[int]:
        value = self.numbers.get(catalog.resolve(name, "number"))
        if value is None:
            value = self.extended.numbers.get(name)
        return value

    def get_string(self, name: str, *, catalog: CapabilityCatalog = STANDARD_CATALOG) -> Optional[str]:
        value = self.strings.get(catalog.resolve(name, "string"))
        if value is None:
            value = self.extended.strings.get(name)
        return value

    # --- Derivation ---

    def merged_with(self, overrides: "TerminalCapabilitySet") -> "TerminalCapabilitySet":
        """Shallow merge: every capability in `overrides` replaces ours.

        Identity (names/description) comes from `overrides` unless it is
        anonymous, in which case ours is kept. Typical use is layering parsed
        database data over a hand-authored fallback record.
        """

        if overrides.name == "unknown" and not overrides.names:
            names: Sequence[str] = self.names
            description = self.description
        else:
            names = overrides.names
            description = overrides.description or self.description

        ext = ExtendedCapabilities.create(
            booleans={**self.extended.booleans, **overrides.extended.booleans},
            numbers={**self.extended.numbers, **overrides.extended.numbers},
            strings={**self.extended.strings, **overrides.extended.strings},
        )
        return TerminalCapabilitySet.create(
            names=names,
            description=description,
            booleans={**self.booleans, **overrides.booleans},
            numbers={**self.numbers, **overrides.numbers},
            strings={**self.strings, **overrides.strings},
            extended=ext,
        )

    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict view with sorted keys (suitable for JSON)."""

        out: Dict[str, Any] = {
            "name": self.name,
            "names": list(self.names),
            "description": self.description,
            "booleans": sorted(self.booleans),
            "numbers": dict(sorted(self.numbers.items())),
            "strings": dict(sorted(self.strings.items())),
        }
        if not self.extended.is_empty:
            out["extended"] = {
                "booleans": sorted(self.extended.booleans),
                "numbers": dict(sorted(self.extended.numbers.items())),
                "strings": dict(sorted(self.extended.strings.items())),
            }
        return out
