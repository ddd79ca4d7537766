from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Literal, Mapping, Optional, Sequence, Tuple

from .aliases import BOOLEAN_ALIASES, NUMBER_ALIASES, STRING_ALIASES
from .names import BOOLEAN_NAMES, NUMBER_NAMES, STRING_NAMES

CapabilityCategory = Literal["boolean", "number", "string"]

CATEGORIES: Tuple[CapabilityCategory, ...] = ("boolean", "number", "string")


class CapabilityCatalog:
    """Immutable capability name tables plus termcap alias maps.

    A catalog answers four questions about a name: what its canonical
    terminfo name is, which category it belongs to, where it sits in that
    category's ordered list (the binary field index), and which termcap code
    refers to it.

    Security notes:
    - Names coming from databases are untrusted strings; every lookup is a
      plain dict lookup and never evaluates or interprets the name.

    Time:  O(1) per lookup after an O(n) build
    Space: O(n) for n known names
    """

    def __init__(
        self,
        *,
        booleans: Sequence[str],
        numbers: Sequence[str],
        strings: Sequence[str],
        boolean_aliases: Mapping[str, str],
        number_aliases: Mapping[str, str],
        string_aliases: Mapping[str, str],
    ) -> None:
        self._names: Dict[str, Tuple[str, ...]] = {
            "boolean": tuple(booleans),
            "number": tuple(numbers),
            "string": tuple(strings),
        }

        # canonical name -> (category, index)
        positions: Dict[str, Tuple[CapabilityCategory, int]] = {}
        for category in CATEGORIES:
            for index, name in enumerate(self._names[category]):
                if name in positions:
                    raise ValueError(f"duplicate capability name: {name}")
                positions[name] = (category, index)
        self._positions = MappingProxyType(positions)

        aliases: Dict[str, Mapping[str, str]] = {}
        reverse: Dict[str, str] = {}
        for category, table in zip(CATEGORIES, (boolean_aliases, number_aliases, string_aliases)):
            checked: Dict[str, str] = {}
            for short, canonical in table.items():
                found = positions.get(canonical)
                if found is None or found[0] != category:
                    raise ValueError(f"alias {short!r} points at unknown {category} capability {canonical!r}")
                checked[short] = canonical
                reverse.setdefault(canonical, short)
            aliases[category] = MappingProxyType(checked)
        self._aliases = MappingProxyType(aliases)
        self._reverse = MappingProxyType(reverse)

    # --- Lookups ---

    def resolve(self, name: str, category: Optional[CapabilityCategory] = None) -> str:
        """Return the canonical name for `name`.

        Canonical names map to themselves, termcap codes map to their long
        name and anything unknown is returned unchanged, so resolve() is
        idempotent. Passing `category` disambiguates the few codes that are
        shared between categories.
        """

        if name in self._positions:
            return name
        if category is not None:
            return self._aliases[category].get(name, name)
        for cat in CATEGORIES:
            canonical = self._aliases[cat].get(name)
            if canonical is not None:
                return canonical
        return name

    def category_of(self, name: str) -> Optional[CapabilityCategory]:
        found = self._positions.get(self.resolve(name))
        return found[0] if found else None

    def index_of(self, name: str) -> int:
        """Position of `name` within its category list, or -1 if unknown."""
        found = self._positions.get(self.resolve(name))
        return found[1] if found else -1

    def alias_for(self, canonical: str) -> Optional[str]:
        """Termcap code for a canonical name (None when it has none)."""
        return self._reverse.get(self.resolve(canonical))

    def name_at(self, category: CapabilityCategory, index: int) -> Optional[str]:
        """Canonical name stored at `index`, or None past the end of the table."""
        names = self._names[category]
        if 0 <= index < len(names):
            return names[index]
        return None

    def names_for(self, category: CapabilityCategory) -> Tuple[str, ...]:
        return self._names[category]

    def aliases_for(self, category: CapabilityCategory) -> Mapping[str, str]:
        return self._aliases[category]

    def count(self, category: CapabilityCategory) -> int:
        return len(self._names[category])

    def is_capability(self, name: str) -> bool:
        return self.resolve(name) in self._positions

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_capability(name)

    def __repr__(self) -> str:
        return (
            f"CapabilityCatalog(booleans={self.count('boolean')}, "
            f"numbers={self.count('number')}, strings={self.count('string')})"
        )


STANDARD_CATALOG = CapabilityCatalog(
    booleans=BOOLEAN_NAMES,
    numbers=NUMBER_NAMES,
    strings=STRING_NAMES,
    boolean_aliases=BOOLEAN_ALIASES,
    number_aliases=NUMBER_ALIASES,
    string_aliases=STRING_ALIASES,
)
