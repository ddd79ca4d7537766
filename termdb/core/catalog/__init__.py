"""Capability name tables for terminfo and termcap.

The catalog is static: build it once (STANDARD_CATALOG) and share it freely.
"""

from .aliases import BOOLEAN_ALIASES, NUMBER_ALIASES, STRING_ALIASES
from .catalog import CATEGORIES, STANDARD_CATALOG, CapabilityCatalog, CapabilityCategory
from .names import BOOLEAN_NAMES, NUMBER_NAMES, STRING_NAMES

__all__ = [
    "CapabilityCatalog",
    "CapabilityCategory",
    "CATEGORIES",
    "STANDARD_CATALOG",
    "BOOLEAN_NAMES",
    "NUMBER_NAMES",
    "STRING_NAMES",
    "BOOLEAN_ALIASES",
    "NUMBER_ALIASES",
    "STRING_ALIASES",
]
