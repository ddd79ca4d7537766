"""Compiler and stack machine for terminfo parameterized strings."""

from .cache import ProgramCache, compile_capability, tparm
from .compiler import compile_source, has_parameters
from .program import CompiledCapability, Conditional, FormatSpec, Literal, Node, Operation

__all__ = [
    "ProgramCache",
    "CompiledCapability",
    "Conditional",
    "FormatSpec",
    "Literal",
    "Node",
    "Operation",
    "compile_capability",
    "compile_source",
    "has_parameters",
    "tparm",
]
