from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union


class ErrorOut(BaseModel):
    """Standard error payload for --json output."""

    error: str
    kind: Optional[str] = None
    offset: Optional[int] = None


class HeaderOut(BaseModel):
    """Decoded terminfo header."""

    format: str
    magic: int
    name_size: int
    bool_count: int
    num_count: int
    str_count: int
    str_table_size: int


class ExtendedOut(BaseModel):
    booleans: List[str] = Field(default_factory=list)
    numbers: Dict[str, int] = Field(default_factory=dict)
    strings: Dict[str, str] = Field(default_factory=dict)


class CapabilitiesOut(BaseModel):
    """A capability set; string values are rendered with visible escapes."""

    name: str
    names: List[str] = Field(default_factory=list)
    description: str = ""
    booleans: List[str] = Field(default_factory=list)
    numbers: Dict[str, int] = Field(default_factory=dict)
    strings: Dict[str, str] = Field(default_factory=dict)
    extended: Optional[ExtendedOut] = None


class TerminfoOut(BaseModel):
    path: str
    header: HeaderOut
    capabilities: CapabilitiesOut


class TermcapErrorOut(BaseModel):
    kind: str
    line: int
    entry: str
    message: str


class TermcapOut(BaseModel):
    path: str
    entries: List[CapabilitiesOut] = Field(default_factory=list)
    errors: List[TermcapErrorOut] = Field(default_factory=list)


class LocateOut(BaseModel):
    terminal: str
    terminfo: Optional[str] = None
    termcap: Optional[str] = None
    terminfo_dirs: List[str] = Field(default_factory=list)
    termcap_paths: List[str] = Field(default_factory=list)


class ResolveOut(BaseModel):
    name: str
    canonical: str
    category: Optional[str] = None
    index: int = -1
    alias: Optional[str] = None


class NodeOut(BaseModel):
    """One instruction in a compiled capability tree."""

    type: str
    text: Optional[str] = None
    op: Optional[str] = None
    arg: Any = None
    condition: List["NodeOut"] = Field(default_factory=list)
    then: List["NodeOut"] = Field(default_factory=list)
    otherwise: List["NodeOut"] = Field(default_factory=list)


class CompileOut(BaseModel):
    source: str
    node_count: int
    has_parameters: bool
    nodes: List[NodeOut] = Field(default_factory=list)


class TparmOut(BaseModel):
    source: str
    params: List[Union[int, str]] = Field(default_factory=list)
    output: str
    visible: str


NodeOut.model_rebuild()
