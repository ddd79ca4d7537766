from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Sequence, Union

from termdb.cli.models import (
    CapabilitiesOut,
    CompileOut,
    ErrorOut,
    ExtendedOut,
    HeaderOut,
    LocateOut,
    NodeOut,
    ResolveOut,
    TermcapErrorOut,
    TermcapOut,
    TerminfoOut,
    TparmOut,
)
from termdb.core.capset import TerminalCapabilitySet
from termdb.core.catalog import CATEGORIES, STANDARD_CATALOG
from termdb.core.errors import LocatorError, ProgramLimitError
from termdb.core.locator import (
    LocatorConfig,
    find_termcap_file,
    find_terminfo,
    list_terminals,
    load_terminal,
    read_termcap,
    read_terminfo,
    termcap_search_paths,
    terminfo_search_dirs,
)
from termdb.core.termcap import decode_termcap_escapes, parse_termcap, to_capability_set
from termdb.core.terminfo import parse_terminfo
from termdb.core.tparm import Conditional, Literal, Node, compile_source, has_parameters
from termdb.utils.json_safe import to_jsonable, visible

log = logging.getLogger("termdb.cli")


def _emit_json(model) -> None:
    print(json.dumps(to_jsonable(model), indent=2, sort_keys=True))


def _error(args: argparse.Namespace, message: str, *, kind: str | None = None, offset: int | None = None) -> int:
    if getattr(args, "json", False):
        _emit_json(ErrorOut(error=message, kind=kind, offset=offset))
    print(f"error: {message}", file=sys.stderr)
    return 2


def _locator_config(args: argparse.Namespace) -> LocatorConfig:
    return LocatorConfig(
        extra_dirs=tuple(getattr(args, "terminfo_dir", None) or ()),
        include_system=not getattr(args, "no_system", False),
    )


def _capabilities_out(caps: TerminalCapabilitySet) -> CapabilitiesOut:
    ext = None
    if not caps.extended.is_empty:
        ext = ExtendedOut(
            booleans=sorted(caps.extended.booleans),
            numbers=dict(caps.extended.numbers),
            strings={k: visible(v) for k, v in caps.extended.strings.items()},
        )
    return CapabilitiesOut(
        name=caps.name,
        names=list(caps.names),
        description=caps.description,
        booleans=sorted(caps.booleans),
        numbers=dict(sorted(caps.numbers.items())),
        strings={k: visible(v) for k, v in sorted(caps.strings.items())},
        extended=ext,
    )


def _print_capabilities(caps: CapabilitiesOut) -> None:
    """infocmp-style listing: one capability per line."""

    label = "|".join(caps.names + ([caps.description] if caps.description else []))
    print(f"{label},")
    for name in caps.booleans:
        print(f"\t{name},")
    for name, value in caps.numbers.items():
        print(f"\t{name}#{value},")
    for name, value in caps.strings.items():
        print(f"\t{name}={value},")
    if caps.extended is not None:
        print("\t# extended")
        for name in caps.extended.booleans:
            print(f"\t{name},")
        for name, value in sorted(caps.extended.numbers.items()):
            print(f"\t{name}#{value},")
        for name, value in sorted(caps.extended.strings.items()):
            print(f"\t{name}={value},")


# ---------------------------------------------------------------------------
# commands
# ---------------------------------------------------------------------------


def cmd_parse_terminfo(args: argparse.Namespace) -> int:
    """Decode a compiled terminfo file.

    Security notes:
    - File contents are untrusted; the parser bounds-checks every section.

    """

    path = os.path.abspath(args.path)
    if not os.path.isfile(path):
        return _error(args, f"file not found: {path}")
    try:
        data = read_terminfo(Path(path))
    except LocatorError as e:
        return _error(args, str(e))

    result = parse_terminfo(data)
    caps = result.capabilities
    header = result.header
    if caps is None or header is None:
        f = result.failure
        if f is None:
            return _error(args, f"{path}: no capabilities decoded")
        return _error(args, f"{path}: {f.message}", kind=f.kind.value, offset=f.offset)

    out = TerminfoOut(
        path=path,
        header=HeaderOut(
            format=header.format,
            magic=header.magic,
            name_size=header.name_size,
            bool_count=header.bool_count,
            num_count=header.num_count,
            str_count=header.str_count,
            str_table_size=header.str_table_size,
        ),
        capabilities=_capabilities_out(caps),
    )
    if args.json:
        _emit_json(out)
    else:
        print(f"# {path} ({header.format} format)")
        _print_capabilities(out.capabilities)
    return 0


def cmd_parse_termcap(args: argparse.Namespace) -> int:
    """Parse a termcap file; malformed entries are reported, not fatal."""

    path = os.path.abspath(args.path)
    if not os.path.isfile(path):
        return _error(args, f"file not found: {path}")
    try:
        text = read_termcap(Path(path))
    except LocatorError as e:
        return _error(args, str(e))

    result = parse_termcap(text, source=path)
    names = [args.name] if args.name else result.primary_names()

    entries: List[CapabilitiesOut] = []
    for name in names:
        entry = result.resolve(name)
        if entry is None:
            return _error(args, f"no entry named {name!r} in {path}")
        caps = to_capability_set(entry, convert_parameters=not args.no_convert)
        entries.append(_capabilities_out(caps))

    out = TermcapOut(
        path=path,
        entries=entries,
        errors=[
            TermcapErrorOut(kind=e.kind.value, line=e.line, entry=e.entry, message=e.message)
            for e in result.errors
        ],
    )
    if args.json:
        _emit_json(out)
    else:
        for caps in out.entries:
            _print_capabilities(caps)
    for err in out.errors:
        print(f"warning: {path}:{err.line}: {err.entry}: {err.message}", file=sys.stderr)
    return 0


def cmd_locate(args: argparse.Namespace) -> int:
    config = _locator_config(args)
    if args.list:
        for name in list_terminals(config):
            print(name)
        return 0
    if not args.terminal:
        return _error(args, "terminal name required (or use --list)")

    try:
        terminfo = find_terminfo(args.terminal, config)
    except LocatorError as e:
        return _error(args, str(e))
    termcap = find_termcap_file(config)

    out = LocateOut(
        terminal=args.terminal,
        terminfo=str(terminfo) if terminfo else None,
        termcap=str(termcap) if termcap else None,
        terminfo_dirs=[str(p) for p in terminfo_search_dirs(config)],
        termcap_paths=[str(p) for p in termcap_search_paths(config)],
    )
    if args.json:
        _emit_json(out)
    else:
        print(f"terminfo: {out.terminfo or '-'}")
        print(f"termcap:  {out.termcap or '-'}")
    return 0 if (terminfo or termcap) else 2


def cmd_show(args: argparse.Namespace) -> int:
    """Locate and decode a terminal by name (terminfo first, then termcap)."""

    try:
        caps = load_terminal(args.terminal, _locator_config(args))
    except LocatorError as e:
        return _error(args, str(e))
    if caps is None:
        return _error(args, f"terminal not found: {args.terminal}")

    out = _capabilities_out(caps)
    if args.json:
        _emit_json(out)
    else:
        _print_capabilities(out)
    return 0


def _param(text: str) -> Union[int, str]:
    # 0x1f and 0o17 take a prefix; leading zeros such as 010 stay decimal
    for base in (0, 10):
        try:
            return int(text, base)
        except ValueError:
            continue
    return text


def cmd_tparm(args: argparse.Namespace) -> int:
    """Expand a parameterized string, like `tput` for a literal capability."""

    source = decode_termcap_escapes(args.source) if args.escapes else args.source
    params: Sequence[Union[int, str]] = [_param(p) for p in args.params]
    try:
        program = compile_source(source)
    except ProgramLimitError as e:
        return _error(args, str(e))
    output = program.execute(*params)

    if args.json:
        _emit_json(
            TparmOut(
                source=visible(source),
                params=list(params),
                output=output,
                visible=visible(output),
            )
        )
    elif args.raw:
        sys.stdout.write(output)
    else:
        print(visible(output))
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    catalog = STANDARD_CATALOG
    canonical = catalog.resolve(args.name, args.category)
    out = ResolveOut(
        name=args.name,
        canonical=canonical,
        category=catalog.category_of(canonical),
        index=catalog.index_of(canonical),
        alias=catalog.alias_for(canonical),
    )
    if args.json:
        _emit_json(out)
    else:
        print(f"{out.name} -> {out.canonical} ({out.category or 'unknown'}, index {out.index}, termcap {out.alias or '-'})")
    return 0 if out.category else 2


def _node_out(node: Node) -> NodeOut:
    if isinstance(node, Literal):
        return NodeOut(type="literal", text=visible(node.text))
    if isinstance(node, Conditional):
        return NodeOut(
            type="conditional",
            condition=[_node_out(n) for n in node.condition],
            then=[_node_out(n) for n in node.then],
            otherwise=[_node_out(n) for n in node.otherwise],
        )
    return NodeOut(type="operation", op=node.kind, arg=to_jsonable(node.arg))


def _print_tree(nodes: List[NodeOut], indent: int = 0) -> None:
    pad = "  " * indent
    for n in nodes:
        if n.type == "literal":
            print(f"{pad}text {n.text!r}")
        elif n.type == "operation":
            print(f"{pad}{n.op}" + (f" {n.arg}" if n.arg is not None else ""))
        else:
            print(f"{pad}if")
            _print_tree(n.condition, indent + 1)
            print(f"{pad}then")
            _print_tree(n.then, indent + 1)
            if n.otherwise:
                print(f"{pad}else")
                _print_tree(n.otherwise, indent + 1)


def cmd_compile(args: argparse.Namespace) -> int:
    """Show the instruction tree of a capability string."""

    source = decode_termcap_escapes(args.source) if args.escapes else args.source
    try:
        program = compile_source(source)
    except ProgramLimitError as e:
        return _error(args, str(e))

    out = CompileOut(
        source=visible(source),
        node_count=program.node_count,
        has_parameters=has_parameters(source),
        nodes=[_node_out(n) for n in program.nodes],
    )
    if args.json:
        _emit_json(out)
    else:
        print(f"# {out.node_count} nodes, parameters: {'yes' if out.has_parameters else 'no'}")
        _print_tree(out.nodes)
    return 0


# ---------------------------------------------------------------------------
# parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="termdb", description="Terminal capability database tools")
    p.add_argument(
        "--log-level",
        default=os.environ.get("TERMDB_LOG_LEVEL", "WARNING"),
        help="Logging level (default: $TERMDB_LOG_LEVEL or WARNING)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    def _json_flag(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--json", action="store_true", help="Emit JSON")

    def _locator_flags(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "--terminfo-dir",
            action="append",
            default=None,
            help="Extra terminfo directory (repeatable)",
        )
        sp.add_argument("--no-system", action="store_true", help="Skip system database locations")

    pt = sub.add_parser("parse-terminfo", help="Decode a compiled terminfo file")
    pt.add_argument("path", help="Path to a compiled terminfo entry")
    _json_flag(pt)
    pt.set_defaults(func=cmd_parse_terminfo)

    pc = sub.add_parser("parse-termcap", help="Parse a termcap text file")
    pc.add_argument("path", help="Path to a termcap file")
    pc.add_argument("--name", default=None, help="Only show this entry")
    pc.add_argument(
        "--no-convert",
        action="store_true",
        help="Keep termcap %% codes instead of converting them to terminfo syntax",
    )
    _json_flag(pc)
    pc.set_defaults(func=cmd_parse_termcap)

    lo = sub.add_parser("locate", help="Show where a terminal's database entry lives")
    lo.add_argument("terminal", nargs="?", default=None)
    lo.add_argument("--list", action="store_true", help="List every compiled terminal found")
    _locator_flags(lo)
    _json_flag(lo)
    lo.set_defaults(func=cmd_locate)

    sh = sub.add_parser("show", help="Locate and decode a terminal by name")
    sh.add_argument("terminal", nargs="?", default=os.environ.get("TERM"))
    _locator_flags(sh)
    _json_flag(sh)
    sh.set_defaults(func=cmd_show)

    tp = sub.add_parser("tparm", help="Expand a parameterized capability string")
    tp.add_argument("source", help="Capability string, e.g. '\\E[%%i%%p1%%d;%%p2%%dH'")
    tp.add_argument("params", nargs="*", help="Parameters (integers, or strings for %%s)")
    tp.add_argument(
        "--no-escapes",
        dest="escapes",
        action="store_false",
        help="Do not decode \\E, ^X and octal escapes in SOURCE",
    )
    tp.add_argument("--raw", action="store_true", help="Write the raw bytes instead of a visible rendering")
    _json_flag(tp)
    tp.set_defaults(func=cmd_tparm)

    rs = sub.add_parser("resolve", help="Resolve a capability name or termcap code")
    rs.add_argument("name")
    rs.add_argument("--category", choices=list(CATEGORIES), default=None)
    _json_flag(rs)
    rs.set_defaults(func=cmd_resolve)

    cp = sub.add_parser("compile", help="Show the compiled instruction tree of a capability string")
    cp.add_argument("source")
    cp.add_argument("--no-escapes", dest="escapes", action="store_false")
    _json_flag(cp)
    cp.set_defaults(func=cmd_compile)

    return p


def main(argv: List[str] | None = None) -> int:
    """CLI entry."""
    parser = build_parser()
    args = parser.parse_args(argv)
    level = logging.getLevelName(str(args.log_level).upper())
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.WARNING,
        format="%(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
    log.debug("cli_command", extra={"command": args.cmd})
    if args.cmd == "show" and not args.terminal:
        return _error(args, "terminal name required ($TERM is not set)")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
