from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from termdb.core.capset import TerminalCapabilitySet
from termdb.core.config import Limits
from termdb.core.errors import LocatorError
from termdb.core.termcap import parse_termcap
from termdb.core.terminfo import parse_terminfo

log = logging.getLogger("termdb.locator")

DEFAULT_TERMINFO_DIR = "/usr/share/terminfo"

SYSTEM_TERMINFO_DIRS: Tuple[str, ...] = (
    "/etc/terminfo",
    "/lib/terminfo",
    "/usr/share/terminfo",
    "/usr/lib/terminfo",
    "/usr/share/lib/terminfo",
)

SYSTEM_TERMCAP_FILES: Tuple[str, ...] = (
    "/usr/share/misc/termcap",
    "/etc/termcap",
)

_TERMPATH_SPLIT = re.compile(r"[: ]+")


@dataclass(frozen=True, slots=True)
class LocatorConfig:
    """Where to look for terminal databases.

    - extra_dirs: additional terminfo directories, searched after the
      environment and before the system directories
    - home: home directory for ~/.terminfo and ~/.termcap (default: $HOME)
    - include_system: search the well-known system locations
    - environ: environment mapping (default: os.environ); tests pass a dict

    """

    extra_dirs: Tuple[str, ...] = ()
    home: Optional[str] = None
    include_system: bool = True
    environ: Optional[Mapping[str, str]] = None

    def env(self) -> Mapping[str, str]:
        return os.environ if self.environ is None else self.environ

    def home_dir(self) -> Optional[Path]:
        home = self.home if self.home is not None else self.env().get("HOME")
        return Path(home) if home else None


def _dedupe(paths: List[Path]) -> List[Path]:
    seen = set()
    out: List[Path] = []
    for p in paths:
        key = os.path.normpath(str(p))
        if key in seen:
            continue
        seen.add(key)
        out.append(p)
    return out


def _check_name(name: str) -> None:
    if not name or name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        raise LocatorError(f"invalid terminal name: {name!r}")


# ---------------------------------------------------------------------------
# terminfo
# ---------------------------------------------------------------------------


def terminfo_search_dirs(config: Optional[LocatorConfig] = None) -> List[Path]:
    """Directories searched for compiled terminfo, in priority order.

    $TERMINFO, ~/.terminfo, each element of $TERMINFO_DIRS (an empty element
    means the default directory), extra_dirs, then the system directories.
    """

    cfg = config or LocatorConfig()
    env = cfg.env()
    dirs: List[Path] = []

    terminfo = env.get("TERMINFO")
    if terminfo:
        dirs.append(Path(terminfo))

    home = cfg.home_dir()
    if home is not None:
        dirs.append(home / ".terminfo")

    terminfo_dirs = env.get("TERMINFO_DIRS")
    if terminfo_dirs is not None:
        for part in terminfo_dirs.split(":"):
            dirs.append(Path(part or DEFAULT_TERMINFO_DIR))

    dirs.extend(Path(d) for d in cfg.extra_dirs)
    if cfg.include_system:
        dirs.extend(Path(d) for d in SYSTEM_TERMINFO_DIRS)
    return _dedupe(dirs)


def find_terminfo(name: str, config: Optional[LocatorConfig] = None) -> Optional[Path]:
    """Return the first compiled entry for `name`, or None.

    Each directory is tried with the first-letter layout (x/xterm) and the
    hexadecimal layout used on macOS (78/xterm).

    Raises LocatorError for names that could escape the database directory.
    """

    _check_name(name)
    letter = name[0]
    for base in terminfo_search_dirs(config):
        for sub in (letter, format(ord(letter), "x")):
            candidate = base / sub / name
            if candidate.is_file():
                log.debug("terminfo_found", extra={"terminal": name, "path": str(candidate)})
                return candidate
    return None


def list_terminals(config: Optional[LocatorConfig] = None) -> List[str]:
    """Sorted names of every compiled entry in the search directories."""

    names = set()
    for base in terminfo_search_dirs(config):
        if not base.is_dir():
            continue
        try:
            subdirs = list(base.iterdir())
        except OSError:
            continue
        for sub in subdirs:
            if not sub.is_dir():
                continue
            try:
                names.update(p.name for p in sub.iterdir() if p.is_file())
            except OSError:
                continue
    return sorted(names)


# ---------------------------------------------------------------------------
# termcap
# ---------------------------------------------------------------------------


def termcap_search_paths(config: Optional[LocatorConfig] = None) -> List[Path]:
    """Termcap files in priority order.

    $TERMCAP (only when it holds an absolute path), each element of
    $TERMPATH, ~/.termcap, then the system files.
    """

    cfg = config or LocatorConfig()
    env = cfg.env()
    paths: List[Path] = []

    termcap = env.get("TERMCAP", "")
    if termcap.startswith("/"):
        paths.append(Path(termcap))

    termpath = env.get("TERMPATH", "")
    for part in _TERMPATH_SPLIT.split(termpath.strip()):
        if part:
            paths.append(Path(part))

    home = cfg.home_dir()
    if home is not None:
        paths.append(home / ".termcap")

    if cfg.include_system:
        paths.extend(Path(p) for p in SYSTEM_TERMCAP_FILES)
    return _dedupe(paths)


def find_termcap_file(config: Optional[LocatorConfig] = None) -> Optional[Path]:
    for path in termcap_search_paths(config):
        if path.is_file():
            return path
    return None


# ---------------------------------------------------------------------------
# loading
# ---------------------------------------------------------------------------


def read_terminfo(path: Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise LocatorError(f"cannot read {path}: {e}") from e


def read_termcap(path: Path) -> str:
    try:
        # termcap files are byte-oriented; latin-1 maps every byte
        return Path(path).read_text(encoding="latin-1")
    except OSError as e:
        raise LocatorError(f"cannot read {path}: {e}") from e


def load_terminal(
    name: str,
    config: Optional[LocatorConfig] = None,
    *,
    limits: Optional[Limits] = None,
) -> Optional[TerminalCapabilitySet]:
    """Find and parse `name`: compiled terminfo first, then termcap.

    An inline $TERMCAP entry (a value that is not a path) is consulted before
    the termcap files. Unreadable or corrupt files are logged and skipped.
    Returns None when no source defines the terminal.
    """

    cfg = config or LocatorConfig()
    _check_name(name)

    path = find_terminfo(name, cfg)
    if path is not None:
        try:
            result = parse_terminfo(read_terminfo(path))
        except LocatorError as e:
            log.warning("terminfo_unreadable", extra={"terminal": name, "path": str(path), "detail": str(e)})
        else:
            if result.ok:
                return result.capabilities
            failure = result.failure
            log.warning(
                "terminfo_corrupt",
                extra={
                    "terminal": name,
                    "path": str(path),
                    "kind": failure.kind.value if failure else None,
                    "offset": failure.offset if failure else None,
                },
            )

    sources: List[Tuple[str, str]] = []
    inline = cfg.env().get("TERMCAP", "")
    if inline and not inline.startswith("/"):
        sources.append(("$TERMCAP", inline))

    for termcap_path in termcap_search_paths(cfg):
        if not termcap_path.is_file():
            continue
        try:
            sources.append((str(termcap_path), read_termcap(termcap_path)))
        except LocatorError as e:
            log.warning("termcap_unreadable", extra={"path": str(termcap_path), "detail": str(e)})

    searched = 0
    for source, text in sources:
        result_tc = parse_termcap(text, source=source, limits=limits)
        caps = result_tc.capability_set(name, convert_parameters=True)
        if caps is not None:
            log.debug("termcap_found", extra={"terminal": name, "source": source})
            return caps
        searched += 1

    log.info("terminal_not_found", extra={"terminal": name, "searched": searched})
    return None
