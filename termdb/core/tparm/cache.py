from __future__ import annotations

import logging
import threading
from typing import Dict, Mapping, Optional

from termdb.core.config import Limits

from .compiler import compile_source
from .program import CompiledCapability, Value

log = logging.getLogger("termdb.tparm")


class ProgramCache:
    """Thread-safe memo of compiled capability strings, keyed by exact source.

    There is no process-wide instance: create one per consumer (or per test)
    and pass it where programs are needed.

    Security notes:
    - Entries are never evicted; callers that feed arbitrary untrusted
      strings should clear() periodically or use a short-lived cache.
    - Compilation runs outside the lock. Two threads racing on the same
      source both compile, but only the first result is stored and both
      receive that same object.

    """

    def __init__(self, *, limits: Optional[Limits] = None) -> None:
        self._limits = limits or Limits.from_env()
        self._lock = threading.Lock()
        self._programs: Dict[str, CompiledCapability] = {}
        self.hits = 0
        self.misses = 0

    @property
    def limits(self) -> Limits:
        return self._limits

    def compile(self, source: str) -> CompiledCapability:
        with self._lock:
            found = self._programs.get(source)
            if found is not None:
                self.hits += 1
                return found

        program = compile_source(source, limits=self._limits)

        with self._lock:
            winner = self._programs.setdefault(source, program)
            self.misses += 1
        if winner is program:
            log.debug("tparm_compiled", extra={"nodes": program.node_count, "length": len(source)})
        return winner

    def precompile_many(self, sources: Mapping[str, str]) -> Dict[str, CompiledCapability]:
        """Compile every value of `sources`; returns the same keys mapped to programs."""
        return {key: self.compile(src) for key, src in sources.items()}

    def get(self, source: str) -> Optional[CompiledCapability]:
        with self._lock:
            return self._programs.get(source)

    def clear(self) -> None:
        with self._lock:
            count = len(self._programs)
            self._programs.clear()
            self.hits = 0
            self.misses = 0
        log.debug("tparm_cache_cleared", extra={"entries": count})

    def size(self) -> int:
        with self._lock:
            return len(self._programs)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, source: object) -> bool:
        with self._lock:
            return source in self._programs


def compile_capability(
    source: str, cache: Optional[ProgramCache] = None, *, limits: Optional[Limits] = None
) -> CompiledCapability:
    """Compile `source`, through `cache` when one is given."""

    if cache is not None:
        return cache.compile(source)
    return compile_source(source, limits=limits)


def tparm(source: str, *params: Value, cache: Optional[ProgramCache] = None) -> str:
    """Expand a parameterized capability string.

    >>> tparm("\\x1b[%i%p1%d;%p2%dH", 0, 0)
    '\\x1b[1;1H'
    """

    return compile_capability(source, cache).execute(*params)
