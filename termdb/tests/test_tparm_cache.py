import threading

import pytest

from termdb.core.config import Limits
from termdb.core.errors import ProgramLimitError
from termdb.core.tparm import ProgramCache, compile_capability, tparm


def test_same_source_returns_same_program():
    cache = ProgramCache()
    first = cache.compile("\x1b[%i%p1%d;%p2%dH")
    second = cache.compile("\x1b[%i%p1%d;%p2%dH")
    assert first is second
    assert cache.size() == 1
    assert cache.hits == 1
    assert cache.misses == 1
    assert "\x1b[%i%p1%d;%p2%dH" in cache
    assert cache.get("never seen") is None


def test_clear_empties_cache_and_counters():
    cache = ProgramCache()
    old = cache.compile("%p1%d")
    cache.compile("%p1%c")
    assert len(cache) == 2

    cache.clear()
    assert cache.size() == 0
    assert cache.hits == 0
    assert cache.misses == 0

    new = cache.compile("%p1%d")
    assert new is not old
    assert new.execute(3) == old.execute(3) == "3"


def test_precompile_many_keeps_keys():
    cache = ProgramCache()
    programs = cache.precompile_many(
        {"cursor_address": "\x1b[%i%p1%d;%p2%dH", "clear_screen": "\x1b[H\x1b[2J", "home": "\x1b[H\x1b[2J"}
    )
    assert set(programs) == {"cursor_address", "clear_screen", "home"}
    assert programs["clear_screen"] is programs["home"]
    assert cache.size() == 2
    assert programs["cursor_address"].execute(0, 0) == "\x1b[1;1H"


def test_tparm_through_cache():
    cache = ProgramCache()
    assert tparm("%p1%d", 42, cache=cache) == "42"
    assert tparm("%p1%d", 7, cache=cache) == "7"
    assert cache.hits == 1
    assert compile_capability("%p1%d", cache) is cache.get("%p1%d")


def test_cache_uses_its_own_limits():
    cache = ProgramCache(limits=Limits(max_program_nodes=2))
    assert cache.limits.max_program_nodes == 2
    with pytest.raises(ProgramLimitError):
        cache.compile("%p1%p2%p3")
    assert cache.size() == 0


def test_concurrent_compiles_agree():
    cache = ProgramCache()
    sources = [f"%p1%{{{i}}}%+%d" for i in range(20)]
    results = [[] for _ in range(8)]
    barrier = threading.Barrier(8)

    def worker(slot):
        barrier.wait()
        for _ in range(5):
            for src in sources:
                results[slot].append(cache.compile(src))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert cache.size() == len(sources)
    for src in sources:
        program = cache.get(src)
        for per_thread in results:
            assert all(p is program for p in per_thread if p.source == src)

    outputs = []

    def run(n):
        outputs.append(cache.compile(sources[3]).execute(n))

    runners = [threading.Thread(target=run, args=(n,)) for n in range(10)]
    for t in runners:
        t.start()
    for t in runners:
        t.join()
    assert sorted(outputs, key=int) == [str(n + 3) for n in range(10)]
