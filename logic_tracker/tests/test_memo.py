from __future__ import annotations

import pytest

from logic_tracker.core.engine import LogicEngine
from logic_tracker.core.memo import MemoCache
from logic_tracker.core.models import TrackerState


def test_unsealed_cache_never_stores() -> None:
    cache = MemoCache()
    calls: list[int] = []

    for _ in range(3):
        assert cache.get_or_compute(("answer",), lambda: calls.append(1) or 42) == 42

    assert len(calls) == 3
    assert len(cache) == 0
    assert (cache.hits, cache.misses) == (0, 0)


def test_sealed_cache_reuses_results() -> None:
    cache = MemoCache()
    cache.seal()
    calls: list[int] = []

    for _ in range(3):
        assert cache.get_or_compute(("answer", 1), lambda: calls.append(1) or 42) == 42

    assert len(calls) == 1
    assert ("answer", 1) in cache
    assert (cache.hits, cache.misses) == (2, 1)


def test_cache_can_only_be_sealed_once() -> None:
    cache = MemoCache()
    cache.seal()
    with pytest.raises(RuntimeError, match="already sealed"):
        cache.seal()


def test_engine_starts_with_an_empty_sealed_cache(logic) -> None:
    engine = LogicEngine(TrackerState(), logic)

    assert engine._memo.sealed is True
    assert len(engine._memo) == 0


def test_engine_memoizes_by_method_and_arguments(logic) -> None:
    engine = LogicEngine(TrackerState(), logic)

    first = engine.location_counts("Windfall Island", only_progress_locations=True)
    hits_before = engine._memo.hits
    second = engine.location_counts("Windfall Island", only_progress_locations=True)

    assert second is first
    assert engine._memo.hits == hits_before + 1
    assert ("is_location_available", "Windfall Island", "Maggie - Free Item") in engine._memo
    assert engine.location_counts("Windfall Island") != first


def test_inference_results_do_not_leak_into_queries(logic) -> None:
    # During inference Alcove is evaluated with zero keys; afterwards one key is guaranteed.
    engine = LogicEngine(TrackerState(), logic)
    assert engine.is_location_available("Dragon Roost Cavern", "Alcove With Water Jugs") is True
