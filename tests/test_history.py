from __future__ import annotations

from datetime import date

import pytest

from airqualify.core.entities import HistoryEntry, MeasurementSet
from airqualify.core.history import HistoryStore


def entry(aqi: float) -> HistoryEntry:
    return HistoryEntry(date=date(2024, 1, 10), aqi=aqi, measurements=MeasurementSet.defaults())


def test_never_written_location_is_empty(backend, clock) -> None:
    assert HistoryStore(backend, clock=clock).get("1.0000:2.0000") == []


def test_history_keeps_last_thirty_in_order(backend, clock) -> None:
    store = HistoryStore(backend, clock=clock)
    for value in range(35):
        store.append("k", entry(float(value)))

    series = store.get("k")

    assert len(series) == 30
    assert [item.aqi for item in series] == [float(value) for value in range(5, 35)]


def test_ttl_restarts_on_every_append(backend, clock) -> None:
    store = HistoryStore(backend, clock=clock)
    store.append("k", entry(1.0))

    clock.advance(23 * 60 * 60)
    store.append("k", entry(2.0))
    clock.advance(2 * 60 * 60)

    assert [item.aqi for item in store.get("k")] == [1.0, 2.0]

    clock.advance(HistoryStore.DEFAULT_TTL)
    assert store.get("k") == []


def test_series_are_isolated_per_key(backend, clock) -> None:
    store = HistoryStore(backend, clock=clock)
    store.append("a", entry(1.0))
    store.append("b", entry(2.0))

    assert [item.aqi for item in store.get("a")] == [1.0]
    assert [item.aqi for item in store.get("b")] == [2.0]


def test_custom_cap(backend, clock) -> None:
    store = HistoryStore(backend, clock=clock, max_entries=3)
    for value in range(5):
        store.append("k", entry(float(value)))

    assert [item.aqi for item in store.get("k")] == [2.0, 3.0, 4.0]


def test_cap_must_be_positive(backend) -> None:
    with pytest.raises(ValueError):
        HistoryStore(backend, max_entries=0)
