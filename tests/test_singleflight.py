from __future__ import annotations

import threading

import pytest

from airqualify.core.singleflight import SingleFlight


def test_sequential_calls_each_run() -> None:
    flights: SingleFlight[int] = SingleFlight()
    calls = []

    def work() -> int:
        calls.append(1)
        return len(calls)

    assert flights.do("k", work) == 1
    assert flights.do("k", work) == 2
    assert not flights.in_flight("k")


def test_followers_share_the_leader_result() -> None:
    flights: SingleFlight[str] = SingleFlight()
    started = threading.Event()
    release = threading.Event()
    calls = []
    results = []

    def work() -> str:
        calls.append(1)
        started.set()
        release.wait(timeout=5)
        return "done"

    leader = threading.Thread(target=lambda: results.append(flights.do("k", work)))
    leader.start()
    assert started.wait(timeout=5)
    assert flights.in_flight("k")

    followers = [threading.Thread(target=lambda: results.append(flights.do("k", work))) for _ in range(4)]
    for thread in followers:
        thread.start()
    release.set()
    for thread in [leader, *followers]:
        thread.join(timeout=5)

    assert results == ["done"] * 5
    assert calls == [1]
    assert not flights.in_flight("k")


def test_exception_reaches_followers_and_releases_key() -> None:
    flights: SingleFlight[str] = SingleFlight()
    started = threading.Event()
    release = threading.Event()
    errors = []

    def failing() -> str:
        started.set()
        release.wait(timeout=5)
        raise RuntimeError("upstream down")

    def call() -> None:
        try:
            flights.do("k", failing)
        except RuntimeError as exc:
            errors.append(str(exc))

    leader = threading.Thread(target=call)
    leader.start()
    assert started.wait(timeout=5)
    follower = threading.Thread(target=call)
    follower.start()
    release.set()
    leader.join(timeout=5)
    follower.join(timeout=5)

    assert errors == ["upstream down", "upstream down"]
    assert not flights.in_flight("k")
    assert flights.do("k", lambda: "recovered") == "recovered"


def test_distinct_keys_do_not_block_each_other() -> None:
    flights: SingleFlight[str] = SingleFlight()

    def outer() -> str:
        return flights.do("b", lambda: "inner") + "+outer"

    assert flights.do("a", outer) == "inner+outer"


def test_error_propagates_to_single_caller() -> None:
    flights: SingleFlight[None] = SingleFlight()

    def boom() -> None:
        raise ValueError("bad")

    with pytest.raises(ValueError, match="bad"):
        flights.do("k", boom)
