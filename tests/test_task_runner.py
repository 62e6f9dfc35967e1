from __future__ import annotations

import threading
from typing import Callable

from task_runner import ThreadTaskRunner


def test_success_is_reported_from_worker() -> None:
    runner = ThreadTaskRunner()
    results: list[int] = []
    failures: list[BaseException] = []

    runner.run(lambda: 21 * 2, results.append, failures.append)
    runner.join(timeout=2.0)

    assert results == [42]
    assert failures == []


def test_failure_is_reported_not_raised() -> None:
    runner = ThreadTaskRunner()
    failures: list[BaseException] = []

    def boom() -> int:
        raise ValueError("bad audio")

    runner.run(boom, lambda _: None, failures.append)
    runner.join(timeout=2.0)

    assert len(failures) == 1
    assert str(failures[0]) == "bad audio"


def test_outcome_goes_through_dispatch() -> None:
    queued: list[Callable[[], None]] = []
    lock = threading.Lock()

    def dispatch(fn: Callable[[], None]) -> None:
        with lock:
            queued.append(fn)

    runner = ThreadTaskRunner(dispatch=dispatch)
    results: list[str] = []
    runner.run(lambda: "done", results.append, lambda _: None)
    runner.join(timeout=2.0)

    assert results == []
    assert len(queued) == 1
    queued[0]()
    assert results == ["done"]
