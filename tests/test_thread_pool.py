import threading

import pytest

from filetransfer.thread_pool import ThreadPool


def test_results_come_back_through_futures():
    with ThreadPool(3) as pool:
        futures = [pool.submit(lambda value: value, n) for n in range(10)]
        assert [f.result(timeout=5) for f in futures] == list(range(10))


def test_keyword_arguments_are_passed():
    with ThreadPool(1) as pool:
        future = pool.submit(sorted, [3, 1, 2], reverse=True)
        assert future.result(timeout=5) == [3, 2, 1]


def test_exceptions_are_delivered_through_future():
    def fail():
        raise ValueError("boom")

    with ThreadPool(2) as pool:
        future = pool.submit(fail)
        with pytest.raises(ValueError, match="boom"):
            future.result(timeout=5)


def test_thread_count_reflects_workers():
    pool = ThreadPool(3)
    try:
        assert pool.thread_count == 3
    finally:
        pool.stop()
    assert pool.thread_count == 0


def test_pending_tasks_counts_queue():
    pool = ThreadPool(0)
    pool.submit(print, "never")
    pool.submit(print, "never")
    assert pool.pending_tasks == 2
    pool.stop()


def test_stop_drains_queued_tasks_in_order():
    gate = threading.Event()
    done = []
    pool = ThreadPool(1)
    pool.submit(gate.wait, 5)
    for n in range(5):
        pool.submit(done.append, n)
    gate.set()
    pool.stop()
    assert done == list(range(5))
    assert pool.pending_tasks == 0


def test_submit_after_stop_raises():
    pool = ThreadPool(1)
    pool.stop()
    with pytest.raises(RuntimeError, match="stopped ThreadPool"):
        pool.submit(print)


def test_context_manager_stops_pool():
    with ThreadPool(2) as pool:
        assert pool.submit(len, "abc").result(timeout=5) == 3
    with pytest.raises(RuntimeError):
        pool.submit(len, "abc")


def test_stop_twice_is_harmless():
    pool = ThreadPool(2)
    pool.stop()
    pool.stop()
    assert pool.thread_count == 0


def test_negative_thread_count_rejected():
    with pytest.raises(ValueError):
        ThreadPool(-1)