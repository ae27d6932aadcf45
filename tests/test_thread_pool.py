import threading
import time

import pytest

from rmcontrol.thread_pool import ThreadPool, ThreadPoolClosedError


def test_task_result_is_returned_through_future():
    with ThreadPool(2) as pool:
        future = pool.add_task(pow, 2, 10)
        assert future.result(timeout=5) == pow(2, 10)


def test_more_tasks_than_threads_all_complete():
    with ThreadPool(2) as pool:
        futures = [pool.add_task(lambda n: n * n, n) for n in range(50)]
        results = [future.result(timeout=5) for future in futures]
    assert results == [n * n for n in range(50)]


def test_keyword_arguments_are_forwarded():
    def combine(a, b, *, sep):
        return f"{a}{sep}{b}"

    with ThreadPool(1) as pool:
        future = pool.add_task(combine, "x", "y", sep="-")
        assert future.result(timeout=5) == "x-y"


def test_exception_is_delivered_through_future():
    def fail():
        raise KeyError("missing")

    with ThreadPool(1) as pool:
        future = pool.add_task(fail)
        with pytest.raises(KeyError):
            future.result(timeout=5)


def test_add_task_after_shutdown_raises():
    pool = ThreadPool(1)
    pool.shutdown()
    with pytest.raises(ThreadPoolClosedError):
        pool.add_task(print)


def test_closed_error_is_runtime_error():
    pool = ThreadPool(1)
    pool.shutdown()
    with pytest.raises(RuntimeError):
        pool.add_task(len, [])


def test_queued_tasks_finish_before_shutdown_returns():
    done = []
    lock = threading.Lock()

    def slow(n):
        time.sleep(0.01)
        with lock:
            done.append(n)
        return n

    pool = ThreadPool(2)
    futures = [pool.add_task(slow, n) for n in range(10)]
    pool.shutdown()
    assert all(future.done() for future in futures)
    assert [future.result(timeout=0) for future in futures] == list(range(10))
    assert sorted(done) == list(range(10))


def test_tasks_run_on_several_threads():
    barrier = threading.Barrier(3, timeout=5)

    def wait_for_others():
        barrier.wait()
        return threading.get_ident()

    with ThreadPool(3) as pool:
        futures = [pool.add_task(wait_for_others) for _ in range(3)]
        idents = {future.result(timeout=5) for future in futures}
    assert len(idents) == 3


def test_zero_threads_rejected():
    with pytest.raises(ValueError):
        ThreadPool(0)