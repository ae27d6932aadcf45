"""A fixed-size pool of worker threads that run queued tasks and hand back futures."""

from __future__ import annotations

import threading
from collections import deque
from concurrent.futures import Future
from typing import Any, Callable


class ThreadPoolClosedError(RuntimeError):
    """Raised when a task is added to a pool that has been shut down."""


class ThreadPool:
    """Runs submitted callables on a fixed number of worker threads.

    Shutting down stops new submissions; tasks already queued still run
    before the workers exit.
    """

    def __init__(self, thread_num: int) -> None:
        if thread_num < 1:
            raise ValueError("thread_num must be at least 1")
        self._condition = threading.Condition()
        self._tasks: deque[tuple[Future, Callable[..., Any], tuple, dict]] = deque()
        self._available = True
        self._workers = [
            threading.Thread(target=self._worker, name=f"pool-worker-{index}", daemon=True)
            for index in range(thread_num)
        ]
        for worker in self._workers:
            worker.start()

    def add_task(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue ``func(*args, **kwargs)`` and return a future for its result."""
        future: Future = Future()
        with self._condition:
            if not self._available:
                raise ThreadPoolClosedError("ThreadPool is not available")
            self._tasks.append((future, func, args, kwargs))
            self._condition.notify()
        return future

    def shutdown(self) -> None:
        """Refuse new tasks, let queued ones finish, and wait for the workers."""
        with self._condition:
            self._available = False
            self._condition.notify_all()
        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def _worker(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: not self._available or bool(self._tasks))
                if not self._tasks:
                    return
                future, func, args, kwargs = self._tasks.popleft()
            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)