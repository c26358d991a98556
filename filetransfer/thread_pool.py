"""A fixed-size pool of worker threads fed from a FIFO task queue."""

from __future__ import annotations

import threading
from collections import deque
from concurrent.futures import Future
from typing import Any, Callable, Deque, Tuple


class ThreadPool:
    """Runs submitted callables on a fixed set of worker threads.

    Stopping the pool lets the workers finish every task already queued.
    """

    def __init__(self, threads: int) -> None:
        if threads < 0:
            raise ValueError("thread count must not be negative")
        self._tasks: Deque[Tuple[Future, Callable, tuple, dict]] = deque()
        self._condition = threading.Condition()
        self._stopped = False
        self._workers = [
            threading.Thread(target=self._work, name=f"pool-worker-{n}", daemon=True)
            for n in range(threads)
        ]
        for worker in self._workers:
            worker.start()

    def _work(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._stopped or self._tasks)
                if self._stopped and not self._tasks:
                    return
                future, fn, args, kwargs = self._tasks.popleft()
            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = fn(*args, **kwargs)
            except BaseException as exc:  # delivered through the future
                future.set_exception(exc)
            else:
                future.set_result(result)

    def submit(self, fn: Callable[..., Any], *args, **kwargs) -> Future:
        """Queue ``fn(*args, **kwargs)`` and return a future for its result."""
        future: Future = Future()
        with self._condition:
            if self._stopped:
                raise RuntimeError("enqueue on stopped ThreadPool")
            self._tasks.append((future, fn, args, kwargs))
            self._condition.notify()
        return future

    def stop(self) -> None:
        """Refuse new tasks, let workers drain the queue and wait for them."""
        with self._condition:
            self._stopped = True
            self._condition.notify_all()
        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()
        self._workers.clear()

    @property
    def pending_tasks(self) -> int:
        with self._condition:
            return len(self._tasks)

    @property
    def thread_count(self) -> int:
        return len(self._workers)

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *args) -> None:
        self.stop()