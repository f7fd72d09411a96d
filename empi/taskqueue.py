"""Thread-safe task queue for producer-consumer work and a counting semaphore."""

from __future__ import annotations

import queue
import threading
from collections import deque
from typing import Deque, Generic, Iterable, TypeVar

__all__ = ["Semaphore", "TaskQueue", "TaskQueueTerminated"]

T = TypeVar("T")


class TaskQueueTerminated(RuntimeError):
    """Raised when a task queue has been terminated."""


class TaskQueue(Generic[T]):
    """Synchronized task queue with a single producer and multiple consumers.

    Consumers take tasks with get() and call notify() once each task is done;
    the producer calls wait_for_tasks() to block until every task is finished.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tasks: Deque[T] = deque()
        self._terminated = False
        self._unfinished = 0
        self._task_available = threading.Condition(self._lock)
        self._task_finished = threading.Condition(self._lock)

    def put(self, task: T) -> None:
        """Add a single task to the queue."""
        with self._lock:
            self._unfinished += 1
            self._tasks.append(task)
            self._task_available.notify()

    def put_all(self, tasks: Iterable[T]) -> None:
        """Add all given tasks to the queue."""
        items = list(tasks)
        with self._lock:
            self._unfinished += len(items)
            self._tasks.extend(items)
            self._task_available.notify_all()

    def get(self, wait: bool = True, from_back: bool = False) -> T:
        """Take the next task from the front (or back) of the queue.

        If wait is true, block until a task is available or the queue is terminated.
        Raises queue.Empty if wait is false and no task is available,
        and TaskQueueTerminated if the queue has been terminated.
        """
        with self._lock:
            if wait:
                self._task_available.wait_for(lambda: self._terminated or bool(self._tasks))
            elif not self._tasks:
                raise queue.Empty
            if self._terminated:
                raise TaskQueueTerminated("task queue was terminated")
            return self._tasks.pop() if from_back else self._tasks.popleft()

    def notify(self) -> None:
        """Mark a task previously taken with get() as finished."""
        with self._lock:
            if self._unfinished <= 0:
                raise ValueError("no unfinished tasks to mark as finished")
            self._unfinished -= 1
            self._task_finished.notify_all()

    def terminate(self) -> None:
        """Terminate the queue, waking up all waiting consumers and producers."""
        with self._lock:
            self._terminated = True
            self._task_available.notify_all()
            self._task_finished.notify_all()

    def wait_for_tasks(self) -> None:
        """Block until all tasks are finished; raise if the queue is terminated first."""
        with self._lock:
            self._task_finished.wait_for(lambda: self._terminated or not self._unfinished)
            if self._unfinished:
                raise TaskQueueTerminated("task queue was terminated while waiting for tasks")


class Semaphore:
    """Counting semaphore that can be released and acquired by arbitrary amounts."""

    def __init__(self, state: int = 0) -> None:
        if state < 0:
            raise ValueError("semaphore state cannot be negative")
        self._state = state
        self._condition = threading.Condition()

    def release(self, increment: int = 1) -> None:
        """Increase the counter, waking up waiting threads."""
        with self._condition:
            self._state += increment
            if increment == 1:
                self._condition.notify()
            elif increment > 1:
                self._condition.notify_all()

    def acquire(self, decrement: int = 1) -> None:
        """Wait until the counter is at least decrement, then decrease it."""
        with self._condition:
            self._condition.wait_for(lambda: self._state >= decrement)
            self._state -= decrement