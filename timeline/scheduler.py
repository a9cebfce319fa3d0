# timeline/scheduler.py
import heapq
import itertools
import logging
from typing import Callable, List, Tuple

log = logging.getLogger(__name__)

class TaskHandle:
    __slots__ = ("due", "callback", "cancelled", "done")

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.done = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.done)

    def cancel(self):
        self.cancelled = True


class Scheduler:
    """Delayed callbacks on a logical clock advanced by the frame loop.

    step(dt) moves time forward (seconds) and runs whatever came due, in due
    order. Nothing runs outside step(), so callbacks stay on the loop thread.
    """
    def __init__(self):
        self.time = 0.0
        self._seq = itertools.count()
        self._heap: List[Tuple[float, int, TaskHandle]] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> TaskHandle:
        h = TaskHandle(self.time + max(0.0, delay), callback)
        heapq.heappush(self._heap, (h.due, next(self._seq), h))
        return h

    def cancel(self, handle: TaskHandle):
        if handle is not None:
            handle.cancel()

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._heap if h.active)

    def step(self, dt: float):
        self.time += dt
        while self._heap and self._heap[0][0] <= self.time:
            _, _, h = heapq.heappop(self._heap)
            if not h.active:
                continue
            h.done = True
            h.callback()

    def clear(self):
        for _, _, h in self._heap:
            h.cancel()
        self._heap.clear()
        log.debug("Scheduler cleared at t=%.3f", self.time)
