"""Cancellable execution context.

A Context carries cancellation and an optional deadline down to the
executor. Children inherit the parent's cancellation and the earlier of the
two deadlines:

    ctx = Context.background().with_timeout(5)
    rows = named_select(ctx, db, Order, "SELECT * FROM orders", None)
"""

import threading
import time
from contextlib import contextmanager
from typing import Callable, Optional

from .errors import ContextCanceled, ContextDeadlineExceeded, ContextError


class Context:
    def __init__(self, parent: Optional["Context"] = None, deadline: Optional[float] = None):
        self._parent = parent
        self._deadline = deadline
        self._canceled = False
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @classmethod
    def background(cls) -> "Context":
        """Root context: never canceled, no deadline."""
        return cls()

    def with_cancel(self) -> "Context":
        return Context(parent=self)

    def with_deadline(self, deadline: float) -> "Context":
        """Child context ending at deadline, a time.monotonic() value."""
        return Context(parent=self, deadline=deadline)

    def with_timeout(self, seconds: float) -> "Context":
        return self.with_deadline(time.monotonic() + seconds)

    @property
    def deadline(self) -> Optional[float]:
        parent = self._parent.deadline if self._parent else None
        if parent is None:
            return self._deadline
        if self._deadline is None:
            return parent
        return min(parent, self._deadline)

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline, or None without one."""
        deadline = self.deadline
        if deadline is None:
            return None
        return max(0.0, deadline - time.monotonic())

    def cancel(self) -> None:
        with self._lock:
            if self._canceled:
                return
            self._canceled = True
            callbacks = list(self._callbacks)
        for cb in callbacks:
            cb()

    def _is_canceled(self) -> bool:
        if self._canceled:
            return True
        return self._parent is not None and self._parent._is_canceled()

    def err(self) -> Optional[ContextError]:
        """Return the reason the context ended, or None while it is live."""
        if self._is_canceled():
            return ContextCanceled()
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            return ContextDeadlineExceeded()
        return None

    def done(self) -> bool:
        return self.err() is not None

    def raise_if_done(self) -> None:
        err = self.err()
        if err is not None:
            raise err

    def _chain(self):
        ctx = self
        while ctx is not None:
            yield ctx
            ctx = ctx._parent

    @contextmanager
    def watch(self, callback: Callable[[], None]):
        """Call callback once if the context ends while the block runs."""
        fired = threading.Event()

        def fire():
            if fired.is_set():
                return
            fired.set()
            callback()

        chain = list(self._chain())
        for ctx in chain:
            with ctx._lock:
                ctx._callbacks.append(fire)

        timer = None
        remaining = self.remaining()
        if remaining is not None:
            timer = threading.Timer(remaining, fire)
            timer.daemon = True
            timer.start()
        try:
            yield
        finally:
            if timer is not None:
                timer.cancel()
            for ctx in chain:
                with ctx._lock:
                    ctx._callbacks.remove(fire)
