"""Cancellable context handed to long-running toolchain calls.

A ``CancelContext`` is a thread-safe flag plus an optional parent. Cancelling
a parent cancels every child derived from it; a child never cancels its
parent.
"""

from __future__ import annotations

import threading

from .errors import CancelledError


class CancelContext:
    """Cooperative cancellation scope shared between a caller and a worker."""

    def __init__(self, parent: CancelContext | None = None) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason = "context canceled"
        self._children: list[CancelContext] = []
        self._timer: threading.Timer | None = None
        self._parent = parent
        if parent is not None:
            parent._adopt(self)

    @classmethod
    def background(cls) -> CancelContext:
        """Return a fresh root context that is only cancelled explicitly."""
        return cls()

    def child(self) -> CancelContext:
        return CancelContext(parent=self)

    def with_timeout(self, seconds: float) -> CancelContext:
        """Return a child context cancelled automatically after ``seconds``."""
        ctx = self.child()
        timer = threading.Timer(seconds, ctx.cancel, kwargs={"reason": "context deadline exceeded"})
        timer.daemon = True
        ctx._timer = timer
        timer.start()
        return ctx

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        with self._lock:
            if self._event.is_set():
                return
            if reason:
                self._reason = reason
            self._event.set()
            children = list(self._children)
            timer = self._timer
        if timer is not None:
            timer.cancel()
        for child in children:
            child.cancel(reason)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; return ``cancelled``."""
        return self._event.wait(timeout)

    def err(self) -> CancelledError | None:
        if not self._event.is_set():
            return None
        return CancelledError(self._reason)

    def detach(self) -> None:
        """Stop following the parent and disarm any pending deadline."""
        if self._timer is not None:
            self._timer.cancel()
        parent, self._parent = self._parent, None
        if parent is not None:
            with parent._lock:
                if self in parent._children:
                    parent._children.remove(self)

    def _adopt(self, child: CancelContext) -> None:
        with self._lock:
            cancelled = self._event.is_set()
            if not cancelled:
                self._children.append(child)
        if cancelled:
            child.cancel(self._reason)


__all__ = ["CancelContext"]
