"""Latest-wins re-render scheduling for interactive parameter changes.

A slider drag produces many parameter updates per second. `RenderScheduler`
keeps only the most recent parameters, runs at most one render at a time and
publishes a finished render only if nothing newer has been shown already.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from .params import DEFAULT_PARAMETERS, RenderParameters
from .renderer import OutputImage, render
from .utils.loader import ImageHandle, SourceImage

logger = logging.getLogger(__name__)

T = TypeVar("T")

Spawn = Callable[[Callable[[], None]], Any]
RenderFn = Callable[[SourceImage, RenderParameters], OutputImage]


def _spawn_thread(job: Callable[[], None]) -> threading.Thread:
    t = threading.Thread(target=job, daemon=True)
    t.start()
    return t


class LatestResult(Generic[T]):
    """Holds the newest value by tag; older tags offered later are dropped."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._next = 0
        self._tag = -1
        self._value: Optional[T] = None

    def next_tag(self) -> int:
        with self._lock:
            tag = self._next
            self._next += 1
            return tag

    def offer(self, tag: int, value: T) -> bool:
        """Store `value` if `tag` is newer than the held one."""
        with self._lock:
            if tag <= self._tag:
                return False
            self._tag = tag
            self._value = value
            return True

    def reset(self) -> None:
        """Forget the held value. Tags keep increasing."""
        with self._lock:
            self._tag = self._next - 1
            self._value = None

    @property
    def current(self) -> Optional[T]:
        return self._value

    @property
    def current_tag(self) -> int:
        return self._tag


class RenderScheduler:
    """Coalesce parameter updates into renders and publish the latest one.

    Parameters
    ----------
    on_result : callable | None
        Called with each published `OutputImage`, on the render thread.
    render_fn : callable
        The renderer, ``render_fn(source, params) -> OutputImage``.
    spawn : callable | None
        Runs a zero-argument job; defaults to a daemon thread.
    """

    def __init__(
        self,
        on_result: Optional[Callable[[OutputImage], None]] = None,
        render_fn: RenderFn = render,
        spawn: Optional[Spawn] = None,
        params: RenderParameters = DEFAULT_PARAMETERS,
    ) -> None:
        self.on_result = on_result
        self.render_fn = render_fn
        self.spawn = spawn or _spawn_thread
        self.results: LatestResult[OutputImage] = LatestResult()
        self.last_error: Optional[BaseException] = None

        self._cond = threading.Condition()
        self._params = params.clamp()
        self._source: Optional[SourceImage] = None
        self._session = 0
        self._dirty = False
        self._busy = False

    @property
    def params(self) -> RenderParameters:
        return self._params

    @property
    def latest(self) -> Optional[OutputImage]:
        return self.results.current

    @property
    def source(self) -> Optional[SourceImage]:
        return self._source

    def set_source(self, source: Union[SourceImage, ImageHandle]) -> None:
        """Replace the session source; renders once it is decoded."""
        with self._cond:
            self._session += 1
            session = self._session
            self._source = None
            self._dirty = False
        self.results.reset()

        if isinstance(source, SourceImage):
            self._on_loaded(session, source)
            return
        # One-shot: renders with whatever parameters are current at decode time.
        source.when_loaded(lambda s: self._on_loaded(session, s))

    def update(self, params: Optional[RenderParameters] = None, **changes: Any) -> RenderParameters:
        """Set new pending parameters (clamped) and request a render."""
        with self._cond:
            base = params if params is not None else self._params
            if changes:
                base = base.replace(**changes)
            self._params = base.clamp()
            current = self._params
        self._request()
        return current

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no render is running or pending."""
        with self._cond:
            return self._cond.wait_for(lambda: not self._busy and not self._dirty, timeout)

    def _on_loaded(self, session: int, source: SourceImage) -> None:
        with self._cond:
            if session != self._session:
                logger.debug("Ignoring decode of a replaced source")
                return
            self._source = source
        self._request()

    def _request(self) -> None:
        with self._cond:
            if self._source is None:
                return
            self._dirty = True
            if self._busy:
                return
            self._busy = True
        self.spawn(self._run)

    def _run(self) -> None:
        while True:
            with self._cond:
                if not self._dirty or self._source is None:
                    self._busy = False
                    self._dirty = False
                    self._cond.notify_all()
                    return
                self._dirty = False
                source, params, session = self._source, self._params, self._session
            tag = self.results.next_tag()
            self._render_one(tag, session, source, params)

    def _render_one(self, tag: int, session: int, source: SourceImage, params: RenderParameters) -> None:
        try:
            out = self.render_fn(source, params)
        except Exception as e:
            logger.exception("Render failed for %s", params)
            self.last_error = e
            return
        if session != self._session:
            return
        if self.results.offer(tag, out):
            self.last_error = None
            if self.on_result is not None:
                self.on_result(out)
        else:
            logger.debug("Dropping stale render %d", tag)


__all__ = ["LatestResult", "RenderScheduler"]
