# pageobject/utils/timing.py
from __future__ import annotations

import functools
import inspect
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

from pageobject.utils.logger import get_logger

F = TypeVar("F", bound=Callable[..., Any])


def now_ms() -> int:
    """Monotonic clock in milliseconds."""
    return time.monotonic_ns() // 1_000_000


def format_duration(ms: int) -> str:
    return f"{ms} ms" if ms < 1000 else f"{ms / 1000:.3f} s"


@dataclass
class Stopwatch:
    """Started on creation (or `with`); `elapsed_ms()` reads without stopping."""

    started_at: int = field(default_factory=now_ms)
    stopped_at: Optional[int] = None

    def stop(self) -> int:
        self.stopped_at = now_ms()
        return self.elapsed_ms()

    def elapsed_ms(self) -> int:
        end = self.stopped_at if self.stopped_at is not None else now_ms()
        return max(0, end - self.started_at)

    def __enter__(self) -> "Stopwatch":
        self.started_at = now_ms()
        self.stopped_at = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def measure(label: str = "", level: str = "DEBUG") -> Callable[[F], F]:
    """
    Log how long a command function takes.

        @measure("click")
        def click(client, *args): ...

    When the function returns an awaitable (async Playwright API) the
    duration is logged once that awaitable completes.
    """
    log = get_logger(__name__)
    emit = getattr(log, level.lower(), log.debug)

    def decorator(func: F) -> F:
        name = label or func.__name__

        async def _timed(awaitable: Any, sw: Stopwatch) -> Any:
            try:
                return await awaitable
            finally:
                emit(f"{name} took {format_duration(sw.stop())}")

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            sw = Stopwatch()
            try:
                result = func(*args, **kwargs)
            except BaseException:
                emit(f"{name} failed after {format_duration(sw.stop())}")
                raise
            if inspect.isawaitable(result):
                return _timed(result, sw)
            emit(f"{name} took {format_duration(sw.stop())}")
            return result

        return wrapper  # type: ignore[return-value]

    return decorator
