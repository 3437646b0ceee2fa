from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, Iterable, Mapping, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class FanOutResult(Generic[T]):
    """Outcome of a ``fan_out`` call, keyed by job name."""

    completed: dict[str, T] = field(default_factory=dict)
    failed: dict[str, BaseException] = field(default_factory=dict)
    cancelled: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed and not self.cancelled

    def first_error(self) -> BaseException | None:
        return next(iter(self.failed.values()), None)


async def fan_out(
    jobs: Mapping[str, Callable[[], Awaitable[T]]],
    *,
    abort_on_error: bool = True,
) -> FanOutResult[T]:
    """Launch every job concurrently and wait for all of them.

    With ``abort_on_error`` the first failure cancels jobs still in flight.
    Jobs that finished before that point stay in ``completed`` so callers
    can see what was already done.
    """
    result: FanOutResult[T] = FanOutResult()
    if not jobs:
        return result

    tasks: dict[asyncio.Future[T], str] = {
        asyncio.ensure_future(job()): name for name, job in jobs.items()
    }
    return_when = asyncio.FIRST_EXCEPTION if abort_on_error else asyncio.ALL_COMPLETED
    done, pending = await asyncio.wait(tasks, return_when=return_when)

    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)

    for task, name in tasks.items():
        if task.cancelled():
            result.cancelled.append(name)
        elif task.exception() is not None:
            result.failed[name] = task.exception()  # type: ignore[assignment]
        else:
            result.completed[name] = task.result()
    return result


async def bounded_gather(
    calls: Iterable[Callable[[], Awaitable[T]]],
    *,
    limit: int,
) -> list[T]:
    """Run ``calls`` concurrently with at most ``limit`` in flight.

    Results come back in call order. The first failure cancels every call
    still running or queued and is re-raised once they have all stopped.
    No call is left running when this returns or raises, including when the
    caller itself is cancelled.
    """
    semaphore = asyncio.Semaphore(max(1, limit))

    async def _run(call: Callable[[], Awaitable[T]]) -> T:
        async with semaphore:
            return await call()

    tasks: list[asyncio.Future[T]] = [asyncio.ensure_future(_run(call)) for call in calls]
    if not tasks:
        return []
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    errors = [
        task.exception()
        for task in tasks
        if not task.cancelled() and task.exception() is not None
    ]
    if errors:
        raise errors[0]  # type: ignore[misc]
    return [task.result() for task in tasks]
