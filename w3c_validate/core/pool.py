"""
Bounded asyncio worker pool.

Runs a list of jobs through an async worker with at most *concurrency*
coroutines in flight.  Jobs are started strictly in list order as slots
free up, and ``results[i]`` always belongs to ``jobs[i]`` whatever order
they finish in.

The pool is fail-fast: the first worker exception stops further
dispatch, cancels the jobs still running and is re-raised to the caller.
Callers that need every job to produce a result must make the worker
itself non-raising.
"""

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar

J = TypeVar("J")
R = TypeVar("R")


async def run_pool(
    jobs: Sequence[J],
    concurrency: int,
    worker: Callable[[J], Awaitable[R]],
) -> list[R]:
    """Run *worker* over *jobs* with a fixed concurrency ceiling."""
    if not jobs:
        return []

    try:
        limit = max(1, int(concurrency))
    except (TypeError, ValueError):
        limit = 1

    results: list = [None] * len(jobs)
    slots = asyncio.Semaphore(limit)
    running: set[asyncio.Task] = set()
    failure: list[BaseException] = []

    async def _run(idx: int, job: J) -> None:
        try:
            results[idx] = await worker(job)
        except Exception as exc:
            if not failure:
                failure.append(exc)
        finally:
            slots.release()

    try:
        for idx, job in enumerate(jobs):
            await slots.acquire()
            if failure:
                slots.release()
                break
            task = asyncio.create_task(_run(idx, job))
            running.add(task)
            task.add_done_callback(running.discard)

        while running and not failure:
            await asyncio.wait(set(running), return_when=asyncio.FIRST_COMPLETED)
    finally:
        leftover = [t for t in running if not t.done()]
        for task in leftover:
            task.cancel()
        if leftover:
            await asyncio.gather(*leftover, return_exceptions=True)

    if failure:
        raise failure[0]
    return results
