"""
Tests for the bounded asyncio worker pool.
"""

import asyncio
import unittest

from w3c_validate.core.pool import run_pool


class TestRunPool(unittest.IsolatedAsyncioTestCase):

    async def test_empty_jobs_returns_empty_without_calling_worker(self):
        calls = []

        async def worker(job):
            calls.append(job)
            return job

        self.assertEqual(await run_pool([], 4, worker), [])
        self.assertEqual(calls, [])

    async def test_results_follow_job_order_not_completion_order(self):
        delays = [0.05, 0.0, 0.03, 0.01, 0.02]

        async def worker(idx):
            await asyncio.sleep(delays[idx])
            return f"job-{idx}"

        results = await run_pool(list(range(len(delays))), 3, worker)
        self.assertEqual(results, [f"job-{i}" for i in range(len(delays))])

    async def test_concurrency_ceiling_is_respected(self):
        active = 0
        peak = 0

        async def worker(job):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return job

        results = await run_pool(list(range(10)), 3, worker)
        self.assertEqual(len(results), 10)
        self.assertEqual(peak, 3)

    async def test_zero_concurrency_is_clamped_to_one(self):
        active = 0
        peak = 0

        async def worker(job):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0)
            active -= 1
            return job * 2

        results = await run_pool([1, 2, 3], 0, worker)
        self.assertEqual(results, [2, 4, 6])
        self.assertEqual(peak, 1)

    async def test_jobs_start_in_list_order(self):
        started = []

        async def worker(job):
            started.append(job)
            await asyncio.sleep(0.01 * (5 - job))
            return job

        await run_pool([0, 1, 2, 3, 4], 2, worker)
        self.assertEqual(started, [0, 1, 2, 3, 4])

    async def test_failure_stops_dispatch_and_is_raised(self):
        started = []

        async def worker(job):
            started.append(job)
            await asyncio.sleep(0)
            if job == 1:
                raise RuntimeError("boom")
            return job

        with self.assertRaises(RuntimeError):
            await run_pool([0, 1, 2, 3], 1, worker)
        self.assertEqual(started, [0, 1])

    async def test_failure_cancels_in_flight_jobs(self):
        finished = []

        async def worker(job):
            if job == 0:
                raise ValueError("bad job")
            await asyncio.sleep(1)
            finished.append(job)
            return job

        with self.assertRaises(ValueError):
            await run_pool([0, 1, 2], 3, worker)
        self.assertEqual(finished, [])

    async def test_none_results_keep_their_slot(self):
        async def worker(job):
            return None if job % 2 else job

        self.assertEqual(await run_pool([0, 1, 2, 3], 2, worker), [0, None, 2, None])


if __name__ == "__main__":
    unittest.main()
