"""Tests for the deferred task scheduler."""
import asyncio

import pytest

from sentiment_chat.scheduler import DeferredTaskScheduler


@pytest.mark.asyncio
async def test_job_runs_after_delay():
    scheduler = DeferredTaskScheduler()
    ran = []

    async def job():
        ran.append(True)

    scheduler.schedule(0.02, job, name="test")
    assert ran == []
    assert scheduler.pending_count == 1

    await scheduler.wait_idle()
    assert ran == [True]
    assert scheduler.pending_count == 0


@pytest.mark.asyncio
async def test_jobs_are_independent():
    scheduler = DeferredTaskScheduler()
    order = []

    def make_job(label):
        async def job():
            order.append(label)
        return job

    scheduler.schedule(0.03, make_job("slow"))
    scheduler.schedule(0.0, make_job("fast"))

    await scheduler.wait_idle()
    assert order == ["fast", "slow"]


@pytest.mark.asyncio
async def test_failing_job_is_isolated(caplog):
    scheduler = DeferredTaskScheduler()
    ran = []

    async def broken():
        raise ValueError("boom")

    async def fine():
        ran.append(True)

    broken_task = scheduler.schedule(0.0, broken, name="broken")
    scheduler.schedule(0.0, fine, name="fine")

    await scheduler.wait_idle()
    assert ran == [True]
    assert broken_task.exception() is None
    assert "boom" in caplog.text


@pytest.mark.asyncio
async def test_cancel_all():
    scheduler = DeferredTaskScheduler()
    ran = []

    async def job():
        ran.append(True)

    for _ in range(3):
        scheduler.schedule(10.0, job)

    cancelled = await scheduler.cancel_all()
    assert cancelled == 3
    assert scheduler.pending_count == 0
    await asyncio.sleep(0)
    assert ran == []
