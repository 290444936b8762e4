import asyncio
from datetime import date, datetime, time, timedelta, timezone
from itertools import count
from zoneinfo import ZoneInfo

import pytest
from sqlmodel import Session

import store
from digest.scheduler import (
    next_run_at,
    parse_run_at,
    run_digest_job,
    run_digest_scheduler,
    seconds_until_next_run,
)
from models import Task


class FakeDelivery:
    def __init__(self, ok=True):
        self.ok = ok
        self.sent = []

    def send_digest(self, to_email, content):
        self.sent.append((to_email, content))
        return self.ok


@pytest.fixture()
def open_tasks(session, users):
    owner = users["alice"].id
    other = users["bob"].id
    session.add(Task(user_id=owner, name="Alpha", priority=1, deadline=date(2024, 1, 5)))
    session.add(Task(user_id=other, name="Beta", priority=3, deadline=date(2024, 1, 1)))
    session.add(Task(user_id=owner, name="Gamma", priority=3, deadline=date(2024, 1, 2)))
    session.add(Task(user_id=owner, name="Done", priority=5, deadline=date(2024, 1, 1), completed=True))
    session.commit()


def test_open_tasks_most_urgent_first(session, open_tasks):
    assert [t.name for t in store.list_open_tasks(session)] == ["Beta", "Gamma", "Alpha"]


def test_job_sends_ordered_digest(engine, open_tasks):
    delivery = FakeDelivery()

    sent = run_digest_job(
        lambda: Session(engine),
        delivery,
        recipient="me@example.com",
        app_url="https://tasks.example.com",
    )

    assert sent is True
    [(to_email, content)] = delivery.sent
    assert to_email == "me@example.com"
    assert content.index("Beta") < content.index("Gamma") < content.index("Alpha")
    assert "Done" not in content
    assert "https://tasks.example.com" in content


def test_job_sends_placeholder_when_nothing_is_open(engine):
    delivery = FakeDelivery()

    assert run_digest_job(lambda: Session(engine), delivery, recipient="me@example.com", app_url="u")
    assert "No active tasks." in delivery.sent[0][1]


def test_job_reports_delivery_failure(engine, open_tasks):
    assert run_digest_job(lambda: Session(engine), FakeDelivery(ok=False), recipient="me@example.com", app_url="u") is False


def test_job_survives_store_failure():
    def broken_session():
        raise ConnectionError("database unreachable")

    delivery = FakeDelivery()

    assert run_digest_job(broken_session, delivery, recipient="me@example.com", app_url="u") is False
    assert delivery.sent == []


def test_job_needs_recipient(engine):
    delivery = FakeDelivery()

    assert run_digest_job(lambda: Session(engine), delivery, recipient="", app_url="u") is False
    assert delivery.sent == []


UTC = timezone.utc
LISBON = ZoneInfo("Europe/Lisbon")


@pytest.mark.parametrize(
    "now, expected",
    [
        (datetime(2024, 1, 1, 8, 0, tzinfo=UTC), 30 * 60),
        (datetime(2024, 1, 1, 8, 29, 30, tzinfo=UTC), 30),
        (datetime(2024, 1, 1, 8, 30, tzinfo=UTC), 24 * 60 * 60),
        (datetime(2024, 1, 1, 9, 0, tzinfo=UTC), 23.5 * 60 * 60),
        (datetime(2024, 1, 31, 23, 0, tzinfo=UTC), 9.5 * 60 * 60),
    ],
)
def test_seconds_until_next_run(now, expected):
    assert seconds_until_next_run(now, time(8, 30)) == expected


@pytest.mark.parametrize(
    "now, expected_hours",
    [
        # Clocks go forward on 2024-03-31: the day is 23 hours long
        (datetime(2024, 3, 30, 8, 30, 1, tzinfo=LISBON), 23),
        # Clocks go back on 2024-10-27: the day is 25 hours long
        (datetime(2024, 10, 26, 8, 30, 1, tzinfo=LISBON), 25),
    ],
)
def test_next_run_keeps_local_time_across_dst_change(now, expected_hours):
    delay = seconds_until_next_run(now, time(8, 30))

    fires_at = (now.astimezone(UTC) + timedelta(seconds=delay)).astimezone(LISBON)
    assert fires_at.strftime("%Y-%m-%d %H:%M:%S") == (now + timedelta(days=1)).strftime("%Y-%m-%d 08:30:00")
    assert delay == expected_hours * 60 * 60 - 1


def test_next_run_at_is_strictly_later():
    now = datetime(2024, 1, 1, 8, 30, tzinfo=UTC)

    assert next_run_at(now, time(8, 30)) == datetime(2024, 1, 2, 8, 30, tzinfo=UTC)
    assert next_run_at(now - timedelta(microseconds=1), time(8, 30)) == now


def test_parse_run_at():
    assert parse_run_at("08:30") == time(8, 30)
    assert parse_run_at(" 7:05 ") == time(7, 5)
    for bad in ("0830", "25:00", "aa:bb", ""):
        with pytest.raises(ValueError):
            parse_run_at(bad)


def days_at(hour, minute, second, microsecond):
    """Clock that moves one day forward on every reading"""
    start = datetime(2024, 1, 1, hour, minute, second, microsecond, tzinfo=UTC)
    readings = (start + timedelta(days=n) for n in count())
    return lambda: next(readings)


async def run_for(seconds, job, clock):
    runner = asyncio.create_task(run_digest_scheduler(job, at=time(8, 30), clock=clock))

    await asyncio.sleep(seconds)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner


@pytest.mark.asyncio
async def test_scheduler_keeps_running_after_failed_job():
    calls = []

    def job():
        calls.append(datetime.now())
        if len(calls) == 1:
            raise RuntimeError("smtp down")
        return True

    # Every reading is 50ms before that day's fire time
    await run_for(0.4, job, days_at(8, 29, 59, 950000))

    assert len(calls) >= 2


@pytest.mark.asyncio
async def test_scheduler_fires_once_per_day_when_clock_lags():
    calls = []

    # Clock stuck just before 08:30, as if the job finished within clock resolution
    frozen = datetime(2024, 1, 1, 8, 29, 59, 950000, tzinfo=UTC)
    await run_for(0.3, lambda: calls.append(frozen), lambda: frozen)

    assert len(calls) == 1
