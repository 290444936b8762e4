"""
Daily digest job and its scheduler.

The job reads every open task, renders the digest and mails it. It never
raises: failures are logged and the next scheduled run goes ahead as usual.
"""

import asyncio
import os
from datetime import datetime, time, timedelta, timezone
from functools import partial
from typing import Callable

from dotenv import load_dotenv

import store
import database
from digest.composer import compose_digest
from digest.delivery import DigestDelivery
from utils.log import get_logger

load_dotenv()

logger = get_logger(__name__)

DEFAULT_RUN_AT = time(8, 30)


def parse_run_at(value: str) -> time:
    """Parse a HH:MM wall-clock time."""
    try:
        hour, minute = value.strip().split(":")
        return time(int(hour), int(minute))
    except ValueError:
        raise ValueError(f"Invalid digest time {value!r}, expected HH:MM") from None


def run_digest_job(
    session_factory: Callable,
    delivery: DigestDelivery,
    *,
    recipient: str,
    app_url: str,
    escape: bool = False,
) -> bool:
    """
    Read open tasks, compose the digest and send it

    Args:
        session_factory: Callable returning a new Session on the shared pool
        delivery: Mail transport
        recipient: Address the digest goes to
        app_url: Link target in the email
        escape: HTML-escape task fields

    Returns:
        True if the email went out, False otherwise
    """
    if not recipient:
        logger.error("Digest skipped: DIGEST_RECIPIENT is not set")
        return False

    try:
        with session_factory() as session:
            tasks = store.list_open_tasks(session)
            content = compose_digest(tasks, app_url, escape=escape)
    except Exception:
        logger.exception("Digest failed while loading open tasks")
        return False

    if not delivery.send_digest(recipient, content):
        logger.error("Digest with %d open tasks was not delivered", len(tasks))
        return False

    logger.info("Digest with %d open tasks sent at %s", len(tasks), datetime.now().isoformat(timespec="seconds"))
    return True


def build_digest_job() -> Callable[[], bool]:
    """Wire run_digest_job to the shared engine and environment settings."""
    return partial(
        run_digest_job,
        database.session_factory,
        DigestDelivery(),
        recipient=os.getenv("DIGEST_RECIPIENT", ""),
        app_url=os.getenv("APP_URL", "http://localhost:3000"),
        escape=os.getenv("DIGEST_ESCAPE_HTML", "false").lower() == "true",
    )


def next_run_at(now: datetime, at: time) -> datetime:
    """Next wall-clock occurrence of `at` strictly after now, in now's timezone."""
    target = now.replace(hour=at.hour, minute=at.minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return target


def _seconds_between(start: datetime, end: datetime) -> float:
    # Subtract in UTC; wall-clock differences are an hour off across a DST change.
    # Naive values are read as system local time.
    return (end.astimezone(timezone.utc) - start.astimezone(timezone.utc)).total_seconds()


def seconds_until_next_run(now: datetime, at: time) -> float:
    """Real seconds from now until the next local occurrence of `at`."""
    return _seconds_between(now, next_run_at(now, at))


async def run_digest_scheduler(
    job: Callable[[], bool],
    *,
    at: time = DEFAULT_RUN_AT,
    clock: Callable[[], datetime] = datetime.now,
) -> None:
    """
    Run `job` once a day at local time `at`, forever.

    The blocking job runs in a worker thread so the event loop keeps serving
    requests. A day that already had its run is never fired again, even if
    the job returns before the clock has passed `at`. To stop the scheduler,
    cancel the coroutine/task.
    """
    last_run_day = None

    while True:
        now = clock()
        target = next_run_at(now, at)
        if target.date() == last_run_day:
            target = next_run_at(target, at)

        delay = _seconds_between(now, target)
        logger.info("Next digest in %.0f seconds (%s)", delay, target.isoformat(timespec="minutes"))
        await asyncio.sleep(delay)

        try:
            await asyncio.to_thread(job)
        except Exception:
            logger.exception("Digest job crashed")
        last_run_day = target.date()
