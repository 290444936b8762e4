"""
Standalone digest runner.

Sends the digest once right away, then keeps firing daily:

    python -m digest            # send now, then every day at DIGEST_TIME
    python -m digest --once     # send now and exit
"""

import argparse
import asyncio
import os
import sys

from digest.scheduler import build_digest_job, parse_run_at, run_digest_scheduler


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="tasks-digest", description="Daily open-task digest")
    parser.add_argument("--once", action="store_true", help="send one digest and exit")
    parser.add_argument(
        "--at",
        default=os.getenv("DIGEST_TIME", "08:30"),
        help="daily send time as HH:MM, local time (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    try:
        run_at = parse_run_at(args.at)
    except ValueError as exc:
        parser.error(str(exc))

    job = build_digest_job()
    sent = job()
    if args.once:
        return 0 if sent else 1

    try:
        asyncio.run(run_digest_scheduler(job, at=run_at))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
