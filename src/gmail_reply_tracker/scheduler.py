"""Periodic runs through the user's crontab."""

from __future__ import annotations

import shutil
import sys

from crontab import CronItem, CronTab

from .constants import CRON_COMMENT, SCHEDULE_INTERVAL_MINUTES


def tracker_command() -> str:
    """Shell command cron should run for one tracker pass."""
    script = shutil.which("gmail-reply-tracker")
    if script:
        return f"{script} run"
    return f"{sys.executable} -m gmail_reply_tracker.cli run"


def install_schedule(
    cron: CronTab,
    command: str | None = None,
    interval_minutes: int = SCHEDULE_INTERVAL_MINUTES,
) -> CronItem:
    """Replace any tracker entry in cron with one running every interval_minutes.

    Only intervals cron steps repeat evenly are accepted: divisors of 60
    minutes, or whole hours below 24 that divide 24. The caller writes the crontab.
    """
    if not is_supported_interval(interval_minutes):
        raise ValueError(
            f"Cannot schedule every {interval_minutes} minutes: use a divisor of 60 "
            "or a whole number of hours below 24 that divides 24"
        )

    cron.remove_all(comment=CRON_COMMENT)

    job = cron.new(command=command or tracker_command(), comment=CRON_COMMENT)
    if interval_minutes < 60:
        job.minute.every(interval_minutes)
    else:
        job.minute.on(0)
        job.hour.every(interval_minutes // 60)
    return job


def is_supported_interval(interval_minutes: int) -> bool:
    if interval_minutes <= 0:
        return False
    if interval_minutes <= 60:
        return 60 % interval_minutes == 0
    hours, rest = divmod(interval_minutes, 60)
    return rest == 0 and hours < 24 and 24 % hours == 0


def remove_schedule(cron: CronTab) -> int:
    """Remove every tracker entry from cron and return how many there were."""
    count = len(list_schedule(cron))
    cron.remove_all(comment=CRON_COMMENT)
    return count


def list_schedule(cron: CronTab) -> list[CronItem]:
    return list(cron.find_comment(CRON_COMMENT))
