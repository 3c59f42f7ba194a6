"""Tests for crontab scheduling."""

import pytest
from crontab import CronTab

from gmail_reply_tracker.constants import CRON_COMMENT
from gmail_reply_tracker.scheduler import (
    install_schedule,
    is_supported_interval,
    list_schedule,
    remove_schedule,
    tracker_command,
)


def test_install_every_30_minutes():
    cron = CronTab(tab="")
    job = install_schedule(cron, command="/usr/bin/gmail-reply-tracker run")

    assert str(job.slices) == "*/30 * * * *"
    assert job.command == "/usr/bin/gmail-reply-tracker run"
    assert job.comment == CRON_COMMENT


def test_install_replaces_previous_entry():
    cron = CronTab(tab="")
    install_schedule(cron, command="tracker run", interval_minutes=15)
    install_schedule(cron, command="tracker run", interval_minutes=30)

    jobs = list_schedule(cron)
    assert len(jobs) == 1
    assert str(jobs[0].slices) == "*/30 * * * *"


def test_install_leaves_other_jobs():
    cron = CronTab(tab="")
    cron.new(command="backup.sh", comment="backup")
    install_schedule(cron, command="tracker run")

    assert len(list(cron.find_comment("backup"))) == 1
    assert len(list_schedule(cron)) == 1


def test_install_hourly_intervals():
    cron = CronTab(tab="")
    job = install_schedule(cron, command="tracker run", interval_minutes=120)
    assert str(job.slices) == "0 */2 * * *"


@pytest.mark.parametrize("minutes", [0, -5, 45, 90, 300, 1440])
def test_install_rejects_uneven_interval(minutes):
    cron = CronTab(tab="")
    with pytest.raises(ValueError):
        install_schedule(cron, command="tracker run", interval_minutes=minutes)
    assert list_schedule(cron) == []


def test_supported_intervals():
    assert [m for m in (1, 5, 15, 20, 30, 45, 60, 90, 120, 180, 360, 720) if is_supported_interval(m)] == [
        1, 5, 15, 20, 30, 60, 120, 180, 360, 720,
    ]


def test_install_hourly():
    job = install_schedule(CronTab(tab=""), command="tracker run", interval_minutes=60)
    assert str(job.slices) == "0 * * * *"


def test_remove():
    cron = CronTab(tab="")
    install_schedule(cron, command="tracker run")

    assert remove_schedule(cron) == 1
    assert list_schedule(cron) == []
    assert remove_schedule(cron) == 0


def test_tracker_command_runs_once():
    assert tracker_command().endswith(" run")
