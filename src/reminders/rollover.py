# reminderbot - Timetable Reminder Service
# Copyright (c) 2025-2026 Slash Daemon slashdaemon@protonmail.com
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, version 3 of the License.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Commercial licensing: [slashdaemon@protonmail.com]

"""
Daily Rollover Module

Discards the previous day's reminders at local midnight and reloads today's
entries from the entry source.
"""

import asyncio
import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

import pytz

from analytics import track

from .interfaces import EntrySource
from .registry import ReminderRegistry
from .scheduler import SleepUntil, TriggerScheduler

logger = logging.getLogger("reminderbot.reminders.rollover")


def next_local_midnight(now: datetime, tz: pytz.BaseTzInfo) -> datetime:
    """
    Calculate the next local midnight after now.

    Args:
        now: Current time (timezone-aware)
        tz: Deployment timezone

    Returns:
        Aware datetime for 00:00 of the following local day
    """
    local_now = now.astimezone(tz)
    tomorrow = local_now.date() + timedelta(days=1)
    return tz.localize(datetime.combine(tomorrow, time(0, 0)))


class DailyRollover:
    """Reloads the registry once per local day."""

    def __init__(
        self,
        source: EntrySource,
        registry: ReminderRegistry,
        scheduler: TriggerScheduler,
        lead_minutes: int,
        tz: pytz.BaseTzInfo,
        clock: Callable[[], datetime],
        sleep_until: SleepUntil,
    ):
        self.source = source
        self.registry = registry
        self.scheduler = scheduler
        self.lead_minutes = lead_minutes
        self.tz = tz
        self._clock = clock
        self._sleep_until = sleep_until
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None
        self.last_rollover_date: Optional[date] = None

    def _today(self) -> date:
        return self._clock().astimezone(self.tz).date()

    async def roll_over(self, force: bool = False) -> bool:
        """
        Clear the registry and schedule today's entries.

        Runs at most once per local date unless forced. Entries are fetched
        before anything is cleared, so a failed load leaves the current
        schedule and the date stamp untouched and the next attempt retries.
        A forced reload on the same date keeps the reminders already sent.

        Returns:
            True if a rollover happened
        """
        async with self._lock:
            today = self._today()
            if not force and self.last_rollover_date == today:
                return False

            logger.info(f"Loading schedule for {today.isoformat()}")
            entries = await self.source.todays_entries()
            self.scheduler.stop_all(keep_sent=self.last_rollover_date == today)
            scheduled = self.scheduler.schedule_all(entries, self.lead_minutes)
            self.last_rollover_date = today

            logger.info(
                f"Scheduled {scheduled} of {len(entries)} reminder(s) for today"
            )
            track(
                "reminders_loaded",
                properties={
                    "date": today.isoformat(),
                    "entries": len(entries),
                    "scheduled": scheduled,
                },
            )
            return True

    def start(self) -> None:
        """Start waiting for local midnight."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run(), name="reminder-rollover")

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self) -> None:
        while True:
            midnight = next_local_midnight(self._clock(), self.tz)
            logger.debug(f"Next rollover at {midnight.isoformat()}")
            await self._sleep_until(midnight)
            try:
                await self.roll_over()
            except Exception as e:
                logger.error(f"Error loading new day schedule: {e}", exc_info=True)
                track(
                    "rollover_error",
                    properties={
                        "error_type": type(e).__name__,
                        "error_message": str(e)[:200],
                    },
                )
