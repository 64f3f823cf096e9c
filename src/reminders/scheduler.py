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
Trigger Scheduler Module

Turns registered reminders into one-shot timers bound to absolute instants.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Iterable

import discord

from .delivery import ReminderDelivery
from .models import TimeSlotEntry
from .registry import ReminderRegistry

logger = logging.getLogger("reminderbot.reminders.scheduler")

SleepUntil = Callable[[datetime], Awaitable[object]]


class TriggerScheduler:
    """
    Creates one asyncio task per reminder that sleeps until the fire instant.

    Timers wait for an absolute wall-clock instant rather than a delay
    computed at registration, so entries added late still fire on time.
    """

    def __init__(
        self,
        registry: ReminderRegistry,
        delivery: ReminderDelivery,
        sleep_until: SleepUntil = discord.utils.sleep_until,
    ):
        """
        Initialize the scheduler.

        Args:
            registry: Reminder registry for the current day
            delivery: Shared send path
            sleep_until: Coroutine function that waits for an aware datetime
        """
        self.registry = registry
        self.delivery = delivery
        self._sleep_until = sleep_until

    def schedule_all(self, entries: Iterable[TimeSlotEntry], lead_minutes: int) -> int:
        """
        Register and arm a timer for every entry, in order.

        Args:
            entries: Today's entries in timetable order
            lead_minutes: Minutes before the entry start to fire

        Returns:
            Number of reminders scheduled
        """
        scheduled = 0
        for entry in entries:
            try:
                if self.schedule(entry, lead_minutes):
                    scheduled += 1
            except Exception as e:
                logger.error(
                    f"Failed to schedule reminder for {entry.description}: {e}",
                    exc_info=True,
                )
        return scheduled

    def schedule(self, entry: TimeSlotEntry, lead_minutes: int) -> bool:
        fire_at = entry.start - timedelta(minutes=lead_minutes)
        fingerprint = self.registry.register(entry, fire_at)
        if fingerprint is None:
            return False

        timer = asyncio.create_task(
            self._run_timer(fingerprint, entry, fire_at),
            name=f"reminder:{fingerprint}",
        )
        self.registry.attach_timer(fingerprint, timer)

        logger.info(
            f'Scheduled reminder for "{entry.description}" at {fire_at.strftime("%I:%M %p").lstrip("0")}'
        )
        return True

    def stop_all(self, keep_sent: bool = False) -> None:
        self.registry.clear(keep_sent=keep_sent)

    async def _run_timer(
        self, fingerprint: str, entry: TimeSlotEntry, fire_at: datetime
    ) -> None:
        timer = asyncio.current_task()
        try:
            await self._sleep_until(fire_at)
            await self.delivery.deliver(fingerprint, entry, fire_at, origin="timer")
        finally:
            self.registry.release_timer(fingerprint, timer)
