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
Reminder Engine Module

Wires the registry, trigger scheduler, sweep and daily rollover together
and exposes the status surface used by operators.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

import discord

from .config import ReminderConfig
from .delivery import ReminderDelivery
from .formatter import Categorizer, categorize_activity
from .interfaces import EntrySource, SendResult, Transport
from .models import TimeSlotEntry
from .registry import ReminderRegistry
from .rollover import DailyRollover
from .scheduler import SleepUntil, TriggerScheduler
from .sweep import SweepFallback

logger = logging.getLogger("reminderbot.reminders.engine")


class ReminderEngine:
    """
    Time-triggered reminders for today's timetable.

    Each instance owns its own registry; nothing is shared at module level.
    """

    def __init__(
        self,
        source: EntrySource,
        transport: Transport,
        config: ReminderConfig,
        clock: Optional[Callable[[], datetime]] = None,
        sleep_until: SleepUntil = discord.utils.sleep_until,
        categorize: Categorizer = categorize_activity,
    ):
        """
        Initialize the engine.

        Args:
            source: Provides today's timetable entries
            transport: Delivers message text to the recipient
            config: Reminder configuration
            clock: Returns the current aware time (defaults to now in config.timezone)
            sleep_until: Waits until an aware datetime (injectable for tests)
            categorize: Activity classifier used by message templates
        """
        self.source = source
        self.transport = transport
        self.config = config
        self.tz = config.tz
        self._clock = clock or (lambda: datetime.now(self.tz))
        self._running = False

        self.registry = ReminderRegistry(self._clock)
        self.delivery = ReminderDelivery(
            self.registry,
            transport,
            recipient=config.recipient,
            lead_minutes=config.minutes_before,
            template=config.message_template,
            categorize=categorize,
        )
        self.scheduler = TriggerScheduler(self.registry, self.delivery, sleep_until)
        self.rollover = DailyRollover(
            source,
            self.registry,
            self.scheduler,
            lead_minutes=config.minutes_before,
            tz=self.tz,
            clock=self._clock,
            sleep_until=sleep_until,
        )
        self.sweep = SweepFallback(
            source,
            self.registry,
            self.delivery,
            lead_minutes=config.minutes_before,
            clock=self._clock,
            rollover=self.rollover,
            interval_seconds=config.sweep_interval_seconds,
        )

    async def start(self) -> None:
        """
        Load today's schedule and start the background loops.

        Raises whatever the entry source raises while loading; the engine is
        not marked running in that case.
        """
        if self._running:
            logger.warning("Reminder engine is already running")
            return

        logger.info("Starting reminder engine")
        if not self.transport.is_connected():
            await self.transport.initialize()

        await self.rollover.roll_over(force=True)
        self.rollover.start()
        self.sweep.start()

        self._running = True
        logger.info(
            f"Reminder engine started ({self.registry.count()} reminder(s), "
            f"lead {self.config.minutes_before} min, tz {self.config.timezone})"
        )

    async def stop(self) -> None:
        """
        Stop the loops and cancel every pending timer.

        Reminders already sent today stay recorded, so starting again on the
        same date does not repeat them.
        """
        if not self._running:
            logger.warning("Reminder engine is not running")
            return

        logger.info("Stopping reminder engine")
        self.sweep.stop()
        self.rollover.stop()
        self.scheduler.stop_all(keep_sent=True)
        self._running = False
        logger.info("Reminder engine stopped")

    async def reload(self) -> bool:
        """Force a reload of today's schedule."""
        return await self.rollover.roll_over(force=True)

    async def sweep_once(self) -> int:
        return await self.sweep.sweep_once()

    async def test_reminder(self, entry: TimeSlotEntry) -> SendResult:
        """Send a reminder for entry right now, bypassing scheduling."""
        result = await self.delivery.send_now(entry)
        if result.success:
            logger.info(f"Test reminder sent for: {entry.description}")
        else:
            logger.warning(f"Test reminder failed: {result.error}")
        return result

    def reminders_scheduled_count(self) -> int:
        return self.registry.count()

    def list_scheduled_reminders(self) -> list[dict]:
        return [reminder.to_dict() for reminder in self.registry.list()]

    def is_running(self) -> bool:
        return self._running

    def status(self) -> dict:
        last_sweep = self.sweep.last_sweep_at
        last_rollover = self.rollover.last_rollover_date
        return {
            "running": self._running,
            "scheduled": self.registry.count(),
            "sent": sum(1 for r in self.registry.list() if r.sent),
            "last_sweep_at": last_sweep.isoformat() if last_sweep else None,
            "last_rollover_date": last_rollover.isoformat() if last_rollover else None,
        }
